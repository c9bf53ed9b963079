"""
Query parameter validation for the drug listing.
Turns raw string query parameters into a typed DrugQuery or a list of field errors.
"""
from typing import Any, Dict, List, Mapping, Optional
from pydantic import ValidationError
from src.models.dto.drug_dto import DrugQuery


class QueryParseResult:
    """Tagged outcome of parsing: either ``query`` or ``errors`` is set."""

    def __init__(self, query: Optional[DrugQuery] = None, errors: Optional[List[Dict[str, Any]]] = None):
        self.query = query
        self.errors = errors or []

    @property
    def ok(self) -> bool:
        return self.query is not None

    def __repr__(self):
        if self.ok:
            return f"QueryParseResult(ok, query={self.query!r})"
        return f"QueryParseResult(failed, errors={self.errors!r})"


def parse_drug_query(raw: Mapping[str, str]) -> QueryParseResult:
    """
    Validate raw listing parameters.

    Args:
        raw: Query parameters keyed by their public (camelCase) names

    Returns:
        QueryParseResult holding the validated query, or one error per
        offending field with ``field``, ``message`` and ``type`` keys
    """
    try:
        return QueryParseResult(query=DrugQuery.model_validate(dict(raw)))
    except ValidationError as e:
        errors = [
            {
                'field': '.'.join(str(part) for part in error['loc']),
                'message': error['msg'],
                'type': error['type']
            }
            for error in e.errors()
        ]
        return QueryParseResult(errors=errors)
