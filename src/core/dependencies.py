"""
Dependency injection container for FastAPI.
Provides singleton-like behavior for services and repositories.
"""
from functools import lru_cache
from typing import Optional
from fastapi import Query
from src.core.exceptions import ValidationException
from src.models.dto.drug_dto import DrugQuery
from src.repositories.db_repository import DrugRepository
from src.repositories.dynamo_repository import DynamoRepository
from src.services.aggregate_service import AggregateService
from src.services.drug_service import DrugService
from src.services.query_validator import parse_drug_query


@lru_cache()
def get_drug_repository() -> DrugRepository:
    """Get DrugRepository singleton instance."""
    return DynamoRepository()


@lru_cache()
def get_drug_service() -> DrugService:
    """Get DrugService singleton instance with injected repository."""
    return DrugService(drug_repository=get_drug_repository())


@lru_cache()
def get_aggregate_service() -> AggregateService:
    """Get AggregateService singleton instance with injected repository."""
    return AggregateService(drug_repository=get_drug_repository())


def get_drug_query(
    page: Optional[str] = Query(None, description="Page number, 1-based (default 1)"),
    limit: Optional[str] = Query(None, description="Items per page, 1 to 100 (default 20)"),
    company: Optional[str] = Query(None, description="Exact company name; empty means no filter"),
    sort_by: Optional[str] = Query(
        None, alias="sortBy", description="One of code, name, company, launchDate (default launchDate)"
    ),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc (default desc)"),
    search: Optional[str] = Query(
        None, description="Case-insensitive text matched against name, brand, company and code"
    ),
) -> DrugQuery:
    """
    Parse and validate the listing query string.

    Parameters arrive as raw strings so that malformed values reach the
    validator and come back as the uniform 400 body.

    Raises:
        ValidationException: With one detail entry per offending parameter
    """
    raw = {
        "page": page,
        "limit": limit,
        "company": company,
        "sortBy": sort_by,
        "sortOrder": sort_order,
        "search": search,
    }
    result = parse_drug_query({name: value for name, value in raw.items() if value is not None})
    if not result.ok:
        raise ValidationException("Invalid query parameters", details=result.errors)
    return result.query
