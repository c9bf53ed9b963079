"""
Domain model for Drug entity.
Database-agnostic representation of drug data.
"""
from datetime import datetime
from typing import Optional


class Drug:
    """Domain model representing a drug in the inventory."""

    def __init__(
        self,
        code: str,
        generic_name: str,
        brand_name: str,
        company: str,
        launch_date: datetime,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.code = code
        self.generic_name = generic_name
        self.brand_name = brand_name
        self.company = company
        self.launch_date = launch_date
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def display_name(self) -> str:
        """Generic name followed by the brand name in parentheses."""
        return f"{self.generic_name} ({self.brand_name})"

    def __repr__(self):
        return f"Drug(code={self.code}, generic_name={self.generic_name}, company={self.company})"


class DrugFilter:
    """Store-level predicate: exact company match and/or free-text search."""

    def __init__(self, company: Optional[str] = None, search: Optional[str] = None):
        # Empty strings mean "no constraint".
        self.company = company or None
        self.search = search or None

    def __repr__(self):
        return f"DrugFilter(company={self.company!r}, search={self.search!r})"


class DrugSort:
    """Sort on a store field, ties broken by drug code ascending."""

    def __init__(self, field: str, descending: bool = False):
        self.field = field
        self.descending = descending

    def __repr__(self):
        return f"DrugSort(field={self.field}, descending={self.descending})"
