"""
Abstract base class for database repositories.
Defines the contract for drug data storage operations.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.models.drug_model import Drug, DrugFilter, DrugSort


class DrugRepository(ABC):
    """Abstract repository interface for drug data operations."""

    @abstractmethod
    def find(self, drug_filter: DrugFilter, sort: DrugSort, skip: int = 0, limit: int = 20) -> List[Drug]:
        """Return at most ``limit`` matching drugs in sort order, after skipping ``skip``."""
        pass

    @abstractmethod
    def count(self, drug_filter: Optional[DrugFilter] = None) -> int:
        """Count drugs matching the filter (all drugs when omitted)."""
        pass

    @abstractmethod
    def distinct_companies(self) -> List[str]:
        """Return the unique company names, in no particular order."""
        pass

    @abstractmethod
    def find_launch_date_bound(self, oldest: bool = True) -> Optional[datetime]:
        """Return the earliest (or latest) launch date, or None when empty."""
        pass

    @abstractmethod
    def save(self, drug: Drug) -> None:
        """Insert a single drug; fails if its code already exists."""
        pass

    @abstractmethod
    def batch_save(self, drugs: List[Drug]) -> None:
        """Upsert multiple drugs in batches."""
        pass
