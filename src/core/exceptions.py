"""
Custom exceptions for the Drug Inventory API.
Provides specific error types for different failure scenarios.
"""
from typing import Any, Dict, List, Optional


class DrugInventoryException(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationException(DrugInventoryException):
    """Raised when request parameters fail validation."""
    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.details = details or []


class DuplicateDrugCodeException(DrugInventoryException):
    """Raised when a drug code already exists in the store."""
    pass


class DrugStoreException(DrugInventoryException):
    """Raised when a DynamoDB operation fails."""
    pass
