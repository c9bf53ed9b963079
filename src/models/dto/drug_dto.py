"""
Data Transfer Objects for Drug API.
Defines request and response schemas for API endpoints.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that serializes snake_case attributes as camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


SortField = Literal["code", "name", "company", "launchDate"]
SortOrder = Literal["asc", "desc"]

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100


class DrugQuery(CamelModel):
    """Validated query parameters for the drug listing."""
    # Query strings are matched by their public camelCase names only.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=False)

    page: int = Field(default=1, gt=0, description="Page number (1-based)")
    limit: int = Field(default=DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT, description="Items per page")
    company: Optional[str] = Field(default=None, description="Exact company filter")
    sort_by: SortField = Field(default="launchDate", description="Column to sort by")
    sort_order: SortOrder = Field(default="desc", description="Sort direction")
    search: Optional[str] = Field(default=None, description="Case-insensitive text search")


class DrugResponse(CamelModel):
    """Response schema for a single drug row."""
    id: int = Field(..., description="Rank within the current result set; not stable across requests")
    code: str
    name: str
    company: str
    launch_date: str


class Pagination(CamelModel):
    """Pagination metadata for a listing page."""
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_previous_page: bool


class DrugListResponse(CamelModel):
    """Response schema for a page of drugs."""
    success: bool = True
    data: List[DrugResponse]
    pagination: Pagination
    timestamp: Optional[str] = None


class Statistics(CamelModel):
    """Aggregate figures over the whole collection."""
    total_drugs: int
    total_companies: int
    average_drugs_per_company: float
    oldest_drug: Optional[str] = None
    newest_drug: Optional[str] = None


class StatisticsResponse(CamelModel):
    success: bool = True
    data: Statistics
    timestamp: str


class CompanyListResponse(CamelModel):
    success: bool = True
    data: List[str]
    timestamp: str


class ErrorResponse(CamelModel):
    """Uniform error body returned by every exception handler."""
    error: str
    message: str
    status_code: int
    timestamp: str
    details: Optional[list] = None
