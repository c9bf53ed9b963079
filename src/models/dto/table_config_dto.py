"""
Table configuration served to the frontend.
Static description of the drug table: columns, default sort, page sizes and filters.
"""
from typing import List, Literal, Optional
from pydantic import Field
from src.models.dto.drug_dto import CamelModel


class TableColumn(CamelModel):
    key: str
    label: str
    sortable: bool
    filterable: bool
    visible: bool
    width: Optional[int] = None
    type: Literal["string", "date", "number"]
    format: Optional[str] = None


class DefaultSort(CamelModel):
    column: str
    direction: Literal["asc", "desc"]


class PaginationConfig(CamelModel):
    default_page_size: int
    page_size_options: List[int]


class CompanyFilterConfig(CamelModel):
    type: Literal["dropdown"] = "dropdown"
    multiple: bool = False


class FiltersConfig(CamelModel):
    company: CompanyFilterConfig = Field(default_factory=CompanyFilterConfig)


class TableConfiguration(CamelModel):
    columns: List[TableColumn]
    default_sort: DefaultSort
    pagination: PaginationConfig
    filters: FiltersConfig


class TableConfigurationResponse(CamelModel):
    success: bool = True
    data: TableConfiguration
    timestamp: str


DEFAULT_TABLE_CONFIGURATION = TableConfiguration(
    columns=[
        TableColumn(key="id", label="ID", sortable=False, filterable=False, visible=True, width=80, type="number"),
        TableColumn(key="code", label="Code", sortable=True, filterable=True, visible=True, width=120, type="string"),
        TableColumn(key="name", label="Name", sortable=True, filterable=True, visible=True, width=300, type="string"),
        TableColumn(key="company", label="Company", sortable=True, filterable=True, visible=True, width=250, type="string"),
        TableColumn(
            key="launchDate",
            label="Launch Date",
            sortable=True,
            filterable=True,
            visible=True,
            width=150,
            type="date",
            format="dd.MM.yyyy"
        ),
    ],
    default_sort=DefaultSort(column="launchDate", direction="desc"),
    pagination=PaginationConfig(default_page_size=20, page_size_options=[10, 20, 50, 100]),
    filters=FiltersConfig(company=CompanyFilterConfig(type="dropdown", multiple=False))
)
