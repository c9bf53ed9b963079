"""
Drug API routes.
Handles HTTP endpoints for drug listings, companies, statistics and table configuration.
"""
from fastapi import APIRouter, Depends
from src.core.dependencies import get_aggregate_service, get_drug_query, get_drug_service
from src.core.timeutils import iso_timestamp
from src.models.dto.drug_dto import CompanyListResponse, DrugListResponse, DrugQuery, StatisticsResponse
from src.models.dto.table_config_dto import TableConfigurationResponse
from src.services.aggregate_service import AggregateService
from src.services.drug_service import DrugService

router = APIRouter(prefix="/api")


@router.get("/drugs", tags=["Drugs"], response_model=DrugListResponse)
async def get_drugs(
    query: DrugQuery = Depends(get_drug_query),
    drug_service: DrugService = Depends(get_drug_service)
):
    """
    Retrieve drugs with filtering, sorting and pagination.

    - **page**: Page number (default 1)
    - **limit**: Items per page (default 20, max 100)
    - **company**: Exact company name
    - **sortBy**: code, name, company or launchDate (default launchDate)
    - **sortOrder**: asc or desc (default desc)
    - **search**: Case-insensitive match on generic name, brand name, company or code
    """
    return await drug_service.list_drugs(query)


@router.get(
    "/table-config",
    tags=["Configuration"],
    response_model=TableConfigurationResponse,
    response_model_exclude_none=True
)
async def get_table_configuration(
    aggregate_service: AggregateService = Depends(get_aggregate_service)
):
    """Table configuration for the frontend: columns, default sort, page sizes and filters."""
    return TableConfigurationResponse(
        data=aggregate_service.get_table_configuration(),
        timestamp=iso_timestamp()
    )


@router.get("/companies", tags=["Drugs"], response_model=CompanyListResponse)
async def get_companies(
    aggregate_service: AggregateService = Depends(get_aggregate_service)
):
    """List all unique companies for the filter dropdown."""
    companies = await aggregate_service.list_companies()
    return CompanyListResponse(data=companies, timestamp=iso_timestamp())


@router.get("/statistics", tags=["Drugs"], response_model=StatisticsResponse)
async def get_statistics(
    aggregate_service: AggregateService = Depends(get_aggregate_service)
):
    """Collection statistics: totals, average drugs per company, oldest and newest launch."""
    statistics = await aggregate_service.get_statistics()
    return StatisticsResponse(data=statistics, timestamp=iso_timestamp())
