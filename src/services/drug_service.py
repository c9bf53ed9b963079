"""
Drug Service for business logic.
Builds store filters, sorting and pagination for drug listings and maps results to DTOs.
"""
import asyncio
import logging
import math
from typing import List
from fastapi.concurrency import run_in_threadpool
from src.core.timeutils import iso_timestamp, to_iso
from src.models.drug_model import Drug, DrugFilter, DrugSort
from src.models.dto.drug_dto import MAX_PAGE_LIMIT, DrugListResponse, DrugQuery, DrugResponse, Pagination
from src.repositories.db_repository import DrugRepository
from src.repositories.dynamo_repository import DynamoRepository

logger = logging.getLogger(__name__)

# Public sort keys mapped to store fields.
SORT_FIELDS = {
    'code': 'code',
    'name': 'generic_name',
    'company': 'company',
    'launchDate': 'launch_date',
}


class DrugService:
    """Service for drug listing operations."""

    def __init__(self, drug_repository: DrugRepository = None):
        self.drug_repository = drug_repository or DynamoRepository()

    async def list_drugs(self, query: DrugQuery) -> DrugListResponse:
        """
        Retrieve one page of drugs with filtering and sorting.

        Page and limit are clamped again here so callers that bypass the
        query validator still get a well-formed request to the store.

        Args:
            query: Validated listing parameters

        Returns:
            DrugListResponse with the page of drugs and pagination metadata

        Raises:
            DrugStoreException: If the store query fails
        """
        page = max(1, query.page)
        limit = min(MAX_PAGE_LIMIT, max(1, query.limit))
        skip = (page - 1) * limit

        drug_filter = DrugFilter(company=query.company, search=query.search)
        sort = DrugSort(
            field=SORT_FIELDS.get(query.sort_by, 'launch_date'),
            descending=query.sort_order != 'asc'
        )

        drugs, total_items = await asyncio.gather(
            run_in_threadpool(self.drug_repository.find, drug_filter, sort, skip, limit),
            run_in_threadpool(self.drug_repository.count, drug_filter)
        )
        logger.debug("Listed %d of %d drugs (page=%d, limit=%d)", len(drugs), total_items, page, limit)

        total_pages = math.ceil(total_items / limit)

        return DrugListResponse(
            data=self._to_responses(drugs, skip),
            pagination=Pagination(
                current_page=page,
                total_pages=total_pages,
                total_items=total_items,
                items_per_page=limit,
                has_next_page=page < total_pages,
                has_previous_page=page > 1
            ),
            timestamp=iso_timestamp()
        )

    def _to_responses(self, drugs: List[Drug], skip: int) -> List[DrugResponse]:
        # ids are ranks in the filtered, sorted result set, not store keys
        return [
            DrugResponse(
                id=skip + index + 1,
                code=drug.code,
                name=drug.display_name,
                company=drug.company,
                launch_date=to_iso(drug.launch_date)
            )
            for index, drug in enumerate(drugs)
        ]
