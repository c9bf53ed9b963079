"""
Aggregate Service.
Read-only views over the whole drug collection: companies, statistics and table configuration.
"""
import asyncio
from typing import List
from fastapi.concurrency import run_in_threadpool
from src.core.timeutils import to_iso
from src.models.dto.drug_dto import Statistics
from src.models.dto.table_config_dto import DEFAULT_TABLE_CONFIGURATION, TableConfiguration
from src.repositories.db_repository import DrugRepository
from src.repositories.dynamo_repository import DynamoRepository


class AggregateService:
    """Service for collection-wide drug figures."""

    def __init__(self, drug_repository: DrugRepository = None):
        self.drug_repository = drug_repository or DynamoRepository()

    async def list_companies(self) -> List[str]:
        """
        Retrieve unique company names, sorted ascending.

        Raises:
            DrugStoreException: If the store query fails
        """
        companies = await run_in_threadpool(self.drug_repository.distinct_companies)
        return sorted(companies)

    async def get_statistics(self) -> Statistics:
        """
        Compute collection statistics.

        The count, the distinct companies and both launch date bounds are
        fetched concurrently.

        Returns:
            Statistics; the average is 0 and the launch dates are None for an
            empty collection

        Raises:
            DrugStoreException: If any store query fails
        """
        total_drugs, companies, oldest, newest = await asyncio.gather(
            run_in_threadpool(self.drug_repository.count),
            run_in_threadpool(self.drug_repository.distinct_companies),
            run_in_threadpool(self.drug_repository.find_launch_date_bound, True),
            run_in_threadpool(self.drug_repository.find_launch_date_bound, False)
        )

        total_companies = len(companies)
        average = total_drugs / total_companies if total_companies > 0 else 0

        return Statistics(
            total_drugs=total_drugs,
            total_companies=total_companies,
            average_drugs_per_company=average,
            oldest_drug=to_iso(oldest) if oldest else None,
            newest_drug=to_iso(newest) if newest else None
        )

    def get_table_configuration(self) -> TableConfiguration:
        """Static description of the drug table for the frontend."""
        return DEFAULT_TABLE_CONFIGURATION
