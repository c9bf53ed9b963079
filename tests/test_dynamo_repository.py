"""
Unit tests for DynamoRepository.
Uses moto to mock AWS DynamoDB service.
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from unittest.mock import Mock, patch
import pytest
from botocore.exceptions import ClientError
from src.core.exceptions import DrugStoreException, DuplicateDrugCodeException, ValidationException
from src.models.drug_model import DrugFilter, DrugSort
from src.repositories.dynamo_repository import DynamoRepository
from src.services.aggregate_service import AggregateService


class TestDynamoRepository:
    """Test suite for DynamoRepository."""

    def test_batch_save_writes_search_attributes(self, drugs_table, seed_drugs):
        """Test items carry the category and lower-cased search attributes."""
        repo = DynamoRepository(drugs_table.name)

        repo.batch_save(seed_drugs)

        item = drugs_table.get_item(Key={'code': 'TEST001'})['Item']
        assert item['drug_category'] == 'ALL'
        assert item['generic_name_lc'] == 'test drug alpha'
        assert item['company_lc'] == 'test pharma inc'
        assert item['code_lc'] == 'test001'
        assert item['launch_date'] == '2020-01-15T00:00:00.000Z'
        assert item['created_at']
        assert item['updated_at']

    def test_save_rejects_duplicate_code(self, drugs_table, drug_factory):
        repo = DynamoRepository(drugs_table.name)
        drug = drug_factory('DUP001', 'Generic', 'Brand', 'Company', '2021-01-01')
        repo.save(drug)

        with pytest.raises(DuplicateDrugCodeException):
            repo.save(drug_factory('DUP001', 'Other', 'Other', 'Other', '2022-01-01'))

        assert repo.count() == 1

    def test_batch_save_upserts_by_code(self, drugs_table, drug_factory):
        repo = DynamoRepository(drugs_table.name)

        repo.batch_save([
            drug_factory('UP001', 'First', 'Brand', 'Company', '2021-01-01'),
            drug_factory('UP001', 'Second', 'Brand', 'Company', '2021-01-01'),
        ])

        drugs = repo.find(DrugFilter(), DrugSort('code'))
        assert len(drugs) == 1
        assert drugs[0].generic_name == 'Second'

    def test_find_sorted_by_launch_date_desc(self, seeded_table):
        repo = DynamoRepository(seeded_table.name)

        drugs = repo.find(DrugFilter(), DrugSort('launch_date', descending=True))

        assert [drug.code for drug in drugs] == ['TEST004', 'TEST002', 'TEST005', 'TEST001', 'TEST003']

    def test_find_sorted_by_generic_name_asc(self, seeded_table):
        repo = DynamoRepository(seeded_table.name)

        drugs = repo.find(DrugFilter(), DrugSort('generic_name'))

        names = [drug.generic_name for drug in drugs]
        assert names == sorted(names)

    def test_find_ties_broken_by_code(self, seeded_table):
        """Test equal sort keys fall back to ascending code in both directions."""
        repo = DynamoRepository(seeded_table.name)

        ascending = repo.find(DrugFilter(), DrugSort('company'))
        descending = repo.find(DrugFilter(), DrugSort('company', descending=True))

        assert [drug.code for drug in ascending] == ['TEST003', 'TEST004', 'TEST005', 'TEST001', 'TEST002']
        assert [drug.code for drug in descending] == ['TEST001', 'TEST002', 'TEST005', 'TEST003', 'TEST004']

    def test_find_skip_and_limit(self, seeded_table):
        repo = DynamoRepository(seeded_table.name)

        drugs = repo.find(DrugFilter(), DrugSort('code'), skip=2, limit=2)

        assert [drug.code for drug in drugs] == ['TEST003', 'TEST004']

    def test_find_skip_past_end(self, seeded_table):
        repo = DynamoRepository(seeded_table.name)

        assert repo.find(DrugFilter(), DrugSort('code'), skip=10, limit=5) == []

    def test_find_by_company(self, seeded_table):
        repo = DynamoRepository(seeded_table.name)

        drugs = repo.find(DrugFilter(company='Mock Labs Ltd'), DrugSort('code'))

        assert [drug.code for drug in drugs] == ['TEST003', 'TEST004']
        assert repo.count(DrugFilter(company='Mock Labs Ltd')) == 2

    def test_company_filter_is_exact(self, seeded_table):
        repo = DynamoRepository(seeded_table.name)

        assert repo.count(DrugFilter(company='mock labs ltd')) == 0
        assert repo.count(DrugFilter(company='Mock Labs')) == 0

    @pytest.mark.parametrize("term,expected", [
        ('ALPHA', ['TEST001']),
        ('gamma brand', ['TEST003']),
        ('sample', ['TEST005']),
        ('test00', ['TEST001', 'TEST002', 'TEST003', 'TEST004', 'TEST005']),
        ('nothing-matches', []),
    ])
    def test_search_case_insensitive_across_fields(self, seeded_table, term, expected):
        repo = DynamoRepository(seeded_table.name)

        drugs = repo.find(DrugFilter(search=term), DrugSort('code'))

        assert [drug.code for drug in drugs] == expected
        assert repo.count(DrugFilter(search=term)) == len(expected)

    def test_search_combined_with_company(self, seeded_table):
        repo = DynamoRepository(seeded_table.name)

        drugs = repo.find(DrugFilter(company='Test Pharma Inc', search='beta'), DrugSort('code'))

        assert [drug.code for drug in drugs] == ['TEST002']

    def test_find_rejects_unknown_sort_field(self, seeded_table):
        repo = DynamoRepository(seeded_table.name)

        with pytest.raises(ValidationException):
            repo.find(DrugFilter(), DrugSort('brand_name'))

    def test_count_all(self, seeded_table):
        assert DynamoRepository(seeded_table.name).count() == 5

    def test_distinct_companies(self, seeded_table):
        companies = DynamoRepository(seeded_table.name).distinct_companies()

        assert sorted(companies) == ['Mock Labs Ltd', 'Sample Corp', 'Test Pharma Inc']

    def test_launch_date_bounds(self, seeded_table):
        repo = DynamoRepository(seeded_table.name)

        assert repo.find_launch_date_bound(oldest=True) == datetime(2019, 8, 10, tzinfo=timezone.utc)
        assert repo.find_launch_date_bound(oldest=False) == datetime(2022, 11, 5, tzinfo=timezone.utc)

    def test_empty_table(self, drugs_table):
        repo = DynamoRepository(drugs_table.name)

        assert repo.count() == 0
        assert repo.distinct_companies() == []
        assert repo.find_launch_date_bound(oldest=True) is None
        assert repo.find(DrugFilter(), DrugSort('launch_date')) == []

    def test_client_error_wrapped(self):
        """Test DynamoDB client errors surface as DrugStoreException."""
        table = Mock()
        table.query.side_effect = ClientError(
            {'Error': {'Code': 'ResourceNotFoundException', 'Message': 'Table not found'}},
            'Query'
        )
        repo = DynamoRepository('Drugs-missing')
        repo._local.table = table

        with pytest.raises(DrugStoreException):
            repo.find(DrugFilter(), DrugSort('code'))
        with pytest.raises(DrugStoreException):
            repo.count()
        with pytest.raises(DrugStoreException):
            repo.distinct_companies()
        with pytest.raises(DrugStoreException):
            repo.find_launch_date_bound()

    def test_table_handle_is_per_thread(self, drugs_table):
        """Test each thread gets its own table handle and reuses it."""
        repo = DynamoRepository(drugs_table.name)
        main_table = repo.table

        with ThreadPoolExecutor(max_workers=1) as executor:
            worker_tables = list(executor.map(lambda _: repo.table, range(2)))

        assert repo.table is main_table
        assert worker_tables[0] is worker_tables[1]
        assert worker_tables[0] is not main_table
        assert worker_tables[0].name == drugs_table.name

    @pytest.mark.asyncio
    async def test_statistics_threads_do_not_share_handles(self, seeded_table):
        """Test the concurrent statistics reads each run on a thread-owned handle."""
        repo = DynamoRepository(seeded_table.name)
        main_table = repo.table
        connect = repo._connect
        lock = threading.Lock()
        connections = []

        def tracking_connect():
            table = connect()
            with lock:
                connections.append((threading.get_ident(), table))
            return table

        with patch.object(repo, '_connect', side_effect=tracking_connect):
            statistics = await AggregateService(drug_repository=repo).get_statistics()

        assert statistics.total_drugs == 5
        assert statistics.total_companies == 3
        thread_ids = [ident for ident, _ in connections]
        assert connections
        assert threading.get_ident() not in thread_ids
        assert len(thread_ids) == len(set(thread_ids))
        tables = [table for _, table in connections]
        assert len({id(table) for table in tables}) == len(tables)
        assert all(table is not main_table for table in tables)
