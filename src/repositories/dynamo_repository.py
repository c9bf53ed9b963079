"""
DynamoDB Repository for drug data storage.
Handles filtered, sorted and paginated reads plus writes for drug data in DynamoDB.
"""
import logging
import threading
from typing import Any, Dict, Iterator, List, Optional
import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError
from src.core import config
from src.core.exceptions import DrugStoreException, DuplicateDrugCodeException, ValidationException
from src.core.timeutils import from_iso, to_iso, utcnow
from src.models.drug_model import Drug, DrugFilter, DrugSort
from src.repositories.db_repository import DrugRepository

logger = logging.getLogger(__name__)

CATEGORY_INDEX = 'DrugCategoryIndex'
COMPANY_INDEX = 'CompanyIndex'
GENERIC_NAME_INDEX = 'GenericNameIndex'

# Every item shares this partition value so the category index spans the whole table.
ALL_CATEGORY = 'ALL'

SORTABLE_FIELDS = ('code', 'generic_name', 'company', 'launch_date')

# Lower-cased copies of the searchable attributes.
SEARCH_ATTRIBUTES = {
    'generic_name': 'generic_name_lc',
    'brand_name': 'brand_name_lc',
    'company': 'company_lc',
    'code': 'code_lc',
}


def create_drugs_table(dynamodb=None, table_name: Optional[str] = None):
    """
    Create the drugs table with its secondary indexes.

    The table is keyed on ``code`` so the store itself keeps codes unique.
    ``CompanyIndex`` serves company-filtered listings ordered by launch date,
    ``DrugCategoryIndex`` the whole collection ordered by launch date and
    ``GenericNameIndex`` the whole collection ordered by generic name.
    """
    dynamodb = dynamodb or boto3.resource(
        'dynamodb',
        region_name=config.settings.aws_region,
        endpoint_url=config.settings.dynamodb_endpoint_url
    )
    table = dynamodb.create_table(
        TableName=table_name or config.settings.drugs_table_name,
        KeySchema=[{'AttributeName': 'code', 'KeyType': 'HASH'}],
        AttributeDefinitions=[
            {'AttributeName': 'code', 'AttributeType': 'S'},
            {'AttributeName': 'drug_category', 'AttributeType': 'S'},
            {'AttributeName': 'company', 'AttributeType': 'S'},
            {'AttributeName': 'generic_name', 'AttributeType': 'S'},
            {'AttributeName': 'launch_date', 'AttributeType': 'S'}
        ],
        GlobalSecondaryIndexes=[
            {
                'IndexName': CATEGORY_INDEX,
                'KeySchema': [
                    {'AttributeName': 'drug_category', 'KeyType': 'HASH'},
                    {'AttributeName': 'launch_date', 'KeyType': 'RANGE'}
                ],
                'Projection': {'ProjectionType': 'ALL'}
            },
            {
                'IndexName': COMPANY_INDEX,
                'KeySchema': [
                    {'AttributeName': 'company', 'KeyType': 'HASH'},
                    {'AttributeName': 'launch_date', 'KeyType': 'RANGE'}
                ],
                'Projection': {'ProjectionType': 'ALL'}
            },
            {
                'IndexName': GENERIC_NAME_INDEX,
                'KeySchema': [
                    {'AttributeName': 'drug_category', 'KeyType': 'HASH'},
                    {'AttributeName': 'generic_name', 'KeyType': 'RANGE'}
                ],
                'Projection': {'ProjectionType': 'ALL'}
            }
        ],
        BillingMode='PAY_PER_REQUEST'
    )
    table.wait_until_exists()
    logger.info("Created table %s", table.name)
    return table


class DynamoRepository(DrugRepository):
    """Repository for DynamoDB operations."""

    def __init__(self, table_name: Optional[str] = None):
        self.table_name = table_name or config.settings.drugs_table_name
        self._local = threading.local()

    @property
    def table(self):
        """Table handle owned by the calling thread; one boto3 resource per thread."""
        table = getattr(self._local, 'table', None)
        if table is None:
            table = self._connect()
            self._local.table = table
        return table

    def _connect(self):
        # boto3 sessions and resources are not thread-safe; one of each per thread.
        dynamodb = boto3.Session().resource(
            'dynamodb',
            region_name=config.settings.aws_region,
            endpoint_url=config.settings.dynamodb_endpoint_url
        )
        return dynamodb.Table(self.table_name)

    def find(self, drug_filter: DrugFilter, sort: DrugSort, skip: int = 0, limit: int = 20) -> List[Drug]:
        """
        Find drugs matching a filter, sorted and sliced.

        DynamoDB only orders by an index range key, so matching items are
        ordered here: first by code, then by the requested field. Both sorts
        are stable, which leaves equal-key drugs in ascending code order.

        Args:
            drug_filter: Company and search constraints
            sort: Field and direction
            skip: Number of matching drugs to skip
            limit: Maximum number of drugs to return

        Returns:
            List of Drug objects

        Raises:
            ValidationException: If the sort field is not sortable
            DrugStoreException: If the query fails
        """
        if sort.field not in SORTABLE_FIELDS:
            raise ValidationException(f"Unsupported sort field '{sort.field}'")

        try:
            index_name = self._index_for(drug_filter, sort.field)
            drugs = [self._item_to_drug(item) for item in self._query_items(drug_filter, index_name)]
        except ClientError as e:
            raise DrugStoreException(f"Failed to query drug data: {str(e)}") from e
        except Exception as e:
            raise DrugStoreException(f"Unexpected error querying drug data: {str(e)}") from e

        drugs.sort(key=lambda drug: drug.code)
        drugs.sort(key=lambda drug: getattr(drug, sort.field), reverse=sort.descending)
        return drugs[skip:skip + limit]

    def count(self, drug_filter: Optional[DrugFilter] = None) -> int:
        """
        Count drugs matching a filter.

        Raises:
            DrugStoreException: If the query fails
        """
        drug_filter = drug_filter or DrugFilter()
        try:
            total = 0
            for page in self._query_pages(drug_filter, self._index_for(drug_filter), Select='COUNT'):
                total += page.get('Count', 0)
            return total
        except ClientError as e:
            raise DrugStoreException(f"Failed to count drug data: {str(e)}") from e
        except Exception as e:
            raise DrugStoreException(f"Unexpected error counting drug data: {str(e)}") from e

    def distinct_companies(self) -> List[str]:
        """
        Collect the unique company names.

        Raises:
            DrugStoreException: If the query fails
        """
        try:
            companies = set()
            pages = self._query_pages(
                DrugFilter(),
                CATEGORY_INDEX,
                ProjectionExpression='#company',
                ExpressionAttributeNames={'#company': 'company'}
            )
            for page in pages:
                companies.update(item['company'] for item in page.get('Items', []))
            return list(companies)
        except ClientError as e:
            raise DrugStoreException(f"Failed to read companies: {str(e)}") from e
        except Exception as e:
            raise DrugStoreException(f"Unexpected error reading companies: {str(e)}") from e

    def find_launch_date_bound(self, oldest: bool = True):
        """
        Return the earliest or latest launch date using the category index order.

        Raises:
            DrugStoreException: If the query fails
        """
        try:
            response = self.table.query(
                IndexName=CATEGORY_INDEX,
                KeyConditionExpression=Key('drug_category').eq(ALL_CATEGORY),
                ScanIndexForward=oldest,
                Limit=1
            )
            items = response.get('Items', [])
            if not items:
                return None
            return from_iso(items[0]['launch_date'])
        except ClientError as e:
            raise DrugStoreException(f"Failed to read launch dates: {str(e)}") from e
        except Exception as e:
            raise DrugStoreException(f"Unexpected error reading launch dates: {str(e)}") from e

    def save(self, drug: Drug) -> None:
        """
        Insert a drug, refusing to overwrite an existing code.

        Raises:
            DuplicateDrugCodeException: If the code already exists
            DrugStoreException: If the put fails
        """
        try:
            self.table.put_item(
                Item=self._drug_to_item(drug),
                ConditionExpression=Attr('code').not_exists()
            )
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException':
                raise DuplicateDrugCodeException(f"Drug code '{drug.code}' already exists") from e
            raise DrugStoreException(f"Failed to save drug data: {str(e)}") from e
        except Exception as e:
            raise DrugStoreException(f"Unexpected error saving drug data: {str(e)}") from e

    def batch_save(self, drugs: List[Drug]) -> None:
        """
        Upsert multiple drugs in batches.
        DynamoDB batch_writer automatically handles batching (25 items per batch)
        and keeps only the last item for a repeated code.

        Raises:
            DrugStoreException: If batch save fails
        """
        try:
            with self.table.batch_writer(overwrite_by_pkeys=['code']) as batch:
                for drug in drugs:
                    batch.put_item(Item=self._drug_to_item(drug))
        except ClientError as e:
            raise DrugStoreException(f"Failed to batch save drug data: {str(e)}") from e
        except Exception as e:
            raise DrugStoreException(f"Unexpected error during batch save: {str(e)}") from e

    def _index_for(self, drug_filter: DrugFilter, sort_field: Optional[str] = None) -> str:
        """Pick the index whose key condition covers the filter."""
        if drug_filter.company:
            return COMPANY_INDEX
        if sort_field == 'generic_name':
            return GENERIC_NAME_INDEX
        return CATEGORY_INDEX

    def _query_pages(self, drug_filter: DrugFilter, index_name: str, **extra) -> Iterator[Dict[str, Any]]:
        """Yield raw query responses, following LastEvaluatedKey to the end."""
        query_kwargs = {'IndexName': index_name, **extra}

        if index_name == COMPANY_INDEX:
            query_kwargs['KeyConditionExpression'] = Key('company').eq(drug_filter.company)
        else:
            query_kwargs['KeyConditionExpression'] = Key('drug_category').eq(ALL_CATEGORY)

        if drug_filter.search:
            term = drug_filter.search.lower()
            condition = None
            for attribute in SEARCH_ATTRIBUTES.values():
                clause = Attr(attribute).contains(term)
                condition = clause if condition is None else condition | clause
            query_kwargs['FilterExpression'] = condition

        while True:
            response = self.table.query(**query_kwargs)
            yield response
            if 'LastEvaluatedKey' not in response:
                break
            query_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']

    def _query_items(self, drug_filter: DrugFilter, index_name: str) -> Iterator[Dict[str, Any]]:
        for page in self._query_pages(drug_filter, index_name):
            yield from page.get('Items', [])

    def _drug_to_item(self, drug: Drug) -> Dict[str, Any]:
        """Convert Drug domain model to a DynamoDB item."""
        now = utcnow()
        item = {
            'code': drug.code,
            'drug_category': ALL_CATEGORY,
            'generic_name': drug.generic_name,
            'brand_name': drug.brand_name,
            'company': drug.company,
            'launch_date': to_iso(drug.launch_date),
            'created_at': to_iso(drug.created_at or now),
            'updated_at': to_iso(drug.updated_at or now)
        }
        for attribute, shadow in SEARCH_ATTRIBUTES.items():
            item[shadow] = item[attribute].lower()
        return item

    def _item_to_drug(self, item: dict) -> Drug:
        """Convert DynamoDB item to Drug domain model."""
        return Drug(
            code=item['code'],
            generic_name=item['generic_name'],
            brand_name=item['brand_name'],
            company=item['company'],
            launch_date=from_iso(item['launch_date']),
            created_at=from_iso(item['created_at']) if item.get('created_at') else None,
            updated_at=from_iso(item['updated_at']) if item.get('updated_at') else None
        )
