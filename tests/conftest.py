"""
Shared test fixtures and utilities.
"""
import os
from datetime import datetime, timezone
import boto3
import pytest
from moto import mock_aws
from src.models.drug_model import Drug

TEST_TABLE_NAME = 'Drugs-test'


def _make_drug(code, generic_name, brand_name, company, launch_date):
    return Drug(
        code=code,
        generic_name=generic_name,
        brand_name=brand_name,
        company=company,
        launch_date=datetime.strptime(launch_date, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    )


@pytest.fixture
def seed_drugs():
    """Five drugs from three companies."""
    return [
        _make_drug('TEST001', 'Test Drug Alpha', 'Alpha Brand', 'Test Pharma Inc', '2020-01-15'),
        _make_drug('TEST002', 'Test Drug Beta', 'Beta Brand', 'Test Pharma Inc', '2021-03-22'),
        _make_drug('TEST003', 'Test Drug Gamma', 'Gamma Brand', 'Mock Labs Ltd', '2019-08-10'),
        _make_drug('TEST004', 'Test Drug Delta', 'Delta Brand', 'Mock Labs Ltd', '2022-11-05'),
        _make_drug('TEST005', 'Test Drug Epsilon', 'Epsilon Brand', 'Sample Corp', '2020-06-18'),
    ]


@pytest.fixture
def aws_env():
    """Mock AWS credentials and point settings at the test table."""
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = 'us-east-1'
    os.environ['AWS_REGION'] = 'us-east-1'
    os.environ['DRUGS_TABLE_NAME'] = TEST_TABLE_NAME
    os.environ['ENVIRONMENT'] = 'test'

    from src.core import config
    config.settings = config.Settings()

    # Clear dependency injection cache
    from src.core import dependencies
    dependencies.get_drug_repository.cache_clear()
    dependencies.get_drug_service.cache_clear()
    dependencies.get_aggregate_service.cache_clear()

    yield

    for key in ['DRUGS_TABLE_NAME', 'ENVIRONMENT']:
        if key in os.environ:
            del os.environ[key]
    dependencies.get_drug_repository.cache_clear()
    dependencies.get_drug_service.cache_clear()
    dependencies.get_aggregate_service.cache_clear()


@pytest.fixture
def drugs_table(aws_env):
    """Empty drugs table in a mocked DynamoDB."""
    from src.repositories.dynamo_repository import create_drugs_table

    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name='us-east-1')
        yield create_drugs_table(dynamodb, TEST_TABLE_NAME)


@pytest.fixture
def seeded_table(drugs_table, seed_drugs):
    """Drugs table holding the five seed drugs."""
    from src.repositories.dynamo_repository import DynamoRepository

    DynamoRepository(drugs_table.name).batch_save(seed_drugs)
    return drugs_table


@pytest.fixture
def drug_factory():
    """Build a Drug from plain strings; launch date as YYYY-MM-DD."""
    return _make_drug
