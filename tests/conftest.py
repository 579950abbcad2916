"""
Pytest Configuration and Shared Fixtures

Provides moto AWS mocking, sample records, and test utilities.
"""

import os
from datetime import datetime, timezone
from typing import Any, Callable, Generator

import boto3
import pytest
from moto import mock_aws

# Set test environment before importing application modules
os.environ["REMINDER_APPROVALS_TABLE_NAME"] = "TestApprovals"
os.environ["REMINDER_ACCOUNTS_TABLE_NAME"] = "TestAccounts"
os.environ["REMINDER_SES_FROM_ADDRESS"] = "no-reply@example.com"
os.environ["REMINDER_AWS_REGION"] = "us-east-1"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from reminders.shared.config import Settings, get_settings  # noqa: E402
from tests.utils.record_generator import MockRecordGenerator  # noqa: E402

APPROVALS_TABLE = "TestApprovals"
ACCOUNTS_TABLE = "TestAccounts"
STATUS_INDEX = "ApprovalStatus-ApprovalApproved-index"
UID_INDEX = "UID-index"


# --- Time Fixtures ---


@pytest.fixture
def frozen_now() -> datetime:
    """Fixed reference time for deterministic tests."""
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


# --- Settings Fixtures ---


@pytest.fixture
def settings() -> Settings:
    """Settings with a Trail, BC route and the default 30 day threshold."""
    return Settings(
        default_recipients=["approvals@example.com"],
        facility_routes={
            "Trail, BC": {
                "recipients": ["trail-approvals@example.com"],
                "sender": "no-reply-trail@example.com",
            },
        },
        expiration_threshold_days=30,
    )


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Reload settings from the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-east-1",
    }


@pytest.fixture
def mock_aws_all(aws_credentials):
    """
    Mock all AWS services used by the reminder.

    Creates the Approvals and Accounts tables with their GSIs and
    verifies the example.com sending domain in SES.
    """
    with mock_aws():
        dynamodb = boto3.client("dynamodb", **aws_credentials)

        dynamodb.create_table(
            TableName=APPROVALS_TABLE,
            KeySchema=[{"AttributeName": "ApprovalId", "KeyType": "HASH"}],
            AttributeDefinitions=[
                {"AttributeName": "ApprovalId", "AttributeType": "S"},
                {"AttributeName": "ApprovalStatus", "AttributeType": "S"},
                {"AttributeName": "ApprovalApproved", "AttributeType": "S"},
            ],
            GlobalSecondaryIndexes=[
                {
                    "IndexName": STATUS_INDEX,
                    "KeySchema": [
                        {"AttributeName": "ApprovalStatus", "KeyType": "HASH"},
                        {"AttributeName": "ApprovalApproved", "KeyType": "RANGE"},
                    ],
                    "Projection": {"ProjectionType": "ALL"},
                }
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        dynamodb.create_table(
            TableName=ACCOUNTS_TABLE,
            KeySchema=[{"AttributeName": "AccountId", "KeyType": "HASH"}],
            AttributeDefinitions=[
                {"AttributeName": "AccountId", "AttributeType": "S"},
                {"AttributeName": "UID", "AttributeType": "S"},
            ],
            GlobalSecondaryIndexes=[
                {
                    "IndexName": UID_INDEX,
                    "KeySchema": [{"AttributeName": "UID", "KeyType": "HASH"}],
                    "Projection": {"ProjectionType": "ALL"},
                }
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        ses = boto3.client("ses", **aws_credentials)
        ses.verify_domain_identity(Domain="example.com")
        ses.verify_email_identity(EmailAddress="no-reply@example.com")

        yield {
            "dynamodb": dynamodb,
            "ses": ses,
        }


# --- Record Fixtures ---


@pytest.fixture
def generator() -> MockRecordGenerator:
    """Seeded record generator."""
    return MockRecordGenerator(seed=1234)


@pytest.fixture
def put_items(mock_aws_all) -> Callable[..., None]:
    """Write typed items into the mocked tables."""
    client = mock_aws_all["dynamodb"]

    def _put(
        *,
        approvals: list[dict[str, Any]] = (),
        accounts: list[dict[str, Any]] = (),
    ) -> None:
        for item in approvals:
            client.put_item(TableName=APPROVALS_TABLE, Item=item)
        for item in accounts:
            client.put_item(TableName=ACCOUNTS_TABLE, Item=item)

    return _put


@pytest.fixture
def sent_email_count(mock_aws_all) -> Callable[[], int]:
    """Number of emails moto recorded as sent."""
    ses = mock_aws_all["ses"]

    def _count() -> int:
        return int(ses.get_send_quota()["SentLast24Hours"])

    return _count
