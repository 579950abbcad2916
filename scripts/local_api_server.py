"""
FastAPI Server for Local Development

Serves the reminder's HTTP trigger against moto-mocked DynamoDB and SES,
with sample approvals seeded on startup.

Usage:
    python -m scripts.local_api_server
    curl -X POST localhost:8000/remind -d '{"name": "Frederic"}' -H 'Content-Type: application/json'
"""

import json
import os
import random
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

# Set environment for local mode BEFORE any other imports
os.environ.setdefault("REMINDER_ENVIRONMENT", "development")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from moto import mock_aws

mock = mock_aws()
mock.start()

import boto3
import structlog
from boto3.dynamodb.types import TypeSerializer
from faker import Faker
from fastapi import FastAPI, HTTPException, Query

from lambdas.approval_expiry_reminder.handler import lambda_handler
from reminders.shared.config import get_settings
from reminders.shared.exceptions import StoreQueryError
from reminders.shared.models.events import TriggerPayload
from reminders.shared.tools.dynamodb import query_approved_records

# Console logging; replaces the JSON config installed by the handler module
structlog.configure(
    processors=[
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()

fake = Faker()
_serializer = TypeSerializer()

FACILITIES = ["Trail, BC", "Lancaster, OH"]


def setup_local_dynamodb():
    """Create the Approvals and Accounts tables for local development."""
    settings = get_settings()
    client = boto3.client("dynamodb", **settings.dynamodb_config)

    tables = [
        (
            settings.approvals_table_name,
            "ApprovalId",
            settings.approvals_status_index_name,
            [("ApprovalStatus", "HASH"), ("ApprovalApproved", "RANGE")],
        ),
        (
            settings.accounts_table_name,
            "AccountId",
            settings.accounts_uid_index_name,
            [("UID", "HASH")],
        ),
    ]

    for table_name, key, index_name, index_keys in tables:
        try:
            client.create_table(
                TableName=table_name,
                KeySchema=[{"AttributeName": key, "KeyType": "HASH"}],
                AttributeDefinitions=[
                    {"AttributeName": name, "AttributeType": "S"}
                    for name in [key, *(k for k, _ in index_keys)]
                ],
                GlobalSecondaryIndexes=[
                    {
                        "IndexName": index_name,
                        "KeySchema": [
                            {"AttributeName": k, "KeyType": t} for k, t in index_keys
                        ],
                        "Projection": {"ProjectionType": "ALL"},
                    }
                ],
                BillingMode="PAY_PER_REQUEST",
            )
            log.info("dynamodb_table_created", table_name=table_name)
        except Exception as e:
            if "ResourceInUseException" not in str(e):
                log.warning("dynamodb_table_setup_error", table_name=table_name, error=str(e))


def setup_local_ses():
    """Verify the sending domains used by the configured templates."""
    settings = get_settings()
    ses = boto3.client("ses", **settings.ses_config)

    senders = {settings.ses_from_address}
    senders.update(
        route.sender for route in settings.facility_routes.values() if route.sender
    )
    for sender in senders:
        ses.verify_domain_identity(Domain=sender.split("@", 1)[-1])
        log.info("ses_identity_verified", email=sender)


def seed_sample_records(count: int) -> int:
    """Write count approvals, each with its own account, expiring within +/- 90 days."""
    settings = get_settings()
    client = boto3.client("dynamodb", **settings.dynamodb_config)
    now = datetime.now(timezone.utc)

    for _ in range(count):
        uid = fake.uuid4()
        account = {
            "AccountId": fake.uuid4(),
            "UID": uid,
            "AccountName": fake.company(),
        }
        approval = {
            "ApprovalId": fake.uuid4(),
            "ApprovalStatus": random.choice(["Approved", "Approved", "Pending"]),
            "ApprovalApproved": (now - timedelta(days=random.randint(30, 300))).isoformat(),
            "ApprovalExpires": (now + timedelta(days=random.randint(-90, 90))).isoformat(),
            "ApprovalFacility": random.choice(FACILITIES),
            "Author": fake.name(),
            "AID": uid,
        }
        client.put_item(
            TableName=settings.accounts_table_name,
            Item={k: _serializer.serialize(v) for k, v in account.items()},
        )
        client.put_item(
            TableName=settings.approvals_table_name,
            Item={k: _serializer.serialize(v) for k, v in approval.items()},
        )

    log.info("sample_records_seeded", count=count)
    return count


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    setup_local_dynamodb()
    setup_local_ses()
    seed_sample_records(10)
    log.info("local_aws_resources_initialized")
    yield
    mock.stop()
    log.info("shutting_down")


app = FastAPI(
    title="Approval Expiry Reminder (local)",
    lifespan=lifespan,
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "environment": get_settings().environment}


@app.post("/remind")
def remind(payload: TriggerPayload) -> dict:
    """Invoke the Lambda handler the way API Gateway would."""
    event = {
        "httpMethod": "POST",
        "path": "/remind",
        "body": payload.model_dump_json(),
    }
    response = lambda_handler(event, None)
    return {
        "statusCode": response["statusCode"],
        "body": json.loads(response["body"]),
    }


@app.get("/approvals")
def list_approvals() -> list[dict]:
    """Approved records currently in the local table."""
    try:
        records = query_approved_records()
    except StoreQueryError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return [
        {
            "account_uid": r.account_uid,
            "facility": r.facility,
            "author": r.author,
            "expires": r.expires,
        }
        for r in records
    ]


@app.post("/seed")
def seed(count: int = Query(default=10, ge=1, le=100)) -> dict:
    return {"seeded": seed_sample_records(count)}


if __name__ == "__main__":
    import uvicorn

    log.info("starting_local_api_server", host="0.0.0.0", port=8000)
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
