"""
DynamoDB Tools

Read-only secondary-index queries against the Approvals and Accounts tables.
Both use the low-level client, so items come back with typed attribute
wrappers and are parsed by the models in reminders.shared.models.dynamo.
"""

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
import structlog

from reminders.shared.config import Settings, get_settings
from reminders.shared.exceptions import StoreQueryError
from reminders.shared.models.dynamo import (
    ACCOUNT_UID_ATTR,
    APPROVAL_STATUS_ATTR,
    AccountRecord,
    ApprovalRecord,
    ApprovalStatus,
)

log = structlog.get_logger()


def _get_client(settings: Settings | None = None):
    """Get DynamoDB client."""
    settings = settings or get_settings()
    return boto3.client("dynamodb", **settings.dynamodb_config)


def _index_query_params(
    table_name: str,
    index_name: str,
    attribute: str,
    value: str,
) -> dict[str, Any]:
    """Single equality key condition on a GSI."""
    return {
        "TableName": table_name,
        "IndexName": index_name,
        "KeyConditionExpression": "#key = :value",
        "ExpressionAttributeNames": {"#key": attribute},
        "ExpressionAttributeValues": {":value": {"S": value}},
    }


def query_approved_records(
    *,
    client=None,
    settings: Settings | None = None,
) -> list[ApprovalRecord]:
    """
    Query the status index for all Approved records.

    Follows LastEvaluatedKey until the index is exhausted.

    Args:
        client: DynamoDB client (default: built from settings)
        settings: Settings override

    Returns:
        Approval records in index order

    Raises:
        StoreQueryError: On DynamoDB operation failure
    """
    settings = settings or get_settings()
    client = client or _get_client(settings)

    query_params = _index_query_params(
        settings.approvals_table_name,
        settings.approvals_status_index_name,
        APPROVAL_STATUS_ATTR,
        ApprovalStatus.APPROVED.value,
    )

    log.debug(
        "querying_approved_records",
        table=settings.approvals_table_name,
        index=settings.approvals_status_index_name,
    )

    items: list[dict[str, Any]] = []
    try:
        response = client.query(**query_params)
        items.extend(response.get("Items", []))

        while "LastEvaluatedKey" in response:
            query_params["ExclusiveStartKey"] = response["LastEvaluatedKey"]
            response = client.query(**query_params)
            items.extend(response.get("Items", []))

    except (ClientError, BotoCoreError) as e:
        log.error(
            "dynamodb_query_failed",
            table=settings.approvals_table_name,
            index=settings.approvals_status_index_name,
            error=str(e),
        )
        raise StoreQueryError(
            operation="query",
            table_name=settings.approvals_table_name,
            index_name=settings.approvals_status_index_name,
            error_message=str(e),
        ) from e

    log.info("approved_records_queried", count=len(items))

    return [ApprovalRecord.from_dynamodb(item) for item in items]


def query_account_by_uid(
    uid: str,
    *,
    client=None,
    settings: Settings | None = None,
) -> AccountRecord | None:
    """
    Look up an account by UID.

    Args:
        uid: Account identifier referenced by an approval
        client: DynamoDB client (default: built from settings)
        settings: Settings override

    Returns:
        AccountRecord if found, None otherwise. When several accounts
        share the UID the first is returned.

    Raises:
        StoreQueryError: On DynamoDB operation failure
    """
    settings = settings or get_settings()
    client = client or _get_client(settings)

    log.debug("querying_account", account_uid=uid)

    try:
        response = client.query(
            **_index_query_params(
                settings.accounts_table_name,
                settings.accounts_uid_index_name,
                ACCOUNT_UID_ATTR,
                uid,
            )
        )
    except (ClientError, BotoCoreError) as e:
        log.error(
            "dynamodb_query_failed",
            table=settings.accounts_table_name,
            index=settings.accounts_uid_index_name,
            account_uid=uid,
            error=str(e),
        )
        raise StoreQueryError(
            operation="query",
            table_name=settings.accounts_table_name,
            index_name=settings.accounts_uid_index_name,
            error_message=str(e),
        ) from e

    items = response.get("Items", [])
    if not items:
        log.debug("account_not_found", account_uid=uid)
        return None

    if len(items) > 1:
        log.warning("account_uid_ambiguous", account_uid=uid, matches=len(items))

    return AccountRecord.from_dynamodb(items[0])
