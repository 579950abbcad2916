# Shared Tools
"""
Thin wrappers over the AWS services the reminder consumes.

Every tool accepts an injected boto3 client so callers and tests can
substitute their own.
"""

from reminders.shared.tools.dynamodb import (
    query_account_by_uid,
    query_approved_records,
)
from reminders.shared.tools.email import (
    send_notification_email,
    validate_email_address,
)

__all__ = [
    # DynamoDB tools
    "query_approved_records",
    "query_account_by_uid",
    # Email tools
    "send_notification_email",
    "validate_email_address",
]
