"""
ApprovalExpiryReminder Lambda

Scheduled Lambda (also exposed over API Gateway) that emails facility
stakeholders about approvals nearing expiration.

Components:
- handler: Lambda entry point and run orchestration
- expiration_filter: day-difference threshold filter
- composer: facility template selection and message composition

Flow:
1. Triggered daily by EventBridge, or by POST with {"name": ...}
2. Query the Approvals status index for Approved records
3. Keep records expiring within the threshold (inclusive, no lower bound)
4. Resolve each record's account name from the Accounts UID index
5. Compose a fresh message from the facility's template and send via SES
"""

from lambdas.approval_expiry_reminder.composer import (
    build_template_set,
    compose_message,
)
from lambdas.approval_expiry_reminder.expiration_filter import (
    ExpirationScan,
    days_until_expiration,
    filter_expiring,
    parse_expiration,
)
from lambdas.approval_expiry_reminder.handler import (
    ReminderResult,
    lambda_handler,
    run_reminder_workflow,
)

__all__ = [
    "lambda_handler",
    "run_reminder_workflow",
    "ReminderResult",
    "ExpirationScan",
    "days_until_expiration",
    "filter_expiring",
    "parse_expiration",
    "build_template_set",
    "compose_message",
]
