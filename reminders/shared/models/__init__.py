# Shared Models
"""
Pydantic models for store items, notifications and trigger payloads.
"""

from reminders.shared.models.dynamo import (
    AccountRecord,
    ApprovalRecord,
    ApprovalStatus,
)
from reminders.shared.models.events import TriggerPayload
from reminders.shared.models.notification import (
    FacilityRoute,
    NotificationMessage,
    NotificationTemplate,
    TemplateSet,
)

__all__ = [
    # DynamoDB
    "AccountRecord",
    "ApprovalRecord",
    "ApprovalStatus",
    # Events
    "TriggerPayload",
    # Notifications
    "FacilityRoute",
    "NotificationMessage",
    "NotificationTemplate",
    "TemplateSet",
]
