# Shared Infrastructure for the Approval Expiry Reminder
"""
Shared infrastructure for the approval expiry reminder.

This package provides:
- Pydantic models for DynamoDB items, notifications and trigger payloads
- Tool implementations for DynamoDB and SES
- Configuration management
- Custom exceptions
"""

from reminders.shared.config import Settings, get_settings
from reminders.shared.exceptions import (
    AccountNotFoundError,
    EmailSendError,
    InvalidEmailFormatError,
    InvalidExpirationError,
    ReminderError,
    StoreQueryError,
)

__all__ = [
    # Exceptions
    "ReminderError",
    "StoreQueryError",
    "AccountNotFoundError",
    "InvalidExpirationError",
    "InvalidEmailFormatError",
    "EmailSendError",
    # Config
    "Settings",
    "get_settings",
]
