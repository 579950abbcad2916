"""
Custom Exceptions for the Approval Expiry Reminder

All exceptions follow the pattern of specific, actionable errors
with context needed for debugging and logging.
"""

from dataclasses import dataclass
from typing import Any


class ReminderError(Exception):
    """Base exception for the approval expiry reminder."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class StoreQueryError(ReminderError):
    """DynamoDB query failed (unreachable store, auth failure, bad query)."""

    operation: str
    table_name: str
    index_name: str | None = None

    def __init__(
        self,
        operation: str,
        table_name: str,
        index_name: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.table_name = table_name
        self.index_name = index_name
        super().__init__(
            f"DynamoDB {operation} failed on table '{table_name}': {error_message or 'Unknown error'}",
            operation=operation,
            table_name=table_name,
            index_name=index_name,
            error_message=error_message,
        )


@dataclass
class AccountNotFoundError(ReminderError):
    """Account referenced by an approval has no matching record."""

    account_uid: str

    def __init__(self, account_uid: str) -> None:
        self.account_uid = account_uid
        super().__init__(
            f"Account '{account_uid}' not found",
            account_uid=account_uid,
        )


@dataclass
class InvalidExpirationError(ReminderError):
    """Approval expiration timestamp could not be parsed."""

    value: Any

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            f"Invalid approval expiration timestamp: {value!r}",
            value=value,
        )


@dataclass
class InvalidEmailFormatError(ReminderError):
    """Configured recipient or sender address is invalid."""

    email_address: str
    expected_pattern: str | None = None

    def __init__(
        self,
        email_address: str,
        expected_pattern: str | None = None,
    ) -> None:
        self.email_address = email_address
        self.expected_pattern = expected_pattern
        pattern_hint = f" Expected pattern: {expected_pattern}" if expected_pattern else ""
        super().__init__(
            f"Invalid email format: '{email_address}'.{pattern_hint}",
            email_address=email_address,
            expected_pattern=expected_pattern,
        )


@dataclass
class EmailSendError(ReminderError):
    """SES rejected the message or could not be reached."""

    operation: str  # "send"
    recipients: list[str] | None = None

    def __init__(
        self,
        operation: str,
        recipients: list[str] | None = None,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.recipients = recipients
        super().__init__(
            f"SES {operation} failed{f' for {recipients}' if recipients else ''}: "
            f"{error_message or 'Unknown error'}",
            operation=operation,
            recipients=recipients,
            error_message=error_message,
        )
