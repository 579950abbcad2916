"""
Email Tools

SES delivery for composed reminders and address validation for the
configured recipients and senders.
"""

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from email_validator import EmailNotValidError, validate_email
import structlog

from reminders.shared.config import Settings, get_settings
from reminders.shared.exceptions import EmailSendError, InvalidEmailFormatError
from reminders.shared.models.notification import NotificationMessage

log = structlog.get_logger()


def _get_client(settings: Settings | None = None):
    """Get SES client."""
    settings = settings or get_settings()
    return boto3.client("ses", **settings.ses_config)


def send_notification_email(
    message: NotificationMessage,
    *,
    client=None,
    configuration_set: str | None = None,
) -> str:
    """
    Send a composed reminder via SES.

    One message per call; nothing is retried.

    Args:
        message: Composed notification
        client: SES client (default: built from settings)
        configuration_set: SES configuration set for tracking

    Returns:
        SES message ID

    Raises:
        EmailSendError: If send fails
    """
    client = client or _get_client()

    log.info(
        "sending_ses_email",
        to=list(message.recipients),
        source=message.sender,
        subject=message.subject[:50],
    )

    try:
        response = client.send_email(
            **message.to_ses_params(configuration_set=configuration_set)
        )
    except ClientError as e:
        error_code = e.response["Error"]["Code"]
        error_message = e.response["Error"]["Message"]

        log.error(
            "ses_send_failed",
            to=list(message.recipients),
            error_code=error_code,
            error_message=error_message,
        )

        raise EmailSendError(
            operation="send",
            recipients=list(message.recipients),
            error_message=f"{error_code}: {error_message}",
        ) from e
    except BotoCoreError as e:
        # Connection, timeout and credential failures carry no response
        log.error(
            "ses_send_failed",
            to=list(message.recipients),
            error_type=type(e).__name__,
            error_message=str(e),
        )

        raise EmailSendError(
            operation="send",
            recipients=list(message.recipients),
            error_message=str(e),
        ) from e

    message_id = response["MessageId"]
    log.info(
        "ses_email_sent",
        message_id=message_id,
        to=list(message.recipients),
    )
    return message_id


def validate_email_address(email: str) -> bool:
    """
    Validate an email address format.

    Uses email-validator library for RFC compliance.

    Args:
        email: Email address to validate

    Returns:
        True if valid

    Raises:
        InvalidEmailFormatError: If invalid
    """
    try:
        validate_email(email, check_deliverability=False)
        return True
    except EmailNotValidError as e:
        raise InvalidEmailFormatError(
            email_address=email,
            expected_pattern="RFC 5321",
        ) from e
