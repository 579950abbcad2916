"""
Notification Composer

Builds the facility template set from settings and composes one
NotificationMessage per expiring approval.

The HTML body receives a readable summary while the text body receives
the raw DynamoDB item serialized as JSON.
"""

import html
import json

import structlog

from reminders.shared.config import Settings
from reminders.shared.models.dynamo import ApprovalRecord
from reminders.shared.models.notification import (
    FacilityRoute,
    NotificationMessage,
    NotificationTemplate,
    TemplateSet,
)
from reminders.shared.tools.email import validate_email_address

log = structlog.get_logger()


def _template_from_route(
    route: FacilityRoute,
    default: NotificationTemplate,
) -> NotificationTemplate:
    return NotificationTemplate(
        subject=route.subject or default.subject,
        html_body=default.html_body,
        text_body=default.text_body,
        recipients=tuple(route.recipients),
        sender=route.sender or default.sender,
    )


def build_template_set(settings: Settings) -> TemplateSet:
    """
    Build the facility -> template mapping from settings.

    Every recipient and sender address is validated up front so a
    misconfigured route fails the run before any email is sent.

    Raises:
        InvalidEmailFormatError: If a configured address is invalid
    """
    default = NotificationTemplate(
        subject=settings.notification_subject,
        html_body=settings.notification_body_template,
        text_body=settings.notification_body_template,
        recipients=tuple(settings.default_recipients),
        sender=settings.ses_from_address,
    )
    facilities = {
        facility: _template_from_route(route, default)
        for facility, route in settings.facility_routes.items()
    }

    for template in (default, *facilities.values()):
        validate_email_address(template.sender)
        for recipient in template.recipients:
            validate_email_address(recipient)

    log.debug(
        "template_set_built",
        facilities=sorted(facilities),
        default_recipients=list(default.recipients),
    )

    return TemplateSet(default=default, facilities=facilities)


def render_html_summary(record: ApprovalRecord, account_name: str) -> str:
    """Readable approval summary for the HTML body."""
    return (
        "<html><body>"
        f"Account: {html.escape(account_name)}<br/>"
        f"Facility: {html.escape(record.facility)}<br/>"
        f"Author: {html.escape(record.author)}<br/>"
        f"Expires: {html.escape(record.expires)}"
        "</body></html>"
    )


def render_text_record(record: ApprovalRecord) -> str:
    """The approval item exactly as DynamoDB returned it, as JSON."""
    return json.dumps(record.raw_item, default=str)


def compose_message(
    record: ApprovalRecord,
    account_name: str,
    template_set: TemplateSet,
    *,
    placeholder: str,
) -> NotificationMessage:
    """
    Compose the reminder for one approval.

    Args:
        record: Expiring approval
        account_name: Display name of the approval's account
        template_set: Facility templates with default
        placeholder: Token replaced in both bodies

    Returns:
        A new NotificationMessage; every placeholder occurrence is replaced
    """
    template = template_set.select(record.facility)

    message = NotificationMessage(
        recipients=template.recipients,
        subject=template.subject,
        html_body=template.html_body.replace(
            placeholder, render_html_summary(record, account_name)
        ),
        text_body=template.text_body.replace(
            placeholder, render_text_record(record)
        ),
        sender=template.sender,
    )

    log.debug(
        "notification_composed",
        account_uid=record.account_uid,
        facility=record.facility,
        to=list(message.recipients),
    )

    return message
