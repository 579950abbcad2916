"""
ApprovalExpiryReminder Lambda Handler

Main entry point for the approval expiry reminder.
Finds Approved records nearing expiration and emails the facility's
stakeholders about each one.

Trigger: EventBridge Scheduled Rule (cron(15 15 * * ? *), daily 15:15 UTC)
         or API Gateway POST with a JSON body {"name": ...}
Output: One SES email per expiring approval

Flow:
1. Parse the trigger payload (API Gateway body or scheduled input)
2. Query the Approvals status index for Approved records
3. Keep records expiring within the threshold
4. For each: resolve the account name, compose, send
5. Return {"message", "event"}; send failures are logged, not surfaced
"""

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import boto3
import structlog
from pydantic import ValidationError

from lambdas.approval_expiry_reminder.composer import build_template_set, compose_message
from lambdas.approval_expiry_reminder.expiration_filter import filter_expiring
from reminders.shared.config import Settings, get_settings
from reminders.shared.exceptions import AccountNotFoundError, ReminderError
from reminders.shared.models.dynamo import ApprovalRecord
from reminders.shared.models.events import TriggerPayload
from reminders.shared.models.notification import TemplateSet
from reminders.shared.tools.dynamodb import query_account_by_uid, query_approved_records
from reminders.shared.tools.email import send_notification_email

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()


@dataclass
class ReminderResult:
    """Summary of one reminder run."""

    approvals_scanned: int = 0
    approvals_expiring: int = 0
    approvals_skipped: int = 0  # Unparseable expiration
    notifications_sent: int = 0
    notifications_failed: int = 0
    notifications_dry_run: int = 0
    message_ids: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        """Whether every expiring approval was handled without error."""
        return not self.errors


def _resolve_account_name(
    record: ApprovalRecord,
    *,
    dynamodb_client,
    settings: Settings,
) -> str:
    """
    Look up the display name for the approval's account.

    Raises:
        AccountNotFoundError: If no account has the referenced UID
        StoreQueryError: On DynamoDB failure
    """
    account = query_account_by_uid(
        record.account_uid,
        client=dynamodb_client,
        settings=settings,
    )
    if account is None:
        raise AccountNotFoundError(record.account_uid)
    return account.account_name


def _notify(
    record: ApprovalRecord,
    template_set: TemplateSet,
    result: ReminderResult,
    *,
    settings: Settings,
    dynamodb_client,
    ses_client,
    dry_run: bool,
) -> None:
    """Resolve, compose and send the reminder for a single approval."""
    account_name = _resolve_account_name(
        record,
        dynamodb_client=dynamodb_client,
        settings=settings,
    )
    message = compose_message(
        record,
        account_name,
        template_set,
        placeholder=settings.placeholder_token,
    )

    if dry_run:
        log.info(
            "dry_run_notification",
            account_uid=record.account_uid,
            facility=record.facility,
            to=list(message.recipients),
        )
        result.notifications_dry_run += 1
        return

    message_id = send_notification_email(
        message,
        client=ses_client,
        configuration_set=settings.ses_configuration_set,
    )
    result.message_ids.append(message_id)
    result.notifications_sent += 1


def run_reminder_workflow(
    *,
    settings: Settings,
    dynamodb_client,
    ses_client,
    now: datetime | None = None,
    threshold_days: int | None = None,
    dry_run: bool = False,
) -> ReminderResult:
    """
    Scan for expiring approvals and send one reminder per approval.

    A failure for one approval (missing account, lookup or send error)
    is logged and counted, and the remaining approvals are still
    processed. A failure before the loop ends the run.

    Args:
        settings: Application settings
        dynamodb_client: DynamoDB client used for both queries
        ses_client: SES client used for sending
        now: Reference time (default: current UTC time)
        threshold_days: Override settings.expiration_threshold_days
        dry_run: Compose but do not send

    Returns:
        ReminderResult summary
    """
    start_time = time.time()
    now = now or datetime.now(timezone.utc)
    threshold = (
        threshold_days
        if threshold_days is not None
        else settings.expiration_threshold_days
    )
    result = ReminderResult()

    log.info(
        "reminder_run_started",
        threshold_days=threshold,
        dry_run=dry_run,
        now=now.isoformat(),
    )

    try:
        template_set = build_template_set(settings)
        records = query_approved_records(client=dynamodb_client, settings=settings)
        result.approvals_scanned = len(records)

        scan = filter_expiring(records, now, threshold)
        result.approvals_expiring = scan.count
        result.approvals_skipped = len(scan.skipped)

        for record in scan.expiring:
            try:
                _notify(
                    record,
                    template_set,
                    result,
                    settings=settings,
                    dynamodb_client=dynamodb_client,
                    ses_client=ses_client,
                    dry_run=dry_run,
                )
            except ReminderError as e:
                result.notifications_failed += 1
                result.errors.append(f"Approval {record.account_uid or '?'}: {e}")
                log.error(
                    "approval_notification_failed",
                    account_uid=record.account_uid,
                    facility=record.facility,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    except Exception as e:
        log.exception("reminder_run_failed", error=str(e))
        result.errors.append(f"Critical error: {e}")

    result.duration_ms = (time.time() - start_time) * 1000

    log.info(
        "reminder_run_completed",
        approvals_scanned=result.approvals_scanned,
        approvals_expiring=result.approvals_expiring,
        approvals_skipped=result.approvals_skipped,
        notifications_sent=result.notifications_sent,
        notifications_failed=result.notifications_failed,
        notifications_dry_run=result.notifications_dry_run,
        errors=len(result.errors),
        duration_ms=result.duration_ms,
    )

    return result


def parse_trigger_event(event: dict[str, Any]) -> TriggerPayload:
    """
    Extract the trigger payload from a Lambda event.

    API Gateway proxy events carry it in "body", either as a JSON string
    or already decoded. The scheduled rule passes it as the event itself.

    Raises:
        ValidationError: If the payload is missing or malformed
    """
    payload: Any = event
    body = event.get("body")
    if body is not None:
        payload = body
        if isinstance(body, str):
            try:
                payload = json.loads(body)
            except json.JSONDecodeError:
                payload = {}

    if not isinstance(payload, dict):
        payload = {}

    return TriggerPayload.model_validate(payload)


def _response(status_code: int, message: str, event: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps({"message": message, "event": event}, default=str),
    }


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Main Lambda handler for the approval expiry reminder.

    Always answers 200 for a valid trigger; delivery problems only show
    up in the logs.

    Args:
        event: API Gateway proxy event or scheduled rule input
        context: Lambda context

    Returns:
        API Gateway proxy response
    """
    try:
        trigger = parse_trigger_event(event)
    except ValidationError as e:
        log.warning("invalid_trigger_payload", errors=e.errors(include_url=False))
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors(include_url=False)
        )
        return _response(400, f"Invalid request body: {problems}", event)

    settings = get_settings()

    log.info(
        "reminder_lambda_invoked",
        name=trigger.name,
        dry_run=trigger.dry_run,
        threshold_override=trigger.threshold_days,
    )

    run_reminder_workflow(
        settings=settings,
        dynamodb_client=boto3.client("dynamodb", **settings.dynamodb_config),
        ses_client=boto3.client("ses", **settings.ses_config),
        threshold_days=trigger.threshold_days,
        dry_run=trigger.dry_run,
    )

    return _response(
        200,
        f"Hello {trigger.name}, approval expiration reminders have been processed.",
        event,
    )
