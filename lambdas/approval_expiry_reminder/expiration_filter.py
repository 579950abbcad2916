"""
Expiration Filter for Approval Reminders

Decides which Approved records are close enough to expiry to notify.

Days are whole days rounded down: an approval expiring 30 days and
23 hours from now counts as 30 days out. The threshold is inclusive and
has no lower bound, so approvals that have already expired are reported
on every run.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable

import structlog

from reminders.shared.exceptions import InvalidExpirationError
from reminders.shared.models.dynamo import ApprovalRecord

log = structlog.get_logger()

ONE_DAY = timedelta(days=1)


@dataclass
class ExpirationScan:
    """
    Result of filtering a batch of approvals.

    Contains the expiring approvals in input order, plus the records
    that could not be evaluated.
    """

    expiring: list[ApprovalRecord] = field(default_factory=list)
    skipped: list[ApprovalRecord] = field(default_factory=list)
    not_approved: int = 0

    @property
    def count(self) -> int:
        """Number of expiring approvals found."""
        return len(self.expiring)


def parse_expiration(value: str) -> datetime:
    """
    Parse an ApprovalExpires timestamp.

    Accepts ISO-8601 dates and datetimes, including a trailing "Z".
    Values without an offset are taken as UTC.

    Args:
        value: Raw timestamp string

    Returns:
        Timezone-aware datetime

    Raises:
        InvalidExpirationError: If the value is empty or malformed
    """
    if not value:
        raise InvalidExpirationError(value)

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidExpirationError(value) from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_until_expiration(expires_at: datetime, now: datetime) -> int:
    """
    Whole days from now until expiry, rounded down.

    Negative once the approval has expired.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (expires_at - now) // ONE_DAY


def filter_expiring(
    records: Iterable[ApprovalRecord],
    now: datetime,
    threshold_days: int,
) -> ExpirationScan:
    """
    Keep Approved records expiring within threshold_days of now.

    Args:
        records: Approval records, in query order
        now: Reference time for the day difference
        threshold_days: Inclusive upper bound on days until expiry

    Returns:
        ExpirationScan with expiring and skipped records
    """
    scan = ExpirationScan()

    for record in records:
        if not record.is_approved:
            scan.not_approved += 1
            continue

        try:
            expires_at = parse_expiration(record.expires)
        except InvalidExpirationError as e:
            log.warning(
                "approval_expiration_unparseable",
                account_uid=record.account_uid,
                facility=record.facility,
                error=str(e),
            )
            scan.skipped.append(record)
            continue

        days = days_until_expiration(expires_at, now)
        if days <= threshold_days:
            scan.expiring.append(record)
            log.debug(
                "approval_expiring",
                account_uid=record.account_uid,
                facility=record.facility,
                days_until_expiration=days,
            )

    log.info(
        "expiring_approvals_filtered",
        threshold_days=threshold_days,
        expiring=scan.count,
        skipped=len(scan.skipped),
        not_approved=scan.not_approved,
    )

    return scan
