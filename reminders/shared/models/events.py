"""
Event Models

Trigger payloads accepted by the reminder Lambda. The HTTP endpoint and
the daily schedule both deliver a TriggerPayload.
"""

from pydantic import BaseModel, ConfigDict, Field

# Widest window a caller may request; one year of upcoming expirations
MAX_THRESHOLD_DAYS = 365


class TriggerPayload(BaseModel):
    """Body of the POST request, or the fixed input of the scheduled rule."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., min_length=1, description="Caller name, echoed in the response")
    dry_run: bool = Field(
        default=False,
        description="Compose reminders without sending them",
    )
    threshold_days: int | None = Field(
        default=None,
        ge=0,
        le=MAX_THRESHOLD_DAYS,
        description="Override the configured expiration threshold for this run",
    )
