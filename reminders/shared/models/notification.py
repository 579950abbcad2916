"""
Notification Models

Templates, facility routing and the per-record message sent through SES.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FacilityRoute(BaseModel):
    """
    Per-facility overrides, as configured in settings.

    Unset fields fall back to the default template.
    """

    model_config = ConfigDict(frozen=True)

    recipients: list[str] = Field(..., min_length=1, description="To addresses")
    sender: str | None = Field(default=None, description="Source address override")
    subject: str | None = Field(default=None, description="Subject override")


class NotificationTemplate(BaseModel):
    """Subject, bodies carrying the placeholder token, recipients and sender."""

    model_config = ConfigDict(frozen=True)

    subject: str
    html_body: str
    text_body: str
    recipients: tuple[str, ...] = Field(..., min_length=1)
    sender: str


class TemplateSet(BaseModel):
    """
    Facility name -> template mapping with an explicit default entry.

    Facilities are matched exactly as stored on the approval record.
    """

    model_config = ConfigDict(frozen=True)

    default: NotificationTemplate
    facilities: dict[str, NotificationTemplate] = Field(default_factory=dict)

    def select(self, facility: str) -> NotificationTemplate:
        return self.facilities.get(facility, self.default)


class NotificationMessage(BaseModel):
    """
    A composed reminder for one approval.

    Built fresh for every record and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    recipients: tuple[str, ...] = Field(..., min_length=1)
    subject: str
    html_body: str
    text_body: str
    sender: str

    def to_ses_params(self, *, configuration_set: str | None = None) -> dict[str, Any]:
        """Build keyword arguments for SES send_email."""
        params: dict[str, Any] = {
            "Source": self.sender,
            "Destination": {"ToAddresses": list(self.recipients)},
            "Message": {
                "Subject": {"Data": self.subject, "Charset": "UTF-8"},
                "Body": {
                    "Html": {"Data": self.html_body, "Charset": "UTF-8"},
                    "Text": {"Data": self.text_body, "Charset": "UTF-8"},
                },
            },
        }
        if configuration_set:
            params["ConfigurationSetName"] = configuration_set
        return params
