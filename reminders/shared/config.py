"""
Configuration Management

Pydantic-settings based configuration for the approval expiry reminder.
All settings can be overridden via environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from reminders.shared.models.notification import FacilityRoute


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with REMINDER_ and are case-insensitive.
    Example: REMINDER_APPROVALS_TABLE_NAME=Approvals

    Complex fields are read as JSON, e.g.
    REMINDER_FACILITY_ROUTES='{"Trail, BC": {"recipients": ["ops@example.com"]}}'
    """

    model_config = SettingsConfigDict(
        env_prefix="REMINDER_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # DynamoDB Configuration
    approvals_table_name: str = Field(
        default="Approvals",
        description="DynamoDB table holding approval records",
    )
    approvals_status_index_name: str = Field(
        default="ApprovalStatus-ApprovalApproved-index",
        description="GSI keyed on ApprovalStatus",
    )
    accounts_table_name: str = Field(
        default="Accounts",
        description="DynamoDB table holding account records",
    )
    accounts_uid_index_name: str = Field(
        default="UID-index",
        description="GSI keyed on account UID",
    )
    dynamodb_endpoint_url: str | None = Field(
        default=None,
        description="DynamoDB endpoint URL (for local development)",
    )

    # SES Configuration
    ses_from_address: str = Field(
        default="no-reply@example.com",
        description="Default Source address for reminder emails",
    )
    ses_configuration_set: str | None = Field(
        default=None,
        description="SES configuration set for tracking",
    )
    ses_endpoint_url: str | None = Field(
        default=None,
        description="SES endpoint URL (for local development)",
    )

    # Notification Configuration
    default_recipients: list[str] = Field(
        default_factory=lambda: ["approvals@example.com"],
        description="Recipients for facilities without a dedicated route",
    )
    facility_routes: dict[str, FacilityRoute] = Field(
        default_factory=lambda: {
            "Trail, BC": FacilityRoute(recipients=["trail-approvals@example.com"]),
        },
        description="Facility name -> recipients/sender overrides",
    )
    notification_subject: str = Field(
        default="Approval is nearing expiration",
        description="Reminder email subject",
    )
    notification_body_template: str = Field(
        default="Approval expiring: APPROVAL_PLACEHOLDER",
        description="Body template for both HTML and text parts",
    )
    placeholder_token: str = Field(
        default="APPROVAL_PLACEHOLDER",
        min_length=1,
        description="Token replaced with rendered approval data",
    )

    # Expiration Configuration
    expiration_threshold_days: int = Field(
        default=30,
        ge=0,
        description="Notify for approvals expiring within this many days",
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region",
    )

    # Application Configuration
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def dynamodb_config(self) -> dict:
        """DynamoDB client configuration."""
        config = {"region_name": self.aws_region}
        if self.dynamodb_endpoint_url:
            config["endpoint_url"] = self.dynamodb_endpoint_url
        return config

    @property
    def ses_config(self) -> dict:
        """SES client configuration."""
        config = {"region_name": self.aws_region}
        if self.ses_endpoint_url:
            config["endpoint_url"] = self.ses_endpoint_url
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call Settings.model_validate({}) in tests to override.
    """
    return Settings()
