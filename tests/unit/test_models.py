"""
Unit tests for shared models, configuration and exceptions.

Tests cover:
- DynamoDB models: ApprovalRecord, AccountRecord
- Notification models: NotificationMessage, TemplateSet
- Event models: TriggerPayload
- Settings: defaults and environment overrides
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from reminders.shared.models.dynamo import AccountRecord, ApprovalRecord, ApprovalStatus
from reminders.shared.models.events import TriggerPayload
from reminders.shared.models.notification import NotificationMessage
from tests.utils.record_generator import to_typed_item


# ============================================================================
# DynamoDB Model Tests
# ============================================================================

class TestApprovalRecord:
    """Tests for ApprovalRecord model."""

    def test_from_dynamodb(self):
        item = to_typed_item({
            "ApprovalId": "appr-001",
            "ApprovalStatus": "Approved",
            "ApprovalExpires": "2024-01-31",
            "ApprovalFacility": "Trail, BC",
            "Author": "Jane Doe",
            "AID": "acct-001",
            "Revision": 3,
        })

        record = ApprovalRecord.from_dynamodb(item)

        assert record.status == ApprovalStatus.APPROVED
        assert record.is_approved is True
        assert record.facility == "Trail, BC"
        assert record.author == "Jane Doe"
        assert record.expires == "2024-01-31"
        assert record.account_uid == "acct-001"
        assert record.attributes["Revision"] == Decimal("3")
        assert record.raw_item == item

    def test_from_dynamodb_missing_attributes(self):
        record = ApprovalRecord.from_dynamodb({"ApprovalStatus": {"S": "Approved"}})

        assert record.facility == ""
        assert record.expires == ""
        assert record.account_uid == ""

    def test_from_dynamodb_null_attributes_read_as_empty(self):
        record = ApprovalRecord.from_dynamodb({
            "ApprovalStatus": {"S": "Approved"},
            "ApprovalFacility": {"NULL": True},
            "Author": {"NULL": True},
        })

        assert record.facility == ""
        assert record.author == ""
        assert record.attributes["Author"] is None

    def test_other_status_not_approved(self):
        record = ApprovalRecord.from_dynamodb({"ApprovalStatus": {"S": "Pending"}})

        assert record.status == "Pending"
        assert record.is_approved is False

    def test_record_frozen(self):
        record = ApprovalRecord(status="Approved")

        with pytest.raises(ValidationError):
            record.facility = "Elsewhere"


class TestAccountRecord:
    """Tests for AccountRecord model."""

    def test_from_dynamodb(self):
        record = AccountRecord.from_dynamodb(to_typed_item({
            "AccountId": "a-1",
            "UID": "acct-001",
            "AccountName": "Acme Metals",
        }))

        assert record.uid == "acct-001"
        assert record.account_name == "Acme Metals"
        assert record.attributes["AccountId"] == "a-1"


# ============================================================================
# Notification Model Tests
# ============================================================================

class TestNotificationMessage:
    """Tests for NotificationMessage model."""

    @pytest.fixture
    def message(self) -> NotificationMessage:
        return NotificationMessage(
            recipients=("ops@example.com", "lead@example.com"),
            subject="Approval is nearing expiration",
            html_body="<p>html</p>",
            text_body="text",
            sender="no-reply@example.com",
        )

    def test_to_ses_params(self, message):
        params = message.to_ses_params()

        assert params["Source"] == "no-reply@example.com"
        assert params["Destination"] == {"ToAddresses": ["ops@example.com", "lead@example.com"]}
        assert params["Message"]["Subject"] == {
            "Data": "Approval is nearing expiration",
            "Charset": "UTF-8",
        }
        assert params["Message"]["Body"]["Html"]["Data"] == "<p>html</p>"
        assert params["Message"]["Body"]["Text"]["Data"] == "text"
        assert "ConfigurationSetName" not in params

    def test_to_ses_params_with_configuration_set(self, message):
        params = message.to_ses_params(configuration_set="reminders")

        assert params["ConfigurationSetName"] == "reminders"

    def test_requires_recipient(self):
        with pytest.raises(ValidationError):
            NotificationMessage(
                recipients=(),
                subject="s",
                html_body="h",
                text_body="t",
                sender="no-reply@example.com",
            )


# ============================================================================
# Event Model Tests
# ============================================================================

class TestTriggerPayload:
    """Tests for TriggerPayload model."""

    def test_name_only(self):
        payload = TriggerPayload.model_validate({"name": "Scheduler"})

        assert payload.name == "Scheduler"
        assert payload.dry_run is False
        assert payload.threshold_days is None

    def test_name_required(self):
        with pytest.raises(ValidationError):
            TriggerPayload.model_validate({})

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValidationError):
            TriggerPayload.model_validate({"name": "x", "threshold_days": -1})

    def test_threshold_above_cap_rejected(self):
        with pytest.raises(ValidationError):
            TriggerPayload.model_validate({"name": "x", "threshold_days": 366})

    def test_threshold_at_cap_accepted(self):
        payload = TriggerPayload.model_validate({"name": "x", "threshold_days": 365})

        assert payload.threshold_days == 365

    def test_unknown_fields_ignored(self):
        payload = TriggerPayload.model_validate({"name": "x", "source": "aws.events"})

        assert payload.name == "x"


# ============================================================================
# Settings Tests
# ============================================================================

class TestSettings:
    """Tests for Settings configuration."""

    def test_defaults(self):
        from reminders.shared.config import Settings

        settings = Settings()

        assert settings.approvals_status_index_name == "ApprovalStatus-ApprovalApproved-index"
        assert settings.accounts_uid_index_name == "UID-index"
        assert settings.expiration_threshold_days == 30
        assert settings.placeholder_token == "APPROVAL_PLACEHOLDER"
        assert "Trail, BC" in settings.facility_routes

    def test_env_overrides(self, monkeypatch):
        from reminders.shared.config import Settings

        monkeypatch.setenv("REMINDER_EXPIRATION_THRESHOLD_DAYS", "50")
        monkeypatch.setenv("REMINDER_DEFAULT_RECIPIENTS", '["a@example.com", "b@example.com"]')
        monkeypatch.setenv(
            "REMINDER_FACILITY_ROUTES",
            '{"Lancaster, OH": {"recipients": ["oh@example.com"], "sender": "oh-bot@example.com"}}',
        )

        settings = Settings()

        assert settings.expiration_threshold_days == 50
        assert settings.default_recipients == ["a@example.com", "b@example.com"]
        assert list(settings.facility_routes) == ["Lancaster, OH"]
        assert settings.facility_routes["Lancaster, OH"].sender == "oh-bot@example.com"

    def test_client_configs(self):
        from reminders.shared.config import Settings

        settings = Settings(dynamodb_endpoint_url="http://localhost:8000")

        assert settings.dynamodb_config == {
            "region_name": "us-east-1",
            "endpoint_url": "http://localhost:8000",
        }
        assert settings.ses_config == {"region_name": "us-east-1"}

    def test_get_settings_cached(self):
        from reminders.shared.config import get_settings

        assert get_settings() is get_settings()


# ============================================================================
# Exception Tests
# ============================================================================

class TestExceptions:
    """Tests for exception formatting."""

    def test_store_query_error_context(self):
        from reminders.shared.exceptions import StoreQueryError

        error = StoreQueryError(
            operation="query",
            table_name="Approvals",
            index_name="UID-index",
            error_message="AccessDenied",
        )

        assert "DynamoDB query failed on table 'Approvals': AccessDenied" in str(error)
        assert "index_name='UID-index'" in str(error)

    def test_account_not_found_error(self):
        from reminders.shared.exceptions import AccountNotFoundError, ReminderError

        error = AccountNotFoundError("acct-404")

        assert isinstance(error, ReminderError)
        assert error.account_uid == "acct-404"
        assert "acct-404" in str(error)
