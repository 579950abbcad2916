"""
DynamoDB Models

Pydantic models for items read from the Approvals and Accounts tables.
Items arrive from the low-level DynamoDB client with typed attribute
wrappers ({"S": "..."}); from_dynamodb() deserializes them and keeps
the raw item alongside the parsed fields.
"""

from enum import Enum
from typing import Any

from boto3.dynamodb.types import TypeDeserializer
from pydantic import BaseModel, ConfigDict, Field

_deserializer = TypeDeserializer()


# =====================================================
# Attribute Names
# =====================================================

APPROVAL_STATUS_ATTR = "ApprovalStatus"
APPROVAL_FACILITY_ATTR = "ApprovalFacility"
APPROVAL_EXPIRES_ATTR = "ApprovalExpires"
APPROVAL_AUTHOR_ATTR = "Author"
APPROVAL_ACCOUNT_ATTR = "AID"

ACCOUNT_UID_ATTR = "UID"
ACCOUNT_NAME_ATTR = "AccountName"


def deserialize_item(item: dict[str, Any]) -> dict[str, Any]:
    """Convert a typed DynamoDB item into plain Python values."""
    return {key: _deserializer.deserialize(value) for key, value in item.items()}


def _text(attributes: dict[str, Any], name: str) -> str:
    """String value of an attribute; missing and NULL both read as empty."""
    value = attributes.get(name)
    return "" if value is None else str(value)


# =====================================================
# Approval Status
# =====================================================


class ApprovalStatus(str, Enum):
    """Approval lifecycle status as written by the upstream system."""

    APPROVED = "Approved"
    """Approval granted; the only status reminders are sent for."""


# =====================================================
# Approval Record
# =====================================================


class ApprovalRecord(BaseModel):
    """
    Approval item from the Approvals table.

    Identity is the store-assigned key; this workflow never writes it back.
    Other status values are kept as plain strings since only Approved
    records are acted on.
    """

    model_config = ConfigDict(frozen=True)

    status: str = Field(..., description="ApprovalStatus attribute")
    facility: str = Field(default="", description="Facility the approval applies to")
    author: str = Field(default="", description="Approval author")
    expires: str = Field(default="", description="Raw ApprovalExpires timestamp")
    account_uid: str = Field(default="", description="AID reference into Accounts")
    attributes: dict[str, Any] = Field(default_factory=dict, description="Deserialized item")
    raw_item: dict[str, Any] = Field(default_factory=dict, description="Item as returned by DynamoDB")

    @property
    def is_approved(self) -> bool:
        return self.status == ApprovalStatus.APPROVED.value

    @classmethod
    def from_dynamodb(cls, item: dict[str, Any]) -> "ApprovalRecord":
        """Parse from a typed DynamoDB item."""
        attributes = deserialize_item(item)
        return cls(
            status=_text(attributes, APPROVAL_STATUS_ATTR),
            facility=_text(attributes, APPROVAL_FACILITY_ATTR),
            author=_text(attributes, APPROVAL_AUTHOR_ATTR),
            expires=_text(attributes, APPROVAL_EXPIRES_ATTR),
            account_uid=_text(attributes, APPROVAL_ACCOUNT_ATTR),
            attributes=attributes,
            raw_item=item,
        )


# =====================================================
# Account Record
# =====================================================


class AccountRecord(BaseModel):
    """Account item from the Accounts table, looked up by UID."""

    model_config = ConfigDict(frozen=True)

    uid: str = Field(..., description="Unique account identifier")
    account_name: str = Field(default="", description="Display name")
    attributes: dict[str, Any] = Field(default_factory=dict, description="Deserialized item")

    @classmethod
    def from_dynamodb(cls, item: dict[str, Any]) -> "AccountRecord":
        """Parse from a typed DynamoDB item."""
        attributes = deserialize_item(item)
        return cls(
            uid=_text(attributes, ACCOUNT_UID_ATTR),
            account_name=_text(attributes, ACCOUNT_NAME_ATTR),
            attributes=attributes,
        )
