"""
Underwriting decision records and approval entries.

Persisted decisions come in two historical shapes:
  - schemaVersion 1 (legacy): the primary offer lives in flat scalar fields on the decision
    and additionalApprovals, if present, is a loose list keyed by `amount`.
  - schemaVersion 2 (canonical): additionalApprovals holds every offer as a full
    ApprovalEntry with an explicit isPrimary flag.
Records written before schemaVersion existed carry no tag; see services.reconciler.
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from utils.coerce import to_text

LEGACY_SCHEMA_VERSION = 1
CANONICAL_SCHEMA_VERSION = 2


class DecisionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    UNQUALIFIED = "unqualified"
    FUNDED = "funded"


def _truthy(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in ("true", "1", "yes", "on")
    return bool(v)


class ApprovalEntry(BaseModel):
    """One lender offer in canonical form. Every field except is_primary is text."""

    id: str = ""
    lender: str = ""
    advance_amount: str = Field("", alias="advanceAmount")
    term: str = ""
    payment_frequency: str = Field("", alias="paymentFrequency")
    factor_rate: str = Field("", alias="factorRate")
    max_upsell: str = Field("", alias="maxUpsell")
    total_payback: str = Field("", alias="totalPayback")
    net_after_fees: str = Field("", alias="netAfterFees")
    notes: str = ""
    approval_date: str = Field("", alias="approvalDate")
    is_primary: bool = Field(False, alias="isPrimary")
    created_at: str = Field("", alias="createdAt")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator(
        "id",
        "lender",
        "advance_amount",
        "term",
        "payment_frequency",
        "factor_rate",
        "max_upsell",
        "total_payback",
        "net_after_fees",
        "notes",
        "approval_date",
        "created_at",
        mode="before",
    )
    @classmethod
    def _text(cls, v: Any) -> str:
        return to_text(v)

    @field_validator("is_primary", mode="before")
    @classmethod
    def _flag(cls, v: Any) -> bool:
        return _truthy(v)

    def to_storage_dict(self) -> dict[str, Any]:
        """camelCase dict, the shape written back into additionalApprovals."""
        return self.model_dump(by_alias=True)


class LegacyApproval(BaseModel):
    """Pre-canonical additional approval. `amount` is the old name for advanceAmount."""

    lender: str = ""
    amount: str = ""
    advance_amount: str = Field("", alias="advanceAmount")
    term: str = ""
    payment_frequency: str = Field("", alias="paymentFrequency")
    factor_rate: str = Field("", alias="factorRate")
    max_upsell: str = Field("", alias="maxUpsell")
    total_payback: str = Field("", alias="totalPayback")
    net_after_fees: str = Field("", alias="netAfterFees")
    notes: str = ""
    approval_date: str = Field("", alias="approvalDate")
    created_at: str = Field("", alias="createdAt")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("*", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return to_text(v)


class LegacyApprovalSet(BaseModel):
    schema_version: Literal[1] = LEGACY_SCHEMA_VERSION
    entries: list[LegacyApproval] = Field(default_factory=list)


class CanonicalApprovalSet(BaseModel):
    schema_version: Literal[2] = CANONICAL_SCHEMA_VERSION
    entries: list[ApprovalEntry] = Field(default_factory=list)


ApprovalSet = Annotated[
    Union[LegacyApprovalSet, CanonicalApprovalSet],
    Field(discriminator="schema_version"),
]


class UnderwritingDecisionRaw(BaseModel):
    """
    A decision as fetched from the decision store. Flat approval scalars keep their stored
    type (string, number or null); reconciliation renders them as text.
    """

    id: str = ""
    status: str = DecisionStatus.PENDING.value
    business_name: Optional[str] = Field(None, alias="businessName")
    business_email: Optional[str] = Field(None, alias="businessEmail")

    advance_amount: Any = Field(None, alias="advanceAmount")
    lender: Any = None
    term: Any = None
    payment_frequency: Any = Field(None, alias="paymentFrequency")
    factor_rate: Any = Field(None, alias="factorRate")
    max_upsell: Any = Field(None, alias="maxUpsell")
    total_payback: Any = Field(None, alias="totalPayback")
    net_after_fees: Any = Field(None, alias="netAfterFees")
    notes: Any = None
    approval_date: Any = Field(None, alias="approvalDate")
    decline_reason: Optional[str] = Field(None, alias="declineReason")

    funded_date: Any = Field(None, alias="fundedDate")
    additional_approvals: Optional[list[Any]] = Field(None, alias="additionalApprovals")
    schema_version: Optional[int] = Field(None, alias="schemaVersion")

    created_at: Any = Field(None, alias="createdAt")
    updated_at: Any = Field(None, alias="updatedAt")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("id", "status", mode="before")
    @classmethod
    def _required_text(cls, v: Any) -> str:
        return to_text(v)

    @field_validator("business_name", "business_email", "decline_reason", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        return None if v is None else to_text(v)

    @field_validator("additional_approvals", mode="before")
    @classmethod
    def _approval_list(cls, v: Any) -> Optional[list[Any]]:
        if isinstance(v, (list, tuple)):
            return list(v)
        return None

    @field_validator("schema_version", mode="before")
    @classmethod
    def _known_version(cls, v: Any) -> Optional[int]:
        if v in (LEGACY_SCHEMA_VERSION, CANONICAL_SCHEMA_VERSION) and not isinstance(v, bool):
            return int(v)
        if isinstance(v, str) and v.strip() in ("1", "2"):
            return int(v.strip())
        return None

    def to_storage_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class HeadlineApproval(BaseModel):
    """Best offer to show up front and the remaining offers behind a disclosure."""

    best: Optional[ApprovalEntry] = None
    others: list[ApprovalEntry] = Field(default_factory=list)


class FundingSummary(BaseModel):
    total_funded: int = Field(0, alias="totalFunded")
    total_amount: float = Field(0, alias="totalAmount")
    total_approved: int = Field(0, alias="totalApproved")

    model_config = {"populate_by_name": True}


class StatusChange(BaseModel):
    """Fields to write back for a status change. funded_date is only present when it changes."""

    status: DecisionStatus
    funded_date: Optional[datetime] = None
    clears_funded_date: bool = False
    sets_funded_date: bool = False

    def to_updates(self) -> dict[str, Any]:
        updates: dict[str, Any] = {"status": self.status.value}
        if self.sets_funded_date:
            updates["fundedDate"] = self.funded_date
        elif self.clears_funded_date:
            updates["fundedDate"] = None
        return updates
