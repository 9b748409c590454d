from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from schemas.approval import ApprovalEntry, FundingSummary


class ApprovalsResponse(BaseModel):
    approvals: list[ApprovalEntry]
    best: Optional[ApprovalEntry] = None
    others: list[ApprovalEntry] = Field(default_factory=list)
    most_recent_approval_date: datetime = Field(..., alias="mostRecentApprovalDate")
    needs_migration: bool = Field(False, alias="needsMigration")

    model_config = {"populate_by_name": True}


class DecisionListRequest(BaseModel):
    decisions: list[dict[str, Any]] = Field(default_factory=list)
    status: Optional[str] = None
    query: Optional[str] = None


class DecisionListResponse(BaseModel):
    decisions: list[dict[str, Any]]
    summary: FundingSummary


class StatusChangeRequest(BaseModel):
    decision: dict[str, Any]
    status: str


class ApprovalUpdateRequest(BaseModel):
    approvals: list[dict[str, Any]] = Field(default_factory=list)
    new_approval: Optional[dict[str, Any]] = Field(None, alias="newApproval")
    make_primary: bool = Field(False, alias="makePrimary")
    primary_id: Optional[str] = Field(None, alias="primaryId")

    model_config = {"populate_by_name": True}
