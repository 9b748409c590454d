from schemas.approval import (
    ApprovalEntry,
    ApprovalSet,
    CanonicalApprovalSet,
    DecisionStatus,
    FundingSummary,
    HeadlineApproval,
    LegacyApproval,
    LegacyApprovalSet,
    StatusChange,
    UnderwritingDecisionRaw,
)
from schemas.funding import AlternativeOption, ApplicantProfile, FoundationCTA, FundingProfile
from schemas.requests import (
    ApprovalUpdateRequest,
    ApprovalsResponse,
    DecisionListRequest,
    DecisionListResponse,
    StatusChangeRequest,
)

__all__ = [
    "AlternativeOption",
    "ApplicantProfile",
    "FoundationCTA",
    "FundingProfile",
    "ApprovalEntry",
    "ApprovalSet",
    "CanonicalApprovalSet",
    "DecisionStatus",
    "FundingSummary",
    "HeadlineApproval",
    "LegacyApproval",
    "LegacyApprovalSet",
    "StatusChange",
    "UnderwritingDecisionRaw",
    "ApprovalUpdateRequest",
    "ApprovalsResponse",
    "DecisionListRequest",
    "DecisionListResponse",
    "StatusChangeRequest",
]
