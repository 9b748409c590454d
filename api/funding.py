from typing import Any

from fastapi import APIRouter

from schemas.funding import ApplicantProfile
from services.eligibility import classify_with_gate, evaluate_gates

router = APIRouter(prefix="/api/funding-profile", tags=["funding"])


@router.post("", response_model=dict)
async def funding_profile(body: ApplicantProfile):
    """Classify an applicant. Junk or missing numbers are read as 0, never rejected."""
    gate, profile = classify_with_gate(body)
    return {
        **profile.model_dump(by_alias=True, exclude_none=True),
        "gate": gate,
    }


@router.post("/gates", response_model=dict)
async def matching_gates(body: ApplicantProfile) -> dict[str, Any]:
    """Every gate the applicant clears, in evaluation order. The first one decides the profile."""
    return {
        "applicant": body.model_dump(by_alias=True),
        "gates": evaluate_gates(body),
    }
