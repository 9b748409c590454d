"""
Applicant input and funding recommendation output for the eligibility classifier.
Numeric applicant fields are coerced leniently: junk, negative or missing values become 0.
"""
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from utils.coerce import coerce_non_negative_int


class ApplicantProfile(BaseModel):
    monthly_revenue: int = Field(0, alias="monthlyRevenue")
    credit_score: int = Field(0, alias="creditScore")
    time_in_business_months: int = Field(
        0,
        validation_alias=AliasChoices("timeInBusinessMonths", "time_in_business_months", "timeInBusiness"),
        serialization_alias="timeInBusinessMonths",
    )
    industry: str = ""
    requested_amount: int = Field(
        0,
        validation_alias=AliasChoices("requestedAmount", "requested_amount", "loanAmount"),
        serialization_alias="requestedAmount",
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator(
        "monthly_revenue",
        "credit_score",
        "time_in_business_months",
        "requested_amount",
        mode="before",
    )
    @classmethod
    def _coerce_number(cls, v: Any) -> int:
        return coerce_non_negative_int(v)

    @field_validator("industry", mode="before")
    @classmethod
    def _coerce_industry(cls, v: Any) -> str:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else str(v)


class AlternativeOption(BaseModel):
    name: str
    description: str
    url: str
    highlight: bool = False

    model_config = {"frozen": True}


class FoundationCTA(BaseModel):
    label: str
    url: str
    description: str

    model_config = {"frozen": True}


class FundingProfile(BaseModel):
    tier: str
    product: str
    max_amount: float = Field(0, alias="maxAmount", description="0 means no direct funding capacity")
    rate_descriptor: str = Field(..., alias="rateDescriptor")
    message: str
    is_foundation_building: bool = Field(False, alias="isFoundationBuilding")
    foundation_reason: Optional[str] = Field(None, alias="foundationReason")
    alternative_options: Optional[list[AlternativeOption]] = Field(None, alias="alternativeOptions")
    foundation_cta: Optional[FoundationCTA] = Field(None, alias="foundationCTA")

    model_config = {"populate_by_name": True}
