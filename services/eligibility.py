"""
Maps an applicant's financial profile to a funding tier and product recommendation.

Gates are evaluated top-down and the first match wins. Order matters: an applicant who
clears Prime Borrower also clears most of the gates below it. The last gate always matches,
so classify() returns exactly one profile for any input.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union

from pydantic import ValidationError

from schemas.funding import AlternativeOption, ApplicantProfile, FoundationCTA, FundingProfile

logger = logging.getLogger(__name__)

RESTRICTED_INDUSTRIES = frozenset(
    {
        "Gambling",
        "Adult",
        "Cannabis",
        "Non-Profit",
        "Financial Services",
    }
)

PRIME_MAX_AMOUNT = 5_000_000
STARTUP_MAX_AMOUNT = 150_000
RESTRICTED_PERSONAL_MAX_AMOUNT = 100_000
HIGH_RISK_MIN_AMOUNT = 10_000

FOUNDATION_TIER = "Foundation Building"


@dataclass(frozen=True)
class ApplicantFacts:
    """Coerced numbers the gate predicates read."""

    revenue: int
    credit: int
    time: int
    restricted: bool

    @classmethod
    def from_profile(cls, profile: ApplicantProfile) -> "ApplicantFacts":
        return cls(
            revenue=profile.monthly_revenue,
            credit=profile.credit_score,
            time=profile.time_in_business_months,
            restricted=profile.industry in RESTRICTED_INDUSTRIES,
        )


@dataclass(frozen=True)
class Gate:
    name: str
    predicate: Callable[[ApplicantFacts], bool]
    build: Callable[[ApplicantFacts], FundingProfile]


def _funded(tier: str, product: str, rates: str, message: str) -> Callable[[float], FundingProfile]:
    def make(max_amount: float) -> FundingProfile:
        return FundingProfile(
            tier=tier,
            product=product,
            max_amount=max_amount,
            rate_descriptor=rates,
            message=message,
        )

    return make


_prime = _funded(
    "Prime Borrower",
    "SBA 7(a) / Bank Term Loan",
    "Prime + 2-3%",
    "You are in the top 10% of applicants. You qualify for the lowest rates and longest terms (10 years+) available on the market.",
)
_growth = _funded(
    "Growth Capital",
    "Business Line of Credit",
    "12% - 25% APR",
    "You've graduated from high-risk lending. You qualify for revolving credit lines that you only pay interest on what you use.",
)
_working = _funded(
    "Working Capital",
    "Short-Term Business Loan",
    "15% - 35% APR",
    "You qualify for working capital financing. These are fast-funding options with flexible terms to boost your business.",
)
_cash_flow = _funded(
    "Cash Flow Financing",
    "Revenue Based Advance (MCA)",
    "Factor Rate 1.20+",
    "Your consistent revenue is your biggest asset right now. We can lend against your cash flow, regardless of your credit score.",
)
_startup = _funded(
    "Startup Capital",
    "0% Interest Credit Stacking",
    "0% (12-21 Month Intro)",
    "You are the perfect candidate for Credit Stacking. You can bypass the revenue requirements by leveraging your strong personal credit.",
)
_restricted_personal = _funded(
    "Restricted Niche",
    "Unsecured Personal Term Loans",
    "8% - 15% APR",
    "Your industry is restricted by most banks. We pivot to Personal Term Loans to get you funded without industry scrutiny.",
)
_restricted_high_risk = _funded(
    "High Risk",
    "High Risk MCA / Private Money",
    "Factor Rate 1.40+",
    "Your industry is tough to fund. We have specific private lenders who will work with you, but the cost of capital will be higher.",
)


# --- Foundation building paths (no direct funding capacity) ---

_CREDIT_CARD_STACKING = AlternativeOption(
    name="Business Credit Card Stacking",
    description="Open several 0% intro APR business cards at once once your business is old enough to report.",
    url="/partners/credit-stacking",
)
_BUSINESS_CREDIT_BUILDER = AlternativeOption(
    name="Business Credit Builder",
    description="Establish D&B, Experian Business and Equifax Business tradelines under your EIN.",
    url="/partners/business-credit-builder",
)
_CREDIT_OPTIMIZATION = AlternativeOption(
    name="Credit Optimization Program",
    description="Utilization and inquiry cleanup that typically lifts scores 30-60 points in 60-90 days.",
    url="/partners/credit-optimization",
)
_CREDIT_RESTORATION = AlternativeOption(
    name="Credit Restoration Service",
    description="Dispute inaccurate collections, late payments and charge-offs with all three bureaus.",
    url="/partners/credit-restoration",
)
_SECURED_CARD = AlternativeOption(
    name="Secured Business Card",
    description="A deposit-backed card that reports positive payment history every month.",
    url="/partners/secured-card",
)
_REVENUE_ACCELERATOR = AlternativeOption(
    name="Revenue Growth Accelerator",
    description="Merchant processing and invoicing tools that make deposits visible to lenders.",
    url="/partners/revenue-accelerator",
)
_FUNDING_READINESS = AlternativeOption(
    name="Funding Readiness Coaching",
    description="A 90-day plan covering credit, bank statements and business setup.",
    url="/partners/funding-readiness",
)


def _with_highlight(option: AlternativeOption) -> AlternativeOption:
    return option.model_copy(update={"highlight": True})


def _foundation(
    product: str,
    rates: str,
    reason: str,
    message: str,
    options: list[AlternativeOption],
    cta: FoundationCTA,
) -> Callable[[ApplicantFacts], FundingProfile]:
    def build(_: ApplicantFacts) -> FundingProfile:
        return FundingProfile(
            tier=FOUNDATION_TIER,
            product=product,
            max_amount=0,
            rate_descriptor=rates,
            message=message,
            is_foundation_building=True,
            foundation_reason=reason,
            alternative_options=list(options),
            foundation_cta=cta,
        )

    return build


_foundation_stacking = _foundation(
    product="Credit Stacking Preparation",
    rates="0% intro APR once the business reaches 6 months",
    reason="Strong personal credit, but the business is less than 6 months old.",
    message="Your credit is strong enough for 0% funding. A few more months in business and a reporting tradeline unlock it.",
    options=[_with_highlight(_CREDIT_CARD_STACKING), _BUSINESS_CREDIT_BUILDER],
    cta=FoundationCTA(
        label="Reserve Your Stacking Spot",
        url="/partners/credit-stacking",
        description="Lock in a credit stacking review for the month your business turns 6 months old.",
    ),
)
_foundation_optimization = _foundation(
    product="Credit Optimization",
    rates="Target score 650+ unlocks working capital",
    reason="Credit score between 550 and 649.",
    message="You are close. Raising your score above 650 moves you into working capital and line-of-credit programs.",
    options=[_with_highlight(_CREDIT_OPTIMIZATION), _BUSINESS_CREDIT_BUILDER, _SECURED_CARD],
    cta=FoundationCTA(
        label="Start Credit Optimization",
        url="/partners/credit-optimization",
        description="Get a free score review and a personalized 60-day optimization plan.",
    ),
)
_foundation_restoration = _foundation(
    product="Credit Restoration",
    rates="Rebuild toward 550+ before applying",
    reason="Credit score below 550.",
    message="Standard financing is difficult right now. Restoring your credit is the fastest path to real funding offers.",
    options=[_with_highlight(_CREDIT_RESTORATION), _SECURED_CARD],
    cta=FoundationCTA(
        label="Begin Credit Restoration",
        url="/partners/credit-restoration",
        description="Speak with a restoration specialist about removing negative items.",
    ),
)
_foundation_revenue = _foundation(
    product="Revenue Building",
    rates="$10,000+ monthly revenue unlocks cash flow financing",
    reason="Monthly revenue below $10,000.",
    message="Your credit qualifies. Growing and documenting monthly deposits above $10,000 opens revenue-based programs.",
    options=[_with_highlight(_REVENUE_ACCELERATOR), _BUSINESS_CREDIT_BUILDER],
    cta=FoundationCTA(
        label="Grow Verified Revenue",
        url="/partners/revenue-accelerator",
        description="Set up processing that shows lenders consistent monthly deposits.",
    ),
)
_foundation_general = _foundation(
    product="Credit Repair / Secured Card",
    rates="N/A",
    reason="Profile does not yet meet any funding program minimums.",
    message="Based on your current profile, standard financing is difficult. We recommend focusing on building your credit foundation first.",
    options=[_with_highlight(_FUNDING_READINESS), _SECURED_CARD, _BUSINESS_CREDIT_BUILDER],
    cta=FoundationCTA(
        label="Get Funding Ready",
        url="/partners/funding-readiness",
        description="Book a free call to map out your path to your first funding offer.",
    ),
)


GATES: tuple[Gate, ...] = (
    Gate(
        "prime_borrower",
        lambda f: f.time >= 24 and f.revenue >= 40_000 and f.credit >= 680 and not f.restricted,
        lambda f: _prime(PRIME_MAX_AMOUNT),
    ),
    Gate(
        "growth_capital",
        lambda f: f.time >= 12 and f.revenue >= 25_000 and f.credit >= 650 and not f.restricted,
        lambda f: _growth(f.revenue * 3),
    ),
    Gate(
        "working_capital",
        lambda f: f.time >= 6 and f.revenue >= 10_000 and f.credit >= 650 and not f.restricted,
        lambda f: _working(f.revenue * 2),
    ),
    Gate(
        "cash_flow_financing",
        lambda f: f.time >= 6 and f.revenue >= 10_000 and f.credit < 650,
        lambda f: _cash_flow(f.revenue * 1.5),
    ),
    # No restricted-industry exclusion here, unlike the bank/fintech gates above.
    Gate(
        "startup_capital",
        lambda f: f.credit >= 680 and f.time < 12,
        lambda f: _startup(STARTUP_MAX_AMOUNT),
    ),
    Gate(
        "restricted_personal_term",
        lambda f: f.restricted and f.credit >= 700,
        lambda f: _restricted_personal(RESTRICTED_PERSONAL_MAX_AMOUNT),
    ),
    Gate(
        "restricted_high_risk",
        lambda f: f.restricted,
        lambda f: _restricted_high_risk(max(f.revenue * 0.5, HIGH_RISK_MIN_AMOUNT)),
    ),
    Gate(
        "foundation_credit_stacking",
        lambda f: f.credit >= 650 and f.time < 6,
        _foundation_stacking,
    ),
    Gate(
        "foundation_credit_optimization",
        lambda f: 550 <= f.credit < 650,
        _foundation_optimization,
    ),
    Gate(
        "foundation_credit_restoration",
        lambda f: 0 < f.credit < 550,
        _foundation_restoration,
    ),
    Gate(
        "foundation_revenue_building",
        lambda f: f.revenue < 10_000 and f.credit >= 600 and f.time >= 6,
        _foundation_revenue,
    ),
    Gate(
        "foundation_general",
        lambda f: True,
        _foundation_general,
    ),
)

GATES_BY_NAME: dict[str, Gate] = {g.name: g for g in GATES}


def to_applicant_profile(profile: Union[ApplicantProfile, Mapping[str, Any], None]) -> ApplicantProfile:
    """Accept a model or a raw camelCase/snake_case mapping. Anything unreadable becomes an empty profile."""
    if isinstance(profile, ApplicantProfile):
        return profile
    if isinstance(profile, Mapping):
        try:
            return ApplicantProfile.model_validate(dict(profile))
        except ValidationError:
            logger.warning("Unreadable applicant profile, classifying as empty: %r", profile)
    return ApplicantProfile()


def evaluate_gates(profile: Union[ApplicantProfile, Mapping[str, Any], None]) -> list[str]:
    """Names of every gate whose predicate holds, in table order. The first one is the one classify() uses."""
    facts = ApplicantFacts.from_profile(to_applicant_profile(profile))
    return [g.name for g in GATES if g.predicate(facts)]


def _first_match(facts: ApplicantFacts) -> Gate:
    for gate in GATES:
        if gate.predicate(facts):
            return gate
    # foundation_general always matches
    raise AssertionError("gate table has no catch-all")


def classify(profile: Union[ApplicantProfile, Mapping[str, Any], None]) -> FundingProfile:
    """
    Return the funding profile for the first gate the applicant clears.
    Accepts an ApplicantProfile or a mapping; never raises for bad field values.
    """
    applicant = to_applicant_profile(profile)
    facts = ApplicantFacts.from_profile(applicant)
    gate = _first_match(facts)
    logger.debug(
        "Classified applicant | gate=%s revenue=%d credit=%d months=%d restricted=%s",
        gate.name, facts.revenue, facts.credit, facts.time, facts.restricted,
    )
    return gate.build(facts)


def classify_with_gate(
    profile: Union[ApplicantProfile, Mapping[str, Any], None],
) -> tuple[str, FundingProfile]:
    """Same as classify(), also returning the matched gate name for auditing."""
    facts = ApplicantFacts.from_profile(to_applicant_profile(profile))
    gate = _first_match(facts)
    return gate.name, gate.build(facts)
