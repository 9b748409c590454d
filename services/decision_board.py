"""
Status filtering, search and totals over a list of decisions, as shown on the
approvals and funded boards.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence, Union

from schemas.approval import DecisionStatus, FundingSummary
from services.reconciler import DecisionInput, reconcile, to_decision
from services.ranking import rank_approvals
from services.status import parse_status


def filter_by_status(
    decisions: Sequence[DecisionInput],
    status: Union[str, DecisionStatus],
) -> list[DecisionInput]:
    target = parse_status(status)
    return [d for d in decisions if to_decision(d).status == target.value]


def search_decisions(decisions: Sequence[DecisionInput], query: Optional[str]) -> list[DecisionInput]:
    """Case-insensitive substring match on business name, business email and lender."""
    q = (query or "").strip().lower()
    if not q:
        return list(decisions)
    out = []
    for d in decisions:
        decision = to_decision(d)
        haystack = (
            decision.business_name or "",
            decision.business_email or "",
            str(decision.lender or ""),
        )
        if any(q in field.lower() for field in haystack):
            out.append(d)
    return out


def _amount(text: str) -> Decimal:
    try:
        value = Decimal(text.replace(",", "").replace("$", "").strip())
    except InvalidOperation:
        return Decimal(0)
    return value if value.is_finite() else Decimal(0)


def primary_advance_amount(raw: DecisionInput) -> Decimal:
    """advanceAmount of the primary approval, or the first one when none is flagged. 0 if unparseable."""
    ranked = rank_approvals(reconcile(raw))
    if not ranked:
        return Decimal(0)
    return _amount(ranked[0].advance_amount)


def funding_summary(decisions: Sequence[DecisionInput]) -> FundingSummary:
    funded = [d for d in decisions if to_decision(d).status == DecisionStatus.FUNDED.value]
    approved = sum(1 for d in decisions if to_decision(d).status == DecisionStatus.APPROVED.value)
    total = sum((primary_advance_amount(d) for d in funded), Decimal(0))
    return FundingSummary(
        total_funded=len(funded),
        total_amount=float(total),
        total_approved=approved,
    )
