"""
Headline approval selection and newest-first ordering of decisions.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Sequence, TypeVar

from schemas.approval import ApprovalEntry, HeadlineApproval
from services.reconciler import DecisionInput, reconcile, to_decision
from utils.dates import EPOCH, parse_timestamp

D = TypeVar("D", bound=DecisionInput)


def rank_approvals(entries: Iterable[ApprovalEntry]) -> list[ApprovalEntry]:
    """Primary first; everything else keeps its stored order (sorted() is stable)."""
    return sorted(entries, key=lambda e: not e.is_primary)


def headline_approval(raw: DecisionInput) -> HeadlineApproval:
    ranked = rank_approvals(reconcile(raw))
    if not ranked:
        return HeadlineApproval()
    return HeadlineApproval(best=ranked[0], others=ranked[1:])


def _approval_date_of(item: Any) -> Any:
    if isinstance(item, ApprovalEntry):
        return item.approval_date
    if isinstance(item, Mapping):
        return item.get("approvalDate", item.get("approval_date"))
    return None


def most_recent_approval_date(raw: DecisionInput) -> datetime:
    """
    Latest parseable approval date across the decision and all stored approvals.
    Falls back to createdAt, then to the epoch, so every decision gets a sortable value.
    """
    decision = to_decision(raw)
    candidates = [decision.approval_date]
    candidates.extend(_approval_date_of(a) for a in decision.additional_approvals or [])

    dates = [d for d in (parse_timestamp(c) for c in candidates) if d is not None]
    if dates:
        return max(dates)
    return parse_timestamp(decision.created_at) or EPOCH


def sort_decisions_newest_first(decisions: Sequence[D]) -> list[D]:
    """Stable: decisions with the same most-recent date keep their incoming order."""
    return sorted(decisions, key=most_recent_approval_date, reverse=True)
