"""
Decision status changes. Any status may move to any other; the only coupled field is
fundedDate, which is stamped on entering `funded` and cleared on leaving it.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from schemas.approval import DecisionStatus, StatusChange, UnderwritingDecisionRaw
from services.reconciler import DecisionInput, to_decision

logger = logging.getLogger(__name__)


def parse_status(value: Union[str, DecisionStatus]) -> DecisionStatus:
    """Raise ValueError for anything outside the five known statuses."""
    if isinstance(value, DecisionStatus):
        return value
    try:
        return DecisionStatus(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in DecisionStatus)
        raise ValueError(f"Unknown decision status {value!r}; expected one of: {allowed}") from None


def status_updates(
    raw: DecisionInput,
    new_status: Union[str, DecisionStatus],
    now: Optional[datetime] = None,
) -> StatusChange:
    """Fields to persist for moving a decision to new_status."""
    decision = to_decision(raw)
    target = parse_status(new_status)
    has_funded_date = decision.funded_date not in (None, "")

    if target is DecisionStatus.FUNDED and not has_funded_date:
        stamp = now or datetime.now(timezone.utc)
        return StatusChange(status=target, funded_date=stamp, sets_funded_date=True)
    if target is not DecisionStatus.FUNDED and has_funded_date:
        return StatusChange(status=target, clears_funded_date=True)
    return StatusChange(status=target)


def apply_status_change(
    raw: DecisionInput,
    new_status: Union[str, DecisionStatus],
    now: Optional[datetime] = None,
) -> UnderwritingDecisionRaw:
    """Copy of the decision with the status change applied. The input is not modified."""
    decision = to_decision(raw)
    change = status_updates(decision, new_status, now=now)
    update: dict = {"status": change.status.value}
    if change.sets_funded_date or change.clears_funded_date:
        update["funded_date"] = change.funded_date
    logger.info(
        "Decision %s status %s -> %s | funded_date_set=%s funded_date_cleared=%s",
        decision.id, decision.status, change.status.value,
        change.sets_funded_date, change.clears_funded_date,
    )
    return decision.model_copy(update=update)
