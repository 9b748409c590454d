from typing import Any

from fastapi import APIRouter, HTTPException

from schemas.requests import (
    ApprovalUpdateRequest,
    ApprovalsResponse,
    DecisionListRequest,
    DecisionListResponse,
    StatusChangeRequest,
)
from services.approval_edits import add_approval, build_approval_update, set_primary
from services.decision_board import filter_by_status, funding_summary, search_decisions
from services.ranking import headline_approval, most_recent_approval_date, sort_decisions_newest_first
from services.reconciler import migrate_approvals, needs_migration, reconcile
from services.status import status_updates

router = APIRouter(prefix="/api/decisions", tags=["decisions"])


@router.post("/approvals", response_model=dict)
async def decision_approvals(decision: dict[str, Any]):
    """Canonical approvals for a stored decision, with the headline offer split out."""
    headline = headline_approval(decision)
    body = ApprovalsResponse(
        approvals=reconcile(decision),
        best=headline.best,
        others=headline.others,
        most_recent_approval_date=most_recent_approval_date(decision),
        needs_migration=needs_migration(decision),
    )
    return body.model_dump(by_alias=True, mode="json")


@router.post("/migrate", response_model=dict)
async def migrate_decision(decision: dict[str, Any]):
    """Payload to persist so the decision is stored in canonical form from now on."""
    return migrate_approvals(decision)


@router.post("/sort", response_model=dict)
async def sort_decisions(body: DecisionListRequest):
    decisions = body.decisions
    summary = funding_summary(decisions)
    if body.status:
        try:
            decisions = filter_by_status(decisions, body.status)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    decisions = search_decisions(decisions, body.query)
    result = DecisionListResponse(decisions=sort_decisions_newest_first(decisions), summary=summary)
    return result.model_dump(by_alias=True, mode="json")


@router.post("/status", response_model=dict)
async def change_status(body: StatusChangeRequest):
    try:
        change = status_updates(body.decision, body.status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    updates = change.to_updates()
    if updates.get("fundedDate") is not None:
        updates["fundedDate"] = updates["fundedDate"].isoformat()
    return updates


@router.post("/approvals/update", response_model=dict)
async def update_approvals(body: ApprovalUpdateRequest):
    """Apply an edit and return the full list to write back (never a delta)."""
    entries = body.approvals
    try:
        if body.new_approval is not None:
            entries = add_approval(entries, body.new_approval, make_primary=body.make_primary)
        if body.primary_id:
            entries = set_primary(entries, body.primary_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Approval {e.args[0]!r} not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return build_approval_update(entries)
