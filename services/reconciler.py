"""
Normalizes a persisted underwriting decision into one canonical list of approval offers.

Decisions written before approvals were tracked as full entries keep the primary offer in
flat fields on the decision and extra offers in a loose `additionalApprovals` list. Newer
decisions store every offer in `additionalApprovals` with an explicit isPrimary flag.

reconcile() is pure and deterministic: it runs on every read and never writes anything.
migrate_approvals() produces the payload that, once persisted, tags the record as
schemaVersion 2 so later reads skip the legacy path entirely.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, TypeAdapter

from schemas.approval import (
    CANONICAL_SCHEMA_VERSION,
    LEGACY_SCHEMA_VERSION,
    ApprovalEntry,
    ApprovalSet,
    CanonicalApprovalSet,
    LegacyApproval,
    LegacyApprovalSet,
    UnderwritingDecisionRaw,
)
from utils.coerce import to_text
from utils.dates import to_date_string, to_iso_string

logger = logging.getLogger(__name__)

PRIMARY_ID_PREFIX = "primary-"
MIGRATED_ID_PREFIX = "migrated-"

_PRIMARY_KEYS = ("isPrimary", "is_primary")

_approval_set_adapter: TypeAdapter[ApprovalSet] = TypeAdapter(ApprovalSet)

DecisionInput = Union[UnderwritingDecisionRaw, Mapping[str, Any]]


def to_decision(raw: DecisionInput) -> UnderwritingDecisionRaw:
    """Accept a model or a stored camelCase/snake_case mapping."""
    if isinstance(raw, UnderwritingDecisionRaw):
        return raw
    return UnderwritingDecisionRaw.model_validate(dict(raw))


def _as_mapping(item: Any) -> dict[str, Any]:
    """Malformed list elements are read as empty entries."""
    if isinstance(item, BaseModel):
        return item.model_dump(by_alias=True)
    if isinstance(item, Mapping):
        return dict(item)
    return {}


def _has_primary_flag(item: Any) -> bool:
    if isinstance(item, ApprovalEntry):
        return True
    return isinstance(item, Mapping) and any(k in item for k in _PRIMARY_KEYS)


def detect_schema_version(raw: DecisionInput) -> int:
    """
    A record tagged schemaVersion 2 is canonical. Otherwise the first additional approval
    decides: an isPrimary key means the list was already written back in canonical form,
    even when a stale schemaVersion 1 tag is still on the record. Everything else is legacy.
    """
    decision = to_decision(raw)
    if decision.schema_version == CANONICAL_SCHEMA_VERSION:
        return CANONICAL_SCHEMA_VERSION
    approvals = decision.additional_approvals or []
    if approvals and _has_primary_flag(approvals[0]):
        return CANONICAL_SCHEMA_VERSION
    return LEGACY_SCHEMA_VERSION


def detect_approval_set(raw: DecisionInput) -> Union[LegacyApprovalSet, CanonicalApprovalSet]:
    """Resolve the stored approvals into the tagged union once."""
    decision = to_decision(raw)
    version = detect_schema_version(decision)
    entries = [_as_mapping(item) for item in decision.additional_approvals or []]
    return _approval_set_adapter.validate_python({"schema_version": version, "entries": entries})


def _primary_from_flat_fields(decision: UnderwritingDecisionRaw) -> Optional[ApprovalEntry]:
    if not (to_text(decision.advance_amount) or to_text(decision.lender)):
        return None
    return ApprovalEntry(
        id=PRIMARY_ID_PREFIX + decision.id,
        lender=decision.lender,
        advance_amount=decision.advance_amount,
        term=decision.term,
        payment_frequency=decision.payment_frequency,
        factor_rate=decision.factor_rate,
        max_upsell=decision.max_upsell,
        total_payback=decision.total_payback,
        net_after_fees=decision.net_after_fees,
        notes=decision.notes,
        approval_date=to_date_string(decision.approval_date),
        is_primary=True,
        created_at=to_iso_string(decision.created_at),
    )


def _from_legacy(index: int, old: LegacyApproval) -> ApprovalEntry:
    return ApprovalEntry(
        id=f"{MIGRATED_ID_PREFIX}{index}",
        lender=old.lender,
        advance_amount=old.amount or old.advance_amount,
        term=old.term,
        payment_frequency=old.payment_frequency,
        factor_rate=old.factor_rate,
        max_upsell=old.max_upsell,
        total_payback=old.total_payback,
        net_after_fees=old.net_after_fees,
        notes=old.notes,
        approval_date=old.approval_date,
        is_primary=False,
        created_at=old.created_at,
    )


def upgrade_legacy(decision: UnderwritingDecisionRaw, legacy: LegacyApprovalSet) -> list[ApprovalEntry]:
    """Primary synthesized from the flat fields (if any), then each legacy entry in stored order."""
    result: list[ApprovalEntry] = []
    primary = _primary_from_flat_fields(decision)
    if primary is not None:
        result.append(primary)
    result.extend(_from_legacy(i, old) for i, old in enumerate(legacy.entries))
    return result


def reconcile(raw: DecisionInput) -> list[ApprovalEntry]:
    """
    Canonical approval list for a decision.
    Already-canonical lists are returned as stored; legacy records are upgraded in memory.
    """
    decision = to_decision(raw)
    approval_set = detect_approval_set(decision)

    if isinstance(approval_set, CanonicalApprovalSet):
        entries = list(approval_set.entries)
        primaries = sum(1 for e in entries if e.is_primary)
        if primaries > 1:
            logger.warning(
                "Decision %s has %d approvals flagged primary; the first one is used as headline",
                decision.id, primaries,
            )
        return entries

    entries = upgrade_legacy(decision, approval_set)
    logger.debug(
        "Upgraded legacy approvals | decision=%s legacy_entries=%d total=%d",
        decision.id, len(approval_set.entries), len(entries),
    )
    return entries


def migrate_approvals(raw: DecisionInput) -> dict[str, Any]:
    """
    One-time legacy -> canonical migration payload for the decision store.
    Persisting it verbatim makes every later reconcile() take the canonical path.
    """
    entries = reconcile(raw)
    return {
        "schemaVersion": CANONICAL_SCHEMA_VERSION,
        "additionalApprovals": [e.to_storage_dict() for e in entries],
    }


def needs_migration(raw: DecisionInput) -> bool:
    return detect_schema_version(raw) == LEGACY_SCHEMA_VERSION
