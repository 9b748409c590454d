"""
Edits to a decision's approval list and the write-back payload for the decision store.

The store must always receive the full canonical list (never a delta) tagged with
schemaVersion 2; otherwise the next read falls back into legacy detection. The primary
offer is also mirrored onto the decision's flat fields, which older readers still use.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from schemas.approval import CANONICAL_SCHEMA_VERSION, ApprovalEntry
from services.ranking import rank_approvals

logger = logging.getLogger(__name__)

APPROVAL_ID_PREFIX = "appr-"

# flat decision field (camelCase) -> ApprovalEntry attribute
FLAT_FIELDS: dict[str, str] = {
    "lender": "lender",
    "advanceAmount": "advance_amount",
    "term": "term",
    "paymentFrequency": "payment_frequency",
    "factorRate": "factor_rate",
    "maxUpsell": "max_upsell",
    "totalPayback": "total_payback",
    "netAfterFees": "net_after_fees",
    "notes": "notes",
    "approvalDate": "approval_date",
}

EntryInput = Union[ApprovalEntry, Mapping[str, Any]]


def to_entry(entry: EntryInput) -> ApprovalEntry:
    if isinstance(entry, ApprovalEntry):
        return entry
    return ApprovalEntry.model_validate(dict(entry))


def _next_id(entries: list[ApprovalEntry]) -> str:
    taken = {e.id for e in entries}
    n = len(entries)
    while f"{APPROVAL_ID_PREFIX}{n}" in taken:
        n += 1
    return f"{APPROVAL_ID_PREFIX}{n}"


def add_approval(
    entries: Iterable[EntryInput],
    entry: EntryInput,
    make_primary: bool = False,
) -> list[ApprovalEntry]:
    """
    Append an offer. It becomes the sole primary when make_primary is set, when it is
    already flagged primary, or when the list has no primary yet. Entries without an id
    get the next free `appr-<n>` id; a duplicate id raises ValueError.
    """
    current = [to_entry(e) for e in entries]
    new = to_entry(entry)
    if not new.id:
        new = new.model_copy(update={"id": _next_id(current)})
    if new.id in {e.id for e in current}:
        raise ValueError(f"Approval id {new.id!r} already exists on this decision")

    promote = make_primary or new.is_primary or not any(e.is_primary for e in current)
    if promote:
        current = [e.model_copy(update={"is_primary": False}) if e.is_primary else e for e in current]
    current.append(new.model_copy(update={"is_primary": promote}))
    return current


def set_primary(entries: Iterable[EntryInput], entry_id: str) -> list[ApprovalEntry]:
    """Flag exactly entry_id as primary. Raises KeyError for an unknown id."""
    current = [to_entry(e) for e in entries]
    if entry_id not in {e.id for e in current}:
        raise KeyError(entry_id)
    return [
        e if e.is_primary == (e.id == entry_id) else e.model_copy(update={"is_primary": e.id == entry_id})
        for e in current
    ]


def normalize_primary(entries: Iterable[EntryInput]) -> list[ApprovalEntry]:
    """
    At most one primary, listed first. The first flagged entry keeps the flag; when none
    is flagged, the first entry is promoted. Remaining entries keep their order.
    """
    current = [to_entry(e) for e in entries]
    if not current:
        return []
    primary_index = next((i for i, e in enumerate(current) if e.is_primary), 0)
    flagged = sum(1 for e in current if e.is_primary)
    if flagged > 1:
        logger.warning("Dropping primary flag from %d extra approvals", flagged - 1)
    normalized = [
        e.model_copy(update={"is_primary": i == primary_index}) if e.is_primary != (i == primary_index) else e
        for i, e in enumerate(current)
    ]
    return rank_approvals(normalized)


def _flat_value(value: str) -> Optional[str]:
    return value or None


def build_approval_update(entries: Iterable[EntryInput]) -> dict[str, Any]:
    """
    Full write-back payload: schemaVersion, the canonical list, and the primary offer on the
    flat fields. With no approvals the flat fields are cleared.
    """
    normalized = normalize_primary(entries)
    primary: Optional[ApprovalEntry] = normalized[0] if normalized else None

    payload: dict[str, Any] = {
        "schemaVersion": CANONICAL_SCHEMA_VERSION,
        "additionalApprovals": [e.to_storage_dict() for e in normalized],
    }
    for flat_key, attr in FLAT_FIELDS.items():
        payload[flat_key] = _flat_value(getattr(primary, attr)) if primary else None
    return payload
