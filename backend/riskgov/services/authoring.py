"""Submitter-side save: merge form edits into stored items."""
from __future__ import annotations

import uuid

from riskgov.schemas.readiness import ReadinessItem, SubmitterItemEdit
from riskgov.schemas.risk_capture import RiskEntry
from riskgov.services.validation import validate_risks


def _find_stored(
    stored: list[ReadinessItem], used: set[int], edit: SubmitterItemEdit
) -> ReadinessItem | None:
    if edit.id:
        for idx, item in enumerate(stored):
            if idx not in used and item.id == edit.id:
                used.add(idx)
                return item
    for idx, item in enumerate(stored):
        if idx not in used and item.category == edit.category and item.title == edit.title:
            used.add(idx)
            return item
    return None


RISK_VERIFIER_FIELDS = ("is_verified", "verifier_comment", "verifier_name", "verified_at")


def keep_risk_verification(stored: list[RiskEntry], incoming: list[RiskEntry]) -> list[RiskEntry]:
    """Verifier fields of each incoming risk come from the stored risk with the same id.

    Risks the store has never seen start unverified.
    """
    by_id = {risk.id: risk for risk in stored}
    result = []
    for risk in incoming:
        previous = by_id.get(risk.id)
        if previous is not None:
            update = {name: getattr(previous, name) for name in RISK_VERIFIER_FIELDS}
        else:
            update = {name: RiskEntry.model_fields[name].default for name in RISK_VERIFIER_FIELDS}
        result.append(risk.model_copy(update=update))
    return result


def apply_submitter_edits(
    stored: list[ReadinessItem], edits: list[SubmitterItemEdit]
) -> list[ReadinessItem]:
    """Return the new item list; `edits` is the full checklist as the form holds it.

    Submitter-owned fields come from the edit. Verifier fields are always
    carried over from the stored item and can never be set from here.
    """
    used: set[int] = set()
    result: list[ReadinessItem] = []
    for edit in edits:
        previous = _find_stored(stored, used, edit)
        validate_risks(edit.risk_capture, prefix=f"{edit.category}.{edit.title}.")

        base = {
            "id": edit.id or (previous.id if previous else uuid.uuid4().hex[:12]),
            "category": edit.category,
            "title": edit.title,
            "user_status": edit.user_status,
            "user_comments": list(edit.user_comments),
            "risk_capture": keep_risk_verification(
                previous.risk_capture if previous else [], edit.risk_capture,
            ),
        }
        if previous is not None:
            base.update(
                verifier_status=previous.verifier_status,
                verifier_comments=list(previous.verifier_comments),
                verifier_name=previous.verifier_name,
                verified_at=previous.verified_at,
            )
        result.append(ReadinessItem(**base))
    return result
