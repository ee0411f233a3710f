"""
Verification workflow — verifier-side edits over an in-memory draft.

Every operation returns a new item list; the input list and its items are
left untouched so a failed save never corrupts the caller's working copy.
Only verifier-owned fields are written here (verifier_status,
verifier_comments, verifier_name, verified_at) plus the nested risk list.

Concurrent verifiers are not arbitrated: whichever payload is saved last
wins at the repository.
"""
from __future__ import annotations

import logging
from datetime import datetime

from riskgov.errors import IncompleteVerificationError, ItemNotFoundError
from riskgov.schemas.readiness import (
    Comment,
    ReadinessItem,
    ReadinessSubmission,
    VerificationPayload,
    VerifierIdentity,
)
from riskgov.schemas.risk_capture import RiskEntry
from riskgov.services.record_adapter import comment_id
from riskgov.services.risk_aggregator import aggregate, current_level, nested_risks
from riskgov.services.status_machine import transition

log = logging.getLogger(__name__)


def _index_of(items: list[ReadinessItem], item_id: str) -> int:
    for idx, item in enumerate(items):
        if item.id == item_id:
            return idx
    raise ItemNotFoundError(item_id)


def _replace(items: list[ReadinessItem], item_id: str, **update) -> list[ReadinessItem]:
    idx = _index_of(items, item_id)
    result = list(items)
    result[idx] = items[idx].model_copy(update=update)
    return result


def set_verifier_status(items: list[ReadinessItem], item_id: str, status: str | None) -> list[ReadinessItem]:
    return _replace(items, item_id, verifier_status=status)


def set_verifier_comment(
    items: list[ReadinessItem],
    item_id: str,
    text: str,
    *,
    now: datetime | None = None,
) -> list[ReadinessItem]:
    """Append a verifier comment (list form). Blank text leaves the item as is."""
    idx = _index_of(items, item_id)
    if not text or not text.strip():
        return list(items)
    now = now or datetime.utcnow()
    item = items[idx]
    comment = Comment(id=comment_id("verifier", item.id, now), text=text.strip(), created_at=now)
    return _replace(items, item_id, verifier_comments=[*item.verifier_comments, comment])


def set_risk_capture(items: list[ReadinessItem], item_id: str, risks: list[RiskEntry]) -> list[ReadinessItem]:
    return _replace(items, item_id, risk_capture=list(risks))


def unverified_items(items: list[ReadinessItem]) -> list[ReadinessItem]:
    return [item for item in items if item.verifier_status is None]


def finalize(
    submission: ReadinessSubmission,
    items: list[ReadinessItem],
    overall_status: str,
    overall_comment: str | None,
    verifier: VerifierIdentity,
    *,
    now: datetime | None = None,
    strict: bool = False,
) -> VerificationPayload:
    """Build the verification payload for persistence.

    Marking the submission `verified` requires a verifier status on every
    item. Items carrying a verifier status are stamped with the verifier's
    name and the verification time; the risk summary uses the current
    (risiko_saat_ini) snapshot of every nested risk entry.
    """
    if overall_status == "verified":
        missing = unverified_items(items)
        if missing:
            raise IncompleteVerificationError([i.id for i in missing])

    now = now or datetime.utcnow()
    stamped_submission = transition(
        submission, overall_status,
        verifier=verifier, overall_comment=overall_comment, now=now, strict=strict,
    )

    stamped = tuple(
        item.model_copy(update={"verifier_name": verifier.name, "verified_at": now}, deep=True)
        if item.verifier_status is not None
        else item.model_copy(deep=True)
        for item in items
    )
    summary = aggregate(nested_risks(stamped), current_level)

    log.info(
        "Verification finalized for project %s by %s: status=%s, %d item(s), %d risk(s)",
        submission.project_id, verifier.name, overall_status, len(stamped), summary.total,
    )
    return VerificationPayload(
        project_id=submission.project_id,
        items=stamped,
        status=stamped_submission.status,
        overall_comment=stamped_submission.overall_comment,
        verifier_name=verifier.name,
        verified_at=now,
        risk_capture_summary=summary,
    )
