"""
Submission lifecycle.

    submitted ──> under_review ──> verified (terminal)
                      │   ^
                      v   │
                  needs_revision

The data model is permissive: transition() records any status change and
only `verified` locks submitter editing. Callers that need the documented
order pass strict=True (or enable STRICT_STATUS_TRANSITIONS).
"""
from __future__ import annotations

import logging
from datetime import datetime

from riskgov.errors import InvalidTransitionError, SubmissionLockedError
from riskgov.schemas.readiness import SUBMISSION_STATUSES, ReadinessSubmission, VerifierIdentity

log = logging.getLogger(__name__)

INITIAL_STATUS = "submitted"
TERMINAL_STATUSES = frozenset({"verified"})

DOCUMENTED_TRANSITIONS: dict[str, frozenset[str]] = {
    "submitted": frozenset({"under_review"}),
    "under_review": frozenset({"verified", "needs_revision"}),
    "needs_revision": frozenset({"under_review"}),
    "verified": frozenset(),
}


def can_edit(status: str) -> bool:
    """Submitter may still change items."""
    return status not in TERMINAL_STATUSES


def ensure_editable(submission: ReadinessSubmission | None) -> None:
    if submission is not None and not can_edit(submission.status):
        raise SubmissionLockedError(submission.project_id)


def is_documented_transition(current: str, target: str) -> bool:
    return target in DOCUMENTED_TRANSITIONS.get(current, frozenset())


def transition(
    submission: ReadinessSubmission,
    target: str,
    *,
    verifier: VerifierIdentity | None = None,
    overall_comment: str | None = None,
    now: datetime | None = None,
    strict: bool = False,
) -> ReadinessSubmission:
    """Return a copy of the submission moved to `target`.

    Leaving `submitted` stamps verifier_name / verified_at when a verifier is
    given. Re-asserting the current status is always allowed.
    """
    if target not in SUBMISSION_STATUSES:
        raise InvalidTransitionError(submission.status, target)

    current = submission.status
    if current != target and not is_documented_transition(current, target):
        if strict:
            raise InvalidTransitionError(current, target)
        log.warning(
            "Project %s: undocumented status change %s -> %s accepted",
            submission.project_id, current, target,
        )

    update: dict = {"status": target}
    if overall_comment is not None:
        update["overall_comment"] = overall_comment
    if verifier is not None and target != INITIAL_STATUS:
        update["verifier_name"] = verifier.name
        update["verified_at"] = now or datetime.utcnow()
    return submission.model_copy(update=update)
