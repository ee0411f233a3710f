"""
Readiness repository — the read/write boundary of the workflow.

Everything above this module works on pydantic values; everything below is
SQLAlchemy rows. A failed save rolls the session back and re-raises, so the
caller still holds its unchanged working copy and can retry.

No locking: two verifiers saving the same submission is last-write-wins.
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from riskgov.errors import SubmissionNotFoundError
from riskgov.models.readiness import (
    ProjectRiskCaptureRecord,
    ReadinessItemRecord,
    ReadinessSubmissionRecord,
)
from riskgov.schemas.readiness import ReadinessItem, ReadinessSubmission, VerificationPayload
from riskgov.schemas.risk_capture import QuickRiskCaptureOut, RiskEntry
from riskgov.services.record_adapter import normalize_item, normalize_risk, to_record
from riskgov.services.status_machine import INITIAL_STATUS

log = logging.getLogger(__name__)


# ═══════════════════ ROW <-> VALUE ═══════════════════

def _submission_out(rec: ReadinessSubmissionRecord) -> ReadinessSubmission:
    return ReadinessSubmission.model_validate(rec)


def _item_out(rec: ReadinessItemRecord) -> ReadinessItem:
    return normalize_item({
        "id": rec.item_key,
        "category": rec.category,
        "title": rec.title,
        "user_status": rec.user_status,
        "user_comments": rec.user_comments,
        "user_comment": rec.user_comment,
        "verifier_status": rec.verifier_status,
        "verifier_comments": rec.verifier_comments,
        "verifier_comment": rec.verifier_comment,
        "verifier_name": rec.verifier_name,
        "verified_at": rec.verified_at,
        "risk_capture": rec.risk_capture,
        "created_at": rec.created_at,
    })


def _item_row(submission_id: int, position: int, item: ReadinessItem) -> ReadinessItemRecord:
    data = to_record(item)
    return ReadinessItemRecord(
        submission_id=submission_id,
        item_key=item.id,
        position=position,
        category=item.category,
        title=item.title,
        user_status=item.user_status,
        user_comments=data["user_comments"],
        user_comment=None,
        verifier_status=item.verifier_status,
        verifier_comments=data["verifier_comments"],
        verifier_comment=None,
        verifier_name=item.verifier_name,
        verified_at=item.verified_at,
        risk_capture=data["risk_capture"],
    )


async def _submission_row(s: AsyncSession, project_id: str) -> ReadinessSubmissionRecord | None:
    q = select(ReadinessSubmissionRecord).where(ReadinessSubmissionRecord.project_id == project_id)
    return (await s.execute(q)).scalar_one_or_none()


async def _replace_items(s: AsyncSession, submission_id: int, items: list[ReadinessItem]) -> None:
    await s.execute(delete(ReadinessItemRecord).where(ReadinessItemRecord.submission_id == submission_id))
    s.add_all([_item_row(submission_id, pos, item) for pos, item in enumerate(items)])


async def _commit(s: AsyncSession, what: str, project_id: str) -> None:
    try:
        await s.commit()
    except Exception:
        await s.rollback()
        log.error("Saving %s for project %s failed; rolled back", what, project_id, exc_info=True)
        raise


# ═══════════════════ READ ═══════════════════

async def get_submission(s: AsyncSession, project_id: str) -> ReadinessSubmission | None:
    rec = await _submission_row(s, project_id)
    return _submission_out(rec) if rec else None


async def list_submissions(s: AsyncSession) -> list[ReadinessSubmission]:
    q = select(ReadinessSubmissionRecord).order_by(ReadinessSubmissionRecord.submitted_at.desc())
    return [_submission_out(r) for r in (await s.execute(q)).scalars().all()]


async def load_items(s: AsyncSession, project_id: str) -> list[ReadinessItem]:
    q = (
        select(ReadinessItemRecord)
        .join(ReadinessSubmissionRecord, ReadinessItemRecord.submission_id == ReadinessSubmissionRecord.id)
        .where(ReadinessSubmissionRecord.project_id == project_id)
        .order_by(ReadinessItemRecord.position, ReadinessItemRecord.id)
    )
    return [_item_out(r) for r in (await s.execute(q)).scalars().all()]


async def get_quick_capture(s: AsyncSession, project_id: str) -> QuickRiskCaptureOut | None:
    q = select(ProjectRiskCaptureRecord).where(ProjectRiskCaptureRecord.project_id == project_id)
    rec = (await s.execute(q)).scalar_one_or_none()
    if rec is None:
        return None
    return QuickRiskCaptureOut(
        project_id=rec.project_id,
        project_name=rec.project_name,
        risks=[normalize_risk(r) for r in rec.risks or []],
        completed_at=rec.completed_at,
        verifier_name=rec.verifier_name,
        verified_at=rec.verified_at,
    )


async def list_quick_captures(s: AsyncSession) -> dict[str, QuickRiskCaptureOut]:
    rows = (await s.execute(select(ProjectRiskCaptureRecord.project_id))).scalars().all()
    result = {}
    for project_id in rows:
        capture = await get_quick_capture(s, project_id)
        if capture is not None:
            result[project_id] = capture
    return result


# ═══════════════════ WRITE ═══════════════════

async def save_readiness(
    s: AsyncSession, submission: ReadinessSubmission, items: list[ReadinessItem]
) -> ReadinessSubmission:
    """Upsert the submission header and replace its items."""
    rec = await _submission_row(s, submission.project_id)
    if rec is None:
        rec = ReadinessSubmissionRecord(project_id=submission.project_id)
        s.add(rec)
    rec.project_name = submission.project_name
    rec.assessment_type = submission.assessment_type
    rec.submitted_by = submission.submitted_by
    rec.submitted_at = submission.submitted_at
    rec.status = submission.status
    rec.overall_comment = submission.overall_comment
    rec.verifier_name = submission.verifier_name
    rec.verified_at = submission.verified_at
    await s.flush()

    await _replace_items(s, rec.id, items)
    await _commit(s, "readiness", submission.project_id)
    await s.refresh(rec)
    log.info("Saved readiness for project %s: %d item(s), status=%s",
             submission.project_id, len(items), rec.status)
    return _submission_out(rec)


async def save_verification(s: AsyncSession, payload: VerificationPayload) -> ReadinessSubmission:
    rec = await _submission_row(s, payload.project_id)
    if rec is None:
        raise SubmissionNotFoundError(payload.project_id)
    rec.status = payload.status
    rec.overall_comment = payload.overall_comment
    if payload.status != INITIAL_STATUS:
        rec.verifier_name = payload.verifier_name
        rec.verified_at = payload.verified_at

    await _replace_items(s, rec.id, list(payload.items))
    await _commit(s, "verification", payload.project_id)
    await s.refresh(rec)
    return _submission_out(rec)


async def save_quick_capture(
    s: AsyncSession,
    project_id: str,
    risks: list[RiskEntry],
    *,
    project_name: str | None = None,
    verifier_name: str | None = None,
    verified_at: datetime | None = None,
) -> QuickRiskCaptureOut:
    q = select(ProjectRiskCaptureRecord).where(ProjectRiskCaptureRecord.project_id == project_id)
    rec = (await s.execute(q)).scalar_one_or_none()
    if rec is None:
        rec = ProjectRiskCaptureRecord(project_id=project_id)
        s.add(rec)
    if project_name is not None:
        rec.project_name = project_name
    rec.risks = [r.model_dump(mode="json") for r in risks]
    rec.completed_at = datetime.utcnow()
    if verifier_name is not None:
        rec.verifier_name = verifier_name
        rec.verified_at = verified_at or datetime.utcnow()

    await _commit(s, "quick risk capture", project_id)
    return await get_quick_capture(s, project_id)
