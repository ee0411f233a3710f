"""
Risk capture module — /api/v1/risk-capture

Per-project risk distributions (nested readiness risks + quick capture)
and the project-level quick risk capture with its verification.
"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from riskgov.database import get_session
from riskgov.errors import ItemNotFoundError, ValidationError
from riskgov.schemas.risk_capture import (
    ProjectRiskDetail,
    ProjectRiskSummary,
    QuickRiskCaptureOut,
    QuickRiskCaptureUpdate,
    QuickRiskVerificationOut,
    QuickRiskVerificationRequest,
    RiskStatistics,
)
from riskgov.services import readiness_repository as repo
from riskgov.services.authoring import keep_risk_verification
from riskgov.services.quick_capture import quick_verification_progress, set_quick_risk_verified
from riskgov.services.risk_aggregator import (
    aggregate,
    current_level,
    initial_level,
    nested_risks,
    project_risk_summary,
    residual_level,
    risk_statistics,
)
from riskgov.services.validation import validate_risks

router = APIRouter(prefix="/api/v1/risk-capture", tags=["Risk capture"])


async def _all_summaries(s: AsyncSession) -> list[ProjectRiskSummary]:
    quick = await repo.list_quick_captures(s)
    summaries = []
    for sub in await repo.list_submissions(s):
        items = await repo.load_items(s, sub.project_id)
        if not items:
            continue
        capture = quick.get(sub.project_id)
        summaries.append(project_risk_summary(
            sub.project_id, sub.project_name, items, capture.risks if capture else [],
        ))
    return summaries


# ═══════════════════ OVERVIEW ═══════════════════

@router.get("/summaries", response_model=list[ProjectRiskSummary], summary="Risk summary per project")
async def list_summaries(search: str | None = Query(None), s: AsyncSession = Depends(get_session)):
    summaries = await _all_summaries(s)
    if search:
        term = search.lower()
        summaries = [p for p in summaries if term in p.project_name.lower()]
    return summaries


@router.get("/statistics", response_model=RiskStatistics, summary="Risk statistics across projects")
async def get_statistics(s: AsyncSession = Depends(get_session)):
    return risk_statistics(await _all_summaries(s))


@router.get("/projects/{project_id}", response_model=ProjectRiskDetail, summary="Project risk detail")
async def get_project_risks(project_id: str, s: AsyncSession = Depends(get_session)):
    submission = await repo.get_submission(s, project_id)
    capture = await repo.get_quick_capture(s, project_id)
    if submission is None and capture is None:
        raise HTTPException(404, f"No risk data for project '{project_id}'")

    items = await repo.load_items(s, project_id) if submission else []
    quick_risks = capture.risks if capture else []
    all_risks = nested_risks(items) + quick_risks
    name = submission.project_name if submission else (capture.project_name or project_id)

    return ProjectRiskDetail(
        summary=project_risk_summary(project_id, name, items, quick_risks),
        initial=aggregate(all_risks, initial_level),
        current=aggregate(all_risks, current_level),
        residual=aggregate(all_risks, residual_level),
        quick_risks=quick_risks,
    )


# ═══════════════════ QUICK CAPTURE ═══════════════════

@router.get("/projects/{project_id}/quick", response_model=QuickRiskCaptureOut, summary="Quick risk capture")
async def get_quick(project_id: str, s: AsyncSession = Depends(get_session)):
    capture = await repo.get_quick_capture(s, project_id)
    if capture is None:
        raise HTTPException(404, f"No quick risk capture for project '{project_id}'")
    return capture


@router.put("/projects/{project_id}/quick", response_model=QuickRiskCaptureOut, summary="Save quick risk capture")
async def save_quick(project_id: str, body: QuickRiskCaptureUpdate, s: AsyncSession = Depends(get_session)):
    try:
        validate_risks(body.risks, require_current=True)
    except ValidationError as exc:
        raise HTTPException(422, {"message": "Validation failed", "errors": [e.as_dict() for e in exc.errors]})

    stored = await repo.get_quick_capture(s, project_id)
    risks = keep_risk_verification(stored.risks if stored else [], body.risks)
    return await repo.save_quick_capture(s, project_id, risks, project_name=body.project_name)


@router.post(
    "/projects/{project_id}/quick/verification",
    response_model=QuickRiskVerificationOut,
    summary="Verify quick risk capture",
)
async def verify_quick(
    project_id: str, body: QuickRiskVerificationRequest, s: AsyncSession = Depends(get_session)
):
    capture = await repo.get_quick_capture(s, project_id)
    if capture is None:
        raise HTTPException(404, f"No quick risk capture for project '{project_id}'")

    now = datetime.utcnow()
    risks = capture.risks
    try:
        for entry in body.items:
            risks = set_quick_risk_verified(
                risks, entry.risk_id, entry.is_verified, body.verifier_name,
                comment=entry.verifier_comment, current=entry.risiko_saat_ini, now=now,
            )
        validate_risks(risks, require_current=True)
    except ItemNotFoundError as exc:
        raise HTTPException(404, str(exc))
    except ValidationError as exc:
        raise HTTPException(422, {"message": "Validation failed", "errors": [e.as_dict() for e in exc.errors]})

    saved = await repo.save_quick_capture(
        s, project_id, risks, verifier_name=body.verifier_name, verified_at=now,
    )
    return QuickRiskVerificationOut(capture=saved, progress=quick_verification_progress(saved.risks))
