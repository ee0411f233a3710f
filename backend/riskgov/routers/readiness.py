"""
Project readiness module — /api/v1/readiness

Submitter self-assessment, verifier re-assessment, reconciliation against
the checklist template, and the derived progress figures.
"""
import io
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from riskgov.config import settings
from riskgov.database import get_session
from riskgov.errors import (
    IncompleteVerificationError,
    InvalidTransitionError,
    ItemNotFoundError,
    SubmissionLockedError,
    SubmissionNotFoundError,
    ValidationError,
)
from riskgov.schemas.readiness import (
    ItemVerificationUpdate,
    ReadinessDetailOut,
    ReadinessItem,
    ReadinessSaveRequest,
    ReadinessSubmission,
    ReadinessTemplate,
    SubmissionCounts,
    VerificationPayload,
    VerificationRequest,
)
from riskgov.services import readiness_repository as repo
from riskgov.services.authoring import apply_submitter_edits
from riskgov.services.progress import category_progress, progress, verification_progress
from riskgov.services.reconciler import reconcile
from riskgov.services.record_adapter import latest_verifier_comment
from riskgov.services.status_machine import can_edit, ensure_editable
from riskgov.services.submissions import filter_submissions, submission_counts
from riskgov.services.template_store import get_template_store
from riskgov.services.validation import validate_risks
from riskgov.services.verification import (
    finalize,
    set_risk_capture,
    set_verifier_comment,
    set_verifier_status,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/readiness", tags=["Project readiness"])


def _validation_422(exc: ValidationError) -> HTTPException:
    return HTTPException(422, {"message": "Validation failed", "errors": [e.as_dict() for e in exc.errors]})


def _template(assessment_type: str | None) -> ReadinessTemplate | None:
    return get_template_store().get(assessment_type or settings.DEFAULT_ASSESSMENT_TYPE)


async def _working_copy(
    s: AsyncSession, project_id: str
) -> tuple[ReadinessSubmission | None, ReadinessTemplate | None, list[ReadinessItem]]:
    submission = await repo.get_submission(s, project_id)
    template = _template(submission.assessment_type if submission else None)
    items = reconcile(template, await repo.load_items(s, project_id))
    return submission, template, items


# ═══════════════════ TEMPLATE ═══════════════════

@router.get("/template", response_model=ReadinessTemplate, summary="Checklist template")
async def get_template(assessment_type: str | None = Query(None)):
    template = _template(assessment_type)
    if template is None:
        raise HTTPException(404, f"Unknown assessment type '{assessment_type}'")
    return template


# ═══════════════════ SUBMISSIONS ═══════════════════

@router.get("/submissions", response_model=list[ReadinessSubmission], summary="Submissions for verification")
async def list_submissions(
    search: str | None = Query(None),
    status: str | None = Query(None),
    s: AsyncSession = Depends(get_session),
):
    return filter_submissions(await repo.list_submissions(s), search, status)


@router.get("/submissions/counts", response_model=SubmissionCounts, summary="Submission counts per status")
async def get_counts(s: AsyncSession = Depends(get_session)):
    return submission_counts(await repo.list_submissions(s))


# ═══════════════════ DETAIL ═══════════════════

@router.get("/projects/{project_id}", response_model=ReadinessDetailOut, summary="Reconciled readiness checklist")
async def get_readiness(project_id: str, s: AsyncSession = Depends(get_session)):
    submission, template, items = await _working_copy(s, project_id)
    return ReadinessDetailOut(
        submission=submission,
        items=items,
        progress=progress(items),
        verification_progress=verification_progress(items),
        categories=category_progress(template, items),
        can_edit=can_edit(submission.status) if submission else True,
    )


# ═══════════════════ SUBMITTER SAVE ═══════════════════

@router.put("/projects/{project_id}", response_model=ReadinessDetailOut, summary="Save self-assessment")
async def save_readiness(project_id: str, body: ReadinessSaveRequest, s: AsyncSession = Depends(get_session)):
    submission = await repo.get_submission(s, project_id)
    try:
        ensure_editable(submission)
    except SubmissionLockedError as exc:
        raise HTTPException(409, str(exc))

    stored = await repo.load_items(s, project_id)
    try:
        items = apply_submitter_edits(stored, body.items)
    except ValidationError as exc:
        raise _validation_422(exc)

    if submission is None:
        submission = ReadinessSubmission(
            project_id=project_id,
            project_name=body.project_name,
            submitted_by=body.submitted_by,
            submitted_at=datetime.utcnow(),
            assessment_type=body.assessment_type or settings.DEFAULT_ASSESSMENT_TYPE,
        )
    else:
        submission = submission.model_copy(update={
            "project_name": body.project_name,
            "submitted_by": body.submitted_by,
            "submitted_at": datetime.utcnow(),
        })

    await repo.save_readiness(s, submission, items)
    return await get_readiness(project_id, s)


# ═══════════════════ VERIFIER ═══════════════════

@router.patch(
    "/projects/{project_id}/items/{item_id}/verification",
    response_model=ReadinessItem,
    summary="Verify a single checklist item",
)
async def verify_item(
    project_id: str, item_id: str, body: ItemVerificationUpdate, s: AsyncSession = Depends(get_session)
):
    submission, _, items = await _working_copy(s, project_id)
    if submission is None:
        raise HTTPException(404, f"No readiness submission for project '{project_id}'")
    try:
        ensure_editable(submission)
    except SubmissionLockedError as exc:
        raise HTTPException(409, str(exc))

    try:
        if body.verifier_status is not None:
            items = set_verifier_status(items, item_id, body.verifier_status)
        if body.comment is not None:
            items = set_verifier_comment(items, item_id, body.comment)
        if body.risk_capture is not None:
            validate_risks(body.risk_capture, prefix=f"{item_id}.")
            items = set_risk_capture(items, item_id, body.risk_capture)
    except ItemNotFoundError as exc:
        raise HTTPException(404, str(exc))
    except ValidationError as exc:
        raise _validation_422(exc)

    await repo.save_readiness(s, submission, items)
    updated = next(i for i in items if i.id == item_id)
    log.info("Item %s of project %s: verifier_status=%s, comment=%r",
             item_id, project_id, updated.verifier_status, latest_verifier_comment(updated))
    return updated


@router.post(
    "/projects/{project_id}/verification",
    response_model=VerificationPayload,
    summary="Finalize verification",
)
async def finalize_verification(project_id: str, body: VerificationRequest, s: AsyncSession = Depends(get_session)):
    submission, _, items = await _working_copy(s, project_id)
    if submission is None:
        raise HTTPException(404, f"No readiness submission for project '{project_id}'")
    try:
        ensure_editable(submission)
    except SubmissionLockedError as exc:
        raise HTTPException(409, str(exc))

    if body.items is not None:
        # verifier draft: only verifier-owned fields and nested risks are taken
        drafts = {i.id: i for i in body.items}
        unknown = set(drafts) - {i.id for i in items}
        if unknown:
            raise HTTPException(404, f"Readiness item(s) not found: {', '.join(sorted(unknown))}")
        items = [
            item.model_copy(update={
                "verifier_status": drafts[item.id].verifier_status,
                "verifier_comments": drafts[item.id].verifier_comments,
                "risk_capture": drafts[item.id].risk_capture,
            })
            if item.id in drafts else item
            for item in items
        ]

    try:
        for item in items:
            validate_risks(item.risk_capture, prefix=f"{item.id}.")
        payload = finalize(
            submission, items, body.status, body.overall_comment, body.verifier,
            strict=settings.STRICT_STATUS_TRANSITIONS,
        )
    except ValidationError as exc:
        raise _validation_422(exc)
    except IncompleteVerificationError as exc:
        raise HTTPException(409, {"message": str(exc), "unverified": exc.unverified_ids})
    except InvalidTransitionError as exc:
        raise HTTPException(409, str(exc))

    try:
        await repo.save_verification(s, payload)
    except SubmissionNotFoundError as exc:
        raise HTTPException(404, str(exc))
    return payload


# ═══════════════════ EXPORT ═══════════════════

def _wb():
    from openpyxl import Workbook
    from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
    return Workbook(), Font, PatternFill, Alignment, Border, Side


@router.get("/projects/{project_id}/export", summary="Readiness checklist (Excel)")
async def export_readiness(project_id: str, s: AsyncSession = Depends(get_session)):
    submission, template, items = await _working_copy(s, project_id)
    if submission is None:
        raise HTTPException(404, f"No readiness submission for project '{project_id}'")

    wb, Font, PatternFill, Alignment, Border, Side = _wb()
    ws = wb.active
    ws.title = "Readiness"

    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)

    headers = [
        "Kategori", "Item", "Status User", "Keterangan User",
        "Status Verifier", "Catatan Verifier", "Verifier", "Tgl Verifikasi", "Jumlah Risiko",
    ]
    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        cell.border = border

    titles = {c.id: c.title for c in template.categories} if template else {}
    for row_idx, item in enumerate(items, 2):
        values = [
            titles.get(item.category, item.category),
            item.title,
            item.user_status,
            "\n".join(c.text for c in item.user_comments),
            item.verifier_status or "",
            "\n".join(c.text for c in item.verifier_comments),
            item.verifier_name or "",
            item.verified_at.isoformat() if item.verified_at else "",
            len(item.risk_capture),
        ]
        for col_idx, val in enumerate(values, 1):
            ws.cell(row=row_idx, column=col_idx, value=val).border = border

    risks_ws = wb.create_sheet("Risk Capture")
    risk_headers = [
        "Item", "Kode", "Taksonomi", "Peristiwa Risiko", "Sumber Risiko",
        "Level Awal", "Level Saat Ini", "Level Akhir",
    ]
    for col_idx, header in enumerate(risk_headers, 1):
        cell = risks_ws.cell(row=1, column=col_idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
    row_idx = 2
    for item in items:
        for risk in item.risk_capture:
            values = [
                item.title, risk.kode, risk.taksonomi, risk.peristiwa_risiko, risk.sumber_risiko,
                risk.risiko_awal.level,
                risk.risiko_saat_ini.level if risk.risiko_saat_ini else "",
                risk.resiko_akhir.level,
            ]
            for col_idx, val in enumerate(values, 1):
                risks_ws.cell(row=row_idx, column=col_idx, value=val)
            row_idx += 1

    for sheet in (ws, risks_ws):
        for col in sheet.columns:
            max_len = max(len(str(c.value or "")) for c in col)
            sheet.column_dimensions[col[0].column_letter].width = min(max_len + 3, 50)

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=readiness_{project_id}_{datetime.now().strftime('%Y%m%d_%H%M')}.xlsx"},
    )
