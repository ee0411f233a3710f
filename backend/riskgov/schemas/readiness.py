from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from riskgov.schemas.risk_capture import RiskDistribution, RiskEntry

ReadinessStatus = Literal["lengkap", "parsial", "tidak_tersedia"]
SubmissionStatus = Literal["submitted", "under_review", "needs_revision", "verified"]

READINESS_STATUSES = ("lengkap", "parsial", "tidak_tersedia")
SUBMISSION_STATUSES = ("submitted", "under_review", "needs_revision", "verified")


# ═══════════════════ TEMPLATE ═══════════════════

class ItemDefinition(BaseModel):
    id: str
    title: str

    model_config = {"frozen": True}


class Category(BaseModel):
    id: str
    title: str
    icon_ref: str | None = None
    items: tuple[ItemDefinition, ...] = ()

    model_config = {"frozen": True}


class ReadinessTemplate(BaseModel):
    assessment_type: str
    version: str = "1"
    categories: tuple[Category, ...] = ()

    model_config = {"frozen": True}


# ═══════════════════ ITEMS ═══════════════════

class Comment(BaseModel):
    id: str
    text: str
    created_at: datetime | None = None


class ReadinessItem(BaseModel):
    id: str
    category: str
    title: str
    user_status: ReadinessStatus = "tidak_tersedia"
    user_comments: list[Comment] = []

    # verifier-owned
    verifier_status: ReadinessStatus | None = None
    verifier_comments: list[Comment] = []
    verifier_name: str | None = None
    verified_at: datetime | None = None

    risk_capture: list[RiskEntry] = []


class SubmitterItemEdit(BaseModel):
    """What the authoring form may send back for one item."""
    id: str | None = None
    category: str
    title: str
    user_status: ReadinessStatus = "tidak_tersedia"
    user_comments: list[Comment] = []
    risk_capture: list[RiskEntry] = []


class ReadinessSaveRequest(BaseModel):
    project_name: str = Field(..., min_length=1, max_length=400)
    submitted_by: str = Field(..., min_length=1, max_length=200)
    assessment_type: str | None = None
    items: list[SubmitterItemEdit]


# ═══════════════════ SUBMISSION ═══════════════════

class ReadinessSubmission(BaseModel):
    project_id: str
    project_name: str
    submitted_by: str
    submitted_at: datetime
    status: SubmissionStatus = "submitted"
    assessment_type: str = "project_readiness"
    overall_comment: str | None = None
    verifier_name: str | None = None
    verified_at: datetime | None = None

    model_config = {"from_attributes": True}


class SubmissionCounts(BaseModel):
    total: int = 0
    pending: int = 0
    under_review: int = 0
    verified: int = 0
    revision: int = 0


# ═══════════════════ PROGRESS ═══════════════════

class Progress(BaseModel):
    completed: int = 0
    partial: int = 0
    total: int = 0
    percentage: int = 0

    model_config = {"frozen": True}


class VerificationProgress(Progress):
    verified: int = 0


class CategoryProgress(BaseModel):
    category: str
    title: str
    in_template: bool = True
    progress: Progress
    verification: VerificationProgress


# ═══════════════════ VERIFICATION ═══════════════════

class VerifierIdentity(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    user_id: str | None = None

    model_config = {"frozen": True}


class VerificationPayload(BaseModel):
    """Result of finalize(); the caller persists it."""
    project_id: str
    items: tuple[ReadinessItem, ...]
    status: SubmissionStatus
    overall_comment: str | None = None
    verifier_name: str
    verified_at: datetime
    risk_capture_summary: RiskDistribution

    model_config = {"frozen": True}


class ItemVerificationUpdate(BaseModel):
    verifier_status: ReadinessStatus | None = None
    comment: str | None = None
    risk_capture: list[RiskEntry] | None = None


class VerificationRequest(BaseModel):
    status: SubmissionStatus
    overall_comment: str | None = None
    verifier: VerifierIdentity
    items: list[ReadinessItem] | None = None


class ReadinessDetailOut(BaseModel):
    submission: ReadinessSubmission | None = None
    items: list[ReadinessItem]
    progress: Progress
    verification_progress: VerificationProgress
    categories: list[CategoryProgress] = []
    can_edit: bool = True
