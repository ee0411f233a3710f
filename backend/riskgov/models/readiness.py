"""
Readiness persistence.

Tables: readiness_submissions, readiness_items, project_risk_captures

Comment lists and nested risk entries are stored as JSON. The single
`verifier_comment` / `user_comment` text columns hold rows written before
comment lists existed; new writes leave them NULL.
"""
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ReadinessSubmissionRecord(Base):
    __tablename__ = "readiness_submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    project_name: Mapped[str] = mapped_column(String(400), nullable=False)
    assessment_type: Mapped[str] = mapped_column(String(100), default="project_readiness", nullable=False)

    submitted_by: Mapped[str] = mapped_column(String(200), nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    status: Mapped[str] = mapped_column(String(30), default="submitted", nullable=False)
    overall_comment: Mapped[str | None] = mapped_column(Text)

    verifier_name: Mapped[str | None] = mapped_column(String(200))
    verified_at: Mapped[datetime | None] = mapped_column(DateTime)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class ReadinessItemRecord(Base):
    __tablename__ = "readiness_items"
    __table_args__ = (
        Index("ix_readiness_items_submission", "submission_id", "position"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("readiness_submissions.id", ondelete="CASCADE"), nullable=False
    )
    item_key: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)

    # ── submitter ──
    user_status: Mapped[str] = mapped_column(String(30), default="tidak_tersedia", nullable=False)
    user_comments: Mapped[list | None] = mapped_column(JSON, default=list)
    user_comment: Mapped[str | None] = mapped_column(Text)

    # ── verifier ──
    verifier_status: Mapped[str | None] = mapped_column(String(30))
    verifier_comments: Mapped[list | None] = mapped_column(JSON, default=list)
    verifier_comment: Mapped[str | None] = mapped_column(Text)
    verifier_name: Mapped[str | None] = mapped_column(String(200))
    verified_at: Mapped[datetime | None] = mapped_column(DateTime)

    risk_capture: Mapped[list | None] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class ProjectRiskCaptureRecord(Base):
    __tablename__ = "project_risk_captures"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    project_name: Mapped[str | None] = mapped_column(String(400))
    risks: Mapped[list | None] = mapped_column(JSON, default=list)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime)
    verifier_name: Mapped[str | None] = mapped_column(String(200))
    verified_at: Mapped[datetime | None] = mapped_column(DateTime)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
