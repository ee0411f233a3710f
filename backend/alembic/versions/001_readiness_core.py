"""Readiness submissions, items and quick risk capture

Revision ID: 001_readiness_core
Revises:
Create Date: 2026-10-19

Creates:
  - readiness_submissions (one per project)
  - readiness_items (checklist rows; comments + nested risks as JSON)
  - project_risk_captures (project-level quick risk capture)
"""
from alembic import op
import sqlalchemy as sa

revision = "001_readiness_core"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "readiness_submissions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.String(100), nullable=False, unique=True),
        sa.Column("project_name", sa.String(400), nullable=False),
        sa.Column("assessment_type", sa.String(100), nullable=False, server_default="project_readiness"),
        sa.Column("submitted_by", sa.String(200), nullable=False),
        sa.Column("submitted_at", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(30), nullable=False, server_default="submitted"),
        sa.Column("overall_comment", sa.Text()),
        sa.Column("verifier_name", sa.String(200)),
        sa.Column("verified_at", sa.DateTime()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "readiness_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "submission_id", sa.Integer(),
            sa.ForeignKey("readiness_submissions.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("item_key", sa.String(200), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("user_status", sa.String(30), nullable=False, server_default="tidak_tersedia"),
        sa.Column("user_comments", sa.JSON()),
        sa.Column("user_comment", sa.Text()),
        sa.Column("verifier_status", sa.String(30)),
        sa.Column("verifier_comments", sa.JSON()),
        sa.Column("verifier_comment", sa.Text()),
        sa.Column("verifier_name", sa.String(200)),
        sa.Column("verified_at", sa.DateTime()),
        sa.Column("risk_capture", sa.JSON()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_readiness_items_submission", "readiness_items", ["submission_id", "position"])

    op.create_table(
        "project_risk_captures",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.String(100), nullable=False, unique=True),
        sa.Column("project_name", sa.String(400)),
        sa.Column("risks", sa.JSON()),
        sa.Column("completed_at", sa.DateTime()),
        sa.Column("verifier_name", sa.String(200)),
        sa.Column("verified_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("project_risk_captures")
    op.drop_index("ix_readiness_items_submission", table_name="readiness_items")
    op.drop_table("readiness_items")
    op.drop_table("readiness_submissions")
