"""Verifier submission list: search, status filter, counts."""
from datetime import datetime

from riskgov.schemas.readiness import ReadinessSubmission
from riskgov.services.submissions import filter_submissions, submission_counts


def _sub(project_id, name, by, status="submitted"):
    return ReadinessSubmission(
        project_id=project_id, project_name=name, submitted_by=by,
        submitted_at=datetime(2026, 1, 5), status=status,
    )


SUBS = [
    _sub("P1", "Gardu Induk Cibinong", "Budi Santoso"),
    _sub("P2", "Jaringan Fiber Bekasi", "Ani Wijaya", "under_review"),
    _sub("P3", "SCADA Upgrade", "Budi Hartono", "verified"),
    _sub("P4", "Gedung Kantor", "Rina", "needs_revision"),
]


def test_search_is_case_insensitive_on_project_and_submitter():
    assert [s.project_id for s in filter_submissions(SUBS, "GARDU")] == ["P1"]
    assert [s.project_id for s in filter_submissions(SUBS, "budi")] == ["P1", "P3"]


def test_status_tab():
    assert [s.project_id for s in filter_submissions(SUBS, status="verified")] == ["P3"]
    assert len(filter_submissions(SUBS, status="all")) == 4
    assert [s.project_id for s in filter_submissions(SUBS, "budi", "submitted")] == ["P1"]


def test_counts():
    counts = submission_counts(SUBS)
    assert counts.model_dump() == {
        "total": 4, "pending": 1, "under_review": 1, "verified": 1, "revision": 1,
    }
