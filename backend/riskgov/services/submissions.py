from riskgov.schemas.readiness import ReadinessSubmission, SubmissionCounts


def filter_submissions(
    submissions: list[ReadinessSubmission], search: str | None = None, status: str | None = None
) -> list[ReadinessSubmission]:
    """Verifier list: case-insensitive search on project / submitter, status tab."""
    term = (search or "").strip().lower()
    result = []
    for sub in submissions:
        if term and term not in sub.project_name.lower() and term not in sub.submitted_by.lower():
            continue
        if status and status != "all" and sub.status != status:
            continue
        result.append(sub)
    return result


def submission_counts(submissions: list[ReadinessSubmission]) -> SubmissionCounts:
    by_status: dict[str, int] = {}
    for sub in submissions:
        by_status[sub.status] = by_status.get(sub.status, 0) + 1
    return SubmissionCounts(
        total=len(submissions),
        pending=by_status.get("submitted", 0),
        under_review=by_status.get("under_review", 0),
        verified=by_status.get("verified", 0),
        revision=by_status.get("needs_revision", 0),
    )
