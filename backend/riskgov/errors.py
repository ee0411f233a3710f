"""
Domain errors for the readiness / risk-capture workflow.

None of these are retried internally; routers translate them to HTTP
responses at the call site.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """One per-field problem, surfaced inline by the UI."""
    field: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class ReadinessError(Exception):
    """Base class for all workflow errors."""


class ValidationError(ReadinessError):
    """Out-of-range risk scores or missing required fields at save time."""

    def __init__(self, errors: list[FieldError] | str):
        if isinstance(errors, str):
            errors = [FieldError(field="", message=errors)]
        self.errors = list(errors)
        super().__init__("; ".join(
            f"{e.field}: {e.message}" if e.field else e.message for e in self.errors
        ))


class InvalidScoreError(ValidationError):
    def __init__(self, score, field: str = "level"):
        self.score = score
        super().__init__([FieldError(field=field, message=f"score {score!r} outside 1-25")])


class ItemNotFoundError(ReadinessError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Readiness item '{item_id}' not found")


class IncompleteVerificationError(ReadinessError):
    """Raised when marking a submission verified while items are unverified."""

    def __init__(self, unverified_ids: list[str]):
        self.unverified_ids = list(unverified_ids)
        super().__init__(
            f"{len(self.unverified_ids)} item(s) have no verifier status: "
            + ", ".join(self.unverified_ids)
        )


class InvalidTransitionError(ReadinessError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Transition {current} -> {target} is not allowed")


class SubmissionNotFoundError(ReadinessError):
    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"No readiness submission for project '{project_id}'")


class SubmissionLockedError(ReadinessError):
    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Readiness for project '{project_id}' is verified and can no longer be edited")
