from .base import Base
from .readiness import ProjectRiskCaptureRecord, ReadinessItemRecord, ReadinessSubmissionRecord

__all__ = [
    "Base",
    "ReadinessSubmissionRecord",
    "ReadinessItemRecord",
    "ProjectRiskCaptureRecord",
]
