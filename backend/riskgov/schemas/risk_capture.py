from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

BandKey = Literal["sangat_rendah", "rendah", "sedang", "tinggi", "sangat_tinggi", "unknown"]


class RiskSnapshot(BaseModel):
    """Kejadian (likelihood) / dampak (impact) / level (severity), each 1-25.

    Range is checked at save time, not on construction, so a draft can hold
    a value the user is still typing.
    """
    kejadian: int = 1
    dampak: int = 1
    level: int = 1


class RiskEntry(BaseModel):
    id: str

    # Identifikasi
    sasaran: str = ""
    kode: str = ""
    taksonomi: str = ""
    peristiwa_risiko: str = ""
    sumber_risiko: str = ""
    dampak_kualitatif: str = ""
    dampak_kuantitatif: str = ""
    kontrol_eksisting: str = ""

    # Analisis
    risiko_awal: RiskSnapshot = Field(default_factory=RiskSnapshot)
    risiko_saat_ini: RiskSnapshot | None = None
    resiko_akhir: RiskSnapshot = Field(default_factory=RiskSnapshot)

    # Verifikasi (quick capture)
    is_verified: bool = False
    verifier_comment: str | None = None
    verifier_name: str | None = None
    verified_at: datetime | None = None

    created_at: datetime | None = None


class ScoreBand(BaseModel):
    band: BandKey
    label: str
    color_key: str
    range: str | None = None

    model_config = {"frozen": True}


class BandCounts(BaseModel):
    sangat_rendah: int = 0
    rendah: int = 0
    sedang: int = 0
    tinggi: int = 0
    sangat_tinggi: int = 0

    model_config = {"frozen": True}


class RiskDistribution(BaseModel):
    total: int = 0
    per_band: BandCounts = Field(default_factory=BandCounts)
    invalid: int = 0

    model_config = {"frozen": True}


class QuickRiskCaptureOut(BaseModel):
    project_id: str
    project_name: str | None = None
    risks: list[RiskEntry] = []
    completed_at: datetime | None = None
    verifier_name: str | None = None
    verified_at: datetime | None = None


class QuickRiskCaptureUpdate(BaseModel):
    project_name: str | None = None
    risks: list[RiskEntry]


class QuickRiskVerificationItem(BaseModel):
    risk_id: str
    is_verified: bool
    verifier_comment: str | None = None
    risiko_saat_ini: RiskSnapshot | None = None


class QuickRiskVerificationRequest(BaseModel):
    verifier_name: str = Field(..., min_length=1, max_length=200)
    items: list[QuickRiskVerificationItem] = []


class QuickVerificationProgress(BaseModel):
    verified: int = 0
    total: int = 0
    percentage: int = 0


class QuickRiskVerificationOut(BaseModel):
    capture: QuickRiskCaptureOut
    progress: QuickVerificationProgress


class ProjectRiskSummary(BaseModel):
    project_id: str
    project_name: str
    total_risks: int = 0
    total_readiness_items: int = 0
    items_with_risks: int = 0
    categories_with_risks: list[str] = []
    distribution: RiskDistribution = Field(default_factory=RiskDistribution)
    highest_risk_level: int = 0


class RiskStatistics(BaseModel):
    total_projects: int = 0
    total_risks: int = 0
    projects_with_risks: int = 0
    high_risk_projects: int = 0


class ProjectRiskDetail(BaseModel):
    summary: ProjectRiskSummary
    initial: RiskDistribution
    current: RiskDistribution
    residual: RiskDistribution
    quick_risks: list[RiskEntry] = []
