"""Builders for readiness / risk values used across tests."""
from datetime import datetime

from riskgov.schemas.readiness import Comment, ReadinessItem
from riskgov.schemas.risk_capture import RiskEntry, RiskSnapshot


def make_risk(risk_id: str = "r1", level: int = 9, **overrides) -> RiskEntry:
    """A complete, save-valid risk entry at the given level on all snapshots."""
    base = {
        "id": risk_id,
        "sasaran": "Kontrak ditandatangani tepat waktu",
        "kode": "ADM-001",
        "taksonomi": "Risiko Operasional",
        "peristiwa_risiko": "Keterlambatan PO dari user",
        "sumber_risiko": "Proses approval internal user",
        "dampak_kualitatif": "Mobilisasi tertunda",
        "dampak_kuantitatif": "Rp 50 juta",
        "kontrol_eksisting": "Follow-up mingguan",
        "risiko_awal": RiskSnapshot(kejadian=3, dampak=3, level=level),
        "risiko_saat_ini": RiskSnapshot(kejadian=3, dampak=3, level=level),
        "resiko_akhir": RiskSnapshot(kejadian=2, dampak=2, level=level),
        "created_at": datetime(2026, 1, 5, 8, 0),
    }
    base.update(overrides)
    return RiskEntry(**base)


def risk_json(risk_id: str = "r1", level: int = 9, **overrides) -> dict:
    return make_risk(risk_id, level, **overrides).model_dump(mode="json")


def make_item(item_id: str, title: str, category: str = "administrative", **overrides) -> ReadinessItem:
    return ReadinessItem(id=item_id, category=category, title=title, **overrides)


def comment(text: str, cid: str = "c1") -> Comment:
    return Comment(id=cid, text=text, created_at=datetime(2026, 1, 5, 9, 0))
