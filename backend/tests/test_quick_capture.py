"""Project-level quick risk capture."""
from datetime import datetime

import pytest

from riskgov.errors import ItemNotFoundError
from riskgov.schemas.risk_capture import RiskSnapshot
from riskgov.services.quick_capture import (
    new_risk_entry,
    quick_verification_progress,
    set_quick_risk_verified,
)

from factories import make_risk

NOW = datetime(2026, 1, 10, 11, 0)


def test_new_risk_entry_defaults():
    entry = new_risk_entry("contract", "Kontrak atau PO dari user", now=NOW)
    assert entry.id.startswith("risk-contract-1768042800000-")
    assert new_risk_entry("contract", "Kontrak", now=NOW).id != entry.id
    assert entry.kode == "CONTRACT-001"
    assert entry.sasaran == "Kontrak atau PO dari user"
    assert entry.risiko_awal == RiskSnapshot(kejadian=1, dampak=1, level=1)
    assert entry.resiko_akhir.level == 1
    assert entry.risiko_saat_ini is None
    assert entry.is_verified is False


def test_verify_one_risk():
    risks = [make_risk("q1", 12), make_risk("q2", 18)]
    updated = set_quick_risk_verified(
        risks, "q2", True, "Siti Rahma",
        comment="Mitigasi cukup", current=RiskSnapshot(kejadian=3, dampak=3, level=9), now=NOW,
    )
    assert updated[1].is_verified is True
    assert updated[1].verifier_name == "Siti Rahma"
    assert updated[1].verifier_comment == "Mitigasi cukup"
    assert updated[1].verified_at == NOW
    assert updated[1].risiko_saat_ini.level == 9
    assert updated[0] == risks[0]
    assert risks[1].is_verified is False


def test_verify_unknown_risk():
    with pytest.raises(ItemNotFoundError):
        set_quick_risk_verified([make_risk("q1")], "zz", True, "Siti")


def test_progress():
    assert quick_verification_progress([]).percentage == 0
    risks = [make_risk("q1", is_verified=True), make_risk("q2"), make_risk("q3")]
    p = quick_verification_progress(risks)
    assert (p.verified, p.total, p.percentage) == (1, 3, 33)
    risks = [make_risk("q1", is_verified=True), make_risk("q2", is_verified=True), make_risk("q3")]
    assert quick_verification_progress(risks).percentage == 67
    risks = [make_risk(f"q{n}", is_verified=n < 5) for n in range(8)]
    # 5 / 8 = 62.5 -> 63
    assert quick_verification_progress(risks).percentage == 63
