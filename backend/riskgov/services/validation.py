"""Save-time validation of risk entries."""
from __future__ import annotations

from collections.abc import Iterable

from riskgov.errors import FieldError, ValidationError
from riskgov.schemas.risk_capture import RiskEntry
from riskgov.services.risk_score import MAX_SCORE, MIN_SCORE, is_valid_score

REQUIRED_TEXT_FIELDS = (
    "sasaran",
    "kode",
    "taksonomi",
    "peristiwa_risiko",
    "sumber_risiko",
    "dampak_kualitatif",
    "dampak_kuantitatif",
    "kontrol_eksisting",
)


def risk_entry_errors(
    entry: RiskEntry, prefix: str = "", require_current: bool = False
) -> list[FieldError]:
    errors: list[FieldError] = []
    for name in REQUIRED_TEXT_FIELDS:
        if not (getattr(entry, name) or "").strip():
            errors.append(FieldError(field=f"{prefix}{name}", message="required"))

    snapshots = {"risiko_awal": entry.risiko_awal, "resiko_akhir": entry.resiko_akhir}
    if entry.risiko_saat_ini is not None or require_current:
        snapshots["risiko_saat_ini"] = entry.risiko_saat_ini

    for snap_name, snap in snapshots.items():
        if snap is None:
            errors.append(FieldError(field=f"{prefix}{snap_name}", message="required"))
            continue
        for axis in ("kejadian", "dampak", "level"):
            value = getattr(snap, axis)
            if not is_valid_score(value):
                errors.append(FieldError(
                    field=f"{prefix}{snap_name}.{axis}",
                    message=f"must be between {MIN_SCORE} and {MAX_SCORE}, got {value}",
                ))
    return errors


def validate_risks(
    risks: Iterable[RiskEntry], prefix: str = "", require_current: bool = False
) -> None:
    """Raise ValidationError listing every bad field across the entries."""
    errors: list[FieldError] = []
    for risk in risks:
        errors += risk_entry_errors(risk, f"{prefix}{risk.id}.", require_current)
    if errors:
        raise ValidationError(errors)
