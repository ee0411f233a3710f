"""Project-level ("quick") risk capture and its verification."""
from __future__ import annotations

import uuid
from datetime import datetime

from riskgov.errors import ItemNotFoundError
from riskgov.schemas.risk_capture import QuickVerificationProgress, RiskEntry, RiskSnapshot
from riskgov.services.record_adapter import epoch_ms


def new_risk_entry(item_id: str, item_title: str, *, now: datetime | None = None) -> RiskEntry:
    """Blank entry attached to a readiness item, all snapshots at 1/1/1."""
    now = now or datetime.utcnow()
    return RiskEntry(
        id=f"risk-{item_id}-{epoch_ms(now)}-{uuid.uuid4().hex[:8]}",
        sasaran=item_title,
        kode=f"{item_id.upper()}-001",
        risiko_awal=RiskSnapshot(),
        resiko_akhir=RiskSnapshot(),
        created_at=now,
    )


def set_quick_risk_verified(
    risks: list[RiskEntry],
    risk_id: str,
    verified: bool,
    verifier_name: str,
    *,
    comment: str | None = None,
    current: RiskSnapshot | None = None,
    now: datetime | None = None,
) -> list[RiskEntry]:
    for idx, risk in enumerate(risks):
        if risk.id == risk_id:
            break
    else:
        raise ItemNotFoundError(risk_id)

    update: dict = {
        "is_verified": verified,
        "verifier_name": verifier_name,
        "verified_at": now or datetime.utcnow(),
    }
    if comment is not None:
        update["verifier_comment"] = comment
    if current is not None:
        update["risiko_saat_ini"] = current

    result = list(risks)
    result[idx] = risk.model_copy(update=update)
    return result


def quick_verification_progress(risks: list[RiskEntry]) -> QuickVerificationProgress:
    total = len(risks)
    verified = sum(1 for r in risks if r.is_verified)
    # half-up, same as the readiness percentages
    percentage = (verified * 200 + total) // (2 * total) if total else 0
    return QuickVerificationProgress(verified=verified, total=total, percentage=percentage)
