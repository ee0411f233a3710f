"""
Adapter between stored readiness records and the in-memory ReadinessItem.

Stored records come in several shapes: camelCase exports from the old
dashboard, snake_case rows, `item` instead of `title`, and a single
`user_comment` / `verifier_comment` string instead of a comment list.
Everything is normalised to the list form here so no other module has to
branch on the record shape. `to_record` always writes the list form.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from riskgov.schemas.readiness import Comment, ReadinessItem
from riskgov.schemas.risk_capture import RiskEntry, RiskSnapshot

_CAMEL_KEYS = {
    "userStatus": "user_status",
    "userComments": "user_comments",
    "userComment": "user_comment",
    "verifierStatus": "verifier_status",
    "verifierComments": "verifier_comments",
    "verifierComment": "verifier_comment",
    "verifierName": "verifier_name",
    "verifiedAt": "verified_at",
    "riskCapture": "risk_capture",
    "createdAt": "created_at",
    "peristiwaRisiko": "peristiwa_risiko",
    "sumberRisiko": "sumber_risiko",
    "dampakKualitatif": "dampak_kualitatif",
    "dampakKuantitatif": "dampak_kuantitatif",
    "kontrolEksisting": "kontrol_eksisting",
    "risikoAwal": "risiko_awal",
    "risikoSaatIni": "risiko_saat_ini",
    "resikoAkhir": "resiko_akhir",
    "isVerified": "is_verified",
}

_SNAPSHOT_KEYS = ("risiko_awal", "risiko_saat_ini", "resiko_akhir")


def _snake(raw: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in raw.items():
        out.setdefault(_CAMEL_KEYS.get(key, key), value)
    return out


def _comments(
    listed: list | None, legacy: str | None, legacy_id: str, created_at: Any
) -> list[Comment]:
    if listed:
        return [Comment.model_validate(c) if isinstance(c, dict) else c for c in listed]
    if legacy:
        return [Comment(id=legacy_id, text=legacy, created_at=created_at)]
    return []


def normalize_risk(raw: dict[str, Any] | RiskEntry) -> RiskEntry:
    if isinstance(raw, RiskEntry):
        return raw
    data = _snake(raw)
    for key in _SNAPSHOT_KEYS:
        snap = data.get(key)
        if isinstance(snap, dict):
            data[key] = RiskSnapshot(**snap)
    return RiskEntry.model_validate(data)


def normalize_item(raw: dict[str, Any]) -> ReadinessItem:
    """Build a ReadinessItem from any known stored shape."""
    data = _snake(raw)
    item_id = str(data.get("id") or "")
    title = data.get("title") or data.get("item") or ""
    created_at = data.get("created_at")

    user_comments = _comments(
        data.get("user_comments"), data.get("user_comment"),
        f"legacy-{item_id}", created_at,
    )
    verifier_comments = _comments(
        data.get("verifier_comments"), data.get("verifier_comment"),
        f"legacy-verifier-{item_id}", data.get("verified_at") or created_at,
    )

    return ReadinessItem(
        id=item_id,
        category=data.get("category") or "",
        title=title,
        user_status=data.get("user_status") or "tidak_tersedia",
        user_comments=user_comments,
        verifier_status=data.get("verifier_status") or None,
        verifier_comments=verifier_comments,
        verifier_name=data.get("verifier_name") or None,
        verified_at=data.get("verified_at") or None,
        risk_capture=[normalize_risk(r) for r in data.get("risk_capture") or []],
    )


def latest_verifier_comment(item: ReadinessItem) -> str | None:
    return item.verifier_comments[-1].text if item.verifier_comments else None


def to_record(item: ReadinessItem) -> dict[str, Any]:
    return item.model_dump(mode="json")


def epoch_ms(at: datetime) -> int:
    """Naive datetimes are UTC here (datetime.utcnow)."""
    if at.tzinfo is None:
        at = at.replace(tzinfo=timezone.utc)
    return int(at.timestamp() * 1000)


def comment_id(prefix: str, item_id: str, at: datetime) -> str:
    return f"{prefix}-{item_id}-{epoch_ms(at)}-{uuid.uuid4().hex[:8]}"
