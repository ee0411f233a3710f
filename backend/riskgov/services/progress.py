"""
Readiness progress — weighted completion over a checklist.

  percentage = round(((lengkap + parsial * 0.5) / total) * 100)

Rounding is half-up, so 62.5 reports as 63. Nothing here is stored; every
caller recomputes from the items it holds.
"""
from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from riskgov.schemas.readiness import (
    CategoryProgress,
    Progress,
    ReadinessItem,
    ReadinessTemplate,
    VerificationProgress,
)

PARTIAL_WEIGHT = Decimal("0.5")


def _percent(completed: int, partial: int, total: int) -> int:
    if total == 0:
        return 0
    ratio = (Decimal(completed) + Decimal(partial) * PARTIAL_WEIGHT) / Decimal(total) * 100
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def progress(items: Iterable[ReadinessItem]) -> Progress:
    """Submitter view, over user_status."""
    items = list(items)
    completed = sum(1 for i in items if i.user_status == "lengkap")
    partial = sum(1 for i in items if i.user_status == "parsial")
    total = len(items)
    return Progress(
        completed=completed,
        partial=partial,
        total=total,
        percentage=_percent(completed, partial, total),
    )


def verification_progress(items: Iterable[ReadinessItem]) -> VerificationProgress:
    """Verifier view, over verifier_status. Zero until something is verified."""
    items = list(items)
    verified = [i for i in items if i.verifier_status is not None]
    completed = sum(1 for i in verified if i.verifier_status == "lengkap")
    partial = sum(1 for i in verified if i.verifier_status == "parsial")
    total = len(items)
    return VerificationProgress(
        completed=completed,
        partial=partial,
        total=total,
        verified=len(verified),
        percentage=_percent(completed, partial, total) if verified else 0,
    )


def category_progress(
    template: ReadinessTemplate | None, items: list[ReadinessItem]
) -> list[CategoryProgress]:
    """Per-category cards in checklist order; retired categories come last."""
    by_category: dict[str, list[ReadinessItem]] = {}
    for item in items:
        by_category.setdefault(item.category, []).append(item)

    titles = {c.id: c.title for c in template.categories} if template else {}
    order = list(titles)
    order += [cat for cat in by_category if cat not in titles]

    result = []
    for cat_id in order:
        cat_items = by_category.get(cat_id, [])
        result.append(CategoryProgress(
            category=cat_id,
            title=titles.get(cat_id, cat_id),
            in_template=cat_id in titles,
            progress=progress(cat_items),
            verification=verification_progress(cat_items),
        ))
    return result
