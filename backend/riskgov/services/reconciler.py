"""
Readiness reconciliation — merge the checklist template with stored items.

For every template category, for every item definition:
  1. first stored item of that category with the same title (submission order)
  2. else a stored item whose id equals the definition id and whose title
     matches no definition of the category (item renamed in the template)
  3. else a fresh item: tidak_tersedia, no comments, no verifier fields

Matched items are used verbatim. Leftover stored items of a templated
category (duplicate titles, unknown titles) follow that category's items.
Categories the template no longer has are appended last, in first-seen
order. Nothing stored is ever dropped.
"""
from __future__ import annotations

import logging

from riskgov.schemas.readiness import ItemDefinition, ReadinessItem, ReadinessTemplate

log = logging.getLogger(__name__)


def new_item(category_id: str, definition: ItemDefinition) -> ReadinessItem:
    return ReadinessItem(
        id=definition.id,
        category=category_id,
        title=definition.title,
        user_status="tidak_tersedia",
    )


def _group_by_category(items: list[ReadinessItem]) -> dict[str, list[ReadinessItem]]:
    grouped: dict[str, list[ReadinessItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped


def _pick(
    candidates: list[ReadinessItem],
    used: set[int],
    definition: ItemDefinition,
    known_titles: set[str],
) -> int | None:
    for idx, item in enumerate(candidates):
        if idx not in used and item.title == definition.title:
            return idx
    for idx, item in enumerate(candidates):
        if idx not in used and item.id and item.id == definition.id and item.title not in known_titles:
            return idx
    return None


def reconcile(
    template: ReadinessTemplate | None, persisted_items: list[ReadinessItem]
) -> list[ReadinessItem]:
    persisted_items = list(persisted_items)
    if template is None or not template.categories:
        return persisted_items

    grouped = _group_by_category(persisted_items)
    working: list[ReadinessItem] = []
    synthesized = 0

    for category in template.categories:
        candidates = grouped.pop(category.id, [])
        known_titles = {d.title for d in category.items}
        used: set[int] = set()

        for definition in category.items:
            idx = _pick(candidates, used, definition, known_titles)
            if idx is None:
                working.append(new_item(category.id, definition))
                synthesized += 1
                continue
            used.add(idx)
            working.append(candidates[idx])

        extras = [item for idx, item in enumerate(candidates) if idx not in used]
        if extras:
            log.warning(
                "Category %s: keeping %d stored item(s) without a unique template match: %s",
                category.id, len(extras), [i.title for i in extras],
            )
        working.extend(extras)

    # retired categories
    for category_id, items in grouped.items():
        log.warning(
            "Category %s is not in template %s v%s; keeping %d stored item(s)",
            category_id, template.assessment_type, template.version, len(items),
        )
        working.extend(items)

    log.debug(
        "Reconciled %d stored item(s) against %s v%s: %d synthesized, %d total",
        len(persisted_items), template.assessment_type, template.version,
        synthesized, len(working),
    )
    return working
