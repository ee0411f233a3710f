"""
Risk capture aggregation — per-band counts over a set of risk entries.

The aggregator does not know which snapshot it summarises; callers pass a
selector (initial_level / current_level / residual_level) and call it once
per snapshot they need.
"""
from collections.abc import Callable, Iterable

from riskgov.schemas.readiness import ReadinessItem
from riskgov.schemas.risk_capture import (
    BandCounts,
    ProjectRiskSummary,
    RiskDistribution,
    RiskEntry,
    RiskStatistics,
)
from riskgov.services.risk_score import BAND_KEYS, classify, is_valid_score

ScoreSelector = Callable[[RiskEntry], int | None]


def initial_level(entry: RiskEntry) -> int | None:
    return entry.risiko_awal.level if entry.risiko_awal else None


def current_level(entry: RiskEntry) -> int | None:
    return entry.risiko_saat_ini.level if entry.risiko_saat_ini else None


def residual_level(entry: RiskEntry) -> int | None:
    return entry.resiko_akhir.level if entry.resiko_akhir else None


SELECTORS: dict[str, ScoreSelector] = {
    "risiko_awal": initial_level,
    "risiko_saat_ini": current_level,
    "resiko_akhir": residual_level,
}


def aggregate(entries: Iterable[RiskEntry], score_selector: ScoreSelector) -> RiskDistribution:
    """Tally entries into the five bands; unscorable ones go to `invalid`."""
    counts = dict.fromkeys(BAND_KEYS, 0)
    total = 0
    invalid = 0
    for entry in entries:
        total += 1
        level = score_selector(entry)
        if not is_valid_score(level):
            invalid += 1
            continue
        counts[classify(level).band] += 1
    return RiskDistribution(total=total, per_band=BandCounts(**counts), invalid=invalid)


def nested_risks(items: Iterable[ReadinessItem]) -> list[RiskEntry]:
    return [risk for item in items for risk in item.risk_capture]


def project_risk_summary(
    project_id: str,
    project_name: str,
    items: list[ReadinessItem],
    quick_risks: list[RiskEntry] | None = None,
) -> ProjectRiskSummary:
    """Summary row for the risk capture overview (nested + quick risks)."""
    quick_risks = quick_risks or []
    all_risks = nested_risks(items) + list(quick_risks)

    with_risks = [item for item in items if item.risk_capture]
    categories: list[str] = []
    for item in with_risks:
        if item.category not in categories:
            categories.append(item.category)

    levels = [lvl for lvl in (current_level(r) for r in all_risks) if is_valid_score(lvl)]

    return ProjectRiskSummary(
        project_id=project_id,
        project_name=project_name,
        total_risks=len(all_risks),
        total_readiness_items=len(items),
        items_with_risks=len(with_risks),
        categories_with_risks=categories,
        distribution=aggregate(all_risks, current_level),
        highest_risk_level=max(levels) if levels else 0,
    )


def is_high_risk(summary: ProjectRiskSummary) -> bool:
    bands = summary.distribution.per_band
    return bands.tinggi + bands.sangat_tinggi > 0


def risk_statistics(summaries: list[ProjectRiskSummary]) -> RiskStatistics:
    return RiskStatistics(
        total_projects=len(summaries),
        total_risks=sum(s.total_risks for s in summaries),
        projects_with_risks=sum(1 for s in summaries if s.total_risks > 0),
        high_risk_projects=sum(1 for s in summaries if is_high_risk(s)),
    )
