"""Portfolio roll-up metrics computed directly over asset records."""
from __future__ import annotations

from typing import Iterable

from .config import ScoringConfig
from .models import (
    AlertSummary,
    AssetRecord,
    HealthRanking,
    PortfolioMetrics,
    ValueBreakdown,
    YieldStatistics,
)
from .parser import parse_decimal
from .scoring import ASSESS_DEFAULT_RISK, calc_health_score, now_timestamp

_DEFAULT_SCORING = ScoringConfig()


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _yield_rates(assets: Iterable[AssetRecord]) -> list[float]:
    return [a.yield_rate for a in assets if a.yield_rate and a.yield_rate > 0]


def calc_portfolio_metrics(
    assets: Iterable[AssetRecord],
    alerts: AlertSummary = AlertSummary(),
    now: float | None = None,
    scoring: ScoringConfig = _DEFAULT_SCORING,
) -> PortfolioMetrics:
    """TVL, yield, compliance rate and average risk/health over ``assets``.

    Alert counts come from the monitoring collaborator and are passed through.
    A missing risk score counts as 0 here, unlike the graph nodes which show 50.
    """
    if now is None:
        now = now_timestamp()
    assets = list(assets)
    count = len(assets)

    tvl = sum((parse_decimal(a.total_value) for a in assets), 0.0)
    total_yield = sum((parse_decimal(a.total_yield_generated) for a in assets), 0.0)

    compliant = sum(1 for a in assets if a.compliance_status == "compliant")
    compliance_rate = compliant / count * 100 if count else 0.0

    avg_risk = _mean([a.risk_score or 0.0 for a in assets])
    avg_health = _mean(
        [float(calc_health_score(a, now=now, scoring=scoring)) for a in assets]
    )

    return PortfolioMetrics(
        total_assets=count,
        total_value_locked=f"{tvl:.2f}",
        total_yield_generated=f"{total_yield:.2f}",
        average_yield_rate=round(_mean(_yield_rates(assets)), 2),
        compliance_rate=round(compliance_rate, 2),
        avg_risk_score=round(avg_risk, 2),
        avg_health_score=round(avg_health, 2),
        total_alerts=alerts.total_alerts,
        critical_alerts=alerts.critical_alerts,
    )


def _breakdown(assets: Iterable[AssetRecord], field_name: str) -> ValueBreakdown:
    by_type: dict[str, float] = {}
    for asset in assets:
        value = parse_decimal(getattr(asset, field_name))
        by_type[asset.asset_type] = by_type.get(asset.asset_type, 0.0) + value
    total = sum(by_type.values(), 0.0)
    return ValueBreakdown(
        total=f"{total:.2f}",
        by_asset_type={k: f"{v:.2f}" for k, v in by_type.items()},
    )


def calc_tvl_breakdown(
    assets: Iterable[AssetRecord], asset_type: str | None = None
) -> ValueBreakdown:
    """Total value locked, overall and per asset type."""
    if asset_type is not None:
        assets = [a for a in assets if a.asset_type == asset_type]
    return _breakdown(assets, "total_value")


def calc_yield_breakdown(assets: Iterable[AssetRecord]) -> ValueBreakdown:
    """Total yield generated, overall and per asset type."""
    return _breakdown(assets, "total_yield_generated")


def calc_yield_statistics(assets: Iterable[AssetRecord]) -> YieldStatistics:
    rates = _yield_rates(assets)
    if not rates:
        return YieldStatistics()
    return YieldStatistics(
        average_yield_rate=_mean(rates),
        max_yield_rate=max(rates),
        min_yield_rate=min(rates),
        assets_with_yield=len(rates),
    )


def rank_by_health(
    assets: Iterable[AssetRecord],
    threshold: float | None = None,
    now: float | None = None,
    scoring: ScoringConfig = _DEFAULT_SCORING,
) -> list[HealthRanking]:
    """Assets sorted by ascending health; with ``threshold``, only those below it."""
    if now is None:
        now = now_timestamp()
    rankings = [
        HealthRanking(
            asset_id=a.id,
            name=a.name,
            health_score=calc_health_score(a, now=now, scoring=scoring),
            risk_score=a.risk_score if a.risk_score is not None else ASSESS_DEFAULT_RISK,
        )
        for a in assets
    ]
    if threshold is not None:
        rankings = [r for r in rankings if r.health_score < threshold]
    return sorted(rankings, key=lambda r: r.health_score)
