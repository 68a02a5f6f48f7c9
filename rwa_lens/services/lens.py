"""Lens service: wires sources, the graph core, aggregation and notifiers."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from ..alerts import critical_alerts, summarize_alerts
from ..cache import TTLCache, make_key
from ..config import AppConfig
from ..graph import (
    build_graph,
    calc_graph_metrics,
    export_asset,
    export_graph,
    filter_graph,
    find_relationships,
    search_assets,
    trace_lineage,
)
from ..interfaces import AlertSource, AssetSource, Notifier
from ..models import (
    AssetHealth,
    AssetRecord,
    ComplianceEvent,
    ComplianceReport,
    FilterOptions,
    GraphData,
    GraphMetrics,
    HealthRanking,
    MonitoringAlert,
    PortfolioMetrics,
    ValueBreakdown,
    YieldDistribution,
    YieldStatistics,
)
from ..notifications import EmailNotifier, TelegramNotifier
from ..portfolio import (
    calc_portfolio_metrics,
    calc_tvl_breakdown,
    calc_yield_breakdown,
    calc_yield_statistics,
    rank_by_health,
)
from ..scoring import assess_asset_health, now_timestamp
from ..sources import AtlasApiClient, FileAssetSource

logger = logging.getLogger(__name__)

REPORT_LOWEST_HEALTH = 5


class AssetNotFoundError(LookupError):
    """Raised when an asset id is not in the working set."""


def _build_source(config: AppConfig) -> AtlasApiClient | FileAssetSource:
    source_cfg = config.data_source
    if source_cfg.provider == "file":
        return FileAssetSource(source_cfg.file.path)
    return AtlasApiClient(source_cfg.api)


class LensService:
    """Fetches the asset working set and answers graph/metrics/health queries."""

    def __init__(
        self,
        config: AppConfig,
        clock: Callable[[], float] = now_timestamp,
    ) -> None:
        self._config = config
        self._scoring = config.scoring
        self._clock = clock
        self._cache = TTLCache(config.cache.ttl_seconds)

        source = _build_source(config)
        self._assets_source: AssetSource = source
        self._alerts_source: AlertSource = source

        self._notifiers: list[Notifier] = []
        if config.notifications.telegram.enabled:
            self._notifiers.append(TelegramNotifier(config.notifications.telegram))
        if config.notifications.email.enabled:
            self._notifiers.append(EmailNotifier(config.notifications.email))

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    async def get_assets(self, asset_type: str | None = None) -> list[AssetRecord]:
        key = make_key("assets", asset_type)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        assets = await self._assets_source.fetch_assets(asset_type=asset_type)
        self._cache.set(key, assets)
        return assets

    async def get_asset(self, asset_id: str) -> AssetRecord:
        asset = next((a for a in await self.get_assets() if a.id == asset_id), None)
        if asset is None:
            asset = await self._assets_source.fetch_asset(asset_id)
        if asset is None:
            raise AssetNotFoundError(f"Asset {asset_id} not found")
        return asset

    async def search(self, query: str) -> list[AssetRecord]:
        return search_assets(await self.get_assets(), query)

    async def get_assets_by_owner(self, owner: str) -> list[AssetRecord]:
        owner = owner.lower()
        return [a for a in await self.get_assets() if a.owner.lower() == owner]

    async def get_assets_by_address(self, address: str) -> list[AssetRecord]:
        address = address.lower()
        return [a for a in await self.get_assets() if a.address.lower() == address]

    # ------------------------------------------------------------------
    # Compliance & yield history
    # ------------------------------------------------------------------

    async def get_compliance_status(self, asset_id: str) -> ComplianceReport:
        """Current compliance status of one asset plus its recorded events."""
        asset = await self.get_asset(asset_id)
        events = await self._assets_source.fetch_compliance_events(asset_id)
        return ComplianceReport(
            asset_id=asset.id,
            status=asset.compliance_status,
            is_compliant=asset.compliance_status == "compliant",
            last_audit=asset.last_audit_date,
            events=tuple(events),
        )

    async def get_yield_flows(self, asset_id: str) -> list[YieldDistribution]:
        return await self._assets_source.fetch_yield_distributions(asset_id)

    async def get_total_yield(self, asset_type: str | None = None) -> ValueBreakdown:
        assets = await self.get_assets()
        if asset_type is not None:
            assets = [a for a in assets if a.asset_type == asset_type]
        return calc_yield_breakdown(assets)

    async def get_yield_statistics(self) -> YieldStatistics:
        return calc_yield_statistics(await self.get_assets())

    async def export_asset_data(
        self,
        asset_id: str,
        fmt: str,
        include_compliance: bool = False,
        include_yield_history: bool = False,
    ) -> str:
        """Export one asset as JSON or CSV, optionally with its history.

        Raises:
            AssetNotFoundError: if the asset is unknown.
            ValueError: if ``fmt`` is not supported.
        """
        asset = await self.get_asset(asset_id)
        events: list[ComplianceEvent] | None = None
        distributions: list[YieldDistribution] | None = None
        if include_compliance:
            events = await self._assets_source.fetch_compliance_events(asset_id)
        if include_yield_history:
            distributions = await self._assets_source.fetch_yield_distributions(asset_id)
        return export_asset(asset, fmt, events, distributions)

    # ------------------------------------------------------------------
    # Graph
    # ------------------------------------------------------------------

    async def get_graph(self, filters: FilterOptions | None = None) -> GraphData:
        assets = await self.get_assets()
        graph = build_graph(assets, now=self._clock(), scoring=self._scoring)
        if filters is not None:
            graph = filter_graph(graph, filters)
        return graph

    async def get_graph_metrics(
        self, filters: FilterOptions | None = None
    ) -> GraphMetrics:
        return calc_graph_metrics(await self.get_graph(filters))

    async def export_graph(
        self, fmt: str, filters: FilterOptions | None = None
    ) -> str:
        return export_graph(await self.get_graph(filters), fmt)

    async def get_lineage(self, asset_id: str) -> list[AssetRecord]:
        assets = await self.get_assets()
        lineage = trace_lineage(assets, asset_id)
        if not lineage:
            raise AssetNotFoundError(f"Asset {asset_id} not found")
        return lineage

    async def get_relationships(self, asset_id: str) -> dict[str, list[AssetRecord]]:
        await self.get_asset(asset_id)
        return find_relationships(await self.get_assets(), asset_id)

    # ------------------------------------------------------------------
    # Health & metrics
    # ------------------------------------------------------------------

    async def get_asset_health(self, asset_id: str) -> AssetHealth:
        asset = await self.get_asset(asset_id)
        return assess_asset_health(asset, now=self._clock(), scoring=self._scoring)

    async def get_health_scores(
        self, threshold: float | None = None
    ) -> list[HealthRanking]:
        return rank_by_health(
            await self.get_assets(),
            threshold=threshold,
            now=self._clock(),
            scoring=self._scoring,
        )

    async def get_alerts(
        self, severity: str | None = None, resolved: bool | None = None
    ) -> list[MonitoringAlert]:
        return await self._alerts_source.fetch_alerts(
            severity=severity, resolved=resolved
        )

    async def get_critical_alerts(self) -> list[MonitoringAlert]:
        return critical_alerts(await self.get_alerts(resolved=False))

    async def get_portfolio_metrics(self) -> PortfolioMetrics:
        key = make_key("portfolio-metrics")
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        assets = await self.get_assets()
        alerts = summarize_alerts(await self.get_alerts(resolved=False))
        metrics = calc_portfolio_metrics(
            assets, alerts=alerts, now=self._clock(), scoring=self._scoring
        )
        self._cache.set(key, metrics)
        return metrics

    async def get_tvl(self, asset_type: str | None = None) -> ValueBreakdown:
        return calc_tvl_breakdown(await self.get_assets(), asset_type=asset_type)

    def clear_cache(self) -> None:
        self._cache.clear()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _now_str(self) -> str:
        return datetime.fromtimestamp(self._clock(), timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S"
        )

    def build_report(
        self,
        metrics: PortfolioMetrics,
        graph_metrics: GraphMetrics,
        weakest: list[HealthRanking],
    ) -> str:
        weakest_lines = [
            f"  {r.name} ({r.asset_id}) · health {r.health_score} · risk {r.risk_score:.0f}"
            for r in weakest
        ]
        return (
            f"📋 RWA Portfolio Report\n"
            f"\n"
            f"Assets: {metrics.total_assets}\n"
            f"TVL: ${float(metrics.total_value_locked):,.2f}\n"
            f"Yield generated: ${float(metrics.total_yield_generated):,.2f}\n"
            f"Average APY: {metrics.average_yield_rate:.2f}%\n"
            f"Compliance rate: {metrics.compliance_rate:.2f}%\n"
            f"Avg risk: {metrics.avg_risk_score:.2f} · Avg health: {metrics.avg_health_score:.2f}\n"
            f"Alerts: {metrics.total_alerts} open · {metrics.critical_alerts} critical\n"
            f"\n"
            f"Graph: {graph_metrics.total_nodes} nodes · {graph_metrics.total_edges} edges · "
            f"{graph_metrics.isolated_nodes} isolated · avg degree {graph_metrics.avg_degree:.2f}\n"
            f"\n"
            f"Lowest health:\n"
            + ("\n".join(weakest_lines) if weakest_lines else "  none")
            + f"\n\n{self._now_str()} UTC"
        )

    @staticmethod
    def build_alert_digest(alerts: list[MonitoringAlert]) -> str:
        lines = [
            f"[{a.severity.upper()}] {a.asset_name} ({a.asset_id}): {a.message}"
            for a in alerts
        ]
        return f"🚨 {len(alerts)} open critical/high alerts\n\n" + "\n".join(lines)

    async def send_report(self) -> str:
        """Build the portfolio report and deliver it through every notifier.

        Open critical/high alerts are also sent as a separate alert digest.
        """
        metrics = await self.get_portfolio_metrics()
        graph_metrics = await self.get_graph_metrics()
        weakest = (await self.get_health_scores())[:REPORT_LOWEST_HEALTH]
        report = self.build_report(metrics, graph_metrics, weakest)

        urgent = await self.get_critical_alerts()

        for notifier in self._notifiers:
            try:
                await notifier.send_report(report, subject="RWA Portfolio Report")
                if urgent:
                    await notifier.send_alert(
                        self.build_alert_digest(urgent),
                        subject="🚨 RWA: open critical alerts",
                    )
            except Exception as e:
                logger.error("Notifier %s failed: %s", type(notifier).__name__, e)

        if not self._notifiers:
            logger.warning("No notifiers enabled; report not delivered")
        else:
            logger.info("Portfolio report sent")
        return report
