"""Frozen data models for assets, graphs, metrics and alerts."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ASSET_TYPES = (
    "real-estate",
    "bond",
    "invoice",
    "commodity",
    "equity",
    "fund-share",
    "defi-position",
    "synthetic",
)

COMPLIANCE_STATUSES = ("compliant", "pending", "expired", "failed", "not-required")

CUSTODY_STATUSES = (
    "bank-custody",
    "qualified-custodian",
    "smart-contract",
    "multi-sig",
    "self-custody",
)

ALERT_SEVERITIES = ("critical", "high", "medium", "low")


@dataclass(frozen=True)
class AssetRecord:
    """One tokenized asset as supplied by the data source."""

    id: str
    address: str
    name: str
    symbol: str
    asset_type: str
    owner: str
    total_value: str
    compliance_status: str
    custody_status: str
    yield_rate: float | None = None
    total_yield_generated: str | None = None
    risk_score: float | None = None
    liquidity_score: float | None = None
    last_audit_date: int | None = None
    parent_assets: tuple[str, ...] = ()
    child_assets: tuple[str, ...] = ()
    collateral_for: tuple[str, ...] = ()
    custodian: str | None = None
    currency: str = "USD"
    description: str | None = None
    created_at: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "address": self.address,
            "name": self.name,
            "symbol": self.symbol,
            "assetType": self.asset_type,
            "owner": self.owner,
            "custodian": self.custodian,
            "custodyStatus": self.custody_status,
            "totalValue": self.total_value,
            "currency": self.currency,
            "yieldRate": self.yield_rate,
            "totalYieldGenerated": self.total_yield_generated,
            "complianceStatus": self.compliance_status,
            "lastAuditDate": self.last_audit_date,
            "parentAssets": list(self.parent_assets),
            "childAssets": list(self.child_assets),
            "collateralFor": list(self.collateral_for),
            "riskScore": self.risk_score,
            "liquidityScore": self.liquidity_score,
            "description": self.description,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class ComplianceEvent:
    """A KYC check, audit, filing, renewal or violation recorded for an asset."""

    id: str
    asset_id: str
    event_type: str
    status: str
    timestamp: int
    details: str | None = None
    document_hash: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "assetId": self.asset_id,
            "eventType": self.event_type,
            "status": self.status,
            "timestamp": self.timestamp,
            "details": self.details,
            "documentHash": self.document_hash,
        }


@dataclass(frozen=True)
class YieldDistribution:
    """One yield payout from an asset to its holders."""

    id: str
    asset_id: str
    amount: str
    currency: str
    recipients: int
    timestamp: int
    tx_hash: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "assetId": self.asset_id,
            "amount": self.amount,
            "currency": self.currency,
            "recipients": self.recipients,
            "timestamp": self.timestamp,
            "txHash": self.tx_hash,
        }


@dataclass(frozen=True)
class ComplianceReport:
    asset_id: str
    status: str
    is_compliant: bool
    last_audit: int | None = None
    events: tuple[ComplianceEvent, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "assetId": self.asset_id,
            "status": self.status,
            "isCompliant": self.is_compliant,
            "lastAudit": self.last_audit,
            "events": [e.to_dict() for e in self.events],
        }


@dataclass(frozen=True)
class GraphNode:
    """Graph representation of one asset."""

    id: str
    address: str
    name: str
    symbol: str
    asset_type: str
    owner: str
    total_value: float
    yield_rate: float
    child_count: int
    parent_count: int
    collateral_count: int
    compliance_status: str
    custody_status: str
    risk_score: float
    health_score: int
    custodian: str | None = None
    liquidity_score: float | None = None
    collateral_for: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "address": self.address,
            "name": self.name,
            "symbol": self.symbol,
            "assetType": self.asset_type,
            "owner": self.owner,
            "totalValue": self.total_value,
            "yieldRate": self.yield_rate,
            "childCount": self.child_count,
            "parentCount": self.parent_count,
            "collateralCount": self.collateral_count,
            "complianceStatus": self.compliance_status,
            "custodyStatus": self.custody_status,
            "custodian": self.custodian,
            "riskScore": self.risk_score,
            "healthScore": self.health_score,
            "liquidityScore": self.liquidity_score,
            "collateralFor": list(self.collateral_for),
        }


@dataclass(frozen=True)
class GraphEdge:
    """Directed relationship between two nodes."""

    source: str
    target: str
    type: str
    value: float | None = None
    label: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "value": self.value,
            "label": self.label,
        }


@dataclass(frozen=True)
class GraphData:
    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


@dataclass(frozen=True)
class FilterOptions:
    """Graph filter predicate. ``None`` (or an empty collection) means no constraint."""

    search_query: str | None = None
    asset_types: frozenset[str] | None = None
    compliance_statuses: frozenset[str] | None = None
    custody_statuses: frozenset[str] | None = None
    min_value: float | None = None
    max_value: float | None = None
    min_yield_rate: float | None = None
    max_yield_rate: float | None = None
    min_health_score: float | None = None
    max_risk_score: float | None = None
    has_yield: bool = False
    has_children: bool = False

    def is_empty(self) -> bool:
        return not (
            self.search_query
            or self.asset_types
            or self.compliance_statuses
            or self.custody_statuses
            or self.has_yield
            or self.has_children
            or any(
                bound is not None
                for bound in (
                    self.min_value,
                    self.max_value,
                    self.min_yield_rate,
                    self.max_yield_rate,
                    self.min_health_score,
                    self.max_risk_score,
                )
            )
        )


@dataclass(frozen=True)
class AssetHealth:
    """Detailed health assessment for a single asset."""

    asset_id: str
    health_score: int
    risk_score: float
    compliance_score: int
    liquidity_score: float
    yield_consistency: float
    collateralization_ratio: float | None = None
    issues: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "assetId": self.asset_id,
            "healthScore": self.health_score,
            "riskScore": self.risk_score,
            "complianceScore": self.compliance_score,
            "liquidityScore": self.liquidity_score,
            "yieldConsistency": self.yield_consistency,
            "collateralizationRatio": self.collateralization_ratio,
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class GraphMetrics:
    total_nodes: int = 0
    total_edges: int = 0
    avg_degree: float = 0.0
    isolated_nodes: int = 0
    avg_health_score: float = 0.0
    total_value: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalNodes": self.total_nodes,
            "totalEdges": self.total_edges,
            "avgDegree": self.avg_degree,
            "isolatedNodes": self.isolated_nodes,
            "avgHealthScore": self.avg_health_score,
            "totalValue": self.total_value,
        }


@dataclass(frozen=True)
class AlertSummary:
    """Alert counts supplied by the monitoring collaborator."""

    total_alerts: int = 0
    critical_alerts: int = 0


@dataclass(frozen=True)
class PortfolioMetrics:
    """Roll-up metrics over a set of assets."""

    total_assets: int
    total_value_locked: str
    total_yield_generated: str
    average_yield_rate: float
    compliance_rate: float
    avg_risk_score: float
    avg_health_score: float
    total_alerts: int = 0
    critical_alerts: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAssets": self.total_assets,
            "totalValueLocked": self.total_value_locked,
            "totalYieldGenerated": self.total_yield_generated,
            "averageYieldRate": self.average_yield_rate,
            "complianceRate": self.compliance_rate,
            "avgRiskScore": self.avg_risk_score,
            "avgHealthScore": self.avg_health_score,
            "totalAlerts": self.total_alerts,
            "criticalAlerts": self.critical_alerts,
        }


@dataclass(frozen=True)
class ValueBreakdown:
    """Total and per-asset-type sums, rendered as 2-decimal strings."""

    total: str = "0.00"
    by_asset_type: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "byAssetType": dict(self.by_asset_type)}


@dataclass(frozen=True)
class YieldStatistics:
    average_yield_rate: float = 0.0
    max_yield_rate: float = 0.0
    min_yield_rate: float = 0.0
    assets_with_yield: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "averageYieldRate": self.average_yield_rate,
            "maxYieldRate": self.max_yield_rate,
            "minYieldRate": self.min_yield_rate,
            "assetsWithYield": self.assets_with_yield,
        }


@dataclass(frozen=True)
class HealthRanking:
    asset_id: str
    name: str
    health_score: int
    risk_score: float


@dataclass(frozen=True)
class MonitoringAlert:
    id: str
    severity: str
    type: str
    asset_id: str
    asset_name: str
    message: str
    timestamp: int
    resolved: bool = False
