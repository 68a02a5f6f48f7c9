"""Build the asset-lineage graph from a flat list of asset records."""
from __future__ import annotations

import logging
from typing import Iterable

from ..config import ScoringConfig
from ..models import AssetRecord, GraphData, GraphEdge, GraphNode
from ..parser import parse_decimal
from ..scoring import calc_health_score, now_timestamp

logger = logging.getLogger(__name__)

# Collateral edges assume a fixed 80% collateral ratio.
COLLATERAL_RATIO = 0.8

NODE_DEFAULT_RISK = 50.0

_DEFAULT_SCORING = ScoringConfig()


def build_node(asset: AssetRecord, health_score: int) -> GraphNode:
    return GraphNode(
        id=asset.id,
        address=asset.address,
        name=asset.name,
        symbol=asset.symbol,
        asset_type=asset.asset_type,
        owner=asset.owner,
        total_value=parse_decimal(asset.total_value),
        yield_rate=asset.yield_rate or 0.0,
        child_count=len(asset.child_assets),
        parent_count=len(asset.parent_assets),
        collateral_count=len(asset.collateral_for),
        compliance_status=asset.compliance_status,
        custody_status=asset.custody_status,
        risk_score=(
            asset.risk_score if asset.risk_score is not None else NODE_DEFAULT_RISK
        ),
        health_score=health_score,
        custodian=asset.custodian,
        liquidity_score=asset.liquidity_score,
        collateral_for=asset.collateral_for,
    )


def _lineage_edges(
    asset: AssetRecord, index: dict[str, GraphNode]
) -> Iterable[GraphEdge]:
    edge_type = "tokenization" if asset.asset_type == "synthetic" else "fractionalization"
    for parent_id in asset.parent_assets:
        if parent_id not in index:
            logger.debug("Skipping dangling parent %s of %s", parent_id, asset.id)
            continue
        yield GraphEdge(
            source=parent_id, target=asset.id, type=edge_type, label=edge_type
        )


def _collateral_edges(
    asset: AssetRecord, index: dict[str, GraphNode]
) -> Iterable[GraphEdge]:
    for target_id in asset.collateral_for:
        if target_id not in index:
            logger.debug("Skipping dangling collateral target %s of %s", target_id, asset.id)
            continue
        yield GraphEdge(
            source=asset.id,
            target=target_id,
            type="collateral",
            value=parse_decimal(asset.total_value) * COLLATERAL_RATIO,
            label="collateral",
        )


def _yield_edges(
    asset: AssetRecord, index: dict[str, GraphNode]
) -> Iterable[GraphEdge]:
    rate = asset.yield_rate
    if not rate or rate <= 0:
        return
    for child_id in asset.child_assets:
        if child_id not in index:
            logger.debug("Skipping dangling child %s of %s", child_id, asset.id)
            continue
        yield GraphEdge(
            source=asset.id,
            target=child_id,
            type="yield-flow",
            value=rate,
            label=f"{rate:.2f}% APY",
        )


def build_graph(
    assets: Iterable[AssetRecord],
    now: float | None = None,
    scoring: ScoringConfig = _DEFAULT_SCORING,
) -> GraphData:
    """Convert asset records into nodes and edges.

    One node per asset, in input order. Edges are emitted per asset in input
    order: parent lineage, then collateral, then yield flows to children.
    References to ids outside the working set are skipped.

    If two records share an id, both get a node but edges resolve against
    the last one.
    """
    if now is None:
        now = now_timestamp()
    assets = list(assets)

    nodes: list[GraphNode] = []
    index: dict[str, GraphNode] = {}
    for asset in assets:
        node = build_node(asset, calc_health_score(asset, now=now, scoring=scoring))
        nodes.append(node)
        index[asset.id] = node

    edges: list[GraphEdge] = []
    for asset in assets:
        edges.extend(_lineage_edges(asset, index))
        edges.extend(_collateral_edges(asset, index))
        edges.extend(_yield_edges(asset, index))

    logger.debug("Built graph with %d nodes and %d edges", len(nodes), len(edges))
    return GraphData(nodes=tuple(nodes), edges=tuple(edges))


def trace_lineage(assets: Iterable[AssetRecord], asset_id: str) -> list[AssetRecord]:
    """Follow the primary (first) parent back to the root asset.

    Returns the chain root-first, ending with ``asset_id``. Empty if the
    asset is unknown. Stops at a missing parent or on a cycle.
    """
    by_id = {a.id: a for a in assets}
    lineage: list[AssetRecord] = []
    seen: set[str] = set()

    current = by_id.get(asset_id)
    while current is not None and current.id not in seen:
        lineage.append(current)
        seen.add(current.id)
        if not current.parent_assets:
            break
        current = by_id.get(current.parent_assets[0])

    lineage.reverse()
    return lineage


def find_relationships(
    assets: Iterable[AssetRecord], asset_id: str
) -> dict[str, list[AssetRecord]]:
    """Resolve an asset's parents, children and collateral targets."""
    by_id = {a.id: a for a in assets}
    asset = by_id.get(asset_id)
    if asset is None:
        return {"parents": [], "children": [], "collateral": []}

    def resolve(ids: tuple[str, ...]) -> list[AssetRecord]:
        return [by_id[i] for i in ids if i in by_id]

    return {
        "parents": resolve(asset.parent_assets),
        "children": resolve(asset.child_assets),
        "collateral": resolve(asset.collateral_for),
    }
