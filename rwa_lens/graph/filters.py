"""Graph filtering: induced subgraph over nodes matching a FilterOptions predicate."""
from __future__ import annotations

from typing import Callable, Iterable

from ..models import AssetRecord, FilterOptions, GraphData, GraphNode

NodePredicate = Callable[[GraphNode], bool]


def _matches_text(query: str, *fields: str) -> bool:
    needle = query.lower()
    return any(needle in f.lower() for f in fields)


def node_matches_query(node: GraphNode, query: str) -> bool:
    return _matches_text(query, node.name, node.symbol, node.address, node.asset_type)


def _build_predicates(options: FilterOptions) -> list[NodePredicate]:
    checks: list[NodePredicate] = []

    if options.search_query:
        query = options.search_query
        checks.append(lambda n: node_matches_query(n, query))
    if options.asset_types:
        types = options.asset_types
        checks.append(lambda n: n.asset_type in types)
    if options.compliance_statuses:
        statuses = options.compliance_statuses
        checks.append(lambda n: n.compliance_status in statuses)
    if options.custody_statuses:
        custody = options.custody_statuses
        checks.append(lambda n: n.custody_status in custody)

    if options.min_value is not None:
        min_value = options.min_value
        checks.append(lambda n: n.total_value >= min_value)
    if options.max_value is not None:
        max_value = options.max_value
        checks.append(lambda n: n.total_value <= max_value)
    if options.min_yield_rate is not None:
        min_yield = options.min_yield_rate
        checks.append(lambda n: n.yield_rate >= min_yield)
    if options.max_yield_rate is not None:
        max_yield = options.max_yield_rate
        checks.append(lambda n: n.yield_rate <= max_yield)
    if options.min_health_score is not None:
        min_health = options.min_health_score
        checks.append(lambda n: n.health_score >= min_health)
    if options.max_risk_score is not None:
        max_risk = options.max_risk_score
        checks.append(lambda n: n.risk_score <= max_risk)

    if options.has_yield:
        checks.append(lambda n: n.yield_rate > 0)
    if options.has_children:
        checks.append(lambda n: n.child_count > 0)

    return checks


def filter_graph(graph: GraphData, options: FilterOptions | None = None) -> GraphData:
    """Keep nodes that satisfy every set constraint, and edges between them.

    Node and edge order is preserved. An empty predicate returns an equal graph.
    """
    if options is None or options.is_empty():
        return GraphData(nodes=tuple(graph.nodes), edges=tuple(graph.edges))

    checks = _build_predicates(options)
    nodes = tuple(n for n in graph.nodes if all(check(n) for check in checks))

    kept_ids = {n.id for n in nodes}
    edges = tuple(
        e for e in graph.edges if e.source in kept_ids and e.target in kept_ids
    )
    return GraphData(nodes=nodes, edges=edges)


def search_assets(assets: Iterable[AssetRecord], query: str) -> list[AssetRecord]:
    """Case-insensitive search over name, symbol, address and asset type."""
    if not query:
        return list(assets)
    return [
        a
        for a in assets
        if _matches_text(query, a.name, a.symbol, a.address, a.asset_type)
    ]
