"""Graph-level aggregate statistics."""
from __future__ import annotations

from collections import defaultdict

from ..models import GraphData, GraphMetrics


def calc_degrees(graph: GraphData) -> dict[str, int]:
    """Undirected degree per id that appears on at least one edge."""
    degrees: dict[str, int] = defaultdict(int)
    for edge in graph.edges:
        degrees[edge.source] += 1
        degrees[edge.target] += 1
    return dict(degrees)


def calc_graph_metrics(graph: GraphData) -> GraphMetrics:
    """Node/edge counts, average degree, isolated nodes, health and value totals.

    The average degree is taken over connected ids only, not over every node.
    """
    degrees = calc_degrees(graph)
    avg_degree = sum(degrees.values()) / len(degrees) if degrees else 0.0

    isolated = sum(1 for node in graph.nodes if node.id not in degrees)

    total_nodes = len(graph.nodes)
    avg_health = (
        sum(node.health_score for node in graph.nodes) / total_nodes
        if total_nodes
        else 0.0
    )

    return GraphMetrics(
        total_nodes=total_nodes,
        total_edges=len(graph.edges),
        avg_degree=avg_degree,
        isolated_nodes=isolated,
        avg_health_score=avg_health,
        total_value=sum((node.total_value for node in graph.nodes), 0.0),
    )
