"""Unit tests for graph metrics."""
from __future__ import annotations

from typing import Callable

import pytest

from rwa_lens.graph.builder import build_graph
from rwa_lens.graph.metrics import calc_degrees, calc_graph_metrics
from rwa_lens.models import AssetRecord, GraphData, GraphEdge, GraphMetrics

AssetFactory = Callable[..., AssetRecord]


class TestCalcDegrees:
    def test_counts_both_endpoints(self, sample_assets: list[AssetRecord], now: int) -> None:
        degrees = calc_degrees(build_graph(sample_assets, now=now))
        assert degrees == {"RE-1": 5, "FR-1": 4, "FR-2": 2, "SY-1": 2, "DP-1": 1}

    def test_parallel_edges_each_count(self) -> None:
        graph = GraphData(
            edges=(
                GraphEdge("A", "B", "yield-flow", 5.0, "5.00% APY"),
                GraphEdge("A", "B", "fractionalization"),
            )
        )
        assert calc_degrees(graph) == {"A": 2, "B": 2}


class TestCalcGraphMetrics:
    def test_sample_portfolio(self, sample_assets: list[AssetRecord], now: int) -> None:
        metrics = calc_graph_metrics(build_graph(sample_assets, now=now))
        assert metrics.total_nodes == 5
        assert metrics.total_edges == 7
        assert metrics.avg_degree == pytest.approx(2.8)
        assert metrics.isolated_nodes == 0
        assert metrics.avg_health_score == pytest.approx(66.0)
        assert metrics.total_value == 2_500_000.0

    def test_isolated_nodes_excluded_from_avg_degree(self, make_asset: AssetFactory) -> None:
        assets = [
            make_asset("A", child_assets=("B",), yield_rate=2.0),
            make_asset("B"),
            make_asset("C"),
        ]
        metrics = calc_graph_metrics(build_graph(assets))
        assert metrics.total_edges == 1
        assert metrics.isolated_nodes == 1
        assert metrics.avg_degree == 1.0

    def test_two_asset_lineage(self, make_asset: AssetFactory) -> None:
        assets = [
            make_asset("X", total_value="100"),
            make_asset("Y", total_value="50", parent_assets=("X",)),
        ]
        metrics = calc_graph_metrics(build_graph(assets))
        assert metrics.total_nodes == 2
        assert metrics.total_edges == 1
        assert metrics.isolated_nodes == 0
        assert metrics.avg_degree == 1.0
        assert metrics.total_value == 150.0

    def test_empty_graph(self) -> None:
        metrics = calc_graph_metrics(GraphData())
        assert metrics == GraphMetrics()
        assert isinstance(metrics.total_value, float)

    def test_to_dict(self) -> None:
        assert GraphMetrics(total_nodes=3).to_dict() == {
            "totalNodes": 3,
            "totalEdges": 0,
            "avgDegree": 0.0,
            "isolatedNodes": 0,
            "avgHealthScore": 0.0,
            "totalValue": 0.0,
        }
