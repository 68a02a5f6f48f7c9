"""Unit tests for the graph builder."""
from __future__ import annotations

from typing import Callable

from rwa_lens.graph.builder import build_graph, find_relationships, trace_lineage
from rwa_lens.models import AssetRecord, GraphEdge

AssetFactory = Callable[..., AssetRecord]


class TestBuildGraphNodes:
    def test_one_node_per_asset_in_order(
        self, sample_assets: list[AssetRecord], now: int
    ) -> None:
        graph = build_graph(sample_assets, now=now)
        assert [n.id for n in graph.nodes] == ["RE-1", "FR-1", "FR-2", "SY-1", "DP-1"]

    def test_node_fields(self, sample_assets: list[AssetRecord], now: int) -> None:
        tower = build_graph(sample_assets, now=now).nodes[0]
        assert tower.total_value == 1_000_000.0
        assert tower.yield_rate == 5.5
        assert tower.child_count == 2
        assert tower.parent_count == 0
        assert tower.collateral_count == 1
        assert tower.health_score == 86
        assert tower.risk_score == 20
        assert tower.custodian == "First Custody Bank"
        assert tower.collateral_for == ("DP-1",)

    def test_counts_include_dangling_references(
        self, sample_assets: list[AssetRecord], now: int
    ) -> None:
        fraction_b = build_graph(sample_assets, now=now).nodes[2]
        assert fraction_b.parent_count == 2

    def test_invalid_total_value_becomes_zero(
        self, sample_assets: list[AssetRecord], now: int
    ) -> None:
        synthetic = build_graph(sample_assets, now=now).nodes[3]
        assert synthetic.total_value == 0.0

    def test_missing_yield_and_risk_defaults(
        self, make_asset: AssetFactory, now: int
    ) -> None:
        node = build_graph([make_asset("A")], now=now).nodes[0]
        assert node.yield_rate == 0.0
        assert node.risk_score == 50.0
        assert node.liquidity_score is None

    def test_empty_input(self) -> None:
        graph = build_graph([])
        assert graph.nodes == ()
        assert graph.edges == ()


class TestBuildGraphEdges:
    def test_edge_order_and_kinds(
        self, sample_assets: list[AssetRecord], now: int
    ) -> None:
        graph = build_graph(sample_assets, now=now)
        assert list(graph.edges) == [
            GraphEdge("RE-1", "DP-1", "collateral", 800_000.0, "collateral"),
            GraphEdge("RE-1", "FR-1", "yield-flow", 5.5, "5.50% APY"),
            GraphEdge("RE-1", "FR-2", "yield-flow", 5.5, "5.50% APY"),
            GraphEdge("RE-1", "FR-1", "fractionalization", None, "fractionalization"),
            GraphEdge("FR-1", "SY-1", "yield-flow", 5.5, "5.50% APY"),
            GraphEdge("RE-1", "FR-2", "fractionalization", None, "fractionalization"),
            GraphEdge("FR-1", "SY-1", "tokenization", None, "tokenization"),
        ]

    def test_every_edge_endpoint_is_a_node(
        self, sample_assets: list[AssetRecord], now: int
    ) -> None:
        graph = build_graph(sample_assets, now=now)
        ids = {n.id for n in graph.nodes}
        assert all(e.source in ids and e.target in ids for e in graph.edges)

    def test_dangling_parent_emits_no_edge(self, make_asset: AssetFactory) -> None:
        graph = build_graph([make_asset("A", parent_assets=("MISSING",))])
        assert len(graph.nodes) == 1
        assert graph.edges == ()

    def test_dangling_collateral_and_child_emit_no_edge(
        self, make_asset: AssetFactory
    ) -> None:
        asset = make_asset(
            "A", yield_rate=3.0, child_assets=("NOPE",), collateral_for=("NADA",)
        )
        assert build_graph([asset]).edges == ()

    def test_collateral_value_uses_own_record_when_ids_repeat(
        self, make_asset: AssetFactory
    ) -> None:
        assets = [
            make_asset("A", total_value="100", collateral_for=("T",)),
            make_asset("A", total_value="200"),
            make_asset("T"),
        ]
        (edge,) = build_graph(assets).edges
        assert edge.type == "collateral"
        assert edge.value == 80.0

    def test_no_yield_edges_without_positive_yield(
        self, make_asset: AssetFactory
    ) -> None:
        assets = [
            make_asset("P", yield_rate=0.0, child_assets=("C",)),
            make_asset("C"),
        ]
        assert build_graph(assets).edges == ()

    def test_yield_label_two_decimals(self, make_asset: AssetFactory) -> None:
        assets = [make_asset("P", yield_rate=7.5, child_assets=("C",)), make_asset("C")]
        (edge,) = build_graph(assets).edges
        assert edge.label == "7.50% APY"
        assert edge.value == 7.5

    def test_two_asset_lineage(self, make_asset: AssetFactory) -> None:
        assets = [
            make_asset("X", total_value="100"),
            make_asset("Y", total_value="50", parent_assets=("X",)),
        ]
        graph = build_graph(assets)
        assert len(graph.nodes) == 2
        assert graph.edges == (
            GraphEdge("X", "Y", "fractionalization", None, "fractionalization"),
        )

    def test_input_is_not_mutated(
        self, sample_assets: list[AssetRecord], now: int
    ) -> None:
        before = list(sample_assets)
        build_graph(sample_assets, now=now)
        assert sample_assets == before

    def test_accepts_generator(self, make_asset: AssetFactory) -> None:
        graph = build_graph(
            make_asset(i, parent_assets=("A",) if i == "B" else ()) for i in ("A", "B")
        )
        assert len(graph.nodes) == 2
        assert len(graph.edges) == 1


class TestTraceLineage:
    def test_root_first(self, sample_assets: list[AssetRecord]) -> None:
        lineage = trace_lineage(sample_assets, "SY-1")
        assert [a.id for a in lineage] == ["RE-1", "FR-1", "SY-1"]

    def test_root_asset(self, sample_assets: list[AssetRecord]) -> None:
        assert [a.id for a in trace_lineage(sample_assets, "RE-1")] == ["RE-1"]

    def test_unknown_asset(self, sample_assets: list[AssetRecord]) -> None:
        assert trace_lineage(sample_assets, "NOPE") == []

    def test_stops_at_missing_parent(self, make_asset: AssetFactory) -> None:
        lineage = trace_lineage([make_asset("A", parent_assets=("GONE",))], "A")
        assert [a.id for a in lineage] == ["A"]

    def test_stops_on_cycle(self, make_asset: AssetFactory) -> None:
        assets = [
            make_asset("A", parent_assets=("B",)),
            make_asset("B", parent_assets=("A",)),
        ]
        assert [a.id for a in trace_lineage(assets, "A")] == ["B", "A"]


class TestFindRelationships:
    def test_resolves_known_ids(self, sample_assets: list[AssetRecord]) -> None:
        rel = find_relationships(sample_assets, "RE-1")
        assert [a.id for a in rel["children"]] == ["FR-1", "FR-2"]
        assert [a.id for a in rel["collateral"]] == ["DP-1"]
        assert rel["parents"] == []

    def test_skips_dangling(self, sample_assets: list[AssetRecord]) -> None:
        rel = find_relationships(sample_assets, "FR-2")
        assert [a.id for a in rel["parents"]] == ["RE-1"]

    def test_unknown_asset(self, sample_assets: list[AssetRecord]) -> None:
        assert find_relationships(sample_assets, "NOPE") == {
            "parents": [],
            "children": [],
            "collateral": [],
        }
