"""RWA lens — asset-lineage graphs, health scoring and portfolio analytics."""
from .graph import (
    build_graph,
    calc_graph_metrics,
    export_graph_csv,
    export_graph_json,
    filter_graph,
)
from .models import AssetRecord, FilterOptions, GraphData, GraphEdge, GraphNode
from .portfolio import calc_portfolio_metrics
from .scoring import assess_asset_health, calc_health_score

__version__ = "0.1.0"

__all__ = [
    "AssetRecord",
    "FilterOptions",
    "GraphData",
    "GraphEdge",
    "GraphNode",
    "assess_asset_health",
    "build_graph",
    "calc_graph_metrics",
    "calc_health_score",
    "calc_portfolio_metrics",
    "export_graph_csv",
    "export_graph_json",
    "filter_graph",
]
