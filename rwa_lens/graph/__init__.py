"""Asset-lineage graph: build, filter, measure, export."""
from .builder import build_graph, find_relationships, trace_lineage
from .exporters import (
    export_asset,
    export_asset_csv,
    export_asset_json,
    export_graph,
    export_graph_csv,
    export_graph_json,
)
from .filters import filter_graph, search_assets
from .metrics import calc_graph_metrics

__all__ = [
    "build_graph",
    "calc_graph_metrics",
    "export_asset",
    "export_asset_csv",
    "export_asset_json",
    "export_graph",
    "export_graph_csv",
    "export_graph_json",
    "filter_graph",
    "find_relationships",
    "search_assets",
    "trace_lineage",
]
