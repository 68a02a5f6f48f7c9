"""JSON and sectioned CSV export of the asset graph and of single asset records."""
from __future__ import annotations

import csv
import io
import json
from typing import Sequence

from ..models import (
    AssetRecord,
    ComplianceEvent,
    GraphData,
    GraphEdge,
    GraphNode,
    YieldDistribution,
)

NODE_COLUMNS = (
    "ID",
    "Address",
    "Name",
    "Symbol",
    "Asset Type",
    "Total Value",
    "Yield Rate",
    "Health Score",
    "Risk Score",
    "Compliance Status",
)

EDGE_COLUMNS = ("Source", "Target", "Type", "Value", "Label")

COMPLIANCE_COLUMNS = ("ID", "Event Type", "Status", "Timestamp", "Details", "Document Hash")

YIELD_COLUMNS = ("ID", "Amount", "Currency", "Recipients", "Timestamp", "Tx Hash")

EXPORT_FORMATS = ("json", "csv")


def format_number(value: float | int | None) -> str:
    """Render a number for CSV; whole floats lose their trailing ``.0``."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def export_graph_json(graph: GraphData) -> str:
    """Serialize every node and edge field, indented, in a fixed key order."""
    return json.dumps(graph.to_dict(), indent=2)


def _node_row(node: GraphNode) -> list[str]:
    return [
        node.id,
        node.address,
        node.name,
        node.symbol,
        node.asset_type,
        format_number(node.total_value),
        format_number(node.yield_rate),
        format_number(node.health_score),
        format_number(node.risk_score),
        node.compliance_status,
    ]


def _edge_row(edge: GraphEdge) -> list[str]:
    return [
        edge.source,
        edge.target,
        edge.type,
        format_number(edge.value),
        edge.label or "",
    ]


def export_graph_csv(graph: GraphData) -> str:
    """Nodes block and edges block, each under a ``#`` section line.

    Cells containing a comma, quote or newline are quoted.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")

    buf.write("# Nodes\n")
    writer.writerow(NODE_COLUMNS)
    writer.writerows(_node_row(n) for n in graph.nodes)

    buf.write("\n# Edges\n")
    writer.writerow(EDGE_COLUMNS)
    writer.writerows(_edge_row(e) for e in graph.edges)

    return buf.getvalue().rstrip("\n")


def export_graph(graph: GraphData, fmt: str) -> str:
    if fmt == "json":
        return export_graph_json(graph)
    if fmt == "csv":
        return export_graph_csv(graph)
    raise ValueError(f"Unsupported export format '{fmt}'")


def _cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ";".join(str(v) for v in value)
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def export_asset_json(
    asset: AssetRecord,
    compliance_events: Sequence[ComplianceEvent] | None = None,
    yield_distributions: Sequence[YieldDistribution] | None = None,
) -> str:
    """Asset record plus whichever history sections were requested.

    A section passed as ``None`` is omitted; an empty sequence is kept.
    """
    data: dict[str, object] = {"asset": asset.to_dict()}
    if compliance_events is not None:
        data["complianceEvents"] = [e.to_dict() for e in compliance_events]
    if yield_distributions is not None:
        data["yieldDistributions"] = [d.to_dict() for d in yield_distributions]
    return json.dumps(data, indent=2)


def export_asset_csv(
    asset: AssetRecord,
    compliance_events: Sequence[ComplianceEvent] | None = None,
    yield_distributions: Sequence[YieldDistribution] | None = None,
) -> str:
    """``# Asset`` field/value block, then optional history blocks.

    List fields are joined with ``;``.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")

    buf.write("# Asset\n")
    writer.writerow(("Field", "Value"))
    writer.writerows((key, _cell(value)) for key, value in asset.to_dict().items())

    if compliance_events is not None:
        buf.write("\n# Compliance Events\n")
        writer.writerow(COMPLIANCE_COLUMNS)
        writer.writerows(
            [e.id, e.event_type, e.status, str(e.timestamp), e.details or "", e.document_hash or ""]
            for e in compliance_events
        )

    if yield_distributions is not None:
        buf.write("\n# Yield Distributions\n")
        writer.writerow(YIELD_COLUMNS)
        writer.writerows(
            [d.id, d.amount, d.currency, str(d.recipients), str(d.timestamp), d.tx_hash]
            for d in yield_distributions
        )

    return buf.getvalue().rstrip("\n")


def export_asset(
    asset: AssetRecord,
    fmt: str,
    compliance_events: Sequence[ComplianceEvent] | None = None,
    yield_distributions: Sequence[YieldDistribution] | None = None,
) -> str:
    if fmt == "json":
        return export_asset_json(asset, compliance_events, yield_distributions)
    if fmt == "csv":
        return export_asset_csv(asset, compliance_events, yield_distributions)
    raise ValueError(f"Unsupported export format '{fmt}'")
