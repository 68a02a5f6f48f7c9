"""Command-line interface for the RWA lens."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from .config import load_config
from .graph.exporters import EXPORT_FORMATS
from .logging_setup import configure_logging
from .models import ASSET_TYPES, COMPLIANCE_STATUSES, CUSTODY_STATUSES, FilterOptions
from .services import AssetNotFoundError, LensService

logger = logging.getLogger(__name__)


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("filters")
    group.add_argument("--search", default=None, help="Text match on name/symbol/address/type")
    group.add_argument(
        "--asset-type", action="append", choices=ASSET_TYPES, default=None,
        help="Keep only this asset type (repeatable)",
    )
    group.add_argument(
        "--compliance", action="append", choices=COMPLIANCE_STATUSES, default=None,
        help="Keep only this compliance status (repeatable)",
    )
    group.add_argument(
        "--custody", action="append", choices=CUSTODY_STATUSES, default=None,
        help="Keep only this custody status (repeatable)",
    )
    group.add_argument("--min-value", type=float, default=None)
    group.add_argument("--max-value", type=float, default=None)
    group.add_argument("--min-yield", type=float, default=None)
    group.add_argument("--max-yield", type=float, default=None)
    group.add_argument("--min-health", type=float, default=None)
    group.add_argument("--max-risk", type=float, default=None)
    group.add_argument("--has-yield", action="store_true")
    group.add_argument("--has-children", action="store_true")


def filters_from_args(args: argparse.Namespace) -> FilterOptions | None:
    """Translate parsed filter flags into FilterOptions; None if none were given."""
    options = FilterOptions(
        search_query=args.search,
        asset_types=frozenset(args.asset_type) if args.asset_type else None,
        compliance_statuses=frozenset(args.compliance) if args.compliance else None,
        custody_statuses=frozenset(args.custody) if args.custody else None,
        min_value=args.min_value,
        max_value=args.max_value,
        min_yield_rate=args.min_yield,
        max_yield_rate=args.max_yield,
        min_health_score=args.min_health,
        max_risk_score=args.max_risk,
        has_yield=args.has_yield,
        has_children=args.has_children,
    )
    return None if options.is_empty() else options


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="rwa-lens",
        description="Real-world asset lineage graph and portfolio analytics",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    graph_parser = sub.add_parser("graph", help="Build the asset graph and print graph metrics")
    _add_filter_args(graph_parser)

    sub.add_parser("metrics", help="Print portfolio metrics")

    assets_parser = sub.add_parser("assets", help="List assets, optionally by owner or address")
    assets_parser.add_argument("--owner", default=None, help="Owner address (case-insensitive)")
    assets_parser.add_argument("--address", default=None, help="Token address (case-insensitive)")

    yield_parser = sub.add_parser(
        "yield", help="Yield totals and statistics, or one asset's payouts"
    )
    yield_parser.add_argument("--asset-type", choices=ASSET_TYPES, default=None)
    yield_parser.add_argument(
        "--asset", default=None, help="List yield distributions for this asset"
    )

    compliance_parser = sub.add_parser(
        "compliance", help="Compliance status and events of an asset"
    )
    compliance_parser.add_argument("asset_id")

    health_parser = sub.add_parser("health", help="Health ranking or a single asset assessment")
    health_parser.add_argument("--asset", default=None, help="Assess one asset in detail")
    health_parser.add_argument(
        "--threshold", type=float, default=None,
        help="Only list assets with health below this score",
    )

    lineage_parser = sub.add_parser("lineage", help="Trace an asset back to its root")
    lineage_parser.add_argument("asset_id")

    export_parser = sub.add_parser("export", help="Export the graph as JSON or CSV")
    export_parser.add_argument("format", choices=EXPORT_FORMATS)
    export_parser.add_argument("--output", default=None, help="Write to file instead of stdout")
    _add_filter_args(export_parser)

    export_asset_parser = sub.add_parser(
        "export-asset", help="Export one asset, optionally with its history"
    )
    export_asset_parser.add_argument("asset_id")
    export_asset_parser.add_argument("format", choices=EXPORT_FORMATS)
    export_asset_parser.add_argument(
        "--compliance", action="store_true", help="Include compliance events"
    )
    export_asset_parser.add_argument(
        "--yield-history", action="store_true", help="Include yield distributions"
    )
    export_asset_parser.add_argument(
        "--output", default=None, help="Write to file instead of stdout"
    )

    sub.add_parser("report", help="Send the portfolio report through enabled notifiers")

    return parser


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2))


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    lens = LensService(config)

    if args.command == "graph":
        metrics = await lens.get_graph_metrics(filters_from_args(args))
        _print_json(metrics.to_dict())
    elif args.command == "metrics":
        metrics = await lens.get_portfolio_metrics()
        _print_json(metrics.to_dict())
    elif args.command == "assets":
        if args.owner:
            assets = await lens.get_assets_by_owner(args.owner)
        elif args.address:
            assets = await lens.get_assets_by_address(args.address)
        else:
            assets = await lens.get_assets()
        _print_json([a.to_dict() for a in assets])
    elif args.command == "yield":
        if args.asset:
            distributions = await lens.get_yield_flows(args.asset)
            _print_json([d.to_dict() for d in distributions])
        else:
            total = await lens.get_total_yield(args.asset_type)
            stats = await lens.get_yield_statistics()
            _print_json({"totalYield": total.to_dict(), "statistics": stats.to_dict()})
    elif args.command == "compliance":
        report = await lens.get_compliance_status(args.asset_id)
        _print_json(report.to_dict())
    elif args.command == "health":
        if args.asset:
            health = await lens.get_asset_health(args.asset)
            _print_json(health.to_dict())
        else:
            rankings = await lens.get_health_scores(args.threshold)
            _print_json([asdict(r) for r in rankings])
    elif args.command == "lineage":
        lineage = await lens.get_lineage(args.asset_id)
        for depth, asset in enumerate(lineage):
            print(f"{'  ' * depth}{asset.id}  {asset.name} [{asset.asset_type}]")
    elif args.command == "export":
        content = await lens.export_graph(args.format, filters_from_args(args))
        if args.output:
            Path(args.output).write_text(content + "\n")
            logger.info("Graph exported to %s", args.output)
        else:
            print(content)
    elif args.command == "export-asset":
        content = await lens.export_asset_data(
            args.asset_id,
            args.format,
            include_compliance=args.compliance,
            include_yield_history=args.yield_history,
        )
        if args.output:
            Path(args.output).write_text(content + "\n")
            logger.info("Asset %s exported to %s", args.asset_id, args.output)
        else:
            print(content)
    elif args.command == "report":
        print(await lens.send_report())
    else:
        build_parser().print_help()
        sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_run(args))
    except AssetNotFoundError as e:
        logger.error("%s", e)
        sys.exit(2)
