"""Pure parsing functions for raw asset and alert payloads (no I/O)."""
from __future__ import annotations

import logging
import math
from typing import Any

from .models import (
    ALERT_SEVERITIES,
    AssetRecord,
    ComplianceEvent,
    MonitoringAlert,
    YieldDistribution,
)

logger = logging.getLogger(__name__)


def parse_decimal(value: Any) -> float:
    """Parse a decimal string (or number) to float, defaulting to 0.0.

    Examples:
        "1250000.50" → 1250000.5
        None → 0.0
        "n/a" → 0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def parse_optional_number(value: Any) -> float | None:
    """Parse an optional numeric field; anything unparseable becomes None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def _parse_timestamp(value: Any) -> int | None:
    number = parse_optional_number(value)
    return int(number) if number is not None else None


def _parse_ids(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def parse_asset(raw: dict[str, Any]) -> AssetRecord:
    """Build an AssetRecord from a camelCase API payload.

    Raises:
        ValueError: if the record has no ``id``.
    """
    asset_id = raw.get("id")
    if not asset_id:
        raise ValueError("Asset record has no id")

    total_yield = raw.get("totalYieldGenerated")
    return AssetRecord(
        id=str(asset_id),
        address=str(raw.get("address", "")),
        name=str(raw.get("name", "")),
        symbol=str(raw.get("symbol", "")),
        asset_type=str(raw.get("assetType", "")),
        owner=str(raw.get("owner", "")),
        total_value=str(raw.get("totalValue", "0")),
        compliance_status=str(raw.get("complianceStatus", "")),
        custody_status=str(raw.get("custodyStatus", "")),
        yield_rate=parse_optional_number(raw.get("yieldRate")),
        total_yield_generated=str(total_yield) if total_yield is not None else None,
        risk_score=parse_optional_number(raw.get("riskScore")),
        liquidity_score=parse_optional_number(raw.get("liquidityScore")),
        last_audit_date=_parse_timestamp(raw.get("lastAuditDate")),
        parent_assets=_parse_ids(raw.get("parentAssets")),
        child_assets=_parse_ids(raw.get("childAssets")),
        collateral_for=_parse_ids(raw.get("collateralFor")),
        custodian=raw.get("custodian"),
        currency=str(raw.get("currency", "USD")),
        description=raw.get("description"),
        created_at=_parse_timestamp(raw.get("createdAt")),
    )


def parse_assets(raw_items: list[dict[str, Any]]) -> list[AssetRecord]:
    """Parse a list of raw records, skipping (and logging) malformed ones."""
    assets: list[AssetRecord] = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object asset record: %r", raw)
            continue
        try:
            assets.append(parse_asset(raw))
        except ValueError as e:
            logger.warning("Skipping malformed asset record: %s", e)
    return assets


def parse_alert(raw: dict[str, Any]) -> MonitoringAlert:
    """Build a MonitoringAlert from a camelCase API payload.

    Unknown severities are logged and downgraded to ``low``.
    """
    severity = str(raw.get("severity", "low")).lower()
    if severity not in ALERT_SEVERITIES:
        logger.warning("Unknown severity %r on alert %s, using low", severity, raw.get("id"))
        severity = "low"
    return MonitoringAlert(
        id=str(raw.get("id", "")),
        severity=severity,
        type=str(raw.get("type", "")),
        asset_id=str(raw.get("assetId", "")),
        asset_name=str(raw.get("assetName", "")),
        message=str(raw.get("message", "")),
        timestamp=_parse_timestamp(raw.get("timestamp")) or 0,
        resolved=bool(raw.get("resolved", False)),
    )


def parse_alerts(raw_items: list[dict[str, Any]]) -> list[MonitoringAlert]:
    return [parse_alert(raw) for raw in raw_items if isinstance(raw, dict)]


def parse_compliance_event(raw: dict[str, Any]) -> ComplianceEvent:
    """Build a ComplianceEvent from a camelCase API payload.

    Raises:
        ValueError: if the record has no ``id``.
    """
    event_id = raw.get("id")
    if not event_id:
        raise ValueError("Compliance event has no id")
    return ComplianceEvent(
        id=str(event_id),
        asset_id=str(raw.get("assetId", "")),
        event_type=str(raw.get("eventType", "")),
        status=str(raw.get("status", "")),
        timestamp=_parse_timestamp(raw.get("timestamp")) or 0,
        details=raw.get("details"),
        document_hash=raw.get("documentHash"),
    )


def parse_compliance_events(raw_items: list[dict[str, Any]]) -> list[ComplianceEvent]:
    events: list[ComplianceEvent] = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            continue
        try:
            events.append(parse_compliance_event(raw))
        except ValueError as e:
            logger.warning("Skipping malformed compliance event: %s", e)
    return events


def parse_yield_distribution(raw: dict[str, Any]) -> YieldDistribution:
    """Build a YieldDistribution; ``amount`` stays a decimal string."""
    dist_id = raw.get("id")
    if not dist_id:
        raise ValueError("Yield distribution has no id")
    return YieldDistribution(
        id=str(dist_id),
        asset_id=str(raw.get("assetId", "")),
        amount=str(raw.get("amount", "0")),
        currency=str(raw.get("currency", "USD")),
        recipients=int(parse_decimal(raw.get("recipients"))),
        timestamp=_parse_timestamp(raw.get("timestamp")) or 0,
        tx_hash=str(raw.get("txHash", "")),
    )


def parse_yield_distributions(raw_items: list[dict[str, Any]]) -> list[YieldDistribution]:
    distributions: list[YieldDistribution] = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            continue
        try:
            distributions.append(parse_yield_distribution(raw))
        except ValueError as e:
            logger.warning("Skipping malformed yield distribution: %s", e)
    return distributions
