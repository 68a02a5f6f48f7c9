"""Monitoring alert helpers."""
from __future__ import annotations

from typing import Iterable

from .models import AlertSummary, MonitoringAlert

URGENT_SEVERITIES = frozenset({"critical", "high"})


def summarize_alerts(alerts: Iterable[MonitoringAlert]) -> AlertSummary:
    """Count unresolved alerts and unresolved critical alerts."""
    open_alerts = [a for a in alerts if not a.resolved]
    return AlertSummary(
        total_alerts=len(open_alerts),
        critical_alerts=sum(1 for a in open_alerts if a.severity == "critical"),
    )


def critical_alerts(alerts: Iterable[MonitoringAlert]) -> list[MonitoringAlert]:
    """Unresolved critical and high severity alerts."""
    return [a for a in alerts if not a.resolved and a.severity in URGENT_SEVERITIES]


def filter_alerts(
    alerts: Iterable[MonitoringAlert],
    severity: str | None = None,
    resolved: bool | None = None,
    limit: int | None = None,
) -> list[MonitoringAlert]:
    result = [
        a
        for a in alerts
        if (severity is None or a.severity == severity)
        and (resolved is None or a.resolved == resolved)
    ]
    if limit is not None:
        result = result[:limit]
    return result
