"""Source of monitoring alerts."""
from typing import Protocol

from ..models import MonitoringAlert


class AlertSource(Protocol):
    """Abstract interface for fetching monitoring alerts."""

    async def fetch_alerts(
        self,
        severity: str | None = None,
        resolved: bool | None = None,
        limit: int | None = None,
    ) -> list[MonitoringAlert]: ...
