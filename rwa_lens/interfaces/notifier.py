"""Notifier protocol — delivery channel for portfolio reports and alert digests."""
from typing import Protocol


class Notifier(Protocol):
    """Abstract interface for delivering lens output to people."""

    async def send_report(self, message: str, subject: str = "", silent: bool = True) -> bool: ...

    async def send_alert(self, message: str, subject: str = "") -> bool: ...
