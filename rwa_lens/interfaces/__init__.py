"""Protocol interfaces for the RWA lens."""
from .alert_source import AlertSource
from .asset_source import AssetSource
from .notifier import Notifier

__all__ = ["AlertSource", "AssetSource", "Notifier"]
