"""Asset and alert sources."""
from .api import AtlasApiClient
from .file import FileAssetSource

__all__ = ["AtlasApiClient", "FileAssetSource"]
