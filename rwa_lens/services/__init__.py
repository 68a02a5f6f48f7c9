"""Shared RWA lens service."""
from .lens import AssetNotFoundError, LensService

__all__ = ["AssetNotFoundError", "LensService"]
