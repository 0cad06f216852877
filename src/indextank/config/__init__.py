"""Environment-driven configuration for the IndexTank client."""

from indextank.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
