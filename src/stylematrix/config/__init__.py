"""Configuration package.

Usage:
    from stylematrix.config import get_settings

    settings = get_settings()
    settings.max_subtree_nodes
"""

from .settings import CaptureSettings, get_settings, reset_settings

__all__ = [
    "CaptureSettings",
    "get_settings",
    "reset_settings",
]
