"""
Config package export.

Keeps import sites clean and stable:
    from exact_online.config import get_settings, ExactSettings
"""

from __future__ import annotations

from .settings import ExactSettings, get_settings

__all__ = ["ExactSettings", "get_settings"]
