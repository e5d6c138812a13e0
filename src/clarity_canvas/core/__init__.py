"""Core application wiring: settings and startup checks."""

from __future__ import annotations

from clarity_canvas.core.config import AppSettings
from clarity_canvas.core.startup_checks import validate_settings

__all__ = ["AppSettings", "validate_settings"]
