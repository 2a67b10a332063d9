"""
Core module initialization.
Exports configuration, logging utilities and the error taxonomy.
"""

from qrmenu.core.config import get_settings, Settings, EnvironmentMode, FallbackMode
from qrmenu.core.exceptions import (
    MenuError,
    NotFoundError,
    StoreUnavailableError,
    StoreWriteError,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "FallbackMode",
    "MenuError",
    "NotFoundError",
    "StoreUnavailableError",
    "StoreWriteError",
]
