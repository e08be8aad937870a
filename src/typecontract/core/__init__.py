# src/typecontract/core/__init__.py
"""Core infrastructure: Configuration, Logging."""

from typecontract.core.config import (
    TableOptions,
    TypeContractSettings,
    configure,
    get_settings,
    load_settings,
    override_settings,
    reset_settings,
    settings_from_dict,
)
from typecontract.core.logging import configure_logging, get_logger

__all__ = [
    "TableOptions",
    "TypeContractSettings",
    "configure",
    "configure_logging",
    "get_logger",
    "get_settings",
    "load_settings",
    "override_settings",
    "reset_settings",
    "settings_from_dict",
]
