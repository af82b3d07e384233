"""Core RoleHex utilities.

This module exports core utilities for use throughout the application.
"""

from rolehex.core.config import Settings, get_settings
from rolehex.core.logging import (
    LoggingContext,
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    log_execution,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "log_execution",
    "LoggingContext",
    "bind_correlation_id",
    "clear_context",
]
