"""Public observability primitives: structured logging setup."""

from schema_enforcer.observability.logging import LOG_FORMATS, configure_logging, get_logger

__all__ = [
    "LOG_FORMATS",
    "configure_logging",
    "get_logger",
]
