"""Observability infrastructure for structured logging.

Usage:
    from causality_ssz.infrastructure.observability import configure_structlog

    # At host startup
    configure_structlog(environment="production")
"""

from causality_ssz.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_service,
)

__all__: list[str] = [
    "configure_structlog",
    "get_logger_for_service",
]
