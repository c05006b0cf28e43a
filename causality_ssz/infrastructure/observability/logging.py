"""Structured logging configuration with structlog.

The library never configures logging itself; a host process calls
configure_structlog() once at startup. Until then structlog's defaults
apply, which is what tests rely on when capturing log output.

Log Entry Format:
    {
        "timestamp": "2024-01-01T00:00:00.000000Z",
        "level": "debug",
        "event": "content_hash_computed",
        "service": "MerkleHasherService",
        "component": "merkle",
        "hash_algorithm": "sha256",
        "operation": "content_hash",
        ...additional context
    }

Environment Variables:
- SSZ_LOG_LEVEL: Minimum level (default: INFO). Codec events are debug.
- SSZ_LOG_FORMAT: "json" or "console", used when configure_structlog()
  is not told an environment (default: json).

Usage:
    from causality_ssz.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")   # JSON output
    configure_structlog(environment="development")  # Console output
    configure_structlog(level="DEBUG")               # every encode/decode
"""

import logging
import os

import structlog
from structlog.typing import Processor

LOG_LEVEL_ENV = "SSZ_LOG_LEVEL"
LOG_FORMAT_ENV = "SSZ_LOG_FORMAT"
DEFAULT_LOG_LEVEL = "INFO"

# SSZ_LOG_FORMAT value -> configure_structlog environment
_FORMAT_ENVIRONMENTS = {"json": "production", "console": "development"}


def _resolve_level(level: str | None) -> int:
    """Map a level name to a logging level, falling back to INFO.

    Args:
        level: Explicit level name, or None to read SSZ_LOG_LEVEL.

    Returns:
        The logging level integer (e.g., logging.INFO).
    """
    name = (level or os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).strip().upper()
    resolved = logging.getLevelNamesMapping().get(name)
    return resolved if resolved is not None else logging.INFO


def _resolve_environment(environment: str | None) -> str:
    if environment is not None:
        return environment
    log_format = os.getenv(LOG_FORMAT_ENV, "json").strip().lower()
    return _FORMAT_ENVIRONMENTS.get(log_format, "production")


def configure_structlog(
    environment: str | None = None, level: str | None = None
) -> None:
    """Configure structlog for the host process.

    Args:
        environment: 'production' for JSON output, 'development' for
            console. None reads SSZ_LOG_FORMAT, defaulting to JSON.
        level: Minimum level name. None reads SSZ_LOG_LEVEL.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if _resolve_environment(environment) == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger_for_service(
    service_name: str, component: str = "codec", **context: object
) -> structlog.BoundLogger:
    """Get a logger pre-bound with a service's identity and settings.

    Args:
        service_name: The name of the service (typically class name).
        component: One of "codec", "merkle" or "identity".
        **context: Settings that shape every result the service produces,
            such as max_depth or hash_algorithm.

    Returns:
        A BoundLogger with service, component and context bound.
    """
    return structlog.get_logger().bind(
        service=service_name,
        component=component,
        **context,
    )
