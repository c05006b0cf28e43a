"""Logging mixin shared by the codec, Merkle hasher and identity services.

Every service logger carries the configuration that decides its output:
two content hashes only compare when they were computed with the same
hash_algorithm, and a decode failure only reproduces under the same
max_depth. Binding both once at construction puts them on every event.

Usage:
    class MerkleHasherService(LoggingMixin):
        def __init__(self, config: CodecConfig | None = None) -> None:
            self.config = config or DEFAULT_CODEC_CONFIG
            self._init_logger(component="merkle")

        def content_hash(self, data: bytes) -> ContentHash:
            log = self._log_operation("content_hash", length=len(data))
            ...
            log.debug("content_hash_computed", content_hash=digest.hex())
"""

import structlog

from causality_ssz.config.codec_config import CodecConfig
from causality_ssz.infrastructure.observability.logging import get_logger_for_service


class LoggingMixin:
    """Mixin providing config-aware structured logging for services.

    The logger is bound with:
    - service: The class name of the service
    - component: "codec", "merkle" or "identity"
    - max_depth, hash_algorithm: From the service's ``config``

    Attributes:
        config: The service's CodecConfig; set before _init_logger().
        _log: The structlog BoundLogger for this service instance.
    """

    config: CodecConfig
    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "codec") -> None:
        """Bind the service logger.

        Must run after ``self.config`` is set.

        Args:
            component: The component type for log categorization.
        """
        self._log = get_logger_for_service(
            self.__class__.__name__,
            component,
            max_depth=self.config.max_depth,
            hash_algorithm=str(self.config.hash_algorithm),
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Create an operation-scoped logger.

        Args:
            operation: Name of the codec operation (encode, decode, ...).
            **context: Per-call context such as length or variant.

        Returns:
            BoundLogger with operation context.
        """
        return self._log.bind(operation=operation, **context)
