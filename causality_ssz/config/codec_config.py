"""Codec and hasher configuration.

This module defines configuration for SSZ encoding, decoding and Merkle
hashing, with environment variable overrides for deployment tuning.

Environment Variables:
- SSZ_MAX_DEPTH: Deepest value nesting encode/decode accept (default: 64)
- SSZ_DEFAULT_STRICTNESS: "strict" or "lenient" decoding (default: strict)
- SSZ_HASH_ALGORITHM: "sha256" or "blake3" Merkle node hash (default: sha256)

Changing SSZ_HASH_ALGORITHM changes every content ID. All parties that
compare IDs must agree on it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TypeVar

from causality_ssz.domain.models.codec_options import HashAlgorithm, Strictness

DEFAULT_MAX_DEPTH: int = 64

_Choice = TypeVar("_Choice", Strictness, HashAlgorithm)


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_choice_env(key: str, default: _Choice) -> _Choice:
    """Get an enum-valued environment variable with default.

    Matching is case-insensitive; unknown values fall back to the default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return type(default)(value.strip().lower())
    except ValueError:
        return default


@dataclass(frozen=True)
class CodecConfig:
    """Configuration for the codec, Merkle hasher and identity services.

    All values can be overridden via environment variables.

    Attributes:
        max_depth: Deepest nesting accepted by encode and decode.
                   Default: 64. Bounds recursion on hostile input.
        default_strictness: Strictness used when decode is not told one.
                            Default: STRICT.
        hash_algorithm: Node hash for Merkle trees.
                        Default: SHA256.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    default_strictness: Strictness = Strictness.STRICT
    hash_algorithm: HashAlgorithm = HashAlgorithm.SHA256

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if not isinstance(self.default_strictness, Strictness):
            raise ValueError(
                f"default_strictness must be a Strictness, got {self.default_strictness!r}"
            )
        if not isinstance(self.hash_algorithm, HashAlgorithm):
            raise ValueError(
                f"hash_algorithm must be a HashAlgorithm, got {self.hash_algorithm!r}"
            )

    @classmethod
    def from_environment(cls) -> CodecConfig:
        """Create config from environment variables with defaults.

        Environment Variables:
            SSZ_MAX_DEPTH: Max nesting depth (default: 64)
            SSZ_DEFAULT_STRICTNESS: strict | lenient (default: strict)
            SSZ_HASH_ALGORITHM: sha256 | blake3 (default: sha256)

        Returns:
            CodecConfig with values from environment or defaults.
        """
        return cls(
            max_depth=_get_int_env("SSZ_MAX_DEPTH", DEFAULT_MAX_DEPTH),
            default_strictness=_get_choice_env(
                "SSZ_DEFAULT_STRICTNESS", Strictness.STRICT
            ),
            hash_algorithm=_get_choice_env("SSZ_HASH_ALGORITHM", HashAlgorithm.SHA256),
        )


# Pre-defined configurations for common use cases

# Default config (built-in defaults, environment ignored)
DEFAULT_CODEC_CONFIG = CodecConfig()

# Testing config with a shallow depth limit so limit tests stay small
TEST_CODEC_CONFIG = CodecConfig(max_depth=8)
