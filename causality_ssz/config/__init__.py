"""Configuration module for causality-ssz.

Available Configurations:
- CodecConfig: Depth limit, default strictness and Merkle node hash
"""

from causality_ssz.config.codec_config import (
    DEFAULT_CODEC_CONFIG,
    TEST_CODEC_CONFIG,
    CodecConfig,
)

__all__ = [
    "CodecConfig",
    "DEFAULT_CODEC_CONFIG",
    "TEST_CODEC_CONFIG",
]
