"""Per-call options for the codec and hasher."""

from enum import StrEnum


class Strictness(StrEnum):
    """How decode treats bytes the schema does not account for.

    STRICT rejects trailing bytes after a fixed-size value and gap bytes
    between a container's fixed zone and its first variable element.
    LENIENT ignores both.
    """

    STRICT = "strict"
    LENIENT = "lenient"


class HashAlgorithm(StrEnum):
    """Cryptographic hash used for every internal Merkle node."""

    SHA256 = "sha256"
    BLAKE3 = "blake3"
