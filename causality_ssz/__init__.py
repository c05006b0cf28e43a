"""
causality-ssz - Canonical SSZ encoding and content addressing

A closed tagged-union value model, its canonical Simple Serialize (SSZ)
encoding, and a Merkle hash-tree-root scheme that turns canonical
encodings into stable 32-byte identifiers for resources, expressions,
intents and effects.

Core guarantees:
- Canonical: one value, one byte string
- Deterministic: equal encodings always hash to equal IDs
- All-or-nothing: no partial results, no retries
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
