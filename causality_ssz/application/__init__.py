"""Application layer for causality-ssz: codec, hasher and identity services."""
