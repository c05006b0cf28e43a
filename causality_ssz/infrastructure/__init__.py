"""Infrastructure layer for causality-ssz."""
