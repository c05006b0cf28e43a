"""Domain layer for causality-ssz.

Pure value objects (values, schemas, content IDs) and the error
hierarchy. Nothing in this layer performs I/O or logging.
"""
