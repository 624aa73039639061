"""
Core utilities — shared exceptions and cross-cutting concerns used by the
analysis engine, storage layer, and pipeline.
"""
