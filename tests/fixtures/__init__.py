"""
Test fixtures package for merked tests.

Usage:
    from fixtures import GOLDEN_BUFFER, make_golden_dag

    def test_something():
        dag = make_golden_dag()
"""

from .common import (
    GOLDEN_BUFFER,
    GOLDEN_SLICE_SIZE,
    GOLDEN_LEAVES_HEX,
    GOLDEN_ROOT_HEX,
    GOLDEN_ORIGINAL_LENGTH,
    GOLDEN_METADATA,
    make_leaves,
    make_shards,
    make_golden_dag,
    make_constant_source,
    RecordingSource,
)

__all__ = [
    "GOLDEN_BUFFER",
    "GOLDEN_SLICE_SIZE",
    "GOLDEN_LEAVES_HEX",
    "GOLDEN_ROOT_HEX",
    "GOLDEN_ORIGINAL_LENGTH",
    "GOLDEN_METADATA",
    "make_leaves",
    "make_shards",
    "make_golden_dag",
    "make_constant_source",
    "RecordingSource",
]
