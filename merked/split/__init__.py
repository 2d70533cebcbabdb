"""
Shard splitting and padding.
"""
from .splitter import (
    SplitOptions,
    parse_size,
    check_options,
    split,
    split_buffer,
    split_by_bytes,
    split_by_lines,
    split_by_line_bytes,
    create_filenames,
    split_sync,
)
from .padding import (
    RandomSource,
    pad_shard,
    pad_shards,
    random_padding,
)

__all__ = [
    "SplitOptions",
    "parse_size",
    "check_options",
    "split",
    "split_buffer",
    "split_by_bytes",
    "split_by_lines",
    "split_by_line_bytes",
    "create_filenames",
    "split_sync",
    "RandomSource",
    "pad_shard",
    "pad_shards",
    "random_padding",
]
