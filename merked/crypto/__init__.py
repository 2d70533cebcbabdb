"""
Hashing utilities for shard leaves and Merkle parent nodes.
"""
from .hashing import (
    Hasher,
    DEFAULT_HASH_FUNC,
    HASH_FUNCTIONS,
    sha256,
    get_hash_func,
    hash_bytes,
    hash_concat,
    to_hex,
    from_hex,
)

__all__ = [
    "Hasher",
    "DEFAULT_HASH_FUNC",
    "HASH_FUNCTIONS",
    "sha256",
    "get_hash_func",
    "hash_bytes",
    "hash_concat",
    "to_hex",
    "from_hex",
]
