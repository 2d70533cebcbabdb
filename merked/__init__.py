"""
merked - deterministic Merkle fingerprints of byte buffers.

A buffer is split into fixed-size shards, each shard is hashed into a
leaf, and the leaves are folded into a single Merkle root. The result is
exported as a compact metadata record {n, l, r, s}.

Usage:
    from merked import DAG

    dag = DAG.from_buffer(data, slice_size="4M")
    print(dag.to_metadata("report.pdf"))
"""
# errors first: every other module depends on them
from merked.schemas.errors import (
    ErrorCodes,
    MerkedError,
    MerkedException,
    InvalidConfigurationException,
    InvalidInputException,
    MetadataValidationException,
)
from merked.crypto.hashing import DEFAULT_HASH_FUNC, Hasher, get_hash_func, sha256
from merked.merkle.merkle_tree import MerkleTree, build_merkle_root
from merked.split.splitter import split_buffer, parse_size
from merked.split.padding import pad_shard
from merked.schemas.metadata import DagMetadata
from merked.dag.dag import DAG

__version__ = "0.1.0"

__all__ = [
    "DAG",
    "DagMetadata",
    "MerkleTree",
    "build_merkle_root",
    "split_buffer",
    "parse_size",
    "pad_shard",
    "Hasher",
    "DEFAULT_HASH_FUNC",
    "get_hash_func",
    "sha256",
    "ErrorCodes",
    "MerkedError",
    "MerkedException",
    "InvalidConfigurationException",
    "InvalidInputException",
    "MetadataValidationException",
]
