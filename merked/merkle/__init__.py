"""
Merkle Tree

Deterministic tree construction with odd-carry: an unpaired node moves up
a level unchanged instead of being duplicated.

Usage:
    from merked.merkle import MerkleTree

    tree = MerkleTree(leaves)
    root = tree.root()
"""
from .merkle_tree import (
    MerkleTree,
    compute_tree_depth,
    build_merkle_rows,
    build_merkle_root,
)

__all__ = [
    "MerkleTree",
    "compute_tree_depth",
    "build_merkle_rows",
    "build_merkle_root",
]
