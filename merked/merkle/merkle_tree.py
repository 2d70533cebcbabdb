"""
Merkle Tree Implementation
Deterministic Merkle tree construction over an ordered list of leaf digests.

This module provides:
- MerkleTree: layered tree with root(), depth(), levels(), nodes(), level()
- build_merkle_rows / build_merkle_root: the pure functions behind it
- compute_tree_depth: smallest d with 2**d >= leaf count

Commitment Rules (Hard Contracts):
1. Leaves are digests supplied by the caller, all the same length.
2. Parent hashing: parent = hasher(left + right), left child first.
3. Odd-carry: an unpaired last node moves up to the next row unchanged.
   It is never duplicated and never re-hashed, so the same digest can
   appear verbatim on several rows.
4. Single leaf: depth 0, root = leaf.
5. Empty leaf list is an error (there is no empty-tree sentinel).

Rows are indexed from the root: row 0 holds the root, row depth() holds
the leaves, and len(row[j]) == ceil(len(row[j + 1]) / 2).

Determinism Notes:
- No randomness or non-deterministic ordering
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

from typing import Sequence

from merked.crypto.hashing import DEFAULT_HASH_FUNC, Hasher
from merked.schemas.errors import InvalidInputException


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the depth of a tree with the given number of leaves.

    Depth is the number of hashing rounds between the leaves and the root,
    i.e. ceil(log2(num_leaves)), found by doubling a counter from 0.

    Args:
        num_leaves: Number of leaves (>= 1)

    Returns:
        Tree depth (0 for a single leaf)
    """
    depth = 0
    while 2 ** depth < num_leaves:
        depth += 1
    return depth


def validate_leaves(leaves: Sequence[bytes], hasher: Hasher) -> list[bytes]:
    """
    Check tree input and return the leaves as a list of bytes.

    Raises:
        InvalidInputException: If leaves is not a non-empty sequence of
            equal-length bytes-like digests, or hasher is not callable
    """
    if not callable(hasher):
        raise InvalidInputException("Invalid hash function supplied")

    if isinstance(leaves, (bytes, bytearray, memoryview, str)) or not isinstance(leaves, Sequence):
        raise InvalidInputException(
            "Invalid leaves array supplied",
            details={"type": type(leaves).__name__},
        )

    if len(leaves) == 0:
        raise InvalidInputException("Cannot build a Merkle tree from an empty leaf list")

    checked: list[bytes] = []
    for i, leaf in enumerate(leaves):
        if not isinstance(leaf, (bytes, bytearray, memoryview)):
            raise InvalidInputException(
                f"Leaf {i} is not bytes-like: {type(leaf).__name__}",
                index=i,
            )
        checked.append(bytes(leaf))

    digest_size = len(checked[0])
    if digest_size == 0:
        raise InvalidInputException("Leaf digests must not be empty", index=0)
    for i, leaf in enumerate(checked):
        if len(leaf) != digest_size:
            raise InvalidInputException(
                f"Leaf {i} has length {len(leaf)}, expected {digest_size}",
                index=i,
                details={"expected": digest_size, "actual": len(leaf)},
            )

    return checked


def _parent_row(row: Sequence[bytes], hasher: Hasher) -> list[bytes]:
    """Hash adjacent pairs; carry an unpaired last node up unchanged."""
    parents = [hasher(row[i] + row[i + 1]) for i in range(0, len(row) - 1, 2)]
    if len(row) % 2 == 1:
        parents.append(row[-1])
    return parents


def build_merkle_rows(
    leaves: Sequence[bytes],
    hasher: Hasher = DEFAULT_HASH_FUNC,
) -> list[list[bytes]]:
    """
    Build every row of the tree, root row first.

    Example:
        For leaves [a, b, c]:
        row 2: [a, b, c]
        row 1: [H(a+b), c]          (c carried)
        row 0: [H(H(a+b) + c)]

    Args:
        leaves: Ordered leaf digests (non-empty, equal length)
        hasher: Hash function for internal nodes

    Returns:
        List of rows, index 0 = [root], index depth = leaves

    Raises:
        InvalidInputException: On invalid leaves or hasher
    """
    current = validate_leaves(leaves, hasher)
    depth = compute_tree_depth(len(current))

    rows: list[list[bytes]] = [[] for _ in range(depth)]
    rows.append(current)

    for j in range(depth - 1, -1, -1):
        rows[j] = _parent_row(rows[j + 1], hasher)

    return rows


def build_merkle_root(
    leaves: Sequence[bytes],
    hasher: Hasher = DEFAULT_HASH_FUNC,
) -> bytes:
    """
    Compute the Merkle root of a sequence of leaf digests.

    Raises:
        InvalidInputException: On invalid leaves or hasher
    """
    return build_merkle_rows(leaves, hasher)[0][0]


class MerkleTree:
    """
    Merkle tree over leaf digests, built once at construction.

    Example:
        >>> tree = MerkleTree([sha256(b"a"), sha256(b"b")])
        >>> tree.root() == sha256(sha256(b"a") + sha256(b"b"))
        True
        >>> tree.depth(), tree.nodes()
        (1, 1)
    """

    def __init__(
        self,
        leaves: Sequence[bytes],
        hasher: Hasher | None = None,
    ) -> None:
        hasher = DEFAULT_HASH_FUNC if hasher is None else hasher
        rows = build_merkle_rows(leaves, hasher)

        self._hasher = hasher
        self._rows: tuple[tuple[bytes, ...], ...] = tuple(tuple(row) for row in rows)
        self._depth = len(rows) - 1
        self._count = sum(len(row) for row in rows[:-1])

    @property
    def leaves(self) -> tuple[bytes, ...]:
        """The leaf row."""
        return self._rows[self._depth]

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    def depth(self) -> int:
        """Index of the leaf row (ceil(log2(leaf count)))."""
        return self._depth

    def levels(self) -> int:
        """Number of rows in the tree."""
        return self._depth + 1

    def nodes(self) -> int:
        """Number of internal nodes (all rows above the leaf row)."""
        return self._count

    def root(self) -> bytes:
        """The Merkle root."""
        return self._rows[0][0]

    def level(self, level: int) -> tuple[bytes, ...]:
        """
        Return the row at the given level (0 = root row).

        Raises:
            IndexError: If level is outside 0..depth()
        """
        if level < 0 or level > self._depth:
            raise IndexError(
                f"Level {level} out of range for tree of depth {self._depth}"
            )
        return self._rows[level]

    def rows(self) -> tuple[tuple[bytes, ...], ...]:
        """All rows, root row first."""
        return self._rows

    def __len__(self) -> int:
        return len(self.leaves)

    def __repr__(self) -> str:
        return (
            f"MerkleTree(leaves={len(self.leaves)}, depth={self._depth}, "
            f"root={self.root().hex()!r})"
        )


__all__ = [
    "MerkleTree",
    "compute_tree_depth",
    "validate_leaves",
    "build_merkle_rows",
    "build_merkle_root",
]
