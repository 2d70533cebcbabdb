"""
Merkle Tree Unit Tests
Tests for merked/merkle/merkle_tree.py

1. Single leaf - root equals leaf, depth 0
2. Pair hashing - root = H(left + right)
3. Odd-carry - unpaired node moves up unchanged, never duplicated
4. Row shape - len(row[j]) == ceil(len(row[j + 1]) / 2)
5. Determinism and order sensitivity
6. Input validation - empty, mistyped, mismatched lengths, bad hasher
"""
import math

import pytest

from fixtures import make_leaves
from merked.crypto.hashing import blake2b_256, sha256
from merked.merkle.merkle_tree import (
    MerkleTree,
    build_merkle_root,
    build_merkle_rows,
    compute_tree_depth,
)
from merked.schemas.errors import ErrorCodes, InvalidInputException


def parent(left: bytes, right: bytes) -> bytes:
    return sha256(left + right)


class TestSingleLeaf:
    """Tests for single leaf tree behavior."""

    def test_single_leaf_root_equals_leaf(self):
        leaf = sha256(b"single leaf")
        tree = MerkleTree([leaf])

        assert tree.root() == leaf

    def test_single_leaf_shape(self):
        tree = MerkleTree([sha256(b"only one")])

        assert tree.depth() == 0
        assert tree.levels() == 1
        assert tree.nodes() == 0
        assert tree.level(0) == tree.leaves


class TestPairHashing:
    """Tests for even leaf counts."""

    def test_two_leaves(self):
        a, b = sha256(b"a"), sha256(b"b")
        tree = MerkleTree([a, b])

        assert tree.root() == parent(a, b)
        assert tree.depth() == 1
        assert tree.nodes() == 1

    def test_four_leaves(self):
        a, b, c, d = make_leaves(4)

        expected = parent(parent(a, b), parent(c, d))

        assert build_merkle_root([a, b, c, d]) == expected
        assert MerkleTree([a, b, c, d]).nodes() == 3

    def test_concatenation_order_left_first(self):
        a, b = sha256(b"a"), sha256(b"b")

        assert build_merkle_root([a, b]) != build_merkle_root([b, a])


class TestOddCarry:
    """Tests for the odd-carry rule."""

    def test_three_leaves(self):
        """
        Row 2: [a, b, c]
        Row 1: [H(a+b), c]       c carried unchanged
        Row 0: [H(H(a+b) + c)]
        """
        a, b, c = make_leaves(3)
        tree = MerkleTree([a, b, c])

        assert tree.level(1) == (parent(a, b), c)
        assert tree.root() == parent(parent(a, b), c)
        assert tree.nodes() == 3

    def test_three_leaves_not_duplicate_last(self):
        a, b, c = make_leaves(3)

        duplicated = parent(parent(a, b), parent(c, c))

        assert build_merkle_root([a, b, c]) != duplicated

    def test_five_leaves_carry_across_two_levels(self):
        """The fifth leaf is carried through rows 2 and 1 before pairing."""
        a, b, c, d, e = make_leaves(5)
        tree = MerkleTree([a, b, c, d, e])

        ab, cd = parent(a, b), parent(c, d)
        assert tree.depth() == 3
        assert tree.level(2) == (ab, cd, e)
        assert tree.level(1) == (parent(ab, cd), e)
        assert tree.root() == parent(parent(ab, cd), e)
        assert tree.nodes() == 6

    def test_carried_digest_appears_verbatim(self):
        leaves = make_leaves(5)
        tree = MerkleTree(leaves)

        assert leaves[4] in tree.level(2)
        assert leaves[4] in tree.level(1)


class TestTreeShape:
    """Tests for depth and row sizes."""

    @pytest.mark.parametrize("count,depth", [
        (1, 0), (2, 1), (3, 2), (4, 2), (5, 3), (8, 3), (9, 4), (10, 4), (17, 5),
    ])
    def test_compute_tree_depth(self, count, depth):
        assert compute_tree_depth(count) == depth

    @pytest.mark.parametrize("count", [1, 2, 3, 6, 7, 10, 13, 33])
    def test_row_sizes_halve_rounding_up(self, count):
        rows = build_merkle_rows(make_leaves(count))

        assert len(rows[0]) == 1
        assert len(rows[-1]) == count
        for j in range(len(rows) - 1):
            assert len(rows[j]) == math.ceil(len(rows[j + 1]) / 2)

    @pytest.mark.parametrize("count", [1, 2, 3, 6, 10])
    def test_nodes_counts_rows_above_leaves(self, count):
        tree = MerkleTree(make_leaves(count))

        expected = sum(len(tree.level(j)) for j in range(tree.depth()))
        assert tree.nodes() == expected
        assert tree.levels() == tree.depth() + 1

    def test_level_out_of_range(self):
        tree = MerkleTree(make_leaves(3))

        with pytest.raises(IndexError):
            tree.level(3)
        with pytest.raises(IndexError):
            tree.level(-1)

    def test_len_is_leaf_count(self):
        assert len(MerkleTree(make_leaves(7))) == 7


class TestDeterminism:
    """Tests for deterministic root computation."""

    def test_same_leaves_same_root(self):
        roots = [MerkleTree(make_leaves(7)).root() for _ in range(5)]

        assert all(r == roots[0] for r in roots)

    def test_leaf_order_matters(self):
        leaves = make_leaves(3)

        assert build_merkle_root(leaves) != build_merkle_root(list(reversed(leaves)))

    def test_custom_hasher(self):
        a, b = make_leaves(2)
        tree = MerkleTree([a, b], blake2b_256)

        assert tree.root() == blake2b_256(a + b)
        assert tree.hasher is blake2b_256

    def test_accepts_bytearray_leaves(self):
        a, b = make_leaves(2)

        assert MerkleTree([bytearray(a), bytearray(b)]).root() == parent(a, b)


class TestValidation:
    """Tests for invalid tree input."""

    def test_empty_leaves_raises(self):
        with pytest.raises(InvalidInputException, match="empty"):
            MerkleTree([])

    def test_error_code(self):
        with pytest.raises(InvalidInputException) as exc_info:
            build_merkle_root([])

        assert exc_info.value.code == ErrorCodes.INVALID_INPUT

    def test_non_sequence_raises(self):
        with pytest.raises(InvalidInputException, match="Invalid leaves"):
            MerkleTree(b"not a list of leaves")

    def test_non_bytes_leaf_raises(self):
        with pytest.raises(InvalidInputException) as exc_info:
            MerkleTree([sha256(b"a"), "b"])

        assert exc_info.value.details["index"] == 1

    def test_mismatched_lengths_raise(self):
        with pytest.raises(InvalidInputException, match="expected 32"):
            MerkleTree([sha256(b"a"), b"short"])

    def test_non_callable_hasher_raises(self):
        with pytest.raises(InvalidInputException, match="hash function"):
            MerkleTree(make_leaves(2), "sha256")

    def test_empty_digests_raise(self):
        with pytest.raises(InvalidInputException, match="must not be empty"):
            MerkleTree([b"", b""])
