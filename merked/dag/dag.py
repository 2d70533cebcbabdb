"""
Commitment DAG
Ties splitting, padding, hashing and tree construction together.

A DAG is built either from a raw buffer (DAG.from_buffer) or directly from
a list of uniform shards (DAG(shards)). Either way it owns its shards,
their leaf digests, the Merkle tree over those leaves and the
original_length marker, and none of these change after construction.

Pipeline:
    buffer -> split_by_bytes -> pad_shards -> hasher per shard -> leaves
           -> MerkleTree -> root -> DagMetadata {n, l, r, s}
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from merked.crypto.hashing import DEFAULT_HASH_FUNC, Hasher, get_hash_func, to_hex
from merked.merkle.merkle_tree import MerkleTree
from merked.schemas.errors import InvalidInputException
from merked.schemas.metadata import DEFAULT_METADATA_NAME, DagMetadata
from merked.split.padding import RandomSource, pad_shards
from merked.split.splitter import parse_size, split_by_bytes

if TYPE_CHECKING:
    from merked.config.runtime import DagConfig


logger = logging.getLogger(__name__)


def _validate_shards(shards: Sequence[bytes]) -> tuple[bytes, ...]:
    if isinstance(shards, (bytes, bytearray, memoryview, str)) or not isinstance(shards, Sequence):
        raise InvalidInputException(
            "Shards must be a sequence of byte strings",
            details={"type": type(shards).__name__},
        )
    if len(shards) == 0:
        raise InvalidInputException("Cannot build a DAG from an empty shard list")

    checked: list[bytes] = []
    for i, shard in enumerate(shards):
        if not isinstance(shard, (bytes, bytearray, memoryview)):
            raise InvalidInputException(
                f"Shard {i} is not bytes-like: {type(shard).__name__}",
                index=i,
            )
        checked.append(bytes(shard))

    size = len(checked[0])
    for i, shard in enumerate(checked):
        if len(shard) != size:
            raise InvalidInputException(
                f"Shard {i} has length {len(shard)}, expected {size}",
                index=i,
                details={"expected": size, "actual": len(shard)},
            )

    return tuple(checked)


class DAG:
    """
    Merkle commitment over a list of uniform shards.

    Example:
        >>> dag = DAG.from_buffer(b"hello world", 4)
        >>> len(dag.to_array()), dag.original_length
        (3, 11)
    """

    # 4 MiB, in the splitter's size shorthand
    DEFAULT_INPUT_SIZE = "4M"

    def __init__(
        self,
        shards: Sequence[bytes],
        *,
        original_length: int | None = None,
        hash_func: Hasher | None = None,
    ) -> None:
        """
        Build the DAG from pre-split shards of identical length.

        Args:
            shards: Uniform shards, in order
            original_length: Where real content ends and padding begins;
                defaults to the total shard length
            hash_func: Hasher for leaves and internal nodes (SHA-256 by default)

        Raises:
            InvalidInputException: On empty, mistyped or non-uniform shards,
                a non-callable hasher or a bad original_length
        """
        defaults = self.default_options(shards)
        hasher = defaults["hash_func"] if hash_func is None else hash_func
        if not callable(hasher):
            raise InvalidInputException("Invalid hash function supplied")

        checked = _validate_shards(shards)

        if original_length is None:
            original_length = defaults["original_length"]
        if isinstance(original_length, bool) or not isinstance(original_length, int) or original_length < 0:
            raise InvalidInputException(
                f"original_length must be a non-negative integer, got {original_length!r}"
            )

        leaves = tuple(hasher(shard) for shard in checked)
        merkle = MerkleTree(leaves, hasher)

        self._shards = checked
        self._leaves = merkle.leaves
        self._merkle = merkle
        self._hash_func = hasher
        self._original_length = original_length

        logger.debug(
            "Built DAG: %d shards of %d bytes, depth %d, root %s",
            len(checked), len(checked[0]), merkle.depth(), to_hex(merkle.root()),
        )

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def default_options(shards: Sequence[bytes] = ()) -> dict[str, Any]:
        """Default options for a shard list: its total length and SHA-256."""
        byte_length = 0
        if isinstance(shards, Sequence) and not isinstance(shards, (bytes, bytearray, str)):
            byte_length = sum(
                len(s) for s in shards if isinstance(s, (bytes, bytearray, memoryview))
            )
        return {
            "original_length": byte_length,
            "hash_func": DEFAULT_HASH_FUNC,
        }

    @classmethod
    def from_buffer(
        cls,
        buffer: bytes,
        slice_size: int | str = DEFAULT_INPUT_SIZE,
        hash_func: Hasher | None = None,
        random_fill: bool = False,
        random_source: RandomSource | None = None,
    ) -> "DAG":
        """
        Split a buffer into uniform shards and commit to them.

        Every shard is padded to slice_size (a no-op for full shards): with
        zeros by default, or with random bytes when random_fill is set, in
        which case the leaves and root differ on every call.

        Args:
            buffer: Raw input bytes
            slice_size: Shard size in bytes or size shorthand ("4M", "512K")
            hash_func: Hasher (SHA-256 by default)
            random_fill: Pad with random bytes instead of zeros
            random_source: Random byte source used when random_fill is set

        Raises:
            InvalidConfigurationException: If slice_size is not a valid size
            InvalidInputException: If the buffer is empty or not bytes-like
        """
        if not isinstance(buffer, (bytes, bytearray, memoryview)):
            raise InvalidInputException(
                f"Buffer must be bytes-like, got {type(buffer).__name__}"
            )
        if hash_func is not None and not callable(hash_func):
            raise InvalidInputException("Invalid hash function supplied")

        size = parse_size(slice_size, "slice_size")
        data = bytes(buffer)
        shards = pad_shards(
            split_by_bytes(data, size),
            size,
            random_fill=random_fill,
            random_source=random_source,
        )

        logger.debug("Committing %d bytes as %d shards of %d bytes", len(data), len(shards), size)
        return cls(shards, original_length=len(data), hash_func=hash_func)

    @classmethod
    def from_config(
        cls,
        buffer: bytes,
        config: "DagConfig",
        random_source: RandomSource | None = None,
    ) -> "DAG":
        """Build from a buffer using slice size, hash algorithm and fill mode from config."""
        return cls.from_buffer(
            buffer,
            config.slice_size,
            hash_func=get_hash_func(config.hash_algorithm),
            random_fill=config.random_fill,
            random_source=random_source,
        )

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def shards(self) -> tuple[bytes, ...]:
        return self._shards

    @property
    def leaves(self) -> tuple[bytes, ...]:
        return self._leaves

    @property
    def merkle(self) -> MerkleTree:
        return self._merkle

    @property
    def root(self) -> bytes:
        return self._merkle.root()

    @property
    def original_length(self) -> int:
        return self._original_length

    @property
    def hash_func(self) -> Hasher:
        return self._hash_func

    def entries(self) -> list[tuple[bytes, bytes]]:
        """(leaf, shard) pairs in shard order."""
        return list(zip(self._leaves, self._shards))

    def to_array(self) -> tuple[bytes, ...]:
        """The shards, unchanged."""
        return self._shards

    def metadata(self, name: str | None = None) -> DagMetadata:
        """Metadata record for this DAG (name defaults to "blob")."""
        return DagMetadata(
            n=name or DEFAULT_METADATA_NAME,
            l=[to_hex(leaf) for leaf in self._leaves],
            r=to_hex(self.root),
            s=self._original_length,
        )

    def to_metadata(self, name: str | None = None) -> str:
        """Serialized metadata record, as compact JSON."""
        return self.metadata(name).to_json()

    def __len__(self) -> int:
        return len(self._shards)

    def __repr__(self) -> str:
        return (
            f"DAG(shards={len(self._shards)}, original_length={self._original_length}, "
            f"root={to_hex(self.root)!r})"
        )


__all__ = ["DAG"]
