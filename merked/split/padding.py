"""
Shard Padder
Bring shards up to a uniform target size.

The original bytes go to the front of the padded shard; the rest is
filled with zeros, or with bytes from a random source when random_fill
is requested. Random fill makes the padded shard (and every digest
derived from it) differ between runs; zero fill is required for
reproducible roots.

The random source is injected as a callable ``int -> bytes`` so callers
and tests can substitute a deterministic one. The default is
secrets.token_bytes (OS CSPRNG).
"""
from __future__ import annotations

import logging
import secrets
from typing import Callable, Sequence

from merked.schemas.errors import InvalidInputException


logger = logging.getLogger(__name__)


RandomSource = Callable[[int], bytes]

DEFAULT_RANDOM_SOURCE: RandomSource = secrets.token_bytes

# Upper bound on a single read from the random source
RANDOM_BLOCK_SIZE = 65536


def random_padding(num_bytes: int, random_source: RandomSource | None = None) -> bytes:
    """
    Draw `num_bytes` bytes from the random source, in blocks of at most
    RANDOM_BLOCK_SIZE bytes.

    Raises:
        InvalidInputException: If num_bytes is negative or the source
            returns a block of the wrong length
    """
    if num_bytes < 0:
        raise InvalidInputException(f"Cannot draw a negative number of bytes: {num_bytes}")

    source = DEFAULT_RANDOM_SOURCE if random_source is None else random_source
    if not callable(source):
        raise InvalidInputException("Invalid random source supplied")

    out = bytearray()
    while len(out) < num_bytes:
        wanted = min(RANDOM_BLOCK_SIZE, num_bytes - len(out))
        block = source(wanted)
        if not isinstance(block, (bytes, bytearray)) or len(block) != wanted:
            raise InvalidInputException(
                f"Random source returned an invalid block (wanted {wanted} bytes)",
                details={"wanted": wanted},
            )
        out += block

    return bytes(out)


def pad_shard(
    shard: bytes,
    size: int,
    *,
    random_fill: bool = False,
    random_source: RandomSource | None = None,
) -> bytes:
    """
    Pad a shard to exactly `size` bytes.

    Args:
        shard: Shard of at most `size` bytes
        size: Target length (>= 1)
        random_fill: Fill with random bytes instead of zeros
        random_source: Random byte source for random fill

    Returns:
        New shard of length `size` whose prefix is the input shard

    Raises:
        InvalidInputException: If size < 1 or the shard is longer than size
    """
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise InvalidInputException(f"Invalid shard size: {size!r}")
    if not isinstance(shard, (bytes, bytearray, memoryview)):
        raise InvalidInputException(f"Shard is not bytes-like: {type(shard).__name__}")

    data = bytes(shard)
    missing = size - len(data)
    if missing < 0:
        raise InvalidInputException(
            f"Shard of {len(data)} bytes exceeds target size {size}",
            details={"shard_length": len(data), "size": size},
        )
    if missing == 0:
        return data

    if random_fill:
        return data + random_padding(missing, random_source)
    return data + bytes(missing)


def pad_shards(
    shards: Sequence[bytes],
    size: int,
    *,
    random_fill: bool = False,
    random_source: RandomSource | None = None,
) -> list[bytes]:
    """
    Pad every shard to `size` bytes (full shards pass through unchanged).

    Raises:
        InvalidInputException: As for pad_shard, with the shard index
    """
    if random_fill:
        logger.debug("Padding %d shards with random bytes; output is non-deterministic", len(shards))

    padded: list[bytes] = []
    for i, shard in enumerate(shards):
        try:
            padded.append(pad_shard(
                shard,
                size,
                random_fill=random_fill,
                random_source=random_source,
            ))
        except InvalidInputException as e:
            raise InvalidInputException(e.message, index=i, details=e.details) from e
    return padded


__all__ = [
    "RandomSource",
    "DEFAULT_RANDOM_SOURCE",
    "RANDOM_BLOCK_SIZE",
    "random_padding",
    "pad_shard",
    "pad_shards",
]
