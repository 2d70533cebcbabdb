"""
Hashing Utilities
Hash functions used for shard leaves and Merkle parent nodes.

This module provides:
- SHA-256 hashing for raw bytes (the default hasher)
- A registry of named hashers selectable from configuration
- Hex encoding/decoding for digests

A hasher is any callable ``bytes -> bytes`` that is deterministic and
returns digests of a fixed length. The tree builder concatenates two
digests of that length when hashing internal nodes.
"""
from __future__ import annotations

import hashlib
from typing import Callable

from merked.schemas.errors import InvalidConfigurationException


Hasher = Callable[[bytes], bytes]


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def sha512(data: bytes) -> bytes:
    """64-byte SHA-512 digest."""
    return hashlib.sha512(data).digest()


def sha3_256(data: bytes) -> bytes:
    """32-byte SHA3-256 digest."""
    return hashlib.sha3_256(data).digest()


def blake2b_256(data: bytes) -> bytes:
    """32-byte BLAKE2b digest."""
    return hashlib.blake2b(data, digest_size=32).digest()


def blake2s_256(data: bytes) -> bytes:
    """32-byte BLAKE2s digest."""
    return hashlib.blake2s(data, digest_size=32).digest()


DEFAULT_HASH_FUNC: Hasher = sha256
DEFAULT_HASH_ALGORITHM = "sha256"

HASH_FUNCTIONS: dict[str, Hasher] = {
    "sha256": sha256,
    "sha512": sha512,
    "sha3-256": sha3_256,
    "blake2b-256": blake2b_256,
    "blake2s-256": blake2s_256,
}


def get_hash_func(name: str) -> Hasher:
    """
    Resolve a hasher by registry name (case-insensitive).

    Raises:
        InvalidConfigurationException: If the name is not registered
    """
    key = name.strip().lower() if isinstance(name, str) else name
    try:
        return HASH_FUNCTIONS[key]
    except (KeyError, TypeError):
        raise InvalidConfigurationException(
            f"Unknown hash algorithm: {name!r}",
            option="hash_algorithm",
            details={"supported": sorted(HASH_FUNCTIONS)},
        ) from None


def hash_bytes(data: bytes, hasher: Hasher = DEFAULT_HASH_FUNC) -> bytes:
    """
    Hash raw bytes with the given hasher (SHA-256 by default).

    Args:
        data: Raw bytes to hash
        hasher: Hash function to apply

    Returns:
        Digest produced by the hasher
    """
    return hasher(bytes(data))


def hash_concat(left: bytes, right: bytes, hasher: Hasher = DEFAULT_HASH_FUNC) -> bytes:
    """
    Hash the concatenation of two byte sequences.

    This is used for computing Merkle parent hashes:
    parent = hasher(left + right), left child first.

    Args:
        left: Left child digest
        right: Right child digest
        hasher: Hash function to apply

    Returns:
        Digest of the concatenation
    """
    return hasher(bytes(left) + bytes(right))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to a lowercase hexadecimal string (no prefix).

    Example:
        >>> to_hex(bytes.fromhex("DEADBEEF"))
        'deadbeef'
    """
    return bytes(data).hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hexadecimal string to bytes. A leading 0x is tolerated.

    Raises:
        ValueError: If the string has odd length or contains invalid
                   hex characters
    """
    hex_content = hex_string[2:] if hex_string.startswith(("0x", "0X")) else hex_string

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "Hasher",
    "sha256",
    "sha512",
    "sha3_256",
    "blake2b_256",
    "blake2s_256",
    "DEFAULT_HASH_FUNC",
    "DEFAULT_HASH_ALGORITHM",
    "HASH_FUNCTIONS",
    "get_hash_func",
    "hash_bytes",
    "hash_concat",
    "to_hex",
    "from_hex",
]
