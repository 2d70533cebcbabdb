"""
Common test fixtures shared by all modules.

Provides:
- The golden buffer (ten 2-byte values 0x0000 .. 0x0090) and the leaves,
  root and metadata it must produce with slice size 2, zero fill, SHA-256
- Factory functions for leaves, shards and DAGs
- Deterministic random sources for padding tests
"""

from typing import Optional

from merked.crypto.hashing import Hasher, sha256
from merked.dag.dag import DAG


# =============================================================================
# Golden Fixture
# =============================================================================

GOLDEN_BUFFER = bytes.fromhex(
    "0000" "0010" "0020" "0030" "0040" "0050" "0060" "0070" "0080" "0090"
)

GOLDEN_SLICE_SIZE = 2

GOLDEN_LEAVES_HEX = [
    "96a296d224f285c67bee93c30f8a309157f0daa35dc5b87e410b78630a09cfc7",
    "0298d122906dcfc10892cb53a73992fc5b9f493ea4c9badb27b791b4127a7fe7",
    "474f2af47544e9c7ce4338cabd43c5ca1c26432b7300ce387406157ea433891f",
    "db3426e878068d28d269b6c87172322ce5372b65756d0789001d34835f601c03",
    "b8811852747cfa3620c3dd2af5d59498c240f208e689b4052bac934c29faf094",
    "99d024a68d4d9728c47928d959ebd3bc621782c9d5fb3a1f7db35c4423fb97e7",
    "f66d0942831c3fc3a5d7b1399bc2f9027f95f8d735ae2a78f2240c7cefde526b",
    "4cf5af027d9a949a881e505bd7c7b14c5eb61ff47d159b585a331d690501d13d",
    "085edad400785fca7e7e90b1fac4beb776fc2beee5aa24352d5f39b5d57efcad",
    "c723228fbe3cf04cdf49e61f3e13fc0c407d2e1ff23d6eaa1b4299e7cbb418a1",
]

GOLDEN_ROOT_HEX = "08541c3238e4be60e2b8f049deee8b0bd2c91829c3b4f47f1b703bd4d48d2ff3"

GOLDEN_ORIGINAL_LENGTH = 20

GOLDEN_METADATA = (
    '{"n":"blob","l":['
    + ",".join(f'"{leaf}"' for leaf in GOLDEN_LEAVES_HEX)
    + '],"r":"' + GOLDEN_ROOT_HEX + '","s":20}'
)


# =============================================================================
# Factories
# =============================================================================

def make_leaves(count: int, hasher: Hasher = sha256) -> list[bytes]:
    """Create `count` distinct leaf digests."""
    return [hasher(f"leaf{i}".encode()) for i in range(count)]


def make_shards(count: int, size: int = 4) -> list[bytes]:
    """Create `count` distinct shards of `size` bytes each."""
    return [bytes([i % 256]) * size for i in range(count)]


def make_golden_dag(hash_func: Optional[Hasher] = None) -> DAG:
    """Build the DAG for the golden buffer."""
    return DAG.from_buffer(GOLDEN_BUFFER, GOLDEN_SLICE_SIZE, hash_func=hash_func)


def make_constant_source(value: int = 0xAB):
    """Random source returning the same byte repeatedly."""
    def _source(n: int) -> bytes:
        return bytes([value]) * n
    return _source


class RecordingSource:
    """Random source that records requested block sizes."""

    def __init__(self, value: int = 0x5A) -> None:
        self.value = value
        self.calls: list[int] = []

    def __call__(self, n: int) -> bytes:
        self.calls.append(n)
        return bytes([self.value]) * n
