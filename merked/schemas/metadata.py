"""
Schemas & Metadata
File: metadata.py

Purpose: The serializable snapshot of a DAG.

Keys are deliberately terse and their order is fixed (n, l, r, s); the
compact JSON form is byte-identical for identical DAGs:

    {"n":"blob","l":["96a2...","0298..."],"r":"0854...","s":20}
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from merked.crypto.hashing import from_hex
from merked.schemas.errors import MetadataValidationException


DEFAULT_METADATA_NAME = "blob"

# Lowercase hex with an even number of digits, no prefix
HEX_DIGEST_PATTERN = re.compile(r"(?:[0-9a-f]{2})+")


def validate_hex_digest(value: str, field_name: str) -> str:
    """Validate that a value is a non-empty lowercase hex digest without prefix."""
    if not HEX_DIGEST_PATTERN.fullmatch(value):
        shown = value[:20] + "..." if len(value) > 20 else value
        raise ValueError(f"{field_name} must be a lowercase hex digest, got: {shown}")
    return value


class DagMetadata(BaseModel):
    """
    Metadata record for one DAG.

    Attributes:
        n: Application-specific name or tag
        l: Leaf digests as lowercase hex, in shard order
        r: Merkle root as lowercase hex
        s: Byte offset where real content ends and padding begins
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    n: str = Field(
        default=DEFAULT_METADATA_NAME,
        description="Application-specific name or tag",
    )
    l: list[str] = Field(
        ...,
        description="Leaf digests as lowercase hex, one per shard",
        min_length=1,
    )
    r: str = Field(
        ...,
        description="Merkle root as lowercase hex",
    )
    s: int = Field(
        ...,
        description="Length of the real (non-padding) content in bytes",
        ge=0,
    )

    @field_validator("l")
    @classmethod
    def validate_leaves(cls, v: list[str]) -> list[str]:
        for i, leaf in enumerate(v):
            validate_hex_digest(leaf, f"l[{i}]")
        if len({len(leaf) for leaf in v}) > 1:
            raise ValueError("all leaves must have the same digest length")
        return v

    @field_validator("r")
    @classmethod
    def validate_root(cls, v: str) -> str:
        return validate_hex_digest(v, "r")

    @property
    def name(self) -> str:
        return self.n

    @property
    def original_length(self) -> int:
        return self.s

    def leaf_bytes(self) -> list[bytes]:
        """Decode the leaf digests."""
        return [from_hex(leaf) for leaf in self.l]

    def root_bytes(self) -> bytes:
        """Decode the root digest."""
        return from_hex(self.r)

    def to_json(self) -> str:
        """Compact JSON with keys in n, l, r, s order."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, text: str | bytes) -> "DagMetadata":
        """
        Parse and validate a serialized record.

        Raises:
            MetadataValidationException: If the text is not a valid record
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise MetadataValidationException(
                f"Invalid metadata record: {e.error_count()} error(s)",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e


__all__ = [
    "DEFAULT_METADATA_NAME",
    "HEX_DIGEST_PATTERN",
    "validate_hex_digest",
    "DagMetadata",
]
