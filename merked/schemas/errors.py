"""
Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for merked.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every operation is pure and deterministic, so no error is retryable:
running the same operation on the same bad input fails the same way.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Split options, size parameters, filename suffixes, hash names, config values
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"

    # Leaf/shard sequences, digest lengths, hashers, random sources
    INVALID_INPUT = "INVALID_INPUT"

    # Metadata records that fail to parse or validate
    METADATA_VALIDATION_ERROR = "METADATA_VALIDATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkedError(BaseModel):
    """
    Error model for structured error reporting (e.g. CLI JSON output, logs).
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerkedException":
        """Convert this error model to a raisable exception."""
        return MerkedException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkedException(Exception):
    """
    Base exception for all merked errors.

    Carries structured error information and can be converted to a
    MerkedError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKED_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkedError:
        """Convert this exception to a MerkedError model."""
        return MerkedError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidConfigurationException(MerkedException):
    """
    Raised for conflicting or missing split modes, bad size or line
    parameters, exhausted filename suffixes, unknown hash algorithms and
    unusable configuration values.
    """

    def __init__(
        self,
        message: str,
        option: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if option:
            full_details["option"] = option
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_CONFIGURATION,
            details=full_details,
            retryable=False,
        )


class InvalidInputException(MerkedException):
    """
    Raised for empty or mistyped leaf/shard sequences, mismatched digest
    or shard lengths, non-callable hashers and misbehaving random sources.
    """

    def __init__(
        self,
        message: str,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_INPUT,
            details=full_details,
            retryable=False,
        )


class MetadataValidationException(MerkedException):
    """Raised when a serialized metadata record cannot be parsed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.METADATA_VALIDATION_ERROR,
            details=details,
            retryable=False,
        )


__all__ = [
    "ErrorCodes",
    "MerkedError",
    "MerkedException",
    "InvalidConfigurationException",
    "InvalidInputException",
    "MetadataValidationException",
]
