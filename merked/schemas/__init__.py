"""
Schemas & Errors

Error taxonomy shared by every module. The metadata record lives in
merked.schemas.metadata.
"""

from .errors import (
    ErrorCodes,
    MerkedError,
    MerkedException,
    InvalidConfigurationException,
    InvalidInputException,
    MetadataValidationException,
)

__all__ = [
    "ErrorCodes",
    "MerkedError",
    "MerkedException",
    "InvalidConfigurationException",
    "InvalidInputException",
    "MetadataValidationException",
]
