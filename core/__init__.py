"""
core - Core utilities and models for the token registry.

This package contains:
- address.py: Checksum normalization and canonical-address predicate
- schema.py: info.json record validation
- models.py: TokenRecord, ManifestVersion, PublishedManifest, VersionDelta
- constants.py: Enums, file names and URL defaults
- exceptions.py: Typed exceptions with error codes
- time.py: UTC clock and manifest timestamps
- logging.py: Structured JSON logging
"""

from core.address import address_key, is_canonical, is_valid_address, normalize
from core.constants import AssetMode, ChainPolicy, ErrorCode, ErrorPolicy
from core.exceptions import (
    FieldProblem,
    InvalidAddress,
    IOFailure,
    RegistryError,
    SchemaViolation,
    StructuralViolation,
)
from core.logging import get_logger, set_global_context, setup_logging
from core.models import ManifestVersion, PublishedManifest, TokenRecord, VersionDelta
from core.schema import validate_record

__all__ = [
    # Addresses
    "address_key",
    "is_canonical",
    "is_valid_address",
    "normalize",
    # Constants
    "AssetMode",
    "ChainPolicy",
    "ErrorCode",
    "ErrorPolicy",
    # Exceptions
    "FieldProblem",
    "InvalidAddress",
    "IOFailure",
    "RegistryError",
    "SchemaViolation",
    "StructuralViolation",
    # Models
    "ManifestVersion",
    "PublishedManifest",
    "TokenRecord",
    "VersionDelta",
    # Schema
    "validate_record",
    # Logging
    "get_logger",
    "set_global_context",
    "setup_logging",
]
