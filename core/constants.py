# PATH: core/constants.py
"""
Constants for the token registry.

Contains enums, file-name conventions and URL defaults shared by the
scanner, the asset resolvers and the manifest writer.
"""

from enum import Enum
from typing import Final, Tuple

# =============================================================================
# REGISTRY LAYOUT
# =============================================================================

INFO_FILE_NAME: Final = "info.json"
LOGO_FILE_NAME: Final = "logo.png"

# Chain folder names are plain decimal chain ids
CHAIN_FOLDER_PATTERN: Final = r"[0-9]+"

# 0x + 40 hex digits, any casing
ADDRESS_PATTERN: Final = r"0x[a-fA-F0-9]{40}"

# =============================================================================
# MANIFEST
# =============================================================================

DEFAULT_MANIFEST_NAME: Final = "Oku Token List"
DEFAULT_OUTPUT_FILE: Final = "tokenlist.json"
DEFAULT_REGISTRY_ROOT: Final = "chains/evm"

# Fields compared when deciding whether a known token was updated
COMPARED_FIELDS: Final[Tuple[str, ...]] = (
    "name",
    "symbol",
    "decimals",
    "website",
    "description",
    "explorer",
    "logo_uri",
)

# =============================================================================
# LOGO ASSETS
# =============================================================================

DEFAULT_RAW_BASE_URL: Final = "https://raw.githubusercontent.com/oku-trade/tokens/main"
LOGO_SIZE_PX: Final = 32
DEFAULT_UPLOAD_MAX_ATTEMPTS: Final = 3
DEFAULT_UPLOAD_BACKOFF_SECONDS: Final = 0.5
DEFAULT_ASSET_CONCURRENCY: Final = 1


class ErrorPolicy(str, Enum):
    """What happens to a token that fails validation."""
    STRICT = "strict"      # abort the run
    LENIENT = "lenient"    # log and skip the token


class ChainPolicy(str, Enum):
    """Whether chain folders are checked against the allow-list."""
    RESTRICTED = "restricted"
    UNRESTRICTED = "unrestricted"


class AssetMode(str, Enum):
    """How logo URIs are produced."""
    NONE = "none"
    RAW_URL = "raw"
    CDN_UPLOAD = "cdn"


class ErrorCode(str, Enum):
    """
    Error codes carried by every RegistryError.

    Grouped by the exception class that normally raises them.
    """
    # Addresses
    INVALID_ADDRESS = "INVALID_ADDRESS"
    NON_CANONICAL_ADDRESS = "NON_CANONICAL_ADDRESS"

    # Records
    SCHEMA_VIOLATION = "SCHEMA_VIOLATION"

    # Directory tree
    CHAIN_FOLDER_NOT_INTEGER = "CHAIN_FOLDER_NOT_INTEGER"
    CHAIN_NOT_SUPPORTED = "CHAIN_NOT_SUPPORTED"
    CHAIN_NOT_DIRECTORY = "CHAIN_NOT_DIRECTORY"
    TOKEN_FOLDER_NOT_CANONICAL = "TOKEN_FOLDER_NOT_CANONICAL"
    TOKEN_NOT_DIRECTORY = "TOKEN_NOT_DIRECTORY"
    LOGO_MISSING = "LOGO_MISSING"
    INFO_MISSING = "INFO_MISSING"
    ADDRESS_MISMATCH = "ADDRESS_MISMATCH"

    # I/O
    IO_READ_FAILED = "IO_READ_FAILED"
    IO_WRITE_FAILED = "IO_WRITE_FAILED"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    IMAGE_INVALID = "IMAGE_INVALID"
    MANIFEST_CORRUPT = "MANIFEST_CORRUPT"
    CHAIN_LIST_FETCH_FAILED = "CHAIN_LIST_FETCH_FAILED"

    UNKNOWN = "UNKNOWN"
