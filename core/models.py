# PATH: core/models.py
"""
Core data models for the token registry.

TokenRecord      one token as published (info.json + chainId + logoURI)
ManifestVersion  {major, minor, patch}
PublishedManifest {name, timestamp, version, tokens}
VersionDelta     per-bucket counts from a reconciliation run

Serialization uses the published camelCase keys (chainId, logoURI);
Python attributes are snake_case.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.constants import ErrorCode
from core.exceptions import IOFailure

# attribute name -> published key, in output order
_TOKEN_KEYS = (
    ("chain_id", "chainId"),
    ("address", "address"),
    ("name", "name"),
    ("symbol", "symbol"),
    ("decimals", "decimals"),
    ("website", "website"),
    ("description", "description"),
    ("explorer", "explorer"),
    ("logo_uri", "logoURI"),
)

_OPTIONAL_ATTRS = {"website", "description", "explorer", "logo_uri"}


@dataclass
class TokenRecord:
    """A token's metadata as it appears in the published manifest."""
    chain_id: int
    address: str
    name: str
    symbol: str
    decimals: int
    website: Optional[str] = None
    description: Optional[str] = None
    explorer: Optional[str] = None
    logo_uri: Optional[str] = None

    @property
    def key(self) -> tuple:
        """Identity across manifests: (chainId, lowercase address)."""
        return (self.chain_id, self.address.lower())

    def to_dict(self) -> Dict[str, Any]:
        """Published form; absent optional fields are omitted."""
        out: Dict[str, Any] = {}
        for attr, key in _TOKEN_KEYS:
            value = getattr(self, attr)
            if value is None and attr in _OPTIONAL_ATTRS:
                continue
            out[key] = value
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenRecord":
        """
        Build from a published token entry.

        No field validation beyond identity; previously published
        manifests are trusted as-is.
        """
        values = {attr: data.get(key) for attr, key in _TOKEN_KEYS}
        return cls(**values)


@dataclass(frozen=True)
class ManifestVersion:
    """Semantic version of the published manifest."""
    major: int = 0
    minor: int = 0
    patch: int = 0

    def bump(self, delta: "VersionDelta") -> "ManifestVersion":
        return ManifestVersion(
            major=self.major + delta.new_chain_count,
            minor=self.minor + delta.new_token_count,
            patch=self.patch + delta.updated_token_count,
        )

    def as_tuple(self) -> tuple:
        return (self.major, self.minor, self.patch)

    def to_dict(self) -> Dict[str, int]:
        return {"major": self.major, "minor": self.minor, "patch": self.patch}

    @classmethod
    def from_dict(cls, data: Any) -> "ManifestVersion":
        if not isinstance(data, dict):
            raise ValueError("version must be an object")
        parts = {}
        for part in ("major", "minor", "patch"):
            value = data.get(part)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"version.{part} must be a non-negative integer")
            parts[part] = value
        return cls(**parts)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass
class VersionDelta:
    """Counts produced by one reconciliation."""
    new_chain_count: int = 0
    new_token_count: int = 0
    updated_token_count: int = 0
    # Reported only; never folded into the version
    removed_token_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not (self.new_chain_count or self.new_token_count or self.updated_token_count)

    def to_dict(self) -> Dict[str, int]:
        return {
            "new_chain_count": self.new_chain_count,
            "new_token_count": self.new_token_count,
            "updated_token_count": self.updated_token_count,
            "removed_token_count": self.removed_token_count,
        }


@dataclass
class PublishedManifest:
    """The token list as written to durable storage."""
    name: str
    timestamp: str
    version: ManifestVersion = field(default_factory=ManifestVersion)
    tokens: List[TokenRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "timestamp": self.timestamp,
            "version": self.version.to_dict(),
            "tokens": [t.to_dict() for t in self.tokens],
        }

    @classmethod
    def from_dict(cls, data: Any, source: str = "") -> "PublishedManifest":
        """
        Parse a previously published manifest.

        Raises:
            IOFailure: document is not a usable manifest (MANIFEST_CORRUPT)
        """
        def corrupt(reason: str) -> IOFailure:
            return IOFailure(
                f"Previous manifest {source} is corrupt: {reason}",
                ErrorCode.MANIFEST_CORRUPT,
                {"path": source, "reason": reason},
            )

        if not isinstance(data, dict):
            raise corrupt("top-level value is not an object")

        try:
            version = ManifestVersion.from_dict(data.get("version"))
        except ValueError as e:
            raise corrupt(str(e)) from e

        raw_tokens = data.get("tokens") or []
        if not isinstance(raw_tokens, list):
            raise corrupt("tokens is not a list")

        tokens = []
        for index, entry in enumerate(raw_tokens):
            if not isinstance(entry, dict):
                raise corrupt(f"tokens[{index}] is not an object")
            chain_id = entry.get("chainId")
            address = entry.get("address")
            if isinstance(chain_id, bool) or not isinstance(chain_id, int):
                raise corrupt(f"tokens[{index}].chainId is not an integer")
            if not isinstance(address, str):
                raise corrupt(f"tokens[{index}].address is not a string")
            tokens.append(TokenRecord.from_dict(entry))

        return cls(
            name=str(data.get("name", "")),
            timestamp=str(data.get("timestamp", "")),
            version=version,
            tokens=tokens,
        )
