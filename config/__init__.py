# PATH: config/__init__.py
"""
Configuration loading utilities for the token registry.

Two sources:
- YAML files in this directory (supported chains)
- Environment variables, optionally from a .env file (paths, logo hosting,
  object-store credentials)
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Set

import httpx
import yaml
from dotenv import load_dotenv

from core.constants import (
    DEFAULT_ASSET_CONCURRENCY,
    DEFAULT_MANIFEST_NAME,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_RAW_BASE_URL,
    DEFAULT_REGISTRY_ROOT,
    DEFAULT_UPLOAD_MAX_ATTEMPTS,
    AssetMode,
    ErrorCode,
)
from core.exceptions import IOFailure
from core.logging import get_logger

logger = get_logger(__name__)

CONFIG_DIR = Path(__file__).parent


def load_yaml(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of file in config directory

    Returns:
        Parsed YAML as dict
    """
    filepath = CONFIG_DIR / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_chains() -> Dict[str, Any]:
    """Load chains configuration."""
    return load_yaml("chains.yaml")


def fetch_chain_ids(url: str, timeout_seconds: float = 10.0) -> Set[int]:
    """
    Fetch a remote chain list.

    The document must be a JSON list of objects carrying "id" or "chainId".

    Raises:
        IOFailure: request failed or the document has the wrong shape
    """
    try:
        response = httpx.get(url, timeout=timeout_seconds, follow_redirects=True)
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise IOFailure(
            f"Could not fetch chain list from {url}: {e}",
            ErrorCode.CHAIN_LIST_FETCH_FAILED,
            {"url": url},
        ) from e

    if not isinstance(payload, list):
        raise IOFailure(
            f"Chain list at {url} is not a JSON list",
            ErrorCode.CHAIN_LIST_FETCH_FAILED,
            {"url": url},
        )

    chain_ids = set()
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        chain_id = entry.get("id", entry.get("chainId"))
        if isinstance(chain_id, int) and not isinstance(chain_id, bool):
            chain_ids.add(chain_id)

    logger.info(
        f"Loaded {len(chain_ids)} supported chains",
        extra={"context": {"source": url}},
    )
    return chain_ids


def supported_chain_ids(chains_url: Optional[str] = None) -> Set[int]:
    """
    Supported chain allow-list.

    Uses the remote chain list when chains_url is given, else chains.yaml.
    """
    if chains_url:
        return fetch_chain_ids(chains_url)
    return {
        int(chain["chain_id"])
        for chain in load_chains().values()
        if isinstance(chain, dict) and "chain_id" in chain
    }


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


@dataclass(frozen=True)
class Settings:
    """Deployment configuration consumed by the CLI and collaborators."""
    registry_root: str
    output_file: str
    manifest_name: str
    raw_base_url: str
    cdn_base_url: Optional[str]
    asset_mode: AssetMode
    object_store_endpoint: Optional[str]
    object_store_region: Optional[str]
    object_store_bucket: Optional[str]
    object_store_access_key_id: Optional[str]
    object_store_secret_access_key: Optional[str]
    supported_chains_url: Optional[str]
    upload_max_attempts: int
    asset_concurrency: int

    @property
    def has_object_store(self) -> bool:
        """True when every value needed for uploads is configured."""
        return all((
            self.cdn_base_url,
            self.object_store_bucket,
            self.object_store_access_key_id,
            self.object_store_secret_access_key,
        ))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings from the environment (and .env, if present)."""
    load_dotenv()

    return Settings(
        registry_root=os.getenv("REGISTRY_ROOT", DEFAULT_REGISTRY_ROOT),
        output_file=os.getenv("TOKENLIST_OUTPUT", DEFAULT_OUTPUT_FILE),
        manifest_name=os.getenv("TOKENLIST_NAME", DEFAULT_MANIFEST_NAME),
        raw_base_url=os.getenv("LOGO_RAW_BASE_URL", DEFAULT_RAW_BASE_URL).rstrip("/"),
        cdn_base_url=(os.getenv("LOGO_CDN_BASE_URL") or "").rstrip("/") or None,
        asset_mode=AssetMode(os.getenv("LOGO_ASSET_MODE", AssetMode.RAW_URL.value).strip().lower()),
        object_store_endpoint=os.getenv("OBJECT_STORE_ENDPOINT") or None,
        object_store_region=os.getenv("OBJECT_STORE_REGION") or None,
        object_store_bucket=os.getenv("OBJECT_STORE_BUCKET") or None,
        object_store_access_key_id=os.getenv("OBJECT_STORE_ACCESS_KEY_ID") or None,
        object_store_secret_access_key=os.getenv("OBJECT_STORE_SECRET_ACCESS_KEY") or None,
        supported_chains_url=os.getenv("SUPPORTED_CHAINS_URL") or None,
        upload_max_attempts=_env_int("UPLOAD_MAX_ATTEMPTS", DEFAULT_UPLOAD_MAX_ATTEMPTS),
        asset_concurrency=_env_int("ASSET_CONCURRENCY", DEFAULT_ASSET_CONCURRENCY),
    )
