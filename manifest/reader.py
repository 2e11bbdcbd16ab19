"""
manifest/reader.py - Load the previously published manifest.

Sources:
- local path (missing file → no previous manifest)
- https URL (HTTP 404 → no previous manifest)

A manifest that exists but cannot be parsed is fatal: silently starting
again from 0.0.0 would publish a version lower than the live one.
"""

import json
from pathlib import Path
from typing import Any, Optional, Union

import httpx

from core.constants import ErrorCode
from core.exceptions import IOFailure
from core.logging import get_logger
from core.models import PublishedManifest

logger = get_logger(__name__)

_MISSING = object()


def _is_url(source: str) -> bool:
    return source.startswith("https://") or source.startswith("http://")


def _read_url(url: str, timeout_seconds: float) -> Any:
    try:
        response = httpx.get(url, timeout=timeout_seconds, follow_redirects=True)
    except httpx.HTTPError as e:
        raise IOFailure(
            f"Could not fetch previous manifest from {url}: {e}",
            ErrorCode.IO_READ_FAILED,
            {"path": url},
        ) from e

    if response.status_code == 404:
        return _MISSING
    if response.is_error:
        raise IOFailure(
            f"Could not fetch previous manifest from {url}: HTTP {response.status_code}",
            ErrorCode.IO_READ_FAILED,
            {"path": url, "status_code": response.status_code},
        )
    return response.text


def _read_path(path: Path) -> Any:
    if not path.exists():
        return _MISSING
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise IOFailure(
            f"Could not read previous manifest {path}: {e}",
            ErrorCode.IO_READ_FAILED,
            {"path": str(path)},
        ) from e


def load_previous_manifest(
    source: Optional[Union[str, Path]],
    timeout_seconds: float = 10.0,
) -> Optional[PublishedManifest]:
    """
    Load the last published manifest.

    Args:
        source: File path or URL; None means there is no previous manifest
        timeout_seconds: HTTP timeout for URL sources

    Returns:
        PublishedManifest, or None when the source does not exist

    Raises:
        IOFailure: source exists but is unreadable or corrupt
    """
    if source is None:
        return None

    source_str = str(source)
    if _is_url(source_str):
        text = _read_url(source_str, timeout_seconds)
    else:
        text = _read_path(Path(source_str))

    if text is _MISSING:
        logger.info(
            "No previous manifest, starting from version 0.0.0",
            extra={"context": {"source": source_str}},
        )
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise IOFailure(
            f"Previous manifest {source_str} is corrupt: {e}",
            ErrorCode.MANIFEST_CORRUPT,
            {"path": source_str},
        ) from e

    manifest = PublishedManifest.from_dict(data, source=source_str)
    logger.info(
        f"Loaded previous manifest version {manifest.version}",
        extra={"context": {"source": source_str, "tokens": len(manifest.tokens)}},
    )
    return manifest
