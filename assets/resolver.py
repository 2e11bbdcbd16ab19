"""
assets/resolver.py - Logo URI resolution.

Strategies:
- RawRepositoryResolver: link to the raw hosted copy of logo.png
    <base>/chains/<chainFolder>/<tokenFolder>/logo.png
- CdnUploadResolver: resize to 32x32 PNG, upload, link to the CDN copy
    <cdnBase>/logos/<chainId>/<lowercaseAddress>.png

A token without a local logo gets no logoURI in either mode.
"""

import asyncio
import io
from pathlib import Path
from typing import Optional, Protocol

from PIL import Image, UnidentifiedImageError

from assets.storage import ObjectStore, S3ObjectStore
from config import Settings
from core.constants import (
    DEFAULT_UPLOAD_BACKOFF_SECONDS,
    DEFAULT_UPLOAD_MAX_ATTEMPTS,
    LOGO_FILE_NAME,
    LOGO_SIZE_PX,
    AssetMode,
    ErrorCode,
)
from core.exceptions import IOFailure
from core.logging import get_logger
from discovery.scanner import ScanEntry

logger = get_logger(__name__)


class AssetResolver(Protocol):
    async def resolve(self, entry: ScanEntry) -> Optional[str]:
        ...


class RawRepositoryResolver:
    """Builds URLs into the raw hosted copy of the registry."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def url_for(self, entry: ScanEntry) -> str:
        return f"{self.base_url}/chains/{entry.chain_folder}/{entry.token_folder}/{LOGO_FILE_NAME}"

    async def resolve(self, entry: ScanEntry) -> Optional[str]:
        if entry.asset_path is None:
            return None
        return self.url_for(entry)


def render_logo(path: Path, size: int = LOGO_SIZE_PX) -> bytes:
    """
    Load an image and re-encode it as a size x size PNG.

    Raises:
        IOFailure: file unreadable or not an image
    """
    try:
        with Image.open(path) as image:
            resized = image.convert("RGBA").resize((size, size), Image.Resampling.LANCZOS)
    except (OSError, UnidentifiedImageError) as e:
        raise IOFailure(
            f"Cannot read logo {path}: {e}",
            ErrorCode.IMAGE_INVALID,
            {"path": str(path)},
        ) from e

    buffer = io.BytesIO()
    resized.save(buffer, format="PNG")
    return buffer.getvalue()


class CdnUploadResolver:
    """
    Uploads resized logos to an object store.

    Uploads are retried with exponential backoff; when every attempt fails
    the run is aborted with IOFailure(UPLOAD_FAILED).
    """

    def __init__(
        self,
        store: ObjectStore,
        cdn_base_url: str,
        size: int = LOGO_SIZE_PX,
        max_attempts: int = DEFAULT_UPLOAD_MAX_ATTEMPTS,
        backoff_seconds: float = DEFAULT_UPLOAD_BACKOFF_SECONDS,
    ):
        self.store = store
        self.cdn_base_url = cdn_base_url.rstrip("/")
        self.size = size
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds

    @staticmethod
    def object_key(entry: ScanEntry) -> str:
        return f"logos/{entry.chain_id}/{entry.token_folder.lower()}.png"

    async def _upload(self, key: str, body: bytes, path: Path) -> None:
        last_error: Exception | None = None

        for attempt in range(self.max_attempts):
            try:
                await asyncio.to_thread(self.store.put_object, key, body, "image/png")
                return
            except Exception as e:
                last_error = e
                if attempt + 1 >= self.max_attempts:
                    break
                delay = self.backoff_seconds * (2 ** attempt)
                logger.warning(
                    f"Upload of {key} failed, retrying in {delay:.2f}s",
                    extra={"context": {"attempt": attempt + 1, "error": str(e)}},
                )
                await asyncio.sleep(delay)

        raise IOFailure(
            f"Upload of {key} failed after {self.max_attempts} attempts",
            ErrorCode.UPLOAD_FAILED,
            {"path": str(path), "key": key, "last_error": str(last_error)},
        )

    async def resolve(self, entry: ScanEntry) -> Optional[str]:
        if entry.asset_path is None:
            return None

        body = await asyncio.to_thread(render_logo, entry.asset_path, self.size)
        key = self.object_key(entry)
        await self._upload(key, body, entry.asset_path)
        return f"{self.cdn_base_url}/{key}"


def build_asset_resolver(settings: Settings, mode: AssetMode) -> Optional[AssetResolver]:
    """
    Resolver for the requested mode.

    CDN mode without object-store credentials falls back to raw URLs.
    """
    if mode == AssetMode.NONE:
        return None

    if mode == AssetMode.CDN_UPLOAD:
        if settings.has_object_store:
            store = S3ObjectStore(
                bucket=settings.object_store_bucket,
                access_key_id=settings.object_store_access_key_id,
                secret_access_key=settings.object_store_secret_access_key,
                endpoint_url=settings.object_store_endpoint,
                region=settings.object_store_region,
            )
            return CdnUploadResolver(
                store,
                settings.cdn_base_url,
                max_attempts=settings.upload_max_attempts,
            )
        logger.warning("Object store not configured, falling back to raw repository logo URLs")

    return RawRepositoryResolver(settings.raw_base_url)
