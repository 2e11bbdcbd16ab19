"""
assets/ - Logo URI resolution.

Modules:
- resolver: raw-repository and CDN-upload strategies
- storage: S3-compatible object store for uploads
"""

from assets.resolver import (
    AssetResolver,
    CdnUploadResolver,
    RawRepositoryResolver,
    build_asset_resolver,
    render_logo,
)
from assets.storage import ObjectStore, S3ObjectStore

__all__ = [
    "AssetResolver",
    "CdnUploadResolver",
    "RawRepositoryResolver",
    "build_asset_resolver",
    "render_logo",
    "ObjectStore",
    "S3ObjectStore",
]
