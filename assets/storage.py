"""
assets/storage.py - Object store used for logo uploads.

Any S3-compatible endpoint works (AWS, R2, MinIO, ...). The store is built
once per run and passed to the resolver; nothing here is global.
"""

from typing import Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.constants import ErrorCode
from core.exceptions import IOFailure
from core.logging import get_logger

logger = get_logger(__name__)


class ObjectStore(Protocol):
    """Minimal upload interface the CDN resolver depends on."""

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        ...


class S3ObjectStore:
    """
    S3-compatible object store.

    Errors from boto3 are re-raised as IOFailure(UPLOAD_FAILED) so callers
    only handle the registry taxonomy.
    """

    def __init__(
        self,
        bucket: str,
        access_key_id: str,
        secret_access_key: str,
        endpoint_url: Optional[str] = None,
        region: Optional[str] = None,
        client=None,
    ):
        self.bucket = bucket
        self._client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise IOFailure(
                f"Upload of {key} failed: {e}",
                ErrorCode.UPLOAD_FAILED,
                {"bucket": self.bucket, "key": key},
            ) from e
        logger.debug(f"Uploaded {key}", extra={"context": {"bytes": len(body)}})
