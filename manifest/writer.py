"""
manifest/writer.py - Persist the published manifest.
"""

import json
import os
import tempfile
from pathlib import Path

from core.constants import ErrorCode
from core.exceptions import IOFailure
from core.logging import get_logger
from core.models import PublishedManifest

logger = get_logger(__name__)


class ManifestWriter:
    """Writes a manifest as 2-space indented JSON, atomically."""

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)

    def write(self, manifest: PublishedManifest) -> Path:
        """
        Serialize manifest to output_path.

        The document is written to a temporary sibling first and moved into
        place, so readers never see a partial file.

        Raises:
            IOFailure: directory or file could not be written
        """
        target = self.output_path
        text = json.dumps(manifest.to_dict(), indent=2, ensure_ascii=False)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(text)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise IOFailure(
                f"Could not write manifest {target}: {e}",
                ErrorCode.IO_WRITE_FAILED,
                {"path": str(target)},
            ) from e

        logger.info(
            f"Token list successfully written to {target}",
            extra={"context": {"version": str(manifest.version), "tokens": len(manifest.tokens)}},
        )
        return target
