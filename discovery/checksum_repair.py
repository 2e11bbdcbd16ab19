"""
discovery/checksum_repair.py - Bring token folders into checksum casing.

For every <root>/<chain>/<token> folder:
1. Compute the checksum form of the folder name (invalid names are skipped)
2. Rewrite info.json "address" if it differs from the checksum form
3. Rename the folder if its name differs from the checksum form

info.json problems are logged per token; the rename still happens.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

from core.address import normalize
from core.constants import INFO_FILE_NAME
from core.exceptions import InvalidAddress
from core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RepairReport:
    """What a repair pass changed."""
    renamed: list[tuple[str, str]] = field(default_factory=list)
    rewritten: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.renamed or self.rewritten)

    def to_dict(self) -> dict:
        return {
            "renamed": len(self.renamed),
            "rewritten": len(self.rewritten),
            "skipped": len(self.skipped),
            "errors": len(self.errors),
        }


def _fix_info_address(info_path: Path, checksummed: str) -> bool:
    """Rewrite info.json address; returns True if the file changed."""
    data = json.loads(info_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("info.json is not a JSON object")
    if data.get("address") == checksummed:
        return False
    data["address"] = checksummed
    info_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return True


def rename_target_taken(token_path: Path, new_path: Path) -> bool:
    """
    True if renaming token_path to new_path would clobber another folder.

    On case-insensitive filesystems a case-only rename resolves new_path to
    token_path itself, which is not a conflict.
    """
    return new_path.exists() and not new_path.samefile(token_path)


def repair_registry(root: Path) -> RepairReport:
    """
    Checksum-normalize every token folder under root.

    Args:
        root: Registry root holding chain folders

    Returns:
        RepairReport listing renames, rewrites, skips and errors
    """
    report = RepairReport()
    root = Path(root)

    for chain_path in sorted(p for p in root.iterdir() if p.is_dir()):
        for token_path in sorted(p for p in chain_path.iterdir() if p.is_dir()):
            old_name = token_path.name
            ctx = {"chain": chain_path.name, "token": old_name}

            try:
                checksummed = normalize(old_name)
            except InvalidAddress:
                logger.error(
                    f'Skipping "{old_name}" in chain "{chain_path.name}": invalid address',
                    extra={"context": ctx},
                )
                report.skipped.append(str(token_path))
                continue

            info_path = token_path / INFO_FILE_NAME
            try:
                if _fix_info_address(info_path, checksummed):
                    logger.info(
                        f'Updated {INFO_FILE_NAME} in "{old_name}" in chain "{chain_path.name}"',
                        extra={"context": ctx},
                    )
                    report.rewritten.append(str(info_path))
            except (OSError, ValueError) as e:
                logger.error(
                    f'Error processing {INFO_FILE_NAME} in "{old_name}": {e}',
                    extra={"context": ctx},
                )
                report.errors.append(str(info_path))

            if old_name == checksummed:
                continue

            new_path = chain_path / checksummed
            if rename_target_taken(token_path, new_path):
                logger.error(
                    f'Cannot rename "{old_name}": "{checksummed}" already exists',
                    extra={"context": ctx},
                )
                report.errors.append(str(token_path))
                continue

            logger.info(
                f'Renaming folder "{old_name}" -> "{checksummed}" in chain "{chain_path.name}"',
                extra={"context": ctx},
            )
            token_path.rename(new_path)
            report.renamed.append((old_name, checksummed))

    logger.info("Checksum repair complete", extra={"context": report.to_dict()})
    return report
