"""
discovery/scanner.py - Registry tree walker.

Layout:
    <root>/<chainId>/<checksumAddress>/info.json
    <root>/<chainId>/<checksumAddress>/logo.png   (optional unless required)

Pipeline:
1. List chain folders → check name is an integer, chain is supported, path is a dir
2. List token folders → check name is a canonical address, path is a dir
3. Check info.json exists and (when required) logo.png exists
4. Yield a ScanEntry for the record loader

Strict scanners raise on the first violation. Lenient scanners log the
offending path and skip it.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Iterator, Optional

from core.address import is_canonical
from core.constants import (
    CHAIN_FOLDER_PATTERN,
    INFO_FILE_NAME,
    LOGO_FILE_NAME,
    ErrorCode,
)
from core.exceptions import StructuralViolation
from core.logging import get_logger

logger = get_logger(__name__)

_CHAIN_FOLDER_RE = re.compile(CHAIN_FOLDER_PATTERN)


@dataclass(frozen=True)
class ScanEntry:
    """One token folder that passed structural checks."""
    chain_id: int
    chain_folder: str
    token_folder: str
    token_path: Path
    record_path: Path
    asset_path: Optional[Path] = None

    @property
    def entry_id(self) -> str:
        return f"{self.chain_folder}/{self.token_folder}"


class RegistryScanner:
    """
    Walks the chain/token directory tree.

    Iterating the scanner (or calling scan()) starts a fresh walk, so the
    same scanner can be consumed more than once.
    """

    def __init__(
        self,
        root: Path,
        supported_chains: Optional[AbstractSet[int]] = None,
        strict: bool = True,
        restrict_chains: bool = True,
        require_logo: bool = True,
    ):
        self.root = Path(root)
        self.supported_chains = frozenset(supported_chains or ())
        self.strict = strict
        self.restrict_chains = restrict_chains
        self.require_logo = require_logo

        # Skips recorded by the most recent walk
        self.skipped: list[StructuralViolation] = []

    def __iter__(self) -> Iterator[ScanEntry]:
        return self.scan()

    def _violation(self, message: str, code: ErrorCode, path: Path) -> None:
        """Raise in strict mode, else log and remember the skip."""
        error = StructuralViolation(message, code, {"path": str(path)})
        if self.strict:
            raise error
        logger.warning(
            f"Skipping {path}: {message}",
            extra={"context": {"code": code.value, "path": str(path)}},
        )
        self.skipped.append(error)

    def _check_chain(self, chain_folder: str, chain_path: Path) -> Optional[int]:
        if not _CHAIN_FOLDER_RE.fullmatch(chain_folder):
            self._violation(
                f'Chain folder "{chain_folder}" is not a valid integer.',
                ErrorCode.CHAIN_FOLDER_NOT_INTEGER,
                chain_path,
            )
            return None

        chain_id = int(chain_folder)
        if self.restrict_chains and chain_id not in self.supported_chains:
            self._violation(
                f'Chain "{chain_folder}" is not supported.',
                ErrorCode.CHAIN_NOT_SUPPORTED,
                chain_path,
            )
            return None

        if not chain_path.is_dir():
            self._violation(
                f'Chain folder "{chain_folder}" is not a directory.',
                ErrorCode.CHAIN_NOT_DIRECTORY,
                chain_path,
            )
            return None

        return chain_id

    def _check_token(self, token_folder: str, token_path: Path) -> Optional[ScanEntry]:
        if not is_canonical(token_folder):
            self._violation(
                f'Token folder "{token_folder}" is not a valid address. '
                f"Please use the checksummed address.",
                ErrorCode.TOKEN_FOLDER_NOT_CANONICAL,
                token_path,
            )
            return None

        if not token_path.is_dir():
            self._violation(
                f'Token folder "{token_folder}" is not a directory.',
                ErrorCode.TOKEN_NOT_DIRECTORY,
                token_path,
            )
            return None

        logo_path = token_path / LOGO_FILE_NAME
        has_logo = logo_path.is_file()
        if self.require_logo and not has_logo:
            self._violation(
                f'Logo file "{logo_path}" does not exist.',
                ErrorCode.LOGO_MISSING,
                logo_path,
            )
            return None

        record_path = token_path / INFO_FILE_NAME
        if not record_path.is_file():
            self._violation(
                f'Info file "{record_path}" does not exist.',
                ErrorCode.INFO_MISSING,
                record_path,
            )
            return None

        chain_path = token_path.parent
        return ScanEntry(
            chain_id=int(chain_path.name),
            chain_folder=chain_path.name,
            token_folder=token_folder,
            token_path=token_path,
            record_path=record_path,
            asset_path=logo_path if has_logo else None,
        )

    def scan(self) -> Iterator[ScanEntry]:
        """
        Lazily yield every structurally valid token folder.

        Chain folders first, then token folders within each chain, both in
        sorted listing order.

        Raises:
            StructuralViolation: strict mode only, on the first bad path
        """
        self.skipped = []

        if not self.root.is_dir():
            raise StructuralViolation(
                f'Registry root "{self.root}" is not a directory.',
                ErrorCode.CHAIN_NOT_DIRECTORY,
                {"path": str(self.root)},
            )

        for chain_path in sorted(self.root.iterdir(), key=lambda p: p.name):
            chain_id = self._check_chain(chain_path.name, chain_path)
            if chain_id is None:
                continue

            for token_path in sorted(chain_path.iterdir(), key=lambda p: p.name):
                entry = self._check_token(token_path.name, token_path)
                if entry is not None:
                    yield entry
