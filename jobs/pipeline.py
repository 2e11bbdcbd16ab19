# PATH: jobs/pipeline.py
"""
jobs/pipeline.py - One engine for every registry run.

A RunPolicy picks the behavior:
- error_policy: STRICT aborts on the first bad token, LENIENT logs and skips
- chain_policy: RESTRICTED checks chain folders against the allow-list
- asset_mode: NONE, RAW_URL or CDN_UPLOAD logo URIs
- require_logo: a missing logo.png is a structural violation

Presets:
    RunPolicy.validation()   strict, restricted, logo required, no assets
    RunPolicy.generation()   lenient, unrestricted, raw logo URLs

USAGE:
    pipeline = RegistryPipeline(root, supported_chains, RunPolicy.validation())
    report = pipeline.validate()

    pipeline = RegistryPipeline(root, supported_chains, RunPolicy.generation(),
                                resolver=RawRepositoryResolver(base_url))
    outcome = asyncio.run(pipeline.generate("tokenlist.json", ManifestWriter(path)))
"""

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Any, Dict, Iterator, List, Optional, Tuple

from assets.resolver import AssetResolver
from core.constants import (
    DEFAULT_ASSET_CONCURRENCY,
    AssetMode,
    ChainPolicy,
    ErrorCode,
    ErrorPolicy,
)
from core.exceptions import FieldProblem, IOFailure, RegistryError, SchemaViolation, StructuralViolation
from core.logging import get_logger
from core.models import TokenRecord
from core.schema import validate_record
from discovery.scanner import RegistryScanner, ScanEntry
from manifest.reader import load_previous_manifest
from manifest.writer import ManifestWriter
from reconcile.engine import ReconciliationEngine, ReconciliationResult

logger = get_logger(__name__)


@dataclass
class RunPolicy:
    """How strict a run is and where logo URIs come from."""
    error_policy: ErrorPolicy = ErrorPolicy.STRICT
    chain_policy: ChainPolicy = ChainPolicy.RESTRICTED
    asset_mode: AssetMode = AssetMode.NONE
    require_logo: bool = True
    asset_concurrency: int = DEFAULT_ASSET_CONCURRENCY

    @property
    def strict(self) -> bool:
        return self.error_policy == ErrorPolicy.STRICT

    @property
    def restrict_chains(self) -> bool:
        return self.chain_policy == ChainPolicy.RESTRICTED

    @classmethod
    def validation(cls) -> "RunPolicy":
        return cls(
            error_policy=ErrorPolicy.STRICT,
            chain_policy=ChainPolicy.RESTRICTED,
            asset_mode=AssetMode.NONE,
            require_logo=True,
        )

    @classmethod
    def generation(
        cls,
        asset_mode: AssetMode = AssetMode.RAW_URL,
        strict: bool = False,
        restrict_chains: bool = False,
        asset_concurrency: int = DEFAULT_ASSET_CONCURRENCY,
    ) -> "RunPolicy":
        return cls(
            error_policy=ErrorPolicy.STRICT if strict else ErrorPolicy.LENIENT,
            chain_policy=ChainPolicy.RESTRICTED if restrict_chains else ChainPolicy.UNRESTRICTED,
            asset_mode=asset_mode,
            require_logo=False,
            asset_concurrency=asset_concurrency,
        )


@dataclass
class RunReport:
    """Outcome of the scan/validate phase."""
    tokens: List[TokenRecord] = field(default_factory=list)
    skipped: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def valid_count(self) -> int:
        return len(self.tokens)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def record_skip(self, error: RegistryError) -> None:
        self.skipped.append({
            "path": error.path,
            "code": error.code.value,
            "message": error.message,
        })

    def to_dict(self) -> dict:
        return {
            "valid": self.valid_count,
            "skipped": self.skipped_count,
            "skipped_paths": [s["path"] for s in self.skipped],
        }


@dataclass
class GenerateOutcome:
    """Result of a full generation run."""
    report: RunReport
    reconciliation: ReconciliationResult
    output_path: Path


def load_record(entry: ScanEntry) -> TokenRecord:
    """
    Read, validate and cross-check one info.json.

    Raises:
        IOFailure: file unreadable
        SchemaViolation: invalid JSON or invalid fields
        StructuralViolation: address field differs from the folder name
    """
    path = entry.record_path
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IOFailure(
            f"Error reading {path}: {e}",
            ErrorCode.IO_READ_FAILED,
            {"path": str(path)},
        ) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaViolation(
            [FieldProblem("<root>", f"invalid JSON: {e}")],
            message=f"File {path} is not valid JSON: {e}",
            details={"path": str(path)},
        ) from e

    record = validate_record(data, chain_id=entry.chain_id, source=str(path))

    # Exact string comparison: value-equal but differently cased still fails
    if record.address != entry.token_folder:
        raise StructuralViolation(
            f'Mismatch in token folder "{entry.token_folder}" and address in JSON: {record.address}',
            ErrorCode.ADDRESS_MISMATCH,
            {"path": str(path), "folder": entry.token_folder, "address": record.address},
        )

    return record


class RegistryPipeline:
    """
    Scan → validate → resolve logos → reconcile → write.

    All collaborators are passed in; nothing is shared between runs.
    """

    def __init__(
        self,
        root: Path,
        supported_chains: Optional[AbstractSet[int]] = None,
        policy: Optional[RunPolicy] = None,
        resolver: Optional[AssetResolver] = None,
        engine: Optional[ReconciliationEngine] = None,
    ):
        self.root = Path(root)
        self.policy = policy or RunPolicy.validation()
        self.supported_chains = frozenset(supported_chains or ())
        self.resolver = resolver
        self.engine = engine or ReconciliationEngine()

    def scanner(self) -> RegistryScanner:
        return RegistryScanner(
            self.root,
            supported_chains=self.supported_chains,
            strict=self.policy.strict,
            restrict_chains=self.policy.restrict_chains,
            require_logo=self.policy.require_logo,
        )

    def iter_records(self, report: RunReport) -> Iterator[Tuple[ScanEntry, TokenRecord]]:
        """
        Lazily yield (entry, record) for every valid token.

        Skipped tokens are added to report; fatal errors are logged with
        their path and re-raised.
        """
        scanner = self.scanner()
        try:
            for entry in scanner:
                try:
                    record = load_record(entry)
                except RegistryError as e:
                    if self.policy.strict:
                        raise
                    logger.warning(
                        f"Skipping {entry.record_path}: {e}",
                        extra={"context": {"code": e.code.value, "path": e.path}},
                    )
                    report.record_skip(e)
                    continue

                logger.debug(f"File {entry.record_path} is valid.")
                yield entry, record
        except RegistryError as e:
            logger.error(
                str(e),
                extra={"context": {"code": e.code.value, "path": e.path}},
            )
            raise
        finally:
            for violation in scanner.skipped:
                report.record_skip(violation)

    def validate(self) -> RunReport:
        """Validate every token without resolving assets or writing output."""
        report = RunReport()
        for _, record in self.iter_records(report):
            report.tokens.append(record)

        logger.info("Validation complete", extra={"context": report.to_dict()})
        return report

    async def resolve_assets(self, pairs: List[Tuple[ScanEntry, TokenRecord]]) -> None:
        """Fill logo_uri on every record, at most asset_concurrency at a time."""
        if self.resolver is None or self.policy.asset_mode == AssetMode.NONE:
            return

        semaphore = asyncio.Semaphore(max(1, self.policy.asset_concurrency))

        async def resolve_one(entry: ScanEntry, record: TokenRecord) -> None:
            async with semaphore:
                record.logo_uri = await self.resolver.resolve(entry)

        await asyncio.gather(*(resolve_one(entry, record) for entry, record in pairs))

    async def generate(
        self,
        previous_source: Optional[str],
        writer: ManifestWriter,
    ) -> GenerateOutcome:
        """
        Build and write the next manifest.

        Nothing is written if any fatal error occurs first.
        """
        previous = load_previous_manifest(previous_source)

        report = RunReport()
        pairs = list(self.iter_records(report))
        await self.resolve_assets(pairs)
        report.tokens = [record for _, record in pairs]

        if report.skipped:
            logger.warning(
                f"Skipped {report.skipped_count} tokens",
                extra={"context": report.to_dict()},
            )

        result = self.engine.reconcile(previous, report.tokens)
        output_path = writer.write(result.manifest)

        return GenerateOutcome(report=report, reconciliation=result, output_path=output_path)
