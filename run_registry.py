#!/usr/bin/env python3
"""
run_registry.py - CLI entrypoint for the token registry.

Usage:
    python run_registry.py validate --root chains/evm
    python run_registry.py generate --root chains/evm --output tokenlist.json
    python run_registry.py generate --asset-mode cdn --concurrency 4
    python run_registry.py fix-checksums --root chains/evm

Exit code 0 on success, 1 on any fatal validation or I/O error.
"""

import asyncio
import sys
from pathlib import Path

import click

from assets.resolver import build_asset_resolver
from config import get_settings, supported_chain_ids
from core.constants import AssetMode
from core.exceptions import RegistryError
from core.logging import get_logger, set_global_context, setup_logging
from discovery.checksum_repair import repair_registry
from jobs.pipeline import RegistryPipeline, RunPolicy
from manifest.writer import ManifestWriter
from reconcile.engine import ReconciliationEngine

logger = get_logger("registry.cli")


def _fail(error: RegistryError) -> None:
    """Report a fatal error on stderr and exit non-zero."""
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
@click.option(
    "--log-level",
    "-l",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON log format",
)
@click.option(
    "--log-file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Also write JSON logs to this file",
)
def cli(log_level: str, json_logs: bool, log_file: str | None) -> None:
    """Token registry: validate the tree and publish the token list."""
    setup_logging(level=log_level, log_file=log_file, json_format=json_logs)
    set_global_context(service="token-registry")


@cli.command()
@click.option("--root", "-r", default=None, help="Registry root (default: $REGISTRY_ROOT)")
@click.option("--chains-url", default=None, help="Remote chain list overriding chains.yaml")
def validate(root: str | None, chains_url: str | None) -> None:
    """Strictly validate every chain and token folder."""
    settings = get_settings()
    set_global_context(mode="validate")
    root_path = Path(root or settings.registry_root)

    try:
        chains = supported_chain_ids(chains_url or settings.supported_chains_url)
        pipeline = RegistryPipeline(root_path, chains, RunPolicy.validation())
        report = pipeline.validate()
    except RegistryError as e:
        _fail(e)

    click.echo(f"All {report.valid_count} token files are valid.")


@cli.command()
@click.option("--root", "-r", default=None, help="Registry root (default: $REGISTRY_ROOT)")
@click.option("--output", "-o", default=None, help="Manifest path (default: $TOKENLIST_OUTPUT)")
@click.option(
    "--previous",
    "-p",
    default=None,
    help="Previous manifest path or URL (default: the output path)",
)
@click.option(
    "--asset-mode",
    "-a",
    default=None,
    type=click.Choice([m.value for m in AssetMode]),
    help="How logo URIs are produced (default: $LOGO_ASSET_MODE)",
)
@click.option("--strict/--lenient", default=False, help="Abort on the first invalid token")
@click.option(
    "--restrict-chains/--all-chains",
    default=False,
    help="Only accept chains from the supported list",
)
@click.option("--chains-url", default=None, help="Remote chain list overriding chains.yaml")
@click.option("--concurrency", "-c", default=None, type=int, help="Parallel logo resolutions")
def generate(
    root: str | None,
    output: str | None,
    previous: str | None,
    asset_mode: str | None,
    strict: bool,
    restrict_chains: bool,
    chains_url: str | None,
    concurrency: int | None,
) -> None:
    """Build the token list and bump its version."""
    settings = get_settings()
    set_global_context(mode="generate")

    root_path = Path(root or settings.registry_root)
    output_path = Path(output or settings.output_file)
    mode = AssetMode(asset_mode) if asset_mode else settings.asset_mode
    policy = RunPolicy.generation(
        asset_mode=mode,
        strict=strict,
        restrict_chains=restrict_chains,
        asset_concurrency=concurrency or settings.asset_concurrency,
    )

    try:
        chains = set()
        if restrict_chains:
            chains = supported_chain_ids(chains_url or settings.supported_chains_url)
        pipeline = RegistryPipeline(
            root_path,
            chains,
            policy,
            resolver=build_asset_resolver(settings, mode),
            engine=ReconciliationEngine(manifest_name=settings.manifest_name),
        )
        outcome = asyncio.run(
            pipeline.generate(previous or str(output_path), ManifestWriter(output_path))
        )
    except RegistryError as e:
        _fail(e)

    result = outcome.reconciliation
    click.echo(
        f"Wrote {len(result.manifest.tokens)} tokens to {outcome.output_path} "
        f"(version {result.previous_version} -> {result.version}, "
        f"skipped {outcome.report.skipped_count})"
    )


@cli.command("fix-checksums")
@click.option("--root", "-r", default=None, help="Registry root (default: $REGISTRY_ROOT)")
def fix_checksums(root: str | None) -> None:
    """Rename token folders and fix info.json addresses to checksum casing."""
    settings = get_settings()
    set_global_context(mode="fix-checksums")
    root_path = Path(root or settings.registry_root)

    if not root_path.is_dir():
        click.echo(f"Error: registry root {root_path} is not a directory", err=True)
        sys.exit(1)

    report = repair_registry(root_path)
    click.echo(
        f"Renamed {len(report.renamed)} folders, rewrote {len(report.rewritten)} files, "
        f"skipped {len(report.skipped)}, errors {len(report.errors)}"
    )
    if report.errors:
        sys.exit(1)


if __name__ == "__main__":
    cli()
