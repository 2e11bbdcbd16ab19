# PATH: reconcile/engine.py
"""
Version reconciliation for the published token list.

VERSION CONTRACT:
  major += number of chains absent from the previous manifest
  minor += number of new tokens on chains the previous manifest already had
  patch += number of known tokens whose compared fields changed

- Tokens on a brand-new chain count once, under major, per chain
- Identity is (chainId, lowercase address); input order does not matter
- Removed tokens are counted for reporting but never change the version
- The previous manifest is read-only; the new token list replaces it whole
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from core.constants import COMPARED_FIELDS, DEFAULT_MANIFEST_NAME
from core.logging import get_logger
from core.models import ManifestVersion, PublishedManifest, TokenRecord, VersionDelta
from core.time import Clock, format_timestamp, now_utc

logger = get_logger(__name__)


def _json_type(value: Any) -> type:
    # JSON has one number type: 18 and 18.0 are the same value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float
    return type(value)


def _differs(old: Any, new: Any) -> bool:
    """Strict inequality: values of different JSON types always differ."""
    if _json_type(old) is not _json_type(new):
        return True
    return old != new


def token_changed(old: TokenRecord, new: TokenRecord) -> bool:
    """True if any compared field differs between two versions of a token."""
    return any(
        _differs(getattr(old, name), getattr(new, name))
        for name in COMPARED_FIELDS
    )


def compute_delta(
    previous_tokens: Iterable[TokenRecord],
    current_tokens: Iterable[TokenRecord],
) -> VersionDelta:
    """Classify every current token against the previous token set."""
    previous_by_key: Dict[tuple, TokenRecord] = {}
    for token in previous_tokens:
        previous_by_key[token.key] = token
    previous_chain_ids = {chain_id for chain_id, _ in previous_by_key}

    delta = VersionDelta()
    new_chains_counted = set()
    seen_keys = set()

    for token in current_tokens:
        key = token.key
        seen_keys.add(key)
        old = previous_by_key.get(key)

        if old is None:
            if token.chain_id not in previous_chain_ids:
                if token.chain_id not in new_chains_counted:
                    delta.new_chain_count += 1
                    new_chains_counted.add(token.chain_id)
            else:
                delta.new_token_count += 1
        elif token_changed(old, token):
            delta.updated_token_count += 1

    delta.removed_token_count = len(set(previous_by_key) - seen_keys)
    return delta


@dataclass
class ReconciliationResult:
    """New manifest plus the counts that produced its version."""
    manifest: PublishedManifest
    previous_version: ManifestVersion
    delta: VersionDelta

    @property
    def version(self) -> ManifestVersion:
        return self.manifest.version


class ReconciliationEngine:
    """
    Builds the next manifest from the current scan.

    Owns all version arithmetic; nothing else writes version fields.
    """

    def __init__(
        self,
        manifest_name: str = DEFAULT_MANIFEST_NAME,
        clock: Clock = now_utc,
    ):
        self.manifest_name = manifest_name
        self.clock = clock

    def reconcile(
        self,
        previous: Optional[PublishedManifest],
        current: list[TokenRecord],
    ) -> ReconciliationResult:
        """
        Diff current against previous and compute the next version.

        Args:
            previous: Last published manifest, or None if there is none
            current: Every token from this run's scan

        Returns:
            ReconciliationResult with the new manifest
        """
        previous_version = previous.version if previous else ManifestVersion()
        previous_tokens = previous.tokens if previous else []

        delta = compute_delta(previous_tokens, current)
        next_version = previous_version.bump(delta)

        if delta.removed_token_count:
            logger.warning(
                f"{delta.removed_token_count} previously published tokens are no longer present",
                extra={"context": {"removed_token_count": delta.removed_token_count}},
            )

        logger.info(
            f"Version {previous_version} -> {next_version}",
            extra={"context": delta.to_dict()},
        )

        manifest = PublishedManifest(
            name=self.manifest_name,
            timestamp=format_timestamp(self.clock()),
            version=next_version,
            tokens=list(current),
        )
        return ReconciliationResult(
            manifest=manifest,
            previous_version=previous_version,
            delta=delta,
        )
