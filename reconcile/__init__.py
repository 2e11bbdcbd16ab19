"""
reconcile/ - Manifest version reconciliation.
"""

from reconcile.engine import (
    ReconciliationEngine,
    ReconciliationResult,
    compute_delta,
    token_changed,
)

__all__ = [
    "ReconciliationEngine",
    "ReconciliationResult",
    "compute_delta",
    "token_changed",
]
