"""
jobs/ - Registry run orchestration.
"""

from jobs.pipeline import (
    GenerateOutcome,
    RegistryPipeline,
    RunPolicy,
    RunReport,
    load_record,
)

__all__ = [
    "GenerateOutcome",
    "RegistryPipeline",
    "RunPolicy",
    "RunReport",
    "load_record",
]
