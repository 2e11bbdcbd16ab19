"""
discovery/ - Registry tree discovery.

Modules:
- scanner: structural walk of <root>/<chainId>/<address>/
- checksum_repair: rename folders and fix info.json into checksum casing
"""

from discovery.checksum_repair import RepairReport, repair_registry
from discovery.scanner import RegistryScanner, ScanEntry

__all__ = [
    "RegistryScanner",
    "ScanEntry",
    "RepairReport",
    "repair_registry",
]
