"""
manifest/ - Published token list I/O.

Modules:
- reader: previous manifest from a path or URL
- writer: atomic JSON writer
"""

from manifest.reader import load_previous_manifest
from manifest.writer import ManifestWriter

__all__ = [
    "ManifestWriter",
    "load_previous_manifest",
]
