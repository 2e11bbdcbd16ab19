# PATH: core/exceptions.py
"""
Typed exceptions for the token registry.

Four failure families, each carrying an ErrorCode and a details dict:
- InvalidAddress: malformed or non-canonical address string
- SchemaViolation: one or more info.json fields are invalid
- StructuralViolation: folder naming, unsupported chain, missing files
- IOFailure: read/write/network fault from a collaborator
"""

from dataclasses import dataclass
from typing import List, Optional

from core.constants import ErrorCode


class RegistryError(Exception):
    """Base exception for the token registry."""

    default_code = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    @property
    def path(self) -> Optional[str]:
        """Offending filesystem path, when known."""
        return self.details.get("path")

    def __str__(self):
        return f"[{self.code.value}] {self.message}"


class InvalidAddress(RegistryError):
    """Address is malformed or not in checksum casing."""

    default_code = ErrorCode.INVALID_ADDRESS

    def __init__(
        self,
        value: object,
        code: Optional[ErrorCode] = None,
        details: Optional[dict] = None,
    ):
        details = dict(details or {})
        details.setdefault("value", value)
        super().__init__(f"Invalid address: {value!r}", code, details)
        self.value = value


@dataclass(frozen=True)
class FieldProblem:
    """A single failed field rule."""
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class SchemaViolation(RegistryError):
    """
    Record failed validation.

    Carries every violated field, never just the first one.
    """

    default_code = ErrorCode.SCHEMA_VIOLATION

    def __init__(
        self,
        problems: List[FieldProblem],
        message: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.problems = list(problems)
        details = dict(details or {})
        details["problems"] = [
            {"field": p.field, "message": p.message} for p in self.problems
        ]
        if message is None:
            message = "Invalid record: " + "; ".join(str(p) for p in self.problems)
        super().__init__(message, ErrorCode.SCHEMA_VIOLATION, details)

    @property
    def fields(self) -> List[str]:
        return [p.field for p in self.problems]


class StructuralViolation(RegistryError):
    """Registry tree layout is wrong (naming, missing files, mismatches)."""
    pass


class IOFailure(RegistryError):
    """Filesystem, network or object-store fault."""

    default_code = ErrorCode.IO_READ_FAILED
