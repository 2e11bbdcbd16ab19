# PATH: core/schema.py
"""
info.json record validation.

CONTRACTS:
- validate_record() returns a TokenRecord or raises SchemaViolation
- SchemaViolation lists EVERY failed field, in a fixed field order
- Unknown keys are ignored (forward compatible)
- chainId and logoURI are never read from info.json: the first comes from
  the chain folder, the second from the asset resolver

USAGE:
    from core.schema import validate_record

    record = validate_record(json.loads(text), chain_id=1)
"""

from typing import Any, List, Optional
from urllib.parse import urlparse

from core.address import is_canonical
from core.exceptions import FieldProblem, SchemaViolation
from core.models import TokenRecord

_MISSING = object()


def is_https_url(value: Any) -> bool:
    """True for an absolute URL with the https scheme and a host."""
    if not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme == "https" and bool(parsed.netloc)


def _check_required_string(data: dict, name: str, problems: List[FieldProblem]) -> None:
    value = data.get(name, _MISSING)
    if value is _MISSING:
        problems.append(FieldProblem(name, "is required"))
    elif not isinstance(value, str):
        problems.append(FieldProblem(name, "must be a string"))
    elif not value:
        problems.append(FieldProblem(name, "must not be empty"))


def _is_json_integer(value: Any) -> bool:
    """Integer-valued JSON number; 18.0 counts, true and "18" do not."""
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return value.is_integer()
    return isinstance(value, int)


def _check_decimals(data: dict, problems: List[FieldProblem]) -> None:
    value = data.get("decimals", _MISSING)
    if value is _MISSING:
        problems.append(FieldProblem("decimals", "is required"))
    elif not _is_json_integer(value):
        problems.append(FieldProblem("decimals", "must be an integer"))
    elif value < 0:
        problems.append(FieldProblem("decimals", "must be >= 0"))


def _check_address(data: dict, problems: List[FieldProblem]) -> None:
    value = data.get("address", _MISSING)
    if value is _MISSING:
        problems.append(FieldProblem("address", "is required"))
    elif not is_canonical(value):
        problems.append(FieldProblem("address", "Invalid checksummed Ethereum address"))


def _check_optional_url(data: dict, name: str, problems: List[FieldProblem]) -> None:
    value = data.get(name, _MISSING)
    if value is not _MISSING and not is_https_url(value):
        problems.append(FieldProblem(name, "Invalid HTTPS URL"))


def collect_problems(data: Any) -> List[FieldProblem]:
    """Return all field problems for data (empty list when valid)."""
    if not isinstance(data, dict):
        return [FieldProblem("<root>", "record must be a JSON object")]

    problems: List[FieldProblem] = []
    _check_required_string(data, "name", problems)
    _check_required_string(data, "symbol", problems)
    _check_decimals(data, problems)
    _check_address(data, problems)
    _check_optional_url(data, "website", problems)
    _check_optional_url(data, "explorer", problems)

    description = data.get("description", _MISSING)
    if description is not _MISSING and not isinstance(description, str):
        problems.append(FieldProblem("description", "must be a string"))

    return problems


def validate_record(
    data: Any,
    chain_id: int,
    source: Optional[str] = None,
) -> TokenRecord:
    """
    Validate a parsed info.json document.

    Args:
        data: Parsed JSON value
        chain_id: Chain the record belongs to (from its folder)
        source: Path used in error details

    Returns:
        TokenRecord with logo_uri unset

    Raises:
        SchemaViolation: one or more fields are invalid
    """
    problems = collect_problems(data)
    if problems:
        details = {"path": source} if source else {}
        message = None
        if source:
            message = f"File {source} is invalid: " + "; ".join(str(p) for p in problems)
        raise SchemaViolation(problems, message=message, details=details)

    return TokenRecord(
        chain_id=chain_id,
        address=data["address"],
        name=data["name"],
        symbol=data["symbol"],
        decimals=int(data["decimals"]),
        website=data.get("website"),
        description=data.get("description"),
        explorer=data.get("explorer"),
    )
