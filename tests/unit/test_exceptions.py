"""
tests/unit/test_exceptions.py - Tests for core/exceptions.py

Typed exceptions carry a code, a message and a details dict.
"""

import pytest

from core.constants import ErrorCode
from core.exceptions import (
    FieldProblem,
    InvalidAddress,
    IOFailure,
    RegistryError,
    SchemaViolation,
    StructuralViolation,
)


class TestErrorCode:
    def test_error_code_is_string_enum(self):
        assert isinstance(ErrorCode.SCHEMA_VIOLATION, str)
        assert ErrorCode.SCHEMA_VIOLATION == "SCHEMA_VIOLATION"

    def test_error_codes_unique(self):
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))


class TestRegistryError:
    def test_default_code(self):
        err = RegistryError("boom")
        assert err.code == ErrorCode.UNKNOWN
        assert err.details == {}

    def test_str_includes_code(self):
        err = StructuralViolation("bad folder", ErrorCode.CHAIN_FOLDER_NOT_INTEGER)
        assert str(err) == "[CHAIN_FOLDER_NOT_INTEGER] bad folder"

    def test_path_from_details(self):
        err = IOFailure("cannot read", details={"path": "/x/info.json"})
        assert err.path == "/x/info.json"
        assert err.code == ErrorCode.IO_READ_FAILED

    def test_path_absent(self):
        assert RegistryError("x").path is None

    @pytest.mark.parametrize("cls", [InvalidAddress, SchemaViolation, StructuralViolation, IOFailure])
    def test_hierarchy(self, cls):
        assert issubclass(cls, RegistryError)


class TestInvalidAddress:
    def test_keeps_value(self):
        err = InvalidAddress("0x12")
        assert err.value == "0x12"
        assert err.details["value"] == "0x12"
        assert err.code == ErrorCode.INVALID_ADDRESS

    def test_non_canonical_code(self):
        err = InvalidAddress("0xabc", ErrorCode.NON_CANONICAL_ADDRESS)
        assert err.code == ErrorCode.NON_CANONICAL_ADDRESS


class TestSchemaViolation:
    def test_lists_every_problem(self):
        err = SchemaViolation([
            FieldProblem("name", "must be a non-empty string"),
            FieldProblem("decimals", "must be a non-negative integer"),
        ])

        assert err.fields == ["name", "decimals"]
        assert err.code == ErrorCode.SCHEMA_VIOLATION
        assert "name: must be a non-empty string" in err.message
        assert "decimals" in err.message
        assert err.details["problems"][1] == {
            "field": "decimals",
            "message": "must be a non-negative integer",
        }

    def test_keeps_path(self):
        err = SchemaViolation([FieldProblem("<root>", "not JSON")], details={"path": "a/info.json"})
        assert err.path == "a/info.json"
