# PATH: tests/unit/test_logging_contract.py
"""
Tests for logging contract enforcement.

No kwargs to logger; only extra={"context": {...}} allowed.
"""

import ast
import json
import logging
import unittest
from pathlib import Path
from typing import Any, Dict, List

from core.logging import (
    ConsoleFormatter,
    StructuredFormatter,
    clear_global_context,
    set_global_context,
)

PROJECT_ROOT = Path(__file__).parent.parent.parent
PACKAGES = ("core", "config", "discovery", "assets", "reconcile", "manifest", "jobs")


class TestLoggingContractEnforcement(unittest.TestCase):
    """AST-based tests for logging contract."""

    ALLOWED_KWARGS = {"exc_info", "extra", "stack_info", "stacklevel"}

    def _find_logger_violations(self, source_code: str) -> List[Dict[str, Any]]:
        """Find logger calls with invalid kwargs using AST."""
        violations = []
        tree = ast.parse(source_code)

        for node in ast.walk(tree):
            if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
                continue

            method_name = node.func.attr
            if method_name not in ("debug", "info", "warning", "error", "critical", "exception"):
                continue

            obj = node.func.value
            if isinstance(obj, ast.Name):
                is_logger = "log" in obj.id.lower()
            elif isinstance(obj, ast.Attribute):
                is_logger = "log" in obj.attr.lower()
            else:
                is_logger = False
            if not is_logger:
                continue

            for kw in node.keywords:
                if kw.arg and kw.arg not in self.ALLOWED_KWARGS:
                    violations.append({
                        "line": node.lineno,
                        "method": method_name,
                        "invalid_kwarg": kw.arg,
                    })

        return violations

    def _source_files(self):
        files = [PROJECT_ROOT / "run_registry.py"]
        for package in PACKAGES:
            files.extend(sorted((PROJECT_ROOT / package).rglob("*.py")))
        return files

    def test_no_invalid_kwargs(self):
        msg = ""
        for filepath in self._source_files():
            for v in self._find_logger_violations(filepath.read_text(encoding="utf-8")):
                msg += f"  {filepath.name}:{v['line']}: logger.{v['method']}(..., {v['invalid_kwarg']}=...)\n"
        if msg:
            self.fail("Found logging violations:\n" + msg)


class TestFormatters(unittest.TestCase):
    """Context reaches the formatted output."""

    def setUp(self):
        clear_global_context()

    def tearDown(self):
        clear_global_context()

    def _record(self, context=None):
        record = logging.LogRecord(
            name="registry.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Scanned %d tokens",
            args=(3,),
            exc_info=None,
        )
        if context is not None:
            record.context = context
        return record

    def test_structured_formatter_is_json(self):
        output = StructuredFormatter().format(self._record({"chain_id": 1}))

        data = json.loads(output)
        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["message"], "Scanned 3 tokens")
        self.assertEqual(data["context"], {"chain_id": 1})

    def test_global_context_merged(self):
        set_global_context(service="token-registry")

        data = json.loads(StructuredFormatter().format(self._record({"chain_id": 1})))

        self.assertEqual(data["context"], {"service": "token-registry", "chain_id": 1})

    def test_record_context_wins(self):
        set_global_context(mode="validate")

        data = json.loads(StructuredFormatter().format(self._record({"mode": "generate"})))

        self.assertEqual(data["context"]["mode"], "generate")

    def test_no_context_key_when_empty(self):
        data = json.loads(StructuredFormatter().format(self._record()))
        self.assertNotIn("context", data)

    def test_console_formatter_truncates_context(self):
        output = ConsoleFormatter().format(self._record({"a": 1, "b": 2, "c": 3, "d": 4}))

        self.assertIn("Scanned 3 tokens", output)
        self.assertIn("a=1, b=2, c=3", output)
        self.assertIn("(+1 more)", output)


if __name__ == "__main__":
    unittest.main()
