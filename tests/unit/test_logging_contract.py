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
    get_logger,
    set_global_context,
)

PROJECT_ROOT = Path(__file__).parent.parent.parent


class TestLoggingContractEnforcement(unittest.TestCase):
    """AST-based tests for logging contract."""

    ALLOWED_KWARGS = {"exc_info", "extra", "stack_info", "stacklevel"}
    PACKAGES = ("core", "explorers", "config")

    def _find_logger_violations(self, source_code: str) -> List[Dict[str, Any]]:
        """Find logger calls with invalid kwargs using AST."""
        violations = []

        try:
            tree = ast.parse(source_code)
        except SyntaxError:
            return violations

        for node in ast.walk(tree):
            if not isinstance(node, ast.Call):
                continue
            if not isinstance(node.func, ast.Attribute):
                continue

            method_name = node.func.attr
            if method_name not in ("debug", "info", "warning", "error", "critical", "exception"):
                continue

            obj = node.func.value
            is_logger = False
            if isinstance(obj, ast.Name):
                is_logger = "log" in obj.id.lower()
            elif isinstance(obj, ast.Attribute):
                is_logger = "log" in obj.attr.lower()

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

    def test_detector_finds_violation(self):
        source = 'logger.info("x", url="https://a.example")\n'
        violations = self._find_logger_violations(source)
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0]["invalid_kwarg"], "url")

    def test_detector_allows_extra(self):
        source = 'self._logger.debug("x", extra={"context": {"url": "u"}})\n'
        self.assertEqual(self._find_logger_violations(source), [])

    def test_packages_have_no_invalid_kwargs(self):
        """core/, explorers/ and config/ use only extra= for context."""
        files = [
            path
            for package in self.PACKAGES
            for path in (PROJECT_ROOT / package).rglob("*.py")
        ]
        self.assertGreater(len(files), 0)

        messages = []
        for filepath in files:
            source = filepath.read_text(encoding="utf-8")
            for v in self._find_logger_violations(source):
                messages.append(
                    f"  {filepath.relative_to(PROJECT_ROOT)}:{v['line']}: "
                    f"logger.{v['method']}(..., {v['invalid_kwarg']}=...)"
                )

        if messages:
            self.fail("Logging violations:\n" + "\n".join(messages))


class TestLoggingContextCapture(unittest.TestCase):
    """Context is captured in log records and rendered by formatters."""

    def setUp(self):
        self.captured_records = []

        class CapturingHandler(logging.Handler):
            def __init__(self, records_list):
                super().__init__()
                self.records = records_list

            def emit(self, record):
                self.records.append(record)

        self.name = f"test_capture_{id(self)}"
        base = logging.getLogger(self.name)
        base.setLevel(logging.DEBUG)
        base.handlers = []
        base.addHandler(CapturingHandler(self.captured_records))
        base.propagate = False

    def tearDown(self):
        clear_global_context()

    def test_adapter_merges_default_and_call_context(self):
        logger = get_logger(self.name, url="https://a.example")
        logger.debug("Request failed", extra={"context": {"code": "TRANSPORT_TIMEOUT"}})

        record = self.captured_records[0]
        self.assertEqual(record.context, {"url": "https://a.example", "code": "TRANSPORT_TIMEOUT"})

    def test_adapter_without_extra(self):
        logger = get_logger(self.name, url="https://a.example")
        logger.info("ready")
        self.assertEqual(self.captured_records[0].context, {"url": "https://a.example"})

    def test_structured_formatter(self):
        set_global_context(network="bitcoin")
        get_logger(self.name).warning("Explorers disagree", extra={"context": {"param": 5}})

        payload = json.loads(StructuredFormatter().format(self.captured_records[0]))

        self.assertEqual(payload["level"], "WARNING")
        self.assertEqual(payload["message"], "Explorers disagree")
        self.assertEqual(payload["context"], {"network": "bitcoin", "param": 5})

    def test_console_formatter_truncates_context(self):
        get_logger(self.name).info("x", extra={"context": {"a": 1, "b": 2, "c": 3, "d": 4}})

        line = ConsoleFormatter().format(self.captured_records[0])

        self.assertIn("a=1, b=2, c=3", line)
        self.assertIn("(+1 more)", line)


if __name__ == "__main__":
    unittest.main()
