"""Tests for startup config validation helpers."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.startup_config import (
    ConfigValidationError,
    load_config_payload,
    report_config_problem,
    resolve_strict_config_validation,
    validate_include_paths,
)


class TestStartupConfig(unittest.TestCase):
    def _write_config(self, content: str, suffix: str = ".yml") -> str:
        handle = tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False)
        handle.write(content)
        handle.flush()
        handle.close()
        return handle.name

    def test_load_non_strict_missing_returns_empty(self) -> None:
        payload = load_config_payload("/definitely/missing.yml", strict=False)
        self.assertEqual(payload, {})

    def test_load_strict_missing_raises(self) -> None:
        with self.assertRaises(ConfigValidationError):
            load_config_payload("/definitely/missing.yml", strict=True)

    def test_load_yaml_mapping(self) -> None:
        path = self._write_config("rules:\n  - names: [MyInt]\n    cpp_types: [int]\n")
        try:
            payload = load_config_payload(path, strict=True)
            self.assertEqual(payload["rules"][0]["names"], ["MyInt"])
        finally:
            Path(path).unlink(missing_ok=True)

    def test_load_json_by_suffix(self) -> None:
        path = self._write_config('{"rules": []}', suffix=".json")
        try:
            self.assertEqual(load_config_payload(path, strict=True), {"rules": []})
        finally:
            Path(path).unlink(missing_ok=True)

    def test_load_strict_list_payload_raises(self) -> None:
        path = self._write_config("- a\n- b\n")
        try:
            with self.assertRaises(ConfigValidationError):
                load_config_payload(path, strict=True)
            self.assertEqual(load_config_payload(path, strict=False), {})
        finally:
            Path(path).unlink(missing_ok=True)

    def test_load_strict_broken_yaml_raises(self) -> None:
        path = self._write_config("rules: [unclosed\n")
        try:
            with self.assertRaises(ConfigValidationError):
                load_config_payload(path, strict=True)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_load_empty_file(self) -> None:
        path = self._write_config("")
        try:
            self.assertEqual(load_config_payload(path, strict=False), {})
            with self.assertRaises(ConfigValidationError):
                load_config_payload(path, strict=True)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_report_config_problem(self) -> None:
        report_config_problem("soft problem", strict=False)
        with self.assertRaises(ConfigValidationError):
            report_config_problem("hard problem", strict=True)

    def test_validate_include_paths(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            summary = validate_include_paths([tmpdir, "/definitely/missing"], strict=False)
            self.assertEqual(summary["missing_include_paths"], ["/definitely/missing"])
            with self.assertRaises(ConfigValidationError):
                validate_include_paths([tmpdir, "/definitely/missing"], strict=True)

    def test_strict_flag_from_env(self) -> None:
        with mock.patch.dict(os.environ, {"STRICT_CONFIG_VALIDATION": "yes"}):
            self.assertTrue(resolve_strict_config_validation())
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertFalse(resolve_strict_config_validation())
            self.assertTrue(resolve_strict_config_validation(default=True))


if __name__ == "__main__":
    unittest.main()
