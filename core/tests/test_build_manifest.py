"""Tests for build manifest parsing and validation."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from core.build_manifest import load_build_manifest, resolve_manifest_path


class TestBuildManifest(unittest.TestCase):
    def _write_manifest(self, text: str, suffix: str = ".yml") -> str:
        handle = tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False)
        handle.write(text)
        handle.flush()
        handle.close()
        return handle.name

    def test_load_valid_manifest(self) -> None:
        path = self._write_manifest(
            """
name: zlib
includes:
  - zlib.h
c_includes: [zconf.h]
include_paths:
  - include
rule_files: [/etc/headerbind/zlib.yml]
excludes: [unistd.h]
output_file: out/Zlib.java
"""
        )
        try:
            manifest = load_build_manifest(path)
            self.assertEqual(manifest.name, "zlib")
            self.assertEqual(manifest.includes, ["zlib.h"])
            self.assertEqual(manifest.c_includes, ["zconf.h"])
            self.assertEqual(manifest.include_paths, [str(Path(path).resolve().parent / "include")])
            self.assertEqual(manifest.rule_files, ["/etc/headerbind/zlib.yml"])
            self.assertEqual(manifest.excludes, ["unistd.h"])
            self.assertEqual(manifest.output_file, "out/Zlib.java")
            self.assertEqual(manifest.report_dir, "output/run_reports")
        finally:
            Path(path).unlink(missing_ok=True)

    def test_load_json_manifest(self) -> None:
        path = self._write_manifest('{"name": "demo", "includes": ["demo.h"]}', suffix=".json")
        try:
            manifest = load_build_manifest(path)
            self.assertEqual(manifest.includes, ["demo.h"])
            self.assertIsNone(manifest.output_file)
            self.assertEqual(manifest.c_includes, [])
        finally:
            Path(path).unlink(missing_ok=True)

    def test_missing_name_raises(self) -> None:
        path = self._write_manifest("includes: [demo.h]\n")
        try:
            with self.assertRaises(ValueError):
                load_build_manifest(path)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_no_headers_raises(self) -> None:
        path = self._write_manifest("name: demo\nincludes: []\n")
        try:
            with self.assertRaises(ValueError):
                load_build_manifest(path)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_duplicate_includes_raise(self) -> None:
        path = self._write_manifest("name: demo\nincludes: [a.h]\nc_includes: [a.h]\n")
        try:
            with self.assertRaises(ValueError):
                load_build_manifest(path)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_non_list_includes_raise(self) -> None:
        path = self._write_manifest("name: demo\nincludes: demo.h\n")
        try:
            with self.assertRaises(ValueError):
                load_build_manifest(path)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_build_manifest("/definitely/missing.yml")

    def test_resolve_relative_path(self) -> None:
        resolved = resolve_manifest_path(Path("/tmp/work"), "include")
        self.assertEqual(str(resolved), "/tmp/work/include")
        self.assertEqual(str(resolve_manifest_path(Path("/tmp/work"), "/usr/include")), "/usr/include")


if __name__ == "__main__":
    unittest.main()
