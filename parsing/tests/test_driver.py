"""
Unit tests for driver.py

Parses the headers under fixtures/ through the multi-file driver.
"""

import os
import shutil
import tempfile
import unittest

from parsing.context import Context
from parsing.driver import parse_fragment, parse_includes, parse_text, resolve_include
from parsing.infomap import Info, InfoMap

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


class TestResolveInclude(unittest.TestCase):
    """Test include resolution."""

    def test_search_path(self):
        self.assertEqual(
            resolve_include("<geometry.h>", [FIXTURES]),
            os.path.join(FIXTURES, "geometry.h"),
        )
        self.assertEqual(
            resolve_include('"geometry.h"', [FIXTURES]),
            os.path.join(FIXTURES, "geometry.h"),
        )

    def test_direct_path(self):
        path = os.path.join(FIXTURES, "legacy.h")
        self.assertEqual(resolve_include(path), path)

    def test_system_include_ignores_direct_path(self):
        path = os.path.join(FIXTURES, "legacy.h")
        self.assertIsNone(resolve_include(f"<{path}>", []))

    def test_missing(self):
        self.assertIsNone(resolve_include("nowhere.h", [FIXTURES]))


class TestParseIncludes(unittest.TestCase):
    """Test parsing several headers into one declaration list."""

    def test_single_header(self):
        result = parse_includes(["geometry.h"], include_paths=[FIXTURES])
        text = result.text
        self.assertEqual(result.files, [os.path.join(FIXTURES, "geometry.h")])
        self.assertEqual(result.stats.files_parsed, 1)
        self.assertIn("// Parsed from geometry.h", text)
        self.assertIn("public static final int GEOMETRY_VERSION = 3;", text)
        self.assertIn("X_AXIS = 0, Y_AXIS = 1, Z_AXIS = 2;", text)
        self.assertIn('@Namespace("geo") public static class Vec extends Pointer {', text)
        self.assertIn("dot(", text)
        self.assertGreater(result.stats.types, 0)

    def test_later_headers_see_earlier_types(self):
        info_map = InfoMap.with_defaults()
        result = parse_includes(["geometry.h", "shapes.h"], info_map=info_map, include_paths=[FIXTURES])
        self.assertEqual(result.stats.files_parsed, 2)
        self.assertIn("// Area of a circle", result.text)
        self.assertIn("double circle_area(", result.text)
        self.assertEqual(info_map.get_first("Scalar").value_types, ("double",))

    def test_c_headers_come_first(self):
        result = parse_includes(["shapes.h"], include_paths=[FIXTURES], c_includes=["geometry.h", "legacy.h"])
        self.assertEqual(
            [os.path.basename(f) for f in result.files],
            ["geometry.h", "legacy.h", "shapes.h"],
        )
        self.assertIn("public static native int legacy_version(int major);", result.text)
        self.assertLess(result.text.index("legacy_version"), result.text.index("circle_area"))

    def test_missing_include_raises(self):
        with self.assertRaises(FileNotFoundError):
            parse_includes(["nowhere.h"], include_paths=[FIXTURES])

    def test_excluded_missing_include_is_counted(self):
        result = parse_includes(["nowhere.h", "legacy.h"], include_paths=[FIXTURES], excludes=["nowhere.h"])
        self.assertEqual(result.stats.files_missing, 1)
        self.assertEqual(result.stats.files_parsed, 1)

    def test_skip_rule_skips_header(self):
        info_map = InfoMap.with_defaults().put(Info.of("legacy.h", skip=True))
        result = parse_includes(["legacy.h"], info_map=info_map, include_paths=[FIXTURES])
        self.assertEqual(result.stats.files_skipped, 1)
        self.assertEqual(result.files, [])

    def test_stray_closing_brace_is_ignored(self):
        result = parse_includes(["stray_brace.h"], include_paths=[FIXTURES])
        self.assertIn("before_brace", result.text)
        self.assertIn("after_brace", result.text)

    def test_container_rules_add_wrappers(self):
        info_map = InfoMap.with_defaults().put(
            Info.of("std::vector<int>", pointer_types=("IntVector",), define=True)
        )
        result = parse_includes(["legacy.h"], info_map=info_map, include_paths=[FIXTURES])
        self.assertIn("class IntVector extends Pointer", result.text)
        self.assertLess(result.text.index("IntVector"), result.text.index("legacy_version"))

    def test_report(self):
        result = parse_includes(["legacy.h"], include_paths=[FIXTURES])
        report = result.to_report()
        self.assertEqual(report["signatures"], ["legacy_version_int"])
        self.assertTrue(report["signature_hash"].startswith("sig_"))
        self.assertEqual(report["stats"]["functions"], 1)
        again = parse_includes(["legacy.h"], include_paths=[FIXTURES]).to_report()
        self.assertEqual(again["signature_hash"], report["signature_hash"])

    def test_windows_line_separator_is_detected(self):
        tmpdir = tempfile.mkdtemp()
        try:
            path = os.path.join(tmpdir, "crlf.h")
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write("int a();\r\nint b();\r\n")
            result = parse_includes([path])
            self.assertEqual(result.line_separator, "\r\n")
            self.assertIn("public static native int b();", result.text)
        finally:
            shutil.rmtree(tmpdir)


class TestParseTextAndFragments(unittest.TestCase):
    """Test in-memory entry points."""

    def test_parse_text_records_file(self):
        result = parse_text("int a();\n", file="inline.h")
        self.assertEqual(result.files, ["inline.h"])
        self.assertEqual(result.stats.functions, 1)

    def test_parse_text_stops_at_closing_brace(self):
        result = parse_text("int a();\n}\nint b();\n")
        self.assertNotIn("b()", result.text)

    def test_type_fragment(self):
        type_ = parse_fragment(InfoMap.with_defaults(), Context(), "const std::vector<int>&")
        self.assertEqual(type_.cpp_name, "std::vector<int>")
        self.assertTrue(type_.const_value)
        self.assertTrue(type_.reference)

    def test_declarator_fragment(self):
        dcl = parse_fragment(InfoMap.with_defaults(), Context(), "int count", kind="declarator")
        self.assertEqual(dcl.cpp_name, "count")
        self.assertEqual(dcl.type.java_name, "int")

    def test_unknown_fragment_kind(self):
        with self.assertRaises(ValueError):
            parse_fragment(InfoMap(), Context(), "int", kind="statement")


if __name__ == "__main__":
    unittest.main()
