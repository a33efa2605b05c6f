"""
Scenario tests for parser.py

Each test parses a small header and checks the generated Java text or the
declaration signatures.
"""

import threading
import unittest

from parsing.context import Context
from parsing.driver import parse_text
from parsing.infomap import Info, InfoMap
from parsing.tokens import ParserError


def _parse(text, *infos, **context):
    info_map = InfoMap.with_defaults()
    for info in infos:
        info_map.put(info)
    return parse_text(text, info_map, Context(**context)), info_map


class TestFunctions(unittest.TestCase):
    """Test free function declarations."""

    def test_default_argument_variants(self):
        result, _ = _parse("void f(int a, float b = 1.0f);\n")
        self.assertIn(
            "public static native void f(int a, float b/*=1.0f*/);\n"
            "public static native void f(int a);",
            result.text,
        )
        self.assertEqual(result.declarations.signatures(), ["f_int_float", "f_int"])

    def test_every_default_gives_one_more_variant(self):
        result, _ = _parse("void g(int a = 1, int b = 2);\n")
        signatures = result.declarations.signatures()
        self.assertEqual(len(signatures), 3)
        self.assertEqual(set(signatures), {"g_int_int", "g_int", "g"})

    def test_overloads_are_kept_apart(self):
        result, _ = _parse("int h(int x);\nint h(double x);\n")
        self.assertEqual(result.declarations.signatures(), ["h_int", "h_double"])
        self.assertEqual(result.stats.functions, 2)

    def test_namespaced_function(self):
        result, _ = _parse("namespace ns {\nint add(int a, int b);\n}\n")
        self.assertIn('@Namespace("ns") public static native int add(int a, int b);', result.text)

    def test_rename_rule(self):
        result, _ = _parse("int foo();\n", Info.of("foo", java_names=("bar",)))
        self.assertIn('@Name("foo")', result.text)
        self.assertIn("bar();", result.text)

    def test_skip_rule(self):
        result, _ = _parse("void hidden();\nvoid shown();\n", Info.of("hidden", skip=True))
        self.assertNotIn("hidden", result.text)
        self.assertIn("public static native void shown();", result.text)

    def test_java_text_rule_replaces_declaration(self):
        result, _ = _parse("void custom(int x);\n", Info.of("custom", java_text="// hand written\n"))
        self.assertIn("// hand written", result.text)
        self.assertNotIn("native void custom", result.text)
        self.assertTrue(result.declarations[0].custom)

    def test_function_bodies_are_skipped(self):
        result, _ = _parse("inline int twice(int x) { return x * 2; }\nint after();\n")
        self.assertIn("twice(int x);", result.text)
        self.assertIn("public static native int after();", result.text)

    def test_deleted_functions_are_not_emitted(self):
        result, _ = _parse("void gone() = delete;\nvoid kept();\n")
        self.assertNotIn("gone", result.text)
        self.assertIn("kept", result.text)


class TestEnums(unittest.TestCase):
    """Test enumerations."""

    def test_plain_enum_becomes_int_constants(self):
        result, info_map = _parse("enum Color { RED, GREEN, BLUE };\n")
        self.assertIn(
            "/** enum Color */\npublic static final int RED = 0, GREEN = 1, BLUE = 2;",
            result.text,
        )
        self.assertEqual(result.declarations.signatures(), ["Color"])
        self.assertEqual(info_map.get_first("Color").value_types, ("int",))

    def test_explicit_values_continue_counting(self):
        result, _ = _parse("enum Level { LOW = 5, MID, HIGH = 10 };\n")
        self.assertIn("LOW = 5", result.text)
        self.assertIn("MID = 6", result.text)
        self.assertIn("HIGH = 10", result.text)

    def test_enum_class_becomes_java_enum(self):
        result, info_map = _parse("enum class Mode { A = 1, B = 2 };\n")
        self.assertIn("/** enum class Mode */", result.text)
        self.assertIn("public enum Mode {", result.text)
        self.assertIn("A(1)", result.text)
        self.assertIn("B(2)", result.text)
        self.assertTrue(info_map.get_first("Mode").enumerate)

    def test_namespaced_enum_is_qualified(self):
        _, info_map = _parse("namespace gfx {\nenum Shade { DARK };\n}\n")
        self.assertIsNotNone(info_map.get_first("gfx::Shade", partial=False))


class TestMacros(unittest.TestCase):
    """Test preprocessor definitions."""

    def test_integer_constant(self):
        result, info_map = _parse("#define MAX_SIZE 1024\n")
        self.assertIn("public static final int MAX_SIZE = 1024;", result.text)
        info = info_map.get_first("MAX_SIZE")
        self.assertEqual(info.cpp_types, ("int",))
        self.assertTrue(info.translate)

    def test_type_is_inferred_from_earlier_macros(self):
        result, _ = _parse("#define MAX_SIZE 1024\n#define DOUBLE_SIZE (MAX_SIZE * 2)\n")
        self.assertIn("public static final int DOUBLE_SIZE = (MAX_SIZE * 2);", result.text)

    def test_string_constant(self):
        result, _ = _parse('#define LIB_NAME "geometry"\n')
        self.assertIn('public static final String LIB_NAME = "geometry";', result.text)

    def test_empty_macro_is_saved_for_expansion(self):
        result, info_map = _parse("#define EXPORT\n")
        self.assertIn("// #define EXPORT", result.text)
        self.assertIsNotNone(info_map.get_first("EXPORT").cpp_text)

    def test_function_macro_with_signature_rule(self):
        result, _ = _parse(
            "#define MAX(a, b) ((a) > (b) ? (a) : (b))\n",
            Info.of("MAX", cpp_types=("int", "int", "int")),
        )
        self.assertIn("public static native int MAX(int a, int b);", result.text)

    def test_function_macro_without_rule_is_commented(self):
        result, _ = _parse("#define SQUARE(x) ((x) * (x))\n")
        self.assertIn("// #define SQUARE", result.text)

    def test_skipped_macro(self):
        result, _ = _parse("#define SECRET 7\n", Info.of("SECRET", skip=True))
        self.assertNotIn("public static final int SECRET", result.text)

    def test_other_directives_become_comments(self):
        result, _ = _parse("#include <stdio.h>\n")
        self.assertIn("// #include <stdio.h>", result.text)


class TestAliasesAndVariables(unittest.TestCase):
    """Test typedefs, using declarations and global variables."""

    def test_typedef_registers_alias(self):
        result, info_map = _parse("typedef int MyInt;\nMyInt twice(MyInt x);\n")
        info = info_map.get_first("MyInt")
        self.assertEqual(info.cpp_types, ("int",))
        self.assertEqual(info.value_types, ("int",))
        self.assertTrue(info.cast)
        self.assertIn("int twice(", result.text)

    def test_using_alias_registers_alias(self):
        _, info_map = _parse("using Size = unsigned long;\n")
        self.assertEqual(info_map.get_first("Size").value_types, ("long",))

    def test_opaque_pointer_typedef(self):
        result, _ = _parse("typedef void* Handle;\n")
        self.assertIn("@Opaque public static class Handle extends Pointer {", result.text)

    def test_global_variable_accessors(self):
        result, _ = _parse("int counter;\n")
        self.assertIn(
            "public static native int counter(); public static native void counter(int setter);",
            result.text,
        )

    def test_const_variable_has_no_setter(self):
        result, _ = _parse("const int limit = 5;\n")
        self.assertIn("@MemberGetter", result.text)
        self.assertNotIn("setter", result.text)

    def test_immutable_context_has_no_setters(self):
        result, _ = _parse("int counter;\n", immutable=True)
        self.assertIn("counter();", result.text)
        self.assertNotIn("setter", result.text)

    def test_extern_c_block(self):
        result, _ = _parse('extern "C" {\nint c_api(int x);\n}\n')
        self.assertIn("public static native int c_api(int x);", result.text)


class TestTruncatedInput(unittest.TestCase):
    """Test that truncated headers end in a ParserError or a result, never a hang."""

    def _parse_bounded(self, text, timeout=5.0):
        outcome = {}

        def run():
            try:
                outcome["result"] = _parse(text)[0]
            except Exception as exc:
                outcome["error"] = exc

        worker = threading.Thread(target=run, daemon=True)
        worker.start()
        worker.join(timeout)
        self.assertFalse(worker.is_alive(), f"parse of {text!r} did not terminate")
        error = outcome.get("error")
        if error is not None:
            self.assertIsInstance(error, ParserError)
        return outcome

    def test_unterminated_struct(self):
        outcome = self._parse_bounded("struct {")
        self.assertIsInstance(outcome.get("error"), ParserError)
        self.assertIn("Unterminated body", str(outcome["error"]))

    def test_unterminated_named_struct(self):
        outcome = self._parse_bounded("struct Point { int x;")
        self.assertIsInstance(outcome.get("error"), ParserError)

    def test_variable_without_initializer_value(self):
        self._parse_bounded("int x = ")

    def test_unterminated_parameter_list(self):
        self._parse_bounded("void f(")

    def test_truncated_multi_variable_statement(self):
        self._parse_bounded("int a, b")

    def test_unterminated_function_body(self):
        outcome = self._parse_bounded("void g() { return;")
        self.assertIsInstance(outcome.get("error"), ParserError)


if __name__ == "__main__":
    unittest.main()
