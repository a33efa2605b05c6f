"""
Tests for class, struct and union parsing in parser.py
"""

import unittest

from parsing.context import Context
from parsing.driver import parse_text
from parsing.infomap import Info, InfoMap
from parsing.parser import guess_accessor
from parsing.models import Declarator, Parameters, Type


def _parse(text, *infos, **context):
    info_map = InfoMap.with_defaults()
    for info in infos:
        info_map.put(info)
    return parse_text(text, info_map, Context(**context)), info_map


class TestGroups(unittest.TestCase):
    """Test generated peer classes."""

    def test_struct_members_are_public(self):
        result, _ = _parse("struct Point {\n    int x;\n    int y;\n};\n")
        text = result.text
        self.assertIn("public static class Point extends Pointer {", text)
        self.assertIn("static { Loader.load(); }", text)
        self.assertIn("public Point() { super((Pointer)null); allocate(); }", text)
        self.assertIn("public native int x(); public native Point x(int setter);", text)
        self.assertIn("public native int y(); public native Point y(int setter);", text)

    def test_class_members_default_to_private(self):
        result, _ = _parse("class Widget {\n    int secret;\npublic:\n    int open();\n};\n")
        self.assertNotIn("secret", result.text)
        self.assertIn("public native int open();", result.text)

    def test_registers_peer_class(self):
        _, info_map = _parse("struct Point { int x; };\n")
        self.assertEqual(info_map.get_first("Point").pointer_types, ("Point",))

    def test_inheritance(self):
        result, _ = _parse(
            "class A {\npublic:\n    A();\n};\n"
            "class B : public A {\npublic:\n    int f();\n};\n"
        )
        self.assertIn("public static class B extends A {", result.text)
        self.assertIn("public A() { super((Pointer)null); allocate(); }", result.text)

    def test_forward_declaration_is_opaque(self):
        result, _ = _parse("struct Handle;\n")
        self.assertIn("@Opaque public static class Handle extends Pointer {", result.text)
        self.assertTrue(result.declarations[0].incomplete)

    def test_complete_definition_replaces_forward_declaration(self):
        result, _ = _parse("struct Node;\nstruct Node { int value; };\n")
        self.assertEqual(result.declarations.signatures().count("Node"), 1)
        self.assertNotIn("@Opaque", result.text)

    def test_typedef_struct_takes_typedef_name(self):
        result, _ = _parse("typedef struct {\n    int a;\n} Record;\n")
        self.assertIn("public static class Record extends Pointer {", result.text)

    def test_namespaced_class(self):
        result, info_map = _parse("namespace geo {\nstruct Vec { float x; };\n}\n")
        self.assertIn('@Namespace("geo") public static class Vec extends Pointer {', result.text)
        self.assertIsNotNone(info_map.get_first("geo::Vec", partial=False))

    def test_explicit_constructors(self):
        result, _ = _parse("class Buffer {\npublic:\n    Buffer(int size);\n};\n")
        text = result.text
        self.assertIn("public Buffer(int size) { super((Pointer)null); allocate(size); }", text)
        self.assertIn("private native void allocate(int size);", text)
        self.assertNotIn("allocate();", text)

    def test_destructors_are_not_emitted(self):
        result, _ = _parse("class Res {\npublic:\n    ~Res();\n    void use();\n};\n")
        self.assertNotIn("~", result.text)
        self.assertIn("public native void use();", result.text)

    def test_static_members(self):
        result, _ = _parse("struct Registry {\n    static int count();\n};\n")
        self.assertIn("public static native int count();", result.text)

    def test_skip_rule_drops_class(self):
        result, _ = _parse("struct Internal { int x; };\n", Info.of("Internal", skip=True))
        self.assertNotIn("Internal", result.text)

    def test_beanify_variables(self):
        result, _ = _parse("struct P {\n    int x;\n};\n", beanify=True)
        self.assertIn("getX()", result.text)
        self.assertIn("setX(int setter)", result.text)
        self.assertIn('@Name("x")', result.text)

    def test_beanify_functions(self):
        result, _ = _parse("struct C {\n    int value();\n    void value(int v);\n};\n", beanify=True)
        self.assertIn("getValue()", result.text)
        self.assertIn("setValue(int v)", result.text)

    def test_template_instantiation(self):
        result, _ = _parse(
            "template<typename T> struct Box {\n    T get();\n};\n",
            Info.of("Box<int>", pointer_types=("IntBox",)),
        )
        self.assertIn("public static class IntBox extends Pointer {", result.text)
        self.assertIn("public native int get();", result.text)

    def test_unbound_template_without_rules_is_withheld(self):
        result, _ = _parse("template<typename T> struct Box {\n    T get();\n};\n")
        self.assertNotIn("class Box", result.text)


class TestGuessAccessor(unittest.TestCase):
    """Test the accessor heuristics."""

    def _dcl(self, java_type, params=0, indirections=0, cpp_type=None):
        declarators = [Declarator(cpp_name=f"a{i}", type=Type.named("int")) for i in range(params)]
        return Declarator(
            cpp_name="m",
            java_name="m",
            type=Type(cpp_name=cpp_type or java_type, java_name=java_type),
            indirections=indirections,
            parameters=Parameters(declarators=declarators),
        )

    def test_getter(self):
        self.assertEqual(guess_accessor(self._dcl("int")), "getter")

    def test_setter(self):
        self.assertEqual(guess_accessor(self._dcl("void", params=1)), "setter")

    def test_neither(self):
        self.assertIsNone(guess_accessor(self._dcl("void", params=2)))

    def test_allocator_wins_over_getter(self):
        dcl = self._dcl("Widget", indirections=1)
        dcl.java_name = "createWidget"
        with self.assertLogs("parsing.parser", level="WARNING"):
            self.assertEqual(guess_accessor(dcl, Type.named("Widget")), "allocator")


if __name__ == "__main__":
    unittest.main()
