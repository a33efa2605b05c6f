"""
Unit tests for declarations.py

Tests signature de-duplication, spacing, template withholding and the
parameter list record.
"""

import unittest

from parsing.declarations import DeclarationList
from parsing.infomap import Info, InfoMap
from parsing.models import Declaration, Declarator, Parameters, Type
from parsing.templates import TemplateMap


def _function(text, signature, **kwargs):
    return Declaration(
        text=text,
        signature=signature,
        declarator=Declarator(cpp_name="f", type=Type.named("int")),
        function=True,
        **kwargs,
    )


class TestDeclarationList(unittest.TestCase):
    """Test the declaration sink."""

    def test_duplicate_signatures_are_dropped(self):
        decls = DeclarationList()
        self.assertTrue(decls.add(_function("first", "f_int")))
        self.assertTrue(decls.add(_function("second", "f_int")))
        self.assertEqual(len(decls), 1)
        self.assertEqual(decls[0].text, "first")

    def test_non_const_variant_replaces_const_one(self):
        decls = DeclarationList()
        decls.add(_function("const", "f", const_member=True))
        decls.add(_function("plain", "f"))
        self.assertEqual([d.text for d in decls], ["plain"])

    def test_const_variant_does_not_replace_plain_one(self):
        decls = DeclarationList()
        decls.add(_function("plain", "f"))
        decls.add(_function("const", "f", const_member=True))
        self.assertEqual([d.text for d in decls], ["plain"])

    def test_unsigned_declarations_are_all_kept(self):
        decls = DeclarationList()
        decls.add(Declaration(text="// a\n", comment=True))
        decls.add(Declaration(text="// a\n", comment=True))
        self.assertEqual(len(decls), 2)
        self.assertEqual(decls.signatures(), [])

    def test_spacing_applies_to_every_line(self):
        decls = DeclarationList()
        decls.spacing = "\n  "
        decls.add(_function("line1\nline2\n", "f"))
        self.assertEqual(decls[0].text, "\n  line1\n  line2")

    def test_text_is_untouched_without_spacing(self):
        decls = DeclarationList()
        decls.add(_function("line1\n", "f"))
        self.assertEqual(decls.render(), "line1\n")

    def test_empty_text_is_inaccessible(self):
        decls = DeclarationList()
        decls.add(Declaration(text="", signature="hidden"))
        self.assertTrue(decls[0].inaccessible)

    def test_skipped_types_are_withheld(self):
        decls = DeclarationList(InfoMap().put(Info.of("Bad", skip=True)))
        decl = Declaration(
            text="x",
            signature="g",
            declarator=Declarator(cpp_name="g", type=Type.named("Bad")),
        )
        self.assertFalse(decls.add(decl))
        self.assertEqual(len(decls), 0)

    def test_skipped_parameter_types_are_withheld(self):
        decls = DeclarationList(InfoMap().put(Info.of("Bad", skip=True)))
        param = Declarator(cpp_name="b", type=Type.named("Bad"))
        decl = Declaration(
            text="x",
            signature="g_Bad",
            declarator=Declarator(
                cpp_name="g",
                type=Type.named("void"),
                parameters=Parameters(declarators=[param]),
            ),
        )
        self.assertFalse(decls.add(decl))

    def test_nested_definitions_come_first(self):
        decls = DeclarationList()
        inner = Declaration(text="inner", signature="Inner", type=Type.named("Inner"))
        outer = Declaration(
            text="outer",
            signature="outer",
            declarator=Declarator(cpp_name="outer", type=Type.named("Inner"), definition=inner),
            variable=True,
        )
        decls.add(outer)
        self.assertEqual([d.text for d in decls], ["inner", "outer"])

    def test_unbound_template_is_withheld(self):
        instantiation = Info.of("Box<int>", pointer_types=("IntBox",))
        decls = DeclarationList(InfoMap().put(instantiation))
        template_map = TemplateMap()
        template_map["T"] = None
        decls.template_map = template_map
        self.assertFalse(decls.add(Declaration(text="box", type=Type.named("Box"))))
        self.assertEqual(len(decls), 0)
        self.assertEqual(decls.pending, [instantiation])
        self.assertIs(next(decls.info_iterator), instantiation)

    def test_filters(self):
        decls = DeclarationList()
        decls.add(_function("f", "f"))
        decls.add(Declaration(text="v", signature="v", variable=True))
        self.assertEqual(len(decls.functions()), 1)
        self.assertEqual(len(decls.variables()), 1)
        self.assertEqual(decls.remove_last().text, "v")



class TestParameters(unittest.TestCase):
    """Test the parameter list record."""

    def test_declarators_default_to_fresh_lists(self):
        first = Parameters(list="(", names="(")
        second = Parameters(list="(", names="(")
        self.assertEqual(first.declarators, [])
        first.declarators.append(Declarator(cpp_name="a"))
        self.assertEqual(second.declarators, [])
        self.assertEqual(first.list, "(")


if __name__ == "__main__":
    unittest.main()
