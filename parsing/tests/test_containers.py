"""
Unit tests for containers.py
"""

import unittest

from parsing.driver import parse_text
from parsing.infomap import Info, InfoMap


def _wrappers(*infos):
    info_map = InfoMap.with_defaults()
    for info in infos:
        info_map.put(info)
    return parse_text("int marker();\n", info_map)


class TestContainers(unittest.TestCase):
    """Test wrapper classes for container instantiations."""

    def test_vector(self):
        result = _wrappers(Info.of("std::vector<int>", pointer_types=("IntVector",), define=True))
        text = result.text
        self.assertIn('@Name("std::vector<int>") public static class IntVector extends Pointer {', text)
        self.assertIn("public IntVector(int ... array) { this(array.length); put(array); }", text)
        self.assertIn("public native long size();", text)
        self.assertIn('public native void resize(@Cast("size_t") long n);', text)
        self.assertIn('@Index public native int get(@Cast("size_t") long i);', text)
        self.assertIn('public native IntVector put(@Cast("size_t") long i, int value);', text)
        self.assertIn("public IntVector put(int ... array) {", text)
        self.assertIn("std::vector<int>", result.declarations.signatures())

    def test_wrappers_precede_header_declarations(self):
        result = _wrappers(Info.of("std::vector<int>", pointer_types=("IntVector",), define=True))
        self.assertLess(result.text.index("IntVector"), result.text.index("marker"))

    def test_map_is_not_resizable(self):
        result = _wrappers(Info.of("std::map<int,int>", pointer_types=("IntIntMap",), define=True))
        text = result.text
        self.assertIn("public static class IntIntMap extends Pointer {", text)
        self.assertIn("@Index public native int get(int i);", text)
        self.assertIn("public native IntIntMap put(int i, int value);", text)
        self.assertNotIn("resize", text)

    def test_pair(self):
        result = _wrappers(Info.of("std::pair<int,double>", pointer_types=("IntDoublePair",), define=True))
        text = result.text
        self.assertIn(
            "public IntDoublePair(int firstValue, double secondValue) { this(); put(firstValue, secondValue); }",
            text,
        )
        self.assertIn("@MemberGetter public native int first(); public native IntDoublePair first(int first);", text)

    def test_set(self):
        result = _wrappers(Info.of("std::set<int>", pointer_types=("IntSet",), define=True))
        self.assertIn("public native void insert(int value);", result.text)
        self.assertIn("public boolean empty() { return size() == 0; }", result.text)

    def test_vector_iterator(self):
        result = _wrappers(Info.of("std::vector<int>", pointer_types=("IntVector",), define=True))
        text = result.text
        self.assertIn("public native @ByVal Iterator begin();", text)
        self.assertIn("public native @ByVal Iterator end();", text)
        self.assertIn('@NoOffset @Name("iterator") public static class Iterator extends Pointer {', text)
        self.assertIn('public native @Name("operator ++") @ByRef Iterator increment();', text)
        self.assertIn('public native @Name("operator ==") boolean equals(@ByRef Iterator it);', text)
        self.assertIn('public native @Name("operator *") @Const int get();', text)
        self.assertLess(text.index("Iterator begin()"), text.index("public IntVector put(int ... array) {"))

    def test_map_iterator_exposes_key_and_value(self):
        result = _wrappers(Info.of("std::map<int,double>", pointer_types=("IntDoubleMap",), define=True))
        text = result.text
        self.assertIn("public native @ByVal Iterator begin();", text)
        self.assertIn('public native @Name("operator *().first") @MemberGetter @Const int first();', text)
        self.assertIn('public native @Name("operator *().second") @MemberGetter @Const double second();', text)
        self.assertNotIn('@Name("operator *") ', text)

    def test_set_iterator(self):
        result = _wrappers(Info.of("std::set<int>", pointer_types=("IntSet",), define=True))
        self.assertIn("public native @ByVal Iterator end();", result.text)
        self.assertIn('public native @Name("operator *") @Const int get();', result.text)

    def test_pair_has_no_iterator(self):
        result = _wrappers(Info.of("std::pair<int,double>", pointer_types=("IntDoublePair",), define=True))
        self.assertNotIn("Iterator", result.text)

    def test_tuple(self):
        result = _wrappers(Info.of("std::tuple<int,float>", pointer_types=("IntFloatTuple",), define=True))
        text = result.text
        self.assertIn('@Name("std::tuple<int,float>") public static class IntFloatTuple extends Pointer {', text)
        self.assertIn("public IntFloatTuple(int value0, float value1) { allocate(value0, value1); }", text)
        self.assertIn("private native void allocate(int value0, float value1);", text)
        self.assertIn("public int get0() { return get0(this); }", text)
        self.assertIn(
            '@Namespace @Name("std::get<1>") public static native float get1(@ByRef IntFloatTuple container);',
            text,
        )

    def test_function(self):
        result = _wrappers(Info.of("std::function<int(int,float)>", pointer_types=("IntCallback",), define=True))
        text = result.text
        self.assertIn("public static class IntCallback extends Pointer {", text)
        self.assertIn('public native @Cast("bool") @Name("operator bool") boolean callable();', text)
        self.assertIn('public native @Name("operator ()") int call(int arg0, float arg1);', text)

    def test_rules_without_define_add_nothing(self):
        result = _wrappers(Info.of("std::vector<float>", pointer_types=("FloatVector",)))
        self.assertNotIn("FloatVector", result.text)

    def test_untemplated_rule_is_ignored(self):
        result = _wrappers(Info.of("std::vector", define=True))
        self.assertNotIn("extends Pointer", result.text)


if __name__ == "__main__":
    unittest.main()
