"""Tests for the signature and naming contract."""

from core.signature_contract import (
    is_java_identifier,
    make_signature_hash,
    qualify,
    sanitize_java_name,
    signature_part,
    unqualified,
)


def test_signature_part_uses_last_word() -> None:
    assert signature_part("int") == "_int"
    assert signature_part("@Const IntPointer") == "_IntPointer"
    assert signature_part("int[]") == "_int__"


def test_sanitize_java_name() -> None:
    assert sanitize_java_name("operator+=") == "operator__"
    assert sanitize_java_name("operator+=", "") == "operator"
    assert is_java_identifier("get_x1")
    assert not is_java_identifier("1x")
    assert not is_java_identifier("")


def test_qualify_and_unqualified() -> None:
    assert qualify("ns", "Foo") == "ns::Foo"
    assert qualify("ns", "ns::Foo") == "ns::Foo"
    assert qualify(None, "Foo") == "Foo"
    assert unqualified("a::b::Foo") == "Foo"
    assert unqualified("Foo") == "Foo"


def test_signature_hash_is_stable_and_order_sensitive() -> None:
    first = make_signature_hash(["foo_int", "bar"])
    assert first == make_signature_hash(["foo_int", "bar"])
    assert first != make_signature_hash(["bar", "foo_int"])
    assert first.startswith("sig_")
    assert len(first) == len("sig_") + 12
    assert make_signature_hash([]).startswith("sig_")
