import pytest
from declaration_parser import parse_declaration
from name_hints import NameHints, is_marker_attr, pascal_case
from rust_lexer import lex
from token_model import Span


@pytest.mark.parametrize("name, expected", [
    ("foo_bar", "FooBar"),
    ("HTTP_proxy", "HTTPProxy"),
    ("x", "X"),
    ("already_Pascal_Case", "AlreadyPascalCase"),
    ("trailing_", "Trailing"),
])
def test_pascal_case(name, expected):
    assert pascal_case(name) == expected


def test_short_name_prefers_field():
    path = NameHints("outer").with_variant_name("variant").with_field_name("inner_thing")
    assert path.get_name_hint(None, Span.call_site()).text == "InnerThing"


def test_short_name_falls_back_to_variant_then_parent():
    assert NameHints("E").with_variant_name("A").get_name_hint(None, Span.call_site()).text == "A"
    assert NameHints("foo").get_name_hint(None, Span.call_site()).text == "Foo"


def test_index_is_appended_unless_zero():
    path = NameHints("E").with_variant_name("A")
    assert path.get_name_hint(0, Span.call_site()).text == "A"
    assert path.get_name_hint(2, Span.call_site()).text == "A2"


def test_long_names_join_the_path():
    path = NameHints("quux", long=True).with_variant_name("baz").with_field_name("bar")
    assert path.get_name_hint(None, Span.call_site()).text == "QuuxBazBar"
    assert NameHints("quux", long=True).with_variant_name("baz").get_name_hint(1, Span.call_site()).text == "QuuxBaz1"


def test_with_methods_do_not_mutate():
    root = NameHints("root")
    root.with_field_name("a")
    root.with_variant_name("v")
    assert root.field_name is None
    assert root.variant_name is None


def test_name_hint_carries_span():
    span = Span(4, 2)
    assert NameHints("a").get_name_hint(None, span).span == span


def test_from_attributes_strips_long_names_marker():
    decl = parse_declaration(lex("#[structflat::long_names] #[derive(Debug)] struct A;"))
    path = NameHints.from_attributes("A", decl.attributes, "structflat")
    assert path.long
    assert len(decl.attributes) == 1


def test_from_attributes_ignores_other_marker_crates():
    decl = parse_declaration(lex("#[other::long_names] struct A;"))
    path = NameHints.from_attributes("A", decl.attributes, "structflat")
    assert not path.long
    assert len(decl.attributes) == 1


def test_marker_path_must_be_joined():
    decl = parse_declaration(lex("#[structflat: :long_names] #[structflat::long_names] struct A;"))
    assert not is_marker_attr(decl.attributes[0], "structflat", "long_names")
    assert is_marker_attr(decl.attributes[1], "structflat", "long_names")
