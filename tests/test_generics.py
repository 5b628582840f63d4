from declaration_parser import parse_declaration
from generics import reproject_generics
from rust_lexer import lex
from token_model import Delimiter, render
from tests.test_utils import normalize


def reprojected(text):
    decl = parse_declaration(lex(text))
    return reproject_generics(decl.generic_params)


def test_bounds_defaults_and_const_are_dropped():
    projected = reprojected("struct S<'a, T: Clone + Send, const N: usize = 3>;")
    assert len(projected) == 1
    assert projected[0].delimiter is Delimiter.NONE
    assert render(projected[0].stream) == normalize("<'a, T, N>")


def test_bound_with_nested_generics():
    projected = reprojected("struct S<T: Iterator<Item = Vec<u8>>, U>;")
    assert render(projected) == normalize("<T, U>")


def test_original_declaration_is_untouched():
    decl = parse_declaration(lex("struct S<T: Clone>;"))
    reproject_generics(decl.generic_params)
    assert render(decl.generic_params.to_tokens()) == normalize("<T: Clone>")


def test_empty_parameter_list():
    assert render(reprojected("struct S<>;")) == "<>"
