"""
test_attribute_propagation.py
Unit tests for `#[structflat::each[...]]` and the deprecated `#[strikethrough[...]]`.
"""
from attribute_propagation import is_deprecated_marker, propagation_template, strike_through_attributes
from declaration_parser import parse_declaration
from diagnostics import Diagnostics
from errors import ErrorKind
from rust_lexer import lex
from token_model import render
from tests.test_utils import normalize


def attributes_of(text):
    return parse_declaration(lex(text)).attributes


def render_attributes(attributes):
    return render([tt for attr in attributes for tt in attr.to_tokens()])


def strike(attributes, carried, diagnostics):
    return strike_through_attributes(attributes, carried, diagnostics, "structflat", "strikethrough")


def test_template_is_the_payload():
    attr = attributes_of("#[structflat::each[serde(rename_all = \"camelCase\")]] struct A;")[0]
    assert render(propagation_template(attr).to_tokens()) == normalize("#[serde(rename_all = \"camelCase\")]")


def test_markers_are_replaced_by_templates():
    attributes = attributes_of("#[repr(C)] #[structflat::each[derive(Debug)]] struct A;")
    diagnostics = Diagnostics()
    carried = strike(attributes, [], diagnostics)
    assert render_attributes(carried) == normalize("#[derive(Debug)]")
    assert render_attributes(attributes) == normalize("#[derive(Debug)] #[repr(C)]")
    assert not diagnostics.diagnostics


def test_inherited_attributes_come_first():
    parent = strike(attributes_of("#[structflat::each[derive(Debug)]] struct A;"), [], Diagnostics())
    child_attributes = attributes_of("#[structflat::each[derive(Clone)]] #[repr(u8)] enum B { X }")
    carried = strike(child_attributes, parent, Diagnostics())
    assert render_attributes(carried) == normalize("#[derive(Debug)] #[derive(Clone)]")
    assert render_attributes(child_attributes) == normalize("#[derive(Debug)] #[derive(Clone)] #[repr(u8)]")
    assert len(parent) == 1


def test_no_markers_only_prefixes_inherited():
    parent = strike(attributes_of("#[structflat::each[derive(Debug)]] struct A;"), [], Diagnostics())
    attributes = attributes_of("#[repr(C)] struct B;")
    carried = strike(attributes, parent, Diagnostics())
    assert len(carried) == 1
    assert render_attributes(attributes) == normalize("#[derive(Debug)] #[repr(C)]")


def test_deprecated_marker_warns_and_propagates():
    attributes = attributes_of("#[strikethrough[derive(Debug)]] struct A;")
    assert is_deprecated_marker(attributes[0], "strikethrough")
    diagnostics = Diagnostics()
    carried = strike(attributes, [], diagnostics)
    assert render_attributes(carried) == normalize("#[derive(Debug)]")
    assert [d.kind for d in diagnostics.warnings] == [ErrorKind.DEPRECATED_MARKER]
    assert not diagnostics.errors
    assert len(diagnostics.output) == 1


def test_marker_without_group_is_malformed():
    attributes = attributes_of("#[structflat::each = \"x\"] struct A;")
    diagnostics = Diagnostics()
    carried = strike(attributes, [], diagnostics)
    assert carried == []
    assert attributes == []
    assert [d.kind for d in diagnostics.errors] == [ErrorKind.MALFORMED_PROPAGATION_ATTRIBUTE]
    assert diagnostics.errors[0].span.line == 1


def test_marker_crate_is_configurable():
    attributes = attributes_of("#[structflat::each[derive(Debug)]] struct A;")
    carried = strike_through_attributes(attributes, [], Diagnostics(), "nest", "strikethrough")
    assert carried == []
    assert len(attributes) == 1
