"""
attribute_propagation.py
Propagation attributes: `#[<crate>::each[...]]` (and the deprecated `#[strikethrough[...]]`) on a
declaration attach their payload as an attribute to that declaration and to every declaration
lifted out of it.
"""
from typing import List

from declaration_model import Attribute, AttributeValue
from diagnostics import Diagnostics, stream_span
from errors import ErrorKind
from name_hints import is_marker_attr
from token_model import Delimiter, Group, is_ident


def is_deprecated_marker(attr: Attribute, deprecated_marker: str) -> bool:
    return len(attr.path) == 1 and is_ident(attr.path[0], deprecated_marker)


def propagation_template(attr: Attribute) -> Attribute:
    """`#[each[derive(Debug)]]` -> `#[derive(Debug)]`: the payload becomes the whole attribute body."""
    payload = attr.value_group
    brackets = Group(Delimiter.BRACKET, [], payload.span, payload.close_span)
    return Attribute(attr.tk_hash, attr.tk_bang, brackets, list(payload.stream), AttributeValue.EMPTY)


def strike_through_attributes(dec_attrs: List[Attribute], carried: List[Attribute], diagnostics: Diagnostics,
                              marker_crate: str, deprecated_marker: str) -> List[Attribute]:
    """
    Removes the propagation markers from dec_attrs and returns the carried set extended by their
    templates. dec_attrs is then prefixed with the whole returned set, ancestors first.
    The carried list passed in is left untouched.
    """
    carried = list(carried)
    remaining = []
    for attr in dec_attrs:
        each = is_marker_attr(attr, marker_crate, "each")
        deprecated = is_deprecated_marker(attr, deprecated_marker)
        if deprecated:
            diagnostics.report_deprecated_marker(attr.path[0].span, deprecated_marker, f"{marker_crate}::each")
        if not (each or deprecated):
            remaining.append(attr)
        elif attr.value is AttributeValue.GROUP:
            carried.append(propagation_template(attr))
        else:
            span = stream_span(attr.get_value_tokens()) or stream_span(attr.path)
            diagnostics.report_error(span, ErrorKind.MALFORMED_PROPAGATION_ATTRIBUTE,
                                     f"#[{marker_crate}::each …]: … must be a [group]")
    dec_attrs[:] = carried + remaining
    return carried
