"""
name_hints.py
Naming context for anonymous nested declarations.
A NameHints value records where in the enclosing declaration we are (root name, variant, field)
and synthesizes a name from that path. Instances are never mutated: with_* returns a copy, so
sibling fields and variants always start from the same context.
"""
from typing import List, Optional

from declaration_model import Attribute
from token_model import Ident, Spacing, Span, TokenTree, is_ident, is_punct


def pascal_case(s: str) -> str:
    """
    Capitalizes the first letter and every letter following an underscore, dropping the underscores.
    Other letters are kept as they are, so `foo_bar` -> `FooBar` and `HTTP_proxy` -> `HTTPProxy`.
    """
    ret = []
    uppercase_next = True
    for c in s:
        if c == '_':
            uppercase_next = True
        elif uppercase_next:
            ret.append(c.upper())
            uppercase_next = False
        else:
            ret.append(c)
    return "".join(ret)


def is_marker_attr(attr: Attribute, marker_crate: str, name: str) -> bool:
    """True for `#[<marker_crate>::<name>...]`."""
    path: List[TokenTree] = attr.path
    return (
        len(path) == 4
        and is_ident(path[0], marker_crate)
        and is_punct(path[1], ':') and path[1].spacing is Spacing.JOINT
        and is_punct(path[2], ':')
        and is_ident(path[3], name)
    )


class NameHints:
    def __init__(self, parent_name: str, long: bool = False, variant_name: Optional[str] = None,
                 field_name: Optional[str] = None):
        self.long = long
        self.parent_name = parent_name
        self.variant_name = variant_name
        self.field_name = field_name

    @classmethod
    def from_attributes(cls, parent_name: str, attributes: List[Attribute], marker_crate: str) -> 'NameHints':
        """Strips every `#[<marker_crate>::long_names]` from attributes; any of them enables long names."""
        long = any(is_marker_attr(attr, marker_crate, "long_names") for attr in attributes)
        attributes[:] = [attr for attr in attributes if not is_marker_attr(attr, marker_crate, "long_names")]
        return cls(parent_name, long)

    def with_field_name(self, field_name: str) -> 'NameHints':
        return NameHints(self.parent_name, self.long, self.variant_name, field_name)

    def with_variant_name(self, variant_name: str) -> 'NameHints':
        return NameHints(self.parent_name, self.long, variant_name, self.field_name)

    def get_name_hint(self, num: Optional[int], span: Span) -> Ident:
        """
        Short mode: the most specific of field, variant and root name.
        Long mode: root, variant and field name joined.
        Either way a positional index other than 0 is appended.
        """
        index = str(num) if num else None
        if self.long:
            names = [self.parent_name, self.variant_name, self.field_name, index]
        else:
            names = [self.field_name or self.variant_name or self.parent_name, index]
        return Ident("".join(pascal_case(n) for n in names if n), span)

    def __repr__(self):
        return (f"NameHints(parent={self.parent_name!r}, variant={self.variant_name!r}, "
                f"field={self.field_name!r}, long={self.long})")
