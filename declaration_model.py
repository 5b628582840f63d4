"""
declaration_model.py
Structured form of a Rust-syntax declaration (struct, enum, union or type alias), as produced by
declaration_parser. Field types stay raw token streams; every node can serialize itself back into
tokens with to_tokens().
"""
from enum import Enum
from typing import List, Optional, Tuple

from token_model import Delimiter, Group, Ident, Punct, Span, TokenTree, is_ident


class DeclKind(Enum):
    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"
    TYPE_ALIAS = "type"
    OTHER = "other"


class AttributeValue(Enum):
    EMPTY = "empty"    # #[path]
    GROUP = "group"    # #[path(...)] / #[path[...]] / #[path{...}]
    EQUALS = "equals"  # #[path = tokens]


class Attribute:
    def __init__(self, tk_hash: Punct, tk_bang: Optional[Punct], tk_brackets: Group,
                 path: List[TokenTree], value: AttributeValue = AttributeValue.EMPTY,
                 value_group: Optional[Group] = None, tk_equals: Optional[Punct] = None,
                 value_tokens: Optional[List[TokenTree]] = None):
        self.tk_hash = tk_hash
        self.tk_bang = tk_bang
        self.tk_brackets = tk_brackets
        self.path = path
        self.value = value
        self.value_group = value_group
        self.tk_equals = tk_equals
        self.value_tokens = value_tokens or []

    def get_value_tokens(self) -> List[TokenTree]:
        if self.value is AttributeValue.GROUP:
            return self.value_group.stream
        return self.value_tokens

    def to_tokens(self) -> List[TokenTree]:
        inner = list(self.path)
        if self.value is AttributeValue.GROUP:
            inner.append(self.value_group)
        elif self.value is AttributeValue.EQUALS:
            inner.append(self.tk_equals)
            inner.extend(self.value_tokens)
        tokens: List[TokenTree] = [self.tk_hash]
        if self.tk_bang is not None:
            tokens.append(self.tk_bang)
        tokens.append(Group(Delimiter.BRACKET, inner, self.tk_brackets.span, self.tk_brackets.close_span))
        return tokens


class VisMarker:
    """`pub`, `pub(crate)`, `crate`, ..."""
    def __init__(self, tk_token1: TokenTree, tk_token2: Optional[Group] = None):
        self.tk_token1 = tk_token1
        self.tk_token2 = tk_token2

    @classmethod
    def make_pub(cls) -> 'VisMarker':
        return cls(Ident('pub', Span.call_site()))

    @property
    def is_plain_pub(self) -> bool:
        return is_ident(self.tk_token1, 'pub') and self.tk_token2 is None

    def to_tokens(self) -> List[TokenTree]:
        if self.tk_token2 is None:
            return [self.tk_token1]
        return [self.tk_token1, self.tk_token2]


def is_plain_pub(vis_marker: Optional[VisMarker]) -> bool:
    return vis_marker is not None and vis_marker.is_plain_pub


class GenericParam:
    def __init__(self, name: Ident, tk_prefix: Optional[TokenTree] = None, bound: Optional[List[TokenTree]] = None):
        self.tk_prefix = tk_prefix  # `'` for lifetimes, `const` for const generics
        self.name = name
        self.bound = bound or []    # everything after the name: `: Bound`, `= Default`

    def to_tokens(self) -> List[TokenTree]:
        tokens: List[TokenTree] = [] if self.tk_prefix is None else [self.tk_prefix]
        tokens.append(self.name)
        tokens.extend(self.bound)
        return tokens


class GenericParamList:
    def __init__(self, tk_l_bracket: Punct, params: List[Tuple[GenericParam, Optional[Punct]]], tk_r_bracket: Punct):
        self.tk_l_bracket = tk_l_bracket
        self.params = params
        self.tk_r_bracket = tk_r_bracket

    def to_tokens(self) -> List[TokenTree]:
        tokens: List[TokenTree] = [self.tk_l_bracket]
        for param, comma in self.params:
            tokens.extend(param.to_tokens())
            if comma is not None:
                tokens.append(comma)
        tokens.append(self.tk_r_bracket)
        return tokens


class TyExpr:
    def __init__(self, tokens: List[TokenTree]):
        self.tokens = tokens

    def to_tokens(self) -> List[TokenTree]:
        return list(self.tokens)


def _attrs_and_vis(attributes: List[Attribute], vis_marker: Optional[VisMarker]) -> List[TokenTree]:
    tokens: List[TokenTree] = []
    for attr in attributes:
        tokens.extend(attr.to_tokens())
    if vis_marker is not None:
        tokens.extend(vis_marker.to_tokens())
    return tokens


class NamedField:
    def __init__(self, attributes: List[Attribute], vis_marker: Optional[VisMarker], name: Ident, tk_colon: Punct, ty: TyExpr):
        self.attributes = attributes
        self.vis_marker = vis_marker
        self.name = name
        self.tk_colon = tk_colon
        self.ty = ty

    def to_tokens(self) -> List[TokenTree]:
        return _attrs_and_vis(self.attributes, self.vis_marker) + [self.name, self.tk_colon] + self.ty.to_tokens()


class TupleField:
    def __init__(self, attributes: List[Attribute], vis_marker: Optional[VisMarker], ty: TyExpr):
        self.attributes = attributes
        self.vis_marker = vis_marker
        self.ty = ty

    def to_tokens(self) -> List[TokenTree]:
        return _attrs_and_vis(self.attributes, self.vis_marker) + self.ty.to_tokens()


class UnitFields:
    def to_tokens(self) -> List[TokenTree]:
        return []


class _DelimitedFields:
    delimiter = Delimiter.NONE

    def __init__(self, fields: list, span: Optional[Span] = None, close_span: Optional[Span] = None):
        self.fields = fields  # [(field, comma or None)]
        self.span = span
        self.close_span = close_span

    def to_tokens(self) -> List[TokenTree]:
        inner: List[TokenTree] = []
        for field, comma in self.fields:
            inner.extend(field.to_tokens())
            if comma is not None:
                inner.append(comma)
        return [Group(self.delimiter, inner, self.span, self.close_span)]


class NamedFields(_DelimitedFields):
    delimiter = Delimiter.BRACE


class TupleFields(_DelimitedFields):
    delimiter = Delimiter.PAREN


class EnumVariant:
    def __init__(self, attributes: List[Attribute], vis_marker: Optional[VisMarker], name: Ident, contents,
                 tk_equals: Optional[Punct] = None, value: Optional[List[TokenTree]] = None):
        self.attributes = attributes
        self.vis_marker = vis_marker
        self.name = name
        self.contents = contents
        self.tk_equals = tk_equals
        self.value = value

    def to_tokens(self) -> List[TokenTree]:
        tokens = _attrs_and_vis(self.attributes, self.vis_marker) + [self.name] + self.contents.to_tokens()
        if self.tk_equals is not None:
            tokens.append(self.tk_equals)
            tokens.extend(self.value)
        return tokens


class Declaration:
    kind = DeclKind.OTHER

    def __init__(self, attributes: List[Attribute], vis_marker: Optional[VisMarker], tk_keyword: Ident, name: Ident,
                 generic_params: Optional[GenericParamList] = None, where_clause: Optional[List[TokenTree]] = None):
        self.attributes = attributes
        self.vis_marker = vis_marker
        self.tk_keyword = tk_keyword
        self.name = name
        self.generic_params = generic_params
        self.where_clause = where_clause

    def _head_tokens(self) -> List[TokenTree]:
        tokens = _attrs_and_vis(self.attributes, self.vis_marker) + [self.tk_keyword, self.name]
        if self.generic_params is not None:
            tokens.extend(self.generic_params.to_tokens())
        return tokens

    def _where_tokens(self) -> List[TokenTree]:
        return list(self.where_clause) if self.where_clause else []

    def to_tokens(self) -> List[TokenTree]:
        raise NotImplementedError


class StructDecl(Declaration):
    kind = DeclKind.STRUCT

    def __init__(self, attributes, vis_marker, tk_keyword, name, generic_params, where_clause, fields,
                 tk_semicolon: Optional[Punct] = None):
        super().__init__(attributes, vis_marker, tk_keyword, name, generic_params, where_clause)
        self.fields = fields
        self.tk_semicolon = tk_semicolon

    def to_tokens(self) -> List[TokenTree]:
        tokens = self._head_tokens()
        if isinstance(self.fields, TupleFields):
            tokens += self.fields.to_tokens() + self._where_tokens()
        else:
            tokens += self._where_tokens() + self.fields.to_tokens()
        if self.tk_semicolon is not None:
            tokens.append(self.tk_semicolon)
        return tokens


class EnumDecl(Declaration):
    kind = DeclKind.ENUM

    def __init__(self, attributes, vis_marker, tk_keyword, name, generic_params, where_clause,
                 variants: List[Tuple[EnumVariant, Optional[Punct]]], span: Optional[Span] = None,
                 close_span: Optional[Span] = None):
        super().__init__(attributes, vis_marker, tk_keyword, name, generic_params, where_clause)
        self.variants = variants
        self.span = span
        self.close_span = close_span

    def to_tokens(self) -> List[TokenTree]:
        inner: List[TokenTree] = []
        for variant, comma in self.variants:
            inner.extend(variant.to_tokens())
            if comma is not None:
                inner.append(comma)
        return self._head_tokens() + self._where_tokens() + [Group(Delimiter.BRACE, inner, self.span, self.close_span)]


class UnionDecl(Declaration):
    kind = DeclKind.UNION

    def __init__(self, attributes, vis_marker, tk_keyword, name, generic_params, where_clause, fields: NamedFields):
        super().__init__(attributes, vis_marker, tk_keyword, name, generic_params, where_clause)
        self.fields = fields

    def to_tokens(self) -> List[TokenTree]:
        return self._head_tokens() + self._where_tokens() + self.fields.to_tokens()


class TypeAliasDecl(Declaration):
    kind = DeclKind.TYPE_ALIAS

    def __init__(self, attributes, vis_marker, tk_keyword, name, generic_params, where_clause,
                 tk_equals: Punct, initializer_ty: TyExpr, tk_semicolon: Punct):
        super().__init__(attributes, vis_marker, tk_keyword, name, generic_params, where_clause)
        self.tk_equals = tk_equals
        self.initializer_ty = initializer_ty
        self.tk_semicolon = tk_semicolon

    def to_tokens(self) -> List[TokenTree]:
        return self._head_tokens() + self._where_tokens() + [self.tk_equals] + \
            self.initializer_ty.to_tokens() + [self.tk_semicolon]


class OtherDecl(Declaration):
    """fn / mod / trait / impl / ...: recognized only so it can be reported as unsupported."""
    kind = DeclKind.OTHER

    def __init__(self, attributes, vis_marker, tk_keyword, tokens: List[TokenTree]):
        super().__init__(attributes, vis_marker, tk_keyword, tk_keyword)
        self.tokens = tokens

    def to_tokens(self) -> List[TokenTree]:
        return list(self.tokens)
