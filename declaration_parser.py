"""
declaration_parser.py
Recursive-descent parser turning a token stream into a Declaration (declaration_model).
Only the shape of a declaration is parsed; field types are kept as raw token streams.
"""
from typing import List, Optional, Tuple

from errors import DeclarationParseError
from declaration_model import (
    Attribute, AttributeValue, Declaration, EnumDecl, EnumVariant, GenericParam, GenericParamList,
    NamedField, NamedFields, OtherDecl, StructDecl, TupleField, TupleFields, TyExpr, TypeAliasDecl,
    UnionDecl, UnitFields, VisMarker,
)
from token_model import Delimiter, Group, Ident, Punct, Spacing, TokenTree, is_group, is_ident, is_punct

DECLARATION_KEYWORDS = ("struct", "enum", "union", "type")
UNSUPPORTED_KEYWORDS = ("fn", "mod", "trait", "impl", "const", "static", "use", "extern", "unsafe", "async", "macro_rules")
RESTRICTED_VISIBILITY = ("crate", "self", "super", "in")


def _is_closing_angle(tokens: List[TokenTree], i: int) -> bool:
    if not is_punct(tokens[i], '>'):
        return False
    prev = tokens[i - 1] if i > 0 else None
    return not (is_punct(prev, '-') and prev.spacing is Spacing.JOINT)


def split_top_level(tokens: List[TokenTree], track_angles: bool = True) -> List[Tuple[List[TokenTree], Optional[Punct]]]:
    """
    Splits a stream at commas that are not nested in a group (or, with track_angles, in `<...>`).
    Returns (segment, comma) pairs; the comma is None for the last segment.
    """
    segments = []
    current: List[TokenTree] = []
    depth = 0
    for i, tt in enumerate(tokens):
        if track_angles and is_punct(tt, '<'):
            depth += 1
        elif track_angles and _is_closing_angle(tokens, i) and depth > 0:
            depth -= 1
        elif depth == 0 and is_punct(tt, ','):
            segments.append((current, tt))
            current = []
            continue
        current.append(tt)
    if current:
        segments.append((current, None))
    return segments


class DeclarationParser:
    """
    Cursor over one token stream. Each parse_* method consumes what it recognizes and raises
    DeclarationParseError at the first token it cannot use.
    """

    def __init__(self, tokens: List[TokenTree]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Optional[TokenTree]:
        if self.pos + offset < len(self.tokens):
            return self.tokens[self.pos + offset]
        return None

    def next(self) -> Optional[TokenTree]:
        tt = self.peek()
        if tt is not None:
            self.pos += 1
        return tt

    def has_tokens(self) -> bool:
        return self.pos < len(self.tokens)

    def error(self, message: str) -> DeclarationParseError:
        tt = self.peek()
        if tt is None and self.tokens:
            tt = self.tokens[-1]
        found = f", found `{tt}`" if self.peek() is not None else ", found end of input"
        return DeclarationParseError(message + found, tt.span if tt is not None else None)

    def expect_ident(self, what: str = "identifier") -> Ident:
        if not isinstance(self.peek(), Ident):
            raise self.error(f"Expected {what}")
        return self.next()

    def expect_punct(self, char: str) -> Punct:
        if not is_punct(self.peek(), char):
            raise self.error(f"Expected `{char}`")
        return self.next()

    def take_until(self, stop) -> List[TokenTree]:
        taken = []
        while self.has_tokens() and not stop(self.peek()):
            taken.append(self.next())
        return taken

    def expect_end(self) -> None:
        if self.has_tokens():
            raise self.error("Unexpected trailing tokens")

    # --- attributes & visibility ---

    def parse_attributes(self) -> List[Attribute]:
        attributes = []
        while is_punct(self.peek(), '#'):
            tk_hash = self.next()
            tk_bang = self.next() if is_punct(self.peek(), '!') else None
            if not is_group(self.peek(), Delimiter.BRACKET):
                raise self.error("Expected `[` after `#`")
            attributes.append(self._parse_attribute_body(tk_hash, tk_bang, self.next()))
        return attributes

    def _parse_attribute_body(self, tk_hash: Punct, tk_bang: Optional[Punct], brackets: Group) -> Attribute:
        inner = brackets.stream
        i = 0
        while i < len(inner) and not isinstance(inner[i], Group) and not is_punct(inner[i], '='):
            i += 1
        path, rest = inner[:i], inner[i:]
        if not path:
            raise DeclarationParseError("Expected attribute path", brackets.span)
        if not rest:
            return Attribute(tk_hash, tk_bang, brackets, path)
        if is_punct(rest[0], '='):
            return Attribute(tk_hash, tk_bang, brackets, path, AttributeValue.EQUALS,
                             tk_equals=rest[0], value_tokens=rest[1:])
        if len(rest) > 1:
            raise DeclarationParseError(f"Unexpected token `{rest[1]}` in attribute", rest[1].span)
        return Attribute(tk_hash, tk_bang, brackets, path, AttributeValue.GROUP, value_group=rest[0])

    def parse_vis_marker(self) -> Optional[VisMarker]:
        tt = self.peek()
        if is_ident(tt, 'pub'):
            self.next()
            restriction = self.peek()
            if is_group(restriction, Delimiter.PAREN) and restriction.stream \
                    and isinstance(restriction.stream[0], Ident) \
                    and restriction.stream[0].text in RESTRICTED_VISIBILITY:
                return VisMarker(tt, self.next())
            return VisMarker(tt)
        if is_ident(tt, 'crate') and not is_punct(self.peek(1), ':'):
            return VisMarker(self.next())
        return None

    # --- generics & where clauses ---

    def parse_generic_params(self) -> Optional[GenericParamList]:
        if not is_punct(self.peek(), '<'):
            return None
        tk_l_bracket = self.next()
        params = []
        while True:
            if is_punct(self.peek(), '>'):
                return GenericParamList(tk_l_bracket, params, self.next())
            prefix = None
            if is_punct(self.peek(), "'") or is_ident(self.peek(), 'const'):
                prefix = self.next()
            name = self.expect_ident("generic parameter name")
            bound = []
            depth = 0
            while True:
                tt = self.peek()
                if tt is None:
                    raise self.error("Unclosed generic parameter list")
                if depth == 0 and (is_punct(tt, ',') or _is_closing_angle(self.tokens, self.pos)):
                    break
                if is_punct(tt, '<'):
                    depth += 1
                elif _is_closing_angle(self.tokens, self.pos):
                    depth -= 1
                bound.append(self.next())
            comma = self.next() if is_punct(self.peek(), ',') else None
            params.append((GenericParam(name, prefix, bound), comma))

    def parse_where_clause(self, stop) -> Optional[List[TokenTree]]:
        if not is_ident(self.peek(), 'where'):
            return None
        return [self.next()] + self.take_until(stop)

    # --- fields ---

    def parse_named_fields(self, group: Group) -> NamedFields:
        fields = []
        for segment, comma in split_top_level(group.stream):
            if not segment:
                raise DeclarationParseError("Unexpected `,`", comma.span)
            sub = DeclarationParser(segment)
            attributes = sub.parse_attributes()
            vis_marker = sub.parse_vis_marker()
            name = sub.expect_ident("field name")
            tk_colon = sub.expect_punct(':')
            if not sub.has_tokens():
                raise sub.error("Expected field type")
            fields.append((NamedField(attributes, vis_marker, name, tk_colon, TyExpr(segment[sub.pos:])), comma))
        return NamedFields(fields, group.span, group.close_span)

    def parse_tuple_fields(self, group: Group) -> TupleFields:
        fields = []
        for segment, comma in split_top_level(group.stream):
            if not segment:
                raise DeclarationParseError("Unexpected `,`", comma.span)
            sub = DeclarationParser(segment)
            attributes = sub.parse_attributes()
            vis_marker = sub.parse_vis_marker()
            if not sub.has_tokens():
                raise sub.error("Expected field type")
            fields.append((TupleField(attributes, vis_marker, TyExpr(segment[sub.pos:])), comma))
        return TupleFields(fields, group.span, group.close_span)

    def parse_fields(self):
        tt = self.peek()
        if is_group(tt, Delimiter.PAREN):
            return self.parse_tuple_fields(self.next())
        if is_group(tt, Delimiter.BRACE):
            return self.parse_named_fields(self.next())
        return UnitFields()

    def parse_variants(self, group: Group) -> List[Tuple[EnumVariant, Optional[Punct]]]:
        variants = []
        for segment, comma in split_top_level(group.stream, track_angles=False):
            if not segment:
                raise DeclarationParseError("Unexpected `,`", comma.span)
            sub = DeclarationParser(segment)
            attributes = sub.parse_attributes()
            vis_marker = sub.parse_vis_marker()
            name = sub.expect_ident("variant name")
            contents = sub.parse_fields()
            tk_equals, value = None, None
            if is_punct(sub.peek(), '='):
                tk_equals = sub.next()
                value = sub.take_until(lambda tt: False)
                if not value:
                    raise sub.error("Expected discriminant")
            sub.expect_end()
            variants.append((EnumVariant(attributes, vis_marker, name, contents, tk_equals, value), comma))
        return variants

    # --- declarations ---

    def parse_declaration(self) -> Declaration:
        attributes = self.parse_attributes()
        vis_marker = self.parse_vis_marker()
        keyword = self.peek()
        if isinstance(keyword, Ident) and keyword.text in UNSUPPORTED_KEYWORDS:
            return OtherDecl(attributes, vis_marker, keyword, self.tokens)
        if not isinstance(keyword, Ident) or keyword.text not in DECLARATION_KEYWORDS:
            raise self.error("Expected `struct`, `enum`, `union` or `type`")
        self.next()
        name = self.expect_ident("declaration name")
        generics = self.parse_generic_params()
        if keyword.text == "struct":
            decl = self._parse_struct(attributes, vis_marker, keyword, name, generics)
        elif keyword.text == "enum":
            decl = self._parse_enum(attributes, vis_marker, keyword, name, generics)
        elif keyword.text == "union":
            decl = self._parse_union(attributes, vis_marker, keyword, name, generics)
        else:
            decl = self._parse_type_alias(attributes, vis_marker, keyword, name, generics)
        self.expect_end()
        return decl

    def _parse_struct(self, attributes, vis_marker, keyword, name, generics) -> StructDecl:
        if is_group(self.peek(), Delimiter.PAREN):
            fields = self.parse_tuple_fields(self.next())
            where_clause = self.parse_where_clause(lambda tt: is_punct(tt, ';'))
        else:
            where_clause = self.parse_where_clause(lambda tt: is_group(tt, Delimiter.BRACE) or is_punct(tt, ';'))
            if is_group(self.peek(), Delimiter.BRACE):
                fields = self.parse_named_fields(self.next())
            elif is_punct(self.peek(), ';') or not self.has_tokens():
                fields = UnitFields()
            else:
                raise self.error("Expected struct body")
        tk_semicolon = self.next() if is_punct(self.peek(), ';') else None
        return StructDecl(attributes, vis_marker, keyword, name, generics, where_clause, fields, tk_semicolon)

    def _parse_enum(self, attributes, vis_marker, keyword, name, generics) -> EnumDecl:
        where_clause = self.parse_where_clause(lambda tt: is_group(tt, Delimiter.BRACE))
        if not is_group(self.peek(), Delimiter.BRACE):
            raise self.error("Expected enum body")
        body = self.next()
        return EnumDecl(attributes, vis_marker, keyword, name, generics, where_clause,
                        self.parse_variants(body), body.span, body.close_span)

    def _parse_union(self, attributes, vis_marker, keyword, name, generics) -> UnionDecl:
        where_clause = self.parse_where_clause(lambda tt: is_group(tt, Delimiter.BRACE))
        if not is_group(self.peek(), Delimiter.BRACE):
            raise self.error("Expected union body")
        return UnionDecl(attributes, vis_marker, keyword, name, generics, where_clause,
                         self.parse_named_fields(self.next()))

    def _parse_type_alias(self, attributes, vis_marker, keyword, name, generics) -> TypeAliasDecl:
        where_clause = self.parse_where_clause(lambda tt: is_punct(tt, '='))
        tk_equals = self.expect_punct('=')
        ty = self.take_until(lambda tt: is_punct(tt, ';'))
        if not ty:
            raise self.error("Expected type")
        tk_semicolon = self.expect_punct(';')
        return TypeAliasDecl(attributes, vis_marker, keyword, name, generics, where_clause,
                             tk_equals, TyExpr(ty), tk_semicolon)


def parse_declaration(tokens: List[TokenTree]) -> Declaration:
    """Parses one declaration. Raises DeclarationParseError if the stream is not a declaration."""
    return DeclarationParser(tokens).parse_declaration()
