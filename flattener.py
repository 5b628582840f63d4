"""
flattener.py
Lifts declarations written inline in field types out to the top level.

    struct Outer { inner: struct { x: i32 } }

becomes

    struct Inner { x: i32 }
    struct Outer { inner: Inner }

Every lifted declaration is emitted before the declaration that contained it (post-order),
siblings in field/variant order. Anonymous declarations are named from their position
(see name_hints.py); propagation attributes are copied onto everything lifted below them
(see attribute_propagation.py).
"""
import sys
from typing import List, Optional

from attribute_propagation import strike_through_attributes
from declaration_model import (
    Attribute, DeclKind, GenericParamList, NamedFields, TupleFields, TyExpr, UnitFields, VisMarker, is_plain_pub,
)
from declaration_parser import parse_declaration
from diagnostics import Diagnostic, Diagnostics, stream_span
from errors import DeclarationParseError, ErrorKind
from generics import reproject_generics
from name_hints import NameHints
from rust_lexer import lex
from token_model import Delimiter, Group, Ident, Punct, TokenTree, is_group, is_ident, is_punct, render
from token_transform_pipeline import run_token_transform_pipeline
from token_transforms.append_type_alias_terminator_transform import AppendTypeAliasTerminatorTransform
from token_transforms.collapse_transparent_groups_transform import CollapseTransparentGroupsTransform
from token_transforms.hoist_inner_attributes_transform import HoistInnerAttributesTransform
from type_tree import TypeTreeNode, flatten_type_tree, type_tree, un_type_tree

DECLARATION_KEYWORDS = ("struct", "enum", "union", "type", "fn", "mod", "trait")


class FlattenOptions:
    """
    Per-invocation settings.

    Args:
        marker_crate: Namespace of the configuration markers (`#[<marker_crate>::long_names]`,
            `#[<marker_crate>::each[...]]`)
        deprecated_marker: Old name of the propagation marker, still accepted with a warning
        error_prefix: Prefix of every compile_error! message
        make_pub: Make the outermost declaration public
        verbose: Print debug information to stderr
    """
    def __init__(self, marker_crate: str = "structflat", deprecated_marker: str = "strikethrough",
                 error_prefix: str = "structflat", make_pub: bool = False, verbose: bool = False):
        self.marker_crate = marker_crate
        self.deprecated_marker = deprecated_marker
        self.error_prefix = error_prefix
        self.make_pub = make_pub
        self.verbose = verbose


class FlattenResult:
    def __init__(self, tokens: List[TokenTree], diagnostics: List[Diagnostic]):
        self.tokens = tokens
        self.diagnostics = diagnostics

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_warning]

    @property
    def ok(self) -> bool:
        return not self.errors

    def render(self) -> str:
        return render(self.tokens)


def get_decl_ident(node: TypeTreeNode) -> Optional[Ident]:
    if is_ident(node) and node.text in DECLARATION_KEYWORDS:
        return node
    return None


def strip_raw(name: str) -> str:
    return name[2:] if name.startswith("r#") else name


class Flattener:
    """
    One invocation of the flattener. Lifted declarations and error markers are appended to
    self.output as they are produced.
    """

    def __init__(self, options: Optional[FlattenOptions] = None):
        self.options = options or FlattenOptions()
        self.diagnostics = Diagnostics(self.options.error_prefix)
        self.pre_parse_transforms = [HoistInnerAttributesTransform(), AppendTypeAliasTerminatorTransform()]

    @property
    def output(self) -> List[TokenTree]:
        return self.diagnostics.output

    def debug_print(self, message: str) -> None:
        if self.options.verbose:
            print(f"[DEBUG] {message}", file=sys.stderr)

    def flatten(self, tokens: List[TokenTree], strike_attrs: List[Attribute], make_pub: bool) -> Optional[GenericParamList]:
        """
        Flattens one declaration and appends it, after everything lifted out of it, to the output.
        Returns the declaration's generic parameters so the caller can reference it.
        """
        span = stream_span(tokens)
        tokens = run_token_transform_pipeline(tokens, self.pre_parse_transforms)
        try:
            parsed = parse_declaration(tokens)
        except DeclarationParseError as e:
            self.diagnostics.report_error(e.span or span, ErrorKind.PARSE_FAILURE, e.message)
            return None
        if parsed.kind is DeclKind.OTHER:
            self.diagnostics.report_error(span, ErrorKind.UNSUPPORTED_DECLARATION_KIND,
                                          "Unsupported declaration (only struct, enum, union and type are allowed)")
            return None

        self.debug_print(f"Flattening {parsed.kind.value} {parsed.name}")
        strike_attrs = strike_through_attributes(parsed.attributes, strike_attrs, self.diagnostics,
                                                 self.options.marker_crate, self.options.deprecated_marker)
        path = NameHints.from_attributes(strip_raw(parsed.name.text), parsed.attributes, self.options.marker_crate)

        if parsed.kind is DeclKind.STRUCT:
            self.recurse_through_struct_fields(parsed.fields, strike_attrs, False, path, parsed.name.span)
        elif parsed.kind is DeclKind.ENUM:
            in_pub_enum = is_plain_pub(parsed.vis_marker)
            for variant, _ in parsed.variants:
                self.recurse_through_struct_fields(variant.contents, strike_attrs, in_pub_enum,
                                                   path.with_variant_name(strip_raw(variant.name.text)),
                                                   variant.name.span)
        elif parsed.kind is DeclKind.UNION:
            self.named_struct_fields(parsed.fields, strike_attrs, False, path)
        elif parsed.kind is DeclKind.TYPE_ALIAS:
            tree = type_tree(parsed.initializer_ty.tokens, self.diagnostics)
            type_ret: List[TokenTree] = []
            self.recurse_through_type_list(tree, strike_attrs, None, False, type_ret, path)
            parsed.initializer_ty = TyExpr(type_ret)

        if make_pub and parsed.vis_marker is None:
            parsed.vis_marker = VisMarker.make_pub()
        if parsed.kind is DeclKind.STRUCT and isinstance(parsed.fields, (TupleFields, UnitFields)) \
                and parsed.tk_semicolon is None:
            parsed.tk_semicolon = Punct(';')
        self.output.append(Group(Delimiter.NONE, parsed.to_tokens(), parsed.name.span))
        return parsed.generic_params

    def recurse_through_struct_fields(self, fields, strike_attrs: List[Attribute], in_pub_enum: bool,
                                      path: NameHints, span) -> None:
        if isinstance(fields, NamedFields):
            self.named_struct_fields(fields, strike_attrs, in_pub_enum, path)
        elif isinstance(fields, TupleFields):
            self.tuple_struct_fields(fields, strike_attrs, in_pub_enum, path, span)

    def named_struct_fields(self, fields: NamedFields, strike_attrs: List[Attribute], in_pub_enum: bool,
                            path: NameHints) -> None:
        for field, _ in fields.fields:
            field_path = path.with_field_name(strip_raw(field.name.text))
            name_hint = field_path.get_name_hint(None, field.name.span)
            type_ret: List[TokenTree] = []
            self.recurse_through_type_list(
                type_tree(field.ty.tokens, self.diagnostics),
                strike_attrs,
                name_hint,
                is_plain_pub(field.vis_marker) or in_pub_enum,
                type_ret,
                field_path,
            )
            field.ty = TyExpr(type_ret)

    def tuple_struct_fields(self, fields: TupleFields, strike_attrs: List[Attribute], in_pub_enum: bool,
                            path: NameHints, span) -> None:
        for num, (field, _) in enumerate(fields.fields):
            tree = type_tree(field.ty.tokens, self.diagnostics)
            # `struct Foo(pub struct Bar());` parses `pub` as the field's visibility, but it is meant
            # for Bar. Hand it to the type unless the type already has its own (`pub pub struct Bar()`).
            if field.vis_marker is not None and not any(is_ident(node, 'pub') for node in tree):
                tree = field.vis_marker.to_tokens() + tree
                field.vis_marker = None
            name_hint = path.get_name_hint(num, span)
            type_ret: List[TokenTree] = []
            self.recurse_through_type_list(
                tree,
                strike_attrs,
                name_hint,
                is_plain_pub(field.vis_marker) or in_pub_enum,
                type_ret,
                path,
            )
            field.ty = TyExpr(type_ret)

    def recurse_through_type_list(self, tree: List[TypeTreeNode], strike_attrs: List[Attribute],
                                  name_hint: Optional[Ident], pub_hint: bool, type_ret: List[TokenTree],
                                  path: NameHints) -> None:
        start = 0
        while True:
            end = next((i for i in range(start, len(tree)) if is_punct(tree[i], ',')), None)
            current = tree[start:] if end is None else tree[start:end]
            self.recurse_through_type(current, strike_attrs, name_hint, pub_hint, type_ret, path)
            if end is None:
                return
            type_ret.append(tree[end])
            start = end + 1

    def recurse_through_type(self, tok: List[TypeTreeNode], strike_attrs: List[Attribute],
                             name_hint: Optional[Ident], pub_hint: bool, type_ret: List[TokenTree],
                             path: NameHints) -> None:
        for i in range(len(tok) - 2):
            if is_punct(tok[i + 1], ':') and not is_punct(tok[i], ':') and not is_punct(tok[i + 2], ':'):
                self.diagnostics.report_error(
                    tok[i + 1].span, ErrorKind.LIKELY_MISSING_COMMA,
                    "Colon in top level of type expression. Did you forget a comma somewhere?")
                break

        kw = next((i for i, node in enumerate(tok) if get_decl_ident(node) is not None), None)
        if kw is None:
            un_type_tree(tok, type_ret, lambda g, out: self.recurse_through_type_list(
                g, strike_attrs, name_hint, False, out, path))
            return

        decl = flatten_type_tree(tok)
        dup = next((get_decl_ident(node) for node in tok[kw + 1:] if get_decl_ident(node) is not None), None)
        if dup is not None:
            self.diagnostics.report_error(dup.span, ErrorKind.AMBIGUOUS_NESTED_DECLARATION,
                                          "More than one struct/enum/.. declaration found")
            type_ret.extend(decl)
            return

        pos = len(flatten_type_tree(tok[:kw]))
        if pos + 1 < len(decl) and isinstance(decl[pos + 1], Ident):
            name = decl[pos + 1]
            generics = self.flatten(decl, strike_attrs, pub_hint)
        elif name_hint is None:
            self.diagnostics.report_error(stream_span(decl), ErrorKind.MISSING_NAMING_CONTEXT,
                                          "No context for naming substructure")
            return
        else:
            name = Ident(name_hint.text, name_hint.span)
            self.debug_print(f"Naming anonymous {decl[pos]} {name} ({path!r})")
            generics = self.flatten(decl[:pos + 1] + [name] + decl[pos + 1:], strike_attrs, pub_hint)
        type_ret.append(name)
        if generics is not None:
            type_ret.extend(reproject_generics(generics))


def finalize(tokens: List[TokenTree]) -> List[TokenTree]:
    return run_token_transform_pipeline(tokens, [CollapseTransparentGroupsTransform()])


def flatten_declaration(tokens: List[TokenTree], options: Optional[FlattenOptions] = None) -> FlattenResult:
    """
    Runs one invocation over a single declaration's tokens.
    Raises FlattenError if an error occurs that has no source position to anchor a marker to.
    """
    options = options or FlattenOptions()
    flattener = Flattener(options)
    flattener.flatten(tokens, [], options.make_pub)
    return FlattenResult(finalize(flattener.output), flattener.diagnostics.diagnostics)


def split_items(tokens: List[TokenTree]) -> List[List[TokenTree]]:
    """
    Splits a stream holding several declarations. An item ends after a top-level `;` or brace
    group, except a type alias, which only ends at `;`.
    """
    items = []
    current: List[TokenTree] = []
    keyword = None
    for tt in tokens:
        current.append(tt)
        if keyword is None and is_ident(tt) and tt.text in DECLARATION_KEYWORDS:
            keyword = tt.text
        if is_punct(tt, ';') or (is_group(tt, Delimiter.BRACE) and keyword != "type"):
            items.append(current)
            current = []
            keyword = None
    if current:
        items.append(current)
    return items


def flatten_source(text: str, options: Optional[FlattenOptions] = None) -> FlattenResult:
    """Lexes source text and flattens every top-level declaration in it independently."""
    tokens: List[TokenTree] = []
    diagnostics: List[Diagnostic] = []
    for item in split_items(lex(text)):
        result = flatten_declaration(item, options)
        tokens.extend(result.tokens)
        diagnostics.extend(result.diagnostics)
    return FlattenResult(tokens, diagnostics)
