"""
rust_lexer.py
Lexes Rust-syntax source text into token trees using a lark basic lexer.
Delimiters are matched into Groups; doc comments become #[doc = "..."] attributes.
"""
from typing import List, Optional

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from errors import LexError
from token_model import Delimiter, Group, Ident, Literal, Punct, Spacing, Span, TokenTree, respan


# Only the terminals matter; the start rule exists so lark keeps all of them.
grammar = r"""
    start: (INNER_DOC | OUTER_DOC | RAW_STRING | STRING | CHAR | LIFETIME | NUMBER | IDENT | OPEN | CLOSE | PUNCT)*

    INNER_DOC.5: /\/\/![^\n]*/
    OUTER_DOC.5: /\/\/\/(?!\/)[^\n]*/
    LINE_COMMENT.4: /\/\/[^\n]*/
    BLOCK_COMMENT.4: /\/\*[\s\S]*?\*\//

    RAW_STRING.4: /b?r"[^"]*"|b?r#"[\s\S]*?"#|b?r##"[\s\S]*?"##/
    STRING.4: /b?"(?:\\[\s\S]|[^"\\])*"/
    CHAR.4: /b?'(?:\\u\{[0-9a-fA-F]+\}|\\.|[^'\\\n])'/
    LIFETIME.3: /'[^\W\d]\w*/
    NUMBER.2: /[0-9][0-9A-Za-z_]*(?:\.[0-9][0-9A-Za-z_]*)?/
    IDENT.2: /r#[^\W\d]\w*|[^\W\d]\w*/
    OPEN.1: /[(\[{]/
    CLOSE.1: /[)\]}]/
    PUNCT.1: /[!#$%&*+,\-.\/:;<=>?@^|~]/

    %import common.WS
    %ignore WS
    %ignore LINE_COMMENT
    %ignore BLOCK_COMMENT
"""

lexer = Lark(grammar, start='start', parser='lalr', lexer='basic')

_DELIMITERS = {d.open: d for d in (Delimiter.PAREN, Delimiter.BRACKET, Delimiter.BRACE)}
_CLOSERS = {d.close: d for d in (Delimiter.PAREN, Delimiter.BRACKET, Delimiter.BRACE)}


def _span_of(tok) -> Span:
    return Span(tok.line, tok.column, tok.end_line, tok.end_column)


def _string_literal(text: str) -> str:
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'


def _doc_attribute(tok, inner: bool) -> List[TokenTree]:
    span = _span_of(tok)
    doc = Literal(_string_literal(str(tok)[3:]), span)
    tokens: List[TokenTree] = [Punct('#', Spacing.ALONE, span)]
    if inner:
        tokens.append(Punct('!', Spacing.ALONE, span))
    tokens.append(Group(Delimiter.BRACKET, [Ident('doc', span), Punct('=', Spacing.ALONE, span), doc], span))
    return tokens


def lex(text: str) -> List[TokenTree]:
    """Turns source text into a list of token trees. Raises LexError on bad input."""
    try:
        raw = list(lexer.lex(text))
    except UnexpectedCharacters as e:
        raise LexError(f"Unexpected character {text[e.pos_in_stream]!r}",
                       Span(e.line, e.column)) from e

    # Each frame: (open token, open span, children)
    stack = []
    current: List[TokenTree] = []
    for i, tok in enumerate(raw):
        span = _span_of(tok)
        kind = tok.type
        if kind == 'OPEN':
            stack.append((_DELIMITERS[str(tok)], span, current))
            current = []
        elif kind == 'CLOSE':
            if not stack:
                raise LexError(f"Unexpected closing delimiter {str(tok)!r}", span)
            delimiter, open_span, parent = stack.pop()
            if _CLOSERS[str(tok)] is not delimiter:
                raise LexError(f"Mismatched closing delimiter {str(tok)!r}", span)
            parent.append(Group(delimiter, current, open_span, span))
            current = parent
        elif kind == 'PUNCT':
            nxt = raw[i + 1] if i + 1 < len(raw) else None
            joint = nxt is not None and nxt.type in ('PUNCT', 'LIFETIME') and nxt.start_pos == tok.end_pos
            current.append(Punct(str(tok), Spacing.JOINT if joint else Spacing.ALONE, span))
        elif kind == 'LIFETIME':
            current.append(Punct("'", Spacing.JOINT, span))
            current.append(Ident(str(tok)[1:], span))
        elif kind == 'IDENT':
            current.append(Ident(str(tok), span))
        elif kind == 'OUTER_DOC':
            current.extend(_doc_attribute(tok, inner=False))
        elif kind == 'INNER_DOC':
            current.extend(_doc_attribute(tok, inner=True))
        else:
            current.append(Literal(str(tok), span))
    if stack:
        delimiter, open_span, _ = stack[-1]
        raise LexError(f"Unclosed delimiter {delimiter.open!r}", open_span)
    return current


def quote(text: str, span: Optional[Span] = None) -> List[TokenTree]:
    """Lexes a source template and stamps every token with one span."""
    return respan(lex(text), span or Span.call_site())
