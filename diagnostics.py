"""
diagnostics.py
Turns structural errors into span-anchored compile_error! markers in the output stream.
Only an error without any source position aborts the invocation.
"""
from typing import Iterable, List, Optional

from errors import ErrorKind, FlattenError
from rust_lexer import quote
from token_model import Delimiter, Group, Ident, Literal, Punct, Span, TokenTree


class Diagnostic:
    def __init__(self, kind: ErrorKind, message: str, span: Span, is_warning: bool = False):
        self.kind = kind
        self.message = message
        self.span = span
        self.is_warning = is_warning

    def __repr__(self):
        return f"Diagnostic({self.kind.name}, {self.message!r}, {self.span!r})"

    def __str__(self):
        level = "warning" if self.is_warning else "error"
        return f"{level}: {self.message} ({self.span})"


def stream_span(tokens: Iterable[TokenTree]) -> Optional[Span]:
    """
    Best available contiguous span covering the tokens: joins spans from the first token
    onward and stops at the first one that cannot be joined.
    """
    ret = None
    for tt in tokens:
        if ret is None:
            ret = tt.span
            continue
        joined = ret.join(tt.span)
        if joined is None:
            return ret
        ret = joined
    return ret


def _string_literal(text: str) -> str:
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'


class Diagnostics:
    """
    Output stream of one invocation plus the diagnostics recorded into it.
    Error markers are appended to the same stream the flattened declarations go to,
    so they keep their position relative to the output.
    """
    def __init__(self, error_prefix: str = "structflat"):
        self.error_prefix = error_prefix
        self.output: List[TokenTree] = []
        self.diagnostics: List[Diagnostic] = []

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_warning]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.is_warning]

    def report_error(self, span: Optional[Span], kind: ErrorKind, message: str) -> None:
        text = f"{self.error_prefix} error: {message} - starting from:"
        if span is None:
            raise FlattenError(kind, text)
        self.diagnostics.append(Diagnostic(kind, message, span))
        marker = [
            Ident('compile_error', span),
            Punct('!', span=span),
            Group(Delimiter.PAREN, [Literal(_string_literal(text), span)], span),
            Punct(';', span=span),
        ]
        self.output.append(Group(Delimiter.NONE, marker, span))

    def report_deprecated_marker(self, span: Span, marker: str, replacement: str) -> None:
        """
        Emits a never-called function that touches a #[deprecated] item, so the compiler
        shows a warning at the marker without failing the build.
        """
        message = f"The {marker} attribute is deprecated. Use {replacement} instead."
        self.diagnostics.append(Diagnostic(ErrorKind.DEPRECATED_MARKER, message, span, is_warning=True))
        notice = quote(f"""
            #[allow(dead_code)]
            #[allow(non_camel_case_types)]
            #[allow(non_snake_case)]
            fn {marker}_used() {{
                #[deprecated(note = {_string_literal(message)})]
                #[allow(non_upper_case_globals)]
                const _w: () = ();
                let _ = _w;
            }}
        """, span)
        self.output.append(Group(Delimiter.NONE, notice, span))
