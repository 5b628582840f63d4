"""
token_model.py
Token trees for Rust-syntax source: identifiers, punctuation, literals and delimited groups.
Every token carries a Span so errors can be anchored to the source they came from.
"""
from enum import Enum
from typing import List, Optional, Union


class Span:
    """
    A source range. A call-site span has no position (tokens synthesized by the flattener)
    and never joins with anything.
    """
    def __init__(self, line: Optional[int] = None, column: Optional[int] = None,
                 end_line: Optional[int] = None, end_column: Optional[int] = None):
        self.line = line
        self.column = column
        self.end_line = end_line if end_line is not None else line
        self.end_column = end_column if end_column is not None else column

    @classmethod
    def call_site(cls) -> 'Span':
        return cls()

    @property
    def is_call_site(self) -> bool:
        return self.line is None

    def join(self, other: 'Span') -> Optional['Span']:
        """Returns a span covering both, or None if they cannot be merged."""
        if self.is_call_site or other.is_call_site:
            return None
        if (other.end_line, other.end_column) < (self.line, self.column):
            return None
        return Span(self.line, self.column, other.end_line, other.end_column)

    def __eq__(self, other):
        if not isinstance(other, Span):
            return NotImplemented
        return (self.line, self.column, self.end_line, self.end_column) == \
            (other.line, other.column, other.end_line, other.end_column)

    def __hash__(self):
        return hash((self.line, self.column, self.end_line, self.end_column))

    def __repr__(self):
        if self.is_call_site:
            return "Span(call_site)"
        return f"Span({self.line}:{self.column}-{self.end_line}:{self.end_column})"

    def __str__(self):
        if self.is_call_site:
            return "<call site>"
        return f"line {self.line}, column {self.column}"


class Spacing(Enum):
    ALONE = "alone"
    JOINT = "joint"


class Delimiter(Enum):
    PAREN = ("(", ")")
    BRACKET = ("[", "]")
    BRACE = ("{", "}")
    NONE = ("", "")

    @property
    def open(self) -> str:
        return self.value[0]

    @property
    def close(self) -> str:
        return self.value[1]


class Ident:
    def __init__(self, text: str, span: Optional[Span] = None):
        self.text = text
        self.span = span or Span.call_site()

    def __eq__(self, other):
        if isinstance(other, str):
            return self.text == other
        return isinstance(other, Ident) and other.text == self.text

    def __hash__(self):
        return hash(self.text)

    def __str__(self):
        return self.text

    def __repr__(self):
        return f"Ident({self.text!r})"


class Punct:
    def __init__(self, char: str, spacing: Spacing = Spacing.ALONE, span: Optional[Span] = None):
        self.char = char
        self.spacing = spacing
        self.span = span or Span.call_site()

    def __eq__(self, other):
        return isinstance(other, Punct) and other.char == self.char and other.spacing == self.spacing

    def __hash__(self):
        return hash((self.char, self.spacing))

    def __str__(self):
        return self.char

    def __repr__(self):
        joint = ", joint" if self.spacing is Spacing.JOINT else ""
        return f"Punct({self.char!r}{joint})"


class Literal:
    def __init__(self, text: str, span: Optional[Span] = None):
        self.text = text
        self.span = span or Span.call_site()

    def __eq__(self, other):
        return isinstance(other, Literal) and other.text == self.text

    def __hash__(self):
        return hash(self.text)

    def __str__(self):
        return self.text

    def __repr__(self):
        return f"Literal({self.text!r})"


class Group:
    """A delimited token stream. Delimiter.NONE marks a transparent group."""
    def __init__(self, delimiter: Delimiter, stream: List['TokenTree'], span: Optional[Span] = None,
                 close_span: Optional[Span] = None):
        self.delimiter = delimiter
        self.stream = stream
        self.span = span or Span.call_site()
        self.close_span = close_span or self.span

    def __eq__(self, other):
        return isinstance(other, Group) and other.delimiter == self.delimiter and other.stream == self.stream

    def __hash__(self):
        return hash((self.delimiter, len(self.stream)))

    def __str__(self):
        return render([self])

    def __repr__(self):
        return f"Group({self.delimiter.name}, {self.stream!r})"


TokenTree = Union[Ident, Punct, Literal, Group]


def is_ident(tt, text: Optional[str] = None) -> bool:
    return isinstance(tt, Ident) and (text is None or tt.text == text)


def is_punct(tt, char: Optional[str] = None) -> bool:
    return isinstance(tt, Punct) and (char is None or tt.char == char)


def is_group(tt, delimiter: Optional[Delimiter] = None) -> bool:
    return isinstance(tt, Group) and (delimiter is None or tt.delimiter == delimiter)


def respan(tokens: List[TokenTree], span: Span) -> List[TokenTree]:
    """Sets every token's span (recursively) to the given span, like quote_spanned! does."""
    for tt in tokens:
        tt.span = span
        if isinstance(tt, Group):
            tt.close_span = span
            respan(tt.stream, span)
    return tokens


def render(tokens: List[TokenTree]) -> str:
    """
    Serializes a token stream back into source text.
    Tokens are separated by single spaces except after a joint punct; transparent groups
    contribute only their contents.
    """
    out = []
    glue = False
    for tt in tokens:
        next_glue = False
        if isinstance(tt, Group):
            inner = render(tt.stream)
            if tt.delimiter is Delimiter.NONE:
                if not inner:
                    continue
                text = inner
            elif inner:
                text = f"{tt.delimiter.open} {inner} {tt.delimiter.close}"
            else:
                text = tt.delimiter.open + tt.delimiter.close
        elif isinstance(tt, Punct):
            text = tt.char
            next_glue = tt.spacing is Spacing.JOINT
        else:
            text = str(tt)
        if out and not glue:
            out.append(" ")
        out.append(text)
        glue = next_glue
    return "".join(out)
