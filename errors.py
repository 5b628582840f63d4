"""
errors.py
Error kinds and exception types shared by the lexer, the declaration parser and the flattener.
"""
from enum import Enum
from typing import Optional, TYPE_CHECKING
if TYPE_CHECKING:
    from token_model import Span


class ErrorKind(Enum):
    LEX_FAILURE = "lex_failure"
    PARSE_FAILURE = "parse_failure"
    UNSUPPORTED_DECLARATION_KIND = "unsupported_declaration_kind"
    AMBIGUOUS_NESTED_DECLARATION = "ambiguous_nested_declaration"
    MISSING_NAMING_CONTEXT = "missing_naming_context"
    MALFORMED_PROPAGATION_ATTRIBUTE = "malformed_propagation_attribute"
    UNCLOSED_OR_UNMATCHED_BRACKET_GROUP = "unclosed_or_unmatched_bracket_group"
    LIKELY_MISSING_COMMA = "likely_missing_comma"
    DEPRECATED_MARKER = "deprecated_marker"


class FlattenError(Exception):
    """
    Raised when something goes wrong that cannot be turned into an inline error marker.
    The span is None when no source position could be recovered.
    """
    def __init__(self, kind: ErrorKind, message: str, span: Optional['Span'] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.span = span

    def __str__(self):
        if self.span is not None and not self.span.is_call_site:
            return f"{self.span}: {self.message}"
        return self.message


class LexError(FlattenError):
    def __init__(self, message: str, span: Optional['Span'] = None):
        super().__init__(ErrorKind.LEX_FAILURE, message, span)


class DeclarationParseError(FlattenError):
    def __init__(self, message: str, span: Optional['Span'] = None):
        super().__init__(ErrorKind.PARSE_FAILURE, message, span)
