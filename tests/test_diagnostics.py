"""
test_diagnostics.py
Unit tests for span joining and compile_error! markers.
"""
import pytest
from diagnostics import Diagnostics, stream_span
from errors import ErrorKind, FlattenError
from rust_lexer import lex
from token_model import Ident, Span, render


def test_stream_span_joins_positional_tokens():
    span = stream_span(lex("a b\nc"))
    assert (span.line, span.end_line) == (1, 2)


def test_stream_span_stops_at_call_site_token():
    first = Span(1, 0, 1, 1)
    assert stream_span([Ident("a", first), Ident("b"), Ident("c", Span(1, 4, 1, 5))]) == first


def test_stream_span_of_nothing():
    assert stream_span([]) is None


def test_span_join():
    a = Span(1, 0, 1, 3)
    b = Span(2, 0, 2, 4)
    assert a.join(b) == Span(1, 0, 2, 4)
    assert b.join(a) is None
    assert a.join(Span.call_site()) is None


def test_error_marker():
    diagnostics = Diagnostics("mine")
    diagnostics.report_error(Span(1, 0), ErrorKind.PARSE_FAILURE, "Oops")
    assert render(diagnostics.output) == 'compile_error ! ( "mine error: Oops - starting from:" ) ;'
    assert diagnostics.errors[0].kind is ErrorKind.PARSE_FAILURE
    assert diagnostics.errors[0].span == Span(1, 0)


def test_marker_message_is_escaped():
    diagnostics = Diagnostics()
    diagnostics.report_error(Span(1, 0), ErrorKind.PARSE_FAILURE, 'Expected "x"')
    assert '\\"x\\"' in render(diagnostics.output)


def test_error_without_span_aborts():
    diagnostics = Diagnostics()
    with pytest.raises(FlattenError) as excinfo:
        diagnostics.report_error(None, ErrorKind.MISSING_NAMING_CONTEXT, "No context")
    assert excinfo.value.kind is ErrorKind.MISSING_NAMING_CONTEXT
    assert diagnostics.output == []


def test_deprecation_notice_is_a_warning():
    diagnostics = Diagnostics()
    diagnostics.report_deprecated_marker(Span(2, 2), "strikethrough", "structflat::each")
    assert not diagnostics.errors
    assert diagnostics.warnings[0].is_warning
    rendered = render(diagnostics.output)
    assert "fn strikethrough_used" in rendered
    assert "deprecated" in rendered
    assert "warning:" in str(diagnostics.warnings[0])
