"""
test_struct_flattener_cli.py
Tests for the struct_flattener command line.
"""
import io
import os
import pytest
from struct_flattener import StructFlattenerRunner, main, parse_arguments
from tests.test_utils import normalize


def write_input(temp_dir, text):
    path = os.path.join(temp_dir, "input.rs")
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path


def read_output(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def test_flattens_file_to_file(temp_dir):
    input_path = write_input(temp_dir, "struct A { b: struct { x: u8 } }")
    output_path = os.path.join(temp_dir, "output.rs")
    main(["-i", input_path, "-o", output_path])
    assert read_output(output_path) == normalize("struct B { x: u8 } struct A { b: B }") + "\n"


def test_writes_to_stdout_by_default(temp_dir, capsys):
    input_path = write_input(temp_dir, "struct A { b: struct { x: u8 } }")
    main(["--input", input_path, "--make-pub"])
    captured = capsys.readouterr()
    assert captured.out == normalize("struct B { x: u8 } pub struct A { b: B }") + "\n"
    assert "completed successfully" in captured.err


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("struct A(struct { x: u8 });"))
    main(["-i", "-"])
    assert capsys.readouterr().out == normalize("struct A { x: u8 } struct A(A);") + "\n"


def test_errors_exit_with_status_1(temp_dir, capsys):
    input_path = write_input(temp_dir, "fn foo() {}")
    output_path = os.path.join(temp_dir, "output.rs")
    with pytest.raises(SystemExit) as excinfo:
        main(["-i", input_path, "-o", output_path])
    assert excinfo.value.code == 1
    assert "compile_error" in read_output(output_path)
    assert "error: Unsupported declaration" in capsys.readouterr().err


def test_lex_error_is_reported(temp_dir, capsys):
    input_path = write_input(temp_dir, "struct A {")
    with pytest.raises(SystemExit):
        main(["-i", input_path])
    captured = capsys.readouterr()
    assert "Error:" in captured.err
    assert captured.out == ""


def test_environment_overrides_marker_crate(temp_dir, monkeypatch, capsys):
    input_path = write_input(temp_dir, "#[nest::long_names] struct A { b: struct { x: u8 } }")
    monkeypatch.setenv("SF_MARKER_CRATE", "nest")
    main(["-i", input_path])
    assert capsys.readouterr().out == normalize("struct AB { x: u8 } struct A { b: AB }") + "\n"


def test_environment_overrides_input_file(temp_dir, monkeypatch, capsys):
    input_path = write_input(temp_dir, "struct A;")
    monkeypatch.setenv("SF_INPUT_FILE", input_path)
    main(["-i", os.path.join(temp_dir, "missing.rs")])
    assert capsys.readouterr().out == normalize("struct A;") + "\n"


def test_verbose_prints_debug_lines(temp_dir, capsys):
    input_path = write_input(temp_dir, "struct A { b: struct { x: u8 } }")
    main(["-i", input_path, "-v"])
    captured = capsys.readouterr()
    assert "[DEBUG]" in captured.err
    assert "[DEBUG]" not in captured.out


def test_quiet_by_default(temp_dir, capsys):
    input_path = write_input(temp_dir, "struct A { b: struct { x: u8 } }")
    main(["-i", input_path])
    assert "[DEBUG]" not in capsys.readouterr().err


def test_parse_arguments_defaults():
    args = parse_arguments(["-i", "x.rs"])
    assert args.output is None
    assert args.marker_crate == "structflat"
    assert not args.make_pub
    assert not args.verbose


def test_runner_without_run_writes_nothing(temp_dir):
    output_path = os.path.join(temp_dir, "output.rs")
    StructFlattenerRunner("unused.rs", output_path).write_output()
    assert not os.path.exists(output_path)
