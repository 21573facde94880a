"""Tests for the qwt command line."""

from typer.testing import CliRunner

from qwt import __version__
from qwt.main import describe_error, typer_app

runner = CliRunner()


def test_render_to_stdout(tmp_path):
    src = tmp_path / "doc.j2"
    src.write_text('{% set who = "world" %}hello {{ who }}\n')

    result = runner.invoke(typer_app, [str(src)])

    assert result.exit_code == 0
    assert "hello world" in result.output


def test_render_to_destination_truncates(tmp_path):
    src = tmp_path / "doc.j2"
    src.write_text('{{ "abc" | bash("tr a-z A-Z") }}')
    dest = tmp_path / "out.txt"
    dest.write_text("previous content that is much longer\n")

    result = runner.invoke(typer_app, [str(src), str(dest)])

    assert result.exit_code == 0
    assert dest.read_text() == "ABC"


def test_prompt_reads_stdin(tmp_path):
    src = tmp_path / "doc.j2"
    src.write_text('{% prompt name = "alice" %}Hi {{ name }}\n')
    dest = tmp_path / "out.txt"

    result = runner.invoke(typer_app, [str(src), str(dest)], input="bob\n")

    assert result.exit_code == 0
    assert dest.read_text() == "Hi bob\n"


def test_prompt_accepts_default_from_stdin(tmp_path):
    src = tmp_path / "doc.j2"
    src.write_text('{% prompt name = "alice" %}Hi {{ name }}\n')
    dest = tmp_path / "out.txt"

    result = runner.invoke(typer_app, [str(src), str(dest)], input="\n")

    assert result.exit_code == 0
    assert dest.read_text() == "Hi alice\n"


def test_aborted_prompt_fails(tmp_path):
    src = tmp_path / "doc.j2"
    src.write_text('{% prompt name = "alice" %}Hi {{ name }}\n')
    dest = tmp_path / "out.txt"

    result = runner.invoke(typer_app, [str(src), str(dest)], input="")

    assert result.exit_code == 1
    assert "input aborted" in result.output
    assert not dest.exists()


def test_shell_failure_exits_non_zero(tmp_path):
    src = tmp_path / "doc.j2"
    src.write_text('{{ "" | bash("echo boom >&2; exit 2") }}')

    result = runner.invoke(typer_app, [str(src)])

    assert result.exit_code == 1
    assert "boom" in result.output


def test_syntax_error_reports_location(tmp_path):
    src = tmp_path / "doc.j2"
    src.write_text('first\n{% prompt name = "a" validate "[" %}\n')

    result = runner.invoke(typer_app, [str(src)])

    assert result.exit_code == 1
    assert f"{src}:2:" in result.output


def test_missing_source(tmp_path):
    result = runner.invoke(typer_app, [str(tmp_path / "missing.j2")])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_config_option(tmp_path):
    cfg = tmp_path / "qwt.yaml"
    cfg.write_text("shell_options: set -eu\n")
    src = tmp_path / "doc.j2"
    src.write_text('{{ "" | bash("false | true; echo ok") }}')

    result = runner.invoke(typer_app, ["-c", str(cfg), str(src)])

    assert result.exit_code == 0
    assert "ok" in result.output


def test_version():
    result = runner.invoke(typer_app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_describe_error_plain():
    assert describe_error(ValueError("bad")) == "bad"
