"""End-to-end tests for the click command-line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from conftest import object_file

from elfscope import __version__
from elfscope.cli import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "quiet.toml"
    path.write_text('[global]\nlog_level = "ERROR"\n')
    return str(path)


@pytest.fixture
def invoke(runner, config_file):
    def _invoke(*args: str, input: str | None = None):
        return runner.invoke(cli, ["--config", config_file, *args], input=input)

    return _invoke


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_header(invoke, write_file):
    path = write_file(object_file())
    result = invoke("header", str(path))
    assert result.exit_code == 0, result.output
    assert "Magic:" in result.output
    assert "ELF" in result.output
    assert "0x8048000" in result.output


def test_header_rejects_non_elf(invoke, write_file):
    path = write_file(b"MZ" + bytes(100))
    result = invoke("header", str(path))
    assert result.exit_code == 1
    assert "BadMagic" in result.output


def test_header_missing_file(invoke, tmp_path):
    result = invoke("header", str(tmp_path / "missing.o"))
    assert result.exit_code == 1
    assert "NotFound" in result.output


def test_sections(invoke, write_file):
    path = write_file(object_file(["foo"]))
    result = invoke("sections", str(path))
    assert result.exit_code == 0, result.output
    for name in (".text", ".strtab", ".symtab", ".shstrtab"):
        assert name in result.output


def test_symbols(invoke, write_file):
    path = write_file(object_file(["foo", "bar", "baz"]))
    result = invoke("symbols", str(path))
    assert result.exit_code == 0, result.output
    for name in ("foo", "bar", "baz"):
        assert name in result.output


def test_symbols_without_symtab(invoke, write_file):
    first = write_file(object_file())
    second = write_file(object_file(["foo"]))
    result = invoke("symbols", str(first), str(second))
    assert result.exit_code == 1
    assert "No symbol table found in file 1" in result.output
    assert "foo" in result.output


def test_symbols_json(invoke, write_file):
    path = write_file(object_file(["foo", "bar"]))
    result = invoke("--json", "symbols", str(path))
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data[0]["file"] == 1
    assert [sym["name"] for sym in data[0]["symbols"]] == ["foo", "bar"]
    assert data[0]["symbols"][0]["section_name"] == ".text"


def test_output_format_from_config(runner, write_file, tmp_path):
    config = tmp_path / "json.toml"
    config.write_text(
        '[global]\nlog_level = "ERROR"\n[inspector]\noutput_format = "json"\n'
    )
    path = write_file(object_file(["foo"]))
    result = runner.invoke(cli, ["--config", str(config), "symbols", str(path)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)[0]["symbols"][0]["name"] == "foo"


def test_compare(invoke, write_file):
    first = write_file(object_file(["foo", "bar"]))
    second = write_file(object_file(["bar", "bar", "qux"]))
    result = invoke("compare", str(first), str(second))
    assert result.exit_code == 0, result.output
    assert result.output.count("Symbol bar found in both files") == 2
    assert "foo found" not in result.output


def test_compare_no_common_names(invoke, write_file):
    first = write_file(object_file(["foo"]))
    second = write_file(object_file(["bar"]))
    result = invoke("compare", str(first), str(second))
    assert result.exit_code == 0
    assert "No symbol is defined in both files" in result.output


def test_compare_missing_symtab(invoke, write_file):
    first = write_file(object_file(["foo"]))
    second = write_file(object_file())
    result = invoke("compare", str(first), str(second))
    assert result.exit_code == 1
    assert "No symbol table in file 2" in result.output


class TestShell:
    def test_session(self, invoke, write_file):
        first = write_file(object_file(["foo", "bar"]))
        second = write_file(object_file(["bar", "qux"]))
        script = f"1\n{first}\n1\n{second}\n4\n5\n9\n0\n6\n"

        result = invoke("shell", input=script)

        assert result.exit_code == 0, result.output
        assert "0-Toggle Debug Mode" in result.output
        assert "6-Quit" in result.output
        assert "Symbol bar found in both files" in result.output
        assert "Not implemented yet." in result.output
        assert "Invalid choice 9" in result.output
        assert "Debug mode on" in result.output

    def test_third_file_is_refused(self, invoke, write_file):
        paths = [write_file(object_file([name])) for name in ("a", "b", "c")]
        script = "".join(f"1\n{path}\n" for path in paths) + "6\n"

        result = invoke("shell", input=script)

        assert result.exit_code == 0, result.output
        assert "AllSlotsFull" in result.output

    def test_check_merge_needs_two_files(self, invoke):
        result = invoke("shell", input="4\n6\n")
        assert result.exit_code == 0
        assert "NotEnoughFiles" in result.output

    def test_end_of_input_quits(self, invoke):
        result = invoke("shell", input="")
        assert result.exit_code == 0
        assert "Choose action:" in result.output
