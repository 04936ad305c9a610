"""Tests for TOML configuration loading."""

from __future__ import annotations

import pytest

from shared.config import ScopeConfig


def test_defaults():
    config = ScopeConfig()
    assert config.global_settings.log_level == "INFO"
    assert config.inspector.string_encoding == "ascii"
    assert config.inspector.show_null_section is False


def test_load_from_file(tmp_path):
    path = tmp_path / "elfscope.toml"
    path.write_text(
        '[global]\nlog_level = "DEBUG"\nunknown = 1\n'
        "[inspector]\nshow_null_section = true\n"
    )
    config = ScopeConfig.load(path)
    assert config.global_settings.log_level == "DEBUG"
    assert config.inspector.show_null_section is True
    assert config.inspector.string_encoding == "ascii"


def test_explicit_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ScopeConfig.load(tmp_path / "missing.toml")


def test_output_format(tmp_path):
    path = tmp_path / "elfscope.toml"
    path.write_text('[inspector]\noutput_format = "json"\n')
    assert ScopeConfig.load(path).inspector.output_format == "json"
    assert ScopeConfig().inspector.output_format == "table"
