"""
schema-enforcer — unit tests for the options loader

File: tests/unit/config/test_options_loader.py

Purpose
- Validate deterministic option loading from defaults, TOML, env overrides, and
  explicit overrides.

What this test file should cover
- Precedence: overrides > env > file > defaults.
- Env var naming and boolean coercion.
- Load errors for missing or malformed files.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from schema_enforcer.config import (
    DEFAULT_OPTIONS,
    OptionsLoadError,
    OptionsValidationError,
    dump_effective_options,
    env_name_for_option,
    load_options,
    load_options_file,
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_when_no_file_exists(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert load_options(environ={}) == DEFAULT_OPTIONS


def test_default_file_in_working_directory_is_used(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write(tmp_path / "schema_enforcer.toml", "[enforce]\nminLength = true\n")
    monkeypatch.chdir(tmp_path)

    assert load_options(environ={}).min_length is True


def test_precedence_overrides_env_file(tmp_path: Path) -> None:
    options_path = _write(
        tmp_path / "options.toml",
        "[enforce]\nminLength = true\nuniqueItems = true\npattern = false\n",
    )
    environ = {"SCHEMA_ENFORCER_UNIQUE_ITEMS": "off", "SCHEMA_ENFORCER_PATTERN": "yes"}

    options = load_options(options_path, environ=environ, overrides={"pattern": False})

    assert options.min_length is True
    assert options.unique_items is False
    assert options.pattern is False


def test_flat_toml_payload(tmp_path: Path) -> None:
    options_path = _write(tmp_path / "flat.toml", "use_defaults = true\n")
    assert load_options_file(options_path).use_defaults is True


def test_load_options_file_ignores_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    options_path = _write(tmp_path / "options.toml", "")
    monkeypatch.setenv("SCHEMA_ENFORCER_MAXIMUM", "false")

    assert load_options_file(options_path).maximum is True


@pytest.mark.parametrize("raw", ["1", "TRUE", " on ", "y"])
def test_env_truthy_values(raw: str, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert load_options(environ={"SCHEMA_ENFORCER_MIN_ITEMS": raw}).min_items is True


def test_env_invalid_boolean(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(OptionsLoadError, match="SCHEMA_ENFORCER_ENUM"):
        load_options(environ={"SCHEMA_ENFORCER_ENUM": "maybe"})


def test_missing_explicit_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(OptionsLoadError, match="not found"):
        load_options(tmp_path / "absent.toml", environ={})


def test_invalid_toml_is_an_error(tmp_path: Path) -> None:
    options_path = _write(tmp_path / "broken.toml", "[enforce\n")
    with pytest.raises(OptionsLoadError, match="invalid TOML"):
        load_options(options_path, environ={})


def test_unknown_keys_in_file_fail_validation(tmp_path: Path) -> None:
    options_path = _write(tmp_path / "bad.toml", "[enforce]\nmaxWidth = true\n")
    with pytest.raises(OptionsValidationError):
        load_options(options_path, environ={})


def test_env_name_mapping() -> None:
    assert env_name_for_option("additional_properties") == "SCHEMA_ENFORCER_ADDITIONAL_PROPERTIES"


def test_dump_is_deterministic_json() -> None:
    dumped = dump_effective_options(DEFAULT_OPTIONS)

    assert dumped == dump_effective_options(DEFAULT_OPTIONS)
    parsed = json.loads(dumped)
    assert list(parsed) == sorted(parsed)
    assert parsed["max_length"] is True
