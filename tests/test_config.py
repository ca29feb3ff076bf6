from __future__ import annotations

import json

import pytest

from cstr_enum.codegen.core.config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
)


def _make_config_file(tmp_path, data, name="cstr.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_language_defaults():
    assert load_config("python").attach_methods is True
    assert load_config("c").attach_methods is False
    assert load_config().forward_suffix == "as_cstr"


def test_file_then_overrides(tmp_path):
    path = _make_config_file(
        tmp_path, {"source_module": "pkg.constants", "add_comments": False}
    )

    config = load_config("python", {"add_comments": True}, path)

    assert config.source_module == "pkg.constants"
    assert config.add_comments is True


def test_unknown_keys_are_rejected(tmp_path):
    path = _make_config_file(tmp_path, {"indent": 4, "fowrard_suffix": "x"})

    with pytest.raises(ConfigError, match="fowrard_suffix, indent"):
        load_config("python", config_file=path)


@pytest.mark.parametrize(
    "content, name",
    [
        ("{not json", "cstr.json"),
        ("[1, 2]", "cstr.json"),
        ("{}", "cstr.yaml"),
    ],
)
def test_bad_config_files(tmp_path, content, name):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config("python", config_file=path)


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config("python", config_file=tmp_path / "missing.json")


def test_validate_config():
    manager = ConfigManager()

    assert manager.validate_config(load_config("python"), "python") == []

    warnings = manager.validate_config(
        GeneratorConfig(
            function_case="kebab",
            forward_suffix="as-cstr",
            reverse_suffix="as-cstr",
            source_module="pkg.2bad",
            header_guard="NAMES.H",
            line_ending="\r",
        ),
        "c",
    )

    joined = "\n".join(warnings)
    assert "function_case" in joined
    assert "forward_suffix" in joined
    assert "must differ" in joined
    assert "source_module" in joined
    assert "attach_methods has no effect" in joined
    assert "header guard" in joined
    assert "line_ending" in joined
