from __future__ import annotations

import pytest

from cstr_enum.codegen import registry as registry_module
from cstr_enum.codegen.core.config import GeneratorConfig
from cstr_enum.codegen.languages.c import CGenerator
from cstr_enum.codegen.languages.python import PythonGenerator
from cstr_enum.codegen.registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    is_language_supported,
    list_all_language_info,
    list_supported_languages,
    register_generator,
)


def test_builtin_languages():
    assert list_supported_languages() == ["c", "python"]
    assert is_language_supported("PY")
    assert is_language_supported("h")
    assert not is_language_supported("go")


def test_aliases_create_the_same_generator():
    assert isinstance(get_generator("py"), PythonGenerator)
    assert isinstance(get_generator("h"), CGenerator)


def test_language_defaults_apply():
    assert get_generator("c").config.attach_methods is False
    assert get_generator("python", {"add_comments": False}).config.add_comments is False


def test_explicit_config_is_used_as_is():
    config = GeneratorConfig(forward_suffix="name_of")

    assert get_generator("python", config).config is config


def test_unknown_language():
    with pytest.raises(RegistryError, match="Available: c, python"):
        get_generator("cobol")


def test_invalid_config_type():
    with pytest.raises(RegistryError):
        get_generator("python", 42)


def test_language_info():
    info = get_language_info("h")

    assert info["name"] == "c"
    assert info["file_extension"] == ".h"
    assert info["aliases"] == ["h"]
    assert info["defaults"]["attach_methods"] is False
    assert set(list_all_language_info()) == {"c", "python"}


def test_register_rejects_non_generators():
    registry = GeneratorRegistry()

    with pytest.raises(RegistryError):
        registry.register("text", str)


def test_alias_conflicts():
    registry = GeneratorRegistry()
    registry.register("python", PythonGenerator, aliases=["py"])

    with pytest.raises(RegistryError):
        registry.register("c", CGenerator, aliases=["python"])
    with pytest.raises(RegistryError):
        registry.register("c", CGenerator, aliases=["py"])


def test_unregister_drops_aliases():
    registry = GeneratorRegistry()
    registry.register("python", PythonGenerator, aliases=["py"])

    registry.unregister("python")

    assert not registry.is_supported("py")
    assert registry.list_languages() == []


def test_generator_class_lookup_by_alias():
    registry = GeneratorRegistry()
    registry.register("c", CGenerator, aliases=["h"])

    assert registry.get_generator_class("H") is CGenerator
    assert registry.resolve_language("h") == "c"


def test_register_generator_uses_global_registry(monkeypatch):
    monkeypatch.setattr(registry_module, "_global_registry", GeneratorRegistry())

    register_generator("c", CGenerator, aliases=["header"])

    assert list_supported_languages() == ["c"]
    assert isinstance(get_generator("header"), CGenerator)
