from __future__ import annotations

import pytest

from cstr_enum.codegen.core.diagnostics import DeriveError, DiagnosticCode
from cstr_enum.codegen.core.generator import resolve_module, resolve_type
from cstr_enum.codegen.core.names import NameBinding, TERMINATOR
from cstr_enum.codegen.core.schema import Capability

from conftest import CONSTANTS_SOURCE, make_target, make_tree


def _bindings(source: str, capability: Capability = Capability.AS_CSTR):
    target, tree = make_target(source)
    resolved = resolve_type(target, tree, capability, "decl.py")
    return {b.variant: b.value for b in resolved.bindings}


def test_default_names_are_identifiers():
    names = _bindings(CONSTANTS_SOURCE)

    assert names["Apple"] == b"Apple\x00"
    assert names["Cat"] == b"Cat\x00"


def test_override_replaces_identifier():
    assert _bindings(CONSTANTS_SOURCE)["Bacon"] == b"pork\x00"


def test_values_do_not_affect_names():
    names = _bindings(CONSTANTS_SOURCE.replace("Cat = 1337", "Cat = 'Dog'"))

    assert names["Cat"] == b"Cat\x00"


def test_names_are_utf8_encoded():
    names = _bindings(
        """
        @derive(AsCStr)
        class Dish(Enum):
            Naive: Annotated[int, cstr(name="naïve")] = 1
            Crème = 2
        """
    )

    assert names["Naive"] == "naïve".encode() + TERMINATOR
    assert names["Crème"] == "Crème".encode() + TERMINATOR


def test_empty_override_is_just_the_terminator():
    names = _bindings(
        """
        @derive(AsCStr)
        class Constants(Enum):
            Blank: Annotated[int, cstr(name="")] = 1
        """
    )

    assert names["Blank"] == b"\x00"


@pytest.mark.parametrize("literal", [r'"p\0rk"', r'"p\x00rk"', r'"pork\u0000"'])
def test_embedded_terminator_is_rejected(literal):
    source = f"""
        @derive(AsCStr)
        class Constants(Enum):
            Bacon: Annotated[int, cstr(name={literal})] = 2
        """

    with pytest.raises(DeriveError) as excinfo:
        _bindings(source)

    assert excinfo.value.code is DiagnosticCode.EMBEDDED_TERMINATOR_BYTE
    assert excinfo.value.message == "string cannot contain nul bytes"
    assert excinfo.value.span.line == 4


def test_every_variant_is_configured_before_names_are_built():
    source = r"""
        @derive(AsCStr)
        class Constants(Enum):
            Bacon: Annotated[int, cstr(name="p\0rk")] = 2
            Cat: Annotated[int, cstr(colour="grey")] = 3
        """

    with pytest.raises(DeriveError) as excinfo:
        _bindings(source)

    assert excinfo.value.code is DiagnosticCode.UNKNOWN_ARGUMENT


def test_resolve_module_yields_one_invocation_per_capability():
    resolved = resolve_module(make_tree(CONSTANTS_SOURCE), "decl.py")

    assert [(r.name, r.capability) for r in resolved] == [
        ("Constants", Capability.AS_CSTR),
        ("Constants", Capability.FROM_CSTR),
    ]
    assert resolved[0].bindings == resolved[1].bindings


def test_first_error_aborts_the_module():
    source = CONSTANTS_SOURCE + """

@derive(AsCStr)
def broken():
    pass
"""

    with pytest.raises(DeriveError) as excinfo:
        resolve_module(make_tree(source), "decl.py")

    assert excinfo.value.code is DiagnosticCode.NON_ENUM_TARGET


def test_duplicate_names_are_reported_first_declared_first():
    target, tree = make_target(
        """
        @derive(FromCStr)
        class Constants(Enum):
            Apple: Annotated[int, cstr(name="fruit")] = 1
            Pear: Annotated[int, cstr(name="fruit")] = 2
            Cat = 3
        """
    )

    resolved = resolve_type(target, tree, Capability.FROM_CSTR)

    assert resolved.duplicate_names() == [("Apple", "Pear", b"fruit")]


@pytest.mark.parametrize("value", [b"pork", b"po\x00rk\x00", b""])
def test_binding_requires_exactly_one_terminator(value):
    with pytest.raises(ValueError):
        NameBinding("Bacon", value)


def test_binding_content_drops_terminator():
    assert NameBinding("Bacon", b"pork\x00").content == b"pork"
