from __future__ import annotations

import pytest

from cstr_enum import (
    AsCStr,
    CStrOptions,
    CStrParseError,
    FromCStr,
    SumType,
    cstr,
    derive,
)


def test_markers_are_inert():
    @derive(AsCStr, FromCStr)
    class Marked:
        pass

    @cstr(name="pork")
    class Variant:
        pass

    assert Marked.__name__ == "Marked"
    assert Variant.__name__ == "Variant"


def test_cstr_keeps_its_options():
    options = cstr(name="pork")

    assert isinstance(options, CStrOptions)
    assert options.options == {"name": "pork"}
    assert repr(options) == "cstr(name='pork')"


def test_parse_error_names_the_type():
    error = CStrParseError("Constants")

    assert isinstance(error, ValueError)
    assert error.type_name == "Constants"
    assert str(error) == "unexpected string while parsing for Constants variant"


def test_protocols_are_runtime_checkable():
    class Named:
        def as_cstr(self) -> bytes:
            return b"Named\x00"

    assert isinstance(Named(), AsCStr)
    assert not isinstance(Named(), FromCStr)


def test_sum_type_adds_no_instance_state():
    assert SumType.__slots__ == ()
    with pytest.raises(TypeError):
        SumType(1)
