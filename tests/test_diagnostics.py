from __future__ import annotations

import ast

import pytest

from cstr_enum.codegen.core.diagnostics import (
    REGISTRY,
    DeriveError,
    DiagnosticCode,
    GeneratorError,
    Span,
    format_message,
    span_of,
)


SOURCE = "class Foo:\n    pass\n"


def test_every_code_has_a_catalog_entry():
    assert set(REGISTRY) == set(DiagnosticCode)
    assert all(entry.doc for entry in REGISTRY.values())


def test_format_message_requires_its_keys():
    assert format_message(DiagnosticCode.UNKNOWN_ARGUMENT, key="nmae") == (
        "invalid named argument `nmae`"
    )
    with pytest.raises(KeyError, match="missing text key 'key'"):
        format_message(DiagnosticCode.UNKNOWN_ARGUMENT)


def test_span_of_is_one_based():
    node = ast.parse(SOURCE).body[0]

    assert span_of(node) == Span(1, 1, 2, 9)
    assert span_of(None) is None


def test_derive_error_str_and_location():
    error = DeriveError(
        DiagnosticCode.NON_ENUM_TARGET, "msg", Span(1, 7, 1, 10), "decl.py"
    )

    assert isinstance(error, GeneratorError)
    assert str(error) == "decl.py:1:7: error[NonEnumTarget]: msg"
    assert DeriveError(DiagnosticCode.NON_ENUM_TARGET, "msg").location() == "<input>"


def test_render_points_at_the_span():
    error = DeriveError(
        DiagnosticCode.NON_ENUM_TARGET, "msg", Span(1, 7, 1, 10), "decl.py"
    )

    lines = error.render(SOURCE)

    assert lines == [
        "decl.py:1:7: error[NonEnumTarget]: msg",
        "1 | class Foo:",
        "  | " + " " * 6 + "^^^",
    ]


def test_render_without_source_is_header_only():
    error = DeriveError(DiagnosticCode.VARIANT_HAS_FIELDS, "msg", Span(9, 1, 9, 2))

    assert error.render(None) == [str(error)]
    assert error.render(SOURCE) == [str(error)]


def test_create_uses_catalog_text():
    node = ast.parse(SOURCE).body[0]

    error = DeriveError.create(
        DiagnosticCode.VARIANT_HAS_FIELDS, node, "decl.py", variant="Foo"
    )

    assert error.message == "variant `Foo` cannot have fields"
    assert error.span.line == 1
