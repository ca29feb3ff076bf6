"""
Generation-time diagnostics.

Every rejection of a declaration is a ``DeriveError`` carrying a code from
the catalog below, the offending source span and the file name.
"""

import ast
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class DiagnosticCode(str, Enum):
    """Stable identifiers printed as error[Code] in diagnostics."""

    NON_ENUM_TARGET = "NonEnumTarget"
    MISPLACED_ATTRIBUTE = "MisplacedAttribute"
    UNKNOWN_ARGUMENT = "UnknownArgument"
    TYPE_MISMATCH_LITERAL = "TypeMismatchLiteral"
    DUPLICATE_ARGUMENT = "DuplicateArgument"
    EMBEDDED_TERMINATOR_BYTE = "EmbeddedTerminatorByte"
    VARIANT_HAS_FIELDS = "VariantHasFields"
    MALFORMED_ATTRIBUTE = "MalformedAttribute"


@dataclass(frozen=True)
class ErrorMessage:
    """Catalog entry: message template for a code and its longer explanation."""

    code: DiagnosticCode
    text: str
    doc: str = ""


@dataclass(frozen=True)
class Span:
    """Source range; lines and columns are 1-based."""

    line: int
    col: int
    end_line: int
    end_col: int


def span_of(node: Optional[ast.AST]) -> Optional[Span]:
    """Return the span of an AST node, if it has position information."""
    line = getattr(node, "lineno", None)
    col = getattr(node, "col_offset", None)
    if line is None or col is None:
        return None
    end_line = getattr(node, "end_lineno", None) or line
    end_col = getattr(node, "end_col_offset", None)
    return Span(line, col + 1, end_line, (end_col if end_col is not None else col) + 1)


REGISTRY: Dict[DiagnosticCode, ErrorMessage] = {}


def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate diagnostic code {msg.code.value}")
    REGISTRY[msg.code] = msg


def format_message(code: DiagnosticCode, **kwargs) -> str:
    msg = REGISTRY[code]
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(
            f"missing text key '{missing}' for {code.value} (needed by: {msg.text!r})"
        ) from None


class DeriveError(GeneratorError):
    """A declaration was rejected; generation of the whole module aborts."""

    def __init__(
        self,
        code: DiagnosticCode,
        message: str,
        span: Optional[Span] = None,
        filename: str = "<input>",
    ):
        self.code = code
        self.message = message
        self.span = span
        self.filename = filename
        super().__init__(self.location() + f": error[{code.value}]: {message}")

    @classmethod
    def create(
        cls,
        code: DiagnosticCode,
        node: Optional[ast.AST] = None,
        filename: str = "<input>",
        **kwargs,
    ) -> "DeriveError":
        """Build an error from the catalog text for ``code``."""
        return cls(code, format_message(code, **kwargs), span_of(node), filename)

    def location(self) -> str:
        if self.span is None:
            return self.filename
        return f"{self.filename}:{self.span.line}:{self.span.col}"

    def render(self, source: Optional[str] = None) -> List[str]:
        """Render the diagnostic as plain lines with a source excerpt."""
        lines = [f"{self.location()}: error[{self.code.value}]: {self.message}"]
        if source is None or self.span is None:
            return lines

        src_lines = source.splitlines()
        idx = self.span.line - 1
        if not 0 <= idx < len(src_lines):
            return lines

        text = src_lines[idx]
        gutter = str(self.span.line)
        if self.span.end_line == self.span.line:
            width = max(1, self.span.end_col - self.span.col)
        else:
            width = max(1, len(text) - self.span.col + 1)

        lines.append(f"{gutter} | {text}")
        lines.append(f"{' ' * len(gutter)} | {' ' * (self.span.col - 1)}{'^' * width}")
        return lines


#
# --- Catalog
#

_add(ErrorMessage(
    DiagnosticCode.NON_ENUM_TARGET,
    "target must be an enum or a SumType: `{name}` is {what}",
    "derive() can only be applied to Enum subclasses and SumType roots.",
))

_add(ErrorMessage(
    DiagnosticCode.MISPLACED_ATTRIBUTE,
    "attribute must be placed on variants, not on `{name}`",
    "cstr(...) configures a single variant; it has no meaning on the type.",
))

_add(ErrorMessage(
    DiagnosticCode.UNKNOWN_ARGUMENT,
    "invalid named argument `{key}`",
    "The only recognised key is `name`.",
))

_add(ErrorMessage(
    DiagnosticCode.TYPE_MISMATCH_LITERAL,
    "expected string literal for `{key}`",
    "Names must be plain str literals; numbers, bytes, f-strings and "
    "expressions are rejected.",
))

_add(ErrorMessage(
    DiagnosticCode.DUPLICATE_ARGUMENT,
    "duplicate named argument `{key}` on variant `{variant}`",
    "A key may appear once across all cstr(...) blocks of one variant.",
))

_add(ErrorMessage(
    DiagnosticCode.EMBEDDED_TERMINATOR_BYTE,
    "string cannot contain nul bytes",
    "The terminator byte is appended by the generator and may not occur "
    "inside a name.",
))

_add(ErrorMessage(
    DiagnosticCode.VARIANT_HAS_FIELDS,
    "variant `{variant}` cannot have fields",
    "FromCStr needs every variant to be constructible without data.",
))

_add(ErrorMessage(
    DiagnosticCode.MALFORMED_ATTRIBUTE,
    "{detail}",
    "Covers malformed cstr(...) blocks and derive(...) argument lists.",
))
