"""
Runtime support for generated cstr modules.

The markers in this module only annotate declarations; the generator reads
them from source and never imports the declaration module. At runtime they
are inert so declaration modules stay importable.
"""

from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class AsCStr(Protocol):
    """Conversion to a NUL-terminated byte string."""

    def as_cstr(self) -> bytes:
        """Return the static name of this variant, terminator included."""
        ...


@runtime_checkable
class FromCStr(Protocol):
    """Conversion from a byte string (without terminator) to a variant."""

    @staticmethod
    def from_cstr(data: bytes) -> Any:
        """Return the variant named by ``data`` or raise ``CStrParseError``."""
        ...


class CStrParseError(ValueError):
    """Raised by generated reverse mappings when no variant matches."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"unexpected string while parsing for {type_name} variant")


class SumType:
    """Base marker for sum types whose variants are its direct subclasses."""

    __slots__ = ()


class CStrOptions:
    """Per-variant configuration block, as written in the declaration."""

    def __init__(self, **options: Any):
        self.options = options

    def __call__(self, cls: T) -> T:
        # Used as a class decorator on sum-type variants.
        return cls

    def __repr__(self) -> str:
        args = ", ".join(f"{key}={value!r}" for key, value in self.options.items())
        return f"cstr({args})"


def cstr(**options: Any) -> CStrOptions:
    """Configure one variant, e.g. ``cstr(name="pork")``."""
    return CStrOptions(**options)


def derive(*capabilities: type):
    """Request generated capabilities (``AsCStr``, ``FromCStr``) for a type."""

    def decorator(cls: T) -> T:
        return cls

    return decorator
