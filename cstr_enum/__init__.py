"""
cstr-enum: generated conversions between enum variants and C-string names.

Decorate a type with ``@derive(AsCStr, FromCStr)`` and run ``cstr-enum
generate`` on its module to get ``as_cstr``/``from_cstr`` implementations.
"""

__version__ = "0.1.0"

from .runtime import (
    AsCStr,
    CStrOptions,
    CStrParseError,
    FromCStr,
    SumType,
    cstr,
    derive,
)

__all__ = [
    "AsCStr",
    "CStrOptions",
    "CStrParseError",
    "FromCStr",
    "SumType",
    "cstr",
    "derive",
    "__version__",
]
