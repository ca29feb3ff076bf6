"""
C code generator module.

Generates a header with a tag enum, static name arrays and lookup functions.
"""

from .generator import CGenerator, create_c_generator
from .naming import create_c_sanitizer

__all__ = [
    "CGenerator",
    "create_c_generator",
    "create_c_sanitizer",
]
