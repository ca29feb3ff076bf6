"""
Language-specific code generators.

This module contains generators for different target languages.
"""

from .python import PythonGenerator, create_python_generator
from .c import CGenerator, create_c_generator

__all__ = [
    "PythonGenerator",
    "create_python_generator",
    "CGenerator",
    "create_c_generator",
]
