"""
Python code generator module.

Generates match-based ``as_cstr``/``from_cstr`` functions for derive targets.
"""

from .generator import PythonGenerator, create_python_generator
from .naming import create_python_sanitizer

__all__ = [
    # Generator
    "PythonGenerator",
    "create_python_generator",
    # Naming
    "create_python_sanitizer",
]
