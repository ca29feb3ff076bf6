"""Utility functions for loading declaration modules.

This module reads Python source files with proper error handling and
derives the import path generated code uses to reach the declarations.
"""

import ast
from pathlib import Path

from .logging_config import get_logger

logger = get_logger(__name__)


class SourceLoaderError(Exception):
    """Custom exception for source loading errors."""

    pass


def load_source(file_path: str | Path) -> tuple[str, str]:
    """Load a declaration module from a local file.

    Args:
        file_path: Path to the Python source file.

    Returns:
        Tuple of (file name for diagnostics, source text).

    Raises:
        FileNotFoundError: If file doesn't exist.
        SourceLoaderError: If file cannot be read or decoded.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load declarations from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".py":
        logger.warning(f"File does not have .py extension: {file_path}")

    try:
        source = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        logger.error(f"File {file_path} is not valid UTF-8: {e}")
        raise SourceLoaderError(f"File {file_path} is not valid UTF-8: {e}") from e
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise SourceLoaderError(f"Error reading file {file_path}: {e}") from e

    logger.info(f"Loaded declarations from {file_path}")
    return str(file_path), source


def parse_source(source: str, filename: str = "<input>") -> ast.Module:
    """Parse declaration source without executing it.

    Raises:
        SourceLoaderError: If the source is not valid Python.
    """
    try:
        return ast.parse(source, filename=filename)
    except SyntaxError as e:
        logger.error(f"Invalid Python in {filename}: {e}")
        raise SourceLoaderError(
            f"Invalid Python in {filename}:{e.lineno}: {e.msg}"
        ) from e


def module_name_for(file_path: str | Path) -> str:
    """Return the import name of a declaration file (its stem).

    Raises:
        SourceLoaderError: If the stem is not a valid module name.
    """
    stem = Path(file_path).stem
    if not stem.isidentifier():
        raise SourceLoaderError(
            f"Cannot derive a module name from {file_path}; pass one explicitly"
        )
    return stem
