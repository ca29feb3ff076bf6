"""
cstr-enum Code Generation Module

Generates variant/name conversion code from declaration modules.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..logging_config import get_logger
from ..utils import load_source, module_name_for, parse_source
from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    list_all_language_info,
    list_supported_languages,
)
from .core.generator import (
    CodeGenerator,
    GenerationContext,
    GenerationResult,
    generate_code,
    resolve_module,
)
from .core.diagnostics import DeriveError, DiagnosticCode, GeneratorError
from .core.config import (
    ConfigError,
    GeneratorConfig,
    ConfigManager,
    get_config_manager,
    load_config,
)

logger = get_logger(__name__)

ConfigInput = Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]]


def generate_from_source(
    source: str,
    filename: str = "<input>",
    language: str = "python",
    config: ConfigInput = None,
    source_module: Optional[str] = None,
) -> GenerationResult:
    """
    Generate conversion code from declaration source text.

    Args:
        source: Python source of the declaration module
        filename: Name used in diagnostics
        language: Target language name or alias
        config: Generator configuration object, dict or file path
        source_module: Import path of the declarations, overrides the config

    Returns:
        GenerationResult with generated code

    Raises:
        SourceLoaderError: If the source is not valid Python
        DeriveError: On the first invalid declaration; nothing is emitted
        RegistryError: If the language or configuration is unusable
    """
    tree = parse_source(source, filename)
    resolved = resolve_module(tree, filename)

    generator = get_generator(language, config)

    module = source_module or generator.config.source_module
    if module is None:
        module = module_name_for(filename)

    context = GenerationContext(source_module=module, source_name=Path(filename).name)
    result = generate_code(generator, resolved, context)

    config_warnings = get_config_manager().validate_config(
        generator.config, generator.language_name
    )
    result.warnings = config_warnings + result.warnings
    return result


def generate_from_file(
    path: Union[str, Path],
    language: str = "python",
    config: ConfigInput = None,
    source_module: Optional[str] = None,
) -> GenerationResult:
    """
    Generate conversion code from a declaration file.

    Args:
        path: Path of the declaration module
        language: Target language name or alias
        config: Generator configuration object, dict or file path
        source_module: Import path of the declarations

    Returns:
        GenerationResult with generated code
    """
    filename, source = load_source(path)
    logger.debug("Generating %s code from %s", language, filename)
    return generate_from_source(source, filename, language, config, source_module)


# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GenerationContext",
    "GenerationResult",
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "DeriveError",
    "DiagnosticCode",
    "GeneratorError",
    "generate_code",
    "generate_from_source",
    "generate_from_file",
    "get_generator",
    "get_language_info",
    "list_all_language_info",
    "list_supported_languages",
    "load_config",
    "resolve_module",
]
