"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
import re
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, fields


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    output_file: Optional[str] = None
    # Import path of the declaration module, defaults to the source file stem
    source_module: Optional[str] = None

    # Naming of emitted functions: <type>_<suffix>
    function_case: str = "snake"
    forward_suffix: str = "as_cstr"
    reverse_suffix: str = "from_cstr"

    # Bind the generated functions onto the declared types (Python only)
    attach_methods: bool = True

    # C only; defaults to the output file name
    header_guard: Optional[str] = None

    # Additional metadata
    add_comments: bool = True
    line_ending: str = "\n"


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["python"] = {
            "function_case": "snake",
            "attach_methods": True,
            "add_comments": True,
        }

        self._configs["c"] = {
            "function_case": "snake",
            "attach_methods": False,
            "add_comments": True,
        }

    def get_config(
        self,
        language: Optional[str] = None,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        base_config = dict(self._configs.get((language or "").lower(), {}))

        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}")
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        unknown = sorted(set(config_dict) - known_fields)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        return GeneratorConfig(**config_dict)

    def validate_config(self, config: GeneratorConfig, language: str) -> list[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings/errors
        """
        warnings = []

        valid_cases = {"pascal", "camel", "snake", "screaming_snake", "preserve"}

        if config.function_case not in valid_cases:
            warnings.append(f"Invalid function_case: {config.function_case}")

        for key in ("forward_suffix", "reverse_suffix"):
            value = getattr(config, key)
            if not value or not re.fullmatch(r"[A-Za-z0-9_]+", value):
                warnings.append(f"Invalid {key}: {value!r}")

        if config.forward_suffix == config.reverse_suffix:
            warnings.append("forward_suffix and reverse_suffix must differ")

        if config.source_module:
            if not all(part.isidentifier() for part in config.source_module.split(".")):
                warnings.append(f"Invalid source_module: {config.source_module}")

        if language == "c":
            if config.attach_methods:
                warnings.append("attach_methods has no effect for C output")
            guard = config.header_guard
            if guard and not guard.isidentifier():
                warnings.append(f"Invalid C header guard: {guard}")

        if config.line_ending not in {"\n", "\r\n"}:
            warnings.append(f"Invalid line_ending: {config.line_ending!r}")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: Optional[str] = None,
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)

