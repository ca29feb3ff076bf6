"""
Core code generation components.

Provides the resolve pipeline, base classes and utilities used by all
language generators.
"""

from .diagnostics import DeriveError, DiagnosticCode, GeneratorError, Span
from .generator import (
    CodeGenerator,
    GenerationContext,
    GenerationResult,
    TypeBundle,
    generate_code,
    group_by_type,
    resolve_module,
    resolve_type,
)
from .schema import (
    Capability,
    DeriveTarget,
    FieldKind,
    TypeSchema,
    TypeShape,
    VariantSchema,
    extract_schema,
    find_derive_targets,
)
from .attributes import VariantConfig, VariantConfigParser, parse_variant_config
from .names import NameBinding, ResolvedType, synthesize_binding
from .naming import NameSanitizer, NamingCase
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Diagnostics
    "DeriveError",
    "DiagnosticCode",
    "GeneratorError",
    "Span",
    # Base generator interface and pipeline
    "CodeGenerator",
    "GenerationContext",
    "GenerationResult",
    "TypeBundle",
    "generate_code",
    "group_by_type",
    "resolve_module",
    "resolve_type",
    # Declaration model
    "Capability",
    "DeriveTarget",
    "FieldKind",
    "TypeSchema",
    "TypeShape",
    "VariantSchema",
    "extract_schema",
    "find_derive_targets",
    # Variant configuration and names
    "VariantConfig",
    "VariantConfigParser",
    "parse_variant_config",
    "NameBinding",
    "ResolvedType",
    "synthesize_binding",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
