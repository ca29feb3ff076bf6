"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement and the
resolve pipeline that feeds them: extract, validate, synthesize.
"""

import ast
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Any, Optional
from pathlib import Path

from ... import __version__
from ...logging_config import get_logger
from .attributes import VariantConfigParser
from .config import GeneratorConfig
from .diagnostics import GeneratorError
from .names import ResolvedType, synthesize_binding
from .schema import (
    Capability,
    DeriveTarget,
    TypeSchema,
    extract_schema,
    find_derive_targets,
)
from .templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)


def resolve_type(
    target: DeriveTarget,
    tree: ast.Module,
    capability: Capability,
    filename: str = "<input>",
) -> ResolvedType:
    """
    Run one generation invocation: one type, one capability.

    Raises:
        DeriveError: On the first invalid construct
    """
    schema = extract_schema(
        target,
        tree,
        unit_variants_only=capability.requires_unit_variants,
        filename=filename,
    )

    parser = VariantConfigParser(filename)
    configs = [parser.parse(variant) for variant in schema.variants]

    bindings = tuple(
        synthesize_binding(variant, config, filename)
        for variant, config in zip(schema.variants, configs)
    )

    logger.debug("Resolved %s for %s", capability.value, schema.name)
    return ResolvedType(schema, capability, bindings)


def resolve_module(tree: ast.Module, filename: str = "<input>") -> List[ResolvedType]:
    """
    Resolve every derive target of a declaration module.

    Returns:
        One ResolvedType per (type, capability), in source order
    """
    resolved = []
    for target in find_derive_targets(tree, filename):
        for capability in target.capabilities:
            resolved.append(resolve_type(target, tree, capability, filename))

    logger.info("Resolved %d invocation(s) in %s", len(resolved), filename)
    return resolved


@dataclass
class GenerationContext:
    """Where the declarations come from."""

    source_module: str
    source_name: str = "<input>"
    version: str = __version__


@dataclass
class TypeBundle:
    """Everything generated for one declared type."""

    schema: TypeSchema
    forward: Optional[ResolvedType] = None
    reverse: Optional[ResolvedType] = None

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def bindings(self):
        # Both invocations resolve identical names
        return (self.forward or self.reverse).bindings


def group_by_type(resolved: List[ResolvedType]) -> List[TypeBundle]:
    """Group invocations per type, keeping first-seen order."""
    bundles: Dict[str, TypeBundle] = {}
    for item in resolved:
        bundle = bundles.setdefault(item.name, TypeBundle(item.schema))
        if item.capability is Capability.AS_CSTR:
            bundle.forward = item
        else:
            bundle.reverse = item
    return list(bundles.values())


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'python', 'c')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.py', '.h')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, resolved: List[ResolvedType], context: GenerationContext) -> str:
        """
        Generate a complete output file.

        Args:
            resolved: Invocations from resolve_module()
            context: Origin of the declarations

        Returns:
            Generated code as a string
        """
        pass

    @abstractmethod
    def generate_single_type(self, bundle: TypeBundle) -> str:
        """
        Generate the conversions of a single type.

        Args:
            bundle: The type and its requested capabilities

        Returns:
            Generated code for this type only
        """
        pass

    def validate_types(self, resolved: List[ResolvedType]) -> List[str]:
        """
        Report suspicious but valid declarations.

        Language generators may override this to add language-specific checks.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        for item in resolved:
            if not item.schema.variants:
                warnings.append(f"Type '{item.name}' declares no variants")

            # Names are not required to be unique; reverse mapping keeps the first
            if item.capability is Capability.FROM_CSTR:
                for first, shadowed, name in item.duplicate_names():
                    warnings.append(
                        f"{item.name}.{shadowed} resolves to {name!r} like "
                        f"{item.name}.{first}; {item.capability.value} returns "
                        f"{item.name}.{first} (first declared)"
                    )

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code ending with exactly one line ending
        """
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        while formatted_lines and not formatted_lines[-1]:
            formatted_lines.pop()

        line_ending = self.config.line_ending
        return line_ending.join(formatted_lines) + line_ending

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(
    generator: CodeGenerator,
    resolved: List[ResolvedType],
    context: GenerationContext,
) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        resolved: Invocations to emit
        context: Origin of the declarations

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        warnings = generator.validate_types(resolved)

        code = generator.generate(resolved, context)
        formatted_code = generator.format_code(code)

        bundles = group_by_type(resolved)
        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "source_module": context.source_module,
            "type_count": len(bundles),
            "variant_count": sum(len(b.schema.variants) for b in bundles),
            "forward_mappings": sum(1 for b in bundles if b.forward),
            "reverse_mappings": sum(1 for b in bundles if b.reverse),
        }

        logger.info(
            "Generated %s code for %d type(s) from %s",
            generator.language_name,
            len(bundles),
            context.source_name,
        )
        return GenerationResult(formatted_code, warnings, metadata)

    except (GeneratorError, TemplateError) as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)
