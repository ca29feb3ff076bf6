"""
Python code generator implementation.

Generates a companion module with match-based conversion functions for
every derive target of a declaration module.
"""

from typing import Dict, List, Any
from pathlib import Path

from ....logging_config import get_logger
from ...core.config import GeneratorConfig
from ...core.diagnostics import GeneratorError
from ...core.generator import (
    CodeGenerator,
    GenerationContext,
    TypeBundle,
    group_by_type,
)
from ...core.names import ResolvedType
from ...core.naming import NamingCase
from ...core.schema import TypeShape
from .naming import create_python_sanitizer

logger = get_logger(__name__)

RUNTIME_MODULE = "cstr_enum.runtime"


class PythonGenerator(CodeGenerator):
    """Code generator for Python conversion modules."""

    def __init__(self, config: GeneratorConfig = None):
        """Initialize Python generator with configuration."""
        super().__init__(config)

        self.sanitizer = create_python_sanitizer()

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    def generate(self, resolved: List[ResolvedType], context: GenerationContext) -> str:
        """Generate the complete module for all derive targets."""
        self.sanitizer.reset_used_names()

        bundles = group_by_type(resolved)
        source_names = self._source_names(bundles)
        for name in source_names:
            self.sanitizer.add_used_name(name)

        functions = []
        exports = []
        attachments = []

        for bundle in bundles:
            functions.append(self.generate_single_type(bundle))

            if bundle.forward:
                name = self._function_name(bundle, self.config.forward_suffix)
                exports.append(name)
                attachments.append(f"{bundle.name}.as_cstr = {name}")

            if bundle.reverse:
                name = self._function_name(bundle, self.config.reverse_suffix)
                exports.append(name)
                attachments.append(f"{bundle.name}.from_cstr = staticmethod({name})")

        context_data = {
            "header": (
                f"Generated by cstr-enum {context.version} "
                f"from {context.source_name}. Do not edit."
            ),
            "imports": self._get_imports(bundles, context, source_names),
            "exports": exports,
            "functions": functions,
            "attachments": attachments if self.config.attach_methods else [],
        }

        return self.render_template("module.py.j2", context_data)

    def generate_single_type(self, bundle: TypeBundle) -> str:
        """Generate the requested conversion functions of one type."""
        parts = []

        if bundle.forward:
            parts.append(
                self.render_template("as_cstr.py.j2", self._forward_data(bundle))
            )

        if bundle.reverse:
            parts.append(
                self.render_template("from_cstr.py.j2", self._reverse_data(bundle))
            )

        logger.debug("Rendered %d function(s) for %s", len(parts), bundle.name)
        return "\n\n\n".join(parts)

    def _function_name(self, bundle: TypeBundle, suffix: str) -> str:
        try:
            case = NamingCase(self.config.function_case)
        except ValueError:
            raise GeneratorError(
                f"Invalid function_case: {self.config.function_case}"
            ) from None
        return self.sanitizer.sanitize_name(f"{bundle.name}_{suffix}", case)

    def _variant_ref(self, bundle: TypeBundle, variant: str) -> str:
        """Expression naming a variant: a member or a variant class."""
        if bundle.schema.shape is TypeShape.ENUM:
            return f"{bundle.name}.{variant}"
        return variant

    def _forward_data(self, bundle: TypeBundle) -> Dict[str, Any]:
        arms = []
        for binding in bundle.forward.bindings:
            ref = self._variant_ref(bundle, binding.variant)
            # Class patterns match the variant type and ignore its fields
            if bundle.schema.shape is TypeShape.SUM:
                ref = f"{ref}()"
            arms.append({"pattern": ref, "value": binding.value})

        return {
            "function_name": self._function_name(bundle, self.config.forward_suffix),
            "type_name": bundle.name,
            "arms": arms,
            "add_comments": self.config.add_comments,
        }

    def _reverse_data(self, bundle: TypeBundle) -> Dict[str, Any]:
        arms = []
        for binding in bundle.reverse.bindings:
            result = self._variant_ref(bundle, binding.variant)
            if bundle.schema.shape is TypeShape.SUM:
                result = f"{result}()"
            arms.append({"content": binding.content, "result": result})

        return {
            "function_name": self._function_name(bundle, self.config.reverse_suffix),
            "type_name": bundle.name,
            "arms": arms,
            "add_comments": self.config.add_comments,
        }

    def _source_names(self, bundles: List[TypeBundle]) -> List[str]:
        """Names the generated module imports from the declaration module."""
        names = []
        for bundle in bundles:
            names.append(bundle.name)
            if bundle.schema.shape is TypeShape.SUM:
                names.extend(v.name for v in bundle.schema.variants)
        return list(dict.fromkeys(names))

    def _get_imports(
        self,
        bundles: List[TypeBundle],
        context: GenerationContext,
        source_names: List[str],
    ) -> List[str]:
        imports = []

        if any(bundle.forward for bundle in bundles):
            imports.append("from typing import assert_never")

        if any(bundle.reverse for bundle in bundles):
            imports.append(f"from {RUNTIME_MODULE} import CStrParseError")

        if source_names:
            imports.append(
                f"from {context.source_module} import {', '.join(source_names)}"
            )

        return imports

    def validate_types(self, resolved: List[ResolvedType]) -> List[str]:
        """Validate derive targets for Python generation."""
        warnings = super().validate_types(resolved)

        for item in resolved:
            if item.schema.shape is not TypeShape.ENUM:
                continue
            discriminants = {}
            for variant in item.schema.variants:
                first = discriminants.setdefault(variant.discriminant, variant.name)
                if first != variant.name and variant.discriminant != "auto()":
                    warnings.append(
                        f"{item.name}.{variant.name} has the same value as "
                        f"{item.name}.{first}; Python makes it an alias"
                    )

        return list(dict.fromkeys(warnings))


def create_python_generator(config: GeneratorConfig = None) -> PythonGenerator:
    """Create a Python generator with default configuration."""
    if config is None:
        from ...core.config import load_config

        config = load_config("python")

    return PythonGenerator(config)
