"""
C code generator implementation.

Generates a self-contained header: one tag enum per type, a static
NUL-terminated array per variant name, a switch-based forward lookup and a
strcmp-based reverse lookup.
"""

from typing import Dict, List, Any
from pathlib import Path

from ....logging_config import get_logger
from ....runtime import CStrParseError
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
from .naming import create_c_sanitizer

logger = get_logger(__name__)


class CGenerator(CodeGenerator):
    """Code generator for C headers."""

    def __init__(self, config: GeneratorConfig = None):
        """Initialize C generator with configuration."""
        super().__init__(config)

        self.sanitizer = create_c_sanitizer()

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "c"

    @property
    def file_extension(self) -> str:
        """Return C header file extension."""
        return ".h"

    def get_template_directory(self) -> Path:
        """Return the C templates directory."""
        return Path(__file__).parent / "templates"

    def generate(self, resolved: List[ResolvedType], context: GenerationContext) -> str:
        """Generate the complete header for all derive targets."""
        self.sanitizer.reset_used_names()

        guard = self._header_guard(context)
        types = [self.generate_single_type(b) for b in group_by_type(resolved)]

        context_data = {
            "header": (
                f"Generated by cstr-enum {context.version} "
                f"from {context.source_name}. Do not edit."
            ),
            "guard": guard,
            "types": types,
        }

        return self.render_template("header.h.j2", context_data)

    def generate_single_type(self, bundle: TypeBundle) -> str:
        """Generate the enum, name arrays and lookups of one type."""
        if not bundle.schema.variants:
            raise GeneratorError(
                f"Type '{bundle.name}' declares no variants; C enums cannot be empty"
            )

        return self.render_template("type.h.j2", self._type_data(bundle))

    def _type_data(self, bundle: TypeBundle) -> Dict[str, Any]:
        enum_name = self.sanitizer.sanitize_name(bundle.name, NamingCase.PRESERVE)

        tags = []
        arms = []
        for binding in bundle.bindings:
            tag = self.sanitizer.sanitize_name(
                f"{bundle.name}_{binding.variant}", NamingCase.SCREAMING_SNAKE
            )
            symbol = self.sanitizer.sanitize_name(
                f"{bundle.name}_{binding.variant}_name", NamingCase.SNAKE_CASE
            )
            tags.append(tag)
            arms.append(
                {
                    "tag": tag,
                    "symbol": symbol,
                    "size": len(binding.value),
                    "content": binding.content,
                }
            )

        data = {
            "type_name": bundle.name,
            "enum_name": enum_name,
            "tags": tags,
            "arms": arms,
            "forward": None,
            "reverse": None,
            "add_comments": self.config.add_comments,
        }

        if bundle.forward:
            data["forward"] = self._function_name(bundle, self.config.forward_suffix)

        if bundle.reverse:
            data["reverse"] = self._function_name(bundle, self.config.reverse_suffix)
            data["error_symbol"] = self.sanitizer.sanitize_name(
                f"{bundle.name}_parse_error", NamingCase.SNAKE_CASE
            )
            data["error_message"] = str(CStrParseError(bundle.name)).encode("utf-8")

        logger.debug("Prepared %d tag(s) for %s", len(tags), bundle.name)
        return data

    def _function_name(self, bundle: TypeBundle, suffix: str) -> str:
        try:
            case = NamingCase(self.config.function_case)
        except ValueError:
            raise GeneratorError(
                f"Invalid function_case: {self.config.function_case}"
            ) from None
        return self.sanitizer.sanitize_name(f"{bundle.name}_{suffix}", case)

    def _header_guard(self, context: GenerationContext) -> str:
        if self.config.header_guard:
            return self.config.header_guard

        if self.config.output_file:
            base = Path(self.config.output_file).name
        else:
            base = f"{context.source_module}_cstr.h"
        return self.sanitizer.sanitize_name(base, NamingCase.SCREAMING_SNAKE)


def create_c_generator(config: GeneratorConfig = None) -> CGenerator:
    """Create a C generator with default configuration."""
    if config is None:
        from ...core.config import load_config

        config = load_config("c")

    return CGenerator(config)
