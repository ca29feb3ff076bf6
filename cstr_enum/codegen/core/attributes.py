"""
Per-variant configuration parsing.

Turns the raw ``cstr(...)`` blocks of one variant into a typed
``VariantConfig``. Grammar checks and key semantics are separate steps so
new keys only need a new entry in ``VariantConfigParser.handlers``.
"""

import ast
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ...logging_config import get_logger
from .diagnostics import DeriveError, DiagnosticCode
from .schema import VariantSchema

logger = get_logger(__name__)


@dataclass
class VariantConfig:
    """Validated configuration of a single variant."""

    name: Optional[str] = None
    # The literal the name came from, for diagnostics
    name_node: Optional[ast.expr] = None


KeyHandler = Callable[[VariantConfig, ast.keyword, VariantSchema], None]


class VariantConfigParser:
    """Parses cstr(...) blocks into VariantConfig records."""

    def __init__(self, filename: str = "<input>"):
        self.filename = filename
        self.handlers: Dict[str, KeyHandler] = {
            "name": self._parse_name,
        }

    def parse(self, variant: VariantSchema) -> VariantConfig:
        """
        Parse every block of a variant, in source order.

        Raises:
            DeriveError: MalformedAttribute, UnknownArgument,
                DuplicateArgument or TypeMismatchLiteral
        """
        config = VariantConfig()
        for block in variant.attributes:
            for keyword in self._keywords(block):
                handler = self.handlers.get(keyword.arg)
                if handler is None:
                    raise DeriveError.create(
                        DiagnosticCode.UNKNOWN_ARGUMENT,
                        keyword,
                        self.filename,
                        key=keyword.arg,
                    )
                handler(config, keyword, variant)

        if config.name is not None:
            logger.debug("Variant %s renamed to %r", variant.name, config.name)
        return config

    def _keywords(self, block: ast.expr) -> list[ast.keyword]:
        """Check the block grammar and return its KEY = VALUE pairs."""
        if not isinstance(block, ast.Call):
            raise DeriveError.create(
                DiagnosticCode.MALFORMED_ATTRIBUTE,
                block,
                self.filename,
                detail="missing arguments: expected `cstr(...)`",
            )
        if block.args:
            raise DeriveError.create(
                DiagnosticCode.MALFORMED_ATTRIBUTE,
                block.args[0],
                self.filename,
                detail="expected named argument (KEY = VALUE)",
            )
        for keyword in block.keywords:
            if keyword.arg is None:
                raise DeriveError.create(
                    DiagnosticCode.MALFORMED_ATTRIBUTE,
                    keyword,
                    self.filename,
                    detail="expected named argument (KEY = VALUE)",
                )
        return block.keywords

    def _check_not_set(
        self, value: Optional[object], keyword: ast.keyword, variant: VariantSchema
    ) -> None:
        if value is not None:
            raise DeriveError.create(
                DiagnosticCode.DUPLICATE_ARGUMENT,
                keyword,
                self.filename,
                key=keyword.arg,
                variant=variant.name,
            )

    def _parse_name(
        self, config: VariantConfig, keyword: ast.keyword, variant: VariantSchema
    ) -> None:
        self._check_not_set(config.name, keyword, variant)

        literal = keyword.value
        if not (isinstance(literal, ast.Constant) and isinstance(literal.value, str)):
            raise DeriveError.create(
                DiagnosticCode.TYPE_MISMATCH_LITERAL,
                literal,
                self.filename,
                key=keyword.arg,
            )

        config.name = literal.value
        config.name_node = literal


def parse_variant_config(
    variant: VariantSchema, filename: str = "<input>"
) -> VariantConfig:
    """Convenience function to parse one variant's configuration."""
    return VariantConfigParser(filename).parse(variant)
