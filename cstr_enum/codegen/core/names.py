"""
Resolved variant names.

A variant's name is its override when one is configured, else its
identifier verbatim, followed by exactly one terminator byte.
"""

from dataclasses import dataclass
from typing import List, Tuple

from ...logging_config import get_logger
from .attributes import VariantConfig
from .diagnostics import DeriveError, DiagnosticCode
from .schema import Capability, TypeSchema, VariantSchema

logger = get_logger(__name__)

TERMINATOR = b"\x00"


@dataclass(frozen=True)
class NameBinding:
    """A variant and its terminated name."""

    variant: str
    value: bytes

    def __post_init__(self):
        if not self.value.endswith(TERMINATOR) or TERMINATOR in self.value[:-1]:
            raise ValueError(
                f"name of {self.variant} must end with exactly one terminator: "
                f"{self.value!r}"
            )

    @property
    def content(self) -> bytes:
        """The name without its terminator, as callers of from_cstr pass it."""
        return self.value[:-1]


@dataclass(frozen=True)
class ResolvedType:
    """Result of one generation invocation: a type, a capability, its names."""

    schema: TypeSchema
    capability: Capability
    bindings: Tuple[NameBinding, ...]

    @property
    def name(self) -> str:
        return self.schema.name

    def duplicate_names(self) -> List[Tuple[str, str, bytes]]:
        """
        Find variants sharing a resolved name.

        Returns:
            (first declared variant, shadowed variant, name) triples
        """
        first_by_name = {}
        duplicates = []
        for binding in self.bindings:
            first = first_by_name.setdefault(binding.value, binding.variant)
            if first != binding.variant:
                duplicates.append((first, binding.variant, binding.content))
        return duplicates


def synthesize_binding(
    variant: VariantSchema, config: VariantConfig, filename: str = "<input>"
) -> NameBinding:
    """
    Compute the terminated name of a variant.

    Raises:
        DeriveError: EmbeddedTerminatorByte when the override contains one
    """
    if config.name is not None:
        text = config.name
        node = config.name_node
    else:
        text = variant.name
        node = variant.node

    if "\x00" in text:
        raise DeriveError.create(
            DiagnosticCode.EMBEDDED_TERMINATOR_BYTE, node, filename
        )

    # surrogatepass keeps every str literal encodable
    value = text.encode("utf-8", "surrogatepass") + TERMINATOR
    return NameBinding(variant.name, value)
