"""
Schema extraction for derive targets.

Reads a parsed declaration module and turns one derive-decorated type into
an ordered variant list that generators can work with consistently. The
declaration module is never imported.
"""

import ast
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set, Tuple

from ...logging_config import get_logger
from .diagnostics import DeriveError, DiagnosticCode, Span, span_of

logger = get_logger(__name__)

ENUM_BASES = {"Enum", "IntEnum", "StrEnum", "ReprEnum"}
FLAG_BASES = {"Flag", "IntFlag"}
SUM_TYPE_BASE = "SumType"
ATTRIBUTE_NAME = "cstr"
DERIVE_NAME = "derive"
ANNOTATED_NAME = "Annotated"
CLASSVAR_NAME = "ClassVar"
NON_MEMBER_WRAPPERS = {"nonmember", "property", "staticmethod", "classmethod"}


class FieldKind(Enum):
    """Shape of the data a variant carries."""

    NONE = "none"
    POSITIONAL = "positional"
    NAMED = "named"


class TypeShape(Enum):
    """How a sum type is spelled in the declaration module."""

    ENUM = "enum"  # Enum subclass, members are variants
    SUM = "sum"  # SumType root, direct subclasses are variants


class Capability(Enum):
    """Conversions that can be requested with derive(...)."""

    AS_CSTR = "AsCStr"
    FROM_CSTR = "FromCStr"

    @property
    def requires_unit_variants(self) -> bool:
        return self is Capability.FROM_CSTR


@dataclass
class VariantSchema:
    """A single variant of a sum type."""

    name: str
    field_kind: FieldKind = FieldKind.NONE
    # Raw cstr(...) blocks in source order
    attributes: List[ast.expr] = field(default_factory=list)
    span: Optional[Span] = None
    # Source text of an enum member's value; never used for naming
    discriminant: Optional[str] = None
    node: Optional[ast.AST] = field(default=None, repr=False, compare=False)

    @property
    def is_unit(self) -> bool:
        return self.field_kind is FieldKind.NONE


@dataclass
class TypeSchema:
    """Ordered variants of one sum type."""

    name: str
    shape: TypeShape
    variants: List[VariantSchema] = field(default_factory=list)
    span: Optional[Span] = None

    def get_variant(self, name: str) -> Optional[VariantSchema]:
        """Get variant by name."""
        for variant in self.variants:
            if variant.name == name:
                return variant
        return None


@dataclass
class DeriveTarget:
    """A top-level definition decorated with derive(...)."""

    node: ast.stmt
    capabilities: Tuple[Capability, ...]

    @property
    def name(self) -> str:
        return self.node.name


def _dotted_tail(node: ast.AST) -> Optional[str]:
    """Return the last component of a dotted name (``a.b.C`` -> ``C``)."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _callee_tail(node: ast.AST) -> Optional[str]:
    return _dotted_tail(node.func if isinstance(node, ast.Call) else node)


def is_cstr_block(node: ast.AST) -> bool:
    """Check whether an expression is a cstr configuration block."""
    return _callee_tail(node) == ATTRIBUTE_NAME


def _malformed(node: ast.AST, filename: str, detail: str) -> DeriveError:
    return DeriveError.create(
        DiagnosticCode.MALFORMED_ATTRIBUTE, node, filename, detail=detail
    )


def _parse_derive(
    decorator: ast.expr, seen: List[Capability], filename: str
) -> List[Capability]:
    """Parse the capability list of one derive(...) decorator."""
    if not isinstance(decorator, ast.Call):
        raise _malformed(
            decorator, filename, "missing arguments: expected `derive(AsCStr, ...)`"
        )
    if decorator.keywords:
        raise _malformed(
            decorator.keywords[0],
            filename,
            "derive() takes capability names, not keyword arguments",
        )
    if not decorator.args:
        raise _malformed(decorator, filename, "derive() needs at least one capability")

    capabilities = []
    for arg in decorator.args:
        try:
            capability = Capability(_dotted_tail(arg))
        except ValueError:
            raise _malformed(
                arg, filename, f"unknown capability `{ast.unparse(arg)}`"
            ) from None
        if capability in seen or capability in capabilities:
            raise _malformed(
                arg,
                filename,
                f"capability `{capability.value}` requested more than once",
            )
        capabilities.append(capability)
    return capabilities


def find_derive_targets(
    tree: ast.Module, filename: str = "<input>"
) -> List[DeriveTarget]:
    """
    Find every top-level definition decorated with derive(...).

    Several derive decorators on one definition are merged in order.

    Returns:
        Targets in source order
    """
    targets = []
    definitions = (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)

    for stmt in tree.body:
        if not isinstance(stmt, definitions):
            continue

        capabilities: List[Capability] = []
        for decorator in stmt.decorator_list:
            if _callee_tail(decorator) == DERIVE_NAME:
                capabilities.extend(_parse_derive(decorator, capabilities, filename))

        if capabilities:
            logger.debug(
                "Found derive target %s: %s",
                stmt.name,
                ", ".join(c.value for c in capabilities),
            )
            targets.append(DeriveTarget(stmt, tuple(capabilities)))

    return targets


def _shape_of(node: ast.ClassDef) -> Optional[TypeShape]:
    base_names = {_dotted_tail(base) for base in node.bases}
    if base_names & ENUM_BASES:
        return TypeShape.ENUM
    if SUM_TYPE_BASE in base_names:
        return TypeShape.SUM
    return None


def _annotated_blocks(annotation: ast.expr) -> List[ast.expr]:
    """Return the cstr blocks in the metadata of an Annotated[...] annotation."""
    if not isinstance(annotation, ast.Subscript):
        return []
    if _dotted_tail(annotation.value) != ANNOTATED_NAME:
        return []
    if not isinstance(annotation.slice, ast.Tuple):
        return []
    return [meta for meta in annotation.slice.elts[1:] if is_cstr_block(meta)]


def _is_dunder(name: str) -> bool:
    return (
        len(name) > 4
        and name[:2] == name[-2:] == "__"
        and name[2] != "_"
        and name[-3] != "_"
    )


def _is_sunder(name: str) -> bool:
    return (
        len(name) > 2
        and name[0] == name[-1] == "_"
        and name[1] != "_"
        and name[-2] != "_"
    )


def _is_private(name: str) -> bool:
    # Names written as __x are mangled to _Cls__x, which Enum leaves alone
    return name.startswith("__") and not name.endswith("__")


def _is_member_name(name: str, ignored: Set[str]) -> bool:
    if name in ignored:
        return False
    return not (_is_dunder(name) or _is_sunder(name) or _is_private(name))


def _is_member_value(value: ast.expr) -> bool:
    if isinstance(value, ast.Lambda):
        return False
    return _callee_tail(value) not in NON_MEMBER_WRAPPERS


def _ignored_names(node: ast.ClassDef) -> Set[str]:
    """Names listed in the enum's _ignore_ setting."""
    for stmt in node.body:
        if not isinstance(stmt, ast.Assign):
            continue
        if not any(
            isinstance(t, ast.Name) and t.id == "_ignore_" for t in stmt.targets
        ):
            continue
        value = stmt.value
        if isinstance(value, ast.Constant) and isinstance(value.value, str):
            return set(value.value.replace(",", " ").split())
        if isinstance(value, (ast.List, ast.Tuple)):
            return {
                elt.value
                for elt in value.elts
                if isinstance(elt, ast.Constant) and isinstance(elt.value, str)
            }
    return set()


def _unpack_targets(
    target: ast.expr, value: ast.expr
) -> List[Tuple[ast.Name, str]]:
    """Pair each name bound by an assignment target with its value's source."""
    if isinstance(target, ast.Name):
        return [(target, ast.unparse(value))]
    if not isinstance(target, (ast.Tuple, ast.List)):
        return []

    pairs = []
    values = value.elts if isinstance(value, (ast.Tuple, ast.List)) else None
    for index, element in enumerate(target.elts):
        if values is not None and len(values) == len(target.elts):
            pairs.extend(_unpack_targets(element, values[index]))
        elif isinstance(element, ast.Name):
            pairs.append((element, f"{ast.unparse(value)}[{index}]"))
    return pairs


def _enum_variants(node: ast.ClassDef) -> List[VariantSchema]:
    variants = []
    ignored = _ignored_names(node)

    for stmt in node.body:
        if isinstance(stmt, ast.Assign):
            if not _is_member_value(stmt.value):
                continue
            for target in stmt.targets:
                for name_node, discriminant in _unpack_targets(target, stmt.value):
                    if not _is_member_name(name_node.id, ignored):
                        continue
                    variants.append(
                        VariantSchema(
                            name=name_node.id,
                            span=span_of(name_node),
                            discriminant=discriminant,
                            node=name_node,
                        )
                    )

        elif isinstance(stmt, ast.AnnAssign):
            # Annotation without a value does not create a member
            if stmt.value is None or not isinstance(stmt.target, ast.Name):
                continue
            if not _is_member_name(stmt.target.id, ignored):
                continue
            if not _is_member_value(stmt.value):
                continue
            variants.append(
                VariantSchema(
                    name=stmt.target.id,
                    attributes=_annotated_blocks(stmt.annotation),
                    span=span_of(stmt.target),
                    discriminant=ast.unparse(stmt.value),
                    node=stmt.target,
                )
            )

    return variants


def _is_classvar(annotation: ast.expr) -> bool:
    if isinstance(annotation, ast.Subscript):
        annotation = annotation.value
    return _dotted_tail(annotation) == CLASSVAR_NAME


def _class_field_kind(node: ast.ClassDef) -> FieldKind:
    """Classify the data carried by a sum-type variant class."""
    for stmt in node.body:
        if (
            isinstance(stmt, ast.AnnAssign)
            and isinstance(stmt.target, ast.Name)
            and not _is_classvar(stmt.annotation)
        ):
            return FieldKind.NAMED

    for stmt in node.body:
        if not isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        if stmt.name != "__init__":
            continue
        args = stmt.args
        positional = args.posonlyargs + args.args
        if len(positional) > 1 or args.vararg:
            return FieldKind.POSITIONAL
        if args.kwonlyargs or args.kwarg:
            return FieldKind.NAMED

    return FieldKind.NONE


def _sum_variants(root: ast.ClassDef, tree: ast.Module) -> List[VariantSchema]:
    variants = []

    for stmt in tree.body:
        if not isinstance(stmt, ast.ClassDef) or stmt is root:
            continue
        if not any(_dotted_tail(base) == root.name for base in stmt.bases):
            continue
        variants.append(
            VariantSchema(
                name=stmt.name,
                field_kind=_class_field_kind(stmt),
                attributes=[d for d in stmt.decorator_list if is_cstr_block(d)],
                span=span_of(stmt),
                node=stmt,
            )
        )

    return variants


def extract_schema(
    target: DeriveTarget,
    tree: ast.Module,
    unit_variants_only: bool = False,
    filename: str = "<input>",
) -> TypeSchema:
    """
    Extract the variant schema of a derive target.

    Args:
        target: Definition found by find_derive_targets()
        tree: The whole declaration module (sum-type variants live there)
        unit_variants_only: Reject variants that carry fields
        filename: File name used in diagnostics

    Returns:
        TypeSchema with variants in declaration order

    Raises:
        DeriveError: MisplacedAttribute, NonEnumTarget or VariantHasFields
    """
    node = target.node

    for decorator in node.decorator_list:
        if is_cstr_block(decorator):
            raise DeriveError.create(
                DiagnosticCode.MISPLACED_ATTRIBUTE, decorator, filename, name=node.name
            )

    if not isinstance(node, ast.ClassDef):
        raise DeriveError.create(
            DiagnosticCode.NON_ENUM_TARGET,
            node,
            filename,
            name=node.name,
            what="a function",
        )

    shape = _shape_of(node)
    if shape is None:
        base_names = {_dotted_tail(base) for base in node.bases}
        what = "a Flag" if base_names & FLAG_BASES else "not a sum type"
        raise DeriveError.create(
            DiagnosticCode.NON_ENUM_TARGET, node, filename, name=node.name, what=what
        )

    if shape is TypeShape.ENUM:
        variants = _enum_variants(node)
    else:
        variants = _sum_variants(node, tree)

    schema = TypeSchema(
        name=node.name, shape=shape, variants=variants, span=span_of(node)
    )

    if unit_variants_only:
        for variant in schema.variants:
            if not variant.is_unit:
                raise DeriveError.create(
                    DiagnosticCode.VARIANT_HAS_FIELDS,
                    variant.node,
                    filename,
                    variant=variant.name,
                )

    logger.debug(
        "Extracted %s %s with %d variants",
        shape.value,
        schema.name,
        len(schema.variants),
    )
    return schema
