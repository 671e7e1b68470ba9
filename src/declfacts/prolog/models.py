"""
models.py

Read-only program model consumed by the fact traversal. One frozen
dataclass per declaration kind, type-expression variant and annotation
value variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal, Union

# --- Type Expressions ---


@dataclass(slots=True, frozen=True)
class DeclaredType:
    qualified_name: str
    type_arguments: tuple["TypeExpr", ...] = ()

    kind_name: ClassVar[str] = "declared"


@dataclass(slots=True, frozen=True)
class PrimitiveType:
    kind: Literal[
        "boolean", "byte", "short", "int", "long", "char", "float", "double"
    ]

    @property
    def kind_name(self) -> str:
        return self.kind


@dataclass(slots=True, frozen=True)
class ArrayType:
    component: "TypeExpr"

    kind_name: ClassVar[str] = "array"


@dataclass(slots=True, frozen=True)
class TypeVariable:
    name: str

    kind_name: ClassVar[str] = "typevar"


@dataclass(slots=True, frozen=True)
class WildcardType:
    extends_bound: "TypeExpr | None" = None
    super_bound: "TypeExpr | None" = None

    kind_name: ClassVar[str] = "wildcard"


@dataclass(slots=True, frozen=True)
class NoType:
    kind: Literal["void", "none", "package", "module"] = "void"

    @property
    def kind_name(self) -> str:
        return self.kind


@dataclass(slots=True, frozen=True)
class OtherType:
    """A type form the fact encoding has no shape for (union, intersection, error)."""

    kind: str
    description: str = ""

    @property
    def kind_name(self) -> str:
        return self.kind.lower()


TypeExpr = Union[
    DeclaredType, PrimitiveType, ArrayType, TypeVariable, WildcardType, NoType, OtherType
]

PRIMITIVE_KINDS: frozenset[str] = frozenset(
    {"boolean", "byte", "short", "int", "long", "char", "float", "double"}
)

# --- Annotations ---


@dataclass(slots=True, frozen=True)
class CharValue:
    value: str


@dataclass(slots=True, frozen=True)
class EnumConstant:
    enclosing: str
    name: str


@dataclass(slots=True, frozen=True)
class OtherValue:
    kind: str
    description: str = ""


@dataclass(slots=True, frozen=True)
class Annotation:
    qualified_name: str
    arguments: tuple[tuple[str, "AnnotationValue"], ...] = ()


AnnotationValue = Union[
    bool,
    int,
    float,
    str,
    CharValue,
    EnumConstant,
    Annotation,
    TypeExpr,
    tuple,
    list,
    OtherValue,
]

# --- Declarations ---

Modifiers = tuple[str, ...]
Annotations = tuple[Annotation, ...]

TypeKind = Literal["CLASS", "INTERFACE", "ENUM", "RECORD", "ANNOTATION_TYPE"]
ExecutableKind = Literal["METHOD", "CONSTRUCTOR", "STATIC_INIT", "INSTANCE_INIT"]
VariableKind = Literal[
    "FIELD",
    "ENUM_CONSTANT",
    "PARAMETER",
    "LOCAL_VARIABLE",
    "RESOURCE_VARIABLE",
    "EXCEPTION_PARAMETER",
    "BINDING_VARIABLE",
]


@dataclass(slots=True, frozen=True)
class TypeParameter:
    name: str
    bounds: tuple[TypeExpr, ...] = ()
    annotations: Annotations = ()


@dataclass(slots=True, frozen=True)
class Parameter:
    name: str
    type: TypeExpr
    modifiers: Modifiers = ()
    annotations: Annotations = ()


@dataclass(slots=True, frozen=True)
class RecordComponent:
    name: str
    type: TypeExpr
    annotations: Annotations = ()


@dataclass(slots=True, frozen=True)
class VariableSymbol:
    kind: str
    name: str
    type: TypeExpr
    modifiers: Modifiers = ()
    annotations: Annotations = ()
    doc: str | None = None


@dataclass(slots=True, frozen=True)
class ExecutableSymbol:
    kind: str
    name: str
    modifiers: Modifiers = ()
    type_parameters: tuple[TypeParameter, ...] = ()
    return_type: TypeExpr = NoType("void")
    parameters: tuple[Parameter, ...] = ()
    thrown_types: tuple[TypeExpr, ...] = ()
    annotations: Annotations = ()
    doc: str | None = None


@dataclass(slots=True, frozen=True)
class TypeSymbol:
    kind: str
    name: str
    modifiers: Modifiers = ()
    type_parameters: tuple[TypeParameter, ...] = ()
    superclass: TypeExpr | None = None
    interfaces: tuple[TypeExpr, ...] = ()
    permitted_subclasses: tuple[str, ...] = ()
    record_components: tuple[RecordComponent, ...] = ()
    members: tuple["Symbol", ...] = ()
    annotations: Annotations = ()
    doc: str | None = None


Symbol = Union[TypeSymbol, ExecutableSymbol, VariableSymbol]


@dataclass(slots=True, frozen=True)
class PackageSymbol:
    name: str
    members: tuple[Symbol, ...] = ()
    annotations: Annotations = ()
    doc: str | None = None

    @property
    def path(self) -> str:
        return self.name.replace(".", "/")


# --- Modules ---


@dataclass(slots=True, frozen=True)
class RequiresDirective:
    module: str
    modifiers: Modifiers = ()
    annotations: Annotations = ()


@dataclass(slots=True, frozen=True)
class ExportsDirective:
    package: str
    target_modules: tuple[str, ...] = ()
    annotations: Annotations = ()


@dataclass(slots=True, frozen=True)
class UsesDirective:
    service: TypeExpr


@dataclass(slots=True, frozen=True)
class ProvidesDirective:
    service: TypeExpr
    implementations: tuple[TypeExpr, ...] = ()
    annotations: Annotations = ()


Directive = Union[RequiresDirective, ExportsDirective, UsesDirective, ProvidesDirective]


@dataclass(slots=True, frozen=True)
class ModuleSymbol:
    name: str
    modifiers: Modifiers = ()
    directives: tuple[Directive, ...] = ()
    packages: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class ProgramModel:
    modules: tuple[ModuleSymbol, ...] = ()
    packages: tuple[PackageSymbol, ...] = ()
