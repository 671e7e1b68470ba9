"""
encoding.py

Maps type expressions, annotation values and the small recurring pieces
of a declaration (modifiers, parameters, type parameters, throws clauses)
onto terms.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Iterable

from declfacts.shared.console import ConsoleManager

from . import models
from .terms import Atom, Compound, PrologList, Term, fact, plist

OBJECT_TYPE = "java.lang.Object"
NULL = Atom("null")


class TermEncoder:
    """
    Encodes the polymorphic parts of the program model.

    Unsupported variants never raise: they become a placeholder atom and
    a warning on the console.
    """

    def __init__(self, logger: ConsoleManager, *, include_docs: bool = False) -> None:
        self._logger = logger
        self._include_docs = include_docs

    # --- Types ---

    def encode_type(self, t: models.TypeExpr) -> Term:
        if isinstance(t, models.DeclaredType):
            return fact(
                "declared_type",
                Atom(t.qualified_name),
                plist(self.encode_type(a) for a in t.type_arguments),
            )
        if isinstance(t, models.PrimitiveType):
            return fact("type", Atom("primitive"), Atom(t.kind.lower()))
        if isinstance(t, models.ArrayType):
            return fact("type", Atom("array"), self.encode_type(t.component))
        if isinstance(t, models.TypeVariable):
            return fact("type", Atom("type_variable"), Atom(t.name))
        if isinstance(t, models.WildcardType):
            if t.extends_bound is not None:
                return fact("type", Atom("wildcard_extends"), self.encode_type(t.extends_bound))
            if t.super_bound is not None:
                return fact("type", Atom("wildcard_super"), self.encode_type(t.super_bound))
            return fact("type", Atom("wildcard_unbounded"), NULL)
        if isinstance(t, models.NoType):
            return fact("type", Atom("no_type"), Atom(t.kind.lower()))

        self._logger.warning(f"Unsupported type kind: {_describe(t)}")
        return Atom("unknown_type")

    # --- Annotation values ---

    def encode_value(self, value: models.AnnotationValue) -> Term:
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return Atom("true" if value else "false")
        if isinstance(value, int):
            return Atom(str(value))
        if isinstance(value, float):
            return Atom(_float_text(value))
        if isinstance(value, str):
            return Atom(f"'{value}'")
        if isinstance(value, models.CharValue):
            return Atom(f"'{value.value}'")
        if isinstance(value, models.EnumConstant):
            return Atom(f"{value.enclosing}.{value.name}")
        if isinstance(value, models.Annotation):
            return self.annotation(value)
        if isinstance(value, (tuple, list)):
            return plist(self.encode_value(v) for v in value)
        if isinstance(value, _TYPE_VARIANTS):
            return self.encode_type(value)

        self._logger.warning(f"Unknown annotation value type: {_describe(value)}")
        return Atom("unknown_annotation_value")

    def annotation(self, a: models.Annotation) -> Compound:
        return fact(
            "annotation",
            Atom(a.qualified_name),
            plist(
                fact("annotation_argument", Atom(name), self.encode_value(value))
                for name, value in a.arguments
            ),
        )

    def annotation_list(self, annotations: Iterable[models.Annotation]) -> PrologList:
        return plist(self.annotation(a) for a in annotations)

    # --- Declaration pieces ---

    @staticmethod
    def modifier_list(modifiers: Iterable[str]) -> PrologList:
        return plist(fact("modifier", Atom(m.lower())) for m in modifiers)

    def type_parameter_list(self, params: Iterable[models.TypeParameter]) -> PrologList:
        return plist(
            fact(
                "type_parameter",
                Atom(p.name),
                plist(self.encode_type(b) for b in p.bounds),
                self.annotation_list(p.annotations),
            )
            for p in params
        )

    def parameter_list(self, params: Iterable[models.Parameter]) -> PrologList:
        return plist(
            fact(
                "parameter",
                Atom(p.name),
                self.encode_type(p.type),
                self.modifier_list(p.modifiers),
                self.annotation_list(p.annotations),
            )
            for p in params
        )

    def throws_list(self, thrown: Iterable[models.TypeExpr]) -> PrologList:
        return plist(fact("throws", self.encode_type(t)) for t in thrown)

    def record_component_list(
        self, components: Iterable[models.RecordComponent]
    ) -> PrologList:
        return plist(
            fact(
                "record_component",
                Atom(c.name),
                self.encode_type(c.type),
                self.annotation_list(c.annotations),
            )
            for c in components
        )

    def extends(self, superclass: models.TypeExpr | None) -> Term:
        if superclass is None or isinstance(superclass, models.NoType):
            return NULL
        if (
            isinstance(superclass, models.DeclaredType)
            and superclass.qualified_name == OBJECT_TYPE
            and not superclass.type_arguments
        ):
            return NULL
        return fact("extends", Atom(_kind_name(superclass)), self.encode_type(superclass))

    def implements_list(self, interfaces: Iterable[models.TypeExpr]) -> PrologList:
        return plist(
            fact("implements", Atom(_kind_name(i)), self.encode_type(i)) for i in interfaces
        )

    def doc(self, text: str | None) -> Atom:
        if not self._include_docs or not text:
            return Atom("")
        return Atom(text.replace("\n", "\\n").replace("\r", ""))


_TYPE_VARIANTS = (
    models.DeclaredType,
    models.PrimitiveType,
    models.ArrayType,
    models.TypeVariable,
    models.WildcardType,
    models.NoType,
    models.OtherType,
)


def _kind_name(t: object) -> str:
    return getattr(t, "kind_name", type(t).__name__.lower())


def _describe(obj: object) -> str:
    kind = getattr(obj, "kind", None)
    if kind is not None:
        detail = getattr(obj, "description", "") or obj
        return f"{kind} for {detail}"
    return f"{type(obj).__name__} ({obj!r})"


def _float_text(value: float) -> str:
    """
    Render a float the way the JVM prints doubles: positional between
    1e-3 and 1e7, otherwise ``d.dddE<exp>``; always a fractional digit;
    ``NaN``, ``Infinity`` and ``-Infinity`` for the non-finite values.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "-0.0" if math.copysign(1.0, value) < 0 else "0.0"

    magnitude = abs(value)
    if 1e-3 <= magnitude < 1e7:
        return repr(value)

    shortest = Decimal(repr(magnitude)).normalize()
    digits = "".join(str(d) for d in shortest.as_tuple().digits)
    sign = "-" if value < 0 else ""
    return f"{sign}{digits[0]}.{digits[1:] or '0'}E{shortest.adjusted()}"
