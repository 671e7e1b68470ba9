"""
traversal.py

Depth-first walk over the program model. Every package and type scope
owns a member list that is created on entry, filled by the direct
children, and folded into the scope's own fact on exit. Member lists
and index entries are passed down explicitly, so one FactTraversal can
be reused for any number of runs or single scopes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Protocol, TypedDict

from declfacts.shared.console import ConsoleManager

from . import models
from .encoding import TermEncoder
from .terms import Atom, Compound, PrologList, Term, fact, plist

JAVA_BASE = "java.base"

# Variable kinds owned by the scopes that declare them.
IGNORED_VARIABLE_KINDS: frozenset[str] = frozenset(
    {
        "ENUM_CONSTANT",
        "PARAMETER",
        "LOCAL_VARIABLE",
        "RESOURCE_VARIABLE",
        "EXCEPTION_PARAMETER",
        "BINDING_VARIABLE",
    }
)


class FactSink(Protocol):
    """Receives finished top-level facts keyed by namespace."""

    def write_module_summary(self, module_name: str, module_fact: Compound) -> object: ...

    def write_package_summary(self, package_name: str, package_fact: Compound) -> object: ...

    def write_type(self, package_name: str, type_name: str, type_fact: Compound) -> object: ...


class TraversalStats(TypedDict):
    modules: int
    packages: int
    types: int
    methods: int
    constructors: int
    fields: int
    skipped: int


def _empty_stats() -> TraversalStats:
    return TraversalStats(
        modules=0, packages=0, types=0, methods=0, constructors=0, fields=0, skipped=0
    )


@dataclass
class WalkState:
    """Index entries and tallies collected during one run."""

    module_index: list[Atom] = field(default_factory=list)
    package_index: list[Atom] = field(default_factory=list)
    internal_packages: set[str] = field(default_factory=set)
    stats: TraversalStats = field(default_factory=_empty_stats)

    @property
    def has_modules(self) -> bool:
        return bool(self.module_index)

    def module_index_fact(self) -> Compound:
        return fact("module_index", plist(self.module_index))

    def package_index_fact(self) -> Compound:
        return fact("package_index", plist(self.package_index))


TypeBuilder = Callable[[models.TypeSymbol, str, PrologList], Compound]


class FactTraversal:
    """
    Builds facts for modules, packages and types and hands each finished
    top-level fact to the sink.
    """

    def __init__(
        self,
        sink: FactSink,
        logger: ConsoleManager | None = None,
        *,
        include_docs: bool = False,
    ) -> None:
        self._sink = sink
        self._logger = logger or ConsoleManager(level=logging.WARNING, no_color=True)
        self._encoder = TermEncoder(self._logger, include_docs=include_docs)
        self._type_builders: dict[str, TypeBuilder] = {
            "CLASS": self._class_fact,
            "INTERFACE": self._interface_fact,
            "ENUM": self._enum_fact,
            "ANNOTATION_TYPE": self._annotation_type_fact,
            "RECORD": self._record_fact,
        }

    @property
    def encoder(self) -> TermEncoder:
        return self._encoder

    def run(self, model: models.ProgramModel) -> WalkState:
        """
        Walks every module, then every package. Modules go first so that
        qualified exports are known before the package index is built.
        """
        state = WalkState()
        for module in model.modules:
            self.visit_module(module, state)
        for package in model.packages:
            self.visit_package(package, state)
        return state

    # --- Scopes ---

    def visit_module(self, module: models.ModuleSymbol, state: WalkState) -> Compound:
        enc = self._encoder
        requires: list[Compound] = []
        exports: list[Compound] = []
        uses: list[Term] = []
        provides: list[Compound] = []

        for d in module.directives:
            if isinstance(d, models.RequiresDirective):
                if d.module == JAVA_BASE and not {"transitive", "static"} & {
                    m.lower() for m in d.modifiers
                }:
                    continue
                requires.append(
                    fact(
                        "requires",
                        plist(Atom(m.lower()) for m in d.modifiers),
                        Atom(d.module),
                        enc.annotation_list(d.annotations),
                    )
                )
            elif isinstance(d, models.ExportsDirective):
                if d.target_modules:
                    state.internal_packages.add(d.package)
                exports.append(
                    fact(
                        "exports",
                        Atom(d.package),
                        plist(Atom(m) for m in d.target_modules),
                        enc.annotation_list(d.annotations),
                    )
                )
            elif isinstance(d, models.UsesDirective):
                uses.append(enc.encode_type(d.service))
            elif isinstance(d, models.ProvidesDirective):
                provides.append(
                    fact(
                        "provides",
                        enc.encode_type(d.service),
                        plist(enc.encode_type(i) for i in d.implementations),
                        enc.annotation_list(d.annotations),
                    )
                )
            else:
                self._skip(state, f"Unsupported module directive: {d!r} in {module.name}")

        name = Atom(module.name)
        module_fact = fact(
            "module",
            name,
            enc.modifier_list(module.modifiers),
            plist(requires),
            plist(exports),
            plist(uses),
            plist(provides),
            plist(Atom(p) for p in module.packages),
        )
        self._sink.write_module_summary(module.name, module_fact)
        state.module_index.append(name)
        state.stats["modules"] += 1
        return module_fact

    def visit_package(self, package: models.PackageSymbol, state: WalkState) -> Compound:
        members: list[Compound] = []
        for symbol in package.members:
            if isinstance(symbol, models.TypeSymbol):
                self.visit_type(symbol, package.name, members, state)
            else:
                self._skip(
                    state,
                    f"Unsupported package member: {getattr(symbol, 'kind', symbol)!r} "
                    f"in {package.name}",
                )

        name = Atom(package.name)
        package_fact = fact("package_declaration", name, plist(members))
        self._sink.write_package_summary(package.name, package_fact)
        if package.name not in state.internal_packages:
            state.package_index.append(name)
        state.stats["packages"] += 1
        return package_fact

    def visit_type(
        self,
        symbol: models.TypeSymbol,
        package_name: str,
        enclosing: list[Compound],
        state: WalkState,
    ) -> Compound | None:
        """
        Builds the fact of one type and writes it. The type's own members
        go into a fresh list; the enclosing scope only receives a
        ``type_declaration(Name, Kind)`` marker.
        """
        builder = self._type_builders.get(symbol.kind)
        if builder is None:
            self._skip(
                state,
                f"Unsupported type kind: {symbol.kind} for {_qualify(package_name, symbol.name)}",
            )
            return None

        members: list[Compound] = []
        for member in symbol.members:
            self.visit_member(member, package_name, members, state)

        type_fact = builder(symbol, package_name, plist(members))
        enclosing.append(fact("type_declaration", Atom(symbol.name), Atom(symbol.kind)))
        self._sink.write_type(package_name, symbol.name, type_fact)
        state.stats["types"] += 1
        return type_fact

    def visit_member(
        self,
        symbol: models.Symbol,
        package_name: str,
        members: list[Compound],
        state: WalkState,
    ) -> None:
        if isinstance(symbol, models.TypeSymbol):
            self.visit_type(symbol, package_name, members, state)
        elif isinstance(symbol, models.ExecutableSymbol):
            self._visit_executable(symbol, members, state)
        elif isinstance(symbol, models.VariableSymbol):
            self._visit_variable(symbol, members, state)
        else:
            self._skip(state, f"Unsupported member symbol: {symbol!r}")

    # --- Members ---

    def _visit_executable(
        self, e: models.ExecutableSymbol, members: list[Compound], state: WalkState
    ) -> None:
        enc = self._encoder
        if e.kind == "METHOD":
            members.append(
                fact(
                    "method",
                    Atom(e.name),
                    enc.modifier_list(e.modifiers),
                    enc.type_parameter_list(e.type_parameters),
                    enc.encode_type(e.return_type),
                    enc.parameter_list(e.parameters),
                    enc.throws_list(e.thrown_types),
                    enc.annotation_list(e.annotations),
                    enc.doc(e.doc),
                )
            )
            state.stats["methods"] += 1
        elif e.kind == "CONSTRUCTOR":
            members.append(
                fact(
                    "constructor",
                    Atom(e.name),
                    enc.modifier_list(e.modifiers),
                    enc.type_parameter_list(e.type_parameters),
                    enc.parameter_list(e.parameters),
                    enc.throws_list(e.thrown_types),
                    enc.annotation_list(e.annotations),
                    enc.doc(e.doc),
                )
            )
            state.stats["constructors"] += 1
        else:
            self._skip(state, f"Unsupported executable kind: {e.kind} for {e.name}")

    def _visit_variable(
        self, v: models.VariableSymbol, members: list[Compound], state: WalkState
    ) -> None:
        if v.kind in IGNORED_VARIABLE_KINDS:
            return
        if v.kind != "FIELD":
            self._skip(state, f"Unsupported variable kind: {v.kind} for {v.name}")
            return

        enc = self._encoder
        members.append(
            fact(
                "field",
                Atom(v.name),
                enc.modifier_list(v.modifiers),
                enc.encode_type(v.type),
                enc.annotation_list(v.annotations),
                enc.doc(v.doc),
            )
        )
        state.stats["fields"] += 1

    # --- Type facts ---

    def _class_fact(
        self, t: models.TypeSymbol, package_name: str, members: PrologList
    ) -> Compound:
        enc = self._encoder
        return fact(
            "class",
            Atom(t.name),
            Atom(package_name),
            enc.modifier_list(t.modifiers),
            enc.type_parameter_list(t.type_parameters),
            enc.extends(t.superclass),
            enc.implements_list(t.interfaces),
            plist(Atom(p) for p in t.permitted_subclasses),
            members,
            enc.annotation_list(t.annotations),
            enc.doc(t.doc),
        )

    def _interface_fact(
        self, t: models.TypeSymbol, package_name: str, members: PrologList
    ) -> Compound:
        enc = self._encoder
        return fact(
            "interface",
            Atom(t.name),
            Atom(package_name),
            enc.modifier_list(t.modifiers),
            enc.type_parameter_list(t.type_parameters),
            enc.implements_list(t.interfaces),
            members,
            enc.annotation_list(t.annotations),
            plist(fact("declared_type", Atom(p), plist()) for p in t.permitted_subclasses),
            enc.doc(t.doc),
        )

    def _enum_fact(
        self, t: models.TypeSymbol, package_name: str, members: PrologList
    ) -> Compound:
        enc = self._encoder
        return fact(
            "enum",
            Atom(t.name),
            Atom(package_name),
            enc.modifier_list(t.modifiers),
            enc.implements_list(t.interfaces),
            members,
            enc.annotation_list(t.annotations),
            enc.doc(t.doc),
        )

    def _annotation_type_fact(
        self, t: models.TypeSymbol, package_name: str, members: PrologList
    ) -> Compound:
        enc = self._encoder
        return fact(
            "annotation_type",
            Atom(t.name),
            Atom(package_name),
            enc.modifier_list(t.modifiers),
            enc.annotation_list(t.annotations),
            enc.doc(t.doc),
        )

    def _record_fact(
        self, t: models.TypeSymbol, package_name: str, members: PrologList
    ) -> Compound:
        enc = self._encoder
        return fact(
            "record",
            Atom(t.name),
            Atom(package_name),
            enc.modifier_list(t.modifiers),
            enc.type_parameter_list(t.type_parameters),
            enc.implements_list(t.interfaces),
            enc.record_component_list(t.record_components),
            members,
            enc.annotation_list(t.annotations),
            enc.doc(t.doc),
        )

    def _skip(self, state: WalkState, msg: str) -> None:
        state.stats["skipped"] += 1
        self._logger.warning(msg)


def _qualify(package_name: str, name: str) -> str:
    return f"{package_name}.{name}" if package_name else name
