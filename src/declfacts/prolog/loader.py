"""
loader.py

Reads a serialized program model (YAML or JSON) into the read-only
dataclasses of ``models``.

Document layout::

    modules:
      - name: com.example
        requires: [{module: java.sql, modifiers: [transitive]}]
        exports: [{package: com.example.api, to: [other.mod]}]
        uses: [com.example.spi.Plugin]
        provides: [{service: com.example.spi.Plugin, with: [com.example.impl.Default]}]
        packages: [com.example.api]
    packages:
      - name: com.example.api
        members:
          - {kind: CLASS, name: Widget, modifiers: [public], members: [...]}

Types are either a bare string (``int``, ``void``, ``java.lang.String``)
or a mapping with one variant key: ``declared`` (+ ``arguments``),
``primitive``, ``array``, ``type_variable``, ``wildcard`` (``extends``,
``super`` or null, + ``bound``), ``no_type`` or ``other``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, TypeVar

import yaml

from . import models

T = TypeVar("T")

EXECUTABLE_KINDS: frozenset[str] = frozenset(
    {"METHOD", "CONSTRUCTOR", "STATIC_INIT", "INSTANCE_INIT"}
)
VARIABLE_KINDS: frozenset[str] = frozenset(
    {
        "FIELD",
        "ENUM_CONSTANT",
        "PARAMETER",
        "LOCAL_VARIABLE",
        "RESOURCE_VARIABLE",
        "EXCEPTION_PARAMETER",
        "BINDING_VARIABLE",
    }
)


class ModelFormatError(ValueError):
    def __init__(self, where: str, message: str) -> None:
        super().__init__(f"{where}: {message}")
        self.where = where


def load_program_model(path: str | Path) -> models.ProgramModel:
    """Load a program model document from disk."""
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Program model not found: {p}")

    with open(p, "r", encoding="utf-8") as f:
        try:
            data = json.load(f) if p.suffix == ".json" else yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ModelFormatError(str(p), f"unreadable document: {e}") from e

    return parse_program_model(data if data is not None else {})


def parse_program_model(data: Any) -> models.ProgramModel:
    root = _mapping(data, "$")
    return models.ProgramModel(
        modules=_each(root.get("modules"), "$.modules", _module),
        packages=_each(root.get("packages"), "$.packages", _package),
    )


# --- Scopes ---


def _module(node: Any, where: str) -> models.ModuleSymbol:
    m = _mapping(node, where)
    directives: list[models.Directive] = []
    directives.extend(_each(m.get("requires"), f"{where}.requires", _requires))
    directives.extend(_each(m.get("exports"), f"{where}.exports", _exports))
    directives.extend(
        models.UsesDirective(service=t)
        for t in _each(m.get("uses"), f"{where}.uses", parse_type)
    )
    directives.extend(_each(m.get("provides"), f"{where}.provides", _provides))
    return models.ModuleSymbol(
        name=_name(m, where),
        modifiers=_strings(m.get("modifiers"), f"{where}.modifiers"),
        directives=tuple(directives),
        packages=_strings(m.get("packages"), f"{where}.packages"),
    )


def _requires(node: Any, where: str) -> models.RequiresDirective:
    if isinstance(node, str):
        return models.RequiresDirective(module=node)
    m = _mapping(node, where)
    return models.RequiresDirective(
        module=_required_str(m, "module", where),
        modifiers=_strings(m.get("modifiers"), f"{where}.modifiers"),
        annotations=_annotations(m, where),
    )


def _exports(node: Any, where: str) -> models.ExportsDirective:
    if isinstance(node, str):
        return models.ExportsDirective(package=node)
    m = _mapping(node, where)
    return models.ExportsDirective(
        package=_required_str(m, "package", where),
        target_modules=_strings(m.get("to"), f"{where}.to"),
        annotations=_annotations(m, where),
    )


def _provides(node: Any, where: str) -> models.ProvidesDirective:
    m = _mapping(node, where)
    if "service" not in m:
        raise ModelFormatError(where, "missing required key 'service'")
    return models.ProvidesDirective(
        service=parse_type(m["service"], f"{where}.service"),
        implementations=_each(m.get("with"), f"{where}.with", parse_type),
        annotations=_annotations(m, where),
    )


def _package(node: Any, where: str) -> models.PackageSymbol:
    m = _mapping(node, where)
    return models.PackageSymbol(
        name=_name(m, where),
        members=_each(m.get("members"), f"{where}.members", _symbol),
        annotations=_annotations(m, where),
        doc=m.get("doc"),
    )


def _symbol(node: Any, where: str) -> models.Symbol:
    m = _mapping(node, where)
    kind = _required_str(m, "kind", where).upper()

    if kind in EXECUTABLE_KINDS:
        returns = m.get("returns")
        return models.ExecutableSymbol(
            kind=kind,
            name=_name(m, where),
            modifiers=_strings(m.get("modifiers"), f"{where}.modifiers"),
            type_parameters=_each(
                m.get("type_parameters"), f"{where}.type_parameters", _type_parameter
            ),
            return_type=(
                parse_type(returns, f"{where}.returns")
                if returns is not None
                else models.NoType("void")
            ),
            parameters=_each(m.get("parameters"), f"{where}.parameters", _parameter),
            thrown_types=_each(m.get("throws"), f"{where}.throws", parse_type),
            annotations=_annotations(m, where),
            doc=m.get("doc"),
        )

    if kind in VARIABLE_KINDS:
        if "type" not in m:
            raise ModelFormatError(where, "missing required key 'type'")
        return models.VariableSymbol(
            kind=kind,
            name=_name(m, where),
            type=parse_type(m["type"], f"{where}.type"),
            modifiers=_strings(m.get("modifiers"), f"{where}.modifiers"),
            annotations=_annotations(m, where),
            doc=m.get("doc"),
        )

    superclass = m.get("extends")
    return models.TypeSymbol(
        kind=kind,
        name=_name(m, where),
        modifiers=_strings(m.get("modifiers"), f"{where}.modifiers"),
        type_parameters=_each(
            m.get("type_parameters"), f"{where}.type_parameters", _type_parameter
        ),
        superclass=(
            parse_type(superclass, f"{where}.extends") if superclass is not None else None
        ),
        interfaces=_each(m.get("implements"), f"{where}.implements", parse_type),
        permitted_subclasses=_strings(m.get("permits"), f"{where}.permits"),
        record_components=_each(
            m.get("components"), f"{where}.components", _record_component
        ),
        members=_each(m.get("members"), f"{where}.members", _symbol),
        annotations=_annotations(m, where),
        doc=m.get("doc"),
    )


def _type_parameter(node: Any, where: str) -> models.TypeParameter:
    if isinstance(node, str):
        return models.TypeParameter(name=node)
    m = _mapping(node, where)
    return models.TypeParameter(
        name=_name(m, where),
        bounds=_each(m.get("bounds"), f"{where}.bounds", parse_type),
        annotations=_annotations(m, where),
    )


def _parameter(node: Any, where: str) -> models.Parameter:
    m = _mapping(node, where)
    if "type" not in m:
        raise ModelFormatError(where, "missing required key 'type'")
    return models.Parameter(
        name=_name(m, where),
        type=parse_type(m["type"], f"{where}.type"),
        modifiers=_strings(m.get("modifiers"), f"{where}.modifiers"),
        annotations=_annotations(m, where),
    )


def _record_component(node: Any, where: str) -> models.RecordComponent:
    m = _mapping(node, where)
    if "type" not in m:
        raise ModelFormatError(where, "missing required key 'type'")
    return models.RecordComponent(
        name=_name(m, where),
        type=parse_type(m["type"], f"{where}.type"),
        annotations=_annotations(m, where),
    )


# --- Types & Values ---


def parse_type(node: Any, where: str = "$") -> models.TypeExpr:
    if isinstance(node, str):
        if node in models.PRIMITIVE_KINDS:
            return models.PrimitiveType(node)  # type: ignore[arg-type]
        if node == "void":
            return models.NoType("void")
        return models.DeclaredType(node)

    m = _mapping(node, where)
    if "declared" in m:
        return models.DeclaredType(
            qualified_name=str(m["declared"]),
            type_arguments=_each(m.get("arguments"), f"{where}.arguments", parse_type),
        )
    if "primitive" in m:
        return models.PrimitiveType(str(m["primitive"]))  # type: ignore[arg-type]
    if "array" in m:
        return models.ArrayType(parse_type(m["array"], f"{where}.array"))
    if "type_variable" in m:
        return models.TypeVariable(str(m["type_variable"]))
    if "wildcard" in m:
        bound_kind = m["wildcard"]
        if bound_kind is None:
            return models.WildcardType()
        if "bound" not in m:
            raise ModelFormatError(where, f"wildcard {bound_kind!r} needs a 'bound'")
        bound = parse_type(m["bound"], f"{where}.bound")
        if bound_kind == "extends":
            return models.WildcardType(extends_bound=bound)
        if bound_kind == "super":
            return models.WildcardType(super_bound=bound)
        raise ModelFormatError(where, f"unknown wildcard bound {bound_kind!r}")
    if "no_type" in m:
        return models.NoType(str(m["no_type"]))  # type: ignore[arg-type]
    if "other" in m:
        return models.OtherType(str(m["other"]), str(m.get("description", "")))

    raise ModelFormatError(where, f"unrecognized type expression {node!r}")


def parse_value(node: Any, where: str = "$") -> models.AnnotationValue:
    if isinstance(node, (bool, int, float, str)):
        return node
    if isinstance(node, list):
        return tuple(parse_value(v, f"{where}[{i}]") for i, v in enumerate(node))

    m = _mapping(node, where)
    if "char" in m:
        return models.CharValue(str(m["char"]))
    if "enum" in m:
        return models.EnumConstant(
            enclosing=str(m["enum"]), name=_required_str(m, "constant", where)
        )
    if "annotation" in m:
        return _annotation(m["annotation"], f"{where}.annotation")
    if "type" in m:
        return parse_type(m["type"], f"{where}.type")
    if "other" in m:
        return models.OtherValue(str(m["other"]), str(m.get("description", "")))

    raise ModelFormatError(where, f"unrecognized annotation value {node!r}")


def _annotation(node: Any, where: str) -> models.Annotation:
    if isinstance(node, str):
        return models.Annotation(qualified_name=node)
    m = _mapping(node, where)
    args = _mapping(m.get("arguments") or {}, f"{where}.arguments")
    return models.Annotation(
        qualified_name=_name(m, where),
        arguments=tuple(
            (str(k), parse_value(v, f"{where}.arguments.{k}")) for k, v in args.items()
        ),
    )


def _annotations(m: dict[str, Any], where: str) -> tuple[models.Annotation, ...]:
    return _each(m.get("annotations"), f"{where}.annotations", _annotation)


# --- Private Helpers ---


def _mapping(node: Any, where: str) -> dict[str, Any]:
    if not isinstance(node, dict):
        raise ModelFormatError(where, f"expected a mapping, got {type(node).__name__}")
    return node


def _each(node: Any, where: str, parse: Callable[[Any, str], T]) -> tuple[T, ...]:
    if node is None:
        return ()
    if not isinstance(node, list):
        raise ModelFormatError(where, f"expected a list, got {type(node).__name__}")
    return tuple(parse(item, f"{where}[{i}]") for i, item in enumerate(node))


def _strings(node: Any, where: str) -> tuple[str, ...]:
    return _each(node, where, lambda item, _: str(item))


def _required_str(m: dict[str, Any], key: str, where: str) -> str:
    if key not in m or m[key] is None:
        raise ModelFormatError(where, f"missing required key '{key}'")
    return str(m[key])


def _name(m: dict[str, Any], where: str) -> str:
    return _required_str(m, "name", where)
