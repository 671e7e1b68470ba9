from textwrap import dedent

import pytest

from declfacts.prolog import models
from declfacts.prolog.loader import (
    ModelFormatError,
    load_program_model,
    parse_program_model,
    parse_type,
    parse_value,
)

SAMPLE = dedent(
    """
    modules:
      - name: com.example
        requires:
          - java.base
          - {module: java.sql, modifiers: [transitive]}
        exports:
          - com.example.api
          - {package: com.example.internal, to: [com.friend]}
        uses: [com.example.spi.Plugin]
        provides:
          - {service: com.example.spi.Plugin, with: [com.example.impl.Default]}
        packages: [com.example.api]
    packages:
      - name: com.example.api
        members:
          - kind: class
            name: Widget
            modifiers: [public]
            extends: com.example.Base
            implements:
              - {declared: java.lang.Comparable, arguments: [{type_variable: T}]}
            annotations:
              - name: com.example.Tag
                arguments:
                  value: hello
                  level: {enum: Level, constant: HIGH}
            members:
              - {kind: FIELD, name: size, type: int}
              - kind: METHOD
                name: items
                returns: {declared: java.util.List, arguments: [{wildcard: extends, bound: java.lang.Number}]}
                parameters:
                  - {name: limit, type: {array: long}}
                throws: [java.io.IOException]
    """
)


def test_load_yaml_document(tmp_path):
    path = tmp_path / "model.yaml"
    path.write_text(SAMPLE)
    model = load_program_model(path)

    (module,) = model.modules
    assert module.name == "com.example"
    assert module.directives[0] == models.RequiresDirective("java.base")
    assert module.directives[1] == models.RequiresDirective("java.sql", ("transitive",))
    assert models.ExportsDirective("com.example.internal", ("com.friend",)) in module.directives
    assert models.UsesDirective(models.DeclaredType("com.example.spi.Plugin")) in module.directives

    (pkg,) = model.packages
    widget = pkg.members[0]
    assert isinstance(widget, models.TypeSymbol)
    assert widget.kind == "CLASS"
    assert widget.superclass == models.DeclaredType("com.example.Base")
    assert widget.interfaces == (
        models.DeclaredType("java.lang.Comparable", (models.TypeVariable("T"),)),
    )
    assert widget.annotations[0].arguments == (
        ("value", "hello"),
        ("level", models.EnumConstant("Level", "HIGH")),
    )

    field, method = widget.members
    assert field == models.VariableSymbol(kind="FIELD", name="size", type=models.PrimitiveType("int"))
    assert isinstance(method, models.ExecutableSymbol)
    assert method.return_type == models.DeclaredType(
        "java.util.List",
        (models.WildcardType(extends_bound=models.DeclaredType("java.lang.Number")),),
    )
    assert method.parameters[0].type == models.ArrayType(models.PrimitiveType("long"))
    assert method.thrown_types == (models.DeclaredType("java.io.IOException"),)


def test_load_json_document(tmp_path):
    path = tmp_path / "model.json"
    path.write_text('{"packages": [{"name": "p", "members": []}]}')
    model = load_program_model(path)
    assert model == models.ProgramModel(packages=(models.PackageSymbol(name="p"),))


def test_empty_document_is_empty_model(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_program_model(path) == models.ProgramModel()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_program_model(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "node, expected",
    [
        ("void", models.NoType("void")),
        ("boolean", models.PrimitiveType("boolean")),
        ({"wildcard": None}, models.WildcardType()),
        ({"wildcard": "super", "bound": "a.B"}, models.WildcardType(super_bound=models.DeclaredType("a.B"))),
        ({"no_type": "none"}, models.NoType("none")),
        ({"other": "UNION"}, models.OtherType("UNION")),
    ],
)
def test_parse_type_variants(node, expected):
    assert parse_type(node) == expected


def test_parse_values():
    assert parse_value([1, True, "x"]) == (1, True, "x")
    assert parse_value({"char": "c"}) == models.CharValue("c")
    assert parse_value({"type": "int"}) == models.PrimitiveType("int")
    assert parse_value({"annotation": "a.Marker"}) == models.Annotation("a.Marker")


def test_errors_name_the_offending_path():
    with pytest.raises(ModelFormatError) as info:
        parse_program_model({"packages": [{"name": "p", "members": [{"kind": "FIELD", "name": "x"}]}]})
    assert "$.packages[0].members[0]" in str(info.value)
    assert "'type'" in str(info.value)

    with pytest.raises(ModelFormatError):
        parse_type({"mystery": 1})
    with pytest.raises(ModelFormatError):
        parse_program_model({"packages": {"name": "not-a-list"}})
