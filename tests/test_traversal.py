import logging

from declfacts.prolog import models
from declfacts.prolog.terms import Atom, fact, plist
from declfacts.prolog.traversal import FactTraversal, WalkState

INT = models.PrimitiveType("int")
VOID = models.NoType("void")


def _names(members):
    return [(m.name, m.arguments[0]) for m in members]


def test_member_order_follows_visit_order(sink, console):
    cls = models.TypeSymbol(
        kind="CLASS",
        name="C",
        members=(
            models.VariableSymbol(kind="FIELD", name="fieldA", type=INT),
            models.ExecutableSymbol(kind="METHOD", name="methodB", return_type=VOID),
            models.VariableSymbol(kind="FIELD", name="fieldC", type=INT),
        ),
    )
    enclosing = []
    type_fact = FactTraversal(sink, console).visit_type(cls, "p", enclosing, WalkState())

    members = type_fact.arguments[7]
    assert _names(members.elements) == [
        ("field", Atom("fieldA")),
        ("method", Atom("methodB")),
        ("field", Atom("fieldC")),
    ]
    assert enclosing == [fact("type_declaration", Atom("C"), Atom("CLASS"))]


def test_nested_type_marks_only_enclosing_type(sink, console):
    inner = models.TypeSymbol(
        kind="CLASS",
        name="Inner",
        members=(models.ExecutableSymbol(kind="METHOD", name="innerMethod"),),
    )
    outer = models.TypeSymbol(
        kind="CLASS",
        name="Outer",
        members=(
            models.VariableSymbol(kind="FIELD", name="before", type=INT),
            inner,
            models.VariableSymbol(kind="FIELD", name="after", type=INT),
        ),
    )
    pkg = models.PackageSymbol(name="p", members=(outer,))
    state = WalkState()
    package_fact = FactTraversal(sink, console).visit_package(pkg, state)

    assert package_fact == fact(
        "package_declaration",
        Atom("p"),
        plist([fact("type_declaration", Atom("Outer"), Atom("CLASS"))]),
    )
    outer_members = sink.types[("p", "Outer")].arguments[7].elements
    assert _names(outer_members) == [
        ("field", Atom("before")),
        ("type_declaration", Atom("Inner")),
        ("field", Atom("after")),
    ]
    inner_members = sink.types[("p", "Inner")].arguments[7].elements
    assert _names(inner_members) == [("method", Atom("innerMethod"))]
    # the nested type is closed and written before its parent
    assert sink.order == ["type:p.Inner", "type:p.Outer", "package:p"]


def test_sibling_packages_do_not_share_members(sink, console):
    a = models.PackageSymbol(name="a", members=(models.TypeSymbol(kind="CLASS", name="A"),))
    b = models.PackageSymbol(name="b", members=(models.TypeSymbol(kind="ENUM", name="B"),))
    state = FactTraversal(sink, console).run(models.ProgramModel(packages=(a, b)))

    assert sink.packages["a"].arguments[1] == plist(
        [fact("type_declaration", Atom("A"), Atom("CLASS"))]
    )
    assert sink.packages["b"].arguments[1] == plist(
        [fact("type_declaration", Atom("B"), Atom("ENUM"))]
    )
    assert state.package_index_fact().encode() == "package_index([a, b])"
    assert not state.has_modules


def test_type_shapes(sink, console):
    iface = models.TypeSymbol(
        kind="INTERFACE",
        name="Shape",
        modifiers=("public", "sealed"),
        type_parameters=(models.TypeParameter("T"),),
        interfaces=(models.DeclaredType("java.lang.Comparable"),),
        permitted_subclasses=("p.Circle",),
    )
    record = models.TypeSymbol(
        kind="RECORD",
        name="Point",
        record_components=(models.RecordComponent("x", INT),),
    )
    enum = models.TypeSymbol(
        kind="ENUM",
        name="Color",
        members=(
            models.VariableSymbol(kind="ENUM_CONSTANT", name="RED", type=models.DeclaredType("p.Color")),
        ),
    )
    anno = models.TypeSymbol(kind="ANNOTATION_TYPE", name="Marker", modifiers=("public",))
    pkg = models.PackageSymbol(name="p", members=(iface, record, enum, anno))
    FactTraversal(sink, console).visit_package(pkg, WalkState())

    assert sink.types[("p", "Shape")].encode() == (
        "interface('Shape', p, [modifier(public), modifier(sealed)], "
        "[type_parameter('T', [], [])], "
        "[implements(declared, declared_type('java.lang.Comparable', []))], [], [], "
        "[declared_type('p.Circle', [])], '')"
    )
    assert sink.types[("p", "Point")].encode() == (
        "record('Point', p, [], [], [], [record_component(x, type(primitive, int), [])], [], [], '')"
    )
    assert sink.types[("p", "Color")].encode() == "enum('Color', p, [], [], [], [], '')"
    assert sink.types[("p", "Marker")].encode() == (
        "annotation_type('Marker', p, [modifier(public)], [], '')"
    )


def test_method_and_constructor_facts(sink, console):
    cls = models.TypeSymbol(
        kind="CLASS",
        name="Service",
        superclass=models.DeclaredType("p.Base"),
        members=(
            models.ExecutableSymbol(
                kind="CONSTRUCTOR",
                name="<init>",
                modifiers=("public",),
                parameters=(models.Parameter("id", INT),),
            ),
            models.ExecutableSymbol(
                kind="METHOD",
                name="load",
                type_parameters=(models.TypeParameter("T"),),
                return_type=models.TypeVariable("T"),
                thrown_types=(models.DeclaredType("java.io.IOException"),),
                annotations=(models.Annotation("java.lang.Deprecated"),),
            ),
        ),
    )
    type_fact = FactTraversal(sink, console).visit_type(cls, "p", [], WalkState())

    assert type_fact.arguments[4].encode() == "extends(declared, declared_type('p.Base', []))"
    ctor, method = type_fact.arguments[7].elements
    assert ctor.encode() == (
        "constructor('<init>', [modifier(public)], [], "
        "[parameter(id, type(primitive, int), [], [])], [], [], '')"
    )
    assert method.encode() == (
        "method(load, [], [type_parameter('T', [], [])], type(type_variable, 'T'), [], "
        "[throws(declared_type('java.io.IOException', []))], "
        "[annotation('java.lang.Deprecated', [])], '')"
    )


def test_docs_only_in_full_mode(sink, console):
    cls = models.TypeSymbol(kind="CLASS", name="D", doc="Docs\nhere")
    minimal = FactTraversal(sink, console).visit_type(cls, "p", [], WalkState())
    full = FactTraversal(sink, console, include_docs=True).visit_type(cls, "p", [], WalkState())
    assert minimal.arguments[-1] == Atom("")
    assert full.arguments[-1] == Atom("Docs\\nhere")


def test_unsupported_kinds_are_skipped(sink, console, caplog):
    cls = models.TypeSymbol(
        kind="CLASS",
        name="C",
        members=(
            models.ExecutableSymbol(kind="STATIC_INIT", name="<clinit>"),
            models.VariableSymbol(kind="MYSTERY", name="m", type=INT),
            models.VariableSymbol(kind="LOCAL_VARIABLE", name="tmp", type=INT),
            models.VariableSymbol(kind="FIELD", name="kept", type=INT),
        ),
    )
    odd = models.TypeSymbol(kind="MODULE", name="Odd")
    pkg = models.PackageSymbol(name="p", members=(cls, odd))
    state = WalkState()
    with caplog.at_level(logging.WARNING):
        package_fact = FactTraversal(sink, console).visit_package(pkg, state)

    assert package_fact.arguments[1] == plist(
        [fact("type_declaration", Atom("C"), Atom("CLASS"))]
    )
    assert ("p", "Odd") not in sink.types
    assert _names(sink.types[("p", "C")].arguments[7].elements) == [("field", Atom("kept"))]
    assert state.stats["skipped"] == 3
    assert "Unsupported executable kind: STATIC_INIT" in caplog.text
    assert "Unsupported variable kind: MYSTERY" in caplog.text
    assert "Unsupported type kind: MODULE for p.Odd" in caplog.text


def test_modules_and_qualified_exports(sink, console):
    module = models.ModuleSymbol(
        name="com.example",
        directives=(
            models.RequiresDirective("java.base"),
            models.RequiresDirective("java.sql", ("transitive",)),
            models.ExportsDirective("com.example.api"),
            models.ExportsDirective("com.example.internal", ("com.friend",)),
            models.UsesDirective(models.DeclaredType("com.example.spi.Plugin")),
            models.ProvidesDirective(
                models.DeclaredType("com.example.spi.Plugin"),
                (models.DeclaredType("com.example.impl.Default"),),
            ),
        ),
        packages=("com.example.api", "com.example.internal"),
    )
    model = models.ProgramModel(
        modules=(module,),
        packages=(
            models.PackageSymbol(name="com.example.api"),
            models.PackageSymbol(name="com.example.internal"),
        ),
    )
    state = FactTraversal(sink, console).run(model)

    assert sink.modules["com.example"].encode() == (
        "module('com.example', [], "
        "[requires([transitive], 'java.sql', [])], "
        "[exports('com.example.api', [], []), "
        "exports('com.example.internal', ['com.friend'], [])], "
        "[declared_type('com.example.spi.Plugin', [])], "
        "[provides(declared_type('com.example.spi.Plugin', []), "
        "[declared_type('com.example.impl.Default', [])], [])], "
        "['com.example.api', 'com.example.internal'])"
    )
    assert state.has_modules
    assert state.module_index_fact().encode() == "module_index(['com.example'])"
    # qualified export keeps the package out of the package index only
    assert state.package_index_fact().encode() == "package_index(['com.example.api'])"
    assert "package:com.example.internal" in sink.order


def test_run_returns_fresh_state_each_time(sink, console, widget_package):
    traversal = FactTraversal(sink, console)
    model = models.ProgramModel(packages=(widget_package,))
    first = traversal.run(model)
    second = traversal.run(model)
    assert first.package_index == second.package_index == [Atom("com.example.ui")]
    assert second.stats["types"] == 1
    assert second.stats["fields"] == 1
    assert second.stats["methods"] == 1
