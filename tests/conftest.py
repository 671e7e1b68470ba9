import logging

import pytest

from declfacts.prolog import models
from declfacts.prolog.terms import Compound
from declfacts.shared.console import ConsoleManager


class RecordingSink:
    """Collects written facts in memory, in write order."""

    def __init__(self):
        self.modules: dict[str, Compound] = {}
        self.packages: dict[str, Compound] = {}
        self.types: dict[tuple[str, str], Compound] = {}
        self.order: list[str] = []

    def write_module_summary(self, module_name, module_fact):
        self.modules[module_name] = module_fact
        self.order.append(f"module:{module_name}")

    def write_package_summary(self, package_name, package_fact):
        self.packages[package_name] = package_fact
        self.order.append(f"package:{package_name}")

    def write_type(self, package_name, type_name, type_fact):
        self.types[(package_name, type_name)] = type_fact
        self.order.append(f"type:{package_name}.{type_name}")


@pytest.fixture
def console():
    return ConsoleManager(level=logging.DEBUG, no_color=True)


@pytest.fixture
def sink():
    return RecordingSink()


STRING = models.DeclaredType("java.lang.String")
INT = models.PrimitiveType("int")


@pytest.fixture
def widget_package():
    """One class with a field and a method, no docs."""
    widget = models.TypeSymbol(
        kind="CLASS",
        name="Widget",
        members=(
            models.VariableSymbol(kind="FIELD", name="size", type=INT),
            models.ExecutableSymbol(kind="METHOD", name="render", return_type=STRING),
        ),
    )
    return models.PackageSymbol(name="com.example.ui", members=(widget,))
