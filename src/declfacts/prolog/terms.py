"""
terms.py

Immutable term values (atoms, compounds, lists) and their canonical
single-line encoding.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

_PLAIN_ATOM = re.compile(r"[a-z][a-zA-Z0-9_]*")
RESERVED_ATOMS: frozenset[str] = frozenset({"true", "false", "null"})


class Term:
    """
    Base class for every value that can appear in a fact.
    """

    __slots__ = ()

    def encode(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.encode()


@dataclass(slots=True, frozen=True)
class Atom(Term):
    """A scalar token. Quoted unless it is a plain lower-case identifier."""

    value: str

    def encode(self) -> str:
        escaped = self.value.replace("'", "''")
        if _PLAIN_ATOM.fullmatch(escaped) and escaped not in RESERVED_ATOMS:
            return escaped
        return f"'{escaped}'"


@dataclass(slots=True, frozen=True)
class Compound(Term):
    """A named term with a fixed, ordered argument tuple."""

    name: str
    arguments: tuple[Term, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))

    @property
    def arity(self) -> int:
        return len(self.arguments)

    def encode(self) -> str:
        return f"{self.name}({', '.join(a.encode() for a in self.arguments)})"


@dataclass(slots=True, frozen=True)
class PrologList(Term):
    """An ordered sequence of terms."""

    elements: tuple[Term, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))

    def __len__(self) -> int:
        return len(self.elements)

    def encode(self) -> str:
        return f"[{', '.join(e.encode() for e in self.elements)}]"


def fact(name: str, *arguments: Term) -> Compound:
    return Compound(name, arguments)


def plist(elements: Iterable[Term] = ()) -> PrologList:
    return PrologList(tuple(elements))


def unquote_atom(text: str) -> str:
    """
    Inverse of ``Atom.encode``: strips the surrounding quotes of a quoted
    atom and collapses doubled quotes back to single ones.
    """
    if len(text) >= 2 and text.startswith("'") and text.endswith("'"):
        return text[1:-1].replace("''", "'")
    return text
