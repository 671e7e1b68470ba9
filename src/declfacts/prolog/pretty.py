from __future__ import annotations

from typing import Sequence

from .terms import Atom, Compound, PrologList, Term


class PrettyPrinter:
    """
    Formats a fact over several indented lines.

    A compound is laid out on one line when it has no arguments or only
    atoms and empty lists as arguments; a list when it holds only atoms.
    Everything else gets one element per line, one indent level deeper.
    """

    DEFAULT_INDENT = "    "

    def __init__(self, indent: str = DEFAULT_INDENT) -> None:
        self._indent = indent

    @property
    def indent(self) -> str:
        return self._indent

    def pretty_print(self, top: Compound) -> str:
        return self.format_term(top) + "."

    def format_term(self, term: Term) -> str:
        """Format any term, at indent level zero, without the terminating period."""
        parts: list[str] = []
        self._print_term(parts, term, 0)
        return "".join(parts)

    # --- Private Helpers ---

    def _print_term(self, parts: list[str], term: Term, level: int) -> None:
        if isinstance(term, Compound):
            self._print_compound(parts, term, level)
        elif isinstance(term, PrologList):
            self._print_list(parts, term, level)
        else:
            parts.append(term.encode())

    def _print_compound(self, parts: list[str], term: Compound, level: int) -> None:
        parts.append(f"{term.name}(")
        if self.is_simple_compound(term):
            parts.append(", ".join(a.encode() for a in term.arguments))
        else:
            self._print_block(parts, term.arguments, level)
        parts.append(")")

    def _print_list(self, parts: list[str], term: PrologList, level: int) -> None:
        parts.append("[")
        if self.is_simple_list(term):
            parts.append(", ".join(e.encode() for e in term.elements))
        else:
            self._print_block(parts, term.elements, level)
        parts.append("]")

    def _print_block(self, parts: list[str], items: Sequence[Term], level: int) -> None:
        parts.append("\n")
        last = len(items) - 1
        for i, item in enumerate(items):
            parts.append(self._indent * (level + 1))
            self._print_term(parts, item, level + 1)
            if i < last:
                parts.append(",")
            parts.append("\n")
        parts.append(self._indent * level)

    @staticmethod
    def is_simple_compound(term: Compound) -> bool:
        return all(
            isinstance(a, Atom) or (isinstance(a, PrologList) and not a.elements)
            for a in term.arguments
        )

    @staticmethod
    def is_simple_list(term: PrologList) -> bool:
        return all(isinstance(e, Atom) for e in term.elements)


def render_fact(top: Compound, *, pretty: bool, printer: PrettyPrinter | None = None) -> str:
    if pretty:
        return (printer or PrettyPrinter()).pretty_print(top)
    return top.encode() + "."
