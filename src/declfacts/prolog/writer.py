from __future__ import annotations

from pathlib import Path

from declfacts.shared.console import ConsoleManager

from .pretty import PrettyPrinter, render_fact
from .terms import Compound

FACT_EXTENSION = ".pl"


class FactWriteError(IOError):
    """A fact file could not be written. Aborts the run."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"Failed to write {path}: {message}")
        self.path = path
        self.message = message


class FactWriter:
    """
    Persists top-level facts in a directory tree that mirrors the dotted
    namespace: ``a.b.C`` lands in ``a/b/C.pl``; package and module
    summaries are ``package.pl`` and ``module.pl`` inside their directory.
    """

    def __init__(
        self,
        output_dir: Path,
        *,
        pretty_print: bool = False,
        printer: PrettyPrinter | None = None,
        logger: ConsoleManager | None = None,
    ) -> None:
        self._output_dir = Path(output_dir)
        self._pretty_print = pretty_print
        self._printer = printer or PrettyPrinter()
        self._logger = logger
        self._written: list[Path] = []

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def files_written(self) -> list[Path]:
        return list(self._written)

    def write_module_summary(self, module_name: str, module_fact: Compound) -> Path:
        return self._write(module_name, "module", module_fact)

    def write_package_summary(self, package_name: str, package_fact: Compound) -> Path:
        return self._write(package_name, "package", package_fact)

    def write_type(self, package_name: str, type_name: str, type_fact: Compound) -> Path:
        return self._write(package_name, type_name, type_fact)

    def write_index(self, index_fact: Compound, file_name: str | None = None) -> Path:
        return self._write("", file_name or index_fact.name, index_fact)

    def path_for(self, hierarchy: str, file_name: str) -> Path:
        fact_dir = self._output_dir
        if hierarchy:
            fact_dir = fact_dir.joinpath(*hierarchy.split("."))
        return fact_dir / f"{file_name}{FACT_EXTENSION}"

    # --- Private Helpers ---

    def _write(self, hierarchy: str, file_name: str, top: Compound) -> Path:
        path = self.path_for(hierarchy, file_name)
        text = render_fact(top, pretty=self._pretty_print, printer=self._printer)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(text + "\n")
        except OSError as e:
            raise FactWriteError(path, e.strerror or str(e)) from e

        if path in self._written:
            # nested types share the package directory and are named by simple name
            if self._logger is not None:
                self._logger.warning(f"Overwrote {path}: written twice in this run")
        else:
            self._written.append(path)
        return path
