from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pathspec

from declfacts.shared.console import ConsoleManager

from . import models
from .config import OUTPUT_MODES
from .loader import load_program_model
from .pretty import PrettyPrinter
from .traversal import FactTraversal, TraversalStats
from .writer import FactWriter


@dataclass
class GenerationReport:
    """Summary of a full generation run."""

    modules: int = 0
    packages: int = 0
    types: int = 0
    methods: int = 0
    constructors: int = 0
    fields: int = 0
    skipped: int = 0
    excluded_packages: int = 0
    files_written: int = 0
    output_dirs: list[Path] = field(default_factory=list)

    def tally(self, stats: TraversalStats) -> None:
        """Add the tallies of one traversal."""
        for key, value in stats.items():
            setattr(self, key, getattr(self, key) + value)


class FactGenerationService:
    """
    Core service turning a program model into fact files, one output tree
    per configured mode.
    """

    def __init__(
        self,
        *,
        app_config: dict[str, Any],
        logger: ConsoleManager,
    ) -> None:
        self._app_config = app_config
        self._logger = logger

        # Dependencies
        self._path_matcher = self._init_path_matcher()
        self._printer = PrettyPrinter(" " * int(self._app_config.get("indent", 4)))

    def run(self, model_path: str | Path) -> GenerationReport:
        """
        Loads the model at ``model_path`` and writes all facts.
        """
        self._logger.info(f"Loading program model from '{model_path}'")
        model = load_program_model(model_path)
        return self.generate(model)

    def generate(self, model: models.ProgramModel) -> GenerationReport:
        model, excluded = self._filter_model(model)
        report = GenerationReport(excluded_packages=excluded)

        output_root = Path(self._app_config.get("output_dir", "prolog-facts"))
        modes = OUTPUT_MODES[self._app_config.get("output_mode", "both")]
        pretty = bool(self._app_config.get("pretty_print", False))

        for mode in modes:
            writer = FactWriter(
                output_root / mode,
                pretty_print=pretty,
                printer=self._printer,
                logger=self._logger,
            )
            self._logger.info(f"Generating {mode} facts to: {writer.output_dir.resolve()}")

            traversal = FactTraversal(writer, self._logger, include_docs=(mode == "full"))
            state = traversal.run(model)

            if state.has_modules:
                writer.write_index(state.module_index_fact())
            writer.write_index(state.package_index_fact())

            # every mode walks the same model; count it once
            if mode == modes[0]:
                report.tally(state.stats)
            self._logger.report_written(writer.files_written, writer.output_dir)
            report.files_written += len(writer.files_written)
            report.output_dirs.append(writer.output_dir)

        self._logger.info("Fact generation completed successfully.")
        return report

    # --- Private Helpers ---

    def _init_path_matcher(self) -> pathspec.PathSpec | None:
        patterns = self._app_config.get("exclude")
        if patterns:
            return pathspec.PathSpec.from_lines("gitwildmatch", patterns)
        return None

    def _filter_model(
        self, model: models.ProgramModel
    ) -> tuple[models.ProgramModel, int]:
        if self._path_matcher is None:
            return model, 0

        kept: list[models.PackageSymbol] = []
        for pkg in model.packages:
            # packages are directories; "a/b/" must match a.b itself
            if self._path_matcher.match_file(f"{pkg.path}/"):
                self._logger.debug(f"EXCLUDE: {pkg.name}")
                continue
            kept.append(pkg)

        excluded = len(model.packages) - len(kept)
        return dataclasses.replace(model, packages=tuple(kept)), excluded
