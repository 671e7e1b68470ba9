"""
prolog_facts.py

Converts a serialized program model (modules, packages, types and their
members) into Prolog facts, one file per module, package and type, laid
out along the namespace hierarchy.

Required third-party libraries:
- commentjson: JSONC configuration files.
- pathspec: gitwildmatch package exclusion.
- colorama: colored console output.
- PyYAML: YAML program models.
"""

import argparse
import logging
import sys
from typing import Any, Sequence

from colorama import Fore, Style

from declfacts.shared.console import ConsoleManager

from .config import OUTPUT_MODES, ConfigurationManager
from .core import FactGenerationService, GenerationReport
from .loader import ModelFormatError
from .writer import FactWriteError


class CliInterface:
    """
    Handles command-line arguments and application bootstrapping.
    """

    def __init__(self) -> None:
        self._parser = self._build_parser()

    def run(self, argv: Sequence[str] | None = None) -> int:
        args = self._parser.parse_args(argv)

        logger = ConsoleManager.configure(
            level=args.log_level or logging.INFO, no_color=args.no_color
        )

        try:
            config = self._build_config(args)

            service = FactGenerationService(app_config=config, logger=logger)
            report = service.run(args.model)

            if args.print_summary:
                self._print_summary(report, logger)

            return 0

        except FactWriteError as e:
            logger.critical(str(e))
            return 1
        except (FileNotFoundError, ModelFormatError, ValueError, IOError) as e:
            logger.critical(f"Configuration or Usage Error: {e}")
            return 1

    def _build_config(self, args: argparse.Namespace) -> dict[str, Any]:
        overrides = {
            "output_dir": args.output_dir,
            "output_mode": args.output_mode,
            "pretty_print": args.pretty_print,
            "indent": args.indent,
            "exclude": args.excludes,
        }

        mgr = ConfigurationManager()
        return mgr.load_config(args.config, overrides)

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="declfacts",
            description="Program model to Prolog facts generator.",
            formatter_class=argparse.RawTextHelpFormatter,
        )

        # Core
        parser.add_argument(
            "--model", required=True, help="Program model document (YAML or JSON)."
        )
        parser.add_argument("--config", help="Path to JSON/JSONC config.")
        parser.add_argument("-d", "--output", dest="output_dir", help="Output root.")
        parser.add_argument(
            "-e",
            "--exclude",
            action="append",
            dest="excludes",
            help="gitwildmatch pattern over package paths (a/b/c). Repeatable.",
        )

        # Output
        parser.add_argument("--output-mode", choices=sorted(OUTPUT_MODES))
        parser.add_argument(
            "--pretty-print",
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Indent nested terms over several lines.",
        )
        parser.add_argument("--indent", type=int, help="Pretty-print indent width.")

        # Log
        log_g = parser.add_mutually_exclusive_group()
        log_g.add_argument(
            "-v",
            "--verbose",
            action="store_const",
            dest="log_level",
            const=logging.DEBUG,
        )
        log_g.add_argument(
            "-q", "--quiet", action="store_const", dest="log_level", const=logging.ERROR
        )
        parser.add_argument("--no-color", action="store_true")
        parser.add_argument("--print-summary", action="store_true")

        return parser

    @staticmethod
    def _print_summary(report: GenerationReport, console: ConsoleManager) -> None:
        if console.level > logging.INFO:
            return

        print("\n--- Fact Generation Summary ---")
        summary_data = [
            ("Modules", report.modules, ""),
            ("Packages", report.packages, ""),
            ("  - Excluded", report.excluded_packages, Style.DIM),
            ("Types", report.types, ""),
            ("Methods", report.methods, ""),
            ("Constructors", report.constructors, ""),
            ("Fields", report.fields, ""),
            ("Skipped (Unsupported)", report.skipped, Fore.YELLOW),
            ("Files Written", report.files_written, Fore.GREEN),
        ]
        max_label = max(len(label) for label, _, _ in summary_data)
        for label, value, color in summary_data:
            val_str = console.colorize(str(value), color) if value else str(value)
            print(f"{label:<{max_label}} : {val_str}")
        print("-------------------------------")


def main() -> None:
    sys.exit(CliInterface().run())


if __name__ == "__main__":
    main()
