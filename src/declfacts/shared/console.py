import logging
import sys
from pathlib import Path
from typing import Iterable

from colorama import Fore, Style, init

LOGGER_NAME = "declfacts"

_LEVEL_COLORS: dict[int, str] = {
    logging.DEBUG: Style.DIM,
    logging.INFO: "",
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ConsoleManager:
    """
    Leveled console output on the ``declfacts`` logger.

    Messages under ``level`` are dropped before they reach logging; the
    rest are colored by level unless ``no_color`` is set.
    """

    def __init__(self, level: int = logging.INFO, no_color: bool = False):
        self.level = level
        self.no_color = no_color
        self._logger = logging.getLogger(LOGGER_NAME)
        if not no_color:
            init(autoreset=True)

    @classmethod
    def configure(cls, level: int, no_color: bool) -> "ConsoleManager":
        """Install a stderr handler on the root logger and return a console."""
        logging.basicConfig(
            level=level,
            format="%(message)s",
            handlers=[logging.StreamHandler(sys.stderr)],
        )
        return cls(level=level, no_color=no_color)

    def _log(self, msg: str, log_level: int):
        if log_level < self.level:
            return
        self._logger.log(log_level, self.colorize(msg, _LEVEL_COLORS.get(log_level, "")))

    def debug(self, msg: str):
        self._log(msg, logging.DEBUG)

    def info(self, msg: str):
        self._log(msg, logging.INFO)

    def warning(self, msg: str):
        self._log(msg, logging.WARNING)

    def error(self, msg: str):
        self._log(msg, logging.ERROR)

    def critical(self, msg: str):
        self._log(msg, logging.CRITICAL)

    def report_written(self, paths: Iterable[Path], root: Path):
        """List written fact files, relative to their output root, in verbose mode."""
        if self.level > logging.DEBUG:
            return

        for path in paths:
            try:
                shown = path.relative_to(root)
            except ValueError:
                shown = path
            self.debug(f"WRITE:   {shown.as_posix()}")

    def colorize(self, text: str, color: str) -> str:
        if self.no_color or not color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"
