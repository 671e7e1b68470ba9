import json
from pathlib import Path
from typing import Any

import commentjson  # type: ignore

OUTPUT_MODES: dict[str, tuple[str, ...]] = {
    "minimal": ("minimal",),
    "full": ("full",),
    "both": ("full", "minimal"),
}


class ConfigurationManager:
    """
    Manages loading and merging of application configuration.
    """

    def __init__(self, *, base_path: Path | None = None) -> None:
        self._base_path = base_path or Path(__file__).parent

    def load_config(
        self, user_config_path: str | None, cli_overrides: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Loads defaults, merges with user JSONC, and applies CLI overrides.
        """
        config = self._load_defaults()

        if user_config_path:
            self._merge_user_file(config, Path(user_config_path))

        # Apply CLI overrides (filtering out None values)
        config.update({k: v for k, v in cli_overrides.items() if v is not None})

        self._validate(config)
        return config

    def _load_defaults(self) -> dict[str, Any]:
        defaults_path = self._base_path / "defaults.json"
        if not defaults_path.exists():
            return {}

        with open(defaults_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _merge_user_file(self, config: dict[str, Any], path: Path) -> None:
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                user_conf = commentjson.load(f)
        except Exception as e:
            raise IOError(f"Failed to parse config file {path}: {e}")
        if not isinstance(user_conf, dict):
            raise IOError(f"Config file {path} must hold a JSON object.")
        config.update(user_conf)

    @staticmethod
    def _validate(config: dict[str, Any]) -> None:
        mode = config.get("output_mode", "both")
        if mode not in OUTPUT_MODES:
            raise ValueError(
                f"Invalid output_mode {mode!r}; expected one of {sorted(OUTPUT_MODES)}"
            )
        indent = config.get("indent", 4)
        if isinstance(indent, bool) or not isinstance(indent, int) or indent <= 0:
            raise ValueError(f"indent must be a positive integer, got {indent!r}")
        if not isinstance(config.get("exclude", []), list):
            raise ValueError("exclude must be a list of patterns")
