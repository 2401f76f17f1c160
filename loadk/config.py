"""
Configuration for loadk runs

Defaults can be kept in a JSON file (~/.config/loadk/config.json); flags
given on the command line take precedence over it.
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loadk import constants
from loadk.parser import ParseOptions

logger = logging.getLogger("loadk.config")

# JSON key -> LoaderConfig attribute
CONFIG_KEYS = {
    "extract": "extract",
    "ignore_errors": "ignore_errors",
    "summary": "summary",
    "verbose": "verbose",
    "list": "list_entries",
    "base_dir": "base_dir",
    "timeout": "timeout",
}

BOOLEAN_OPTIONS = ("extract", "ignore_errors", "summary", "verbose", "list_entries")


def _check_value(attribute: str, value: Any) -> Any:
    """Validate a config file value for a LoaderConfig attribute."""
    if attribute in BOOLEAN_OPTIONS:
        if not isinstance(value, bool):
            raise ValueError(f"expected true or false, got {value!r}")
    elif attribute == "timeout":
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"expected a positive number of seconds, got {value!r}")
    elif attribute == "base_dir":
        if value is not None and not isinstance(value, str):
            raise ValueError(f"expected a directory path, got {value!r}")
    return value


@dataclass
class LoaderConfig:
    """
    Settings for a loadk run.

    Attributes:
        extract: Restore the dump contents to disk
        ignore_errors: Carry on past filesystem failures
        summary: Print a line per entry
        verbose: Detailed output
        list_entries: Print entry paths
        base_dir: Restore root (default: current directory)
        timeout: Timeout in seconds for remote dumps
    """
    extract: bool = False
    ignore_errors: bool = False
    summary: bool = False
    verbose: bool = False
    list_entries: bool = False
    base_dir: Optional[str] = None
    timeout: int = constants.DEFAULT_TIMEOUT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoaderConfig":
        """Build a config from JSON data; unknown keys and ill-typed values are logged and skipped."""
        config = cls()
        for key, value in data.items():
            attribute = CONFIG_KEYS.get(key)
            if attribute is None:
                logger.warning(f"Ignoring unknown config key: {key}")
                continue
            try:
                setattr(config, attribute, _check_value(attribute, value))
            except ValueError as e:
                logger.warning(f"Ignoring config key {key}: {e}")
        return config

    @classmethod
    def load(cls, config_path: Optional[Union[str, Path]] = None) -> "LoaderConfig":
        """
        Load the config file.

        A missing file gives the defaults; an unreadable or invalid file is
        logged and also gives the defaults.

        Args:
            config_path: Path to the JSON file (default: ~/.config/loadk/config.json)
        """
        path = Path(config_path) if config_path is not None else constants.DEFAULT_CONFIG_PATH
        if not path.exists():
            return cls()
        try:
            with open(path, "r") as f:
                data = json.load(f)
            logger.debug(f"Loaded config from {path}")
        except (json.JSONDecodeError, IOError) as e:
            logger.error(f"Failed to load config: {e}")
            return cls()
        if not isinstance(data, dict):
            logger.error(f"Failed to load config: {path} does not hold a JSON object")
            return cls()
        return cls.from_dict(data)

    def merge(self, **overrides) -> "LoaderConfig":
        """Return a copy with every override that is not None applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for key, value in overrides.items():
            if key not in values:
                raise TypeError(f"Unknown config option: {key}")
            if value is not None:
                values[key] = value
        return LoaderConfig(**values)

    def to_parse_options(self) -> ParseOptions:
        return ParseOptions(
            extract=bool(self.extract),
            ignore_errors=bool(self.ignore_errors),
            summary=bool(self.summary),
            verbose=bool(self.verbose),
            list_entries=bool(self.list_entries),
            base_dir=self.base_dir if self.base_dir is not None else os.getcwd(),
        )
