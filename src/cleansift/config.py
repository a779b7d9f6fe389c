"""Configuration loading for cleansift.

Reads settings from the [tool.cleansift] section of the nearest
pyproject.toml. The raw settings mapping carries no defaults; the typed
accessors validate values, warn about malformed ones and fall back to the
built-in defaults.

cleansift/src/cleansift/config.py
"""

import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .discovery import find_project_root

if sys.version_info >= (3, 11):

    import tomllib
else:

    try:

        import tomli as tomllib
    except ImportError as e:

        raise ImportError(
            "cleansift requires Python 3.11+ or the 'tomli' package "
            "to parse pyproject.toml on Python 3.10. "
            "Hint: Try running: pip install tomli"
        ) from e

logger = logging.getLogger(__name__)

__all__ = ["Config", "load_config"]

_SECTION = "cleansift"


class Config:
    """Holds the cleansift configuration loaded from pyproject.toml.

    Attributes:
    project_root: The directory containing the pyproject.toml, or None if
    no project root was found.
    settings: A read-only view of the [tool.cleansift] table. Empty if the
    file or section is missing or invalid.

    cleansift/src/cleansift/config.py

    """

    def __init__(self, project_root: Optional[Path], config_dict: Dict[str, Any]):
        self._project_root = project_root
        self._config_dict = dict(config_dict)

    @property
    def project_root(self) -> Optional[Path]:
        return self._project_root

    @property
    def settings(self) -> Mapping:
        """Read-only view of the settings loaded from [tool.cleansift]."""
        return self._config_dict

    def get(self, key: str, default: Any = None) -> Any:
        return self._config_dict.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Gets a value, raising KeyError if the key is not found."""
        if key not in self._config_dict:
            raise KeyError(
                f"Required configuration key '{key}' not found in "
                f"[tool.{_SECTION}] section of pyproject.toml."
            )
        return self._config_dict[key]

    def __contains__(self, key: str) -> bool:
        return key in self._config_dict

    def is_present(self) -> bool:
        """Checks if a project root was found and some settings were loaded."""
        return self._project_root is not None and bool(self._config_dict)

    # --- Typed accessors ---

    @property
    def exclude_patterns(self) -> List[str]:
        """Extra excluded path prefixes, added to the scanner defaults."""
        return self._string_list("exclude_patterns")

    @property
    def critical_patterns(self) -> List[str]:
        """Extra critical path substrings, added to the engine defaults."""
        return self._string_list("critical_patterns")

    @property
    def analyzers(self) -> Optional[List[str]]:
        """Names of analyzers to enable, or None to enable every registered one."""
        if "analyzers" not in self._config_dict:
            return None
        return self._string_list("analyzers")

    @property
    def category_weights(self) -> Dict[str, float]:
        return self._weight_table("category_weights")

    @property
    def analyzer_weights(self) -> Dict[str, float]:
        return self._weight_table("analyzer_weights")

    @property
    def progress_log_interval(self) -> int:
        value = self.get("progress_log_interval", 50)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            logger.warning(
                f"Configuration key 'progress_log_interval' in [tool.{_SECTION}] must be a "
                f"positive integer, got {value!r}. Using 50."
            )
            return 50
        return value

    @property
    def max_displayed_files(self) -> int:
        """Files listed per report section; 0 lists them all."""
        value = self.get("max_displayed_files", 50)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.warning(
                f"Configuration key 'max_displayed_files' in [tool.{_SECTION}] must be a "
                f"non-negative integer, got {value!r}. Using 50."
            )
            return 50
        return value

    def _string_list(self, key: str) -> List[str]:
        value = self.get(key, [])
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return list(value)

        logger.warning(
            f"Configuration key '{key}' in [tool.{_SECTION}] is not a list of strings. Ignoring it."
        )
        return []

    def _weight_table(self, key: str) -> Dict[str, float]:
        value = self.get(key, {})
        if not isinstance(value, Mapping):
            logger.warning(
                f"Configuration key '{key}' in [tool.{_SECTION}] must be a table. Ignoring it."
            )
            return {}

        weights: Dict[str, float] = {}
        for name, weight in value.items():
            if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight < 0:
                logger.warning(
                    f"Ignoring {key}.{name} = {weight!r}: weights must be non-negative numbers."
                )
                continue
            weights[str(name)] = float(weight)
        return weights


def _read_section(pyproject_path: Path) -> Union[Dict[str, Any], None]:
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Failed to load config from {pyproject_path}: {e}")
        return None

    section = data.get("tool", {}).get(_SECTION)
    if section is None:
        return None
    if not isinstance(section, dict):
        logger.warning(f"[tool.{_SECTION}] in {pyproject_path} is not a table. Ignoring it.")
        return None
    return section


def load_config(start_path: Path) -> Config:
    """Loads cleansift configuration from the nearest pyproject.toml.

    Args:
    start_path: The directory to start searching upwards from.

    Returns:
    A Config object; its settings are empty when no [tool.cleansift]
    section was found.

    cleansift/src/cleansift/config.py

    """
    project_root = find_project_root(start_path)
    if project_root is None:
        logger.debug(
            f"Could not find project root (pyproject.toml) searching from '{start_path}'. "
            "Using defaults."
        )
        return Config(project_root=None, config_dict={})

    pyproject_path = project_root / "pyproject.toml"
    if not pyproject_path.exists():
        logger.debug(f"No pyproject.toml in {project_root}; using defaults")
        return Config(project_root, {})

    section = _read_section(pyproject_path)
    if section is None:
        logger.debug(f"No [tool.{_SECTION}] section in {pyproject_path}")
        return Config(project_root, {})

    logger.debug(f"Loaded cleansift config from {pyproject_path}")
    return Config(project_root, section)
