"""
Typegraph Settings

Extraction and logging settings merged from defaults, an optional typegraph.yaml
file, and environment variables.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml

from typegraph.configs.constants import DEFAULT_SEARCH_UP_DIR_LIMIT
from typegraph.exceptions import ConfigurationError

CONFIG_FILE_NAME = "typegraph.yaml"

# --- Default Settings ---

DEFAULT_SETTINGS: dict[str, Any] = {
    # Directories checked for go.mod, starting with the file's own
    "search_up_dir_limit": DEFAULT_SEARCH_UP_DIR_LIMIT,
    # Parse *_test.go files when pulling in a referenced package
    "include_test_files": False,
    # Follow import paths into <module root>/vendor
    "use_vendor": True,
    # Logging, applied by setup_logging()
    "debug": False,
    "log_file": None,
}


def get_config_path() -> Path:
    """Get the path to typegraph.yaml (TYPEGRAPH_CONFIG or the working directory)."""
    env_path = os.environ.get("TYPEGRAPH_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return Path.cwd() / CONFIG_FILE_NAME


def load_yaml_settings(path: Optional[Path] = None) -> dict:
    """
    Load settings from a YAML file.

    Args:
        path: File to read. Defaults to get_config_path().

    Returns:
        Settings dictionary (empty if the file doesn't exist)
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        return {}

    try:
        content = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}", {"error": str(e)}) from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Expected a mapping in {config_path}")
    return content


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no", ""):
        return False
    raise ConfigurationError(f"Invalid boolean for {name}", {"value": value})


def get_settings(overrides: Optional[dict] = None, path: Optional[Path] = None) -> dict:
    """
    Get extraction settings.

    Priority (highest wins):
    1. overrides argument
    2. Environment variables
    3. YAML config file
    4. DEFAULT_SETTINGS

    Returns:
        Merged settings dictionary
    """
    settings = dict(DEFAULT_SETTINGS)

    for key, value in load_yaml_settings(path).items():
        if key in settings:
            settings[key] = value

    # Environment overrides
    if os.environ.get("TYPEGRAPH_SEARCH_UP_DIR_LIMIT"):
        try:
            settings["search_up_dir_limit"] = int(os.environ["TYPEGRAPH_SEARCH_UP_DIR_LIMIT"])
        except ValueError as e:
            raise ConfigurationError(
                "TYPEGRAPH_SEARCH_UP_DIR_LIMIT must be an integer",
                {"value": os.environ["TYPEGRAPH_SEARCH_UP_DIR_LIMIT"]},
            ) from e

    if os.environ.get("TYPEGRAPH_INCLUDE_TESTS"):
        settings["include_test_files"] = _parse_bool(
            "TYPEGRAPH_INCLUDE_TESTS", os.environ["TYPEGRAPH_INCLUDE_TESTS"]
        )

    if os.environ.get("TYPEGRAPH_DEBUG"):
        settings["debug"] = _parse_bool("TYPEGRAPH_DEBUG", os.environ["TYPEGRAPH_DEBUG"])

    if os.environ.get("TYPEGRAPH_LOG_FILE"):
        settings["log_file"] = os.environ["TYPEGRAPH_LOG_FILE"]

    if overrides:
        unknown = set(overrides) - set(DEFAULT_SETTINGS)
        if unknown:
            raise ConfigurationError("Unknown settings", {"keys": sorted(unknown)})
        settings.update(overrides)

    limit = settings["search_up_dir_limit"]
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise ConfigurationError("search_up_dir_limit must be a positive integer", {"value": limit})

    return settings
