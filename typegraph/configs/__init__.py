"""
Typegraph Configuration Module

Re-exports commonly used functions for cleaner imports across the codebase.
"""

# Logging (most commonly used)
from typegraph.configs.logging import get_logger, setup_logging

# Constants
from typegraph.configs.constants import (
    DEFAULT_SEARCH_UP_DIR_LIMIT,
    EMPTY_INTERFACE_NAME,
    GO_FILE_SUFFIX,
    MANIFEST_FILE,
    PREDECLARED_TYPES,
    TEST_FILE_SUFFIX,
    VENDOR_DIR,
)

# Settings
from typegraph.configs.settings import (
    DEFAULT_SETTINGS,
    get_config_path,
    get_settings,
    load_yaml_settings,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Constants
    "DEFAULT_SEARCH_UP_DIR_LIMIT",
    "EMPTY_INTERFACE_NAME",
    "GO_FILE_SUFFIX",
    "MANIFEST_FILE",
    "PREDECLARED_TYPES",
    "TEST_FILE_SUFFIX",
    "VENDOR_DIR",
    # Settings
    "DEFAULT_SETTINGS",
    "get_config_path",
    "get_settings",
    "load_yaml_settings",
]
