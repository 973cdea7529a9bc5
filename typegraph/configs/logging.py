"""
Typegraph Logging Configuration

typegraph is a library: its loggers live under the "typegraph" namespace
and carry only a NullHandler until the embedding tool opts in with
setup_logging(). Debug level and log file come from the typegraph
settings (typegraph.yaml, TYPEGRAPH_DEBUG, TYPEGRAPH_LOG_FILE) unless
passed explicitly.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from typegraph.configs.settings import get_settings

ROOT_LOGGER = "typegraph"
LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def setup_logging(
    debug: Optional[bool] = None,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Attach typegraph's handlers to the "typegraph" logger.

    Handlers from an earlier call are replaced; handlers added by the
    embedding application are left alone.

    Args:
        debug: Enable debug level. Defaults to the "debug" setting.
        log_file: Also write to this file; stderr then shows warnings only.
                  Defaults to the "log_file" setting.
        stream: Stream for console output (default: sys.stderr)

    Returns:
        The "typegraph" logger
    """
    if debug is None or log_file is None:
        settings = get_settings()
        if debug is None:
            debug = settings["debug"]
        if log_file is None:
            log_file = settings["log_file"]

    level = logging.DEBUG if debug else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    for handler in [h for h in logger.handlers if getattr(h, "_typegraph", False)]:
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream or sys.stderr)
    console.setLevel(logging.WARNING if log_file else level)
    _install(logger, console, formatter)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        _install(logger, file_handler, formatter)
        logger.debug(f"Logging to file: {log_file}")

    return logger


def _install(logger: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setFormatter(formatter)
    handler._typegraph = True
    logger.addHandler(handler)


def get_logger(component: str) -> logging.Logger:
    """
    Get a logger for a specific component.

    Args:
        component: Component name (e.g., "resolve.resolver", "ast.parser")

    Returns:
        Logger instance for the component
    """
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")
