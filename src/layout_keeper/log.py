"""
Logging setup for LayoutKeeper

Records go to stderr so that a saved layout printed on stdout stays clean.
"""

import logging
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_LEVELS = {
    "off": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"


def parse_level(name: str) -> int:
    """Translate a level name (case-insensitive) to a logging level"""
    try:
        return LOG_LEVELS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Invalid log level {name!r}. Valid values: {', '.join(LOG_LEVELS)}"
        ) from None


def initialize_logging(level: int | str = logging.INFO) -> None:
    if isinstance(level, str):
        level = parse_level(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
