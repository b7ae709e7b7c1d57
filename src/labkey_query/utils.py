"""labkey_query.utils

Utility helpers shared across the labkey_query package.
"""
from __future__ import annotations

import logging

__all__ = [
    "normalize_slash",
    "build_url",
    "enable_debug_logging",
]

_LOGGER_NAME = "labkey_query"


def normalize_slash(segment: str) -> str:
    """Drop one leading slash and end with exactly one trailing slash."""
    if segment.startswith("/"):
        segment = segment[1:]
    if segment.endswith("/"):
        segment = segment[:-1]
    return segment + "/"


def build_url(base_url: str, controller: str, container_path: str, action: str) -> str:
    """Return ``<base>/<controller>/<container>/<action>?``.

    >>> build_url("http://h/labkey", "query", "myFolder", "getQuery.api")
    'http://h/labkey/query/myFolder/getQuery.api?'
    """
    return (
        normalize_slash(base_url)
        + normalize_slash(controller)
        + normalize_slash(container_path)
        + action
        + "?"
    )


def enable_debug_logging() -> logging.Logger:
    """Send the package's debug output to stderr."""
    logger = logging.getLogger(_LOGGER_NAME)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(h)
        logger.propagate = False
    logger.setLevel(logging.DEBUG)
    return logger
