# noqa: D104
"""Top-level package for labkey_query."""
from __future__ import annotations

__version__ = "1.0.7"
__all__ = [
    "LabKeyClient",
    "ServerOptions",
    "select_rows",
    "insert_rows",
    "update_rows",
    "delete_rows",
    "execute_sql",
]

_QUERY_FUNCS = {"select_rows", "insert_rows", "update_rows", "delete_rows", "execute_sql"}


def __getattr__(name):  # type: ignore[override]
    if name == "LabKeyClient":
        from .client import LabKeyClient

        return LabKeyClient
    if name == "ServerOptions":
        from .config import ServerOptions

        return ServerOptions
    if name in _QUERY_FUNCS:
        from . import query

        return getattr(query, name)
    raise AttributeError(name)
