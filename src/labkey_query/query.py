"""labkey_query.query

The query controller operations: select, insert, update and delete rows,
and run arbitrary LabKey SQL.

Every function takes its own arguments plus the common server options
(``base_url``, ``container_path``, ``api_key``, ``login_as_guest``,
``netrc_file``, ``machine``, ``http_client``, ``timeout``, ``debug``) either
as keywords or as a ready :class:`~labkey_query.config.ServerOptions` via
``options=``. Each returns the decoded JSON response unchanged.

Example::

    from labkey_query import select_rows

    result = select_rows(
        schema_name="lists",
        query_name="mid_tags",
        filter_array=[("file_active", "eq", 1), ("species", "neq", "zebra")],
        base_url="http://labkey.com:8080/labkey/",
        container_path="myFolder/",
    )
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, NamedTuple, Optional, Sequence

from .config import ServerOptions
from .context import build_context
from .errors import MissingParameterError
from .transport import post

__all__ = [
    "DEFAULT_API_VERSION",
    "FilterSpec",
    "ParameterSpec",
    "select_rows",
    "insert_rows",
    "update_rows",
    "delete_rows",
    "execute_sql",
]

CONTROLLER = "query"

# result format selector; the response shape depends on it
DEFAULT_API_VERSION = 9.1

Row = Mapping[str, Any]


class FilterSpec(NamedTuple):
    column: str
    operator: str
    value: Any


class ParameterSpec(NamedTuple):
    name: str
    value: Any


def _check_required(**params: Any) -> None:
    for name, value in params.items():
        if value is None or value == "":
            raise MissingParameterError(name)


def _options(options: Optional[ServerOptions], overrides: Dict[str, Any]) -> ServerOptions:
    if options is None:
        return ServerOptions(**overrides)
    if overrides:
        return ServerOptions.model_validate({**dict(options), **overrides})
    return options


def _add_if_set(data: Dict[str, Any], prefix: str, **optional: Any) -> None:
    for key, value in optional.items():
        if value:
            data[prefix + key] = value


def _submit(action: str, data: Dict[str, Any], options: ServerOptions) -> Any:
    ctx = build_context(options)
    return post(ctx, ctx.url(CONTROLLER, action), data)


def select_rows(
    schema_name: Optional[str] = None,
    query_name: Optional[str] = None,
    *,
    view_name: Optional[str] = None,
    filter_array: Optional[Iterable[Sequence[Any]]] = None,
    parameters: Optional[Iterable[Sequence[Any]]] = None,
    max_rows: Optional[int] = None,
    sort: Optional[str] = None,
    offset: Optional[int] = None,
    columns: Optional[str] = None,
    container_filter_name: Optional[str] = None,
    required_version: Optional[float] = None,
    options: Optional[ServerOptions] = None,
    **server: Any,
) -> Any:
    """Query rows from ``schema_name.query_name``.

    ``filter_array`` holds ``(column, operator, value)`` triples such as
    ``("age", "gt", 18)``; the operator is sent as given. ``parameters`` holds
    ``(name, value)`` pairs for parameterized queries. ``required_version``
    defaults to 9.1.
    """
    _check_required(query_name=query_name, schema_name=schema_name)
    opts = _options(options, server)

    data: Dict[str, Any] = {
        "schemaName": schema_name,
        "query.queryName": query_name,
        "apiVersion": required_version or DEFAULT_API_VERSION,
    }
    for column, operator, value in map(FilterSpec._make, filter_array or ()):
        data[f"query.{column}~{operator}"] = value
    for name, value in map(ParameterSpec._make, parameters or ()):
        data[f"query.param.{name}"] = value
    _add_if_set(
        data,
        "query.",
        viewName=view_name,
        offset=offset,
        sort=sort,
        maxRows=max_rows,
        columns=columns,
        containerFilterName=container_filter_name,
    )

    return _submit("getQuery.api", data, opts)


def _modify_rows(
    action: str,
    schema_name: Optional[str],
    query_name: Optional[str],
    rows: Optional[Sequence[Row]],
    options: Optional[ServerOptions],
    server: Dict[str, Any],
) -> Any:
    _check_required(query_name=query_name, schema_name=schema_name, rows=rows)
    opts = _options(options, server)
    data = {
        "schemaName": schema_name,
        "queryName": query_name,
        "rows": [dict(row) for row in rows],
    }
    return _submit(action, data, opts)


def insert_rows(
    schema_name: Optional[str] = None,
    query_name: Optional[str] = None,
    rows: Optional[Sequence[Row]] = None,
    *,
    options: Optional[ServerOptions] = None,
    **server: Any,
) -> Any:
    """Insert *rows* (mappings of column name to value) into a table."""
    return _modify_rows("insertRows.api", schema_name, query_name, rows, options, server)


def update_rows(
    schema_name: Optional[str] = None,
    query_name: Optional[str] = None,
    rows: Optional[Sequence[Row]] = None,
    *,
    options: Optional[ServerOptions] = None,
    **server: Any,
) -> Any:
    """Update *rows*; each row must carry the table's key column."""
    return _modify_rows("updateRows.api", schema_name, query_name, rows, options, server)


def delete_rows(
    schema_name: Optional[str] = None,
    query_name: Optional[str] = None,
    rows: Optional[Sequence[Row]] = None,
    *,
    options: Optional[ServerOptions] = None,
    **server: Any,
) -> Any:
    return _modify_rows("deleteRows.api", schema_name, query_name, rows, options, server)


def execute_sql(
    schema_name: Optional[str] = None,
    sql: Optional[str] = None,
    *,
    max_rows: Optional[int] = None,
    sort: Optional[str] = None,
    offset: Optional[int] = None,
    container_filter_name: Optional[str] = None,
    options: Optional[ServerOptions] = None,
    **server: Any,
) -> Any:
    """Run a LabKey SQL statement against ``schema_name``."""
    _check_required(schema_name=schema_name, sql=sql)
    opts = _options(options, server)

    data: Dict[str, Any] = {"schemaName": schema_name, "sql": sql}
    _add_if_set(
        data,
        "",
        offset=offset,
        sort=sort,
        maxRows=max_rows,
        containerFilterName=container_filter_name,
    )
    return _submit("executeSql.api", data, opts)
