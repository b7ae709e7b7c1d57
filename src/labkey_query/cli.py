"""CLI entry point for labkey_query package."""
from __future__ import annotations

import json
from typing import Any, List, Optional, Tuple

import click
from dotenv import load_dotenv

from .client import LabKeyClient
from .errors import LabKeyError


def _parse_scalar(text: str) -> Any:
    """Interpret VALUE as JSON when possible (numbers, true/false, null)."""
    try:
        return json.loads(text)
    except ValueError:
        return text


def _parse_filters(ctx, param, values: Tuple[str, ...]) -> List[Tuple[str, str, Any]]:
    filters = []
    for item in values:
        spec, sep, value = item.partition("=")
        column, tilde, operator = spec.rpartition("~")
        if not sep or not tilde or not column or not operator:
            raise click.BadParameter(f"expected COLUMN~OP=VALUE, got {item!r}")
        filters.append((column, operator, _parse_scalar(value)))
    return filters


def _parse_params(ctx, param, values: Tuple[str, ...]) -> List[Tuple[str, Any]]:
    pairs = []
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}")
        pairs.append((name, _parse_scalar(value)))
    return pairs


def _load_rows(stream) -> List[dict]:
    try:
        rows = json.load(stream)
    except ValueError as exc:
        raise click.BadParameter(f"rows are not valid JSON: {exc}") from exc
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        raise click.BadParameter("rows must be a JSON array of objects")
    return rows


def _run(fn, *args, **kw) -> None:
    try:
        result = fn(*args, **kw)
    except LabKeyError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(result, indent=2))


@click.group()
@click.option("--base-url", help="Server URL including the context path (or LABKEY_URL).")
@click.option("--container-path", "-c", help="Folder the request runs in.")
@click.option("--api-key", help="API key (or LABKEY_APIKEY).")
@click.option("--netrc-file", type=click.Path(dir_okay=False), help="Alternate netrc file (or LABKEY_NETRC).")
@click.option("--machine", help="Host to look up in the netrc file.")
@click.option("--guest", "login_as_guest", is_flag=True, help="Send no credentials.")
@click.option("--timeout", type=float, help="Request timeout in seconds.")
@click.option("--debug", is_flag=True, help="Log request URLs and payloads.")
@click.pass_context
def main(ctx: click.Context, **server: Any) -> None:
    """Query and modify data on a LabKey Server."""
    load_dotenv()
    client = LabKeyClient(**{k: v for k, v in server.items() if v is not None})
    ctx.obj = ctx.with_resource(client)


@main.command("select")
@click.argument("schema_name")
@click.argument("query_name")
@click.option("--view", "view_name", help="Saved view to apply.")
@click.option("--filter", "filter_array", multiple=True, callback=_parse_filters, metavar="COL~OP=VALUE")
@click.option("--param", "parameters", multiple=True, callback=_parse_params, metavar="NAME=VALUE")
@click.option("--max-rows", type=int)
@click.option("--sort", help="Comma separated sort columns, '-' prefix for descending.")
@click.option("--offset", type=int)
@click.option("--columns", help="Comma separated column list.")
@click.option("--container-filter", "container_filter_name")
@click.option("--required-version", type=float)
@click.pass_obj
def select_cmd(client: LabKeyClient, schema_name: str, query_name: str, **kw: Any) -> None:
    """Select rows from SCHEMA_NAME.QUERY_NAME."""
    _run(client.select_rows, schema_name, query_name, **kw)


def _rows_command(name: str, method: str, summary: str):
    @main.command(name, help=summary)
    @click.argument("schema_name")
    @click.argument("query_name")
    @click.argument("rows_file", type=click.File("r"), metavar="ROWS_JSON")
    @click.pass_obj
    def _cmd(client: LabKeyClient, schema_name: str, query_name: str, rows_file) -> None:
        _run(getattr(client, method), schema_name, query_name, _load_rows(rows_file))

    return _cmd


insert_cmd = _rows_command("insert", "insert_rows", "Insert rows read from ROWS_JSON ('-' for stdin).")
update_cmd = _rows_command("update", "update_rows", "Update rows read from ROWS_JSON ('-' for stdin).")
delete_cmd = _rows_command("delete", "delete_rows", "Delete rows read from ROWS_JSON ('-' for stdin).")


@main.command("sql")
@click.argument("schema_name")
@click.argument("sql")
@click.option("--max-rows", type=int)
@click.option("--sort")
@click.option("--offset", type=int)
@click.option("--container-filter", "container_filter_name")
@click.pass_obj
def sql_cmd(client: LabKeyClient, schema_name: str, sql: str, **kw: Optional[Any]) -> None:
    """Execute SQL against SCHEMA_NAME."""
    _run(client.execute_sql, schema_name, sql, **kw)


if __name__ == "__main__":
    main()
