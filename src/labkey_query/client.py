"""labkey_query.client

`LabKeyClient` keeps one set of server options and one HTTP session, so the
CSRF bootstrap runs on the first call only and later calls reuse the cookie
jar and header.
"""
from __future__ import annotations

from typing import Any, Optional

from . import query
from .config import ServerOptions
from .context import DEFAULT_USER_AGENT
from .transport import create_session


class LabKeyClient:
    """Public client for the LabKey query API.

    Accepts the same keywords as :class:`~labkey_query.config.ServerOptions`.
    A session is created when ``http_client`` is not given and is closed by
    :meth:`close` (or on leaving a ``with`` block).
    """

    def __init__(self, options: Optional[ServerOptions] = None, **server: Any):
        if options is None:
            options = ServerOptions(**server)
        elif server:
            options = ServerOptions.model_validate({**dict(options), **server})

        self._owns_session = options.http_client is None
        if self._owns_session:
            session = create_session(DEFAULT_USER_AGENT)
            options = ServerOptions.model_validate({**dict(options), "http_client": session})
        self.options = options

    @property
    def session(self):
        return self.options.http_client

    def close(self) -> None:
        if self._owns_session and self.session is not None:
            self.session.close()

    def __enter__(self) -> "LabKeyClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def select_rows(self, schema_name=None, query_name=None, **kw) -> Any:
        return query.select_rows(schema_name, query_name, options=self.options, **kw)

    def insert_rows(self, schema_name=None, query_name=None, rows=None) -> Any:
        return query.insert_rows(schema_name, query_name, rows, options=self.options)

    def update_rows(self, schema_name=None, query_name=None, rows=None) -> Any:
        return query.update_rows(schema_name, query_name, rows, options=self.options)

    def delete_rows(self, schema_name=None, query_name=None, rows=None) -> Any:
        return query.delete_rows(schema_name, query_name, rows, options=self.options)

    def execute_sql(self, schema_name=None, sql=None, **kw) -> Any:
        return query.execute_sql(schema_name, sql, options=self.options, **kw)
