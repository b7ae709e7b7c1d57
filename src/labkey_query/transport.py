"""labkey_query.transport

Sends requests for a :class:`~labkey_query.context.RequestContext` and
decodes the JSON that comes back.
"""
from __future__ import annotations

import json
import logging
import pprint
from typing import TYPE_CHECKING, Any, Dict

import requests

from .errors import DecodeError, HttpStatusError, RequestError

if TYPE_CHECKING:
    from .context import RequestContext

__all__ = ["get", "post", "create_session"]

logger = logging.getLogger(__name__)


def create_session(user_agent: str) -> requests.Session:
    """Return a fresh session with its own cookie jar and *user_agent*."""
    session = requests.Session()
    session.headers["User-Agent"] = user_agent
    return session


def _anonymous(request: requests.PreparedRequest) -> requests.PreparedRequest:
    # must stay truthy: requests reads ~/.netrc itself when auth is falsy
    return request


def _decode(response: requests.Response, url: str) -> Any:
    if not 200 <= response.status_code < 300:
        raise HttpStatusError(response.status_code, response.reason or "", response.text, url=url)
    try:
        return response.json()
    except ValueError as exc:
        raise DecodeError(url) from exc


def _send(ctx: "RequestContext", method: str, url: str, **kw) -> Any:
    try:
        response = ctx.http_client.request(
            method,
            url,
            auth=ctx.basic_auth() or _anonymous,
            timeout=ctx.timeout,
            **kw,
        )
    except requests.RequestException as exc:
        raise RequestError(f"{method} {url} failed: {exc!s}", url=url) from exc
    return _decode(response, url)


def get(ctx: "RequestContext", url: str) -> Any:
    """Authenticated GET; only used for the CSRF bootstrap."""
    return _send(ctx, "GET", url, headers={"Content-Type": "application/json"})


def post(ctx: "RequestContext", url: str, data: Dict[str, Any]) -> Any:
    """POST *data* as a JSON body and return the decoded response."""
    if ctx.debug:
        logger.debug("POST %s", url)
        logger.debug("%s", pprint.pformat(data))

    body = json.dumps(data).encode("utf-8")
    headers = {
        "Content-Type": "application/json",
        "Content-Length": str(len(body)),
    }
    return _send(ctx, "POST", url, data=body, headers=headers)
