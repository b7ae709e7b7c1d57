"""labkey_query.context

Builds the per-call :class:`RequestContext`: resolved base URL, container,
credentials, HTTP session and the CSRF header installed on that session.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlparse

import requests

from . import __version__
from .auth import AuthDescriptor, GuestAuth, resolve_auth
from .config import ServerOptions
from .errors import MissingParameterError
from .transport import create_session, get
from .utils import build_url, enable_debug_logging

__all__ = [
    "CSRF_HEADER",
    "DEFAULT_USER_AGENT",
    "RequestContext",
    "build_context",
]

logger = logging.getLogger(__name__)

CSRF_HEADER = "X-LABKEY-CSRF"
DEFAULT_USER_AGENT = f"LabKey Python API/{__version__}"


@dataclass
class RequestContext:
    base_url: str
    container_path: str
    auth: Optional[AuthDescriptor]
    http_client: requests.Session
    debug: bool = False
    timeout: Optional[float] = None

    @property
    def is_guest(self) -> bool:
        return isinstance(self.auth, GuestAuth)

    @property
    def csrf_token(self) -> Optional[str]:
        return self.http_client.headers.get(CSRF_HEADER)

    def basic_auth(self) -> Optional[Tuple[str, str]]:
        if self.auth is None:
            return None
        return self.auth.basic_auth()

    def url(self, controller: str, action: str) -> str:
        return build_url(self.base_url, controller, self.container_path, action)


def _missing(value) -> bool:
    return value is None or value == ""


def fetch_csrf(ctx: RequestContext) -> Optional[str]:
    """Ask the whoAmI endpoint for the session's CSRF token."""
    url = ctx.url("login", "whoAmI.api")
    if ctx.debug:
        logger.debug("CSRF %s", url)
    data = get(ctx, url)
    return data.get("CSRF") if isinstance(data, dict) else None


def build_context(options: ServerOptions) -> RequestContext:
    """Validate *options*, resolve credentials and bootstrap CSRF.

    The whoAmI round-trip happens only when the session does not already
    carry the CSRF header, so a session shared between calls pays it once.
    """
    base_url = options.resolved_base_url()
    if _missing(options.container_path):
        raise MissingParameterError("container_path")
    if _missing(base_url):
        raise MissingParameterError("base_url")

    if options.debug:
        enable_debug_logging()

    machine = options.machine or urlparse(base_url).hostname
    auth = resolve_auth(
        machine=machine,
        api_key=options.api_key,
        netrc_file=options.netrc_file,
        login_as_guest=options.login_as_guest,
    )

    session = options.http_client
    if session is None:
        session = create_session(DEFAULT_USER_AGENT)
        if options.timeout:
            logger.debug("setting timeout to %s", options.timeout)

    ctx = RequestContext(
        base_url=base_url,
        container_path=options.container_path,
        auth=auth,
        http_client=session,
        debug=options.debug,
        timeout=options.timeout,
    )

    if not session.headers.get(CSRF_HEADER):
        token = fetch_csrf(ctx)
        if token:
            session.headers[CSRF_HEADER] = token
        else:
            logger.debug("whoAmI returned no CSRF token for %s", base_url)

    return ctx
