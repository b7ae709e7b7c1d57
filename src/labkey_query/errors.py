"""labkey_query.errors

Exception and warning types raised by the LabKey query client.
"""
from __future__ import annotations

from typing import Optional

__all__ = [
    "LabKeyError",
    "MissingParameterError",
    "RequestError",
    "HttpStatusError",
    "DecodeError",
    "NetrcPermissionError",
    "CredentialWarning",
]


class LabKeyError(Exception):
    """Base class for every error raised by this package."""


class MissingParameterError(LabKeyError):
    """A required parameter was absent when an operation was called."""

    def __init__(self, param: str):
        self.param = param
        super().__init__(f"Missing required param: {param}")


class RequestError(LabKeyError):
    """The server could not be reached or answered unusably."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class HttpStatusError(RequestError):
    """Non-2xx response. The body is kept verbatim and never decoded."""

    def __init__(self, status_code: int, reason: str, body: str, url: Optional[str] = None):
        self.status_code = status_code
        self.status_line = f"{status_code} {reason}".strip()
        self.body = body
        super().__init__(f"{self.status_line}\n{body}", url=url)


class DecodeError(RequestError):
    """A successful response whose body is not JSON."""

    def __init__(self, url: str):
        super().__init__(f"Unable to decode JSON.\n{url}", url=url)


class NetrcPermissionError(PermissionError):
    """The netrc file is readable by others or owned by someone else."""


class CredentialWarning(UserWarning):
    """No usable credentials were found; the request goes out without them."""
