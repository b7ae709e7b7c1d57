"""labkey_query.auth

Works out how a request authenticates: as guest, with an API key, or with a
login/password pair looked up in a netrc file.
"""
from __future__ import annotations

import logging
import os
import sys
import warnings
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .errors import CredentialWarning, NetrcPermissionError
from .netrcfile import find_entry, load_netrc

__all__ = [
    "API_KEY_LOGIN",
    "GuestAuth",
    "ApiKeyAuth",
    "MachineCredential",
    "AuthDescriptor",
    "resolve_auth",
]

logger = logging.getLogger(__name__)

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__)) + os.sep

API_KEY_LOGIN = "apikey"

ENV_APIKEY = "LABKEY_APIKEY"
ENV_NETRC = "LABKEY_NETRC"


@dataclass(frozen=True)
class GuestAuth:
    """Anonymous access; no Authorization header is ever sent."""

    def basic_auth(self) -> None:
        return None


@dataclass(frozen=True)
class ApiKeyAuth:
    api_key: str

    def basic_auth(self) -> Tuple[str, str]:
        return (API_KEY_LOGIN, self.api_key)


@dataclass(frozen=True)
class MachineCredential:
    login: Optional[str]
    password: Optional[str]
    account: Optional[str] = None

    def basic_auth(self) -> Optional[Tuple[str, str]]:
        if self.login is None and self.password is None:
            return None
        return (self.login or "", self.password or "")


AuthDescriptor = Union[GuestAuth, ApiKeyAuth, MachineCredential]


def _caller_stacklevel() -> int:
    """Stack level of the first frame outside this package."""
    level = 1
    frame = sys._getframe(1)
    while frame is not None and frame.f_code.co_filename.startswith(_PACKAGE_DIR):
        frame = frame.f_back
        level += 1
    return level


def _warn(message: str) -> None:
    logger.warning(message)
    warnings.warn(message, CredentialWarning, stacklevel=_caller_stacklevel())


def _read_machine_credential(machine: Optional[str], netrc_file: Optional[str]) -> Optional[MachineCredential]:
    try:
        hosts = load_netrc(netrc_file)
    except NetrcPermissionError as exc:
        _warn(str(exc))
        return None
    except OSError as exc:
        _warn(f"Unable to read netrc file: {exc}")
        return None

    entry = find_entry(hosts, machine)
    if entry is None:
        _warn(f"Unable to find entry for host: {machine}")
        return None
    if not entry.password:
        _warn(f"Missing password for host: {machine}")
    if not entry.login:
        _warn(f"Missing login for host: {machine}")
    return MachineCredential(login=entry.login, password=entry.password, account=entry.account)


def resolve_auth(
    machine: Optional[str] = None,
    api_key: Optional[str] = None,
    netrc_file: Optional[str] = None,
    login_as_guest: bool = False,
) -> Optional[AuthDescriptor]:
    """Return the auth descriptor for a request context.

    Precedence: guest flag, then ``api_key`` (or ``LABKEY_APIKEY``), then the
    netrc entry for *machine* read from ``netrc_file`` (or ``LABKEY_NETRC``,
    or the per-user default files). ``None`` means nothing usable was found;
    a :class:`CredentialWarning` has been issued in that case.
    """
    if login_as_guest:
        return GuestAuth()

    api_key = api_key or os.environ.get(ENV_APIKEY)
    if api_key:
        return ApiKeyAuth(api_key)

    return _read_machine_credential(machine, netrc_file or os.environ.get(ENV_NETRC))
