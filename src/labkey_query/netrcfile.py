"""labkey_query.netrcfile

Reader for netrc-style credential files.

The format is a whitespace separated token stream; double quotes group a
token and a backslash escapes the next character. Recognised keywords are
``default``, ``machine``, ``login``, ``password``, ``account`` and
``macdef``. A ``macdef`` body runs until the next blank line and is kept on
the entry but otherwise ignored.

Unlike :mod:`netrc` from the standard library this reader accepts an
arbitrary file location, falls back between ``.netrc`` and ``_netrc``, and
keeps every record for a host instead of only the last one.
"""
from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from .errors import NetrcPermissionError

__all__ = [
    "DEFAULT_MACHINE",
    "NetrcEntry",
    "parse_netrc",
    "load_netrc",
    "find_entry",
    "resolve_netrc_path",
    "check_permissions",
]

DEFAULT_MACHINE = "default"

# stat() on these platforms does not report mode bits that mean anything here
_NO_MODE_BITS = ("win32", "cygwin", "darwin", "os2")

_token_re = re.compile(r'"((?:[^"\\]|\\.)*)"|((?:[^\\\s]|\\.)+)')
_escape_re = re.compile(r"\\(.)")


@dataclass
class NetrcEntry:
    machine: str
    login: Optional[str] = None
    password: Optional[str] = None
    account: Optional[str] = None
    macros: Dict[str, List[str]] = field(default_factory=dict, repr=False)


class _NetrcLexer:
    """Token iterator with two states: normal and in-macro.

    In the in-macro state whole lines are appended to the current macro body
    until a blank line switches the lexer back to normal tokenising.
    """

    NORMAL = "normal"
    IN_MACRO = "in-macro"

    def __init__(self, lines: Iterable[str]):
        self._lines = lines
        self._macro: Optional[List[str]] = None
        self.state = self.NORMAL

    def begin_macro(self, body: List[str]) -> None:
        self._macro = body
        self.state = self.IN_MACRO

    def __iter__(self) -> Iterator[str]:
        for line in self._lines:
            if self.state == self.IN_MACRO:
                if not line.strip():
                    self.state = self.NORMAL
                    self._macro = None
                else:
                    self._macro.append(line)
                continue
            for match in _token_re.finditer(line):
                quoted, bare = match.groups()
                yield _escape_re.sub(r"\1", quoted if quoted is not None else bare)


def parse_netrc(text: str) -> Dict[str, List[NetrcEntry]]:
    """Parse netrc *text* into ``{machine: [entries...]}``.

    The ``default`` entry is stored under :data:`DEFAULT_MACHINE`. Keywords
    missing their value at the end of the file, values appearing before any
    ``machine``/``default`` and unknown keywords are skipped.
    """
    hosts: Dict[str, List[NetrcEntry]] = {}
    entry: Optional[NetrcEntry] = None
    lexer = _NetrcLexer(text.splitlines())
    tokens = iter(lexer)

    for tok in tokens:
        if tok == "default":
            entry = NetrcEntry(machine=DEFAULT_MACHINE)
            hosts[DEFAULT_MACHINE] = [entry]
            continue

        value = next(tokens, None)
        if value is None:
            break

        if tok == "machine":
            entry = NetrcEntry(machine=value)
            hosts.setdefault(value, []).append(entry)
        elif tok in ("login", "password", "account"):
            if entry is not None:
                setattr(entry, tok, value)
        elif tok == "macdef":
            body: List[str] = []
            if entry is not None:
                entry.macros[value] = body
            lexer.begin_macro(body)

    return hosts


def resolve_netrc_path(path: Union[str, os.PathLike, None] = None) -> Optional[Path]:
    """Return the first existing file of *path*, ``~/.netrc``, ``~/_netrc``."""
    candidates: List[Path] = []
    if path:
        candidates.append(Path(path).expanduser())
    home = Path.home()
    candidates += [home / ".netrc", home / "_netrc"]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def check_permissions(path: Path) -> None:
    """Refuse files that are group/world accessible or owned by someone else."""
    if sys.platform.startswith(_NO_MODE_BITS):
        return
    st = path.stat()
    if st.st_mode & 0o077:
        raise NetrcPermissionError(f"Bad permissions: {path}")
    if st.st_uid != os.geteuid():
        raise NetrcPermissionError(f"Not owner: {path}")


def load_netrc(path: Union[str, os.PathLike, None] = None) -> Dict[str, List[NetrcEntry]]:
    """Locate, permission-check and parse a netrc file.

    Returns an empty mapping when no file exists. Raises
    :class:`NetrcPermissionError` when the file is not private to the user and
    :class:`OSError` when it cannot be read. Bytes are decoded as latin-1 so
    every value reaches the Authorization header exactly as stored.
    """
    resolved = resolve_netrc_path(path)
    if resolved is None:
        return {}
    check_permissions(resolved)
    return parse_netrc(resolved.read_bytes().decode("latin-1"))


def find_entry(hosts: Dict[str, List[NetrcEntry]], machine: Optional[str]) -> Optional[NetrcEntry]:
    """Pick the credentials for *machine*.

    Exact host first, then the ``default`` entry, then the only entry of a
    file that lists a single host.
    """
    records = hosts.get(machine or DEFAULT_MACHINE)
    if records:
        return records[0]
    if hosts.get(DEFAULT_MACHINE):
        return hosts[DEFAULT_MACHINE][0]
    if len(hosts) == 1:
        return next(iter(hosts.values()))[0]
    return None
