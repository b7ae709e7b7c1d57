"""labkey_query.config

Options shared by every query operation.
"""
from __future__ import annotations

import os
from typing import Optional

import requests
from pydantic import BaseModel, ConfigDict, Field

__all__ = ["ServerOptions", "ENV_URL"]

ENV_URL = "LABKEY_URL"


class ServerOptions(BaseModel):
    """Where to send a request and how to authenticate it."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    base_url: Optional[str] = Field(
        default=None,
        description="Server URL including the context path; falls back to LABKEY_URL",
    )
    container_path: Optional[str] = Field(
        default=None,
        description="Folder path the request runs in",
    )
    machine: Optional[str] = Field(
        default=None,
        description="Host to look up in the netrc file; defaults to the host of base_url",
    )
    debug: bool = Field(
        default=False,
        description="Log request URLs and payloads",
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key used instead of netrc credentials; falls back to LABKEY_APIKEY",
    )
    login_as_guest: bool = Field(
        default=False,
        description="Send no credentials at all",
    )
    netrc_file: Optional[str] = Field(
        default=None,
        description="Alternate netrc location; falls back to LABKEY_NETRC",
    )
    http_client: Optional[requests.Session] = Field(
        default=None,
        description="Session to reuse; a new one is built when omitted",
    )
    timeout: Optional[float] = Field(
        default=None,
        description="Connect/read timeout in seconds for a session built here",
    )

    def resolved_base_url(self) -> Optional[str]:
        return self.base_url or os.environ.get(ENV_URL)
