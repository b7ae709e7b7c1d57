import base64

import pytest
import requests
import responses

from labkey_query.auth import ApiKeyAuth, MachineCredential
from labkey_query.config import ServerOptions
from labkey_query.context import CSRF_HEADER, DEFAULT_USER_AGENT, build_context
from labkey_query.errors import HttpStatusError, MissingParameterError

BASE_URL = "http://labkey.test/labkey"
WHO_AM_I = f"{BASE_URL}/login/myFolder/whoAmI.api"


def options(**kw):
    kw.setdefault("base_url", BASE_URL)
    kw.setdefault("container_path", "myFolder")
    kw.setdefault("api_key", "k")
    return ServerOptions(**kw)


@responses.activate
def test_bootstrap_installs_csrf_header():
    responses.add(responses.GET, WHO_AM_I, json={"CSRF": "tok123", "displayName": "alice"})

    ctx = build_context(options())

    assert ctx.csrf_token == "tok123"
    assert ctx.http_client.headers[CSRF_HEADER] == "tok123"
    assert ctx.http_client.headers["User-Agent"] == DEFAULT_USER_AGENT
    assert ctx.auth == ApiKeyAuth("k")
    request = responses.calls[0].request
    assert request.headers["Authorization"] == "Basic " + base64.b64encode(b"apikey:k").decode()


@responses.activate
def test_guest_bootstrap_is_anonymous():
    responses.add(responses.GET, WHO_AM_I, json={"CSRF": "tok"})
    ctx = build_context(options(api_key=None, login_as_guest=True))
    assert ctx.is_guest
    assert "Authorization" not in responses.calls[0].request.headers


@responses.activate
def test_supplied_session_with_header_skips_bootstrap():
    session = requests.Session()
    session.headers[CSRF_HEADER] = "already"

    ctx = build_context(options(http_client=session))

    assert ctx.http_client is session
    assert len(responses.calls) == 0
    assert ctx.csrf_token == "already"


@responses.activate
def test_supplied_session_is_bootstrapped_once():
    responses.add(responses.GET, WHO_AM_I, json={"CSRF": "tok"})
    session = requests.Session()

    build_context(options(http_client=session))
    build_context(options(http_client=session))

    assert len(responses.calls) == 1
    assert session.headers[CSRF_HEADER] == "tok"


@responses.activate
def test_missing_token_leaves_header_unset():
    responses.add(responses.GET, WHO_AM_I, json={"displayName": "guest"})
    ctx = build_context(options())
    assert CSRF_HEADER not in ctx.http_client.headers


@responses.activate
def test_bootstrap_http_error_propagates():
    responses.add(responses.GET, WHO_AM_I, body="Unauthorized", status=401)
    with pytest.raises(HttpStatusError) as excinfo:
        build_context(options())
    assert excinfo.value.status_line == "401 Unauthorized"


@responses.activate
def test_base_url_from_environment(monkeypatch):
    monkeypatch.setenv("LABKEY_URL", BASE_URL)
    responses.add(responses.GET, WHO_AM_I, json={"CSRF": "t"})
    ctx = build_context(ServerOptions(container_path="/myFolder/", api_key="k"))
    assert ctx.base_url == BASE_URL
    assert ctx.url("query", "getQuery.api") == f"{BASE_URL}/query/myFolder/getQuery.api?"


def test_missing_base_url():
    with pytest.raises(MissingParameterError) as excinfo:
        build_context(ServerOptions(container_path="myFolder"))
    assert excinfo.value.param == "base_url"


def test_missing_container_path():
    with pytest.raises(MissingParameterError, match="container_path"):
        build_context(ServerOptions(base_url=BASE_URL))


@responses.activate
def test_machine_defaults_to_base_url_host(write_netrc):
    path = write_netrc(
        "machine other.host login wrong password x\nmachine labkey.test login alice password pw\n"
    )
    responses.add(responses.GET, WHO_AM_I, json={"CSRF": "t"})
    ctx = build_context(options(api_key=None, netrc_file=str(path)))
    assert ctx.auth == MachineCredential(login="alice", password="pw")


@responses.activate
def test_machine_override(write_netrc):
    path = write_netrc(
        "machine other.host login bob password x\nmachine labkey.test login alice password pw\n"
    )
    responses.add(responses.GET, WHO_AM_I, json={"CSRF": "t"})
    ctx = build_context(options(api_key=None, netrc_file=str(path), machine="other.host"))
    assert ctx.auth.login == "bob"


def test_unknown_option_is_rejected():
    with pytest.raises(ValueError):
        ServerOptions(base_url=BASE_URL, useragent=object())
