import json

import requests
import responses

from labkey_query import LabKeyClient, ServerOptions
from labkey_query.context import CSRF_HEADER, DEFAULT_USER_AGENT

BASE_URL = "http://labkey.test/labkey"


@responses.activate
def test_client_bootstraps_csrf_once_across_calls():
    responses.add(responses.GET, f"{BASE_URL}/login/myFolder/whoAmI.api", json={"CSRF": "tok"})
    responses.add(responses.POST, f"{BASE_URL}/query/myFolder/getQuery.api", json={"rows": []})
    responses.add(responses.POST, f"{BASE_URL}/query/myFolder/insertRows.api", json={"rowsAffected": 1})

    with LabKeyClient(base_url=BASE_URL, container_path="myFolder", api_key="k") as client:
        client.select_rows("lists", "people", max_rows=1)
        client.insert_rows("lists", "people", [{"name": "a"}])

    urls = [call.request.url for call in responses.calls]
    assert sum("whoAmI" in url for url in urls) == 1
    assert json.loads(responses.calls[-1].request.body)["rows"] == [{"name": "a"}]
    assert responses.calls[-1].request.headers[CSRF_HEADER] == "tok"
    assert client.session.headers["User-Agent"] == DEFAULT_USER_AGENT


def test_client_keeps_supplied_session_open():
    session = requests.Session()
    closed = []
    session.close = lambda: closed.append(True)

    with LabKeyClient(ServerOptions(base_url=BASE_URL, container_path="x", http_client=session)) as client:
        assert client.session is session
    assert closed == []


def test_client_closes_its_own_session():
    client = LabKeyClient(base_url=BASE_URL, container_path="x")
    closed = []
    client.session.close = lambda: closed.append(True)
    client.close()
    assert closed == [True]


def test_client_options_overrides():
    client = LabKeyClient(ServerOptions(base_url=BASE_URL, container_path="x"), container_path="y")
    assert client.options.container_path == "y"
    assert client.options.base_url == BASE_URL
