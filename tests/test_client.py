"""Device twin client tests against the in-memory mock service."""

from __future__ import annotations

import json
from typing import Any

import pytest

import hubquery
from hubquery.client import DeviceTwinClient
from hubquery.config import Config
from hubquery.errors import InvalidArgumentError, ResultTypeMismatchError, TransportError
from hubquery.kinds import ResultKind
from hubquery.transport.http import HttpxTransport
from hubquery.transport.mock import MockTransport
from hubquery.twin import Twin

pytestmark = pytest.mark.unit


def _twins(n: int) -> list[dict[str, Any]]:
    return [{"deviceId": f"dev{i}", "status": "enabled"} for i in range(n)]


def _client(items: list[dict[str, Any]], kind: ResultKind = ResultKind.TWIN) -> DeviceTwinClient:
    return DeviceTwinClient(
        Config(use_mock=True, page_size=2), transport=MockTransport(items, kind=kind)
    )


def _drain(client: DeviceTwinClient, query: hubquery.Query) -> list[str]:
    ids: list[str] = []
    while True:
        while client.has_next_device_twin(query):
            ids.append(client.get_next_device_twin(query).device_id)
        if client.fetch_next_page(query) is None:
            return ids


def test_query_twin_fetches_first_page_only() -> None:
    client = _client(_twins(5))

    query = client.query_twin("SELECT * FROM devices")

    transport = client.transport
    assert isinstance(transport, MockTransport)
    assert len(transport.requests) == 1
    assert transport.requests[0].query_text() == "SELECT * FROM devices"
    assert transport.requests[0].headers == {"x-ms-max-item-count": "2"}
    assert query.continuation_token == "2"
    assert len(query.last_response) == 2


def test_walking_pages_visits_every_twin_once() -> None:
    client = _client(_twins(5))
    query = client.query_twin("SELECT * FROM devices")

    assert _drain(client, query) == ["dev0", "dev1", "dev2", "dev3", "dev4"]

    requests = client.transport.requests
    assert [r.headers.get("x-ms-continuation") for r in requests] == [None, "2", "4"]
    assert query.continuation_token is None


def test_fetch_next_page_returns_none_on_last_page() -> None:
    client = _client(_twins(1))
    query = client.query_twin("SELECT * FROM devices", page_size=10)

    assert client.fetch_next_page(query) is None
    assert len(client.transport.requests) == 1


def test_explicit_page_size_overrides_config() -> None:
    client = _client(_twins(3))
    query = client.query_twin("SELECT * FROM devices", page_size=3)

    assert query.page_size == 3
    assert query.continuation_token is None


def test_get_next_device_twin_returns_twin_models() -> None:
    client = _client(_twins(1))
    query = client.query_twin("SELECT * FROM devices")

    twin = client.get_next_device_twin(query)
    assert isinstance(twin, Twin)
    assert twin.status == "enabled"


def test_raw_query_yields_json_text() -> None:
    client = _client([{"deviceId": "d", "n": 1}], kind=ResultKind.RAW)
    query = client.query("SELECT deviceId FROM devices", ResultKind.RAW)

    assert json.loads(query.next()) == {"deviceId": "d", "n": 1}


@pytest.mark.parametrize("kind", [ResultKind.RAW, ResultKind.JSON])
@pytest.mark.parametrize("method", ["has_next_device_twin", "get_next_device_twin"])
def test_twin_accessors_reject_non_twin_queries(kind: ResultKind, method: str) -> None:
    client = _client([{"deviceId": "d"}], kind=kind)
    query = client.query("SELECT * FROM devices", kind)

    with pytest.raises(InvalidArgumentError):
        getattr(client, method)(query)

    assert json.loads(query.next()) == {"deviceId": "d"}


def test_mismatched_service_kind_surfaces_protocol_error() -> None:
    client = _client(_twins(1), kind=ResultKind.JSON)

    with pytest.raises(ResultTypeMismatchError):
        client.query_twin("SELECT * FROM devices")


def test_invalid_continuation_is_a_transport_error() -> None:
    client = _client(_twins(3))
    query = client.query_twin("SELECT * FROM devices")
    query.continue_query("not-an-offset")

    with pytest.raises(TransportError) as exc:
        client.fetch_next_page(query)
    assert exc.value.status_code == 400


@pytest.mark.parametrize("method", ["has_next_device_twin", "get_next_device_twin", "fetch_next_page"])
def test_none_query_is_rejected(method: str) -> None:
    client = _client([])
    with pytest.raises(InvalidArgumentError):
        getattr(client, method)(None)


def test_mock_config_selects_mock_transport() -> None:
    with DeviceTwinClient(Config(use_mock=True)) as client:
        query = client.query_twin("SELECT * FROM devices")
        assert isinstance(client.transport, MockTransport)
        assert query.has_next() is False


def test_real_config_selects_httpx_transport() -> None:
    cfg = Config(host="my-hub.azure-devices.net", sas_token="t")
    with DeviceTwinClient(cfg) as client:
        assert isinstance(client.transport, HttpxTransport)


@pytest.mark.api
def test_query_twin_against_real_hub(hub_credentials: tuple[str, str]) -> None:
    host, token = hub_credentials
    with DeviceTwinClient(Config(host=host, sas_token=token, page_size=5)) as client:
        query = client.query_twin("SELECT * FROM devices")
        assert query.response_kind is ResultKind.TWIN
        for twin_id in _drain(client, query):
            assert twin_id
