import asyncio

import httpx
import pytest

from shuttle.services.routing.errors import NetworkUnavailable, UpstreamEmptyRoute, UpstreamMalformedResponse
from shuttle.services.routing.osrm_client import OSRMClient, check_health, format_coordinates

OK_PAYLOAD = {
    "code": "Ok",
    "routes": [
        {
            "geometry": {"type": "LineString", "coordinates": [[38.7459, 9.0114], [38.8025, 9.0202]]},
            "distance": 6400.2,
            "duration": 845.7,
        }
    ],
}


def _client(handler, **kwargs) -> OSRMClient:
    transport = httpx.MockTransport(handler)
    return OSRMClient(
        base_url="http://osrm.test/",
        profile="driving",
        client=httpx.AsyncClient(transport=transport),
        **kwargs,
    )


def test_format_coordinates_puts_longitude_first():
    assert format_coordinates([(9.0114, 38.7459)]) == "38.7459,9.0114"
    assert format_coordinates([(9.0114, 38.7459), (9.0202, 38.8025)]) == "38.7459,9.0114;38.8025,9.0202"


def test_route_request_url_and_params():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=OK_PAYLOAD)

    client = _client(handler)
    data = asyncio.run(client.route([(9.0114, 38.7459), (9.0107, 38.7612), (9.0202, 38.8025)]))

    assert data == OK_PAYLOAD
    assert len(seen) == 1
    request = seen[0]
    assert request.method == "GET"
    assert request.url.host == "osrm.test"
    assert request.url.path == "/route/v1/driving/38.7459,9.0114;38.7612,9.0107;38.8025,9.0202"
    assert request.url.params["overview"] == "full"
    assert request.url.params["geometries"] == "geojson"


def test_route_requires_two_coordinates():
    client = _client(lambda request: httpx.Response(200, json=OK_PAYLOAD))
    with pytest.raises(ValueError):
        asyncio.run(client.route([(9.0114, 38.7459)]))


def test_connection_error_maps_to_network_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(NetworkUnavailable):
        asyncio.run(client.route([(9.0114, 38.7459), (9.0202, 38.8025)]))


def test_slow_response_maps_to_network_unavailable():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1.0)
        return httpx.Response(200, json=OK_PAYLOAD)

    client = _client(handler, timeout=0.05)
    with pytest.raises(NetworkUnavailable, match="timed out"):
        asyncio.run(client.route([(9.0114, 38.7459), (9.0202, 38.8025)]))


@pytest.mark.parametrize(
    "response, expected",
    [
        (httpx.Response(503, text="unavailable"), NetworkUnavailable),
        (httpx.Response(429, json={"code": "TooManyRequests"}), NetworkUnavailable),
        (httpx.Response(400, json={"code": "NoRoute", "message": "Impossible route"}), UpstreamEmptyRoute),
        (httpx.Response(400, json={"code": "InvalidQuery"}), UpstreamMalformedResponse),
        (httpx.Response(200, text="<html>not json</html>"), UpstreamMalformedResponse),
    ],
)
def test_http_failures_are_classified(response, expected):
    client = _client(lambda request: response)
    with pytest.raises(expected):
        asyncio.run(client.route([(9.0114, 38.7459), (9.0202, 38.8025)]))


def test_corrupt_compressed_body_maps_to_malformed_response():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"not really gzip")

    client = _client(handler, max_retries=2, backoff_seconds=0.0)
    with pytest.raises(UpstreamMalformedResponse, match="could not be decoded"):
        asyncio.run(client.route([(9.0114, 38.7459), (9.0202, 38.8025)]))
    assert calls["count"] == 1


def test_other_request_errors_map_to_network_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.TooManyRedirects("redirect loop", request=request)

    client = _client(handler)
    with pytest.raises(NetworkUnavailable, match="TooManyRedirects"):
        asyncio.run(client.route([(9.0114, 38.7459), (9.0202, 38.8025)]))


def test_single_request_by_default():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(502)

    client = _client(handler, max_retries=0)
    with pytest.raises(NetworkUnavailable):
        asyncio.run(client.route([(9.0114, 38.7459), (9.0202, 38.8025)]))
    assert calls["count"] == 1


def test_retries_network_failures_when_configured():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] < 3:
            return httpx.Response(503)
        return httpx.Response(200, json=OK_PAYLOAD)

    client = _client(handler, max_retries=2, backoff_seconds=0.0)
    data = asyncio.run(client.route([(9.0114, 38.7459), (9.0202, 38.8025)]))

    assert data["code"] == "Ok"
    assert calls["count"] == 3


def test_empty_route_is_not_retried():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(400, json={"code": "NoSegment"})

    client = _client(handler, max_retries=3, backoff_seconds=0.0)
    with pytest.raises(UpstreamEmptyRoute):
        asyncio.run(client.route([(9.0114, 38.7459), (9.0202, 38.8025)]))
    assert calls["count"] == 1


def test_check_health_reports_status():
    healthy_client = _client(lambda request: httpx.Response(200, json={"code": "Ok", "routes": []}))
    down_client = _client(lambda request: httpx.Response(503))
    coords = [(9.0114, 38.7459), (9.0202, 38.8025)]

    assert asyncio.run(check_health(healthy_client, coords)) is True
    assert asyncio.run(check_health(down_client, coords)) is False
