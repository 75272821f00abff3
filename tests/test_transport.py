from __future__ import annotations

from collections.abc import AsyncIterator

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from pytessie._api.vehicles import fetch_vehicle_data, fetch_vehicles
from pytessie._transport import HttpTransport
from pytessie.config import TessieConfig
from pytessie.exceptions import TessieTransportError

VIN = "5YJ3E1EA7KF000001"


def _app(seen: list[dict[str, object]]) -> web.Application:
    async def vehicle_data(request: web.Request) -> web.Response:
        if request.match_info["vin"] != VIN:
            return web.json_response({"error": "unknown vehicle"}, status=404)
        seen.append({"auth": request.headers.get("Authorization"), "vin": request.match_info["vin"]})
        return web.json_response({"response": {"charge_state": {"battery_level": 80}}})

    async def vehicles(_request: web.Request) -> web.Response:
        return web.json_response({"results": [{"vin": VIN, "display_name": "Blue"}, {"name": "no vin"}]})

    async def command(request: web.Request) -> web.Response:
        body = await request.read()
        seen.append(
            {
                "body": body,
                "content_type": request.headers.get("Content-Type"),
                "wait": request.query.get("wait_for_completion"),
            }
        )
        return web.json_response({"result": True})

    async def broken(_request: web.Request) -> web.Response:
        return web.Response(text="<html>oops</html>")

    async def garbled(_request: web.Request) -> web.Response:
        return web.Response(body=b"\xff\xfe\xfa", content_type="application/json")

    async def missing(_request: web.Request) -> web.Response:
        return web.json_response({"error": "not found"}, status=404)

    async def empty(_request: web.Request) -> web.Response:
        return web.Response(status=204)

    app = web.Application()
    app.router.add_get("/api/1/vehicles/{vin}/vehicle_data", vehicle_data)
    app.router.add_get("/api/1/vehicles", vehicles)
    app.router.add_post("/{vin}/command/{command}", command)
    app.router.add_get("/broken", broken)
    app.router.add_get("/missing", missing)
    app.router.add_get("/garbled", garbled)
    app.router.add_post("/empty", empty)
    return app


@pytest_asyncio.fixture
async def server_env() -> AsyncIterator[tuple[HttpTransport, list[dict[str, object]]]]:
    seen: list[dict[str, object]] = []
    server = TestServer(_app(seen))
    await server.start_server()
    config = TessieConfig(api_token=" secret ", vin=VIN, api_base=str(server.make_url("/")))
    async with aiohttp.ClientSession() as session:
        yield HttpTransport(config, session), seen
    await server.close()


@pytest.mark.asyncio
async def test_get_sends_bearer_token(server_env: tuple[HttpTransport, list[dict[str, object]]]) -> None:
    transport, seen = server_env

    payload = await fetch_vehicle_data(transport, VIN)

    assert payload == {"charge_state": {"battery_level": 80}}
    assert seen == [{"auth": "Bearer secret", "vin": VIN}]


@pytest.mark.asyncio
async def test_vehicle_list_parsing(server_env: tuple[HttpTransport, list[dict[str, object]]]) -> None:
    transport, _ = server_env

    vehicles = await fetch_vehicles(transport)

    assert [(v.vin, v.name) for v in vehicles] == [(VIN, "Blue")]


@pytest.mark.asyncio
async def test_post_without_body_sends_empty_body(server_env: tuple[HttpTransport, list[dict[str, object]]]) -> None:
    transport, seen = server_env

    response = await transport.send("POST", f"/{VIN}/command/honk", params={"wait_for_completion": "true"})

    assert response == {"result": True}
    assert seen[-1]["body"] == b""
    assert seen[-1]["wait"] == "true"


@pytest.mark.asyncio
async def test_post_with_body_sends_json(server_env: tuple[HttpTransport, list[dict[str, object]]]) -> None:
    transport, seen = server_env

    await transport.send("POST", f"/{VIN}/command/set_charge_limit", {"percent": 80})

    assert seen[-1]["body"] == b'{"percent":80}'
    assert seen[-1]["content_type"] == "application/json"


@pytest.mark.asyncio
async def test_send_raises_on_http_error(server_env: tuple[HttpTransport, list[dict[str, object]]]) -> None:
    transport, _ = server_env

    with pytest.raises(TessieTransportError) as excinfo:
        await transport.send("GET", "/missing")
    assert excinfo.value.status_code == 404
    assert excinfo.value.path == "/missing"


@pytest.mark.asyncio
async def test_send_raises_on_non_json(server_env: tuple[HttpTransport, list[dict[str, object]]]) -> None:
    transport, _ = server_env

    with pytest.raises(TessieTransportError):
        await transport.send("GET", "/broken")


@pytest.mark.asyncio
async def test_request_swallows_failures(server_env: tuple[HttpTransport, list[dict[str, object]]]) -> None:
    transport, _ = server_env

    assert await transport.request("GET", "/missing") == {}
    assert await transport.request("GET", "/broken") == {}
    assert await transport.request("POST", "/empty") == {}
    assert await fetch_vehicle_data(transport, "OTHERVIN") is None


@pytest.mark.asyncio
async def test_request_swallows_connection_errors() -> None:
    config = TessieConfig(api_token="t", vin=VIN, api_base="http://127.0.0.1:9", connect_timeout=1.0)
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(config, session)
        assert await transport.request("GET", "/api/1/vehicles") == {}


@pytest.mark.asyncio
async def test_send_raises_on_undecodable_body(server_env: tuple[HttpTransport, list[dict[str, object]]]) -> None:
    transport, _ = server_env

    with pytest.raises(TessieTransportError) as excinfo:
        await transport.send("GET", "/garbled")
    assert excinfo.value.status_code == 200
    assert await transport.request("GET", "/garbled") == {}
