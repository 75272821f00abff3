"""Vehicle command endpoints.

Endpoints:
  - POST /{vin}/wake
  - POST /{vin}/command/{command}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from pytessie._transport import Transport


def command_path(vin: str, command: str) -> str:
    return f"/{quote(vin.strip(), safe='')}/command/{command}"


def wake_path(vin: str) -> str:
    return f"/{quote(vin.strip(), safe='')}/wake"


def command_succeeded(response: Any) -> bool:
    """Read the ``result`` flag from the top level or under ``response``."""
    if not isinstance(response, dict):
        return False
    if "result" in response:
        return bool(response["result"])
    inner = response.get("response")
    if isinstance(inner, dict):
        return bool(inner.get("result"))
    return False


async def wake(transport: Transport, vin: str) -> bool:
    """Ask the vehicle to wake up. Returns whether the API acknowledged."""
    response = await transport.request("POST", wake_path(vin))
    return command_succeeded(response)


async def send_command(
    transport: Transport,
    vin: str,
    command: str,
    params: Mapping[str, Any] | None = None,
    *,
    wait_for_completion: bool = True,
) -> dict[str, Any]:
    """POST a command and return the raw reply (``{}`` on transport failure).

    A parameterless command is sent with an explicit empty body.
    """
    query = {"wait_for_completion": "true" if wait_for_completion else "false"}
    body = dict(params) if params else None
    response = await transport.request("POST", command_path(vin, command), body, params=query)
    return response if isinstance(response, dict) else {}
