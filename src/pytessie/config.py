"""Vehicle instance configuration for pytessie."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pytessie._constants import API_BASE, CONNECT_TIMEOUT, REQUEST_TIMEOUT, STREAMING_BASE


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class TessieConfig:
    """Configuration of one vehicle instance.

    The core never reads ambient settings; every component receives this
    object explicitly.

    Parameters
    ----------
    api_token : str
        Tessie REST API token (sent as a bearer token).
    vin : str
        Vehicle identification number of this instance.
    api_base : str
        REST API base URL.
    update_interval : int
        REST poll interval in seconds. ``0`` disables polling.
    telemetry_enabled : bool
        Accept streaming telemetry frames. When disabled, inbound frames
        are ignored.
    telemetry_token : str
        Access token for the streaming endpoint.
    streaming_base : str
        Streaming WebSocket base URL.
    wake_before_commands : bool
        Query the vehicle status before each command and wake it when it
        is not awake.
    wait_for_completion : bool
        Ask the API to wait for the vehicle to finish the command.
    overview_enabled : bool
        Maintain the overview link tree after each REST poll.
    link_root_parent : int or None
        Object ID under which the overview link tree is placed. ``None``
        places it under the instance root.
    link_root_name : str
        Display name of the overview root category.
    cleanup_enabled : bool
        Delete stale overview links and relocated roots.
    dry_run : bool
        Log what cleanup would delete without deleting anything.
    connect_timeout : float
        TCP connect timeout in seconds.
    request_timeout : float
        Total request timeout in seconds.
    """

    api_token: str = ""
    vin: str = ""
    api_base: str = API_BASE
    update_interval: int = 300
    telemetry_enabled: bool = False
    telemetry_token: str = ""
    streaming_base: str = STREAMING_BASE
    wake_before_commands: bool = False
    wait_for_completion: bool = True
    overview_enabled: bool = True
    link_root_parent: int | None = None
    link_root_name: str = "Overview"
    cleanup_enabled: bool = True
    dry_run: bool = False
    connect_timeout: float = CONNECT_TIMEOUT
    request_timeout: float = REQUEST_TIMEOUT

    @property
    def token(self) -> str:
        return self.api_token.strip()

    @property
    def normalized_vin(self) -> str:
        return self.vin.strip()

    @property
    def has_credentials(self) -> bool:
        """Whether both an API token and a VIN are configured."""
        return bool(self.token and self.normalized_vin)

    @property
    def base_url(self) -> str:
        return self.api_base.strip().rstrip("/")

    @property
    def link_root_location(self) -> str:
        """Stable description of where the overview tree should live."""
        parent = "instance" if self.link_root_parent is None else str(self.link_root_parent)
        return f"{parent}/{self.link_root_name}"

    @classmethod
    def from_env(cls, **overrides: Any) -> TessieConfig:
        """Create configuration from ``TESSIE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "TESSIE_API_TOKEN": "api_token",
            "TESSIE_VIN": "vin",
            "TESSIE_API_BASE": "api_base",
            "TESSIE_TELEMETRY_TOKEN": "telemetry_token",
            "TESSIE_STREAMING_BASE": "streaming_base",
            "TESSIE_LINK_ROOT_NAME": "link_root_name",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_BOOL_MAP = {
            "TESSIE_TELEMETRY_ENABLED": ("telemetry_enabled", False),
            "TESSIE_WAKE_BEFORE_COMMANDS": ("wake_before_commands", False),
            "TESSIE_WAIT_FOR_COMPLETION": ("wait_for_completion", True),
            "TESSIE_OVERVIEW_ENABLED": ("overview_enabled", True),
            "TESSIE_CLEANUP_ENABLED": ("cleanup_enabled", True),
            "TESSIE_DRY_RUN": ("dry_run", False),
        }
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), default)

        interval_env = env.get("TESSIE_UPDATE_INTERVAL")
        if interval_env is not None and "update_interval" not in overrides:
            config_kwargs["update_interval"] = max(0, int(interval_env))

        parent_env = env.get("TESSIE_LINK_ROOT_PARENT")
        if parent_env is not None and parent_env.strip() and "link_root_parent" not in overrides:
            config_kwargs["link_root_parent"] = int(parent_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
