"""Custom exception hierarchy for pytessie."""

from __future__ import annotations


class TessieError(Exception):
    """Base exception for all pytessie errors."""


class TessieConfigError(TessieError):
    """Invalid or missing configuration (e.g. no API token or VIN)."""


class TessieTransportError(TessieError):
    """HTTP-level failure (network, timeout, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        path: str = "",
    ) -> None:
        self.status_code = status_code
        self.path = path
        super().__init__(message)


class TessieUnknownActionError(TessieError):
    """An action identifier outside the known command surface was requested."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Unknown action identifier: {identifier!r}")


class TessieStoreError(TessieError):
    """The object store rejected a create/update/delete operation."""

    def __init__(self, message: str, *, identifier: str = "") -> None:
        self.identifier = identifier
        super().__init__(message)
