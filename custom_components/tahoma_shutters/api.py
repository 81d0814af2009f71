"""HTTP client for the Tahoma gateway local API.

The client is a thin request/response wrapper around the two gateway
operations the integration relies on: listing devices and applying an
execution. Every call opens a fresh connection, authenticates with the
bearer token and is bounded by a five second timeout. Retry policy is left to
callers.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from .const import DEFAULT_PORT, DEVICES_PATH, EXEC_APPLY_PATH, REQUEST_TIMEOUT
from .models import Device

_LOGGER = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base class for gateway communication failures."""


class GatewayTransportError(GatewayError):
    """Raised when the gateway cannot be reached."""


class GatewayTimeoutError(GatewayError):
    """Raised when the gateway does not answer within the timeout."""


class GatewayHTTPStatusError(GatewayError):
    """Raised when the gateway answers with a non-2xx status."""

    def __init__(self, status: int, body: str) -> None:
        """Keep the status code and raw body for callers and logs."""

        super().__init__(f"HTTP {status}: {body}")
        self.status = status
        self.body = body


class GatewayParseError(GatewayError):
    """Raised when a response body does not have the expected structure."""


def parse_host(address: str) -> tuple[str, int]:
    """Split an ``ip[:port]`` setting into host and port.

    The port falls back to 443 when it is missing or not an integer.
    """

    host, _, port_part = address.strip().partition(":")
    try:
        port = int(port_part)
    except ValueError:
        port = DEFAULT_PORT
    return host, port or DEFAULT_PORT


class GatewayClient:
    """Issue authenticated requests against a Tahoma box on the local network."""

    def __init__(
        self,
        address: str,
        token: str,
        *,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Store connection parameters; connections are opened per call.

        ``transport`` replaces the network transport, which lets tests plug
        in ``httpx.MockTransport``.
        """

        host, port = parse_host(address)
        self._base_url = f"https://{host}:{port}"
        self._token = token
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        """Return the gateway base URL."""

        return self._base_url

    def _create_client(self) -> httpx.AsyncClient:
        # The box presents a self-signed certificate on the local network.
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._token}"},
            timeout=self._timeout,
            verify=False,
            transport=self._transport,
        )

    async def _request(
        self, method: str, path: str, *, json: Any | None = None
    ) -> Any:
        """Send a request and return the decoded JSON, or raw text.

        A 2xx response whose body is not JSON is returned as text so callers
        can decide whether that is fatal.
        """

        try:
            async with self._create_client() as client:
                response = await client.request(method, path, json=json)
        except httpx.TimeoutException as err:
            raise GatewayTimeoutError(
                f"Timeout ({self._timeout:g}s) reached, the Tahoma box does not respond"
            ) from err
        except httpx.TransportError as err:
            raise GatewayTransportError(
                f"Unable to reach the Tahoma box at {self._base_url}: {err}"
            ) from err

        if not response.is_success:
            raise GatewayHTTPStatusError(response.status_code, response.text)
        try:
            return response.json()
        except ValueError:
            _LOGGER.debug("Non JSON body returned by %s %s", method, path)
            return response.text

    async def async_list_devices(self) -> list[Device]:
        """Return every device known by the gateway.

        Entries that do not look like a device (no ``deviceURL``, wrong
        types) are skipped; only a payload that is not an array is an error.
        """

        payload = await self._request("GET", DEVICES_PATH)
        if not isinstance(payload, list):
            raise GatewayParseError(
                f"Device list is not a JSON array: {str(payload)[:200]}"
            )
        devices: list[Device] = []
        for item in payload:
            try:
                devices.append(Device.model_validate(item))
            except ValidationError as err:
                _LOGGER.debug("Skipping unexpected device entry %s: %s", item, err)
        return devices

    async def async_execute(
        self, device_url: str, command: str, parameters: Sequence[Any]
    ) -> str | None:
        """Apply ``command`` on ``device_url`` and return the execution id.

        ``None`` means the gateway accepted the request without returning an
        execution to track.
        """

        body = {
            "actions": [
                {
                    "deviceURL": device_url,
                    "commands": [{"name": command, "parameters": list(parameters)}],
                }
            ]
        }
        payload = await self._request("POST", EXEC_APPLY_PATH, json=body)
        if isinstance(payload, dict) and payload.get("execId"):
            return str(payload["execId"])
        return None
