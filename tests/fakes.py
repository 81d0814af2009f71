"""Test doubles shared by the Tahoma Shutters tests."""

from __future__ import annotations

import asyncio
from typing import Any

from custom_components.tahoma_shutters.accessory import PlatformAccessory
from custom_components.tahoma_shutters.models import Device


class FakeHost:
    """Accessory host double recording registry calls."""

    def __init__(self, cached: list[Any] | None = None) -> None:
        """Start with optional cached accessories."""

        self.cached = list(cached or [])
        self.registered: list[PlatformAccessory] = []
        self.updated: list[PlatformAccessory] = []
        self.unregistered: list[PlatformAccessory] = []

    def generate_uuid(self, seed: str) -> str:
        """Return a readable deterministic identifier."""

        return f"uuid:{seed}"

    def create_accessory(self, display_name: str, accessory_uuid: str) -> PlatformAccessory:
        """Build a bare accessory."""

        return PlatformAccessory(display_name=display_name, uuid=accessory_uuid)

    def register_accessories(self, accessories) -> None:  # type: ignore[no-untyped-def]
        """Record registrations."""

        self.registered.extend(accessories)

    def update_accessories(self, accessories) -> None:  # type: ignore[no-untyped-def]
        """Record updates."""

        self.updated.extend(accessories)

    def unregister_accessories(self, accessories) -> None:  # type: ignore[no-untyped-def]
        """Record removals."""

        self.unregistered.extend(accessories)

    def cached_accessories(self) -> list[PlatformAccessory]:
        """Return the cached accessories."""

        return list(self.cached)


class FakeGateway:
    """Gateway client double serving canned devices and execution results."""

    def __init__(self, devices: list[dict[str, Any]] | None = None) -> None:
        """Serve ``devices`` until replaced."""

        self.devices: list[dict[str, Any]] = list(devices or [])
        self.list_error: Exception | None = None
        self.list_calls = 0
        self.results: dict[str, Any] = {}
        self.executed: list[tuple[str, str, list[Any]]] = []

    async def async_list_devices(self) -> list[Device]:
        """Return parsed devices or raise the configured error."""

        await asyncio.sleep(0)
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return [Device.model_validate(payload) for payload in self.devices]

    async def async_execute(self, device_url: str, command: str, parameters) -> Any:  # type: ignore[no-untyped-def]
        """Record the call and return or raise the result set for ``command``."""

        await asyncio.sleep(0)
        self.executed.append((device_url, command, list(parameters)))
        result = self.results.get(command)
        if isinstance(result, Exception):
            raise result
        return result


def make_device(
    device_url: str,
    *,
    label: str | None = None,
    widget: str | None = "RollerShutter",
    closure: Any = None,
    states: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a device payload shaped like ``/setup/devices`` entries."""

    payload: dict[str, Any] = {
        "deviceURL": device_url,
        "label": label,
        "definition": {"widgetName": widget, "label": label},
        "states": list(states or []),
    }
    if closure is not None:
        payload["states"].append({"name": "core:ClosureState", "value": closure})
    return payload


