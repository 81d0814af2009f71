"""Accessory, covering service and characteristic model.

These objects are what the host framework persists and exposes to end
users. The integration binds read/write handlers on the characteristics and
pushes values with :meth:`Characteristic.update_value`.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

GetHandler = Callable[[], Any]
SetHandler = Callable[[Any], Awaitable[Any] | Any]


class PositionState(IntEnum):
    """Movement state of a window covering."""

    DECREASING = 0
    INCREASING = 1
    STOPPED = 2


class Characteristic:
    """Observable value with optional read and write handlers."""

    def __init__(self, name: str, value: Any = None) -> None:
        """Create a characteristic holding ``value``."""

        self.name = name
        self.value = value
        self._get_handler: GetHandler | None = None
        self._set_handler: SetHandler | None = None

    def on_get(self, handler: GetHandler) -> Characteristic:
        """Bind the read handler, replacing any previous one."""

        self._get_handler = handler
        return self

    def on_set(self, handler: SetHandler) -> Characteristic:
        """Bind the write handler, replacing any previous one."""

        self._set_handler = handler
        return self

    def update_value(self, value: Any) -> None:
        """Push a new value without triggering the write handler."""

        self.value = value

    async def async_handle_get(self) -> Any:
        """Serve a read request from the host."""

        if self._get_handler is None:
            return self.value
        result = self._get_handler()
        if inspect.isawaitable(result):
            result = await result
        return result

    async def async_handle_set(self, value: Any) -> Any:
        """Serve a write request from the host."""

        if self._set_handler is None:
            self.value = value
            return None
        result = self._set_handler(value)
        if inspect.isawaitable(result):
            result = await result
        return result


class WindowCoveringService:
    """The current/target/movement characteristic triple of a covering."""

    def __init__(self, name: str) -> None:
        """Create the service with a closed, stopped initial state."""

        self.name = name
        self.current_position = Characteristic("CurrentPosition", 0)
        self.target_position = Characteristic("TargetPosition", 0)
        self.position_state = Characteristic("PositionState", PositionState.STOPPED)


@dataclass(slots=True)
class AccessoryInformation:
    """Identification fields shown by the host."""

    manufacturer: str | None = None
    model: str | None = None
    serial_number: str | None = None


@dataclass(eq=False)
class PlatformAccessory:
    """A host accessory record.

    ``context`` is persisted by the host across restarts and is where the
    integration keeps the device back-reference.
    """

    display_name: str
    uuid: str
    context: dict[str, Any] = field(default_factory=dict)
    information: AccessoryInformation = field(default_factory=AccessoryInformation)
    covering: WindowCoveringService | None = None

    def set_information(
        self, *, manufacturer: str, model: str, serial_number: str
    ) -> None:
        """Update the identification fields."""

        self.information = AccessoryInformation(
            manufacturer=manufacturer, model=model, serial_number=serial_number
        )

    def ensure_covering(self, name: str) -> WindowCoveringService:
        """Return the covering service, creating it on first use."""

        if self.covering is None:
            self.covering = WindowCoveringService(name)
        return self.covering
