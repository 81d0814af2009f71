"""Polling loop keeping accessory characteristics in sync with the gateway."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta
from enum import Enum

from .accessory import PositionState
from .api import GatewayClient, GatewayError
from .const import (
    DEFAULT_LOG_INTERVAL,
    DEFAULT_POLLING_INTERVAL,
    STABLE_CYCLES_BEFORE_STOP,
)
from .position import decode_position, raw_position_value
from .registry import AccessoryRegistry, ManagedAccessory

_LOGGER = logging.getLogger(__name__)

_POLL_TIMER = "poll"
_LOG_TIMER = "log"


class PollOutcome(Enum):
    """What a poll cycle did for one accessory."""

    FIRST_OBSERVATION = "first_observation"
    MOVING = "moving"
    SETTLING = "settling"
    STOPPED = "stopped"


def apply_position(managed: ManagedAccessory, position: int) -> PollOutcome:
    """Run the movement state machine for one decoded ``position``.

    A change is reported as increasing or decreasing right away, while a
    stop is only reported after the position stayed put for
    ``STABLE_CYCLES_BEFORE_STOP`` consecutive polls; the target then snaps
    to the current position.
    """

    covering = managed.covering
    assert covering is not None
    last = managed.last_known_position

    if last is None:
        covering.current_position.update_value(position)
        covering.position_state.update_value(PositionState.STOPPED)
        covering.target_position.update_value(position)
        managed.last_known_position = position
        managed.stable_cycles = 0
        return PollOutcome.FIRST_OBSERVATION

    if position != last:
        covering.current_position.update_value(position)
        covering.position_state.update_value(
            PositionState.INCREASING if position > last else PositionState.DECREASING
        )
        managed.stable_cycles = 0
        managed.last_known_position = position
        return PollOutcome.MOVING

    managed.stable_cycles += 1
    if managed.stable_cycles < STABLE_CYCLES_BEFORE_STOP:
        return PollOutcome.SETTLING
    covering.position_state.update_value(PositionState.STOPPED)
    covering.target_position.update_value(position)
    return PollOutcome.STOPPED


class PollingCoordinator:
    """Schedule the position poller and the optional state logger."""

    def __init__(
        self,
        client: GatewayClient,
        registry: AccessoryRegistry,
        *,
        polling_interval: timedelta = DEFAULT_POLLING_INTERVAL,
        log_interval: timedelta = DEFAULT_LOG_INTERVAL,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Bind the coordinator; nothing is scheduled until started."""

        self._client = client
        self._registry = registry
        self.polling_interval = polling_interval
        self.log_interval = log_interval
        self._loop = loop
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._pending_tasks: set[asyncio.Task[None]] = set()

    @property
    def polling(self) -> bool:
        """Return True while the position poller is scheduled."""

        return _POLL_TIMER in self._timers

    @property
    def logging_states(self) -> bool:
        """Return True while the state logger is scheduled."""

        return _LOG_TIMER in self._timers

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _schedule_repeating(
        self,
        name: str,
        interval: timedelta,
        callback: Callable[[], Awaitable[object]],
    ) -> None:
        """Run ``callback`` every ``interval`` until the timer is cancelled."""

        loop = self._get_loop()
        seconds = interval.total_seconds()

        async def _run() -> None:
            await callback()

        def _wrapper() -> None:
            task = loop.create_task(_run())
            self._pending_tasks.add(task)
            task.add_done_callback(self._pending_tasks.discard)
            self._timers[name] = loop.call_later(seconds, _wrapper)

        self._cancel_timer(name)
        self._timers[name] = loop.call_later(seconds, _wrapper)

    def _cancel_timer(self, name: str) -> None:
        handle = self._timers.pop(name, None)
        if handle is not None:
            handle.cancel()

    def start_polling(self) -> None:
        """Start (or restart) the position poller."""

        self._schedule_repeating(_POLL_TIMER, self.polling_interval, self.async_poll)
        _LOGGER.info(
            "Polling started every %ss", int(self.polling_interval.total_seconds())
        )

    def start_state_logging(self) -> None:
        """Start (or restart) the periodic state logger."""

        self._schedule_repeating(_LOG_TIMER, self.log_interval, self.async_log_states)
        _LOGGER.info(
            "State logging enabled every %ss", int(self.log_interval.total_seconds())
        )

    def stop(self) -> None:
        """Cancel timers and in-flight cycles."""

        for name in list(self._timers):
            self._cancel_timer(name)
            _LOGGER.info("Timer %s stopped", name)
        for task in list(self._pending_tasks):
            task.cancel()
        self._pending_tasks.clear()

    async def async_poll(self) -> dict[str, PollOutcome]:
        """Run one poll cycle and return the outcome per accessory uuid.

        Gateway failures are logged and leave every accessory untouched for
        this cycle.
        """

        try:
            devices = await self._client.async_list_devices()
        except GatewayError as err:
            _LOGGER.error("Polling error: %s", err)
            return {}

        by_url = {device.device_url: device for device in devices}
        outcomes: dict[str, PollOutcome] = {}
        for managed in self._registry:
            if not managed.device_url or managed.covering is None:
                continue
            device = by_url.get(managed.device_url)
            if device is None:
                continue
            position = decode_position(device)
            _LOGGER.debug(
                "Position of %s (%s): %s%%",
                managed.display_name,
                managed.device_url,
                position,
            )
            outcomes[managed.uuid] = apply_position(managed, position)
        return outcomes

    async def async_log_states(self) -> None:
        """Log the raw gateway position of every managed accessory."""

        try:
            devices = await self._client.async_list_devices()
        except GatewayError as err:
            _LOGGER.error("State logging error: %s", err)
            return

        by_url = {device.device_url: device for device in devices}
        for managed in self._registry:
            device = by_url.get(managed.device_url or "")
            if device is None:
                continue
            _LOGGER.info(
                "%s (%s) state: %s",
                managed.display_name,
                managed.device_url,
                raw_position_value(device),
            )
