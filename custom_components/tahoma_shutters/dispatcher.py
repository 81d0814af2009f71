"""Translate requested covering positions into gateway executions."""

from __future__ import annotations

import logging

from .api import GatewayClient, GatewayError
from .const import COMMAND_SET_CLOSURE, COMMAND_SET_POSITION, EXECUTION_IN_PROGRESS
from .position import to_device_units

_LOGGER = logging.getLogger(__name__)


class CommandFailure(GatewayError):
    """Raised when both the primary and the fallback command failed."""

    def __init__(
        self, device_url: str, primary: GatewayError, fallback: GatewayError
    ) -> None:
        """Keep both underlying errors; ``primary`` is the reported cause."""

        super().__init__(f"Unable to move {device_url}: {primary}")
        self.device_url = device_url
        self.primary = primary
        self.fallback = fallback


class CommandDispatcher:
    """Send position commands with a ``setClosure``/``setPosition`` fallback."""

    def __init__(
        self,
        client: GatewayClient,
        *,
        primary_command: str = COMMAND_SET_CLOSURE,
        fallback_command: str = COMMAND_SET_POSITION,
    ) -> None:
        """Bind the dispatcher to a gateway client."""

        self._client = client
        self._primary_command = primary_command
        self._fallback_command = fallback_command

    async def async_set_position(self, device_url: str, position: int) -> str | None:
        """Move ``device_url`` to the presentation ``position``.

        Returns the execution id reported by the gateway, or ``None`` when
        there is nothing to track. A still running execution for the same
        device is neither queued behind nor cancelled.
        """

        value = to_device_units(int(position))
        _LOGGER.info(
            "Position command for %s: requested=%s%% -> closure=%s%%",
            device_url,
            position,
            value,
        )
        try:
            return await self._client.async_execute(
                device_url, self._primary_command, [value]
            )
        except GatewayError as primary_err:
            _LOGGER.debug(
                "%s failed for %s (%s), trying %s",
                self._primary_command,
                device_url,
                primary_err,
                self._fallback_command,
            )
            try:
                return await self._client.async_execute(
                    device_url, self._fallback_command, [value]
                )
            except GatewayError as fallback_err:
                _LOGGER.error(
                    "Error sending position to %s: %s", device_url, primary_err
                )
                raise CommandFailure(
                    device_url, primary_err, fallback_err
                ) from primary_err

    async def async_is_execution_finished(self, device_url: str, exec_id: str) -> bool:
        """Return whether ``exec_id`` is no longer running on ``device_url``.

        Executions that are no longer listed count as finished, and so does
        any failure to query the gateway.
        """

        try:
            devices = await self._client.async_list_devices()
        except GatewayError as err:
            _LOGGER.error("Error checking execution %s: %s", exec_id, err)
            return True
        device = next((d for d in devices if d.device_url == device_url), None)
        if device is None:
            return True
        execution = device.find_execution(exec_id)
        if execution is None:
            return True
        return execution.status != EXECUTION_IN_PROGRESS
