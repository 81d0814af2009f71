"""Reconcile gateway coverings with the accessories persisted by the host."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .accessory import PlatformAccessory, WindowCoveringService
from .api import GatewayError
from .const import CONTEXT_DEVICE_URL, DEFAULT_MODEL, MANUFACTURER
from .dispatcher import CommandDispatcher
from .host import AccessoryHost
from .models import Device

_LOGGER = logging.getLogger(__name__)


@dataclass(eq=False)
class ManagedAccessory:
    """An accessory driven by the integration and its polling state.

    ``last_known_position`` stays ``None`` until the first poll observed the
    device, so a covering genuinely at position 0 is not mistaken for one
    that was never read.
    """

    accessory: PlatformAccessory
    device_url: str | None
    last_known_position: int | None = None
    stable_cycles: int = 0
    pending_exec_id: str | None = None

    @property
    def uuid(self) -> str:
        """Return the host identifier of the accessory."""

        return self.accessory.uuid

    @property
    def display_name(self) -> str:
        """Return the name shown by the host."""

        return self.accessory.display_name

    @property
    def covering(self) -> WindowCoveringService | None:
        """Return the covering service once bound."""

        return self.accessory.covering


@dataclass(slots=True)
class ReconcileResult:
    """Identifiers touched by a discovery pass."""

    created: list[str] = field(default_factory=list)
    renamed: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """Return True when the pass created, renamed or removed anything."""

        return bool(self.created or self.renamed or self.removed)


def _source_name(device: Device) -> str | None:
    raw = device.label or device.definition.label or device.widget_name
    if raw is None:
        return None
    return raw.strip() or None


class AccessoryRegistry:
    """Own the working set of managed accessories."""

    def __init__(
        self,
        host: AccessoryHost,
        dispatcher: CommandDispatcher,
        *,
        name_prefix: str,
    ) -> None:
        """Bind the registry to the host and the command dispatcher."""

        self._host = host
        self._dispatcher = dispatcher
        self._name_prefix = name_prefix
        self._managed: dict[str, ManagedAccessory] = {}

    def __iter__(self) -> Iterator[ManagedAccessory]:
        return iter(list(self._managed.values()))

    def __len__(self) -> int:
        return len(self._managed)

    def get(self, accessory_uuid: str) -> ManagedAccessory | None:
        """Return the managed accessory with ``accessory_uuid``."""

        return self._managed.get(accessory_uuid)

    def get_by_device_url(self, device_url: str) -> ManagedAccessory | None:
        """Return the managed accessory backed by ``device_url``."""

        return next(
            (m for m in self._managed.values() if m.device_url == device_url), None
        )

    def configure_accessory(self, accessory: PlatformAccessory) -> None:
        """Adopt an accessory restored from the host cache."""

        self._managed[accessory.uuid] = ManagedAccessory(
            accessory=accessory,
            device_url=accessory.context.get(CONTEXT_DEVICE_URL),
        )

    async def async_reconcile(
        self, all_devices: Iterable[Device], candidates: Iterable[Device]
    ) -> ReconcileResult:
        """Create, update and prune accessories for a discovery pass.

        An accessory survives only when its device is still listed by the
        gateway and still passes the candidate filter.
        """

        all_devices = list(all_devices)
        candidates = list(candidates)
        result = ReconcileResult()
        for device in candidates:
            self._register_or_update(device, result)
        if result.renamed:
            self._host.update_accessories(
                [self._managed[uuid].accessory for uuid in result.renamed]
            )
        self._purge_orphans(all_devices, candidates, result)
        return result

    def _register_or_update(self, device: Device, result: ReconcileResult) -> None:
        accessory_uuid = self._host.generate_uuid(device.device_url)
        managed = self._managed.get(accessory_uuid)
        source_name = _source_name(device)

        if managed is None:
            display_name = source_name or f"{self._name_prefix} {len(self._managed) + 1}"
            accessory = self._host.create_accessory(display_name, accessory_uuid)
            accessory.context[CONTEXT_DEVICE_URL] = device.device_url
            managed = ManagedAccessory(accessory=accessory, device_url=device.device_url)
            self._managed[accessory_uuid] = managed
            self._host.register_accessories([accessory])
            result.created.append(accessory_uuid)
            _LOGGER.info("Accessory created: %s (%s)", display_name, device.device_url)
        else:
            # Unlabelled devices keep their generated name across passes.
            if source_name and managed.accessory.display_name != source_name:
                _LOGGER.info(
                    "Accessory renamed: %s -> %s",
                    managed.accessory.display_name,
                    source_name,
                )
                managed.accessory.display_name = source_name
                result.renamed.append(accessory_uuid)
            managed.accessory.context[CONTEXT_DEVICE_URL] = device.device_url
            managed.device_url = device.device_url

        managed.accessory.set_information(
            manufacturer=MANUFACTURER,
            model=device.widget_name or DEFAULT_MODEL,
            serial_number=device.device_url,
        )
        self._bind_covering(managed)

    def _bind_covering(self, managed: ManagedAccessory) -> None:
        covering = managed.accessory.ensure_covering(managed.display_name)
        covering.name = managed.display_name
        accessory_uuid = managed.uuid

        async def _on_set_target(value: int) -> str | None:
            return await self.async_write_target_position(accessory_uuid, value)

        covering.current_position.on_get(
            lambda: self.read_current_position(accessory_uuid)
        )
        covering.target_position.on_set(_on_set_target)
        covering.position_state.on_get(lambda: covering.position_state.value)

    def _purge_orphans(
        self,
        all_devices: list[Device],
        candidates: list[Device],
        result: ReconcileResult,
    ) -> None:
        all_urls = {device.device_url for device in all_devices}
        candidate_urls = {device.device_url for device in candidates}
        to_remove = [
            managed
            for managed in self._managed.values()
            if not managed.device_url
            or managed.device_url not in all_urls
            or managed.device_url not in candidate_urls
        ]
        if not to_remove:
            return
        self._host.unregister_accessories([managed.accessory for managed in to_remove])
        for managed in to_remove:
            del self._managed[managed.uuid]
            result.removed.append(managed.uuid)
            _LOGGER.info("Accessory removed: %s", managed.display_name)

    def read_current_position(self, accessory_uuid: str) -> int:
        """Return the tracked position, 0 until the device was observed."""

        managed = self._managed.get(accessory_uuid)
        if managed is None or managed.last_known_position is None:
            return 0
        return managed.last_known_position

    async def async_write_target_position(
        self, accessory_uuid: str, value: int
    ) -> str | None:
        """Handle a target position request coming from the host.

        The requested target is echoed immediately; the current position is
        left to the poller so it only ever reflects reported device state.
        """

        managed = self._managed.get(accessory_uuid)
        if managed is None or managed.device_url is None:
            raise KeyError(accessory_uuid)
        position = int(value)
        covering = managed.accessory.ensure_covering(managed.display_name)
        covering.target_position.update_value(position)

        try:
            exec_id = await self._dispatcher.async_set_position(
                managed.device_url, position
            )
        except GatewayError as err:
            _LOGGER.error(
                "Error sending target position to %s: %s", managed.display_name, err
            )
            raise

        if exec_id:
            managed.pending_exec_id = exec_id
            _LOGGER.info(
                "Position %s%% sent to %s (execId: %s)",
                position,
                managed.device_url,
                exec_id,
            )
        return exec_id
