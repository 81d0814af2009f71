"""Host framework boundary and a file-backed reference host."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import asdict
from pathlib import Path
from typing import Any, Protocol

from .accessory import AccessoryInformation, PlatformAccessory
from .storage import AccessoryStore

_LOGGER = logging.getLogger(__name__)


class AccessoryHost(Protocol):
    """Operations the integration needs from the accessory host."""

    def generate_uuid(self, seed: str) -> str:
        """Return a stable identifier derived from ``seed``."""

    def create_accessory(self, display_name: str, accessory_uuid: str) -> PlatformAccessory:
        """Return a new, not yet registered accessory."""

    def register_accessories(self, accessories: Iterable[PlatformAccessory]) -> None:
        """Publish and persist ``accessories``."""

    def update_accessories(self, accessories: Iterable[PlatformAccessory]) -> None:
        """Persist changes made to registered ``accessories``."""

    def unregister_accessories(self, accessories: Iterable[PlatformAccessory]) -> None:
        """Withdraw ``accessories`` and drop them from the cache."""

    def cached_accessories(self) -> list[PlatformAccessory]:
        """Return the accessories persisted by a previous run."""


def _accessory_to_storage(accessory: PlatformAccessory) -> dict[str, Any]:
    return {
        "display_name": accessory.display_name,
        "uuid": accessory.uuid,
        "context": dict(accessory.context),
        "information": asdict(accessory.information),
    }


def _accessory_from_storage(payload: dict[str, Any]) -> PlatformAccessory:
    return PlatformAccessory(
        display_name=payload["display_name"],
        uuid=payload["uuid"],
        context=dict(payload.get("context") or {}),
        information=AccessoryInformation(**(payload.get("information") or {})),
    )


class LocalAccessoryHost:
    """Standalone host keeping registered accessories in a JSON cache."""

    def __init__(self, storage_dir: str | Path) -> None:
        """Load previously registered accessories from ``storage_dir``."""

        self._store = AccessoryStore(storage_dir)
        self._accessories: dict[str, PlatformAccessory] = {}
        cached = self._store.load() or {}
        for payload in cached.get("accessories", []):
            try:
                accessory = _accessory_from_storage(payload)
            except (KeyError, TypeError) as err:
                _LOGGER.warning("Skipping unreadable cached accessory: %s", err)
                continue
            self._accessories[accessory.uuid] = accessory

    def generate_uuid(self, seed: str) -> str:
        """Return a name-based uuid5 for ``seed``."""

        return str(uuid.uuid5(uuid.NAMESPACE_URL, seed))

    def create_accessory(self, display_name: str, accessory_uuid: str) -> PlatformAccessory:
        """Return a bare accessory; it is stored once registered."""

        return PlatformAccessory(display_name=display_name, uuid=accessory_uuid)

    def register_accessories(self, accessories: Iterable[PlatformAccessory]) -> None:
        """Add ``accessories`` and persist the cache."""

        for accessory in accessories:
            self._accessories[accessory.uuid] = accessory
        self.save()

    def update_accessories(self, accessories: Iterable[PlatformAccessory]) -> None:
        """Persist changes made to ``accessories``."""

        for accessory in accessories:
            self._accessories[accessory.uuid] = accessory
        self.save()

    def unregister_accessories(self, accessories: Iterable[PlatformAccessory]) -> None:
        """Drop ``accessories`` and persist the cache."""

        for accessory in accessories:
            self._accessories.pop(accessory.uuid, None)
        self.save()

    def cached_accessories(self) -> list[PlatformAccessory]:
        """Return the accessories currently held by the host."""

        return list(self._accessories.values())

    def save(self) -> None:
        """Persist every registered accessory, including renamed ones."""

        self._store.save(
            {
                "accessories": [
                    _accessory_to_storage(accessory)
                    for accessory in self._accessories.values()
                ]
            }
        )
