"""JSON persistence for cached accessories."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

_LOGGER = logging.getLogger(__name__)

ACCESSORY_STORE_KEY = "tahoma_shutters_accessories"
ACCESSORY_STORE_VERSION = 1


class AccessoryStore:
    """Persist dictionaries to ``<storage_dir>/.storage/<key>`` files."""

    def __init__(
        self,
        storage_dir: str | Path,
        key: str = ACCESSORY_STORE_KEY,
        version: int = ACCESSORY_STORE_VERSION,
    ) -> None:
        """Bind the store to its on-disk location."""

        self.key = key
        self.version = version
        self._minor_version = 1
        self._path = Path(storage_dir) / ".storage" / key

    @property
    def path(self) -> Path:
        """Return the backing file path."""

        return self._path

    def load(self) -> dict[str, Any] | None:
        """Load the stored payload, unwrapping the storage envelope."""

        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            _LOGGER.warning("Ignoring corrupt accessory cache %s", self._path)
            return None
        if isinstance(data, dict) and "data" in data:
            inner = data.get("data")
            return inner if isinstance(inner, dict) else None
        return data if isinstance(data, dict) else None

    def save(self, data: dict[str, Any]) -> None:
        """Persist ``data`` wrapped in the storage envelope."""

        self._path.parent.mkdir(parents=True, exist_ok=True)
        envelope = {
            "version": self.version,
            "minor_version": self._minor_version,
            "key": self.key,
            "data": data,
        }
        self._path.write_text(json.dumps(envelope, indent=2), encoding="utf-8")
