"""Tests for the JSON accessory store and the local reference host."""

from __future__ import annotations

import json
import logging

from custom_components.tahoma_shutters.const import CONTEXT_DEVICE_URL
from custom_components.tahoma_shutters.host import LocalAccessoryHost
from custom_components.tahoma_shutters.storage import AccessoryStore

SALON = "io://1234/1"


def test_store_wraps_data_in_envelope(tmp_path) -> None:  # type: ignore[no-untyped-def]
    """Saved payloads carry the version metadata."""

    store = AccessoryStore(tmp_path, key="test_key", version=3)
    store.save({"answer": 42})

    raw = json.loads((tmp_path / ".storage" / "test_key").read_text(encoding="utf-8"))
    assert raw == {"version": 3, "minor_version": 1, "key": "test_key", "data": {"answer": 42}}
    assert store.load() == {"answer": 42}


def test_store_missing_or_corrupt_file_loads_nothing(tmp_path, caplog) -> None:  # type: ignore[no-untyped-def]
    """Absent and unreadable caches both behave as empty."""

    store = AccessoryStore(tmp_path)
    assert store.load() is None

    store.path.parent.mkdir(parents=True)
    store.path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        assert store.load() is None
    assert "Ignoring corrupt accessory cache" in caplog.text


def test_local_host_persists_and_restores_accessories(tmp_path) -> None:  # type: ignore[no-untyped-def]
    """Registered accessories survive a restart; removed ones do not."""

    host = LocalAccessoryHost(tmp_path)
    accessory_uuid = host.generate_uuid(SALON)
    accessory = host.create_accessory("Volet Salon", accessory_uuid)
    accessory.context[CONTEXT_DEVICE_URL] = SALON
    accessory.set_information(
        manufacturer="Somfy/Tahoma", model="RollerShutter", serial_number=SALON
    )
    other = host.create_accessory("Volet Chambre", host.generate_uuid("io://1234/2"))
    host.register_accessories([accessory, other])
    host.unregister_accessories([other])

    accessory.display_name = "Volet Séjour"
    host.update_accessories([accessory])

    restored = LocalAccessoryHost(tmp_path).cached_accessories()
    assert len(restored) == 1
    assert restored[0].uuid == accessory_uuid
    assert restored[0].display_name == "Volet Séjour"
    assert restored[0].context == {CONTEXT_DEVICE_URL: SALON}
    assert restored[0].information.model == "RollerShutter"
    assert restored[0].information.serial_number == SALON
    assert restored[0].covering is None


def test_local_host_uuid_is_stable(tmp_path) -> None:  # type: ignore[no-untyped-def]
    """The same seed always yields the same identifier."""

    host = LocalAccessoryHost(tmp_path)

    assert host.generate_uuid(SALON) == LocalAccessoryHost(tmp_path).generate_uuid(SALON)
    assert host.generate_uuid(SALON) != host.generate_uuid("io://1234/2")


def test_local_host_skips_unreadable_entries(tmp_path) -> None:  # type: ignore[no-untyped-def]
    """Cache entries missing required fields are ignored."""

    AccessoryStore(tmp_path).save(
        {"accessories": [{"uuid": "only-uuid"}, {"display_name": "Volet", "uuid": "ok"}]}
    )

    restored = LocalAccessoryHost(tmp_path).cached_accessories()

    assert [a.uuid for a in restored] == ["ok"]
