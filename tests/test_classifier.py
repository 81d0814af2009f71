"""Tests for the covering classification heuristics."""

from __future__ import annotations

import logging

from fakes import make_device

from custom_components.tahoma_shutters.classifier import (
    REASON_EXCLUDED_KEYWORD,
    REASON_EXCLUDED_LABEL,
    REASON_EXCLUDED_URL,
    REASON_MOVEMENT_KEYWORD,
    REASON_NO_MOVEMENT_KEYWORD,
    classify,
    explain,
)
from custom_components.tahoma_shutters.config import FilterConfig
from custom_components.tahoma_shutters.models import Device


def _device(device_url: str, *, label: str | None, widget: str | None) -> Device:
    return Device.model_validate(make_device(device_url, label=label, widget=widget))


def test_volet_with_roller_shutter_widget_is_included() -> None:
    """A labelled roller shutter is a candidate."""

    device = _device("io://x/1", label="Volet Salon", widget="RollerShutter")

    assert classify([device], FilterConfig()) == [device]
    assert explain(device, FilterConfig()).reason == REASON_MOVEMENT_KEYWORD


def test_explicit_url_exclusion_beats_movement_keyword() -> None:
    """An excluded device URL is dropped even when it looks like a shutter."""

    device = _device("io://x/1", label="Volet Chambre", widget="RollerShutter")
    filters = FilterConfig(exclude_device_urls=("io://x/1",))

    verdict = explain(device, filters)

    assert classify([device], filters) == []
    assert verdict.reason == REASON_EXCLUDED_URL
    assert verdict.ambiguous is True


def test_awning_widget_is_excluded_despite_volet_label() -> None:
    """Exclusion keywords win over movement keywords."""

    device = _device("io://x/2", label="Volet terrasse", widget="Awning")

    assert classify([device], FilterConfig()) == []
    assert explain(device, FilterConfig()).reason == REASON_EXCLUDED_KEYWORD


def test_excluded_labels_are_case_insensitive_substrings() -> None:
    """Configured label exclusions match anywhere in the label."""

    device = _device("io://x/3", label="Volet GRENIER", widget="RollerShutter")
    filters = FilterConfig(exclude_labels=("", "grenier"))

    assert classify([device], filters) == []
    assert explain(device, filters).reason == REASON_EXCLUDED_LABEL


def test_device_without_movement_keyword_is_dropped() -> None:
    """Devices need at least one movement keyword to be kept."""

    heater = _device("io://x/4", label="Radiateur", widget="AtlanticElectricalHeater")
    anonymous = _device("io://x/5", label=None, widget=None)

    assert classify([heater, anonymous], FilterConfig()) == []
    assert explain(heater, FilterConfig()).reason == REASON_NO_MOVEMENT_KEYWORD
    assert explain(heater, FilterConfig()).ambiguous is False
    assert explain(anonymous, FilterConfig()).ambiguous is True


def test_custom_keywords_replace_defaults() -> None:
    """Configured keyword sets replace the built-in ones."""

    screen = _device("io://x/6", label="Store banne", widget="Screen")
    filters = FilterConfig(exclude_keywords=(), movement_keywords=("screen",))

    assert classify([screen], filters) == [screen]
    assert classify([screen], FilterConfig()) == []


def test_classify_preserves_order() -> None:
    """Candidates keep the gateway ordering."""

    devices = [
        _device("io://x/7", label="Volet 2", widget="RollerShutter"),
        _device("io://x/8", label="Garage", widget="GarageDoor"),
        _device("io://x/9", label="Rideau", widget="Curtain"),
    ]

    assert [d.device_url for d in classify(devices, FilterConfig())] == [
        "io://x/7",
        "io://x/9",
    ]


def test_ambiguous_devices_logged_only_in_debug(caplog) -> None:  # type: ignore[no-untyped-def]
    """Ambiguity is reported at debug level when debug mode is on."""

    device = _device("io://x/10", label="Volet portail", widget="RollerShutter")

    with caplog.at_level(logging.DEBUG):
        classify([device], FilterConfig())
    assert "Ambiguous device" not in caplog.text

    with caplog.at_level(logging.DEBUG):
        classify([device], FilterConfig(), debug=True)
    assert "Ambiguous device io://x/10" in caplog.text
