"""Heuristics selecting the gateway devices that behave like coverings."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .config import FilterConfig
from .models import Device

_LOGGER = logging.getLogger(__name__)

REASON_EXCLUDED_URL = "excluded_device_url"
REASON_EXCLUDED_LABEL = "excluded_label"
REASON_EXCLUDED_KEYWORD = "excluded_keyword"
REASON_MOVEMENT_KEYWORD = "movement_keyword"
REASON_NO_MOVEMENT_KEYWORD = "no_movement_keyword"


@dataclass(frozen=True, slots=True)
class Classification:
    """Verdict for a single device.

    ``ambiguous`` flags devices whose hints point both ways (an exclusion
    rule fired although a movement keyword is present) or that carry no hint
    at all. Ambiguity is informational only.
    """

    included: bool
    reason: str
    ambiguous: bool = False


def _contains_any(keywords: Iterable[str], *haystacks: str) -> bool:
    """Return True when one of ``haystacks`` contains one of ``keywords``."""

    return any(keyword and keyword in text for keyword in keywords for text in haystacks)


def explain(device: Device, filters: FilterConfig) -> Classification:
    """Classify ``device`` and report which rule decided."""

    widget = (device.widget_name or "").lower()
    label = (device.definition_label or "").lower()
    movement = _contains_any(filters.movement_keywords, widget, label)

    if device.device_url in filters.exclude_device_urls:
        return Classification(False, REASON_EXCLUDED_URL, ambiguous=movement)
    if _contains_any((ex.lower() for ex in filters.exclude_labels), label):
        return Classification(False, REASON_EXCLUDED_LABEL, ambiguous=movement)
    if _contains_any(filters.exclude_keywords, widget, label):
        return Classification(False, REASON_EXCLUDED_KEYWORD, ambiguous=movement)
    if movement:
        return Classification(True, REASON_MOVEMENT_KEYWORD)
    return Classification(
        False, REASON_NO_MOVEMENT_KEYWORD, ambiguous=not (widget or label)
    )


def classify(
    devices: Iterable[Device], filters: FilterConfig, *, debug: bool = False
) -> list[Device]:
    """Return the devices eligible to become managed coverings."""

    candidates: list[Device] = []
    for device in devices:
        verdict = explain(device, filters)
        if debug and verdict.ambiguous:
            _LOGGER.debug(
                "Ambiguous device %s (widget=%s, label=%s): %s",
                device.device_url,
                device.widget_name,
                device.definition_label,
                verdict.reason,
            )
        if verdict.included:
            candidates.append(device)
    return candidates
