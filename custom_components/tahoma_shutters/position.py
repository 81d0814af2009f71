"""Conversions between gateway closure values and presentation positions."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from typing import Any

from .models import Device, StateEntry

OPEN_POSITION = 100
CLOSED_POSITION = 0
UNKNOWN_OPEN_CLOSED_POSITION = 50
DEFAULT_POSITION = 0


def to_device_units(position: int) -> int:
    """Convert a presentation position into a gateway closure value."""

    return 100 - position


def to_presentation_units(value: int) -> int:
    """Convert a gateway closure value into a presentation position."""

    return 100 - value


def find_state(
    states: Iterable[StateEntry], predicate: Callable[[StateEntry], bool]
) -> StateEntry | None:
    """Return the first state matching ``predicate``."""

    return next((state for state in states if predicate(state)), None)


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _name_contains(state: StateEntry, *fragments: str) -> bool:
    name = state.name.lower()
    return any(fragment in name for fragment in fragments)


def is_numeric_position_state(state: StateEntry) -> bool:
    """Match numeric ``closure``/``position`` states."""

    return _name_contains(state, "closure", "position") and (
        _as_number(state.value) is not None
    )


def is_open_closed_state(state: StateEntry) -> bool:
    """Match symbolic ``openclosed`` states."""

    return _name_contains(state, "openclosed") and isinstance(state.value, str)


def _round_half_up(number: float) -> int:
    return math.floor(number + 0.5)


def _decode_numeric(state: StateEntry) -> int:
    number = _as_number(state.value)
    assert number is not None
    return to_presentation_units(_round_half_up(number))


def _decode_open_closed(state: StateEntry) -> int:
    if state.value == "open":
        return OPEN_POSITION
    if state.value == "closed":
        return CLOSED_POSITION
    return UNKNOWN_OPEN_CLOSED_POSITION


# Tried in order: numeric closure beats the symbolic open/closed state.
_POSITION_MATCHERS: tuple[
    tuple[Callable[[StateEntry], bool], Callable[[StateEntry], int]], ...
] = (
    (is_numeric_position_state, _decode_numeric),
    (is_open_closed_state, _decode_open_closed),
)


def decode_position(device: Device | None) -> int:
    """Return the presentation position reported by ``device``.

    Falls back to 0 when the device is absent or exposes no usable state.
    """

    if device is None:
        return DEFAULT_POSITION
    for matcher, decoder in _POSITION_MATCHERS:
        state = find_state(device.states, matcher)
        if state is not None:
            return decoder(state)
    return DEFAULT_POSITION


def raw_position_value(device: Device) -> Any:
    """Return the raw gateway value backing the decoded position, if any."""

    for matcher, _decoder in _POSITION_MATCHERS:
        state = find_state(device.states, matcher)
        if state is not None:
            return state.value
    return None
