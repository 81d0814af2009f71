"""Configuration schema and typed settings for the Tahoma Shutters platform."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

import voluptuous as vol

from .const import (
    DEFAULT_EXCLUDE_KEYWORDS,
    DEFAULT_LOG_INTERVAL,
    DEFAULT_MOVEMENT_KEYWORDS,
    DEFAULT_NAME_PREFIX,
    DEFAULT_POLLING_INTERVAL,
    MAX_LOG_INTERVAL_SECONDS,
    MIN_LOG_INTERVAL_SECONDS,
)

CONF_IP = "ip"
CONF_TOKEN = "token"
CONF_POLLING_INTERVAL = "pollingInterval"
CONF_LOG_STATE = "logState"
CONF_LOG_INTERVAL = "logInterval"
CONF_NAME_PREFIX = "namePrefix"
CONF_DEBUG_MODE = "debugMode"
CONF_FILTERS = "filters"
CONF_EXCLUDE_DEVICE_URLS = "excludeDeviceURLs"
CONF_EXCLUDE_LABELS = "excludeLabels"
CONF_EXCLUDE_KEYWORDS = "excludeKeywords"
CONF_MOVEMENT_KEYWORDS = "movementKeywords"

_NON_EMPTY_STR = vol.All(str, vol.Strip, vol.Length(min=1))


def _or_default(default: Callable[[], Any]) -> Callable[[Any], Any]:
    """Return a validator replacing ``None`` or a blank string by ``default()``."""

    def _validate(value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return default()
        return value

    return _validate


def _default_exclude_keywords() -> list[str]:
    return list(DEFAULT_EXCLUDE_KEYWORDS)


def _default_movement_keywords() -> list[str]:
    return list(DEFAULT_MOVEMENT_KEYWORDS)


FILTERS_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_EXCLUDE_DEVICE_URLS, default=list): vol.All(
            _or_default(list), [str]
        ),
        vol.Optional(CONF_EXCLUDE_LABELS, default=list): vol.All(
            _or_default(list), [str]
        ),
        vol.Optional(
            CONF_EXCLUDE_KEYWORDS, default=_default_exclude_keywords
        ): vol.All(_or_default(_default_exclude_keywords), [str]),
        vol.Optional(
            CONF_MOVEMENT_KEYWORDS, default=_default_movement_keywords
        ): vol.All(_or_default(_default_movement_keywords), [str]),
    },
    extra=vol.ALLOW_EXTRA,
)

PLATFORM_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_IP): _NON_EMPTY_STR,
        vol.Required(CONF_TOKEN): _NON_EMPTY_STR,
        vol.Optional(
            CONF_POLLING_INTERVAL,
            default=int(DEFAULT_POLLING_INTERVAL.total_seconds()),
        ): vol.All(vol.Coerce(int), vol.Range(min=1)),
        vol.Optional(CONF_LOG_STATE, default=True): bool,
        vol.Optional(
            CONF_LOG_INTERVAL, default=int(DEFAULT_LOG_INTERVAL.total_seconds())
        ): vol.All(
            vol.Coerce(int),
            vol.Clamp(min=MIN_LOG_INTERVAL_SECONDS, max=MAX_LOG_INTERVAL_SECONDS),
        ),
        vol.Optional(CONF_NAME_PREFIX, default=DEFAULT_NAME_PREFIX): vol.All(
            _or_default(lambda: DEFAULT_NAME_PREFIX), _NON_EMPTY_STR
        ),
        vol.Optional(CONF_DEBUG_MODE, default=False): bool,
        vol.Optional(CONF_FILTERS, default=dict): vol.All(
            _or_default(dict), FILTERS_SCHEMA
        ),
    },
    extra=vol.ALLOW_EXTRA,
)


class InvalidConfig(ValueError):
    """Raised when the platform configuration cannot be validated."""


@dataclass(frozen=True, slots=True)
class FilterConfig:
    """Device classification settings."""

    exclude_device_urls: tuple[str, ...] = ()
    exclude_labels: tuple[str, ...] = ()
    exclude_keywords: tuple[str, ...] = DEFAULT_EXCLUDE_KEYWORDS
    movement_keywords: tuple[str, ...] = DEFAULT_MOVEMENT_KEYWORDS

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> FilterConfig:
        """Build filters from an already validated ``filters`` mapping."""

        return cls(
            exclude_device_urls=tuple(payload[CONF_EXCLUDE_DEVICE_URLS]),
            exclude_labels=tuple(payload[CONF_EXCLUDE_LABELS]),
            exclude_keywords=tuple(k.lower() for k in payload[CONF_EXCLUDE_KEYWORDS]),
            movement_keywords=tuple(
                k.lower() for k in payload[CONF_MOVEMENT_KEYWORDS]
            ),
        )


@dataclass(frozen=True, slots=True)
class PlatformConfig:
    """Validated platform settings."""

    ip: str
    token: str
    polling_interval: timedelta = DEFAULT_POLLING_INTERVAL
    log_state: bool = True
    log_interval: timedelta = DEFAULT_LOG_INTERVAL
    name_prefix: str = DEFAULT_NAME_PREFIX
    debug_mode: bool = False
    filters: FilterConfig = field(default_factory=FilterConfig)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> PlatformConfig:
        """Build the config from a mapping validated by ``PLATFORM_SCHEMA``."""

        return cls(
            ip=payload[CONF_IP],
            token=payload[CONF_TOKEN],
            polling_interval=timedelta(seconds=payload[CONF_POLLING_INTERVAL]),
            log_state=payload[CONF_LOG_STATE],
            log_interval=timedelta(seconds=payload[CONF_LOG_INTERVAL]),
            name_prefix=payload[CONF_NAME_PREFIX],
            debug_mode=payload[CONF_DEBUG_MODE],
            filters=FilterConfig.from_dict(payload[CONF_FILTERS]),
        )


def load_config(raw: Mapping[str, Any] | None) -> PlatformConfig:
    """Validate ``raw`` user configuration and return typed settings.

    Missing optional keys receive their defaults and ``logInterval`` is
    clamped to the supported range. ``InvalidConfig`` is raised with a
    readable message when a required key is missing or a value has the wrong
    type.
    """

    try:
        validated = PLATFORM_SCHEMA(dict(raw or {}))
    except vol.Invalid as err:
        raise InvalidConfig(f"Invalid Tahoma configuration: {err}") from err
    return PlatformConfig.from_dict(validated)
