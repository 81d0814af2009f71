"""Integration entry point for the Tahoma Shutters component."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import load_config
from .const import DOMAIN, PLATFORM_NAME, PLUGIN_NAME
from .host import AccessoryHost
from .platform import TahomaShutterPlatform

__all__ = [
    "DOMAIN",
    "PLATFORM_NAME",
    "PLUGIN_NAME",
    "TahomaShutterPlatform",
    "async_setup_platform",
]


async def async_setup_platform(
    raw_config: Mapping[str, Any], host: AccessoryHost
) -> TahomaShutterPlatform:
    """Validate ``raw_config``, restore cached accessories and start discovery."""

    platform = TahomaShutterPlatform(load_config(raw_config), host)
    platform.restore_cached_accessories()
    await platform.async_did_finish_launching()
    return platform
