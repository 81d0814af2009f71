"""Run the platform standalone against a JSON configuration file."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

from . import async_setup_platform
from .api import GatewayError
from .config import CONF_DEBUG_MODE, InvalidConfig
from .host import LocalAccessoryHost

_LOGGER = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Expose Tahoma shutters and keep their state in sync."
    )
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="JSON file holding the platform configuration",
    )
    parser.add_argument(
        "--storage-dir",
        type=Path,
        default=Path.cwd(),
        help="directory holding the .storage accessory cache",
    )
    return parser.parse_args(argv)


async def _async_run(raw_config: dict, storage_dir: Path) -> None:
    host = LocalAccessoryHost(storage_dir)
    platform = await async_setup_platform(raw_config, host)
    try:
        await asyncio.Event().wait()
    finally:
        await platform.async_shutdown()


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``python -m custom_components.tahoma_shutters``."""

    args = _parse_args(argv)
    raw_config = json.loads(args.config.read_text(encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if raw_config.get(CONF_DEBUG_MODE) else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    try:
        asyncio.run(_async_run(raw_config, args.storage_dir))
    except KeyboardInterrupt:
        _LOGGER.info("Interrupted, shutting down")
    except (InvalidConfig, GatewayError) as err:
        _LOGGER.error("Startup failed: %s", err)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
