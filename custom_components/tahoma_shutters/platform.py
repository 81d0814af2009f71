"""Platform wiring: startup discovery, timers and shutdown."""

from __future__ import annotations

import logging

import httpx

from .accessory import PlatformAccessory
from .api import GatewayClient
from .classifier import classify
from .config import PlatformConfig
from .coordinator import PollingCoordinator
from .dispatcher import CommandDispatcher
from .host import AccessoryHost
from .registry import AccessoryRegistry, ReconcileResult

_LOGGER = logging.getLogger(__name__)


class TahomaShutterPlatform:
    """Tie the gateway client, registry and poller to an accessory host."""

    def __init__(
        self,
        config: PlatformConfig,
        host: AccessoryHost,
        *,
        client: GatewayClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Build the components from a validated configuration."""

        self.config = config
        self.host = host
        self.client = client or GatewayClient(
            config.ip, config.token, transport=transport
        )
        self.dispatcher = CommandDispatcher(self.client)
        self.registry = AccessoryRegistry(
            host, self.dispatcher, name_prefix=config.name_prefix
        )
        self.coordinator = PollingCoordinator(
            self.client,
            self.registry,
            polling_interval=config.polling_interval,
            log_interval=config.log_interval,
        )

    def configure_accessory(self, accessory: PlatformAccessory) -> None:
        """Adopt an accessory restored by the host from its cache."""

        self.registry.configure_accessory(accessory)

    def restore_cached_accessories(self) -> None:
        """Adopt every accessory the host persisted in a previous run."""

        for accessory in self.host.cached_accessories():
            self.configure_accessory(accessory)

    async def async_did_finish_launching(self) -> ReconcileResult:
        """Discover coverings, reconcile accessories and start the timers.

        Gateway errors raised by the initial device fetch propagate so the
        operator sees why startup failed.
        """

        _LOGGER.info("Initialising Tahoma shutters (automatic discovery)")
        devices = await self.client.async_list_devices()
        candidates = classify(
            devices, self.config.filters, debug=self.config.debug_mode
        )

        if self.config.debug_mode:
            _LOGGER.info("Detected widgets (debug):")
            for device in devices:
                _LOGGER.info(
                    "  - %s | widget: %s | label: %s",
                    device.device_url,
                    device.widget_name,
                    device.definition_label,
                )

        result = await self.registry.async_reconcile(devices, candidates)

        if len(self.registry):
            self.coordinator.start_polling()
        else:
            _LOGGER.info(
                "No shutter accessory created (check your filters and exclusions)"
            )

        if self.config.log_state:
            self.coordinator.start_state_logging()
        return result

    async def async_shutdown(self) -> None:
        """Stop the periodic tasks."""

        self.coordinator.stop()
