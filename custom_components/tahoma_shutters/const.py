"""Constants for the Tahoma Shutters integration."""

from datetime import timedelta

DOMAIN = "tahoma_shutters"
PLUGIN_NAME = "homebridge-somfy-tahoma-v2-shutter"
PLATFORM_NAME = "TahomaShutter"

DEVICES_PATH = "/enduser-mobile-web/1/enduserAPI/setup/devices"
EXEC_APPLY_PATH = "/enduser-mobile-web/1/enduserAPI/exec/apply"
DEFAULT_PORT = 443
REQUEST_TIMEOUT = 5.0

COMMAND_SET_CLOSURE = "setClosure"
COMMAND_SET_POSITION = "setPosition"
EXECUTION_IN_PROGRESS = "IN_PROGRESS"

MANUFACTURER = "Somfy/Tahoma"
DEFAULT_MODEL = "RollerShutter"

DEFAULT_POLLING_INTERVAL = timedelta(seconds=10)
DEFAULT_LOG_INTERVAL = timedelta(seconds=30)
MIN_LOG_INTERVAL_SECONDS = 5
MAX_LOG_INTERVAL_SECONDS = 300
DEFAULT_NAME_PREFIX = "Volet"

# Consecutive unchanged polls before a covering is reported as stopped.
STABLE_CYCLES_BEFORE_STOP = 2

DEFAULT_EXCLUDE_KEYWORDS: tuple[str, ...] = (
    "garage",
    "gate",
    "portail",
    "awning",
    "light",
    "switch",
    "remote",
    "sensor",
    "alarm",
    "plug",
    "heating",
    "thermostat",
)
DEFAULT_MOVEMENT_KEYWORDS: tuple[str, ...] = (
    "roller",
    "shutter",
    "blind",
    "curtain",
    "volet",
)

CONTEXT_DEVICE_URL = "deviceURL"
