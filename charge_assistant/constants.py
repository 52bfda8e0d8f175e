"""All constants for Charge Assistant."""

from typing import Final

ROOT_LOGGER_NAME: Final[str] = "charge_assistant"

DEFAULT_ENTITY_ID: Final[str] = "switch.smart_power_strip_socket_4"
DEFAULT_LOW_BATTERY_THRESHOLD: Final[float] = 20.0
DEFAULT_HIGH_BATTERY_THRESHOLD: Final[float] = 80.0
DEFAULT_LOOP_INTERVAL: Final[float] = 60.0
DEFAULT_REQUEST_TIMEOUT: Final[float] = 10.0
DEFAULT_COMMAND_TIMEOUT: Final[float] = 30.0

ADB_BATTERY_COMMAND: Final[tuple[str, ...]] = ("dumpsys", "battery")
SYSFS_POWER_SUPPLY_ROOT: Final[str] = "/sys/class/power_supply"
