"""Read the battery level of the local machine from the Linux power supply class."""

import logging
from pathlib import Path

from charge_assistant.constants import ROOT_LOGGER_NAME, SYSFS_POWER_SUPPLY_ROOT

from . import BatteryReader, CommandExecutionError, DeviceNotFoundError, ParseError

LOGGER = logging.getLogger(ROOT_LOGGER_NAME)


class SysfsBatteryReader(BatteryReader):
    """Read the `capacity` of a battery in /sys/class/power_supply."""

    def __init__(self, battery: str = "BAT0", root: Path | str = SYSFS_POWER_SUPPLY_ROOT) -> None:
        """Create a SysfsBatteryReader instance."""
        self._path = Path(root) / battery

    @property
    def path(self) -> Path:
        """Directory of the battery."""
        return self._path

    def _read(self, name: str) -> str:
        file = self._path / name
        try:
            return file.read_text().strip()
        except OSError as error:
            raise CommandExecutionError(f"read {file}", str(error)) from error

    def read_status(self) -> str | None:
        """Read the charging status, e.g. Charging or Discharging."""
        if not (self._path / "status").is_file():
            return None
        return self._read("status")

    def read_battery_level(self) -> float:
        """Read the battery capacity in percent."""
        if not self._path.is_dir():
            raise DeviceNotFoundError(f"Battery {self._path} not found")
        value = self._read("capacity")
        try:
            level = float(value)
        except ValueError as error:
            raise ParseError(f"Invalid battery capacity {value!r} in {self._path}") from error
        if not 0 <= level <= 100:
            raise ParseError(f"Battery capacity {value} in {self._path} is out of range")
        if LOGGER.isEnabledFor(logging.DEBUG):
            try:
                LOGGER.debug("Battery %s status: %s", self._path.name, self.read_status())
            except CommandExecutionError as error:
                LOGGER.debug("Battery %s status not available: %s", self._path.name, error)
        return level
