"""Read the battery level of a device attached via the Android Debug Bridge."""

import logging
import re
from dataclasses import dataclass, field

from charge_assistant.constants import ADB_BATTERY_COMMAND, ROOT_LOGGER_NAME

from . import BatteryReader, DeviceNotFoundError, ParseError
from .command import CommandRunner, SubprocessCommandRunner

LOGGER = logging.getLogger(ROOT_LOGGER_NAME)

DEVICES_HEADER = "List of devices attached"
DEVICE_STATE_ONLINE = "device"

LEVEL_PATTERN = re.compile(r"^[ \t]*level[ \t]*:[ \t]*(\d+)[ \t]*\r?$", re.IGNORECASE | re.MULTILINE)


@dataclass
class AdbDevice:
    """A device line from the output of `adb devices -l`."""

    serial: str
    state: str
    properties: dict[str, str] = field(default_factory=dict)

    @property
    def model(self) -> str | None:
        """The model name reported by adb."""
        return self.properties.get("model")

    @property
    def online(self) -> bool:
        """True if adb can run commands on the device."""
        return self.state == DEVICE_STATE_ONLINE

    def matches(self, device_filter: str) -> bool:
        """Check if the device has the given serial number or its model contains the filter."""
        return device_filter == self.serial or device_filter in (self.model or "")


def parse_devices(output: str) -> list[AdbDevice]:
    """Parse the output of `adb devices -l`."""
    devices: list[AdbDevice] = []
    for line in output.splitlines():
        line = line.strip()
        if not line or line.startswith(DEVICES_HEADER) or line.startswith("*"):
            continue
        fields = line.split()
        if len(fields) < 2:
            continue
        properties = dict(item.split(":", 1) for item in fields[2:] if ":" in item)
        devices.append(AdbDevice(serial=fields[0], state=fields[1], properties=properties))
    return devices


def select_device(devices: list[AdbDevice], device_filter: str | None = None) -> AdbDevice:
    """Select the device to read the battery level from."""
    candidates = [device for device in devices if device.online]
    if device_filter is not None:
        candidates = [device for device in candidates if device.matches(device_filter)]
    if candidates:
        return candidates[0]
    if not devices:
        raise DeviceNotFoundError("No adb devices attached")
    offline = ", ".join(f"{device.serial} ({device.state})" for device in devices)
    if device_filter is not None:
        raise DeviceNotFoundError(f"Device {device_filter} not found. Attached devices: {offline}")
    raise DeviceNotFoundError(f"No usable adb device. Attached devices: {offline}")


def parse_battery_level(output: str) -> float:
    """Parse the battery level from the output of `dumpsys battery`."""
    if not output.strip():
        raise ParseError("The battery status output is empty")
    match = LEVEL_PATTERN.search(output)
    if match is None:
        raise ParseError(f"No battery level found in output: {output.strip()}")
    level = float(match.group(1))
    if level > 100:
        raise ParseError(f"Battery level {level:.0f} is out of range")
    return level


class AdbBatteryReader(BatteryReader):
    """Read the battery level with `adb shell dumpsys battery`."""

    def __init__(
        self,
        runner: CommandRunner | None = None,
        adb_path: str = "adb",
        device_filter: str | None = None,
    ) -> None:
        """Create an AdbBatteryReader instance."""
        self._runner = runner if runner is not None else SubprocessCommandRunner()
        self._adb_path = adb_path
        self._device_filter = device_filter

    @property
    def device_filter(self) -> str | None:
        """The serial number or model of the device to read from."""
        return self._device_filter

    def find_device(self) -> AdbDevice:
        """Find the device to read the battery level from."""
        result = self._runner.run([self._adb_path, "devices", "-l"]).check()
        devices = parse_devices(result.output)
        try:
            device = select_device(devices, self._device_filter)
        except DeviceNotFoundError as error:
            raise DeviceNotFoundError(f"{error}. adb devices output: {result.output.strip()}") from error
        LOGGER.debug("Using device %s (model %s)", device.serial, device.model)
        return device

    def read_battery_level(self) -> float:
        """Read the battery level of the selected device."""
        device = self.find_device()
        result = self._runner.run([self._adb_path, "-s", device.serial, "shell", *ADB_BATTERY_COMMAND]).check()
        try:
            return parse_battery_level(result.output)
        except ParseError:
            LOGGER.warning("Failed to parse the battery level of %s. Full output:\n%s", device.serial, result.output)
            raise
