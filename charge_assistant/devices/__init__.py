"""The device side of the Charge Assistant: battery readers and switches."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum


class BatteryReadError(Exception):
    """Base class for errors while reading the battery level."""


class CommandExecutionError(BatteryReadError):
    """An external command could not be launched or failed."""

    def __init__(self, command: str, reason: str, output: str = "") -> None:
        """Create a CommandExecutionError instance."""
        message = f"Command '{command}' failed: {reason}"
        if output:
            message = f"{message}. Output: {output.strip()}"
        super().__init__(message)
        self.command = command
        self.reason = reason
        self.output = output


class DeviceNotFoundError(BatteryReadError):
    """No device matching the configured filter is attached."""


class ParseError(BatteryReadError):
    """The battery level could not be parsed from the output."""


class OnOffState(StrEnum):
    """Representation of a on/off state."""

    ON = "on"
    OFF = "off"

    @classmethod
    def from_bool(cls, value: bool) -> OnOffState:
        """Convert a bool to a OnOffState."""
        return cls.ON if value else cls.OFF


class BatteryReader(ABC):
    """Base class for battery level sources."""

    @abstractmethod
    def read_battery_level(self) -> float:
        """Read the current battery level in percent.

        Raises a BatteryReadError if the level is not available.
        """


class SwitchController(ABC):
    """Base class for switches which power the charger."""

    @abstractmethod
    def set_switch(self, on: bool) -> None:
        """Turn the switch on or off."""
