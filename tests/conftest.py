"""Conf test for Charge Assistant."""

from collections.abc import Callable, Sequence

import pytest

from charge_assistant.devices import CommandExecutionError
from charge_assistant.devices.command import CommandResult, CommandRunner

ADB_DEVICES_OUTPUT = """List of devices attached
R58M12ABCDE            device usb:1-1 product:a52qnsxx model:SM_A525F device:a52q transport_id:3
4c1f2a7b               device usb:1-2 product:pissarro model:2201117TY device:pissarro transport_id:4

"""

DUMPSYS_BATTERY_OUTPUT = """Current Battery Service state:
  AC powered: false
  USB powered: true
  Wireless powered: false
  Max charging current: 500000
  Max charging voltage: 5000000
  Charge counter: 3213000
  status: 2
  health: 2
  present: true
  level: {level}
  scale: 100
  voltage: 4012
  temperature: 285
  technology: Li-ion
"""


class FakeCommandRunner(CommandRunner):
    """Command runner which answers with canned results."""

    def __init__(self, responses: dict[str, CommandResult | Exception] | None = None) -> None:
        """Create a FakeCommandRunner instance."""
        self.responses: dict[str, CommandResult | Exception] = responses or {}
        self.calls: list[tuple[str, ...]] = []

    def add(self, command: str, output: str, returncode: int = 0) -> None:
        """Register the result of a command line."""
        self.responses[command] = CommandResult(tuple(command.split()), returncode, output)

    def run(self, args: Sequence[str]) -> CommandResult:
        """Return the registered result of the command."""
        self.calls.append(tuple(args))
        command = " ".join(args)
        response = self.responses.get(command)
        if response is None:
            raise CommandExecutionError(command, "No such file or directory")
        if isinstance(response, Exception):
            raise response
        return response


def make_battery_output(level: int | str) -> str:
    """Create the output of `dumpsys battery` for a level."""
    return DUMPSYS_BATTERY_OUTPUT.format(level=level)


@pytest.fixture()
def battery_output() -> Callable[[int | str], str]:
    """Factory fixture for the output of `dumpsys battery`."""
    return make_battery_output


@pytest.fixture()
def runner() -> FakeCommandRunner:
    """Command runner test fixture with two attached devices."""
    result = FakeCommandRunner()
    result.add("adb devices -l", ADB_DEVICES_OUTPUT)
    result.add("adb -s R58M12ABCDE shell dumpsys battery", make_battery_output(15))
    result.add("adb -s 4c1f2a7b shell dumpsys battery", make_battery_output(85))
    return result


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove settings from the environment so that tests do not depend on it."""
    for name in (
        "HOMEASSISTANT_URL",
        "HOMEASSISTANT_TOKEN",
        "ENTITY_ID",
        "LOW_BATTERY_THRESHOLD",
        "HIGH_BATTERY_THRESHOLD",
        "LOOP_INTERVAL",
        "REQUEST_TIMEOUT",
        "BATTERY_SOURCE",
        "ADB_PATH",
        "ADB_DEVICE",
        "COMMAND_TIMEOUT",
        "SYSFS_BATTERY",
        "DEMO_MODE",
        "NOTIFICATIONS",
        "LOG_LEVEL",
        "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
