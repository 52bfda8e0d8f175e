"""Tests for the adb battery reader."""

from collections.abc import Callable

import pytest

from charge_assistant.devices import CommandExecutionError, DeviceNotFoundError, ParseError
from charge_assistant.devices.adb import AdbBatteryReader, parse_battery_level, parse_devices, select_device
from conftest import FakeCommandRunner


def test_parse_battery_level(battery_output: Callable[[int | str], str]) -> None:
    """Test parsing the level from dumpsys output."""
    assert parse_battery_level(battery_output(15)) == 15.0
    assert parse_battery_level(battery_output(100)) == 100.0
    assert parse_battery_level(battery_output(0)) == 0.0


def test_parse_battery_level_is_tolerant() -> None:
    """Test case and whitespace variants of the level line."""
    assert parse_battery_level("  level: 15") == 15.0
    assert parse_battery_level("level:85") == 85.0
    assert parse_battery_level("LEVEL :  42  \r\n") == 42.0
    assert parse_battery_level("\tLevel\t:\t7\n") == 7.0


def test_parse_battery_level_takes_first_match() -> None:
    """Test that the first level line wins."""
    assert parse_battery_level("status: 2\n  level: 33\n  level: 90\n") == 33.0


def test_parse_battery_level_is_idempotent(battery_output: Callable[[int | str], str]) -> None:
    """Test that parsing the same output twice gives the same result."""
    output = battery_output(57)
    assert parse_battery_level(output) == parse_battery_level(output) == 57.0


def test_parse_battery_level_ignores_other_lines() -> None:
    """Test that similar looking lines are not mistaken for the level."""
    with pytest.raises(ParseError):
        parse_battery_level("  scale: 100\n  battery level: 50\n  level: high\n")


def test_parse_battery_level_missing() -> None:
    """Test output without a level line."""
    with pytest.raises(ParseError):
        parse_battery_level("Current Battery Service state:\n  AC powered: false\n")
    with pytest.raises(ParseError):
        parse_battery_level("")
    with pytest.raises(ParseError):
        parse_battery_level("  level:\n15\n")


def test_parse_battery_level_out_of_range() -> None:
    """Test a level above 100 percent."""
    with pytest.raises(ParseError):
        parse_battery_level("  level: 250")


def test_parse_devices() -> None:
    """Test parsing the device list."""
    output = (
        "* daemon not running; starting now at tcp:5037\n"
        "* daemon started successfully\n"
        "List of devices attached\n"
        "emulator-5554          device product:sdk_gphone64 model:sdk_gphone64_x86_64 device:emu64x\n"
        "4c1f2a7b               unauthorized usb:1-2 transport_id:4\n"
        "\n"
    )
    devices = parse_devices(output)
    assert len(devices) == 2
    assert devices[0].serial == "emulator-5554"
    assert devices[0].online is True
    assert devices[0].model == "sdk_gphone64_x86_64"
    assert devices[1].serial == "4c1f2a7b"
    assert devices[1].online is False
    assert devices[1].model is None


def test_select_device() -> None:
    """Test selecting a device with and without a filter."""
    devices = parse_devices(
        "List of devices attached\n"
        "offline1 offline\n"
        "R58M12ABCDE device model:SM_A525F\n"
        "4c1f2a7b device model:2201117TY\n",
    )
    assert select_device(devices).serial == "R58M12ABCDE"
    assert select_device(devices, "2201117TY").serial == "4c1f2a7b"
    assert select_device(devices, "R58M12ABCDE").serial == "R58M12ABCDE"
    with pytest.raises(DeviceNotFoundError, match="not found"):
        select_device(devices, "Pixel_7")
    with pytest.raises(DeviceNotFoundError, match="offline1"):
        select_device(devices, "offline1")


def test_select_device_without_devices() -> None:
    """Test an empty device list."""
    with pytest.raises(DeviceNotFoundError, match="No adb devices attached"):
        select_device(parse_devices("List of devices attached\n\n"))


def test_read_battery_level(runner: FakeCommandRunner) -> None:
    """Test reading the level of the first device."""
    reader = AdbBatteryReader(runner)
    assert reader.read_battery_level() == 15.0
    assert runner.calls == [
        ("adb", "devices", "-l"),
        ("adb", "-s", "R58M12ABCDE", "shell", "dumpsys", "battery"),
    ]


def test_read_battery_level_with_model_filter(runner: FakeCommandRunner) -> None:
    """Test reading the level of a device selected by its model."""
    reader = AdbBatteryReader(runner, device_filter="2201117TY")
    assert reader.read_battery_level() == 85.0
    assert runner.calls[-1] == ("adb", "-s", "4c1f2a7b", "shell", "dumpsys", "battery")


def test_read_battery_level_custom_adb_path(runner: FakeCommandRunner) -> None:
    """Test that the configured adb executable is used."""
    runner.add("/opt/platform-tools/adb devices -l", "List of devices attached\nserial1 device model:X\n")
    runner.add("/opt/platform-tools/adb -s serial1 shell dumpsys battery", "  level: 64\n")
    reader = AdbBatteryReader(runner, adb_path="/opt/platform-tools/adb")
    assert reader.read_battery_level() == 64.0


def test_read_battery_level_device_not_found(runner: FakeCommandRunner) -> None:
    """Test a device filter which does not match."""
    reader = AdbBatteryReader(runner, device_filter="Pixel_7")
    with pytest.raises(DeviceNotFoundError) as error:
        reader.read_battery_level()
    assert "SM_A525F" in str(error.value)
    assert len(runner.calls) == 1


def test_read_battery_level_devices_command_fails(runner: FakeCommandRunner) -> None:
    """Test a failing device listing."""
    runner.add("adb devices -l", "error: could not install *smartsocket* listener", returncode=1)
    reader = AdbBatteryReader(runner)
    with pytest.raises(CommandExecutionError) as error:
        reader.read_battery_level()
    assert "smartsocket" in str(error.value)
    assert error.value.command == "adb devices -l"


def test_read_battery_level_adb_missing() -> None:
    """Test that a missing adb executable is reported as command error."""
    reader = AdbBatteryReader(FakeCommandRunner())
    with pytest.raises(CommandExecutionError):
        reader.read_battery_level()


def test_read_battery_level_shell_fails(runner: FakeCommandRunner) -> None:
    """Test a failing battery command."""
    runner.add("adb -s R58M12ABCDE shell dumpsys battery", "error: device unauthorized.", returncode=1)
    reader = AdbBatteryReader(runner)
    with pytest.raises(CommandExecutionError, match="unauthorized"):
        reader.read_battery_level()


def test_read_battery_level_unparsable(runner: FakeCommandRunner) -> None:
    """Test battery output without a level."""
    runner.add("adb -s R58M12ABCDE shell dumpsys battery", "Can't find service: battery\n")
    reader = AdbBatteryReader(runner)
    with pytest.raises(ParseError):
        reader.read_battery_level()


def test_select_device_by_model_substring() -> None:
    """Test that the filter matches a model name which contains it."""
    devices = parse_devices(
        "List of devices attached\n"
        "4c1f2a7b device usb:1-2 product:pissarro model:2201117TYG device:pissarro transport_id:4\n",
    )
    assert select_device(devices, "2201117TY").serial == "4c1f2a7b"
    with pytest.raises(DeviceNotFoundError):
        select_device(devices, "4c1f")
