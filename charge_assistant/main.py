"""Main module for the charge assistant application."""

import logging
import signal
import sys
import threading
from contextlib import suppress
from logging.handlers import RotatingFileHandler
from typing import Final

from colorlog import ColoredFormatter

from charge_assistant.devices import BatteryReader, BatteryReadError, OnOffState, SwitchController
from charge_assistant.devices.adb import AdbBatteryReader
from charge_assistant.devices.command import SubprocessCommandRunner
from charge_assistant.devices.controller.charge_controller import ChargeController
from charge_assistant.devices.homeassistant import HomeAssistantError, Homeassistant
from charge_assistant.devices.sysfs import SysfsBatteryReader
from charge_assistant.notification import DesktopNotifier
from charge_assistant.settings import ConfigError, ControlConfig, Settings, load_settings

from .constants import ROOT_LOGGER_NAME

FORMAT_DATE: Final = "%Y-%m-%d"
FORMAT_TIME: Final = "%H:%M:%S"
FORMAT_DATETIME: Final = f"{FORMAT_DATE} {FORMAT_TIME}"
MAX_LOG_FILESIZE = 1000000 * 10  # 10 MB

LOGGER = logging.getLogger(ROOT_LOGGER_NAME)


class ChargeAssistant:
    """Charge Assistant Application."""

    def __init__(
        self,
        reader: BatteryReader,
        switch: SwitchController,
        config: ControlConfig,
        notifier: DesktopNotifier | None = None,
    ) -> None:
        """Create a ChargeAssistant instance."""
        self.reader = reader
        self.switch = switch
        self.config = config
        self.notifier = notifier
        self.controller = ChargeController(config.low_threshold, config.high_threshold)

    def run_once(self) -> OnOffState | None:
        """Read the battery level and switch the charger if a threshold is crossed."""
        LOGGER.info("Checking battery...")
        try:
            battery_level = self.reader.read_battery_level()
        except BatteryReadError as error:
            LOGGER.error("Failed to get the battery level: %s", error)
            return None
        LOGGER.info("Current battery level: %.1f%%", battery_level)

        new_state = self.controller.decide(battery_level)
        if new_state is None:
            LOGGER.info(
                "Battery level is %.1f%% (between %.0f%% and %.0f%%). No action needed.",
                battery_level,
                self.config.low_threshold,
                self.config.high_threshold,
            )
            return None

        if new_state == OnOffState.ON:
            LOGGER.info(
                "Battery level is below %.0f%% (%.1f%%), turning on the charger.",
                self.config.low_threshold,
                battery_level,
            )
        else:
            LOGGER.info(
                "Battery level is above %.0f%% (%.1f%%), turning off the charger.",
                self.config.high_threshold,
                battery_level,
            )
        try:
            self.switch.set_switch(new_state == OnOffState.ON)
        except HomeAssistantError as error:
            LOGGER.error("Failed to turn %s %s: %s", new_state, self.config.entity_id, error)
        else:
            LOGGER.info("Battery at %.1f%%, charger %s.", battery_level, new_state.upper())
            if self.notifier is not None:
                self.notifier.notify(f"Charger {new_state}", f"Battery at {battery_level:.0f}%, charger {new_state}.")
        return new_state

    def run(self, stop_event: threading.Event) -> None:
        """Check the battery periodically until the stop event is set."""
        while not stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                LOGGER.exception("error while checking the battery")
            LOGGER.debug("Waiting for %.0f seconds...", self.config.interval)
            stop_event.wait(self.config.interval)
        LOGGER.info("Charge Assistant stopped")


def create_battery_reader(settings: Settings) -> BatteryReader:
    """Create the battery reader based on the settings."""
    if settings.BATTERY_SOURCE == "sysfs":
        return SysfsBatteryReader(settings.SYSFS_BATTERY)
    return AdbBatteryReader(
        SubprocessCommandRunner(settings.COMMAND_TIMEOUT),
        adb_path=settings.ADB_PATH,
        device_filter=settings.ADB_DEVICE,
    )


def create_switch(settings: Settings) -> Homeassistant:
    """Create the Home Assistant switch based on the settings."""
    return Homeassistant(
        settings.HOMEASSISTANT_URL,
        settings.HOMEASSISTANT_TOKEN,
        entity_id=settings.ENTITY_ID,
        timeout=settings.REQUEST_TIMEOUT,
        demo_mode=settings.DEMO_MODE,
    )


def setup_logger(log_filename: str | None = None, level: str = "INFO") -> logging.Logger:
    """Initialize logger."""
    # define log formatter
    log_fmt = "%(asctime)s.%(msecs)03d %(levelname)s (%(threadName)s) [%(name)s] %(message)s"

    # base logging config for the root logger
    logging.basicConfig(level=logging.INFO)

    colorfmt = f"%(log_color)s{log_fmt}%(reset)s"
    logging.getLogger().handlers[0].setFormatter(
        ColoredFormatter(
            colorfmt,
            datefmt=FORMAT_DATETIME,
            reset=True,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red",
            },
        ),
    )

    # Capture warnings.warn(...) and friends messages in logs.
    logging.captureWarnings(True)

    logger = logging.getLogger()
    if log_filename:
        file_handler = RotatingFileHandler(log_filename, maxBytes=MAX_LOG_FILESIZE, backupCount=1)
        # rotate log at each start
        with suppress(OSError):
            file_handler.doRollover()
        file_handler.setFormatter(logging.Formatter(log_fmt, datefmt=FORMAT_DATETIME))
        logger.addHandler(file_handler)

    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)

    # silence some noisy loggers
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    sys.excepthook = lambda *args: logging.getLogger(None).exception(
        "Uncaught exception",
        exc_info=args,  # type: ignore[arg-type]
    )
    threading.excepthook = lambda args: logging.getLogger(None).exception(
        "Uncaught thread exception",
        exc_info=(  # type: ignore[arg-type]
            args.exc_type,
            args.exc_value,
            args.exc_traceback,
        ),
    )

    return logger


def install_signal_handlers(stop_event: threading.Event) -> None:
    """Stop the control loop on SIGINT and SIGTERM."""

    def handle_signal(signum: int, frame: object) -> None:
        LOGGER.info("Received signal %s, stopping", signal.Signals(signum).name)
        stop_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)


def main() -> None:
    """Start charge assistant."""
    try:
        settings = load_settings()
    except ConfigError as error:
        setup_logger()
        LOGGER.critical("Failed to load configuration: %s", error)
        sys.exit(1)

    setup_logger(settings.LOG_FILE, settings.LOG_LEVEL)
    LOGGER.info("Starting Charge Assistant for %s", settings.ENTITY_ID)
    if settings.DEMO_MODE:
        LOGGER.warning("Demo mode is enabled, the switch will not be changed")

    assistant = ChargeAssistant(
        create_battery_reader(settings),
        create_switch(settings),
        ControlConfig.from_settings(settings),
        DesktopNotifier() if settings.NOTIFICATIONS else None,
    )
    stop_event = threading.Event()
    install_signal_handlers(stop_event)
    assistant.run(stop_event)


if __name__ == "__main__":
    main()
