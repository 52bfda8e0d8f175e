"""Run external commands with a timeout and a structured result."""

import logging
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from charge_assistant.constants import DEFAULT_COMMAND_TIMEOUT, ROOT_LOGGER_NAME

from . import CommandExecutionError

LOGGER = logging.getLogger(ROOT_LOGGER_NAME)


@dataclass(frozen=True)
class CommandResult:
    """The outcome of an external command."""

    args: tuple[str, ...]
    returncode: int
    output: str

    @property
    def command(self) -> str:
        """The command line as a single string."""
        return " ".join(self.args)

    @property
    def ok(self) -> bool:
        """True if the command exited with status 0."""
        return self.returncode == 0

    @property
    def empty(self) -> bool:
        """True if the command did not print anything."""
        return not self.output.strip()

    def check(self) -> "CommandResult":
        """Raise a CommandExecutionError if the command failed."""
        if not self.ok:
            raise CommandExecutionError(self.command, f"exit status {self.returncode}", self.output)
        return self


class CommandRunner(ABC):
    """Base class for running external commands."""

    @abstractmethod
    def run(self, args: Sequence[str]) -> CommandResult:
        """Run the command and return its result.

        Raises a CommandExecutionError if the command could not be launched
        or did not finish in time. A non zero exit status is reported in the
        result, not raised.
        """


class SubprocessCommandRunner(CommandRunner):
    """Run commands as child processes."""

    def __init__(self, timeout: float = DEFAULT_COMMAND_TIMEOUT) -> None:
        """Create a SubprocessCommandRunner instance."""
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        """Seconds to wait for a command to finish."""
        return self._timeout

    def run(self, args: Sequence[str]) -> CommandResult:
        """Run the command and capture stdout and stderr together."""
        command = " ".join(args)
        LOGGER.debug("Running command: %s", command)
        try:
            completed = subprocess.run(
                list(args),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as error:
            output = error.output if isinstance(error.output, str) else ""
            raise CommandExecutionError(command, f"timed out after {self._timeout:.0f} s", output) from error
        except OSError as error:
            raise CommandExecutionError(command, str(error)) from error
        return CommandResult(tuple(args), completed.returncode, completed.stdout or "")
