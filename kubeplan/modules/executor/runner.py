"""
Command runner for Plan instructions.

Spawns the instruction's command, waits for it to exit and captures raw
stdout/stderr bytes. Decoding is left to the caller so that invalid output
can be reported as its own failure.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Union

logger = logging.getLogger("kubeplan.executor")

SpawnError = Union[OSError, ValueError]


@dataclass(frozen=True)
class ProcessOutcome:
    """Result of running a command once."""

    returncode: Optional[int] = None
    stdout: bytes = b""
    stderr: bytes = b""
    spawn_error: Optional[SpawnError] = None

    @property
    def spawned(self) -> bool:
        return self.spawn_error is None

    @property
    def errno(self) -> Optional[int]:
        """OS error code of a spawn failure, if the OS reported one."""
        return getattr(self.spawn_error, "errno", None)


class CommandRunner(Protocol):
    """Protocol for command runners - allows swappable implementations."""

    def run(self, command: str, args: Sequence[str]) -> ProcessOutcome:
        """
        Run a command to completion.

        Args:
            command: Entrypoint to execute
            args: Arguments to the entrypoint

        Returns:
            ProcessOutcome with either the exit status or the spawn error
        """
        ...


class SubprocessRunner:
    """Runs commands with subprocess.run, without a shell and without a timeout."""

    def run(self, command: str, args: Sequence[str]) -> ProcessOutcome:
        cmd: List[str] = [command, *args]
        logger.debug(f"Running: {cmd}")

        try:
            process = subprocess.run(cmd, capture_output=True)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to spawn {command!r}: {e}")
            return ProcessOutcome(spawn_error=e)

        return ProcessOutcome(
            returncode=process.returncode,
            stdout=process.stdout or b"",
            stderr=process.stderr or b"",
        )
