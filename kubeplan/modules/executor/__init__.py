"""
Executor Module - Black Box Interface

Purpose: Run a Plan's command and capture its outcome
Interface: CommandRunner.run(command, args) -> ProcessOutcome
Hidden: Process spawning, output capture

Can be replaced with different execution mechanisms (pods, jobs, remote agents).
"""

from .runner import CommandRunner, ProcessOutcome, SubprocessRunner

__all__ = ["CommandRunner", "ProcessOutcome", "SubprocessRunner"]
