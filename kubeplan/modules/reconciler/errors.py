"""Reconciliation errors reported to the scheduler as cycle failures."""

from typing import Optional


class ReconcileError(Exception):
    """Base class for failures of a reconciliation cycle."""


class CommandExecError(ReconcileError):
    """The command could not be started."""

    def __init__(self, cause: Exception):
        self.cause = cause
        self.errno: Optional[int] = getattr(cause, "errno", None)
        super().__init__(f"Command execution error: {cause}")


class OutputDecodeError(ReconcileError):
    """Captured output is not valid UTF-8."""

    def __init__(self, stream: str, cause: UnicodeDecodeError):
        self.stream = stream
        self.cause = cause
        super().__init__(f"Output decode error ({stream}): {cause}")


class StatusPatchError(ReconcileError):
    """The status merge patch could not be applied."""

    def __init__(self, name: str, namespace: str, cause: Exception):
        self.name = name
        self.namespace = namespace
        self.cause = cause
        super().__init__(f"Status patch error for {namespace}/{name}: {cause}")
