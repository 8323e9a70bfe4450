"""
Reconciler Module - Black Box Interface

Purpose: Decide, per Plan and per cycle, whether to run the command and what to record
Interface: reconcile(plan, ctx) -> Outcome, error_policy(plan, error, ctx) -> Action
Hidden: Retry ceiling, result population, failure classification

Any orchestration framework can drive it through these two functions.
"""

from .errors import CommandExecError, OutputDecodeError, ReconcileError, StatusPatchError
from .reconciler import (
    Action,
    Context,
    ErrorPolicyFn,
    Outcome,
    ReconcileFn,
    build_result,
    ceiling_reached,
    error_policy,
    reconcile,
)

__all__ = [
    "Action",
    "CommandExecError",
    "Context",
    "ErrorPolicyFn",
    "Outcome",
    "OutputDecodeError",
    "ReconcileError",
    "ReconcileFn",
    "StatusPatchError",
    "build_result",
    "ceiling_reached",
    "error_policy",
    "reconcile",
]
