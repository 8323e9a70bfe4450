"""
Plan reconciler.

The state-transition function invoked once per observed change of a Plan
(or on a requeue). Given the Plan's instruction and recorded status it
decides whether to run the command, records the outcome, and tells the
scheduler whether to wait for the next change or to requeue.

States over (attempt, result.exitCode):

    Fresh (0, None) -> Executed (1, X)
    Executed, X == 0 -> Succeeded (terminal)
    Executed, X != 0, attempt <= retryTimes -> runs again on next trigger
    Executed, X != 0, attempt > retryTimes -> Exhausted (terminal)

retryTimes counts executions *after* the first one, so retryTimes=N allows
at most N + 1 executions and retryTimes=0 allows exactly one.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from kubeplan.config.provider import ControllerConfig
from kubeplan.modules.api.models import ExecutionResult, Instruction, Plan, PlanStatus
from kubeplan.modules.executor.runner import CommandRunner, ProcessOutcome

from .errors import CommandExecError, OutputDecodeError, ReconcileError

if TYPE_CHECKING:
    from kubeplan.modules.storage.status_store import StatusStore


@dataclass(frozen=True)
class Action:
    """Scheduling directive returned to the orchestrator."""

    requeue_after: Optional[float] = None

    @classmethod
    def await_change(cls) -> "Action":
        """Do nothing until the next external change."""
        return cls()

    @classmethod
    def requeue(cls, delay: float) -> "Action":
        """Reconcile again after `delay` seconds."""
        return cls(requeue_after=delay)

    @property
    def requeues(self) -> bool:
        return self.requeue_after is not None


@dataclass(frozen=True)
class Outcome:
    """Status after the cycle and the directive for the scheduler."""

    status: PlanStatus
    action: Action
    executed: bool = False


@dataclass(frozen=True)
class Context:
    """
    Shared, read-only handle passed to every cycle.

    Built once at startup; no cycle mutates it.
    """

    config: ControllerConfig
    store: "StatusStore"
    runner: CommandRunner
    logger: logging.Logger


ReconcileFn = Callable[[Plan, Context], Outcome]
ErrorPolicyFn = Callable[[Plan, ReconcileError, Context], Action]


def ceiling_reached(instruction: Instruction, status: PlanStatus) -> bool:
    """True once every permitted execution has been used."""
    if instruction.retry_times is None:
        return False
    return status.attempt > instruction.retry_times


def build_result(outcome: ProcessOutcome) -> ExecutionResult:
    """
    Build a fresh result from a process outcome.

    Raises:
        OutputDecodeError: If stdout or stderr is not valid UTF-8
    """
    if not outcome.spawned:
        return ExecutionResult(exit_code=outcome.errno, error=str(outcome.spawn_error))

    return ExecutionResult(
        exit_code=outcome.returncode,
        output=_decode("stdout", outcome.stdout),
        error=_decode("stderr", outcome.stderr),
    )


def _decode(stream: str, data: bytes) -> Optional[str]:
    if not data:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise OutputDecodeError(stream, e) from e


def reconcile(plan: Plan, ctx: Context) -> Outcome:
    """
    Run one reconciliation cycle for a Plan.

    Args:
        plan: The Plan as currently observed
        ctx: Shared controller context

    Returns:
        Outcome with the (possibly updated) status and the next action

    Raises:
        CommandExecError: The command could not be started (status is persisted first)
        OutputDecodeError: Output was not valid UTF-8 (nothing is persisted)
        StatusPatchError: The status could not be written
    """
    log = ctx.logger
    log.info(f"Reconciling plan {plan.key}")

    instruction = plan.spec.instruction
    status = plan.current_status()

    if status.succeeded:
        log.debug(f"Plan {plan.key} already succeeded, nothing to do")
        return Outcome(status=status, action=Action.await_change())

    # Checked before spawning, not after, so an exhausted Plan never runs again.
    if ceiling_reached(instruction, status):
        log.debug(
            f"Plan {plan.key} exhausted its retries "
            f"(attempt={status.attempt}, retryTimes={instruction.retry_times})"
        )
        return Outcome(status=status, action=Action.await_change())

    outcome = ctx.runner.run(instruction.command, instruction.args or [])

    status.attempt += 1
    status.result = build_result(outcome)

    log.info(f"Execution result for {plan.key}: {status.result!r}")

    ctx.store.patch_status(plan.name, plan.namespace, status)

    # Spawn failures are reported so the scheduler requeues them.
    if not outcome.spawned:
        raise CommandExecError(outcome.spawn_error)

    return Outcome(status=status, action=Action.await_change(), executed=True)


def error_policy(plan: Plan, error: ReconcileError, ctx: Context) -> Action:
    """Log a failed cycle and requeue after the configured fixed delay."""
    ctx.logger.error(f"Plan execution failed for {plan.key}: {error!r}")
    return Action.requeue(ctx.config.requeue_delay)
