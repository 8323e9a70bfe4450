"""
kopf handlers for Plan objects.

kopf provides the watch stream, per-object serialization, worker threads
and retry backoff. These handlers translate between its callback contract
and the reconciler's reconcile/error_policy pair.
"""

from typing import Any

import kopf
from pydantic import ValidationError

from kubeplan.modules.api.models import GROUP, PLURAL, VERSION, Plan
from kubeplan.modules.reconciler import (
    Action,
    Context,
    ReconcileError,
    error_policy,
    reconcile,
)

ANNOTATION_PREFIX = GROUP

# Tracked in kopf's diff essence so each persisted attempt re-triggers reconcile_plan.
ATTEMPT_FIELD = "status.attempt"


def apply_action(plan: Plan, action: Action) -> None:
    """
    Hand a scheduling directive to kopf.

    Raises:
        kopf.TemporaryError: If the action asks for a requeue
    """
    if action.requeues:
        raise kopf.TemporaryError(
            f"Requeueing plan {plan.key} in {action.requeue_after}s",
            delay=action.requeue_after,
        )


def run_cycle(plan: Plan, ctx: Context) -> Action:
    """Run reconcile and route failures through the error policy."""
    try:
        return reconcile(plan, ctx).action
    except ReconcileError as e:
        return error_policy(plan, e, ctx)


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure the operator."""
    ctx: Context = memo.context

    # Keep kopf's bookkeeping out of the Plan status schema.
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage(
        prefix=ANNOTATION_PREFIX
    )
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage(
        prefix=ANNOTATION_PREFIX
    )
    settings.posting.enabled = False
    settings.execution.max_workers = ctx.config.max_workers

    ctx.logger.info(
        f"Operator configured (workers={ctx.config.max_workers}, "
        f"requeue={ctx.config.requeue_delay}s)"
    )


@kopf.on.create(GROUP, VERSION, PLURAL)
@kopf.on.update(GROUP, VERSION, PLURAL)
@kopf.on.resume(GROUP, VERSION, PLURAL)
def reconcile_plan(body: kopf.Body, memo: kopf.Memo, **_: Any) -> None:
    """Reconcile a Plan; synchronous so kopf runs it in its worker pool."""
    ctx: Context = memo.context

    try:
        plan = Plan.from_body(body)
    except ValidationError as e:
        # Malformed objects wait for the next edit.
        raise kopf.PermanentError(f"Invalid plan: {e}") from e

    apply_action(plan, run_cycle(plan, ctx))


@kopf.on.field(GROUP, VERSION, PLURAL, field=ATTEMPT_FIELD)
def track_attempt(old: Any, new: Any, body: kopf.Body, memo: kopf.Memo, **_: Any) -> None:
    """Log attempt transitions written by the reconciler."""
    ctx: Context = memo.context
    meta = body.get("metadata", {})
    ctx.logger.debug(
        f"Plan {meta.get('namespace', '')}/{meta.get('name')} attempt {old} -> {new}"
    )
