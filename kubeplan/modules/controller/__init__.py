"""
Controller Module - Black Box Interface

Purpose: Drive the reconciler from Kubernetes watch events
Interface: kopf handlers registered on import (configure, reconcile_plan, track_attempt)
Hidden: kopf settings, requeue translation, status change tracking

Can be replaced with any framework that calls reconcile/error_policy.
"""

from .handlers import (
    ATTEMPT_FIELD,
    apply_action,
    configure,
    reconcile_plan,
    run_cycle,
    track_attempt,
)

__all__ = [
    "ATTEMPT_FIELD",
    "apply_action",
    "configure",
    "reconcile_plan",
    "run_cycle",
    "track_attempt",
]
