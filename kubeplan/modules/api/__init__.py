"""
API Module - Black Box Interface

Purpose: Shape of the Plan custom resource (desired and observed state)
Interface: Plan, PlanSpec, PlanStatus, Instruction, ExecutionResult
Hidden: Wire aliases, defaults, conversion from raw Kubernetes objects

Pure data, no behavior beyond defaults.
"""

from .models import (
    GROUP,
    KIND,
    PLURAL,
    SHORT_NAMES,
    SINGULAR,
    VERSION,
    ExecutionResult,
    Instruction,
    Plan,
    PlanMeta,
    PlanSpec,
    PlanStatus,
)

__all__ = [
    "GROUP",
    "KIND",
    "PLURAL",
    "SHORT_NAMES",
    "SINGULAR",
    "VERSION",
    "ExecutionResult",
    "Instruction",
    "Plan",
    "PlanMeta",
    "PlanSpec",
    "PlanStatus",
]
