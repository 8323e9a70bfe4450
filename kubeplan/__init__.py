"""
kubeplan - Declarative command execution for Kubernetes

A Plan custom resource describes a command, its arguments and a retry
budget. The controller runs the command on the Plan's behalf and records
the exit code, stdout and stderr in the Plan's status.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- api: Plan resource models
- executor: Command execution
- storage: Status persistence
- reconciler: Reconciliation state machine and error policy
- controller: kopf handlers driving the reconciler
- crd: CustomResourceDefinition generation
"""

__version__ = "1.0.0"
