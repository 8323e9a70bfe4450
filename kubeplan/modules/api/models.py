"""
kubeplan resource models.

These models define the desired state (spec) and observed state (status)
of the Plan custom resource. Wire names are camelCase, Python attributes
are snake_case.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

GROUP = "kube.rs"
VERSION = "v1"
KIND = "Plan"
PLURAL = "plans"
SINGULAR = "plan"
SHORT_NAMES = ["pl"]

UINT32_MAX = 2**32 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class Instruction(BaseModel):
    """Command to execute on behalf of a Plan."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    retry_times: Optional[int] = Field(
        None,
        alias="retryTimes",
        description="Retry times for the command execution",
        ge=0,
        le=UINT32_MAX,
        json_schema_extra={"format": "uint32"},
    )
    command: str = Field(..., description="Command entrypoint.")
    args: Optional[List[str]] = Field(None, description="Arguments to the entrypoint.")


class ExecutionResult(BaseModel):
    """Outcome of the most recent execution attempt."""

    model_config = ConfigDict(populate_by_name=True)

    exit_code: Optional[int] = Field(
        None,
        alias="exitCode",
        description="Command exit code",
        ge=INT32_MIN,
        le=INT32_MAX,
        json_schema_extra={"format": "int32"},
    )
    output: Optional[str] = Field(None, description="Command stdout")
    error: Optional[str] = Field(None, description="Command stderr")


class PlanStatus(BaseModel):
    """The status object of `Plan`."""

    model_config = ConfigDict(populate_by_name=True)

    attempt: int = Field(
        0,
        description="Execution attempt",
        ge=0,
        le=UINT32_MAX,
        json_schema_extra={"format": "uint32"},
    )
    result: ExecutionResult = Field(
        default_factory=ExecutionResult, description="Result of command execution"
    )

    @property
    def succeeded(self) -> bool:
        return self.result.exit_code == 0

    def to_patch(self) -> Dict[str, Any]:
        """Serialize for a merge patch; unset fields become null and are removed."""
        return self.model_dump(by_alias=True, mode="json")


class PlanSpec(BaseModel):
    instruction: Instruction


class PlanMeta(BaseModel):
    name: str
    namespace: Optional[str] = None


class Plan(BaseModel):
    """A Plan object as observed from the API server."""

    metadata: PlanMeta
    spec: PlanSpec
    status: Optional[PlanStatus] = None

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace or ""

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.name}"

    def current_status(self) -> PlanStatus:
        """Return the recorded status, or the zero status if never set."""
        if self.status is None:
            return PlanStatus()
        return self.status.model_copy(deep=True)

    @classmethod
    def from_body(cls, body: Mapping) -> "Plan":
        """Create from a raw Kubernetes object (e.g. a kopf body)."""
        data = _plain(body)
        return cls.model_validate(
            {
                "metadata": data.get("metadata") or {},
                "spec": data.get("spec") or {},
                "status": data.get("status") or None,
            }
        )


def _plain(value: Any) -> Any:
    """Convert nested mappings and sequences into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
