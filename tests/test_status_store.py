"""
Unit tests for the Kubernetes status store.
"""

from unittest.mock import MagicMock

import pytest
import urllib3
from kubernetes.client.rest import ApiException

from kubeplan.modules.api import ExecutionResult, PlanStatus
from kubeplan.modules.reconciler import StatusPatchError
from kubeplan.modules.storage import KubernetesStatusStore


@pytest.fixture
def custom_api():
    return MagicMock()


@pytest.fixture
def store(custom_api):
    return KubernetesStatusStore(custom_api)


def test_patch_status_sends_merge_body(store, custom_api):
    status = PlanStatus(attempt=1, result=ExecutionResult(exit_code=0, output="hi\n"))

    store.patch_status("backup", "jobs", status)

    custom_api.patch_namespaced_custom_object_status.assert_called_once_with(
        group="kube.rs",
        version="v1",
        namespace="jobs",
        plural="plans",
        name="backup",
        body={
            "status": {
                "attempt": 1,
                "result": {"exitCode": 0, "output": "hi\n", "error": None},
            }
        },
    )


def test_patch_body_is_a_dict(store):
    """A dict body makes the client send application/merge-patch+json."""
    body = store.build_patch(PlanStatus())
    assert isinstance(body, dict)
    assert body == {
        "status": {"attempt": 0, "result": {"exitCode": None, "output": None, "error": None}}
    }


def test_custom_resource_coordinates(custom_api):
    store = KubernetesStatusStore(custom_api, group="example.com", version="v2", plural="runs")

    store.patch_status("a", "b", PlanStatus())

    kwargs = custom_api.patch_namespaced_custom_object_status.call_args.kwargs
    assert (kwargs["group"], kwargs["version"], kwargs["plural"]) == ("example.com", "v2", "runs")


def test_api_error_is_wrapped(store, custom_api):
    error = ApiException(status=409, reason="Conflict")
    custom_api.patch_namespaced_custom_object_status.side_effect = error

    with pytest.raises(StatusPatchError) as exc_info:
        store.patch_status("backup", "jobs", PlanStatus())

    assert exc_info.value.cause is error
    assert exc_info.value.name == "backup"
    assert exc_info.value.namespace == "jobs"
    assert "jobs/backup" in str(exc_info.value)


def test_transport_error_is_wrapped(store, custom_api):
    custom_api.patch_namespaced_custom_object_status.side_effect = urllib3.exceptions.MaxRetryError(
        pool=None, url="/apis/kube.rs/v1"
    )

    with pytest.raises(StatusPatchError):
        store.patch_status("backup", "jobs", PlanStatus())


def test_unexpected_errors_propagate(store, custom_api):
    custom_api.patch_namespaced_custom_object_status.side_effect = TypeError("bug")

    with pytest.raises(TypeError):
        store.patch_status("backup", "jobs", PlanStatus())
