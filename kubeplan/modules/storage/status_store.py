"""
Status persistence for Plan objects.

The only write the controller makes against the API server: a JSON merge
patch on the status subresource, keyed by name and namespace.
"""

import logging
from typing import Any, Dict, Protocol

import urllib3
from kubernetes import client
from kubernetes.client.rest import ApiException

from kubeplan.modules.api.models import GROUP, PLURAL, VERSION, PlanStatus
from kubeplan.modules.reconciler.errors import StatusPatchError

logger = logging.getLogger("kubeplan.storage")


class StatusStore(Protocol):
    """Protocol for status stores."""

    def patch_status(self, name: str, namespace: str, status: PlanStatus) -> None:
        """
        Merge the status into the stored object.

        Raises:
            StatusPatchError: If the patch could not be applied
        """
        ...


class KubernetesStatusStore:
    """Writes Plan status through the Kubernetes custom objects API."""

    def __init__(
        self,
        api: client.CustomObjectsApi,
        group: str = GROUP,
        version: str = VERSION,
        plural: str = PLURAL,
    ):
        """
        Initialize status store.

        Args:
            api: Custom objects API client, shared across cycles
            group: API group of the custom resource
            version: API version of the custom resource
            plural: Plural resource name
        """
        self.api = api
        self.group = group
        self.version = version
        self.plural = plural

    @staticmethod
    def build_patch(status: PlanStatus) -> Dict[str, Any]:
        return {"status": status.to_patch()}

    def patch_status(self, name: str, namespace: str, status: PlanStatus) -> None:
        body = self.build_patch(status)
        logger.debug(f"Patching status of {namespace}/{name}: {body}")

        # A dict body is sent as application/merge-patch+json.
        try:
            self.api.patch_namespaced_custom_object_status(
                group=self.group,
                version=self.version,
                namespace=namespace,
                plural=self.plural,
                name=name,
                body=body,
            )
        except (ApiException, urllib3.exceptions.HTTPError) as e:
            raise StatusPatchError(name, namespace, e) from e
