"""
Storage Module - Black Box Interface

Purpose: Persist Plan status
Interface: patch_status(name, namespace, status)
Hidden: Kubernetes client, merge-patch encoding

Can be replaced with any store that supports field-level merges.
"""

from .status_store import KubernetesStatusStore, StatusStore

__all__ = ["KubernetesStatusStore", "StatusStore"]
