"""
CRD Module - Black Box Interface

Purpose: Generate the Plan CustomResourceDefinition from the resource models
Interface: build_crd(), render_crd()
Hidden: JSON schema to structural schema conversion
"""

from .crdgen import build_crd, render_crd, schema_for, to_structural

__all__ = ["build_crd", "render_crd", "schema_for", "to_structural"]
