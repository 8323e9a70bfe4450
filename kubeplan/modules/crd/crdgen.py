"""
CustomResourceDefinition generation for Plan.

Derives a structural openAPIV3Schema from the pydantic models so the CRD
and the models cannot drift apart. Kubernetes rejects `$ref` and
`anyOf`-with-null, so references are inlined and optional fields are
rendered with `nullable: true`.
"""

from typing import Any, Dict, Type

import yaml
from pydantic import BaseModel

from kubeplan.modules.api.models import (
    GROUP,
    KIND,
    PLURAL,
    SHORT_NAMES,
    SINGULAR,
    VERSION,
    PlanSpec,
    PlanStatus,
)


def _resolve_ref(ref: str, defs: Dict[str, Any]) -> Dict[str, Any]:
    name = ref.rsplit("/", 1)[-1]
    try:
        return defs[name]
    except KeyError:
        raise ValueError(f"Unresolvable schema reference: {ref}") from None


def to_structural(node: Any, defs: Dict[str, Any]) -> Any:
    """Rewrite a JSON schema node into a Kubernetes structural schema."""
    if isinstance(node, list):
        return [to_structural(item, defs) for item in node]
    if not isinstance(node, dict):
        return node

    node = dict(node)
    node.pop("$defs", None)

    if "$ref" in node:
        target = _resolve_ref(node.pop("$ref"), defs)
        return to_structural({**target, **node}, defs)

    if "allOf" in node and len(node["allOf"]) == 1:
        inner = node.pop("allOf")[0]
        return to_structural({**inner, **node}, defs)

    if "anyOf" in node:
        variants = node["anyOf"]
        present = [v for v in variants if v.get("type") != "null"]
        if len(present) == 1 and len(present) < len(variants):
            node.pop("anyOf")
            return to_structural({**present[0], **node, "nullable": True}, defs)

    node.pop("title", None)
    if node.get("default", ...) is None:
        node.pop("default")

    result: Dict[str, Any] = {}
    for key, value in node.items():
        if key == "properties":
            result[key] = {name: to_structural(prop, defs) for name, prop in value.items()}
        else:
            result[key] = to_structural(value, defs)
    return result


def schema_for(model: Type[BaseModel]) -> Dict[str, Any]:
    """Structural schema of a model, using wire (alias) names."""
    raw = model.model_json_schema(by_alias=True)
    return to_structural(raw, raw.get("$defs", {}))


def build_crd() -> Dict[str, Any]:
    """Build the CustomResourceDefinition for Plan."""
    status_schema = schema_for(PlanStatus)
    status_schema["nullable"] = True

    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": f"{PLURAL}.{GROUP}"},
        "spec": {
            "group": GROUP,
            "names": {
                "categories": [],
                "kind": KIND,
                "plural": PLURAL,
                "shortNames": list(SHORT_NAMES),
                "singular": SINGULAR,
            },
            "scope": "Namespaced",
            "versions": [
                {
                    "name": VERSION,
                    "served": True,
                    "storage": True,
                    "schema": {
                        "openAPIV3Schema": {
                            "description": f"Auto-generated derived type for {KIND}",
                            "properties": {
                                "spec": schema_for(PlanSpec),
                                "status": status_schema,
                            },
                            "required": ["spec"],
                            "type": "object",
                        }
                    },
                    "subresources": {"status": {}},
                }
            ],
        },
    }


def render_crd() -> str:
    """Render the CRD as a YAML document."""
    return yaml.safe_dump(build_crd(), sort_keys=False)
