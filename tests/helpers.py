"""Builders for discovery documents in the gnostic JSON rendering.

Shared by unit and integration tests so that fixtures read like the
documents a cluster actually returns.
"""

from __future__ import annotations

from typing import Any

from kubedocs.models.tree import TreeNode


def ref(name: str) -> str:
    return f"#/definitions/{name}"


def prop(
    name: str,
    *,
    type_: str = "",
    ref_to: str = "",
    items_ref: str = "",
    enum: list[str] | None = None,
    description: str = "",
    properties: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """One ``{name, value}`` property entry."""
    value: dict[str, Any] = {"properties": {"additional_properties": properties or []}}
    if description:
        value["description"] = description
    if type_:
        value["type"] = {"value": [type_]}
    if ref_to:
        value["_ref"] = ref(ref_to)
    if items_ref:
        value["items"] = {"schema": [{"_ref": ref(items_ref)}]}
    if enum:
        value["enum"] = [{"yaml": f"{e}\n"} for e in enum]
    return {"name": name, "value": value}


def definition(name: str, *props: dict[str, Any], description: str = "") -> dict[str, Any]:
    return {
        "name": name,
        "value": {
            "description": description or f"{name.split('.')[-1]} type.",
            "type": {"value": ["object"]},
            "properties": {"additional_properties": list(props)},
        },
    }


def document(*definitions: dict[str, Any]) -> dict[str, Any]:
    return {"swagger": "2.0", "definitions": {"additional_properties": list(definitions)}}


OBJECT_META = "io.k8s.apimachinery.pkg.apis.meta.v1.ObjectMeta"
CONTAINER = "io.k8s.api.core.v1.Container"
POD_SPEC = "io.k8s.api.core.v1.PodSpec"
POD = "io.k8s.api.core.v1.Pod"
POD_TEMPLATE_SPEC = "io.k8s.api.core.v1.PodTemplateSpec"
DEPLOYMENT = "io.k8s.api.apps.v1.Deployment"
DEPLOYMENT_SPEC = "io.k8s.api.apps.v1.DeploymentSpec"
NAMESPACE = "io.k8s.api.core.v1.Namespace"


def k8s_document() -> dict[str, Any]:
    """A small slice of a real cluster's definitions, shared refs included."""
    return document(
        definition(
            OBJECT_META,
            prop("name", type_="string"),
            prop("namespace", type_="string"),
            prop("labels", type_="object"),
        ),
        definition(
            CONTAINER,
            prop("name", type_="string"),
            prop("image", type_="string"),
        ),
        definition(
            POD_SPEC,
            prop("containers", type_="array", items_ref=CONTAINER),
            prop("restartPolicy", type_="string", enum=["Always", "OnFailure", "Never"]),
        ),
        definition(
            POD,
            prop("apiVersion", type_="string"),
            prop("kind", type_="string"),
            prop("metadata", ref_to=OBJECT_META),
            prop("spec", ref_to=POD_SPEC),
        ),
        definition(
            POD_TEMPLATE_SPEC,
            prop("metadata", ref_to=OBJECT_META),
            prop("spec", ref_to=POD_SPEC),
        ),
        definition(
            DEPLOYMENT_SPEC,
            prop("replicas", type_="integer"),
            prop("template", ref_to=POD_TEMPLATE_SPEC),
        ),
        definition(
            DEPLOYMENT,
            prop("metadata", ref_to=OBJECT_META),
            prop("spec", ref_to=DEPLOYMENT_SPEC),
        ),
        definition(
            NAMESPACE,
            prop("metadata", ref_to=OBJECT_META),
        ),
    )


def child(node: TreeNode, node_id: str) -> TreeNode:
    """The first child of *node* with the given id; fails the test if absent."""
    for c in node.children:
        if c.id == node_id:
            return c
    raise AssertionError(f"{node.id} has no child {node_id!r}; children={[c.id for c in node.children]}")


def child_ids(node: TreeNode) -> list[str]:
    return [c.id for c in node.children]


def all_nodes(forest: list[TreeNode]) -> list[TreeNode]:
    return [n for root in forest for n in root.walk()]


def shape(node: TreeNode) -> tuple[Any, ...]:
    """Structure of a tree with display values left out."""
    return (node.id, node.ref, node.type, tuple(shape(c) for c in node.children))
