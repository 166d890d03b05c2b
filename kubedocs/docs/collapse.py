"""Fourth pass: drop the wrapper level that ref expansion introduces.

After resolution a ref property holds one child, the referenced type's root,
whose children are the actual fields. The wrapper is removed so the fields
sit directly under the property.
"""

from __future__ import annotations

from dataclasses import replace

from kubedocs.models.schema import trim_ref
from kubedocs.models.tree import TreeNode


def collapse(node: TreeNode) -> TreeNode:
    children = node.children
    if (
        node.ref
        and len(children) == 1
        and children[0].id == trim_ref(node.ref)
        and children[0].children
    ):
        children = children[0].children
    return replace(node, children=[collapse(c) for c in children])


def collapse_forest(forest: list[TreeNode]) -> list[TreeNode]:
    return [collapse(root) for root in forest]
