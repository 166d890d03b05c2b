"""First pass: convert definitions into rooted trees.

A reference is expanded in place only the first time it is seen anywhere in
the forest being built; ``visited_refs`` is shared by every root of one build.
Every later occurrence is a ref-only leaf, which is what bounds recursion on
self-referential types. The resolver passes fill those leaves in afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping

from kubedocs.docs.gvk import parse_id
from kubedocs.models.schema import Definition, Property, trim_ref
from kubedocs.models.tree import TreeNode
from kubedocs.observability.logging import get_logger

_logger = get_logger("docs.builder")

MISSING_REF_DESCRIPTION = "Referenced definition not found"


def missing_ref_node(name: str) -> TreeNode:
    """Placeholder child for a ref whose target is not in the index."""
    return TreeNode(id=name, label=name, description=MISSING_REF_DESCRIPTION)


class TreeBuilder:
    """Builds the first-pass forest from a definition index."""

    def __init__(self, definitions: Mapping[str, Definition]) -> None:
        self._definitions = definitions

    def build_forest(self, visited_refs: set[str]) -> list[TreeNode]:
        """One root per definition, in index order."""
        return [self.build_root(definition, visited_refs) for definition in self._definitions.values()]

    def build_root(self, definition: Definition, visited_refs: set[str]) -> TreeNode:
        children = [self.build_property_node(prop, visited_refs) for prop in definition.properties]
        gvk = parse_id(definition.name)
        return TreeNode(
            id=definition.name,
            label=definition.name.split(".")[-1],
            description=definition.description,
            type=definition.type,
            children=children,
            group=gvk.group,
            version=gvk.version,
            kind=gvk.kind,
        )

    def build_property_node(self, prop: Property, visited_refs: set[str]) -> TreeNode:
        children: list[TreeNode] = []

        if prop.ref:
            if prop.ref in visited_refs:
                _logger.debug("ref_already_expanded", ref=prop.ref, property=prop.name)
            else:
                visited_refs.add(prop.ref)
                name = trim_ref(prop.ref)
                target = self._definitions.get(name)
                if target is not None:
                    children.append(self.build_root(target, visited_refs))
                else:
                    _logger.warning("ref_target_missing", ref=prop.ref, property=prop.name)
                    children.append(missing_ref_node(name))

        for nested in prop.properties:
            children.append(self.build_property_node(nested, visited_refs))

        return TreeNode(
            id=prop.name,
            label=prop.name,
            description=prop.description,
            type=prop.type,
            ref=prop.ref,
            enum=prop.enum,
            items=prop.items,
            children=children,
        )
