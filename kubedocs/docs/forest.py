"""Forest construction pipeline.

    index -> build -> resolve refs -> resolve array items -> collapse -> identities

Each stage takes the previous stage's forest and returns a new one. All
per-snapshot state lives in a BuildContext owned by the caller, so forests
built for different clusters never share anything.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from kubedocs.docs.builder import TreeBuilder
from kubedocs.docs.collapse import collapse_forest
from kubedocs.docs.definitions import index_definitions
from kubedocs.docs.gvk import Docs
from kubedocs.docs.identity import IdentityAssigner
from kubedocs.docs.resolver import resolve_array_items, resolve_refs
from kubedocs.models.schema import Definition
from kubedocs.models.tree import TreeNode
from kubedocs.observability.logging import get_logger

_logger = get_logger("docs.forest")


@dataclass
class BuildContext:
    """State for building one snapshot's forest.

    ``visited_refs`` spans the whole first pass; ``ref_cache`` and
    ``items_cache`` hold the second and third passes' resolved trees.
    """

    definitions: dict[str, Definition] = field(default_factory=dict)
    visited_refs: set[str] = field(default_factory=set)
    ref_cache: dict[str, TreeNode] = field(default_factory=dict)
    items_cache: dict[str, TreeNode] = field(default_factory=dict)
    forest: list[TreeNode] = field(default_factory=list)


def build_forest(context: BuildContext) -> list[TreeNode]:
    """Run the five passes over ``context.definitions``."""
    t_start = time.monotonic()

    forest = TreeBuilder(context.definitions).build_forest(context.visited_refs)
    forest = resolve_refs(forest, context.ref_cache)
    forest = resolve_array_items(forest, context.items_cache)
    forest = collapse_forest(forest)
    forest = IdentityAssigner().assign_forest(forest)
    context.forest = forest

    duration_ms = (time.monotonic() - t_start) * 1000.0
    _logger.info(
        "forest_built",
        roots=len(forest),
        refs_expanded=len(context.visited_refs),
        duration_ms=round(duration_ms, 1),
    )
    return forest


def build_docs(
    document: str | bytes | Mapping[str, Any],
    context: BuildContext | None = None,
) -> Docs:
    """Index a discovery document and build its queryable forest.

    Raises:
        ParseError: if the document cannot be decoded.
    """
    context = context or BuildContext()
    context.definitions = index_definitions(document)
    return Docs(build_forest(context))
