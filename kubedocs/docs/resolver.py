"""Second and third passes: substitute resolved copies for references.

Both passes run over a finished forest, never while it is being built.

``load_child`` handles properties that are themselves a ``$ref``: the
first-pass expansion (or the bare ref leaf left at later occurrences) is
replaced by a copy of the referenced type's resolved tree.
``load_array_items`` handles arrays whose element schema is a ``$ref``: the
array node's children become the element type's fields.

The resolved tree of a type expands every reference until a type repeats on
the path from the usage site; the repeat is left as a ref-only leaf, which
keeps self- and mutually-referential types finite. ``_in_progress`` holds the
types on the current path. A tree that needed no cut except on its own type
is cached per ref string, together with the names it references, and a cache
hit is used only where none of those names is on the current path. Trees cut
on an enclosing type belong to one usage and are never cached, so a type
resolves the same way whatever the document order. Every usage site receives
its own deep copy so that display identities assigned later never collide.
Handled nodes are marked, so running a pass again over its own output
changes nothing.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from kubedocs.docs.builder import missing_ref_node
from kubedocs.models.schema import make_ref, trim_ref
from kubedocs.models.tree import TreeNode
from kubedocs.observability.logging import get_logger

_logger = get_logger("docs.resolver")


class RefResolver:
    """Resolves references against the roots of one forest.

    Use one instance per pass: *cache* holds that pass's resolved trees keyed
    by ref string and is owned by the caller's build context.
    """

    def __init__(self, forest: list[TreeNode], cache: dict[str, TreeNode]) -> None:
        self._roots: dict[str, TreeNode] = {}
        for root in forest:
            self._roots.setdefault(root.id, root)
        self._cache = cache
        self._in_progress: set[str] = set()
        self._reach: dict[str, frozenset[str]] = {}
        # One frame per _fetch under way: names cut to leaves while it ran.
        self._cuts: list[set[str]] = []

    def fetch_by_ref(self, ref: str) -> TreeNode | None:
        """Private copy of the ref-resolved tree for *ref*, or None if no root matches."""
        return self._fetch(ref, self.load_child)

    def fetch_items_by_ref(self, ref: str) -> TreeNode | None:
        """Private copy of the array-resolved tree for *ref*, or None if no root matches."""
        return self._fetch(ref, self.load_array_items)

    def _fetch(self, ref: str, expand: Callable[[TreeNode], TreeNode]) -> TreeNode | None:
        resolved = self._cache.get(ref)
        if resolved is not None and self._in_progress.isdisjoint(self._reach_of(ref, resolved)):
            return resolved.deep_copy()

        name = trim_ref(ref)
        source = self._roots.get(name)
        if source is None:
            return None
        self._in_progress.add(name)
        self._cuts.append(set())
        try:
            resolved = expand(source.deep_copy())
        finally:
            self._in_progress.discard(name)
            cuts = self._cuts.pop()

        cuts.discard(name)
        if cuts:
            # Cut on an enclosing type; valid for this usage only.
            self._record_cuts(cuts)
            _logger.debug("ref_resolved_uncached", ref=ref, cut=sorted(cuts))
            return resolved
        self._cache[ref] = resolved
        self._reach[ref] = _referenced_names(resolved)
        _logger.debug("ref_resolved", ref=ref, cached=len(self._cache))
        return resolved.deep_copy()

    def _reach_of(self, ref: str, resolved: TreeNode) -> frozenset[str]:
        reach = self._reach.get(ref)
        if reach is None:
            reach = self._reach[ref] = _referenced_names(resolved)
        return reach

    def _record_cuts(self, names: set[str]) -> None:
        if self._cuts:
            self._cuts[-1].update(names)

    def load_child(self, node: TreeNode) -> TreeNode:
        """Return *node* with every pending ref below it replaced by its resolved tree."""
        if not _pending_ref(node):
            return replace(node, children=[self.load_child(c) for c in node.children])

        name = trim_ref(node.ref)
        rest = node.children[1:] if _has_expansion(node) else node.children
        tail = [self.load_child(c) for c in rest]
        if name in self._in_progress:
            _logger.debug("ref_cycle_cut", ref=node.ref, property=node.id)
            self._record_cuts({name})
            return replace(node, children=tail, ref_resolved=True)

        target = self.fetch_by_ref(node.ref)
        if target is None:
            _logger.debug("ref_unresolved", ref=node.ref, property=node.id)
            target = missing_ref_node(name)
        return replace(node, children=[target, *tail], ref_resolved=True)

    def load_array_items(self, node: TreeNode) -> TreeNode:
        """Return *node* with every array of ``$ref`` elements below it filled in.

        An array node's children are the element type's fields.
        """
        ref = node.items.ref if node.items is not None else ""
        if not ref or node.items_resolved:
            return replace(node, children=[self.load_array_items(c) for c in node.children])

        name = trim_ref(ref)
        if name in self._in_progress:
            _logger.debug("items_cycle_cut", ref=ref, property=node.id)
            self._record_cuts({name})
            return replace(
                node,
                children=[self.load_array_items(c) for c in node.children],
                items_resolved=True,
            )

        target = self.fetch_items_by_ref(ref)
        if target is None:
            _logger.debug("items_unresolved", ref=ref, property=node.id)
            return replace(node, children=[missing_ref_node(name)], items_resolved=True)
        return replace(node, children=target.children, items_resolved=True)

    def resolve_root(self, root: TreeNode, expand: Callable[[TreeNode], TreeNode]) -> TreeNode:
        """The root itself gets the same cached resolution as any usage of its type."""
        resolved = self._fetch(make_ref(root.id), expand)
        return resolved if resolved is not None else expand(root)


def _pending_ref(node: TreeNode) -> bool:
    return bool(node.ref) and not node.ref_resolved


def _has_expansion(node: TreeNode) -> bool:
    """Whether the first child is the first-pass expansion (or not-found placeholder).

    Inline nested properties follow it, or stand alone at later occurrences.
    """
    return bool(node.children) and node.children[0].id == trim_ref(node.ref)


def _referenced_names(tree: TreeNode) -> frozenset[str]:
    names: set[str] = set()
    for node in tree.walk():
        if node.ref:
            names.add(trim_ref(node.ref))
        if node.items is not None and node.items.ref:
            names.add(trim_ref(node.items.ref))
    return frozenset(names)


def resolve_refs(forest: list[TreeNode], cache: dict[str, TreeNode]) -> list[TreeNode]:
    """Second pass over a finished forest; returns a new forest."""
    resolver = RefResolver(forest, cache)
    return [resolver.resolve_root(root, resolver.load_child) for root in forest]


def resolve_array_items(forest: list[TreeNode], cache: dict[str, TreeNode]) -> list[TreeNode]:
    """Third pass over the second pass's output; returns a new forest."""
    resolver = RefResolver(forest, cache)
    return [resolver.resolve_root(root, resolver.load_array_items) for root in forest]
