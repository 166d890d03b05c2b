"""GVK parsing and the read-only query surface over a finished forest.

Name parsing is best-effort: ``io.k8s.api.apps.v1.Deployment`` splits on dots
into kind (last segment), version (second to last) and group (third to last),
with ``core`` normalized to the empty group. Group names that legitimately
contain dots (``events.k8s.io``) are only matched by their first segment, so
two groups sharing a first segment are indistinguishable here.
"""

from __future__ import annotations

from collections.abc import Iterator

from kubedocs.models.tree import GroupVersionKind, TreeNode
from kubedocs.observability.logging import get_logger

_logger = get_logger("docs.gvk")


def parse_id(name: str) -> GroupVersionKind:
    """Parse (group, version, kind) from a definition's fully-qualified name.

    Names with fewer than three dotted segments yield an empty triple.
    """
    parts = name.split(".")
    if len(parts) < 3:
        return GroupVersionKind()

    kind = parts[-1]
    version = parts[-2]
    group = parts[-3] if len(parts) > 3 else ""
    if group == "core":
        # Manifests omit "core"; the definition names spell it out.
        group = ""
    return GroupVersionKind(group=group, version=version, kind=kind)


def parse_api_version(api_version: str) -> tuple[str, str]:
    """Split a manifest ``apiVersion`` into (group, version).

    ``v1`` -> ("", "v1"); ``apps/v1`` -> ("apps", "v1");
    ``events.k8s.io/v1`` -> ("events", "v1").
    """
    if "/" not in api_version:
        return "", api_version
    parts = api_version.split("/")
    if len(parts) != 2:
        return "", ""
    group, version = parts
    return group.split(".")[0], version


class Docs:
    """The finished forest for one discovery snapshot.

    Read-only once constructed: lookups return the stored roots and never
    modify them, so one instance can serve concurrent readers.
    """

    def __init__(self, trees: list[TreeNode]) -> None:
        self._trees = list(trees)

    @property
    def trees(self) -> list[TreeNode]:
        return list(self._trees)

    def __len__(self) -> int:
        return len(self._trees)

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(self._trees)

    def fetch_by_label(self, label: str) -> TreeNode | None:
        """Return the first root whose label equals *label*, or None."""
        for tree in self._trees:
            if tree.label == label:
                return tree
        return None

    def fetch_by_gvk(self, api_version: str, kind: str) -> TreeNode | None:
        """Find the root for a manifest's ``apiVersion`` and ``kind``.

        Tiers, most specific first; the first root in forest order wins
        within a tier:

        1. group, version and kind all match;
        2. version and kind match;
        3. kind matches;
        4. label equals *kind*.

        Returns None when every tier misses.
        """
        if not kind:
            return None
        group, version = parse_api_version(api_version)

        tiers = (
            ("gvk", lambda t: t.group == group and t.version == version and t.kind == kind),
            ("vk", lambda t: t.version == version and t.kind == kind),
            ("k", lambda t: t.kind == kind),
        )
        for tier, matches in tiers:
            for tree in self._trees:
                if matches(tree):
                    _logger.debug(
                        "gvk_lookup_hit",
                        api_version=api_version,
                        kind=kind,
                        tier=tier,
                        id=tree.id,
                        parsed=str(tree.gvk),
                    )
                    return tree

        node = self.fetch_by_label(kind)
        if node is None:
            _logger.debug("gvk_lookup_miss", api_version=api_version, kind=kind)
        else:
            _logger.debug("gvk_lookup_hit", api_version=api_version, kind=kind, tier="label", id=node.id)
        return node

    def list_names(self) -> list[tuple[str, str, GroupVersionKind]]:
        """Log and return (id, label, parsed GVK) for every root, for diagnostics."""
        names = []
        for tree in self._trees:
            _logger.info(
                "tree_info",
                id=tree.id,
                label=tree.label,
                group=tree.group,
                version=tree.version,
                kind=tree.kind,
            )
            names.append((tree.id, tree.label, tree.gvk))
        return names

    def to_list(self) -> list[dict[str, object]]:
        return [tree.to_dict() for tree in self._trees]
