"""Output tree data structures."""

from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field

from kubedocs.models.schema import ItemsDescriptor


@dataclass(frozen=True)
class GroupVersionKind:
    """The (group, version, kind) triple identifying a Kubernetes API type."""

    group: str = ""
    version: str = ""
    kind: str = ""

    def __str__(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}, Kind={self.kind}"
        return f"{self.version}, Kind={self.kind}"


@dataclass
class TreeNode:
    """A node of the materialized forest, built from a definition or a property.

    ``id`` is the semantic key (fully-qualified name on roots, property name
    otherwise). ``value`` is the opaque display handle a UI tree keys rows by;
    it is reassigned on every build and unique within one forest.

    ``group``/``version``/``kind`` are best-effort query fields parsed from
    the root's name and are not part of the serialized output. The
    ``ref_resolved``/``items_resolved`` markers record that the resolver has
    already handled this node's reference.
    """

    id: str
    label: str
    value: str = ""
    description: str = ""
    type: str = ""
    ref: str = ""
    enum: tuple[str, ...] = ()
    items: ItemsDescriptor | None = None
    children: list[TreeNode] = field(default_factory=list)
    group: str = field(default="", repr=False)
    version: str = field(default="", repr=False)
    kind: str = field(default="", repr=False)
    ref_resolved: bool = field(default=False, repr=False, compare=False)
    items_resolved: bool = field(default=False, repr=False, compare=False)

    @property
    def gvk(self) -> GroupVersionKind:
        return GroupVersionKind(group=self.group, version=self.version, kind=self.kind)

    def deep_copy(self) -> TreeNode:
        """Return a copy that shares no node (and no children list) with this one."""
        return copy.deepcopy(self)

    def walk(self) -> Iterator[TreeNode]:
        """Yield this node and every descendant, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> dict[str, object]:
        """Serialize for the UI, omitting empty optional fields."""
        out: dict[str, object] = {"id": self.id, "label": self.label, "value": self.value}
        if self.description:
            out["description"] = self.description
        if self.type:
            out["type"] = self.type
        if self.ref:
            out["ref"] = self.ref
        if self.enum:
            out["enum"] = [{"yaml": e} for e in self.enum]
        if self.items is not None and self.items.schema:
            out["items"] = self.items.to_dict()
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out
