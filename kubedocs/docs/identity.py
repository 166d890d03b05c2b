"""Fifth pass: give every node its own display value.

UI tree widgets key rows by ``value``. Copies made during resolution start
out identical to their source, so this pass must run after every copy has
been made.
"""

from __future__ import annotations

from dataclasses import replace
from uuid import uuid4

from kubedocs.models.tree import TreeNode


class IdentityAssigner:
    """Issues values that are unique across everything it has assigned."""

    def __init__(self) -> None:
        self._issued: set[str] = set()

    def new_value(self) -> str:
        value = uuid4().hex
        while value in self._issued:
            value = uuid4().hex
        self._issued.add(value)
        return value

    def assign_identities(self, node: TreeNode) -> TreeNode:
        return replace(
            node,
            value=self.new_value(),
            children=[self.assign_identities(c) for c in node.children],
        )

    def assign_forest(self, forest: list[TreeNode]) -> list[TreeNode]:
        return [self.assign_identities(root) for root in forest]
