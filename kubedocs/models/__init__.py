"""Core data structures for kubedocs."""

from kubedocs.models.config import KubeDocsConfig
from kubedocs.models.schema import (
    REF_PREFIX,
    Definition,
    ItemSchema,
    ItemsDescriptor,
    Property,
    make_ref,
    trim_ref,
)
from kubedocs.models.tree import GroupVersionKind, TreeNode

__all__ = [
    "REF_PREFIX",
    "Definition",
    "GroupVersionKind",
    "ItemSchema",
    "ItemsDescriptor",
    "KubeDocsConfig",
    "Property",
    "TreeNode",
    "make_ref",
    "trim_ref",
]
