"""Source-side schema data structures.

These mirror one entry of the discovery document's ``definitions``
collection after normalization. They are immutable: the definition index is
built once per snapshot and only read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass

REF_PREFIX = "#/definitions/"


def trim_ref(ref: str) -> str:
    """Return the definition name a ``#/definitions/<name>`` pointer targets."""
    if ref.startswith(REF_PREFIX):
        return ref[len(REF_PREFIX) :]
    return ref


def make_ref(name: str) -> str:
    return f"{REF_PREFIX}{name}"


@dataclass(frozen=True)
class ItemSchema:
    """One element schema of an array property."""

    ref: str = ""


@dataclass(frozen=True)
class ItemsDescriptor:
    """Element type descriptor of an array property."""

    schema: tuple[ItemSchema, ...] = ()

    @property
    def ref(self) -> str:
        """The element ``$ref``, or ``""`` when the first element schema has none."""
        if self.schema:
            return self.schema[0].ref
        return ""

    def to_dict(self) -> dict[str, object]:
        return {"schema": [{"_ref": s.ref} if s.ref else {} for s in self.schema]}


@dataclass(frozen=True)
class Property:
    """A named property of a definition or of an inline object."""

    name: str
    description: str = ""
    type: str = ""
    ref: str = ""
    enum: tuple[str, ...] = ()
    items: ItemsDescriptor | None = None
    properties: tuple[Property, ...] = ()


@dataclass(frozen=True)
class Definition:
    """One named type from the discovery document, e.g. ``io.k8s.api.core.v1.Pod``."""

    name: str
    description: str = ""
    type: str = ""
    properties: tuple[Property, ...] = ()
