"""Schema-reference resolution and tree materialization.

Turns the flat OpenAPI v2 ``definitions`` of a Kubernetes discovery document
into one expanded, cycle-safe tree per API type and answers lookups by
(group, version, kind).

Submodules:
    definitions -- Discovery document -> name -> Definition index.
    builder     -- First pass: definitions -> trees, refs expanded once.
    resolver    -- Ref and array-item substitution with deep copies.
    collapse    -- Removes the wrapper level left by ref expansion.
    identity    -- Unique display values per node.
    gvk         -- Name parsing and the Docs query surface.
    forest      -- The pipeline and its per-snapshot BuildContext.
"""

from kubedocs.docs.definitions import ParseError, index_definitions
from kubedocs.docs.forest import BuildContext, build_docs, build_forest
from kubedocs.docs.gvk import Docs, parse_api_version, parse_id

__all__ = [
    "BuildContext",
    "Docs",
    "ParseError",
    "build_docs",
    "build_forest",
    "index_definitions",
    "parse_api_version",
    "parse_id",
]
