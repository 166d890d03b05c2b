"""Per-cluster registry of built forests.

Every cluster gets its own forest, built with its own BuildContext. A refresh
builds the new forest completely before swapping it in, so readers see
either the old snapshot or the new one, never a partial build.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from kubedocs.discovery.client import ServerVersion
from kubedocs.docs import BuildContext, Docs, build_docs
from kubedocs.observability.logging import get_logger

_logger = get_logger("registry")


@dataclass(frozen=True)
class ClusterDocs:
    """One cluster's finished forest plus the server version it came from."""

    cluster_id: str
    docs: Docs
    server_version: ServerVersion | None = None


class DocsRegistry:
    """Holds the current ClusterDocs for each cluster id."""

    def __init__(self) -> None:
        self._clusters: dict[str, ClusterDocs] = {}

    def refresh(
        self,
        cluster_id: str,
        document: str | bytes | Mapping[str, Any],
        server_version: ServerVersion | None = None,
    ) -> ClusterDocs:
        """Build a forest for *document* and replace the cluster's snapshot.

        Raises:
            ParseError: if the document cannot be decoded; the previous
                snapshot for the cluster stays in place.
        """
        docs = build_docs(document, BuildContext())
        entry = ClusterDocs(cluster_id=cluster_id, docs=docs, server_version=server_version)
        self._clusters[cluster_id] = entry
        _logger.info("cluster_docs_refreshed", cluster_id=cluster_id, roots=len(docs))
        return entry

    def get(self, cluster_id: str) -> ClusterDocs | None:
        return self._clusters.get(cluster_id)

    def remove(self, cluster_id: str) -> None:
        self._clusters.pop(cluster_id, None)

    def cluster_ids(self) -> list[str]:
        return sorted(self._clusters)
