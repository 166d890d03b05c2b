"""Tests for the REST API over a registry with a built forest."""

from __future__ import annotations

from fastapi.testclient import TestClient

from kubedocs.models.config import KubeDocsConfig
from kubedocs.registry import DocsRegistry
from tests.helpers import DEPLOYMENT, POD, k8s_document

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _registry() -> DocsRegistry:
    registry = DocsRegistry()
    registry.refresh("test-cluster", k8s_document())
    return registry


def _client(registry: DocsRegistry | None = None) -> TestClient:
    from kubedocs.api.app import create_app

    app = create_app(
        registry=registry or _registry(),
        config=KubeDocsConfig(cluster_id="test-cluster"),
    )
    return TestClient(app, raise_server_exceptions=False)


# ---------------------------------------------------------------------------
# /health
# ---------------------------------------------------------------------------


class TestHealth:
    def test_reports_loaded_clusters(self) -> None:
        response = _client().get("/api/v1/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["clusters"] == ["test-cluster"]


# ---------------------------------------------------------------------------
# /docs/roots and /docs/trees
# ---------------------------------------------------------------------------


class TestRoots:
    def test_lists_roots_with_gvk(self) -> None:
        body = _client().get("/api/v1/docs/roots").json()
        assert body["cluster"] == "test-cluster"
        assert body["count"] == 8
        deployment = next(r for r in body["roots"] if r["id"] == DEPLOYMENT)
        assert (deployment["group"], deployment["version"], deployment["kind"]) == ("apps", "v1", "Deployment")

    def test_unknown_cluster_is_404(self) -> None:
        response = _client().get("/api/v1/docs/roots", params={"cluster": "nope"})
        assert response.status_code == 404
        assert response.json()["error"] == "CLUSTER_NOT_FOUND"

    def test_trees_serializes_whole_forest(self) -> None:
        body = _client().get("/api/v1/docs/trees").json()
        assert len(body["trees"]) == 8
        assert "group" not in body["trees"][0]


# ---------------------------------------------------------------------------
# /docs/gvk and /docs/label
# ---------------------------------------------------------------------------


class TestLookup:
    def test_fetch_by_gvk(self) -> None:
        response = _client().get("/api/v1/docs/gvk", params={"api_version": "v1", "kind": "Pod"})
        assert response.status_code == 200
        tree = response.json()["tree"]
        assert tree["id"] == POD
        assert [c["id"] for c in tree["children"]] == ["apiVersion", "kind", "metadata", "spec"]

    def test_fetch_by_gvk_miss_is_404(self) -> None:
        response = _client().get("/api/v1/docs/gvk", params={"api_version": "v1", "kind": "Nope"})
        assert response.status_code == 404
        assert response.json() == {
            "error": "TYPE_NOT_FOUND",
            "detail": "No definition for apiVersion=v1 kind=Nope.",
        }

    def test_missing_query_parameter_is_400(self) -> None:
        response = _client().get("/api/v1/docs/gvk", params={"kind": "Pod"})
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_QUERY"

    def test_fetch_by_label(self) -> None:
        response = _client().get("/api/v1/docs/label/Deployment")
        assert response.status_code == 200
        assert response.json()["tree"]["id"] == DEPLOYMENT

    def test_fetch_by_label_miss_is_404(self) -> None:
        assert _client().get("/api/v1/docs/label/Nope").status_code == 404

    def test_explicit_cluster_parameter(self) -> None:
        registry = _registry()
        registry.refresh("other", {"definitions": {}})
        client = _client(registry)
        assert client.get("/api/v1/docs/label/Pod", params={"cluster": "other"}).status_code == 404
        assert client.get("/api/v1/docs/label/Pod").status_code == 200
