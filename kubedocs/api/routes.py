"""REST routes over the per-cluster forests.

Every route accepts an optional ``cluster`` query parameter and falls back to
the configured default cluster.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from kubedocs.api.schemas import (
    ErrorResponse,
    ForestResponse,
    HealthResponse,
    RootListResponse,
    RootSummary,
    TreeResponse,
)
from kubedocs.registry import ClusterDocs

router = APIRouter()


def _not_found(error: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=404, content=ErrorResponse(error=error, detail=detail).model_dump())


def _cluster(request: Request, cluster: str | None) -> tuple[str, ClusterDocs | None]:
    cluster_id = cluster or request.app.state.default_cluster
    return cluster_id, request.app.state.registry.get(cluster_id)


def _unknown_cluster(cluster_id: str) -> JSONResponse:
    return _not_found("CLUSTER_NOT_FOUND", f"No docs loaded for cluster '{cluster_id}'.")


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    from kubedocs import __version__

    return HealthResponse(version=__version__, clusters=request.app.state.registry.cluster_ids())


@router.get("/docs/roots", response_model=RootListResponse)
async def list_roots(request: Request, cluster: str | None = None) -> RootListResponse | JSONResponse:
    cluster_id, entry = _cluster(request, cluster)
    if entry is None:
        return _unknown_cluster(cluster_id)
    roots = [
        RootSummary(id=node_id, label=label, group=gvk.group, version=gvk.version, kind=gvk.kind)
        for node_id, label, gvk in entry.docs.list_names()
    ]
    return RootListResponse(cluster=cluster_id, count=len(roots), roots=roots)


@router.get("/docs/trees", response_model=ForestResponse)
async def list_trees(request: Request, cluster: str | None = None) -> ForestResponse | JSONResponse:
    cluster_id, entry = _cluster(request, cluster)
    if entry is None:
        return _unknown_cluster(cluster_id)
    return ForestResponse(cluster=cluster_id, trees=entry.docs.to_list())


@router.get("/docs/gvk", response_model=TreeResponse)
async def fetch_by_gvk(
    request: Request,
    api_version: str = Query(..., min_length=1, max_length=253),
    kind: str = Query(..., min_length=1, max_length=253),
    cluster: str | None = None,
) -> TreeResponse | JSONResponse:
    cluster_id, entry = _cluster(request, cluster)
    if entry is None:
        return _unknown_cluster(cluster_id)
    node = entry.docs.fetch_by_gvk(api_version, kind)
    if node is None:
        return _not_found("TYPE_NOT_FOUND", f"No definition for apiVersion={api_version} kind={kind}.")
    return TreeResponse(cluster=cluster_id, tree=node.to_dict())


@router.get("/docs/label/{label}", response_model=TreeResponse)
async def fetch_by_label(request: Request, label: str, cluster: str | None = None) -> TreeResponse | JSONResponse:
    cluster_id, entry = _cluster(request, cluster)
    if entry is None:
        return _unknown_cluster(cluster_id)
    node = entry.docs.fetch_by_label(label)
    if node is None:
        return _not_found("TYPE_NOT_FOUND", f"No definition labelled {label}.")
    return TreeResponse(cluster=cluster_id, tree=node.to_dict())
