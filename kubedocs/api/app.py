"""FastAPI application factory for kubedocs.

Usage::

    from kubedocs.api.app import create_app

    app = create_app(registry=registry, config=config)

Route handlers reach the registry and the default cluster id through
``app.state``; the bootstrap in ``kubedocs.app`` and the unit tests build the
app the same way.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from kubedocs.api.routes import router
from kubedocs.api.schemas import ErrorResponse
from kubedocs.registry import DocsRegistry

_log = structlog.get_logger(component="api.app")

_API_PREFIX = "/api/v1"
_DEFAULT_CLUSTER = "default"


def _error(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=error, detail=detail).model_dump())


async def _on_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first offending query parameter as ``name: message``."""
    problems = exc.errors()
    if not problems:
        return _error(400, "INVALID_QUERY", "")
    loc = problems[0].get("loc", ())
    param = str(loc[-1]) if loc else ""
    return _error(400, "INVALID_QUERY", f"{param}: {problems[0].get('msg', '')}")


async def _on_unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    _log.error(
        "unhandled_exception",
        path=str(request.url.path),
        method=request.method,
        error=str(exc),
    )
    return _error(500, "INTERNAL_ERROR", "An unexpected error occurred.")


def create_app(registry: DocsRegistry, config: Any = None) -> FastAPI:
    """Build the REST app serving *registry*.

    ``config`` is a KubeDocsConfig; its ``cluster_id`` becomes the cluster
    queried when a request names none.
    """
    from kubedocs import __version__

    app = FastAPI(
        title="kubedocs",
        summary="Kubernetes API type documentation trees",
        version=__version__,
        description=(
            "Serves the OpenAPI definitions of a Kubernetes cluster as fully "
            "expanded trees, one per API type, looked up by apiVersion and kind."
        ),
        docs_url=f"{_API_PREFIX}/swagger",
        redoc_url=f"{_API_PREFIX}/redoc",
        openapi_url=f"{_API_PREFIX}/openapi.json",
    )

    app.state.registry = registry
    app.state.config = config
    app.state.default_cluster = getattr(config, "cluster_id", "") or _DEFAULT_CLUSTER

    app.include_router(router, prefix=_API_PREFIX)
    app.add_exception_handler(RequestValidationError, _on_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _on_unhandled_error)

    return app
