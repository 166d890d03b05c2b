"""REST API layer for kubedocs.

Exposes:
    create_app -- FastAPI application factory.
    build_app  -- Alias for create_app (used by kubedocs.app bootstrap).
"""

from kubedocs.api.app import create_app

build_app = create_app

__all__ = ["build_app", "create_app"]
