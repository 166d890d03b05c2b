"""Pydantic response models for the REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error envelope returned by every non-2xx response."""

    error: str
    detail: str = ""


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    clusters: list[str] = Field(default_factory=list)


class RootSummary(BaseModel):
    """One root of the forest with its parsed GVK, for diagnostics."""

    id: str
    label: str
    group: str = ""
    version: str = ""
    kind: str = ""


class RootListResponse(BaseModel):
    cluster: str
    count: int
    roots: list[RootSummary] = Field(default_factory=list)


class TreeResponse(BaseModel):
    cluster: str
    tree: dict[str, Any]


class ForestResponse(BaseModel):
    cluster: str
    trees: list[dict[str, Any]] = Field(default_factory=list)
