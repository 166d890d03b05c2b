"""Shared fixtures for kubedocs integration tests.

Forests are built from the realistic slice of cluster definitions in
tests.helpers, so integration tests exercise the full pipeline without a
live API server.
"""

from __future__ import annotations

import pytest

from kubedocs.docs import BuildContext, Docs, build_docs
from kubedocs.registry import DocsRegistry
from tests.helpers import k8s_document

# ---------------------------------------------------------------------------
# Forest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def build_context() -> BuildContext:
    return BuildContext()


@pytest.fixture
def k8s_docs(build_context: BuildContext) -> Docs:
    """The finished forest for the shared cluster slice."""
    return build_docs(k8s_document(), build_context)


# ---------------------------------------------------------------------------
# Registry fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> DocsRegistry:
    return DocsRegistry()
