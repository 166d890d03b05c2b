"""Discovery document retrieval.

Fetches the raw OpenAPI v2 document and the server version from a cluster
through kubernetes-asyncio, or reads a previously saved document from disk.
Decoding and tree building happen elsewhere; this module only moves bytes.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kubedocs.observability.logging import get_logger

_logger = get_logger("discovery.client")

_OPENAPI_V2_PATH = "/openapi/v2"


class DiscoveryError(Exception):
    """Raised when the discovery document or server version cannot be obtained."""


@dataclass(frozen=True)
class ServerVersion:
    """Subset of the API server's ``/version`` payload."""

    major: str = ""
    minor: str = ""
    git_version: str = ""
    platform: str = ""


class DiscoveryClient:
    """Reads discovery data from one cluster.

    Args:
        api_client: A kubernetes_asyncio ``ApiClient`` already configured for
                    the target cluster.
        timeout:    Per-request timeout in seconds.
    """

    def __init__(self, api_client: Any, timeout: float = 30.0) -> None:
        self._api_client = api_client
        self._timeout = timeout

    async def fetch_openapi_schema(self) -> Any:
        """Return the decoded OpenAPI v2 document served at ``/openapi/v2``."""
        try:
            document = await asyncio.wait_for(
                self._api_client.call_api(
                    _OPENAPI_V2_PATH,
                    "GET",
                    header_params={"Accept": "application/json"},
                    auth_settings=["BearerToken"],
                    response_types_map={200: "object"},
                    _return_http_data_only=True,
                ),
                timeout=self._timeout,
            )
        except TimeoutError as exc:
            raise DiscoveryError(f"timed out after {self._timeout}s fetching {_OPENAPI_V2_PATH}") from exc
        except Exception as exc:
            raise DiscoveryError(f"failed to fetch {_OPENAPI_V2_PATH}: {exc}") from exc

        _logger.info("openapi_schema_fetched", path=_OPENAPI_V2_PATH)
        return document

    async def fetch_server_version(self) -> ServerVersion:
        """Return the API server's version information."""
        from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

        try:
            info = await asyncio.wait_for(
                k8s_client.VersionApi(self._api_client).get_code(),
                timeout=self._timeout,
            )
        except TimeoutError as exc:
            raise DiscoveryError(f"timed out after {self._timeout}s fetching server version") from exc
        except Exception as exc:
            raise DiscoveryError(f"failed to fetch server version: {exc}") from exc

        version = ServerVersion(
            major=str(getattr(info, "major", "") or ""),
            minor=str(getattr(info, "minor", "") or ""),
            git_version=str(getattr(info, "git_version", "") or ""),
            platform=str(getattr(info, "platform", "") or ""),
        )
        _logger.info("server_version_fetched", git_version=version.git_version)
        return version


def load_schema_file(path: str | Path) -> bytes:
    """Read a saved discovery document.

    Raises:
        DiscoveryError: if the file cannot be read.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise DiscoveryError(f"cannot read schema file {path}: {exc}") from exc
    _logger.info("schema_file_loaded", path=str(path), size=len(data))
    return data
