"""Process bootstrap for ``python -m kubedocs``.

Startup runs config -> logging -> discovery -> forest -> REST. Discovery
reads a saved document when ``KUBEDOCS_SCHEMA_FILE`` is set and otherwise
asks the API server, connecting with in-cluster credentials or the local
kubeconfig. Shutdown stops the REST server first, then closes the cluster
connection.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING

from kubedocs.config import load_config
from kubedocs.models.config import KubeDocsConfig
from kubedocs.observability.logging import get_logger, setup_logging
from kubedocs.registry import DocsRegistry

if TYPE_CHECKING:
    import structlog

    from kubedocs.discovery.client import ServerVersion

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """A component the service cannot run without failed to come up."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"{component} unavailable: {cause}")
        self.component = component
        self.cause = cause


class KubeDocsApp:
    """Owns the registry, the cluster connection and the REST server.

    ``stop()`` may be called at any point, including before ``start()`` and
    more than once.
    """

    def __init__(self) -> None:
        self.config: KubeDocsConfig | None = None
        self.registry = DocsRegistry()

        self._api_client: object | None = None
        self._rest_server: object | None = None
        self._rest_task: asyncio.Task[None] | None = None

        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    async def start(self) -> None:
        """Bring the service up; raises _ComponentError when it cannot serve."""
        self.config = load_config()
        setup_logging(self.config.log.level)
        self._log = get_logger("app")
        self._log.info("kubedocs starting", version=_kubedocs_version(), cluster_id=self.config.cluster_id)

        if self.config.discovery.schema_file:
            await self._load_from_file()
        else:
            await self._connect()
            await self._load_from_cluster()

        await self._serve()
        self._running = True

    async def wait(self, stop_requested: asyncio.Event) -> None:
        """Return once a stop is requested or the REST server exits on its own."""
        waiter = asyncio.create_task(stop_requested.wait(), name="stop-requested")
        pending: set[asyncio.Future[object]] = {waiter}
        if self._rest_task is not None:
            pending.add(self._rest_task)  # type: ignore[arg-type]
        try:
            await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def _connect(self) -> None:
        assert self._log is not None
        try:
            import kubernetes_asyncio.config as k8s_config  # type: ignore[import-untyped]
            from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

            try:
                k8s_config.load_incluster_config()
                source = "in-cluster service account"
            except k8s_config.ConfigException:
                await k8s_config.load_kube_config()
                source = "kubeconfig"
            self._api_client = k8s_client.ApiClient()
        except Exception as exc:
            raise _ComponentError("k8s_client", exc) from exc
        self._log.info("k8s client ready", credentials=source)

    async def _load_from_cluster(self) -> None:
        """Fetch ``/openapi/v2`` and build the configured cluster's forest."""
        assert self.config is not None and self._log is not None
        from kubedocs.discovery.client import DiscoveryClient, DiscoveryError
        from kubedocs.docs import ParseError

        discovery = DiscoveryClient(self._api_client, timeout=self.config.discovery.timeout_seconds)
        server_version: ServerVersion | None = None
        try:
            server_version = await discovery.fetch_server_version()
        except DiscoveryError as exc:
            self._log.warning("server version unavailable", error=str(exc))

        try:
            document = await discovery.fetch_openapi_schema()
            self.registry.refresh(self.config.cluster_id, document, server_version=server_version)
        except (DiscoveryError, ParseError) as exc:
            raise _ComponentError("discovery", exc) from exc

    async def _load_from_file(self) -> None:
        """Build the configured cluster's forest from ``KUBEDOCS_SCHEMA_FILE``."""
        assert self.config is not None
        from kubedocs.discovery.client import DiscoveryError, load_schema_file
        from kubedocs.docs import ParseError

        try:
            self.registry.refresh(self.config.cluster_id, load_schema_file(self.config.discovery.schema_file))
        except (DiscoveryError, ParseError) as exc:
            raise _ComponentError("discovery", exc) from exc

    # ------------------------------------------------------------------
    # REST
    # ------------------------------------------------------------------

    async def _serve(self) -> None:
        assert self.config is not None and self._log is not None
        try:
            import uvicorn  # type: ignore[import-untyped]

            from kubedocs.api import build_app

            server = uvicorn.Server(
                uvicorn.Config(
                    app=build_app(registry=self.registry, config=self.config),
                    host="0.0.0.0",
                    port=self.config.api.port,
                    log_config=None,
                    access_log=False,
                )
            )
            self._rest_task = asyncio.create_task(server.serve(), name="rest-server")
            self._rest_server = server
        except Exception as exc:
            raise _ComponentError("rest", exc) from exc
        self._log.info("rest api listening", port=self.config.api.port)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Stop serving, then release the cluster connection."""
        log = self._log or get_logger("app")
        was_running, self._running = self._running, False

        server, self._rest_server = self._rest_server, None
        task, self._rest_task = self._rest_task, None
        if server is not None:
            server.should_exit = True  # type: ignore[attr-defined]
        if task is not None and not task.done():
            try:
                await asyncio.wait_for(task, timeout=_SHUTDOWN_GRACE_SECONDS)
            except TimeoutError:
                log.warning("rest api did not stop in time", timeout=_SHUTDOWN_GRACE_SECONDS)
            except Exception as exc:
                log.debug("rest api exited with an error", error=repr(exc))

        api_client, self._api_client = self._api_client, None
        if api_client is not None:
            try:
                await api_client.close()  # type: ignore[attr-defined]
            except Exception as exc:
                log.debug("k8s client close failed", error=str(exc))

        if was_running:
            log.info("kubedocs stopped")


def _kubedocs_version() -> str:
    from kubedocs import __version__

    return __version__


async def main() -> None:
    """Run until SIGTERM/SIGINT, exiting non-zero when startup fails."""
    app = KubeDocsApp()
    stop_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, stop_requested.set)

    try:
        await app.start()
    except _ComponentError as exc:
        get_logger("app").critical("fatal startup error", component=exc.component, error=str(exc.cause))
        await app.stop()
        raise SystemExit(1) from exc

    try:
        await app.wait(stop_requested)
    finally:
        await app.stop()
