"""Configuration dataclasses, populated by kubedocs.config.load_config()."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DiscoveryConfig:
    """Discovery document source configuration."""

    schema_file: str = ""  # read the document from disk instead of the cluster
    timeout_seconds: int = 30


@dataclass
class APIConfig:
    """Where the REST server listens."""

    port: int = 8080


@dataclass
class LogConfig:
    """Minimum level for structlog output."""

    level: str = "info"


@dataclass
class KubeDocsConfig:
    """Everything the service reads from the environment at startup."""

    cluster_id: str = "default"
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
