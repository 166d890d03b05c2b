"""Discovery collaborators: where the raw document comes from."""

from kubedocs.discovery.client import DiscoveryClient, DiscoveryError, ServerVersion, load_schema_file

__all__ = ["DiscoveryClient", "DiscoveryError", "ServerVersion", "load_schema_file"]
