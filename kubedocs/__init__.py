"""kubedocs: Kubernetes OpenAPI definitions materialized as navigable trees."""

__version__ = "0.3.0"
