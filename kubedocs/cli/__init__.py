"""kubedocs command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``kubedocs`` script).
"""

from kubedocs.cli.main import cli

__all__ = ["cli"]
