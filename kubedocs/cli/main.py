"""kubedocs command-line interface.

Works offline against a saved discovery document, e.g. the output of
``kubectl get --raw /openapi/v2 > openapi.json``.
"""

from __future__ import annotations

import json

import click

from kubedocs.discovery.client import DiscoveryError, load_schema_file
from kubedocs.docs import Docs, ParseError, build_docs
from kubedocs.observability.logging import setup_logging


def _load_docs(schema_file: str) -> Docs:
    try:
        return build_docs(load_schema_file(schema_file))
    except (DiscoveryError, ParseError) as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    show_default=True,
)
def cli(log_level: str) -> None:
    """Browse Kubernetes API definitions as expanded trees."""
    setup_logging(log_level, json_output=False)


@cli.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False))
def roots(schema_file: str) -> None:
    """List every root with its parsed group, version and kind."""
    docs = _load_docs(schema_file)
    for node in docs:
        gvk = f"{node.group or '-'}\t{node.version or '-'}\t{node.kind or '-'}"
        click.echo(f"{node.id}\t{gvk}")


@cli.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--api-version", required=True, help="Manifest apiVersion, e.g. apps/v1.")
@click.option("--kind", required=True, help="Manifest kind, e.g. Deployment.")
@click.option("--indent", default=2, show_default=True)
def lookup(schema_file: str, api_version: str, kind: str, indent: int) -> None:
    """Print the tree for one apiVersion/kind as JSON."""
    docs = _load_docs(schema_file)
    node = docs.fetch_by_gvk(api_version, kind)
    if node is None:
        raise click.ClickException(f"no definition for apiVersion={api_version} kind={kind}")
    click.echo(json.dumps(node.to_dict(), indent=indent))


@cli.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False))
def dump(schema_file: str) -> None:
    """Print the whole forest as JSON."""
    docs = _load_docs(schema_file)
    click.echo(json.dumps(docs.to_list()))


@cli.command()
def serve() -> None:
    """Run the REST server (configuration from KUBEDOCS_* variables)."""
    import asyncio

    from kubedocs.app import main

    asyncio.run(main())
