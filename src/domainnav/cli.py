"""CLI interface for domainnav.

Serves the navigation API and inspects content from the command line.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from domainnav.config import Config
from domainnav.core.errors import UnresolvedPath
from domainnav.core.paths import parse_path, resolve_url
from domainnav.core.site import PageNode, PageTree
from domainnav.services.reader import ContentReader
from domainnav.store.json_file import JsonFileStore

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover domainnav.toml)",
)

data_file_option = click.option(
    "--data-file",
    "-d",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="JSON content file (overrides config)",
)

country_option = click.option(
    "--country",
    default=None,
    help="Viewer country code (default: from config)",
)


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
def cli(verbose: bool) -> None:
    """domainnav - hierarchical content addressing and navigation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@config_option
@data_file_option
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable data file reloading (overrides config, default: enabled)",
)
@click.option(
    "--default-country",
    default=None,
    help="Country for requests that name none (overrides config)",
)
def serve(
    config_path: Path | None,
    data_file: Path | None,
    host: str | None,
    port: int | None,
    live_reload: bool | None,
    default_country: str | None,
) -> None:
    """Start the navigation API server."""
    from domainnav.server import run_server

    try:
        config = _load_config(config_path).with_overrides(
            host=host,
            port=port,
            data_file=data_file,
            live_reload_enabled=live_reload,
            default_country=default_country,
        )
    except ValueError as e:
        _fail(str(e))

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Data file: {config.store.data_file}")
    click.echo(f"Default country: {config.countries.default}")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config)


@cli.command()
@click.argument("domain")
@country_option
@config_option
@data_file_option
def tree(
    domain: str,
    country: str | None,
    config_path: Path | None,
    data_file: Path | None,
) -> None:
    """Print the visible page tree of DOMAIN."""
    config, reader = _open_reader(config_path, data_file)
    viewer = (country or config.countries.default).upper()

    try:
        page_tree = asyncio.run(reader.load_tree(domain, viewer))
    except UnresolvedPath:
        _fail(f"Domain not found: {domain}")

    click.echo(f"{page_tree.domain.name} ({page_tree.domain.addressing_mode})")
    for node in page_tree.top_level():
        _echo_node(page_tree, node, 1)


def _echo_node(page_tree: PageTree, node: PageNode, level: int) -> None:
    indent = "  " * level
    click.echo(f"{indent}{node.page.title}  {resolve_url(page_tree.domain, node)}")
    for child in page_tree.children_of(node):
        _echo_node(page_tree, child, level + 1)


@cli.command()
@click.argument("path")
@country_option
@config_option
@data_file_option
def resolve(
    path: str,
    country: str | None,
    config_path: Path | None,
    data_file: Path | None,
) -> None:
    """Resolve an absolute PATH such as /domain/webdev/with-code."""
    config, reader = _open_reader(config_path, data_file)
    viewer = (country or config.countries.default).upper()

    try:
        parsed = parse_path(path)
        if parsed.domain_slug is None:
            raise UnresolvedPath(path)
        view = asyncio.run(reader.resolve_page(parsed.domain_slug, parsed.page_slugs, viewer))
    except UnresolvedPath:
        _fail(f"Path not found: {path}")

    node = view.node
    title = view.tree.domain.name if node is None or node.is_synthetic_root else node.page.title
    click.echo(f"Title: {title}")
    click.echo(f"URL: {view.url}")
    click.echo("Breadcrumbs: " + " > ".join(item.label for item in view.breadcrumbs.items))
    click.echo(f"Children: {len(view.children)}")


@cli.command()
@click.argument("domain", required=False)
@config_option
@data_file_option
def check(
    domain: str | None,
    config_path: Path | None,
    data_file: Path | None,
) -> None:
    """Report structural anomalies (cycles, orphans, URL collisions)."""
    _, reader = _open_reader(config_path, data_file)

    try:
        report = asyncio.run(reader.check(domain))
    except UnresolvedPath:
        _fail(f"Domain not found: {domain}")

    if not report:
        click.echo(click.style("No anomalies found.", fg="green"))
        return

    for slug, findings in report.items():
        click.echo(click.style(f"{slug}:", fg="yellow", bold=True))
        for kind, entries in findings.items():
            click.echo(f"  {kind}:")
            for entry in entries if isinstance(entries, list) else [entries]:
                click.echo(f"    - {entry}")
    sys.exit(1)


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _open_reader(
    config_path: Path | None, data_file: Path | None
) -> tuple[Config, ContentReader]:
    """Load config and open a reader over the JSON content file."""
    config = _load_config(config_path).with_overrides(data_file=data_file)
    try:
        store = JsonFileStore(config.store.data_file)
    except ValueError as e:
        _fail(str(e))
    reader = ContentReader(
        store,
        collapse_threshold=config.navigation.breadcrumb_collapse_threshold,
        fallback_title=config.navigation.fallback_section_title,
    )
    return config, reader


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
