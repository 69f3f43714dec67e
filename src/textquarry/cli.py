"""Command-line interface for textquarry."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional, TextIO

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from textquarry import __version__
from textquarry.config.config import Config, load_config
from textquarry.exceptions import AllStrategiesExhaustedError, InvalidUrlError
from textquarry.extractor.manager import ContentExtractor
from textquarry.extractor.models import ScrapedResult, SiteType
from textquarry.extractor.noise_filters import filter_for
from textquarry.observability.logging import configure_logging

console = Console()

SITE_TYPES = [site_type.value for site_type in SiteType]


def _load(ctx: click.Context) -> Config:
    config = load_config(ctx.obj["config_path"])
    config.monitoring.log_level = ctx.obj["log_level"]
    configure_logging(config.monitoring)
    return config


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True), help="Configuration file path")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: str) -> None:
    """textquarry - extract the readable content of web pages."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None
    ctx.obj["log_level"] = log_level


@cli.command()
@click.argument("url")
@click.option("--site-type", default="generic", type=click.Choice(SITE_TYPES), help="Noise filter to apply")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def extract(ctx: click.Context, url: str, site_type: str, as_json: bool) -> None:
    """Extract the main content of URL."""
    config = _load(ctx)

    async def run_extraction() -> ScrapedResult:
        async with ContentExtractor(config) as extractor:
            return await extractor.extract(url, SiteType(site_type))

    try:
        result = asyncio.run(run_extraction())
    except InvalidUrlError as e:
        console.print(Text(f"Invalid URL: {e}", style="red"))
        sys.exit(2)
    except AllStrategiesExhaustedError as e:
        console.print(Text(str(e), style="red"))
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    console.print(Panel(Text(result.content), title=Text(result.title), subtitle=result.image_url or None))


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--variant", default="generic", type=click.Choice(SITE_TYPES), help="Noise filter to apply")
def clean(source: TextIO, variant: str) -> None:
    """Run a noise filter over a markdown or text file ("-" for stdin)."""
    click.echo(filter_for(SiteType(variant)).clean(source.read()))


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Start the HTTP API."""
    from textquarry.web.main import run_web_server

    config = _load(ctx)
    host = host or config.web.host
    port = port or config.web.port
    console.print(f"[green]Starting textquarry API at http://{host}:{port}[/green]")
    run_web_server(config, host, port)


@cli.command()
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Validate the current configuration."""
    try:
        config = load_config(ctx.obj["config_path"])
    except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
        console.print(Text(f"Configuration validation failed: {e}", style="red"))
        sys.exit(1)

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("strategies", " -> ".join(config.strategies.order))
    table.add_row("fetch timeout", f"{config.fetch.timeout:g}s")
    table.add_row("render proxy key", "set" if config.strategies.render_proxy_api_key else "not set")
    table.add_row("transcript key", "set" if config.transcripts.api_key else "not set")
    table.add_row("min content length", str(config.extraction.min_content_length))
    console.print(table)
    console.print("[green]Configuration is valid![/green]")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
