"""CLI main entry point for the Metrofor schedule scraper."""

import sys

import click
from rich.console import Console

from .. import __version__
from ..config import get_settings
from ..core import (
    MetroforError,
    MetroforScraper,
    ParseError,
    TransportError,
    ValidationError,
)
from ..utils.log import setup_logging
from .formatters import (
    format_schedule_detailed,
    format_schedule_json,
    format_schedule_table,
    format_session,
    format_stations_json,
    format_stations_table,
)

console = Console()
error_console = Console(stderr=True)


def _fail(message: str) -> None:
    error_console.print(message)
    sys.exit(1)


def _handle_scrape_error(e: MetroforError) -> None:
    if isinstance(e, TransportError):
        _fail(f"[red]Metrofor site unavailable, try again later:[/red] {e}")
    elif isinstance(e, ParseError):
        _fail(f"[red]Could not read the Metrofor site, try again later:[/red] {e}")
    else:
        _fail(f"[red]Error:[/red] {e}")


@click.group()
@click.version_option(version=__version__)
@click.option("--timeout", "-t", type=float, help="Request timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, timeout: float | None, verbose: bool) -> None:
    """Metrofor Schedule - Next trains on the Fortaleza metro (Linha Sul)."""
    ctx.ensure_object(dict)
    ctx.obj["timeout"] = timeout
    setup_logging("DEBUG" if verbose else get_settings().log_level)


@cli.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.pass_context
def stations(ctx: click.Context, output_format: str) -> None:
    """List the stations of the line.

    Examples:
        metrofor stations
        metrofor stations --format json
    """
    try:
        with console.status("[bold green]Fetching stations..."):
            scraper = MetroforScraper(timeout=ctx.obj["timeout"])
            station_list = scraper.list_stations()
    except MetroforError as e:
        _handle_scrape_error(e)
        return

    if output_format == "json":
        click.echo(format_stations_json(station_list))
    else:
        format_stations_table(station_list)


@cli.command()
@click.argument("origin")
@click.argument("destination")
@click.option(
    "--datetime",
    "-d",
    "date_time",
    help="Trip date/time, passed to the site as given",
    type=str,
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json", "detailed"]),
    default="table",
    help="Output format",
)
@click.pass_context
def schedule(
    ctx: click.Context,
    origin: str,
    destination: str,
    date_time: str | None,
    output_format: str,
) -> None:
    """Show the next train between two stations.

    ORIGIN and DESTINATION may be station ids or names.

    Examples:
        metrofor schedule "Virgílio Távora" "Juscelino Kubitscheck"
        metrofor schedule 12 20 --format json
    """
    try:
        with console.status(
            f"[bold green]Searching trains from {origin} to {destination}..."
        ):
            scraper = MetroforScraper(timeout=ctx.obj["timeout"])

            origin_station = scraper.find_station(origin)
            if origin_station is None:
                _fail(f"[red]Unknown station:[/red] {origin}")
                return
            destination_station = scraper.find_station(destination)
            if destination_station is None:
                _fail(f"[red]Unknown station:[/red] {destination}")
                return

            info = scraper.get_schedule(
                origin_station.id, destination_station.id, date_time
            )
    except ValidationError as e:
        _fail(f"[red]Error:[/red] {e}")
        return
    except MetroforError as e:
        _handle_scrape_error(e)
        return

    if info is None:
        _fail(
            f"[yellow]No schedule information for "
            f"{origin_station.name} → {destination_station.name}[/yellow]"
        )
        return

    if output_format == "json":
        click.echo(format_schedule_json(info))
    elif output_format == "detailed":
        format_schedule_detailed(info)
    else:
        format_schedule_table(info)


@cli.command()
@click.option("--refresh", "-r", is_flag=True, help="Discard any cached session")
@click.pass_context
def session(ctx: click.Context, refresh: bool) -> None:
    """Show (or refresh) the upstream web session."""
    try:
        scraper = MetroforScraper(timeout=ctx.obj["timeout"])
        current = scraper.refresh_session() if refresh else scraper.ensure_session()
    except MetroforError as e:
        _handle_scrape_error(e)
        return

    format_session(current)


@cli.group()
def config() -> None:
    """Configuration management."""
    pass


@config.command("show")
def show_config() -> None:
    """Show current configuration."""
    settings = get_settings()
    console.print("[bold]Current Configuration:[/bold]")
    console.print(f"• Site: {settings.base_url}")
    console.print(f"• Line: {settings.line_pk}")
    console.print(f"• Timeout: {settings.timeout:g} seconds")
    console.print(f"• Session cache TTL: {settings.cache_ttl_seconds} seconds")
    console.print(
        f"• Honor cookie expiry: {'yes' if settings.honor_cookie_expiry else 'no'}"
    )
    console.print(f"• Log level: {settings.log_level}")


if __name__ == "__main__":
    cli()
