"""Output formatters for CLI display."""

import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.models import ScheduleInfo, Session, Station

console = Console()


def format_stations_table(stations: list[Station]) -> None:
    """Display stations as a rich table."""
    if not stations:
        console.print("No stations found.")
        return

    table = Table(title="Estações", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")

    for station in stations:
        table.add_row(station.id, station.name)

    console.print(table)


def format_stations_json(stations: list[Station]) -> str:
    """Format stations as JSON."""
    return json.dumps(
        [station.model_dump() for station in stations], ensure_ascii=False, indent=2
    )


def format_schedule_table(schedule: ScheduleInfo) -> None:
    """Display a schedule as a rich table."""
    table = Table(
        title=f"Viagem: {schedule.origin} → {schedule.destination}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("Next departure", schedule.origin_estimated_time)
    table.add_row("Arrival", schedule.destination_arrival_time)
    table.add_row("Duration", schedule.estimated_trip_duration or "-")
    table.add_row("Stops", str(schedule.number_of_stations))
    table.add_row("Later departures", ", ".join(schedule.next_schedules()) or "-")

    console.print(table)


def format_schedule_detailed(schedule: ScheduleInfo) -> None:
    """Display a schedule with detailed information."""
    summary_text = f"""[bold]From:[/bold] {schedule.origin}
[bold]To:[/bold] {schedule.destination}
[bold]Next departure:[/bold] {schedule.origin_estimated_time}
[bold]Arrival:[/bold] {schedule.destination_arrival_time}
[bold]Duration:[/bold] {schedule.estimated_trip_duration or "-"}
[bold]Stops:[/bold] {schedule.number_of_stations}"""

    console.print(Panel(summary_text, title="Schedule", border_style="blue"))

    later = schedule.next_schedules()
    if later:
        console.print()
        console.print("[bold]Later departures:[/bold]")
        for departure in later:
            console.print(f"  • {departure}")


def format_schedule_json(schedule: ScheduleInfo) -> str:
    """Format a schedule as JSON."""
    return json.dumps(schedule.model_dump(), ensure_ascii=False, indent=2)


def format_session(session: Session) -> None:
    """Display session details without revealing the full token."""
    expires = (
        session.cookie_expires_at.isoformat() if session.cookie_expires_at else "session"
    )
    session_text = f"""[bold]CSRF token:[/bold] {session.csrf_token[:8]}…
[bold]Cookies:[/bold] {", ".join(session.cookie_names())}
[bold]Cookie expiry:[/bold] {expires}"""

    console.print(Panel(session_text, title="Session", border_style="green"))
