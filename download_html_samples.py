#!/usr/bin/env python3
"""
HTML Download Script for Metrofor Parser Testing

Saves the pages the scraper parses (site root, station form and one trip
schedule) so that test fixtures can be refreshed when the upstream markup
changes.

Usage:
    python download_html_samples.py
    python download_html_samples.py --origin 20 --destination 21
    python download_html_samples.py --output html_samples --datetime "2025-03-10 08:00"
"""

import argparse
from pathlib import Path

from rich.console import Console

from metrofor_schedule.core import (
    MetroforScraper,
    ScheduleRequest,
    extract_csrf_token,
    extract_schedule,
    extract_stations,
)

console = Console()


def save(output_dir: Path, name: str, html: str) -> Path:
    path = output_dir / name
    path.write_text(html, encoding="utf-8")
    console.print(f"[green]Saved[/green] {path} ({len(html)} chars)")
    return path


def post_form(scraper: MetroforScraper, request: ScheduleRequest) -> str:
    session = scraper.ensure_session()
    response = scraper.http.post(
        scraper.schedule_url,
        data=request.to_form_data(session.csrf_token),
        headers={"Referer": scraper.base_url, "Cookie": session.cookies},
        timeout=scraper.timeout,
    )
    response.raise_for_status()
    return response.text


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[0])
    parser.add_argument("--output", type=Path, default=Path("html_samples"))
    parser.add_argument("--origin", help="Origin station id (default: first station)")
    parser.add_argument(
        "--destination", help="Destination station id (default: last station)"
    )
    parser.add_argument("--datetime", dest="date_time", help="Trip date/time")
    args = parser.parse_args()

    args.output.mkdir(parents=True, exist_ok=True)

    with MetroforScraper() as scraper:
        root = scraper.http.get(scraper.base_url, timeout=scraper.timeout)
        root.raise_for_status()
        save(args.output, "root.html", root.text)
        token = extract_csrf_token(root.text)
        console.print(f"CSRF token present: {'yes' if token else '[red]no[/red]'}")

        stations_html = post_form(scraper, ScheduleRequest(line_pk=scraper.line_pk))
        save(args.output, "stations.html", stations_html)
        stations = extract_stations(stations_html)
        console.print(f"Stations parsed: {len(stations)}")
        if not stations:
            console.print("[red]No stations parsed, skipping schedule sample[/red]")
            return

        request = ScheduleRequest(
            origin_id=args.origin or stations[0].id,
            destination_id=args.destination or stations[-1].id,
            date_time=args.date_time,
            line_pk=scraper.line_pk,
        )
        schedule_html = post_form(scraper, request)
        save(args.output, "schedule.html", schedule_html)

        schedule = extract_schedule(schedule_html)
        if schedule is None:
            console.print("[yellow]No schedule information parsed[/yellow]")
        else:
            console.print(schedule.summary())


if __name__ == "__main__":
    main()
