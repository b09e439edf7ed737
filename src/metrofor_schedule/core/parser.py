"""HTML extraction for the Metrofor schedule pages.

Every function here takes raw HTML and returns a typed value, or ``None`` /
an empty list when the expected structure is missing. Nothing in this module
raises on malformed markup; markup changes upstream should only ever require
changes here.
"""

import logging
import re

from bs4 import BeautifulSoup, Tag

from ..utils.text import collapse_whitespace
from .models import STATION_SENTINEL_ID, ScheduleInfo, Station

logger = logging.getLogger(__name__)

CSRF_FIELD_NAME = "csrfmiddlewaretoken"
ORIGIN_SELECT_NAME = "estacao_origem"
INFO_REGION_CLASS = "alert-info"

ORIGIN_TIME_PHRASE = "Próximo horário estimado na estação origem"
ARRIVAL_TIME_PHRASE = "Horário estimado de chegada na estação destino"
DURATION_PHRASE = "O tempo estimado da viagem"
STOPS_PHRASE = "Paradas entre origem e destino"
NEXT_SCHEDULES_PHRASE = "Próximos horários"

TITLE_RE = re.compile(r"entre:\s*(.+?)\s+e\s+(.+?)$")
TIME_RE = re.compile(r"(\d{2}:\d{2})h")
DURATION_RE = re.compile(r"(\d+\s+minutos?)")
STOPS_RE = re.compile(r":\s*(\d+)")


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def extract_csrf_token(html: str) -> str | None:
    """Extract the Django anti-forgery token from a page.

    Args:
        html: Raw HTML of the site root

    Returns:
        The value of the ``csrfmiddlewaretoken`` input, or None if the field
        is missing or carries no string value
    """
    try:
        field = _soup(html).find("input", attrs={"name": CSRF_FIELD_NAME})
        if not isinstance(field, Tag):
            return None

        value = field.get("value")
        return value if isinstance(value, str) else None
    except Exception as e:
        logger.debug(f"CSRF token extraction failed: {e}")
        return None


def extract_stations(html: str) -> list[Station]:
    """Extract the station list from the origin station select control.

    Args:
        html: Raw HTML returned by the schedule form in station mode

    Returns:
        Stations in form order, without the sentinel option. Empty when the
        control is absent.
    """
    stations: list[Station] = []
    try:
        select = _soup(html).find("select", attrs={"name": ORIGIN_SELECT_NAME})
        if not isinstance(select, Tag):
            return stations

        seen: set[str] = set()
        for option in select.find_all("option"):
            value = option.get("value")
            station_id = value.strip() if isinstance(value, str) else ""
            name = collapse_whitespace(option.get_text())

            if not station_id or station_id == STATION_SENTINEL_ID or not name:
                continue
            if station_id in seen:
                continue

            seen.add(station_id)
            stations.append(Station(id=station_id, name=name))
    except Exception as e:
        logger.debug(f"Station extraction failed: {e}")
        return []

    return stations


def _paragraph_text(regions: list[Tag], phrase: str) -> str:
    """Text of the first paragraph in any info region that mentions the phrase."""
    for region in regions:
        for paragraph in region.find_all("p"):
            text = collapse_whitespace(paragraph.get_text())
            if phrase in text:
                return text
    return ""


def _first_time(text: str) -> str:
    match = TIME_RE.search(text)
    return match.group(1) if match else ""


def _extract_title(regions: list[Tag]) -> tuple[str, str]:
    """Extract origin and destination from "Viagem na LINHA SUL, entre: X e Y"."""
    for region in regions:
        for heading in region.find_all("h6"):
            match = TITLE_RE.search(collapse_whitespace(heading.get_text()))
            if match:
                return match.group(1).strip(), match.group(2).strip()
    return "", ""


def _extract_next_schedules(regions: list[Tag]) -> tuple[str, str]:
    text = _paragraph_text(regions, NEXT_SCHEDULES_PHRASE)
    times = TIME_RE.findall(text)
    first = times[0] if len(times) > 0 else ""
    second = times[1] if len(times) > 1 else ""
    return first, second


def extract_schedule(html: str) -> ScheduleInfo | None:
    """Extract trip schedule details from the schedule form response.

    Each field is extracted independently; only the origin departure and
    destination arrival times are required.

    Args:
        html: Raw HTML returned by the schedule form in schedule mode

    Returns:
        ScheduleInfo, or None when no info region is present or one of the
        two estimated times could not be found
    """
    try:
        # Notices share the info styling, so every info region is searched
        regions = _soup(html).find_all(class_=INFO_REGION_CLASS)
        if not regions:
            return None

        origin, destination = _extract_title(regions)

        origin_time = _first_time(_paragraph_text(regions, ORIGIN_TIME_PHRASE))
        arrival_time = _first_time(_paragraph_text(regions, ARRIVAL_TIME_PHRASE))

        duration_match = DURATION_RE.search(_paragraph_text(regions, DURATION_PHRASE))
        duration = duration_match.group(1) if duration_match else ""

        stops_match = STOPS_RE.search(_paragraph_text(regions, STOPS_PHRASE))
        number_of_stations = int(stops_match.group(1)) if stops_match else 0

        next_1, next_2 = _extract_next_schedules(regions)

        if not origin_time or not arrival_time:
            return None

        return ScheduleInfo(
            origin=origin,
            destination=destination,
            origin_estimated_time=origin_time,
            destination_arrival_time=arrival_time,
            estimated_trip_duration=duration,
            number_of_stations=number_of_stations,
            next_schedule_1=next_1,
            next_schedule_2=next_2,
        )
    except Exception as e:
        logger.debug(f"Schedule extraction failed: {e}")
        return None
