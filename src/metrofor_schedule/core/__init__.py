"""Core scraping, session and cache functionality."""

from .cache import SessionCache, get_session_cache, reset_session_cache
from .exceptions import (
    MetroforError,
    ParseError,
    StaleSessionError,
    TransportError,
    ValidationError,
)
from .models import CachedSession, ScheduleInfo, ScheduleRequest, Session, Station
from .parser import extract_csrf_token, extract_schedule, extract_stations
from .scraper import MetroforScraper

__all__ = [
    "CachedSession",
    "MetroforError",
    "MetroforScraper",
    "ParseError",
    "ScheduleInfo",
    "ScheduleRequest",
    "Session",
    "SessionCache",
    "StaleSessionError",
    "Station",
    "TransportError",
    "ValidationError",
    "extract_csrf_token",
    "extract_schedule",
    "extract_stations",
    "get_session_cache",
    "reset_session_cache",
]
