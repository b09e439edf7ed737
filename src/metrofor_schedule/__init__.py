"""Metrofor Schedule Package

Scrapes the next train times between two stations of the Fortaleza metro
from the Metrofor schedule site.
"""

__version__ = "0.1.0"

from .core.models import ScheduleInfo, Session, Station
from .core.scraper import MetroforScraper

__all__ = ["MetroforScraper", "ScheduleInfo", "Session", "Station"]
