"""Utility modules for metrofor-schedule."""

from .log import setup_logging
from .text import collapse_whitespace, normalize_for_search, strip_accents

__all__ = [
    "collapse_whitespace",
    "normalize_for_search",
    "setup_logging",
    "strip_accents",
]
