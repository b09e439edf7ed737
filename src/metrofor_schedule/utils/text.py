"""Portuguese text helpers for matching station names."""

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace (including non-breaking spaces) into one space."""
    return _WHITESPACE_RE.sub(" ", text.replace("\xa0", " ")).strip()


def strip_accents(text: str) -> str:
    """Remove diacritics, e.g. "VIRGÍLIO TÁVORA" -> "VIRGILIO TAVORA"."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_for_search(text: str) -> str:
    """Normalize a station name for accent and case insensitive comparison."""
    text = strip_accents(text).casefold()
    # "Estação" prefixes show up in user input but never in the upstream form
    text = re.sub(r"^esta[cç][aã]o\s+", "", text)
    text = re.sub(r"[\-–.,]", " ", text)
    return collapse_whitespace(text)
