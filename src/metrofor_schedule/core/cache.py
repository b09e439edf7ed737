"""Single-slot, time-bounded cache for the upstream web session."""

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from .models import CachedSession, Session, Station

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionCache:
    """Holds at most one CachedSession, dropping it once it expires.

    The upstream site hands out one CSRF token per browser-like session, so a
    single entry is shared by every caller of the scraper.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        honor_cookie_expiry: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the cache.

        Args:
            ttl_seconds: Maximum age of an entry in seconds
            honor_cookie_expiry: Also expire the entry when its cookies expire
            clock: Returns the current time as an aware datetime
        """
        self.ttl = timedelta(seconds=ttl_seconds)
        self.honor_cookie_expiry = honor_cookie_expiry
        self._clock = clock
        self._entry: CachedSession | None = None
        self._lock = threading.Lock()

    def _is_expired(self, entry: CachedSession, now: datetime) -> bool:
        if now - entry.timestamp >= self.ttl:
            return True

        expires_at = entry.session.cookie_expires_at
        return bool(self.honor_cookie_expiry and expires_at and expires_at <= now)

    def get(self) -> CachedSession | None:
        """Return the cached session, or None if absent or expired.

        An expired entry is cleared by the read.
        """
        with self._lock:
            entry = self._entry
            if entry is None:
                logger.debug("Session cache miss")
                return None

            if self._is_expired(entry, self._clock()):
                logger.info("Cached session expired, clearing")
                self._entry = None
                return None

            logger.debug("Session cache hit")
            return entry

    def set(
        self, session: Session, stations: list[Station] | None = None
    ) -> CachedSession:
        """Replace the cached entry, stamping it with the current time."""
        entry = CachedSession(
            session=session,
            stations=list(stations or []),
            timestamp=self._clock(),
        )
        with self._lock:
            self._entry = entry
        logger.debug(f"Session cached with {len(entry.stations)} stations")
        return entry

    def invalidate(self) -> None:
        """Drop the cached entry unconditionally."""
        with self._lock:
            self._entry = None
        logger.info("Session cache invalidated")


@lru_cache()
def get_session_cache() -> SessionCache:
    """Get the process-wide session cache, configured from settings."""
    from ..config import get_settings

    settings = get_settings()
    return SessionCache(
        ttl_seconds=settings.cache_ttl_seconds,
        honor_cookie_expiry=settings.honor_cookie_expiry,
    )


def reset_session_cache() -> None:
    """Forget the process-wide session cache (useful for testing)."""
    get_session_cache.cache_clear()
