"""Metrofor schedule scraper.

The upstream site is a Django form: visiting the root yields a CSRF token and
session cookies, and posting the form to ``/horarios`` returns either the
station list (when both station ids are ``"0"``) or the schedule for a trip.
"""

import logging
import threading
from concurrent.futures import Future
from datetime import datetime, timezone
from http import HTTPStatus
from http.cookiejar import DefaultCookiePolicy

import requests
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
)

from ..config import Settings, get_settings
from ..utils.text import normalize_for_search
from .cache import SessionCache, get_session_cache
from .exceptions import ParseError, StaleSessionError, TransportError, ValidationError
from .models import ScheduleInfo, ScheduleRequest, Session, Station
from .parser import extract_csrf_token, extract_schedule, extract_stations

logger = logging.getLogger(__name__)


def _set_cookie_headers(response: requests.Response) -> list[str]:
    raw_headers = getattr(response.raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "getlist"):
        return raw_headers.getlist("Set-Cookie")

    # Folded into one comma-joined value, only safe for a single cookie
    header = response.headers.get("Set-Cookie")
    return [header] if header else []


def cookies_from_response(response: requests.Response) -> tuple[str, datetime | None]:
    """Build a Cookie header value from the cookies a response sets.

    Pairs are taken straight from the ``Set-Cookie`` headers, in the order the
    server sent them, keeping only the name=value part of each. Cookies a jar
    would refuse (already expired, foreign domain) are replayed all the same.
    Expiry comes from the parsed jar; an expiry outside the platform's date
    range is ignored.

    Returns:
        Tuple of (cookie header value, earliest cookie expiry or None)
    """
    pairs = []
    for header in _set_cookie_headers(response):
        pair = header.split(";", 1)[0].strip()
        if pair:
            pairs.append(pair)

    expiries = []
    for cookie in response.cookies:
        if cookie.expires is None:
            continue
        try:
            expiries.append(datetime.fromtimestamp(cookie.expires, tz=timezone.utc))
        except (OverflowError, ValueError, OSError):
            logger.debug(f"Ignoring out-of-range expiry for cookie {cookie.name}")

    return "; ".join(pairs), min(expiries) if expiries else None


class MetroforScraper:
    """Scraper for the Metrofor schedule site."""

    def __init__(
        self,
        cache: SessionCache | None = None,
        settings: Settings | None = None,
        timeout: float | None = None,
    ):
        """Initialize the scraper.

        Args:
            cache: Session cache shared between scraper instances. Defaults to
                the process-wide cache.
            settings: Application settings. Defaults to the environment.
            timeout: Request timeout in seconds, overriding the settings
        """
        settings = settings or get_settings()
        self.base_url = settings.base_url
        self.schedule_url = settings.schedule_url
        self.line_pk = settings.line_pk
        self.timeout = timeout if timeout is not None else settings.timeout
        self.cache = cache if cache is not None else get_session_cache()

        self.http = requests.Session()
        self.http.headers.update(
            {
                "User-Agent": settings.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "pt-BR,pt;q=0.9,en;q=0.8",
            }
        )
        # Cookies travel only through the cached session's Cookie header
        self.http.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))

        self._bootstrap_lock = threading.Lock()
        self._inflight: Future[Session] | None = None

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "MetroforScraper":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def ensure_session(self) -> Session:
        """Return the cached session, or bootstrap a new one from the site root.

        Concurrent callers that find no cached session share a single
        bootstrap request. The result is not written to the cache.

        Returns:
            Session with CSRF token and cookies

        Raises:
            TransportError: If the site root cannot be fetched
            ParseError: If the token or cookies are missing
        """
        cached = self.cache.get()
        if cached is not None:
            return cached.session

        with self._bootstrap_lock:
            future = self._inflight
            is_owner = future is None
            if future is None:
                future = Future()
                self._inflight = future

        if not is_owner:
            logger.debug("Waiting for in-flight session bootstrap")
            return future.result()

        try:
            session = self._bootstrap_session()
        except BaseException as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(session)
            return session
        finally:
            with self._bootstrap_lock:
                self._inflight = None

    def refresh_session(self) -> Session:
        """Discard the cached session and store a freshly bootstrapped one."""
        self.cache.invalidate()
        session = self.ensure_session()
        self.cache.set(session)
        return session

    def list_stations(self) -> list[Station]:
        """List the stations of the line, in upstream form order.

        Returns:
            List of Station objects

        Raises:
            TransportError: If a request fails
            ParseError: If the session or station list cannot be extracted
        """
        cached = self.cache.get()
        if cached is not None and cached.stations:
            logger.debug(f"Using {len(cached.stations)} cached stations")
            return list(cached.stations)

        request = ScheduleRequest(line_pk=self.line_pk)
        session, html = self._submit_form(request, "list_stations")

        stations = extract_stations(html)
        if not stations:
            logger.warning(f"No stations in response ({len(html)} chars)")
            raise ParseError("list_stations", "no stations found")

        self.cache.set(session, stations)
        logger.info(f"Fetched {len(stations)} stations")
        return stations

    def get_schedule(
        self,
        origin_id: str,
        destination_id: str,
        date_time: str | None = None,
    ) -> ScheduleInfo | None:
        """Get the next departures between two stations.

        Args:
            origin_id: Upstream id of the origin station
            destination_id: Upstream id of the destination station
            date_time: Optional trip date/time, passed through verbatim

        Returns:
            ScheduleInfo, or None when the site has no information for the
            trip (typically an invalid station pair)

        Raises:
            ValidationError: If a station id is empty
            TransportError: If a request fails
            ParseError: If a session cannot be established
        """
        if not origin_id or not origin_id.strip():
            raise ValidationError("Origin station id cannot be empty")
        if not destination_id or not destination_id.strip():
            raise ValidationError("Destination station id cannot be empty")

        request = ScheduleRequest(
            origin_id=origin_id.strip(),
            destination_id=destination_id.strip(),
            date_time=date_time or None,
            line_pk=self.line_pk,
        )
        _, html = self._submit_form(request, "get_schedule")

        schedule = extract_schedule(html)
        if schedule is None:
            logger.info(f"No schedule information for {origin_id} → {destination_id}")
        return schedule

    def find_station(self, query: str) -> Station | None:
        """Find a station by id or by name, ignoring case and accents.

        Exact matches win over prefix matches, which win over substring matches.
        """
        query = query.strip()
        if not query:
            return None

        stations = self.list_stations()
        for station in stations:
            if station.id == query:
                return station

        needle = normalize_for_search(query)
        normalized = [(normalize_for_search(s.name), s) for s in stations]
        for matches in (
            lambda name: name == needle,
            lambda name: name.startswith(needle),
            lambda name: needle in name,
        ):
            for name, station in normalized:
                if matches(name):
                    return station
        return None

    def _bootstrap_session(self) -> Session:
        logger.info(f"Bootstrapping session from {self.base_url}")
        response = self._request("GET", self.base_url, "ensure_session")

        token = extract_csrf_token(response.text)
        if not token:
            raise ParseError("ensure_session", "CSRF token not found")

        cookies, expires_at = cookies_from_response(response)
        if not cookies:
            raise ParseError("ensure_session", "cookies not found")

        logger.debug(f"Session established (token {token[:6]}..., expires {expires_at})")
        return Session(csrf_token=token, cookies=cookies, cookie_expires_at=expires_at)

    @retry(
        retry=retry_if_exception_type(StaleSessionError),
        stop=stop_after_attempt(2),
        before_sleep=before_sleep_log(logger, logging.INFO),
        reraise=True,
    )
    def _submit_form(
        self, request: ScheduleRequest, operation: str
    ) -> tuple[Session, str]:
        """Post the schedule form with the current session.

        A 403 means the upstream rejected our CSRF token; the cached session
        is dropped and the submission retried once with a fresh one.

        Returns:
            Tuple of (session used, response HTML)
        """
        session = self.ensure_session()
        try:
            response = self._request(
                "POST",
                self.schedule_url,
                operation,
                data=request.to_form_data(session.csrf_token),
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                    "Referer": self.base_url,
                    "Cookie": session.cookies,
                },
            )
        except TransportError as e:
            if e.status_code == HTTPStatus.FORBIDDEN:
                logger.warning("Upstream rejected the session, invalidating cache")
                self.cache.invalidate()
                raise StaleSessionError(
                    operation, "session rejected by upstream", e.status_code
                ) from e
            raise

        return session, response.text

    def _request(
        self, method: str, url: str, operation: str, **kwargs: object
    ) -> requests.Response:
        """Perform an HTTP request, mapping every failure to TransportError."""
        try:
            response = self.http.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.error(f"{operation}: request to {url} timed out after {self.timeout}s")
            raise TransportError(operation, f"request timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"{operation}: request to {url} failed: {e}")
            raise TransportError(operation, f"request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"{operation}: {method} {url} returned {response.status_code}")
            raise TransportError(
                operation,
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        return response
