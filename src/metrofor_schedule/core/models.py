"""Data models for the Metrofor schedule scraper."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

STATION_SENTINEL_ID = "0"


class Station(BaseModel):
    """Represents a station offered by the upstream schedule form."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Upstream station identifier")
    name: str = Field(..., description="Station display name")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        v = v.strip()
        if not v or v == STATION_SENTINEL_ID:
            raise ValueError(f"Invalid station id: {v!r}")
        return v

    def __str__(self) -> str:
        return self.name


class Session(BaseModel):
    """CSRF token and cookie header obtained by visiting the site root."""

    model_config = ConfigDict(frozen=True)

    csrf_token: str = Field(..., min_length=1, description="Anti-forgery token")
    cookies: str = Field(
        ..., min_length=1, description="Serialized Cookie header value"
    )
    cookie_expires_at: datetime | None = Field(
        None, description="Earliest expiry announced by the session cookies"
    )

    def cookie_names(self) -> list[str]:
        """Names of the cookies carried by this session."""
        return [
            pair.split("=", 1)[0].strip()
            for pair in self.cookies.split(";")
            if pair.strip()
        ]


class CachedSession(BaseModel):
    """A session plus the station list fetched with it."""

    model_config = ConfigDict(frozen=True)

    session: Session
    stations: list[Station] = Field(default_factory=list)
    timestamp: datetime = Field(..., description="When the entry was stored")

    @property
    def csrf_token(self) -> str:
        return self.session.csrf_token

    @property
    def cookies(self) -> str:
        return self.session.cookies


class ScheduleInfo(BaseModel):
    """Schedule details for a single trip, as computed by the upstream page."""

    model_config = ConfigDict(frozen=True)

    origin: str = Field("", description="Origin station name")
    destination: str = Field("", description="Destination station name")
    origin_estimated_time: str = Field(
        ..., description="Next estimated departure at the origin (HH:MM)"
    )
    destination_arrival_time: str = Field(
        ..., description="Estimated arrival at the destination (HH:MM)"
    )
    estimated_trip_duration: str = Field(
        "", description="Trip duration as shown upstream (e.g. '21 minutos')"
    )
    number_of_stations: int = Field(
        0, ge=0, description="Stops between origin and destination"
    )
    next_schedule_1: str = Field("", description="Following departure (HH:MM)")
    next_schedule_2: str = Field("", description="Second following departure (HH:MM)")

    def __str__(self) -> str:
        return (
            f"{self.origin} → {self.destination} "
            f"({self.origin_estimated_time} → {self.destination_arrival_time})"
        )

    def next_schedules(self) -> list[str]:
        """Later departures that were announced, in order."""
        return [t for t in (self.next_schedule_1, self.next_schedule_2) if t]

    def summary(self) -> str:
        """Get schedule summary."""
        lines = [
            f"{self.origin} → {self.destination}",
            f"Próximo trem: {self.origin_estimated_time}",
            f"Chegada prevista: {self.destination_arrival_time}",
        ]
        if self.estimated_trip_duration:
            lines.append(f"Tempo de viagem: {self.estimated_trip_duration}")
        lines.append(f"Paradas: {self.number_of_stations}")
        if self.next_schedules():
            lines.append(f"Próximos horários: {', '.join(self.next_schedules())}")
        return "\n".join(lines)


class ScheduleRequest(BaseModel):
    """Form submission against the schedule endpoint."""

    origin_id: str = Field(
        STATION_SENTINEL_ID, description="Origin station id ('0' lists stations)"
    )
    destination_id: str = Field(
        STATION_SENTINEL_ID, description="Destination station id ('0' lists stations)"
    )
    date_time: str | None = Field(None, description="Optional trip date/time")
    line_pk: str = Field("1", description="Upstream line identifier")

    def to_form_data(self, csrf_token: str) -> dict[str, str]:
        """Convert to the form fields expected by the schedule endpoint."""
        data = {
            "csrfmiddlewaretoken": csrf_token,
            "pk": self.line_pk,
            "estacao_origem": self.origin_id,
            "estacao_destino": self.destination_id,
        }
        if self.date_time:
            data["dt_viagem"] = self.date_time
        return data
