"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from metrofor_schedule.config import Settings, reset_settings
from metrofor_schedule.core.cache import SessionCache, reset_session_cache

BASE_URL = "https://info.metrofor.ce.gov.br"
SCHEDULE_URL = f"{BASE_URL}/horarios"


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 3, 10, 22, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep tests independent of the developer's environment."""
    for name in ("METROFOR_BASE_URL", "METROFOR_TIMEOUT", "METROFOR_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    reset_session_cache()
    yield
    reset_settings()
    reset_session_cache()


@pytest.fixture
def settings():
    """Settings pointing at the real site root (mocked by responses)."""
    return Settings(base_url=BASE_URL, _env_file=None)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return SessionCache(ttl_seconds=3600, clock=clock)


@pytest.fixture
def root_html():
    """Sample site root with the CSRF form field."""
    return """
    <html><body>
      <form method="post" action="/horarios">
        <input type="hidden" name="csrfmiddlewaretoken" value="tok3nValue123">
        <input type="hidden" name="pk" value="1">
        <button type="submit">Consultar</button>
      </form>
    </body></html>
    """


@pytest.fixture
def stations_html():
    """Sample schedule form response in station mode."""
    return """
    <html><body>
      <form method="post" action="/horarios">
        <input type="hidden" name="csrfmiddlewaretoken" value="tok3nValue123">
        <select name="estacao_origem" class="form-control">
          <option value="0">Selecione a estação de origem</option>
          <option value="12">CARLITO BENEVIDES</option>
          <option value="13">JEREISSATI</option>
          <option value="20">VIRGÍLIO TÁVORA</option>
          <option value="21">JUSCELINO KUBITSCHECK</option>
        </select>
        <select name="estacao_destino" class="form-control">
          <option value="0">Selecione a estação de destino</option>
          <option value="12">CARLITO BENEVIDES</option>
        </select>
      </form>
    </body></html>
    """


@pytest.fixture
def schedule_html():
    """Sample schedule form response in schedule mode."""
    return """
    <html><body>
      <div class="alert alert-info" role="alert">
        <h6>Viagem na LINHA SUL, entre: VIRGÍLIO TÁVORA e JUSCELINO KUBITSCHECK</h6>
        <p>Próximo horário estimado na estação origem: 23:01h</p>
        <p>Horário estimado de chegada na estação destino: 23:22h</p>
        <p>O tempo estimado da viagem é de 21 minutos</p>
        <p>Paradas entre origem e destino: 8</p>
        <p>Próximos horários: 23:31h 00:01h </p>
      </div>
    </body></html>
    """


@pytest.fixture
def no_info_html():
    """Schedule form response without the info region."""
    return """
    <html><body>
      <div class="alert alert-warning">Selecione estações válidas.</div>
    </body></html>
    """
