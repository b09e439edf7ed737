"""Unit tests for data models."""

import pytest
from pydantic import ValidationError

from metrofor_schedule.core.models import ScheduleInfo, ScheduleRequest, Session, Station


class TestStation:
    """Test Station model."""

    def test_station_creation(self):
        station = Station(id="20", name="VIRGÍLIO TÁVORA")
        assert station.id == "20"
        assert str(station) == "VIRGÍLIO TÁVORA"

    def test_sentinel_id_rejected(self):
        with pytest.raises(ValidationError):
            Station(id="0", name="Selecione")

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Station(id="  ", name="Alpha")

    def test_station_is_immutable(self):
        station = Station(id="20", name="VIRGÍLIO TÁVORA")
        with pytest.raises(ValidationError):
            station.name = "OTHER"


class TestSession:
    """Test Session model."""

    def test_equality_by_value(self):
        assert Session(csrf_token="t", cookies="a=1") == Session(csrf_token="t", cookies="a=1")
        assert Session(csrf_token="t", cookies="a=1") != Session(csrf_token="u", cookies="a=1")

    def test_empty_values_rejected(self):
        with pytest.raises(ValidationError):
            Session(csrf_token="", cookies="a=1")
        with pytest.raises(ValidationError):
            Session(csrf_token="t", cookies="")

    def test_cookie_names(self):
        session = Session(csrf_token="t", cookies="csrftoken=abc; sessionid=x=y")
        assert session.cookie_names() == ["csrftoken", "sessionid"]


class TestScheduleInfo:
    """Test ScheduleInfo model."""

    def test_summary(self):
        schedule = ScheduleInfo(
            origin="VIRGÍLIO TÁVORA",
            destination="JUSCELINO KUBITSCHECK",
            origin_estimated_time="23:01",
            destination_arrival_time="23:22",
            estimated_trip_duration="21 minutos",
            number_of_stations=8,
            next_schedule_1="23:31",
        )

        assert str(schedule) == "VIRGÍLIO TÁVORA → JUSCELINO KUBITSCHECK (23:01 → 23:22)"
        summary = schedule.summary()
        assert "Próximo trem: 23:01" in summary
        assert "Tempo de viagem: 21 minutos" in summary
        assert "Próximos horários: 23:31" in summary

    def test_negative_station_count_rejected(self):
        with pytest.raises(ValidationError):
            ScheduleInfo(
                origin_estimated_time="23:01",
                destination_arrival_time="23:22",
                number_of_stations=-1,
            )


class TestScheduleRequest:
    """Test ScheduleRequest model."""

    def test_station_mode_form(self):
        assert ScheduleRequest().to_form_data("tok") == {
            "csrfmiddlewaretoken": "tok",
            "pk": "1",
            "estacao_origem": "0",
            "estacao_destino": "0",
        }

    def test_date_time_only_when_given(self):
        request = ScheduleRequest(origin_id="20", destination_id="21")
        assert "dt_viagem" not in request.to_form_data("tok")

        request = ScheduleRequest(
            origin_id="20", destination_id="21", date_time="2025-03-10T08:00"
        )
        data = request.to_form_data("tok")
        assert data["dt_viagem"] == "2025-03-10T08:00"
        assert list(data)[-1] == "dt_viagem"
