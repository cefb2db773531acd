"""Tests for the weather service (Open-Meteo mocked)."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from app.weather.service import WeatherService, WeatherUnavailable

LAT, LON = 41.88, -87.63

OPEN_METEO_PAYLOAD = {
    "latitude": LAT,
    "longitude": LON,
    "daily": {
        "time": ["2099-06-15", "2099-06-16"],
        "weather_code": [1, 61],
        "temperature_2m_max": [27.5, 22.0],
        "temperature_2m_min": [15.0, 14.2],
        "precipitation_sum": [0.0, 12.4],
        "relative_humidity_2m_mean": [55, 80],
        "wind_speed_10m_max": [12.0, 20.5],
    },
}


def _ok_response(payload=OPEN_METEO_PAYLOAD):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def service():
    return WeatherService(base_url="https://weather.test/v1", timeout=3)


def test_forecast_is_reshaped_per_day(db, service):
    with patch("app.weather.service.requests.get", return_value=_ok_response()) as mock_get:
        forecast = service.get_weather_forecast(db, LAT, LON, days=2)

    assert mock_get.call_args.args[0] == "https://weather.test/v1/forecast"
    assert mock_get.call_args.kwargs["params"]["forecast_days"] == 2
    assert mock_get.call_args.kwargs["timeout"] == 3
    assert [d["date"] for d in forecast["days"]] == ["2099-06-15", "2099-06-16"]
    assert forecast["days"][1]["precipitation_sum"] == 12.4
    assert forecast["is_offline_data"] is False


def test_offline_fallback_uses_saved_days(db, service):
    with patch("app.weather.service.requests.get", return_value=_ok_response()):
        service.get_weather_forecast(db, LAT, LON, days=2)

    with patch("app.weather.service.requests.get", side_effect=requests.ConnectionError("down")):
        forecast = service.get_weather_forecast(db, LAT, LON, days=2)

    assert forecast["is_offline_data"] is True
    assert [d["date"] for d in forecast["days"]] == ["2099-06-15", "2099-06-16"]
    assert forecast["days"][0]["temperature_2m_max"] == 27.5


def test_refetch_replaces_saved_days(db, service):
    from app.models import WeatherRecord

    with patch("app.weather.service.requests.get", return_value=_ok_response()):
        service.get_weather_forecast(db, LAT, LON, days=2)
        service.get_weather_forecast(db, LAT, LON, days=2)
    assert db.query(WeatherRecord).count() == 2


def test_unavailable_without_cache(db, service):
    with patch("app.weather.service.requests.get", side_effect=requests.Timeout("slow")):
        with pytest.raises(WeatherUnavailable):
            service.get_weather_forecast(db, LAT, LON)


def test_current_weather_is_first_day(db, service):
    with patch("app.weather.service.requests.get", return_value=_ok_response()):
        current = service.get_current_weather(db, LAT, LON)
    assert current["date"] == "2099-06-15"
    assert current["current"] is True


def test_weather_endpoint_returns_503_when_unavailable(client):
    with patch("app.weather.service.requests.get", side_effect=requests.ConnectionError("down")):
        response = client.get("/api/v1/weather/current", params={"lat": 1.0, "lon": 2.0})
    assert response.status_code == 503


def test_forecast_endpoint(client):
    with patch("app.weather.service.requests.get", return_value=_ok_response()):
        response = client.get("/api/v1/weather/forecast", params={"days": 2, "lat": LAT, "lon": LON})
    assert response.status_code == 200
    assert len(response.json()["days"]) == 2
