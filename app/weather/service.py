import logging
import requests
from datetime import datetime
from typing import Dict, List, Any, Optional
from sqlalchemy.orm import Session

from config import config
from ..models import WeatherRecord

logger = logging.getLogger(__name__)


class WeatherUnavailable(Exception):
    """Raised when neither the provider nor the local cache has a forecast."""


class WeatherService:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        # Fallback to public URL if config is missing it
        self.base_url = base_url or getattr(config, "OPEN_METEO_BASE_URL", "https://api.open-meteo.com/v1")
        self.timeout = timeout or config.WEATHER_TIMEOUT

    def get_weather_forecast(self, db: Session, latitude: float, longitude: float, days: int = 5) -> Dict[str, Any]:
        """Fetch a daily forecast from Open-Meteo, saving it for offline use"""
        try:
            url = f"{self.base_url}/forecast"
            params = {
                "latitude": latitude,
                "longitude": longitude,
                "daily": ",".join(config.WEATHER_DAILY_PARAMS),
                "forecast_days": days,
                "timezone": "auto"
            }

            response = requests.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            forecast = self._process_weather_data(response.json())

            self.save_weather_data(db, forecast, latitude, longitude)
            return forecast

        except requests.RequestException as e:
            # If the provider is down, try to serve what we saved last time
            logger.warning("Online fetch failed: %s. Attempting offline fallback...", e)
            cached_data = self.get_last_saved_weather(db, latitude, longitude, days)
            if cached_data:
                return cached_data
            raise WeatherUnavailable(f"Weather data unavailable online and offline: {e}") from e

    def get_current_weather(self, db: Session, latitude: float, longitude: float) -> Dict[str, Any]:
        """Today's conditions are the first day of the forecast"""
        forecast = self.get_weather_forecast(db, latitude, longitude, days=1)
        if not forecast["days"]:
            raise WeatherUnavailable("Forecast contained no days")
        return {
            **forecast["days"][0],
            "current": True,
            "is_offline_data": forecast.get("is_offline_data", False),
        }

    def _process_weather_data(self, data: Dict) -> Dict[str, Any]:
        """Turn Open-Meteo's column arrays into one dict per day"""
        processed_data = {
            "latitude": data.get("latitude"),
            "longitude": data.get("longitude"),
            "days": [],
            "retrieved_at": datetime.utcnow().isoformat(),
            "is_offline_data": False,
        }

        daily = data.get("daily", {})
        for i, day in enumerate(daily.get("time", [])):
            daily_entry = {"date": day}
            for param in config.WEATHER_DAILY_PARAMS:
                values = daily.get(param, [])
                daily_entry[param] = values[i] if i < len(values) else None
            processed_data["days"].append(daily_entry)

        return processed_data

    def save_weather_data(self, db: Session, weather_data: Dict, location_lat: float, location_lon: float):
        """Replace the cached days for this location with a fresh forecast"""
        dates = [entry["date"] for entry in weather_data.get("days", [])]
        if not dates:
            return

        db.query(WeatherRecord).filter(
            WeatherRecord.location_lat == location_lat,
            WeatherRecord.location_lon == location_lon,
            WeatherRecord.date.in_(dates)
        ).delete(synchronize_session=False)

        for entry in weather_data["days"]:
            db.add(WeatherRecord(
                location_lat=location_lat,
                location_lon=location_lon,
                **{key: entry.get(key) for key in ["date", *config.WEATHER_DAILY_PARAMS]}
            ))
        db.commit()

    def get_last_saved_weather(self, db: Session, lat: float, lon: float, days: int = 5) -> Optional[Dict[str, Any]]:
        """Retrieve saved days for offline fallback, from today onwards if we have them"""
        query = db.query(WeatherRecord).filter(
            WeatherRecord.location_lat == lat,
            WeatherRecord.location_lon == lon
        )
        # Dates are stored as YYYY-MM-DD so text order is date order
        today = datetime.utcnow().date().isoformat()
        records: List[WeatherRecord] = query.filter(
            WeatherRecord.date >= today
        ).order_by(WeatherRecord.date).limit(days).all()

        if not records:
            records = query.order_by(WeatherRecord.date.desc()).limit(days).all()
            records.reverse()
        if not records:
            return None

        return {
            "latitude": lat,
            "longitude": lon,
            "days": [
                {key: getattr(r, key) for key in ["date", *config.WEATHER_DAILY_PARAMS]}
                for r in records
            ],
            "retrieved_at": max(r.retrieved_at for r in records).isoformat(),
            "is_offline_data": True
        }
