from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from ..database import get_db
from ..weather.service import WeatherService, WeatherUnavailable
from ..schemas import WeatherCurrentResponse, WeatherForecastResponse
from config import config

router = APIRouter()
weather_service = WeatherService()

@router.get("/weather/current", response_model=WeatherCurrentResponse)
def get_current_weather(
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lon: Optional[float] = Query(default=None, ge=-180, le=180),
    db: Session = Depends(get_db)
):
    """Today's conditions; falls back to saved data when Open-Meteo is unreachable"""
    try:
        return weather_service.get_current_weather(
            db,
            lat if lat is not None else config.WEATHER_LATITUDE,
            lon if lon is not None else config.WEATHER_LONGITUDE,
        )
    except WeatherUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

@router.get("/weather/forecast", response_model=WeatherForecastResponse)
def get_weather_forecast(
    days: int = Query(default=5, ge=1, le=16),  # Open-Meteo free tier limit
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lon: Optional[float] = Query(default=None, ge=-180, le=180),
    db: Session = Depends(get_db)
):
    try:
        return weather_service.get_weather_forecast(
            db,
            lat if lat is not None else config.WEATHER_LATITUDE,
            lon if lon is not None else config.WEATHER_LONGITUDE,
            days,
        )
    except WeatherUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
