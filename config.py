import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

class Config:
    # 1. Database
    DATABASE_URL = os.getenv(
        "DATABASE_URL",
        f"sqlite:///{os.path.join(BASE_DIR, 'farmtrack.db')}"
    )

    # 2. Open-Meteo Settings
    OPEN_METEO_BASE_URL = os.getenv("OPEN_METEO_BASE_URL", "https://api.open-meteo.com/v1")
    WEATHER_LATITUDE = float(os.getenv("WEATHER_LATITUDE", "41.88"))
    WEATHER_LONGITUDE = float(os.getenv("WEATHER_LONGITUDE", "-87.63"))
    WEATHER_TIMEOUT = int(os.getenv("WEATHER_TIMEOUT", "10"))

    # These match the columns in the WeatherRecord model
    WEATHER_DAILY_PARAMS = [
        "weather_code",
        "temperature_2m_max",
        "temperature_2m_min",
        "precipitation_sum",
        "relative_humidity_2m_mean",
        "wind_speed_10m_max",
    ]

    # 3. Dashboard / Export
    UPCOMING_PREVIEW_LIMIT = int(os.getenv("UPCOMING_PREVIEW_LIMIT", "3"))
    EXPORT_FILENAME_PREFIX = os.getenv("EXPORT_FILENAME_PREFIX", "farmtrack-finances")

    # 4. API Settings
    API_V1_PREFIX = "/api/v1"
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
        ).split(",")
        if origin.strip()
    ]
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

config = Config()
