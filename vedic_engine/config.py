from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine and API settings (environment variables prefixed ``VEDIC_``)."""

    # Supported ephemeris range (inclusive, Gregorian years)
    MIN_YEAR: int = 1800
    MAX_YEAR: int = 2200

    # Altitude of the Sun's centre at rise/set: refraction + solar semi-diameter.
    # 0.0 gives the purely geometric H = acos(-tan(lat) * tan(dec)).
    SUNRISE_ALTITUDE_DEG: float = -0.8333

    # Fallback location used by the HTTP layer when a request omits coordinates (New Delhi)
    DEFAULT_LATITUDE: float = 28.6139
    DEFAULT_LONGITUDE: float = 77.2090

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(env_prefix="VEDIC_", env_file=".env", extra="ignore")


settings = Settings()
