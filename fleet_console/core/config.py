from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    FLEET_TIMEZONE: str = "UTC"

    STORE_PROVIDER: str = "memory"
    RECORD_STORE_BASE_URL: str = "http://localhost:5000/api"
    RECORD_STORE_TOKEN: str | None = None
    RECORD_STORE_TIMEOUT_SECONDS: float = 10.0

    COUNTDOWN_INTERVAL_SECONDS: float = 1.0

    @property
    def timezone(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.FLEET_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            return ZoneInfo("UTC")


settings = Settings()
