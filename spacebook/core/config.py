from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    AVAILABILITY_SOURCE: str = "mock"  # "mock" or "http"
    AVAILABILITY_API_BASE_URL: str | None = None
    AVAILABILITY_API_KEY: str | None = None
    AVAILABILITY_HTTP_TIMEOUT_SECONDS: float = 10.0
    MOCK_LATENCY_MS: int = 500

    POLL_INTERVAL_MS: int = 10_000
    CHECK_TIMEOUT_SECONDS: float = 5.0
    MAX_ALTERNATIVES: int = 6

    OPERATING_OPEN: str = "00:00"
    OPERATING_CLOSE: str = "24:00"


settings = Settings()
