from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Environment mode: dev or prod
    ENV: Literal["dev", "prod"] = "dev"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    SLACK_WEBHOOK_URL: str | None = None

    # Identity provider
    COINGECKO_BASE_URL: str = "https://api.coingecko.com"
    COINGECKO_API_KEY: str | None = None

    # Exchanges
    BINANCE_BASE_URL: str = "https://api.binance.com"
    BYBIT_BASE_URL: str = "https://api.bybit.com"
    MEXC_BASE_URL: str = "https://api.mexc.com"

    # Downstream services
    CATALOG_SERVICE_URL: str = "http://localhost:8001"
    KLINE_SERVICE_URL: str = "http://localhost:8002"

    # Remote calls
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # Spot coin cache
    SPOT_COINS_CACHE_TTL_SECONDS: int = 60 * 60  # 1 hour

    # Kline history update
    KLINE_UPDATE_INTERVAL: str = "1d"
    KLINE_LOOKBACK_DAYS: int = 30
    KLINE_LIMIT: int = 1000

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # ignore unrelated keys in local .env
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "prod"

    @property
    def is_development(self) -> bool:
        return self.ENV == "dev"

    @property
    def effective_log_level(self) -> str:
        """Return appropriate log level based on environment."""
        if self.is_production:
            # In production, minimum INFO level (ignore DEBUG)
            return self.LOG_LEVEL if self.LOG_LEVEL.upper() != "DEBUG" else "INFO"
        return self.LOG_LEVEL


settings = Settings()
