"""
Application Settings
Load from environment variables
"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # ======================
    # MoneyWave
    # ======================
    CONFIG_DIR: str = "config"
    ANNUAL_EBIT: Decimal = Decimal("1000000")

    # ======================
    # Scheduler
    # ======================
    SCHEDULER_ENABLED: bool = False
    SNAPSHOT_HOUR: int = 0
    SNAPSHOT_MINUTE: int = 0

    # ======================
    # Timezone
    # ======================
    TIMEZONE: str = "Asia/Seoul"

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )


settings = Settings()
