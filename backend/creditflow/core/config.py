from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DEBUG: bool = False
    APP_NAME: str = "creditflow"
    version: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    REDIS_URL: str = "redis://localhost:6379"

    # Billing API
    BILLING_API_BASE_URL: str = "https://recruiting.api.bemmbo.com"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Currency
    DOLLAR_IN_CLP: int = 800  # CLP per USD

    # Failure policies
    CURRENCY_LOOKUP_FAIL_FAST: bool = False  # abort the run when a settings lookup fails
    SETTLEMENT_FAIL_FAST: bool = False  # stop submitting after the first failed payment

    # Worker schedule (minutes past the hour)
    SETTLEMENT_CRON_MINUTES: str = "0,30"

    @property
    def settlement_cron_minutes(self) -> set[int]:
        return {int(m) for m in self.SETTLEMENT_CRON_MINUTES.split(",") if m.strip()}


settings = Settings()
