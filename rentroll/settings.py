from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="RENTROLL_", extra="ignore")

    db_backend: str = "sqlite"
    db_path: str = "rentroll.db"
    db_url: str = ""

    storage_backend: str = "local"
    storage_local_path: str = "./invoices"
    storage_prefix: str = "invoices"

    log_level: str = "INFO"
    log_json: bool = False

    billing_period_count: int = 12
    notification_backend: str = "log"

    confirm_max_attempts: int = 3
    confirm_retry_backoff: float = 0.5  # seconds, multiplied by the attempt number


settings = Settings()
