"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="HOUSEHOLD_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service
    service_name: str = "household-ledger"
    log_level: str = "INFO"

    # Dashboard defaults
    carry_over_enabled: bool = True
    default_performance_start_day: int = 1
    unassigned_method_label: str = "Cash/Other"

    # Transaction listing
    transaction_page_size: int = 50


settings = Settings()
