"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from cardtempo.domain.optimizer import OptimizerSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CARDTEMPO_",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./cardtempo.db"

    # Service
    service_name: str = "cardtempo"
    log_level: str = "INFO"

    # Optimizer
    default_target_utilization: float = 5.0  # percent
    optimization_days_before: int = 2
    over_limit_paydown_ratio: float = 0.9
    interest_free_threshold: float | None = None

    # Reminders
    default_reminder_days_before: int = 3

    def optimizer_settings(self) -> OptimizerSettings:
        """Domain optimizer constants built from configuration"""
        return OptimizerSettings(
            optimization_days_before=self.optimization_days_before,
            over_limit_paydown_ratio=self.over_limit_paydown_ratio,
            interest_free_threshold=self.interest_free_threshold,
        )


settings = Settings()
