from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Audit service settings, read from AUDIT_-prefixed environment variables."""

    database_url: str = "sqlite:///audit.db"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
