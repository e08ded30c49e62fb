"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from record_editor.domain.records import RecordConfiguration

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    records_base_url: str = "http://localhost:8080/api"
    records_timeout_seconds: float = 10.0
    record_name: str = "record"
    record_description: str = "Record"
    record_list_url: str = "/"
    new_record_id: int = 0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="RECORD_EDITOR_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def record_configuration(self) -> RecordConfiguration:
        """Return the record configuration described by these settings."""
        return RecordConfiguration(
            record_name=self.record_name,
            record_description=self.record_description,
            record_list_url=self.record_list_url,
        )
