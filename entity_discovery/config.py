"""
Configuration management for the entity discovery pipeline.

Uses pydantic-settings for type-safe configuration with environment variable support.
Per-run options (the JSONPath rules and the target index) come from the command
line and are held in RunOptions.
"""

from functools import lru_cache
from pathlib import Path
from typing import ClassVar, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from entity_discovery import EntityDiscoveryError


DEFAULT_URI = "http://localhost:9200/"


class ConfigurationError(EntityDiscoveryError):
    """Raised when required run options are missing or invalid."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


class LookupSettings(BaseSettings):
    """OpenSearch connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="OPENSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    uri: str = DEFAULT_URI
    request_timeout: float = 60.0  # seconds
    max_retries: int = 10
    retry_delay: float = 1.0  # seconds
    verify_certs: bool = False


class PipelineSettings(BaseSettings):
    """Pipeline settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    log_rotation: str = "10 MB"
    log_retention: str = "1 week"


class Settings(BaseSettings):
    """Main settings class that combines all settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    lookup: LookupSettings = Field(default_factory=LookupSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


settings = get_settings()


class RunOptions(BaseModel):
    """Options for a single discovery run, as given on the command line."""

    uri: str = DEFAULT_URI
    id_source_field: Optional[str] = None   # JSONPath to the entity id
    id_source_doc: Optional[str] = None     # JSONPath to the entity subdocument
    target_index: Optional[str] = None      # Index that stores entities
    target_field: Optional[str] = None      # Index field to query with the id

    # CLI flag name for each required option, used in error messages
    REQUIRED: ClassVar[dict[str, str]] = {
        "id_source_field": "idSourceField",
        "target_index": "targetIndex",
        "target_field": "targetField",
    }

    def validate_required(self) -> "RunOptions":
        """
        Check that every required option is set.

        Raises:
            ConfigurationError: listing the missing options by their flag name
        """
        missing = [flag for attr, flag in self.REQUIRED.items() if not getattr(self, attr)]
        if missing:
            raise ConfigurationError(
                f"Missing parameters: {', '.join(missing)}",
                missing=missing,
            )
        return self
