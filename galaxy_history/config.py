"""Configuration with environment variable support."""

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

AttributeList = Annotated[list[str] | None, NoDecode]


class Settings(BaseSettings):
    """Archive reading configuration loaded from environment variables.

    Loads from environment (GALAXY_HISTORY_*), .env file, or defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="GALAXY_HISTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Source access
    request_timeout: int = 30

    # Payload output
    copy_buffer_size: int = Field(default=100_000, gt=0)
    decompress: bool = True

    # Field allow-lists per metadata table (None = keep everything)
    history_attributes: AttributeList = None
    dataset_attributes: AttributeList = None
    collection_attributes: AttributeList = None
    job_attributes: AttributeList = None

    @field_validator(
        "history_attributes",
        "dataset_attributes",
        "collection_attributes",
        "job_attributes",
        mode="before",
    )
    @classmethod
    def parse_attribute_list(cls, v: str | list[str] | None) -> list[str] | None:
        """Split comma-separated strings and convert 'null' strings to None."""
        if isinstance(v, str):
            if v.strip().lower() in ("null", "none", ""):
                return None
            return [item.strip() for item in v.split(",") if item.strip()]
        return v
