from functools import cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ReportFormat = Literal["text", "json"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Corpus layout
    content_dir: str = Field(
        default="content",
        alias="DOCGRAPH_CONTENT_DIR",
        description="Root directory of the markdown corpus",
    )
    learning_paths_dir: str | None = Field(
        default=None,
        alias="DOCGRAPH_LEARNING_PATHS_DIR",
        description="Directory of learning-path JSON files (optional)",
    )
    metadata_dir: str | None = Field(
        default=None,
        alias="DOCGRAPH_METADATA_DIR",
        description="Directory holding topics/<topic>.json metadata (optional)",
    )

    # Scan behaviour
    concurrency: int = Field(
        default=1,
        ge=1,
        alias="DOCGRAPH_CONCURRENCY",
        description="Files parsed in parallel; 1 parses sequentially",
    )
    strict: bool = Field(
        default=False,
        alias="DOCGRAPH_STRICT",
        description="Treat warnings as failures",
    )
    report_format: ReportFormat = Field(
        default="text",
        alias="DOCGRAPH_REPORT_FORMAT",
        description="Report format: text or json",
    )
    log_level: LogLevel = Field(
        default="WARNING",
        alias="DOCGRAPH_LOG_LEVEL",
        description="Root log level for stderr logging",
    )

    @field_validator("learning_paths_dir", "metadata_dir", mode="before")
    @classmethod
    def empty_as_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


@cache
def get_settings() -> Settings:
    return Settings()
