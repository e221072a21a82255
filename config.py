from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgentConfig(BaseSettings):
    """Agent settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    source: str = Field("127.0.0.1", alias="SUPERAGENT_SOURCE")
    rate_limit: int = Field(0, ge=0, alias="SUPERAGENT_RATE_LIMIT")
    rotate_identity: bool = Field(True, alias="SUPERAGENT_ROTATE_IDENTITY")
    request_timeout_seconds: int = Field(15, alias="REQUEST_TIMEOUT_SECONDS")
    history_path: Optional[str] = Field(None, alias="SUPERAGENT_HISTORY_PATH")
