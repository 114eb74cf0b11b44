"""Application configuration.

Values come from the environment (``FRAMEKIT_*``) or a local ``.env`` file.
"""
from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from .env and environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FRAMEKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    effects_dir: Optional[str] = None  # searched before the bundled library
    default_font: str = "sans-serif"
    default_text_size: float = 16.0
    text_line_height: float = 1.2
    bezier_max_iterations: int = Field(default=10, ge=1)
    bezier_epsilon: float = 1e-6
    log_level: str = "INFO"


settings = Settings()
