"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    aical_env: str = "development"
    aical_log_level: str = "debug"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Export pipeline
    export_target_width: int = 2048
    export_jpeg_quality: int = 92

    # Intermediate working copy sent to analysis
    working_max_dimension: int = 1024
    working_jpeg_quality: int = 85

    # Collage
    collage_jpeg_quality: int = 90
    collage_timeout_seconds: float = 10.0

    # Fonts (TrueType). Missing files fall back to Pillow's bundled font.
    font_regular: str = "DejaVuSans.ttf"
    font_bold: str = "DejaVuSans-Bold.ttf"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
