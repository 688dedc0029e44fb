"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MDBOOK_SVGBOB_ prefix (e.g., MDBOOK_SVGBOB_SVGBOB_BIN=/opt/bin/svgbob).

Settings can also be loaded from a .env file in the book root.

These are process-level settings. Per-book renderer options come from the
[preprocessor.svgbob] table of book.toml, see models.book.BobSettings.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MDBOOK_SVGBOB_ prefix.

    Examples:
        MDBOOK_SVGBOB_SVGBOB_BIN=/usr/local/bin/svgbob
        MDBOOK_SVGBOB_RENDER_TIMEOUT=5
        MDBOOK_SVGBOB_MARKDOWN_EXTENSIONS='["tables"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="MDBOOK_SVGBOB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Host compatibility
    mdbook_version: str = Field(
        default="0.4.40",
        description="mdBook version this preprocessor was built against",
    )

    # Renderer configuration
    svgbob_bin: str = Field(
        default="svgbob",
        description="svgbob executable, looked up on PATH unless absolute",
    )

    render_timeout: float = Field(
        default=30.0,
        description="Seconds to wait for a single diagram render",
    )

    # Markdown round trip
    markdown_extensions: List[str] = Field(
        default_factory=lambda: ["tables"],
        description="mdformat parser extensions enabled for parsing and reserializing chapters",
    )


# Singleton instance - import this in your code
appsettings = AppSettings()
