"""Configuration management for the AI Photo Generator.

This module provides configuration management using Pydantic Settings.
Values are loaded from environment variables (no prefix), allowing the
relay to be deployed without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Keyword overrides passed to :func:`load_config`
2. Environment variables
3. .env file in the working directory
4. Default values defined in PhotogenConfig

Example .env file:
    OPENAI_API_KEY=sk-...
    OPENAI_IMAGE_MODEL=gpt-image-1
    IMAGE_SIZE=1024x1024
    PORT=5173

No Global Instance
------------------
Unlike a module-level singleton, the configuration is constructed once by
the process entry point and passed explicitly into
:func:`photogen.api.main.create_app`.  Tests build their own instance with
a fake API key and never touch the real environment.

Required Credential
-------------------
``OPENAI_API_KEY`` has no default.  Constructing the configuration without
it raises :class:`pydantic.ValidationError`, and the CLI refuses to start.

Usage Example
-------------
    from photogen.core.config import load_config

    config = load_config()
    print(config.openai_image_model)
    print(config.port)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Directory shipped inside the package that holds ``index.html``.
DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


class PhotogenConfig(BaseSettings):
    """Runtime configuration for the AI Photo Generator.

    Attributes
    ----------
    Upstream Settings:
        openai_api_key : str
            Bearer credential for the image-generation API (required)
        openai_image_model : str
            Image model identifier sent upstream
        image_size : str
            Output image size string, e.g. ``1024x1024``
        openai_base_url : str
            Base URL of the image API (``/images/generations`` is appended)
        upstream_timeout : float | None
            Seconds to wait for the upstream call; ``None`` disables the timeout

    Server Settings:
        host : str
            Bind address for uvicorn
        port : int
            Listening port (1-65535)
        max_body_bytes : int
            Largest accepted request body for ``POST /api/generate``
        log_level : str
            Root logging level used by the CLI
        templates_dir : Path
            Directory holding the static ``index.html`` page

    Notes
    -----
    - Configuration is immutable after initialization
    - To modify config, set environment variables and restart the application
    - See .env.example for a complete list of configuration options
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Upstream image API
    openai_api_key: str = Field(
        ...,
        min_length=1,
        description="API credential for the image-generation service",
    )
    openai_image_model: str = Field(
        default="gpt-image-1",
        description="Image model identifier",
    )
    image_size: str = Field(
        default="1024x1024",
        description="Output image size",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the image API",
    )
    upstream_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Upstream timeout in seconds (None waits indefinitely)",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    port: int = Field(
        default=5173,
        description="Server port",
        ge=1,
        le=65535,
    )
    max_body_bytes: int = Field(
        default=2 * 1024 * 1024,
        ge=1,
        description="Request body size cap in bytes",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    templates_dir: Path = Field(
        default=DEFAULT_TEMPLATES_DIR,
        description="Directory containing index.html",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        if isinstance(value, str):
            return value.upper()
        return value

    @property
    def generations_url(self) -> str:
        """Full URL of the image generation endpoint."""
        return f"{self.openai_base_url.rstrip('/')}/images/generations"


def load_config(**overrides) -> PhotogenConfig:
    """Build the process configuration.

    Args:
        **overrides: Field values that take precedence over the environment.

    Returns:
        A frozen :class:`PhotogenConfig`.

    Raises:
        pydantic.ValidationError: If the API key is missing or a value is invalid.
    """
    return PhotogenConfig(**overrides)
