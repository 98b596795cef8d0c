"""AI Photo Generator - Bangla and English prompt relay for image generation."""

__version__ = "0.1.0"

from photogen.core.config import PhotogenConfig, load_config

__all__ = [
    "PhotogenConfig",
    "load_config",
]
