# planet_generator/__init__.py

from .settings import ConfigurationError, resolve_settings
from .synthesizer import TextureSet, TextureSynthesizer

__all__ = ["ConfigurationError", "resolve_settings", "TextureSet", "TextureSynthesizer"]
