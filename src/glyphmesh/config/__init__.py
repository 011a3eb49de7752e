"""Configuration management for glyphmesh.

This module provides configuration management using Pydantic models.
Configuration is passed per call; there is no global state.

Key classes:
- TessellationConfig: Flattening, classification, extrusion and normal settings
- ProcessingConfig: Batch processing settings
- LoggingConfig: Logging settings
- GlyphMeshSettings: Main application settings
"""

from glyphmesh.config.settings import (
    GlyphMeshSettings,
    LoggingConfig,
    NormalMode,
    OrphanHolePolicy,
    ProcessingConfig,
    TessellationConfig,
    get_default_settings,
)

__all__ = [
    "GlyphMeshSettings",
    "LoggingConfig",
    "NormalMode",
    "OrphanHolePolicy",
    "ProcessingConfig",
    "TessellationConfig",
    "get_default_settings",
]
