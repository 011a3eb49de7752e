"""Configuration settings for Glyphmesh."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from glyphmesh.domain.contour import WindingDirection
from glyphmesh.exceptions import ConfigurationError


class NormalMode(str, Enum):
    """How normals are computed for extruded meshes."""

    FLAT = "flat"
    SMOOTH = "smooth"


class OrphanHolePolicy(str, Enum):
    """What to do with a hole that no outer contour encloses."""

    DISCARD = "discard"
    PROMOTE = "promote"


class TessellationConfig(BaseModel):
    """Per-call settings for the outline-to-mesh pipeline.

    Tolerances are expressed in glyph units after ``scale`` is applied.
    ``scaled_for_upm`` adapts them for fonts whose UPM differs from
    ``reference_upm``.
    """

    flatten_tolerance: float = Field(
        default=0.5,
        gt=0.0,
        description="Maximum deviation of a flattened curve from the true curve",
    )
    max_subdivision_depth: int = Field(
        default=16,
        ge=1,
        le=32,
        description="Maximum curve subdivision depth",
    )
    merge_epsilon: float = Field(
        default=1e-6,
        gt=0.0,
        description="Distance under which two points are treated as one",
    )
    area_epsilon: float = Field(
        default=1e-9,
        ge=0.0,
        description="Contours with smaller absolute area are degenerate",
    )
    outer_winding: WindingDirection = Field(
        default=WindingDirection.COUNTER_CLOCKWISE,
        description="Winding of outer contours; holes wind the other way",
    )
    extrusion_depth: float = Field(
        default=0.0,
        ge=0.0,
        description="Extrusion depth (0 = flat 2D mesh)",
    )
    normal_mode: NormalMode = Field(
        default=NormalMode.FLAT,
        description="Per-face (flat) or averaged per-vertex (smooth) normals",
    )
    orphan_hole_policy: OrphanHolePolicy = Field(
        default=OrphanHolePolicy.DISCARD,
        description="Discard holes without an owner or promote them to outers",
    )
    check_self_intersection: bool = Field(
        default=True,
        description="Reject flattened contours whose edges cross",
    )
    scale: float = Field(
        default=1.0,
        gt=0.0,
        description="Uniform scale applied to outline coordinates",
    )
    reference_upm: int = Field(
        default=1000,
        gt=0,
        description="Reference UPM for tolerance values",
    )

    @property
    def is_flat(self) -> bool:
        """True when a 2D mesh is requested."""
        return self.extrusion_depth == 0.0

    def scale_tolerance(self, base_value: float, upm: int) -> float:
        """Scale a tolerance value for the given UPM.

        Args:
            base_value: The tolerance value at reference UPM
            upm: The actual UPM of the font

        Returns:
            Scaled tolerance value
        """
        return base_value * (upm / self.reference_upm)

    def scaled_for_upm(self, upm: int) -> "TessellationConfig":
        """Return a copy with the flattening tolerance scaled for ``upm``."""
        return self.model_copy(
            update={"flatten_tolerance": self.scale_tolerance(self.flatten_tolerance, upm)}
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TessellationConfig":
        """Build a config from serialized values.

        Raises:
            ConfigurationError: If any value is invalid
        """
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e


class ProcessingConfig(BaseModel):
    """Configuration for batch processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class GlyphMeshSettings(BaseModel):
    """Main application settings."""

    tessellation: TessellationConfig = Field(default_factory=TessellationConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> GlyphMeshSettings:
    """Get default application settings."""
    return GlyphMeshSettings()
