"""
Pydantic Models for true-iso configuration

Provides type-safe tuning values for every pipeline stage and the
isometric ratio the correction aims for.
"""

import math
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================
# Target Ratio
# ============================================================

class RatioSpec(BaseModel):
    """
    Isometric projection ratio (horizontal:vertical).

    For standard 2:1 isometric art the diagonals run 2 pixels across for
    every pixel up, i.e. atan(1/2) ≈ 26.565°.
    """

    model_config = ConfigDict(frozen=True)

    horizontal: float = Field(2.0, gt=0, description="Horizontal pixels per step")
    vertical: float = Field(1.0, gt=0, description="Vertical pixels per step")

    @classmethod
    def parse(cls, text: str) -> 'RatioSpec':
        """
        Parse a ratio written as "N:M".

        Args:
            text: Ratio string, e.g. "2:1" or "1.732:1"

        Returns:
            RatioSpec instance

        Raises:
            ValueError: If the text is not two positive numbers separated by ':'
        """
        parts = text.split(':')
        if len(parts) != 2:
            raise ValueError(f"Invalid ratio format '{text}', expected N:M")

        try:
            horizontal = float(parts[0])
        except ValueError:
            raise ValueError(f"Invalid horizontal value: {parts[0]}") from None
        try:
            vertical = float(parts[1])
        except ValueError:
            raise ValueError(f"Invalid vertical value: {parts[1]}") from None

        if not (horizontal > 0 and vertical > 0) or math.isinf(horizontal) or math.isinf(vertical):
            raise ValueError("Ratio values must be positive")

        return cls(horizontal=horizontal, vertical=vertical)

    @property
    def target_angle(self) -> float:
        """Target diagonal angle in radians."""
        return math.atan(self.vertical / self.horizontal)

    @property
    def target_angle_degrees(self) -> float:
        """Target diagonal angle in degrees."""
        return math.degrees(self.target_angle)

    def __str__(self) -> str:
        return f"{self.horizontal:g}:{self.vertical:g}"


# ============================================================
# Pipeline Configuration
# ============================================================

class CorrectionConfig(BaseModel):
    """Tuning values for detection, correction and resampling."""

    model_config = ConfigDict(extra="forbid")

    # Bounds / masking
    alpha_threshold: int = Field(10, ge=0, le=255, description="Alpha below which a pixel is transparent")

    # Edge detection
    canny_low: float = Field(30.0, ge=0, description="Canny low hysteresis threshold")
    canny_high: float = Field(100.0, ge=0, description="Canny high hysteresis threshold")
    blur_sigma: float = Field(1.4, ge=0, description="Gaussian pre-blur sigma for edge detection")

    # Line detection
    vote_threshold: int = Field(40, ge=1, description="Minimum Hough votes for a line")
    suppression_radius: int = Field(8, ge=1, description="Hough non-maximum suppression radius (bins)")

    # Classification / estimation
    left_angle_range: Tuple[float, float] = Field((-60.0, -15.0), description="Left-sloping class, degrees")
    right_angle_range: Tuple[float, float] = Field((15.0, 60.0), description="Right-sloping class, degrees")
    confidence_length_per_line: float = Field(100.0, gt=0, description="Support length per line for full confidence")

    # Correction
    tolerance_degrees: float = Field(2.0, ge=0, description="Skip the transform when within this tolerance")

    # Resampling
    max_scale_factor: int = Field(3, ge=1, le=16, description="Max output size as a multiple of the source")
    edge_cleanup_enabled: bool = Field(True, description="Remove near-transparent halo pixels")
    edge_cleanup_max_alpha: int = Field(32, ge=1, le=256, description="Fringe alpha band upper bound (exclusive)")
    edge_cleanup_min_transparent_neighbors: int = Field(3, ge=1, le=4, description="Transparent 4-neighbors needed to clear a fringe pixel")

    # Output
    output_size: int = Field(256, ge=1, description="Longest side of the final image")
    ratio: str = Field("2:1", description="Default target ratio")

    @field_validator('left_angle_range', 'right_angle_range')
    @classmethod
    def validate_range(cls, v):
        """Validate that range is (min, max) with min < max."""
        if len(v) != 2:
            raise ValueError('Range must be a tuple of (min, max)')
        if v[0] >= v[1]:
            raise ValueError('Range minimum must be less than maximum')
        return v

    @field_validator('ratio')
    @classmethod
    def validate_ratio(cls, v):
        """Validate that the default ratio parses."""
        RatioSpec.parse(v)
        return v

    @model_validator(mode='after')
    def validate_consistency(self):
        """Validate overall configuration consistency."""
        if self.canny_low > self.canny_high:
            raise ValueError('canny_low must not exceed canny_high')
        if self.left_angle_range[1] > 0 or self.right_angle_range[0] < 0:
            raise ValueError('Left range must be non-positive and right range non-negative')
        return self

    @property
    def target_ratio(self) -> RatioSpec:
        """Default ratio as a RatioSpec."""
        return RatioSpec.parse(self.ratio)


def create_correction_config_from_dict(config: Dict[str, Any]) -> CorrectionConfig:
    """
    Create CorrectionConfig from dictionary.

    Args:
        config: Configuration dictionary (unknown keys are rejected by validation)

    Returns:
        CorrectionConfig instance

    Raises:
        ValidationError: If validation fails
    """
    return CorrectionConfig(**config)
