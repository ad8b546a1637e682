"""
Pydantic models for correction diagnostics and API responses.

These models define what a correction run reports back to its caller.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class SideEstimate(BaseModel):
    """Detected angle of one diagonal."""

    angle_degrees: float
    confidence: float = Field(..., ge=0.0, le=1.0)
    line_count: int = Field(0, ge=0)


class DetectionDiagnostics(BaseModel):
    """What the detection stages found on a sprite."""

    source_size: Tuple[int, int]
    bounds: Tuple[int, int, int, int]
    center: Tuple[float, float]
    ratio: str
    target_angle_degrees: float
    left: SideEstimate
    right: SideEstimate
    line_count: int = Field(..., ge=0, description="Raw lines returned by the line detector")
    already_correct: bool
    warnings: List[str] = []


class CorrectionDiagnostics(DetectionDiagnostics):
    """Detection results plus what the correction did to the image."""

    correction_matrix: Optional[List[List[float]]] = None
    transformed_size: Tuple[int, int]
    cropped_size: Tuple[int, int]
    output_size: Tuple[int, int]
    requested_size: int


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    version: str
