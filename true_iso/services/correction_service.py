"""
Correction service for isometric sprites.

This module runs the whole workflow on a decoded RGBA buffer: bounds,
edge and line detection, angle estimation, the correction transform,
resampling, cropping and resizing.
"""

from dataclasses import dataclass, field
import logging
from typing import List, Optional, Tuple

import numpy as np

from ..config.models import CorrectionConfig, RatioSpec
from ..image_processing import (
    BoundingBox,
    CannyEdgeDetector,
    DetectedAngles,
    EdgeDetector,
    HoughLineDetector,
    LineDetector,
    Outcome,
    apply_affine_transform,
    classify_lines,
    compute_correction_matrix,
    crop_to_content,
    ensure_rgba,
    find_sprite_bounds,
    measure_lines,
    resize_to_fit,
    to_grayscale_masked,
    weighted_median
)
from ..models import CorrectionDiagnostics, DetectionDiagnostics, SideEstimate
from ..utils.logger import LoggerAdapter, get_logger, log_execution_time

logger = get_logger(__name__)


class NoVisibleContentError(ValueError):
    """Raised when a sprite has no pixel above the alpha threshold."""


@dataclass
class DetectedGeometry:
    """Result of the detection pipeline."""

    angles: DetectedAngles
    bounds: BoundingBox
    center: Tuple[float, float]
    line_count: int
    left_line_count: int = 0
    right_line_count: int = 0
    warnings: List[str] = field(default_factory=list)


class CorrectionService:
    """
    Service for correcting isometric sprites to an exact ratio.

    Edge and line detectors can be swapped for alternative or fake
    implementations; by default they are built from the configuration.
    """

    def __init__(
        self,
        config: Optional[CorrectionConfig] = None,
        edge_detector: Optional[EdgeDetector] = None,
        line_detector: Optional[LineDetector] = None
    ):
        """
        Initialize the correction service.

        Args:
            config: Pipeline tuning values (defaults if omitted)
            edge_detector: Grayscale -> edge map collaborator
            line_detector: Edge map -> polar lines collaborator
        """
        self.config = config or CorrectionConfig()
        self.edge_detector = edge_detector or CannyEdgeDetector(
            self.config.canny_low,
            self.config.canny_high,
            self.config.blur_sigma
        )
        self.line_detector = line_detector or HoughLineDetector()

    def _logger(self, sprite_name: Optional[str]):
        if sprite_name:
            return LoggerAdapter(logger, {'sprite': sprite_name})
        return logger

    def _resolve_ratio(self, ratio) -> RatioSpec:
        if ratio is None:
            return self.config.target_ratio
        if isinstance(ratio, str):
            return RatioSpec.parse(ratio)
        return ratio

    @staticmethod
    def _note(outcome: Outcome, what: str, warnings: List[str], log) -> None:
        if outcome.is_degraded:
            message = f"{what}: {outcome.reason}"
            log.warning(message)
            warnings.append(message)

    def detect_geometry(
        self,
        image: np.ndarray,
        ratio: Optional[RatioSpec] = None,
        verbose: bool = False,
        sprite_name: Optional[str] = None
    ) -> DetectedGeometry:
        """
        Analyze a sprite to find its isometric diagonal angles.

        Args:
            image: RGBA buffer
            ratio: Target ratio; classes without lines default to its angles
            verbose: Report detection details at INFO instead of DEBUG
            sprite_name: Optional name used as logging context

        Returns:
            DetectedGeometry

        Raises:
            NoVisibleContentError: If the image is fully transparent
        """
        ensure_rgba(image)
        ratio = self._resolve_ratio(ratio)
        log = self._logger(sprite_name)
        level = logging.INFO if verbose else logging.DEBUG
        config = self.config
        warnings: List[str] = []

        bounds = find_sprite_bounds(image, config.alpha_threshold)
        if bounds is None:
            raise NoVisibleContentError("Could not find sprite bounds - image may be fully transparent")

        center = bounds.center
        log.log(level, f"Sprite bounds: {tuple(bounds)}")
        log.log(level, f"Sprite center: ({center[0]:.1f}, {center[1]:.1f})")

        gray = to_grayscale_masked(image, config.alpha_threshold)
        edges = self.edge_detector.detect_edges(gray)
        log.log(level, f"Applied edge detection ({config.canny_low}, {config.canny_high})")

        raw_lines = self.line_detector.detect_lines(edges, config.vote_threshold, config.suppression_radius)
        log.log(level, f"Detected {len(raw_lines)} Hough lines")

        measured = measure_lines(edges, raw_lines)
        left_lines, right_lines = classify_lines(measured, config.left_angle_range, config.right_angle_range)
        log.log(level, f"Classified: {len(left_lines)} left-sloping, {len(right_lines)} right-sloping lines")

        target = ratio.target_angle_degrees
        left = weighted_median(left_lines, -target, config.confidence_length_per_line)
        right = weighted_median(right_lines, target, config.confidence_length_per_line)
        self._note(left, "Left angle", warnings, log)
        self._note(right, "Right angle", warnings, log)

        log.log(level, f"Left angle: {left.value.angle_degrees:.2f}° (confidence: {left.value.confidence:.2f})")
        log.log(level, f"Right angle: {right.value.angle_degrees:.2f}° (confidence: {right.value.confidence:.2f})")

        angles = DetectedAngles(
            left.value.angle_degrees,
            right.value.angle_degrees,
            left.value.confidence,
            right.value.confidence
        )

        return DetectedGeometry(
            angles=angles,
            bounds=bounds,
            center=center,
            line_count=len(raw_lines),
            left_line_count=len(left_lines),
            right_line_count=len(right_lines),
            warnings=warnings
        )

    def _detection_fields(self, image: np.ndarray, geometry: DetectedGeometry, ratio: RatioSpec) -> dict:
        angles = geometry.angles
        return dict(
            source_size=(image.shape[1], image.shape[0]),
            bounds=tuple(geometry.bounds),
            center=geometry.center,
            ratio=str(ratio),
            target_angle_degrees=ratio.target_angle_degrees,
            left=SideEstimate(
                angle_degrees=angles.left_angle,
                confidence=angles.left_confidence,
                line_count=geometry.left_line_count
            ),
            right=SideEstimate(
                angle_degrees=angles.right_angle,
                confidence=angles.right_confidence,
                line_count=geometry.right_line_count
            ),
            line_count=geometry.line_count,
            already_correct=angles.is_close_to_target(ratio, self.config.tolerance_degrees),
            warnings=list(geometry.warnings)
        )

    def detect(
        self,
        image: np.ndarray,
        ratio=None,
        verbose: bool = False,
        sprite_name: Optional[str] = None
    ) -> DetectionDiagnostics:
        """Run detection only and report it as diagnostics."""
        ratio = self._resolve_ratio(ratio)
        geometry = self.detect_geometry(image, ratio, verbose, sprite_name)
        return DetectionDiagnostics(**self._detection_fields(image, geometry, ratio))

    @log_execution_time(logger)
    def correct_sprite(
        self,
        image: np.ndarray,
        ratio=None,
        output_size: Optional[int] = None,
        verbose: bool = False,
        sprite_name: Optional[str] = None
    ) -> Tuple[np.ndarray, CorrectionDiagnostics]:
        """
        Correct a sprite to the target isometric ratio.

        The transform pivots on the sprite center. When both detected
        diagonals are already within tolerance the transform is skipped,
        but the result is still cropped and resized.

        Args:
            image: RGBA buffer
            ratio: RatioSpec or "N:M" string (config default if omitted)
            output_size: Longest side of the result (config default if omitted)
            verbose: Report pipeline details at INFO instead of DEBUG
            sprite_name: Optional name used as logging context

        Returns:
            Tuple of (corrected buffer, CorrectionDiagnostics)

        Raises:
            NoVisibleContentError: If the image is fully transparent
            ValueError: If the ratio or output size is invalid
        """
        ratio = self._resolve_ratio(ratio)
        output_size = self.config.output_size if output_size is None else output_size
        if output_size < 1:
            raise ValueError(f"output_size must be positive, got {output_size}")

        log = self._logger(sprite_name)
        level = logging.INFO if verbose else logging.DEBUG
        config = self.config

        geometry = self.detect_geometry(image, ratio, verbose, sprite_name)
        fields = self._detection_fields(image, geometry, ratio)
        warnings = fields['warnings']

        matrix = None
        if fields['already_correct']:
            log.info(
                f"Image already has correct isometric proportions "
                f"(within {config.tolerance_degrees:.1f}° tolerance)"
            )
            transformed = image
        else:
            log.log(
                level,
                f"Detected angles: left={geometry.angles.left_angle:.2f}°, "
                f"right={geometry.angles.right_angle:.2f}°; "
                f"target: ±{ratio.target_angle_degrees:.3f}°"
            )
            correction = compute_correction_matrix(geometry.angles, ratio, geometry.center)
            self._note(correction, "Correction matrix", warnings, log)
            matrix = correction.value
            for row in matrix:
                log.log(level, "  [" + ", ".join(f"{v:8.4f}" for v in row) + "]")

            resampled = apply_affine_transform(
                image,
                matrix,
                max_scale_factor=config.max_scale_factor,
                edge_cleanup=config.edge_cleanup_enabled,
                cleanup_max_alpha=config.edge_cleanup_max_alpha,
                cleanup_min_transparent_neighbors=config.edge_cleanup_min_transparent_neighbors
            )
            self._note(resampled, "Resampling", warnings, log)
            transformed = resampled.value

        cropped = crop_to_content(transformed, config.alpha_threshold)
        self._note(cropped, "Crop", warnings, log)
        log.log(
            level,
            f"Cropped: {transformed.shape[1]}x{transformed.shape[0]} -> "
            f"{cropped.value.shape[1]}x{cropped.value.shape[0]}"
        )

        final_image = resize_to_fit(cropped.value, output_size)
        log.log(
            level,
            f"Resized: {cropped.value.shape[1]}x{cropped.value.shape[0]} -> "
            f"{final_image.shape[1]}x{final_image.shape[0]} (target: {output_size})"
        )

        diagnostics = CorrectionDiagnostics(
            **fields,
            correction_matrix=matrix.tolist() if matrix is not None else None,
            transformed_size=(transformed.shape[1], transformed.shape[0]),
            cropped_size=(cropped.value.shape[1], cropped.value.shape[0]),
            output_size=(final_image.shape[1], final_image.shape[0]),
            requested_size=output_size
        )
        return final_image, diagnostics
