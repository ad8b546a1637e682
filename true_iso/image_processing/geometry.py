"""
Isometric geometry: detected angles, the correction transform and
affine helpers.

Affine transforms are 3x3 numpy arrays acting on column vectors
(x, y, 1) in image coordinates, y pointing down.
"""

from dataclasses import dataclass
import math
from typing import Tuple

import numpy as np

from ..config.models import RatioSpec
from .outcome import Outcome

# Determinants smaller than this are treated as singular
SINGULAR_EPSILON = 1e-12


@dataclass
class DetectedAngles:
    """Angles detected on an isometric sprite."""

    left_angle: float           # typically around -26.565° for correct 2:1
    right_angle: float          # typically around +26.565° for correct 2:1
    left_confidence: float = 0.0
    right_confidence: float = 0.0

    def is_close_to_target(self, target: RatioSpec, tolerance_degrees: float) -> bool:
        """Check whether both diagonals are within tolerance of the target."""
        target_angle = target.target_angle_degrees
        left_diff = abs(abs(self.left_angle) - target_angle)
        right_diff = abs(self.right_angle - target_angle)
        return left_diff < tolerance_degrees and right_diff < tolerance_degrees


def translation_matrix(tx: float, ty: float) -> np.ndarray:
    return np.array([
        [1.0, 0.0, tx],
        [0.0, 1.0, ty],
        [0.0, 0.0, 1.0],
    ])


def embed_linear(linear: np.ndarray) -> np.ndarray:
    """Embed a 2x2 linear map in a 3x3 affine matrix."""
    matrix = np.eye(3)
    matrix[:2, :2] = linear
    return matrix


def basis_from_angles(left_degrees: float, right_degrees: float) -> np.ndarray:
    """2x2 matrix whose columns are unit vectors along the two diagonals."""
    left = math.radians(left_degrees)
    right = math.radians(right_degrees)
    return np.array([
        [math.cos(left), math.cos(right)],
        [math.sin(left), math.sin(right)],
    ])


def compute_correction_matrix(
    detected: DetectedAngles,
    target: RatioSpec,
    center: Tuple[float, float]
) -> Outcome[np.ndarray]:
    """
    Compute the affine correction that maps detected diagonals onto the target.

    The linear part is M = B_target · B_detected⁻¹ where each B holds the
    left and right diagonal unit vectors as columns. The left diagonal of the
    target runs at -α and the right one at +α, with α = atan(v/h). The map
    pivots on ``center``: translate(center) · M · translate(-center).

    Args:
        detected: Detected angles (confidences are not used)
        target: Target isometric ratio
        center: Pivot point (sprite center)

    Returns:
        Outcome holding the 3x3 matrix; degraded (identity linear part) when
        the detected diagonals are parallel
    """
    target_angle = target.target_angle_degrees

    b_detected = basis_from_angles(detected.left_angle, detected.right_angle)
    b_target = basis_from_angles(-target_angle, target_angle)

    reason = None
    if abs(np.linalg.det(b_detected)) < SINGULAR_EPSILON:
        linear = np.eye(2)
        reason = "detected diagonals are parallel, using identity"
    else:
        linear = b_target @ np.linalg.inv(b_detected)

    cx, cy = center
    matrix = translation_matrix(cx, cy) @ embed_linear(linear) @ translation_matrix(-cx, -cy)

    if reason:
        return Outcome.degraded(matrix, reason)
    return Outcome.ok(matrix)


def invert_transform(matrix: np.ndarray) -> Outcome[np.ndarray]:
    """
    Invert an affine matrix.

    Returns:
        Outcome holding the inverse, or a degraded outcome holding the
        input unchanged when the matrix is singular
    """
    if abs(np.linalg.det(matrix)) < SINGULAR_EPSILON:
        return Outcome.degraded(matrix, "transform matrix is not invertible")
    return Outcome.ok(np.linalg.inv(matrix))


def transform_point(matrix: np.ndarray, x: float, y: float) -> Tuple[float, float]:
    """Transform a point using the affine matrix."""
    result = matrix @ np.array([x, y, 1.0])
    return (float(result[0] / result[2]), float(result[1] / result[2]))


def transform_points(matrix: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Transform arrays of coordinates (any matching shapes)."""
    w = matrix[2, 0] * xs + matrix[2, 1] * ys + matrix[2, 2]
    tx = (matrix[0, 0] * xs + matrix[0, 1] * ys + matrix[0, 2]) / w
    ty = (matrix[1, 0] * xs + matrix[1, 1] * ys + matrix[1, 2]) / w
    return tx, ty


def compute_output_bounds(
    matrix: np.ndarray,
    width: int,
    height: int,
    max_width: int = 0,
    max_height: int = 0
) -> Tuple[int, int, float, float]:
    """
    Compute the bounding box of a transformed image.

    Args:
        matrix: Forward affine matrix
        width: Source width
        height: Source height
        max_width: Width reported when the transformed corners are not finite
        max_height: Height reported when the transformed corners are not finite

    Returns:
        (new_width, new_height, offset_x, offset_y) where the offsets are the
        minimum transformed corner coordinates
    """
    corners_x = np.array([0.0, width, 0.0, width])
    corners_y = np.array([0.0, 0.0, height, height])
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        xs, ys = transform_points(matrix, corners_x, corners_y)
        span_x = float(xs.max() - xs.min())
        span_y = float(ys.max() - ys.min())

    # Degenerate projections collapse or blow up the corners
    if math.isfinite(span_x):
        new_width, offset_x = int(math.ceil(span_x)), float(xs.min())
    else:
        new_width, offset_x = max_width, 0.0
    if math.isfinite(span_y):
        new_height, offset_y = int(math.ceil(span_y)), float(ys.min())
    else:
        new_height, offset_y = max_height, 0.0

    return new_width, new_height, offset_x, offset_y
