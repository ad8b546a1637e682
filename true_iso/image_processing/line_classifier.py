"""
Line classification for isometric sprites.

Turns polar Hough lines into slope angles with a support length and
splits them into the two isometric diagonal directions.
"""

import math
from typing import Iterable, List, NamedTuple, Tuple

import numpy as np

from .line_detector import RawLine


class ClassifiedLine(NamedTuple):
    """Slope angle of a line (degrees) and the number of edge pixels on it."""

    angle_degrees: float
    length: float


def polar_to_angle_degrees(line: RawLine) -> float:
    """
    Convert a polar line to the slope angle of the line itself.

    In Hough space the angle belongs to the normal; the line direction is
    perpendicular to it. The result lies in (-90°, 90°].

    Args:
        line: Polar line

    Returns:
        Slope angle in degrees
    """
    degrees = line.angle_degrees - 90.0

    while degrees > 90.0:
        degrees -= 180.0
    while degrees <= -90.0:
        degrees += 180.0

    return degrees


def estimate_line_length(edges: np.ndarray, line: RawLine) -> float:
    """
    Count edge pixels lying on a polar line.

    Walks the line along its dominant axis, solving the polar equation for
    the other coordinate at each step.

    Args:
        edges: Edge map (H, W), nonzero on edges
        line: Polar line

    Returns:
        Number of sampled positions that land on an edge pixel
    """
    height, width = edges.shape[:2]
    theta = math.radians(line.angle_degrees)
    r = line.r

    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    if abs(sin_t) > abs(cos_t):
        # Closer to horizontal: iterate over x
        xs = np.arange(width)
        ys = np.trunc((r - xs * cos_t) / sin_t)
        valid = (ys >= 0) & (ys < height)
        hits = edges[ys[valid].astype(np.intp), xs[valid]]
    else:
        # Closer to vertical: iterate over y
        ys = np.arange(height)
        xs = np.trunc((r - ys * sin_t) / cos_t)
        valid = (xs >= 0) & (xs < width)
        hits = edges[ys[valid], xs[valid].astype(np.intp)]

    return float(np.count_nonzero(hits))


def measure_lines(edges: np.ndarray, lines: Iterable[RawLine]) -> List[ClassifiedLine]:
    """Convert raw lines to slope angles with their support length."""
    return [
        ClassifiedLine(polar_to_angle_degrees(line), estimate_line_length(edges, line))
        for line in lines
    ]


def classify_lines(
    lines: Iterable[ClassifiedLine],
    left_range: Tuple[float, float] = (-60.0, -15.0),
    right_range: Tuple[float, float] = (15.0, 60.0)
) -> Tuple[List[ClassifiedLine], List[ClassifiedLine]]:
    """
    Classify lines into left-sloping and right-sloping groups.

    Lines outside both ranges (near horizontal or near vertical, e.g. the
    flat top and straight sides of a block) are dropped.

    Args:
        lines: Measured lines
        left_range: Inclusive (min, max) slope range of the left class
        right_range: Inclusive (min, max) slope range of the right class

    Returns:
        (left_lines, right_lines)
    """
    left_sloping = []
    right_sloping = []

    for line in lines:
        angle = line.angle_degrees
        if left_range[0] <= angle <= left_range[1]:
            left_sloping.append(line)
        elif right_range[0] <= angle <= right_range[1]:
            right_sloping.append(line)

    return left_sloping, right_sloping
