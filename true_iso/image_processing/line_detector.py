"""
Edge and line detection using OpenCV and scikit-image.

This module implements the collaborators that turn a grayscale sprite into
candidate straight lines: Canny edge detection followed by a polar Hough
transform with non-maximum suppression. Both sit behind small protocols so
the classification and solving stages can run against alternative or fake
detectors.
"""

from typing import List, NamedTuple, Protocol

import cv2
import numpy as np
from skimage.transform import hough_line, hough_line_peaks


class RawLine(NamedTuple):
    """Line in polar form: r = x*cos(theta) + y*sin(theta), theta in degrees."""

    r: float
    angle_degrees: float


class EdgeDetector(Protocol):
    def detect_edges(self, gray: np.ndarray) -> np.ndarray:
        """Return a same-size edge map, nonzero on edges."""
        ...


class LineDetector(Protocol):
    def detect_lines(
        self,
        edges: np.ndarray,
        vote_threshold: int,
        suppression_radius: int
    ) -> List[RawLine]:
        """Return candidate lines found in an edge map."""
        ...


class CannyEdgeDetector:
    """
    Canny edge detector with a Gaussian pre-blur.

    The blur smooths the stair-stepping of pixel-art diagonals so their
    edges come out as continuous runs.
    """

    def __init__(
        self,
        low_threshold: float = 30.0,
        high_threshold: float = 100.0,
        blur_sigma: float = 1.4
    ):
        """
        Initialize the edge detector with parameters.

        Args:
            low_threshold: Lower hysteresis threshold
            high_threshold: Upper hysteresis threshold
            blur_sigma: Gaussian sigma applied before Canny (0 disables the blur)
        """
        self.low_threshold = low_threshold
        self.high_threshold = high_threshold
        self.blur_sigma = blur_sigma

    def detect_edges(self, gray: np.ndarray) -> np.ndarray:
        """
        Apply Canny edge detection.

        Args:
            gray: Grayscale image (H, W) uint8

        Returns:
            Edge map (H, W) uint8 with 255 on edges
        """
        if gray.ndim != 2:
            raise ValueError(f"Expected a grayscale image, got shape {gray.shape}")

        if self.blur_sigma > 0:
            gray = cv2.GaussianBlur(gray, (5, 5), self.blur_sigma)

        return cv2.Canny(gray, self.low_threshold, self.high_threshold)


class HoughLineDetector:
    """
    Line detector using the standard (polar) Hough Line Transform.

    Angles are sampled over [0°, 180°) and distances in 1 pixel steps, so
    the suppression radius counts degrees and pixels alike.
    """

    def __init__(self, angle_step: float = 1.0):
        """
        Args:
            angle_step: Angle resolution in degrees
        """
        if angle_step <= 0:
            raise ValueError("angle_step must be positive")
        self.angle_step = angle_step
        self.tested_angles = np.deg2rad(np.arange(0.0, 180.0, angle_step))

    def detect_lines(
        self,
        edges: np.ndarray,
        vote_threshold: int = 40,
        suppression_radius: int = 8
    ) -> List[RawLine]:
        """
        Detect lines in an edge map.

        Args:
            edges: Edge map, nonzero on edges
            vote_threshold: Minimum number of votes for a line
            suppression_radius: Neighbourhood (in bins) in which only the
                strongest peak survives

        Returns:
            Lines in polar form, strongest first; may be empty
        """
        if not np.any(edges):
            return []

        hspace, angles, dists = hough_line(edges > 0, theta=self.tested_angles)

        radius_bins = max(1, int(round(suppression_radius / self.angle_step)))
        _, peak_angles, peak_dists = hough_line_peaks(
            hspace,
            angles,
            dists,
            min_distance=max(1, int(suppression_radius)),
            min_angle=radius_bins,
            threshold=vote_threshold
        )

        return [
            RawLine(float(dist), float(np.rad2deg(angle)))
            for angle, dist in zip(peak_angles, peak_dists)
        ]
