import cv2
import numpy as np
import pytest

from true_iso.config import config_loader
from true_iso.config.config_loader import ConfigLoader
from true_iso.image_processing import RawLine


@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts from the packaged YAML."""
    ConfigLoader._instance = None
    config_loader._loader = None
    yield
    ConfigLoader._instance = None
    config_loader._loader = None


def blank(width, height):
    return np.zeros((height, width, 4), dtype=np.uint8)


def rect_sprite(width=100, height=100, x=20, y=35, w=60, h=30, color=(120, 80, 40)):
    image = blank(width, height)
    image[y:y + h, x:x + w, :3] = color
    image[y:y + h, x:x + w, 3] = 255
    return image


def diamond_sprite(size=200, half_width=80, half_height=40, color=(90, 90, 90)):
    """Filled 2:1 rhombus centered on the canvas."""
    image = blank(size, size)
    c = size // 2
    points = np.array([
        [c, c - half_height],
        [c + half_width, c],
        [c, c + half_height],
        [c - half_width, c],
    ], dtype=np.int32)
    mask = np.zeros((size, size), dtype=np.uint8)
    cv2.fillPoly(mask, [points], 255)
    image[mask > 0, :3] = color
    image[mask > 0, 3] = 255
    return image


class FullEdgeDetector:
    """Reports every pixel as an edge."""

    def detect_edges(self, gray):
        return np.full(gray.shape, 255, dtype=np.uint8)


class FixedLineDetector:
    """Returns a fixed set of polar lines regardless of input."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.calls = 0

    def detect_lines(self, edges, vote_threshold, suppression_radius):
        self.calls += 1
        return list(self.lines)


def lines_through(center, *slope_angles):
    """Polar lines through a point with the given slope angles (degrees)."""
    cx, cy = center
    lines = []
    for slope in slope_angles:
        theta = slope + 90.0
        t = np.radians(theta)
        lines.append(RawLine(cx * np.cos(t) + cy * np.sin(t), theta))
    return lines


@pytest.fixture
def make_rect():
    return rect_sprite


@pytest.fixture
def make_diamond():
    return diamond_sprite


@pytest.fixture
def make_blank():
    return blank


@pytest.fixture
def skewed_detectors():
    """Detectors that see diagonals at ±30° on a 100x100 sprite."""
    return FullEdgeDetector(), FixedLineDetector(lines_through((50, 50), -30.0, 30.0))


@pytest.fixture
def no_line_detectors():
    return FullEdgeDetector(), FixedLineDetector([])
