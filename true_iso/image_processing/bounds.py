"""
Sprite bounds and alpha-masked grayscale conversion.

Both functions are pure: they read an RGBA buffer and return new values.
"""

from typing import NamedTuple, Optional

import cv2
import numpy as np

from .utils import ensure_rgba


class BoundingBox(NamedTuple):
    """Pixel rectangle (x, y, width, height); width and height are > 0."""

    x: int
    y: int
    width: int
    height: int

    @property
    def center(self) -> tuple:
        """Geometric center, used as the correction pivot."""
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)


def find_sprite_bounds(image: np.ndarray, alpha_threshold: int = 10) -> Optional[BoundingBox]:
    """
    Find the non-transparent bounding box of a sprite.

    Args:
        image: RGBA buffer (H, W, 4) uint8
        alpha_threshold: Pixels with alpha below this are transparent

    Returns:
        BoundingBox, or None if no pixel reaches the threshold
    """
    image = ensure_rgba(image)
    visible = (image[:, :, 3] >= alpha_threshold).astype(np.uint8)
    if visible.size == 0:
        return None

    coords = cv2.findNonZero(visible)
    if coords is None:
        return None

    x, y, w, h = cv2.boundingRect(coords)
    return BoundingBox(int(x), int(y), int(w), int(h))


def to_grayscale_masked(image: np.ndarray, alpha_threshold: int = 10) -> np.ndarray:
    """
    Convert RGBA to grayscale luminance, painting transparent pixels white.

    Transparent regions would otherwise read as black and produce edges
    along the sprite silhouette that have nothing to do with the drawing.

    Args:
        image: RGBA buffer (H, W, 4) uint8
        alpha_threshold: Pixels with alpha below this become 255

    Returns:
        Grayscale buffer (H, W) uint8
    """
    image = ensure_rgba(image)
    rgb = image[:, :, :3].astype(np.float64)

    luma = 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
    gray = np.clip(np.rint(luma), 0, 255).astype(np.uint8)

    gray[image[:, :, 3] < alpha_threshold] = 255
    return gray
