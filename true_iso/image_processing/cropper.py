"""Cropping to visible content and uniform rescaling."""

import math

import numpy as np

from .bounds import find_sprite_bounds
from .outcome import Outcome
from .resampler import INTERPOLATORS, premultiply_alpha, unpremultiply_alpha
from .utils import ensure_rgba


def crop_to_content(image: np.ndarray, alpha_threshold: int = 10) -> Outcome[np.ndarray]:
    """
    Crop image to its non-transparent content (removes padding).

    Returns:
        Outcome holding the cropped copy; degraded (an unchanged copy) when
        the image has no visible content
    """
    bounds = find_sprite_bounds(image, alpha_threshold)
    if bounds is None:
        return Outcome.degraded(image.copy(), "no visible content to crop")

    x, y, width, height = bounds
    return Outcome.ok(image[y:y + height, x:x + width].copy())


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resize_to_fit(image: np.ndarray, target_size: int, interpolation: str = 'bicubic') -> np.ndarray:
    """
    Resize image so that the longest side equals target_size.

    Samples are taken at pixel centers, (dst + 0.5) / scale - 0.5, on
    premultiplied data.

    Args:
        image: RGBA buffer
        target_size: Longest side of the result in pixels
        interpolation: 'bicubic' (default) or 'bilinear'

    Returns:
        Resized buffer; zero-area inputs are returned as a copy
    """
    ensure_rgba(image)
    if target_size < 1:
        raise ValueError(f"target_size must be positive, got {target_size}")
    if interpolation not in INTERPOLATORS:
        raise ValueError(f"Unknown interpolation '{interpolation}', expected one of {sorted(INTERPOLATORS)}")

    height, width = image.shape[:2]
    if width == 0 or height == 0:
        return image.copy()

    scale = target_size / max(width, height)
    new_width = max(1, _round_half_up(width * scale))
    new_height = max(1, _round_half_up(height * scale))

    src_x = (np.arange(new_width, dtype=np.float64) + 0.5) / scale - 0.5
    src_y = (np.arange(new_height, dtype=np.float64) + 0.5) / scale - 0.5
    grid_x, grid_y = np.meshgrid(src_x, src_y)

    samples = INTERPOLATORS[interpolation](premultiply_alpha(image), grid_x, grid_y)
    return unpremultiply_alpha(samples)
