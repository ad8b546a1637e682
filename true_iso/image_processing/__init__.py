"""
Image processing library for true-iso.

This package provides sprite bounds, edge and line detection, diagonal
angle estimation, the isometric correction transform and alpha-correct
resampling.
"""

from .outcome import Outcome
from .utils import (
    ImageDecodeError,
    ensure_rgba,
    load_image,
    load_image_from_bytes,
    image_to_bytes,
    save_image
)
from .bounds import BoundingBox, find_sprite_bounds, to_grayscale_masked
from .line_detector import RawLine, EdgeDetector, LineDetector, CannyEdgeDetector, HoughLineDetector
from .line_classifier import ClassifiedLine, polar_to_angle_degrees, estimate_line_length, measure_lines, classify_lines
from .angle_estimator import AngleEstimate, weighted_median
from .geometry import (
    DetectedAngles,
    compute_correction_matrix,
    compute_output_bounds,
    invert_transform,
    transform_point
)
from .resampler import (
    premultiply_alpha,
    unpremultiply_alpha,
    bicubic_interpolate,
    bilinear_interpolate,
    apply_affine_transform,
    clean_edges
)
from .cropper import crop_to_content, resize_to_fit

__all__ = [
    'Outcome',
    'ImageDecodeError',
    'ensure_rgba',
    'load_image',
    'load_image_from_bytes',
    'image_to_bytes',
    'save_image',
    'BoundingBox',
    'find_sprite_bounds',
    'to_grayscale_masked',
    'RawLine',
    'EdgeDetector',
    'LineDetector',
    'CannyEdgeDetector',
    'HoughLineDetector',
    'ClassifiedLine',
    'polar_to_angle_degrees',
    'estimate_line_length',
    'measure_lines',
    'classify_lines',
    'AngleEstimate',
    'weighted_median',
    'DetectedAngles',
    'compute_correction_matrix',
    'compute_output_bounds',
    'invert_transform',
    'transform_point',
    'premultiply_alpha',
    'unpremultiply_alpha',
    'bicubic_interpolate',
    'bilinear_interpolate',
    'apply_affine_transform',
    'clean_edges',
    'crop_to_content',
    'resize_to_fit'
]
