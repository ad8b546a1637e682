"""
Utility functions for image processing.

This module provides helper functions for image loading, conversion and
encoding. Buffers are numpy arrays of shape (height, width, 4), dtype
uint8, RGBA channel order with straight (non-premultiplied) alpha.
"""

import io
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError


class ImageDecodeError(ValueError):
    """Raised when bytes or a file cannot be decoded as an image."""


def ensure_rgba(image: np.ndarray) -> np.ndarray:
    """
    Validate that an array is an RGBA pixel buffer.

    Args:
        image: Candidate buffer

    Returns:
        The same array

    Raises:
        ValueError: If the array is not (H, W, 4) uint8
    """
    if image is None:
        raise ValueError("image is required")
    if image.ndim != 3 or image.shape[2] != 4:
        raise ValueError(f"Expected an RGBA buffer of shape (H, W, 4), got {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {image.dtype}")
    return image


def pil_to_rgba(pil_image: Image.Image) -> np.ndarray:
    """Convert any PIL image mode to an RGBA buffer."""
    if pil_image.mode != 'RGBA':
        pil_image = pil_image.convert('RGBA')
    return np.array(pil_image, dtype=np.uint8)


def load_image_from_bytes(image_bytes: bytes) -> np.ndarray:
    """
    Load an image from bytes.

    Args:
        image_bytes: Encoded image data (PNG, WebP, ...)

    Returns:
        RGBA buffer

    Raises:
        ImageDecodeError: If the data is not a decodable image
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as pil_image:
            return pil_to_rgba(pil_image)
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Failed to decode image: {e}") from e


def load_image(path: Union[str, Path]) -> np.ndarray:
    """
    Load an image file as an RGBA buffer.

    Raises:
        FileNotFoundError: If the file does not exist
        ImageDecodeError: If the file is not a decodable image
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return load_image_from_bytes(path.read_bytes())


def image_to_bytes(image: np.ndarray, format: str = 'PNG') -> bytes:
    """
    Convert an RGBA buffer to encoded bytes.

    Args:
        image: RGBA buffer
        format: Output format understood by Pillow (PNG, WEBP, ...)

    Returns:
        Encoded image bytes
    """
    ensure_rgba(image)
    buffer = io.BytesIO()
    Image.fromarray(image).save(buffer, format=format)
    return buffer.getvalue()


def save_image(image: np.ndarray, path: Union[str, Path]) -> Path:
    """
    Save an RGBA buffer; the format follows the file extension.

    Returns:
        The written path
    """
    ensure_rgba(image)
    path = Path(path)
    Image.fromarray(image).save(path)
    return path
