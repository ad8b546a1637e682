"""
true-iso - correct isometric tile sprites to an exact projection ratio.

Detects the two diagonal angles of a sprite, solves the affine map onto
the target isometric basis and resamples the sprite through it.
"""

__version__ = "0.1.0"

from .config import CorrectionConfig, RatioSpec
from .services import CorrectionService, NoVisibleContentError

__all__ = ['CorrectionConfig', 'RatioSpec', 'CorrectionService', 'NoVisibleContentError', '__version__']
