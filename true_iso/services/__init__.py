"""
Services layer for true-iso.

This package provides the high-level correction workflow.
"""

from .correction_service import CorrectionService, DetectedGeometry, NoVisibleContentError

__all__ = ['CorrectionService', 'DetectedGeometry', 'NoVisibleContentError']
