"""
true-iso API Routers

This package contains the FastAPI routers:
- correction: Sprite correction and detection endpoints
"""

from .correction import router as correction_router

__all__ = ["correction_router"]
