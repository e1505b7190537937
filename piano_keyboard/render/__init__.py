"""Rasterization of keyboard layouts."""

from .raster import KeyboardRenderer

__all__ = [
    "KeyboardRenderer",
]
