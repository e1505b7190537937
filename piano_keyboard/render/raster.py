"""
Raster Rendering

Draws a KeyboardLayout into an image buffer. Consumes only the final
layout rectangles, no solver internals.

Usage:
    from piano_keyboard.render.raster import KeyboardRenderer

    renderer = KeyboardRenderer()
    image = renderer.render(layout)      # (H, W, 3) uint8, BGR
    renderer.save(layout, 'keyboard.png')
"""

import cv2
import numpy as np
from pathlib import Path
from typing import Iterable, Tuple

from ..keyboard.layout import KeyboardLayout, Rectangle
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


class KeyboardRenderer:
    """Renders white and black key rectangles with solid colors."""

    def __init__(
        self,
        background: Tuple[int, int, int] = (150, 150, 150),
        white_key: Tuple[int, int, int] = (255, 255, 255),
        black_key: Tuple[int, int, int] = (0, 0, 0),
        with_blind: bool = True
    ):
        """
        Args:
            background: RGB color of the board visible through the gaps
            white_key: RGB color of white keys
            black_key: RGB color of black keys
            with_blind: Paint the blind fillers at the boundaries as white key
        """
        # OpenCV works in BGR
        self.background = tuple(reversed(background))
        self.white_key = tuple(reversed(white_key))
        self.black_key = tuple(reversed(black_key))
        self.with_blind = with_blind

    @classmethod
    def from_config(cls, render_config) -> 'KeyboardRenderer':
        return cls(
            background=render_config.background,
            white_key=render_config.white_key,
            black_key=render_config.black_key,
            with_blind=render_config.with_blind
        )

    def render(self, layout: KeyboardLayout) -> np.ndarray:
        """
        Rasterize a layout.

        Args:
            layout: Keyboard layout

        Returns:
            BGR image of shape (layout.height, layout.width, 3)
        """
        image = np.empty((layout.height, layout.width, 3), dtype=np.uint8)
        image[:, :] = self.background

        self._fill(image, layout.white_keys(self.with_blind), self.white_key)
        self._fill(image, layout.black_keys(), self.black_key)
        return image

    def save(self, layout: KeyboardLayout, path: str) -> Path:
        """
        Render and write the layout to an image file (format from suffix).

        Returns:
            Path of the written file
        """
        output = Path(path)
        output.parent.mkdir(parents=True, exist_ok=True)
        if not cv2.imwrite(str(output), self.render(layout)):
            raise IOError(f"Could not write image to {output}")
        logger.info(f"Wrote {layout.width}x{layout.height} keyboard to {output}")
        return output

    @staticmethod
    def _fill(image: np.ndarray, rects: Iterable[Rectangle], color: Tuple[int, int, int]):
        for rect in rects:
            if rect.width == 0 or rect.height == 0:
                continue
            # cv2.rectangle corners are inclusive
            cv2.rectangle(
                image,
                (rect.x, rect.y),
                (rect.right - 1, rect.bottom - 1),
                color,
                -1
            )
