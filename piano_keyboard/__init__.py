"""
Piano Keyboard Layout

Pixel exact rectangle geometry for piano keyboards of any key range
and target width.
"""

__version__ = "0.3.0"

from . import utils
from . import keyboard
from . import render
