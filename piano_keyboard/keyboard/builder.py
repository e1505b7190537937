"""
Keyboard Builder

Fluent configuration surface for keyboard layouts.

Usage:
    from piano_keyboard.keyboard.builder import KeyboardBuilder

    layout = (KeyboardBuilder()
              .standard_piano(88)
              .set_width(800)
              .build())
    print(layout.width, layout.height, layout.is_perfect())
"""

from functools import lru_cache
from dataclasses import replace

from .errors import ConfigurationError
from .layout import KeyboardLayout, LayoutAssembler
from .specification import KeyboardSpecification, validate_key_range, validate_width
from .sub_width_solver import SubWidthSolver
from .width_solver import WidthSolver
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


# Number of keys -> (left white key, right white key)
STANDARD_PIANOS = {
    25: (48, 72),   # C3 to C5
    37: (48, 84),   # C3 to C6
    49: (36, 84),   # C2 to C6
    61: (36, 96),   # C2 to C7
    64: (33, 96),   # A1 to C7, e.g. Roland RD-64
    73: (28, 100),  # E1 to E7
    76: (28, 103),  # E1 to G7
    88: (21, 108),  # A0 to C8
}


@lru_cache(maxsize=256)
def compute_layout(spec: KeyboardSpecification) -> KeyboardLayout:
    """
    Run the full solver pipeline for a specification.

    The result is a pure function of the specification and is memoised.

    Args:
        spec: Keyboard specification, validated here

    Returns:
        KeyboardLayout

    Raises:
        ConfigurationError: If the specification is invalid
    """
    spec.validate()

    width_solution = WidthSolver(spec).solve()
    sub_solution = SubWidthSolver(spec, width_solution).solve()
    layout = LayoutAssembler(spec, width_solution, sub_solution).assemble()

    logger.debug(
        f"Layout {spec.left_white_key}..{spec.right_white_key}: "
        f"{layout.width}x{layout.height}, perfect={layout.perfect}"
    )
    return layout


class KeyboardBuilder:
    """
    Collects and validates the keyboard configuration.

    Every setter validates its arguments and returns the builder.
    Constraints involving several settings (minimum width for the chosen
    key range) are checked by build().
    """

    def __init__(self, spec: KeyboardSpecification = None):
        """
        Args:
            spec: Starting specification, defaults to an 88 key piano at 640 pixels
        """
        self._spec = spec or KeyboardSpecification()

    def set_width(self, width: int) -> 'KeyboardBuilder':
        validate_width(width)
        self._spec = replace(self._spec, width=width)
        return self

    def set_most_left_right_white_keys(self, left: int, right: int) -> 'KeyboardBuilder':
        validate_key_range(left, right)
        self._spec = replace(self._spec, left_white_key=left, right_white_key=right)
        return self

    def standard_piano(self, nr_of_keys: int) -> 'KeyboardBuilder':
        """Select a standard keyboard size (25, 37, 49, 61, 64, 73, 76 or 88 keys)."""
        if nr_of_keys not in STANDARD_PIANOS:
            raise ConfigurationError(
                f"no standard piano with {nr_of_keys} keys, "
                f"choose one of {sorted(STANDARD_PIANOS)}"
            )
        left, right = STANDARD_PIANOS[nr_of_keys]
        return self.set_most_left_right_white_keys(left, right)

    def is_rd64(self) -> 'KeyboardBuilder':
        # RD-64 is A1 to C7
        return self.standard_piano(64)

    def white_black_gap_present(self, gap: bool) -> 'KeyboardBuilder':
        self._spec = replace(self._spec, need_black_gap=bool(gap))
        return self

    def set_dimensions(self, **dimensions_10um: int) -> 'KeyboardBuilder':
        """
        Override physical measures, e.g. ``black_key_width_10um=1050``.

        Raises:
            ConfigurationError: On unknown names, non-positive values or
                measures the upper row cannot be split into
        """
        for name, value in dimensions_10um.items():
            if not name.endswith('_10um') or not hasattr(self._spec, name):
                raise ConfigurationError(f"unknown dimension {name!r}")
            if not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        spec = replace(self._spec, **dimensions_10um)
        spec.check_proportions()
        self._spec = spec
        return self

    def specification(self) -> KeyboardSpecification:
        """The specification collected so far, fully validated."""
        return self._spec.validate()

    def build(self) -> KeyboardLayout:
        return compute_layout(self.specification())
