"""
Layout Assembly

Combines the width solver's unit sequence and the sub-width solver's
per-class breakdowns into absolute pixel rectangles.

Vertical bands (top to bottom):

    0 .. top_height          small white parts, black keys, blind fillers
    top_height .. height     wide white parts

Usage:
    from piano_keyboard.keyboard.layout import LayoutAssembler

    layout = LayoutAssembler(spec, width_solution, sub_solution).assemble()
    for element in layout:
        ...
"""

from typing import Iterator, List, Optional, Tuple, Union
from dataclasses import dataclass

from .errors import SolverInvariantError
from .specification import KeyboardSpecification
from .sub_width_solver import SubWidthSolution
from .width_solver import WidthSolution
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Rectangle:
    """Axis aligned pixel rectangle."""
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        if min(self.x, self.y, self.width, self.height) < 0:
            raise SolverInvariantError(f"negative rectangle geometry: {self}")

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains_row(self, y: int) -> bool:
        return self.y <= y < self.bottom

    def overlaps(self, other: 'Rectangle') -> bool:
        return (self.x < other.right and other.x < self.right
                and self.y < other.bottom and other.y < self.bottom)


@dataclass(frozen=True)
class WhiteKey:
    """A white key: wide lower part, small upper part, optional boundary filler."""
    key: int
    wide: Rectangle
    small: Rectangle
    blind: Optional[Rectangle] = None

    def rectangles(self, with_blind: bool = True) -> List[Rectangle]:
        rects = [self.wide, self.small]
        if with_blind and self.blind is not None:
            rects.append(self.blind)
        return rects


@dataclass(frozen=True)
class BlackKey:
    key: int
    rect: Rectangle


Element = Union[WhiteKey, BlackKey]


@dataclass(frozen=True)
class KeyboardLayout:
    """Final, immutable keyboard geometry."""
    left_white_key: int
    right_white_key: int
    width: int
    height: int
    elements: Tuple[Element, ...]
    perfect: bool

    def __iter__(self) -> Iterator[Element]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def is_perfect(self) -> bool:
        return self.perfect

    @property
    def board(self) -> Rectangle:
        return Rectangle(0, 0, self.width, self.height)

    def white_key_elements(self) -> List[WhiteKey]:
        return [el for el in self.elements if isinstance(el, WhiteKey)]

    def black_key_elements(self) -> List[BlackKey]:
        return [el for el in self.elements if isinstance(el, BlackKey)]

    def white_keys(self, with_blind: bool = False) -> List[Rectangle]:
        """
        All white key rectangles.

        Args:
            with_blind: Include the blind fillers at the keyboard boundaries
        """
        rects = []
        for element in self.white_key_elements():
            rects.extend(element.rectangles(with_blind))
        return rects

    def black_keys(self) -> List[Rectangle]:
        return [el.rect for el in self.black_key_elements()]


def _scale(spec: KeyboardSpecification, measure_10um: int) -> int:
    """Physical measure to pixels, rounded, using the horizontal scale."""
    keyboard_width_10um = spec.keyboard_width_10um
    return (spec.width * measure_10um + keyboard_width_10um // 2) // keyboard_width_10um


class LayoutAssembler:
    """Walks the unit sequence left to right and emits the key rectangles."""

    def __init__(
        self,
        spec: KeyboardSpecification,
        width_solution: WidthSolution,
        sub_solution: SubWidthSolution
    ):
        self.spec = spec
        self.width_solution = width_solution
        self.sub_solution = sub_solution

        self.black_gap = width_solution.key_gap if spec.need_black_gap else 0
        self.black_key_height = max(1, _scale(spec, spec.black_key_height_10um))
        self.wide_height = max(1, _scale(spec, spec.white_key_wide_height_10um))
        self.top_height = self.black_key_height + self.black_gap
        self.height = self.top_height + self.wide_height

    def assemble(self) -> KeyboardLayout:
        """
        Returns:
            KeyboardLayout with elements in key order
        """
        units = self.width_solution.units
        if sum(unit.width for unit in units) != self.spec.width:
            raise SolverInvariantError("unit widths do not sum up to the keyboard width")

        first_key = units[1].key
        last_key = units[-2].key

        elements: List[Element] = []
        x = 0
        for unit in units:
            if unit.is_gap:
                x += unit.width
                continue
            elements.extend(self._key_elements(
                unit.key, x, unit.width,
                is_first=unit.key == first_key,
                is_last=unit.key == last_key
            ))
            x += unit.width

        perfect = self.width_solution.perfect and self.sub_solution.perfect
        if not perfect:
            logger.info(
                f"Compromise layout for {self.spec.left_white_key}..{self.spec.right_white_key} "
                f"at width {self.spec.width}: tiers {[t.value for t in self.width_solution.diagnostics.tiers]}"
            )

        return KeyboardLayout(
            left_white_key=self.spec.left_white_key,
            right_white_key=self.spec.right_white_key,
            width=self.spec.width,
            height=self.height,
            elements=tuple(elements),
            perfect=perfect
        )

    def _key_elements(
        self,
        key: int,
        x: int,
        width: int,
        is_first: bool,
        is_last: bool
    ) -> List[Element]:
        """Rectangles of one white key and the black key to its right."""
        breakdown = self.sub_solution.breakdown_for(key, width)

        wide = Rectangle(x, self.top_height, width, self.wide_height)

        small_x = x + breakdown.offset
        small_right = small_x + breakdown.visible_width
        blind = None

        # No black key to the left: the part left of the small rectangle is free
        if is_first:
            if small_x > x:
                blind = Rectangle(x, 0, small_x - x, self.top_height)
            small_x = max(small_x, x)

        # No black key to the right: the part right of the small rectangle is free
        if is_last and breakdown.has_black_key:
            if small_right < x + width:
                blind = Rectangle(small_right, 0, x + width - small_right, self.top_height)
            small_right = min(small_right, x + width)

        small = Rectangle(small_x, 0, small_right - small_x, self.top_height)
        elements: List[Element] = [WhiteKey(key, wide, small, blind)]

        if breakdown.has_black_key and not is_last:
            black_x = x + breakdown.offset + breakdown.visible_width + breakdown.black_gap
            elements.append(BlackKey(
                key + 1,
                Rectangle(black_x, 0, breakdown.black_key_width, self.black_key_height)
            ))
        return elements
