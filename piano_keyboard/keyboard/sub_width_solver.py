"""
Sub-Width Solver

Splits the white key widths found by the width solver into the upper
row shared with the black keys: the visible ("small") part of each white
key, the gap to the neighbouring black key and the black key itself.

Within an octave the upper row forms two independent groups:

    C C# D D# E          two black keys, three white parts of equal width
    F F# G G# A A# B     three black keys, F/B and G/A parts

Usage:
    from piano_keyboard.keyboard.sub_width_solver import SubWidthSolver

    sub = SubWidthSolver(spec, width_solution).solve()
    breakdown = sub.breakdown_for(62, 34)   # D key, 34 pixel wide
"""

from typing import Dict, Optional
from dataclasses import dataclass, replace

from .errors import SolverInvariantError
from .keys import KeyClass, key_class, WHITE_CLASSES
from .specification import KeyboardSpecification
from .width_solver import WidthSolution
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


# Residual after the proportional g/a - f/b split, keyed by
# (remainder, f/b pair width is even) -> (g/a increment, f/b increment)
FGAB_RESIDUAL_TABLE = {
    (0, True): (0, 0),
    (1, True): (1, 0),
    (2, True): (2, 0),
    (3, True): (1, 2),
    (0, False): (1, -1),
    (1, False): (0, 1),
    (2, False): (1, 1),
    (3, False): (2, 1),
}

# Increment of the black key estimate per (cde remainder mod 3)
CDE_BLACK_ADJUSTMENT = {0: 0, 1: 2, 2: 1}


@dataclass(frozen=True)
class SubWidthBreakdown:
    """Upper row geometry of one white key class."""
    key_class: KeyClass
    blind_left: Optional[int]       # offset of the small part from the key's left edge
    visible_width: int
    black_gap: int
    black_key_width: Optional[int]  # black key to the right, None for E and B

    @property
    def offset(self) -> int:
        return self.blind_left or 0

    @property
    def has_black_key(self) -> bool:
        return self.black_key_width is not None


@dataclass
class SubWidthSolution:
    """Per-class breakdowns plus the group widths they were derived from."""
    breakdowns: Dict[KeyClass, SubWidthBreakdown]
    reference_widths: Dict[KeyClass, int]
    cde_width: int
    fgab_width: int
    black_key_min_width: int
    black_fs_as_width: int
    black_gs_width: int

    @property
    def perfect(self) -> bool:
        return self.black_fs_as_width == self.black_gs_width

    def breakdown_for(self, key: int, width: int) -> SubWidthBreakdown:
        """
        Breakdown for a single key instance.

        Keys enlarged beyond their class reference width show the extra
        pixels in their visible part.
        """
        cls = key_class(key)
        breakdown = self.breakdowns[cls]
        correction = width - self.reference_widths[cls]
        if correction == 0:
            return breakdown
        visible = breakdown.visible_width + correction
        if visible <= 0:
            raise SolverInvariantError(
                f"key {key} of width {width} leaves no visible width"
            )
        return replace(breakdown, visible_width=visible)


class SubWidthSolver:
    """Solves the upper row for the C-D-E and F-G-A-B groups."""

    def __init__(self, spec: KeyboardSpecification, width_solution: WidthSolution):
        """
        Args:
            spec: Validated keyboard specification
            width_solution: Result of the width solver for the same spec
        """
        self.spec = spec
        self.width_solution = width_solution

    def solve(self) -> SubWidthSolution:
        """
        Returns:
            SubWidthSolution with a breakdown for all seven white classes

        Raises:
            SolverInvariantError: If a width becomes non-integral or non-positive
        """
        spec = self.spec
        ref = {cls: self.width_solution.class_width(cls) for cls in WHITE_CLASSES}

        # Gap between white keys inside a group; non-uniform tiers never touch it
        gap = self.width_solution.key_gap
        black_gap = gap if spec.need_black_gap else 0

        key_width = self.width_solution.key_width
        black_min = key_width * spec.black_key_width_10um // spec.white_key_wide_width_10um

        # cde-part
        # Two black keys and four gaps (optionally). The black key estimate is
        # adjusted so that the three white parts are integral and equal.
        cde_width = ref[KeyClass.C] + ref[KeyClass.D] + ref[KeyClass.E] + 2 * gap
        black = black_min + CDE_BLACK_ADJUSTMENT[(cde_width - 2 * black_min - 4 * black_gap) % 3]
        cde_white = cde_width - 2 * black - 4 * black_gap
        if cde_white % 3 != 0:
            raise SolverInvariantError(f"c/d/e white width {cde_white} not divisible by 3")
        cde_key = cde_white // 3

        d_blind = cde_key + 2 * black_gap + black - (ref[KeyClass.C] + gap)
        e_blind = (2 * cde_key + 4 * black_gap + 2 * black
                   - (ref[KeyClass.C] + ref[KeyClass.D] + 2 * gap))

        # fgab-part
        # Three black keys and six gaps (optionally). The middle black key
        # takes the parity of the group width so the white budget is even.
        fgab_width = (ref[KeyClass.F] + ref[KeyClass.G] + ref[KeyClass.A]
                      + ref[KeyClass.B] + 3 * gap)
        black_fs_as = black
        if (fgab_width % 2 == 0) == (black % 2 == 0):
            black_gs = black
        else:
            black_gs = black + 1

        fgab_white = fgab_width - 2 * black_fs_as - black_gs - 6 * black_gap
        if fgab_white % 2 != 0 or fgab_white <= 0:
            raise SolverInvariantError(f"f/g/a/b white width {fgab_white} is not even and positive")

        # Distribute on the pairs g/a and f/b according to the physical widths
        ga_um = spec.white_key_small_width_ga_10um
        fb_um = spec.white_key_small_width_fb_10um
        ga_white = fgab_white * ga_um // (ga_um + fb_um)
        fb_white = fgab_white * fb_um // (ga_um + fb_um)
        residual = fgab_white - (ga_white + fb_white)
        ga_inc, fb_inc = FGAB_RESIDUAL_TABLE[(residual, fb_white % 2 == 0)]
        ga_white += ga_inc
        fb_white += fb_inc

        fb_key = fb_white // 2
        ga_key = ga_white // 2

        f_span = ref[KeyClass.F] + gap
        g_blind = fb_key + 2 * black_gap + black_fs_as - f_span
        a_blind = (fb_key + 4 * black_gap + black_fs_as + ga_key + black_gs
                   - (f_span + ref[KeyClass.G] + gap))
        b_blind = (fb_key + 6 * black_gap + 2 * black_fs_as + ga_white + black_gs
                   - (f_span + ref[KeyClass.G] + ref[KeyClass.A] + 2 * gap))

        for name, value in (('c/d/e visible', cde_key), ('f/b visible', fb_key),
                            ('g/a visible', ga_key), ('black key', black)):
            if value <= 0:
                raise SolverInvariantError(f"{name} width {value} is not positive")

        breakdowns = {
            KeyClass.C: SubWidthBreakdown(KeyClass.C, None, cde_key, black_gap, black),
            KeyClass.D: SubWidthBreakdown(KeyClass.D, d_blind, cde_key, black_gap, black),
            KeyClass.E: SubWidthBreakdown(KeyClass.E, e_blind, cde_key, black_gap, None),
            KeyClass.F: SubWidthBreakdown(KeyClass.F, None, fb_key, black_gap, black_fs_as),
            KeyClass.G: SubWidthBreakdown(KeyClass.G, g_blind, ga_key, black_gap, black_gs),
            KeyClass.A: SubWidthBreakdown(KeyClass.A, a_blind, ga_key, black_gap, black_fs_as),
            KeyClass.B: SubWidthBreakdown(KeyClass.B, b_blind, fb_key, black_gap, None),
        }

        logger.debug(
            f"cde={cde_width} white={cde_key} black={black}; "
            f"fgab={fgab_width} f/b={fb_key} g/a={ga_key} black={black_fs_as}/{black_gs}"
        )

        return SubWidthSolution(
            breakdowns=breakdowns,
            reference_widths=ref,
            cde_width=cde_width,
            fgab_width=fgab_width,
            black_key_min_width=black_min,
            black_fs_as_width=black_fs_as,
            black_gs_width=black_gs
        )
