"""
Width Solver

Distributes the requested keyboard width among the white keys and the gaps
between them, so that the unit widths sum up exactly to the target width.

The uniform scaling of the physical key proportions rarely fits the target
width exactly. The remaining pixels are consumed by an ordered list of
tiers, each adding one pixel to every member of a structurally defined set
of keys or gaps (all F/G/A/B keys, all gaps between B and C, ...).

Usage:
    from piano_keyboard.keyboard.width_solver import WidthSolver

    solution = WidthSolver(spec).solve()
    assert sum(unit.width for unit in solution.units) == spec.width
"""

from enum import Enum
from typing import Callable, List, Optional, Set, Tuple
from dataclasses import dataclass, field

from .errors import SolverInvariantError
from .keys import KeyClass, key_class, CDE_CLASSES, FGAB_CLASSES
from .specification import KeyboardSpecification
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


class UnitKind(Enum):
    GAP = "gap"
    KEY = "key"


@dataclass(frozen=True)
class WidthUnit:
    """One horizontal slice of the keyboard: a white key or a gap."""
    kind: UnitKind
    width: int
    key: Optional[int] = None  # MIDI key number, keys only

    @property
    def is_key(self) -> bool:
        return self.kind is UnitKind.KEY

    @property
    def is_gap(self) -> bool:
        return self.kind is UnitKind.GAP


class Tier(Enum):
    """Width adjustment tiers, in priority order."""
    UNIFORM_GAPS = "uniform_gaps"
    UNIFORM_KEYS = "uniform_keys"
    UNIFORM_GAPS_GROUPED = "uniform_gaps_grouped"
    UNIFORM_KEYS_GROUPED = "uniform_keys_grouped"
    FGAB_KEYS = "fgab_keys"
    CDE_KEYS = "cde_keys"
    BC_GAPS = "bc_gaps"
    EF_GAPS = "ef_gaps"
    D_KEYS = "d_keys"
    OUTER_GAPS = "outer_gaps"
    OUTER_KEYS = "outer_keys"
    ALTERNATING_D_KEYS = "alternating_d_keys"

    @property
    def is_uniform(self) -> bool:
        """Uniform tiers keep all keys (or all gaps) equally wide."""
        return self in (Tier.UNIFORM_GAPS, Tier.UNIFORM_KEYS,
                        Tier.UNIFORM_GAPS_GROUPED, Tier.UNIFORM_KEYS_GROUPED)


@dataclass(frozen=True)
class TierApplication:
    """Record of one fired tier."""
    tier: Tier
    delta_before: int
    consumed: int


@dataclass
class WidthDiagnostics:
    """Solver internals, returned instead of being printed."""
    key_width_min: int
    key_gap_min: int
    initial_delta: int
    applications: List[TierApplication] = field(default_factory=list)

    @property
    def tiers(self) -> List[Tier]:
        return [app.tier for app in self.applications]


@dataclass
class WidthSolution:
    """Result of the width solver."""
    units: List[WidthUnit]
    perfect: bool
    key_width: int  # uniform white key width
    key_gap: int    # uniform gap width
    diagnostics: WidthDiagnostics

    @property
    def total_width(self) -> int:
        return sum(unit.width for unit in self.units)

    def keys(self) -> List[WidthUnit]:
        return [unit for unit in self.units if unit.is_key]

    def gaps(self) -> List[WidthUnit]:
        return [unit for unit in self.units if unit.is_gap]

    def class_width(self, cls: KeyClass) -> int:
        """Smallest width of all keys of the given class."""
        widths = [unit.width for unit in self.keys() if key_class(unit.key) == cls]
        if not widths:
            raise SolverInvariantError(f"no white key of class {cls.name} in layout")
        return min(widths)


Rule = Callable[[int, Set[Tier]], Optional[List[int]]]


class WidthSolver:
    """
    Solves the white key / gap width distribution.

    The unit sequence is Gap, Key, Gap, ..., Key, Gap. Internally units are
    addressed by index: gap i is at 2*i, white key j is at 2*j+1.
    """

    def __init__(self, spec: KeyboardSpecification):
        """
        Args:
            spec: Validated keyboard specification
        """
        self.spec = spec
        self.white_keys = spec.white_keys
        self.nr_of_white_keys = len(self.white_keys)
        self._classes = [key_class(key) for key in self.white_keys]

        right = spec.right_white_key
        self.nr_of_cde_groups = sum(
            1 for key in self.white_keys if key_class(key) == KeyClass.C and key + 4 <= right
        )
        self.nr_of_fgab_groups = sum(
            1 for key in self.white_keys if key_class(key) == KeyClass.F and key + 6 <= right
        )

        self._rules: List[Tuple[Tier, Rule]] = [
            (Tier.UNIFORM_GAPS, self._uniform_gaps),
            (Tier.UNIFORM_KEYS, self._uniform_keys),
            (Tier.UNIFORM_GAPS_GROUPED, self._uniform_gaps_grouped),
            (Tier.UNIFORM_KEYS_GROUPED, self._uniform_keys_grouped),
            (Tier.FGAB_KEYS, self._fgab_keys),
            (Tier.CDE_KEYS, self._cde_keys),
            (Tier.BC_GAPS, self._bc_gaps),
            (Tier.EF_GAPS, self._ef_gaps),
            (Tier.D_KEYS, self._d_keys),
            (Tier.OUTER_GAPS, self._outer_gaps),
            (Tier.OUTER_KEYS, self._outer_keys),
            (Tier.ALTERNATING_D_KEYS, self._alternating_d_keys),
        ]

    def solve(self) -> WidthSolution:
        """
        Compute the unit sequence.

        Returns:
            WidthSolution whose unit widths sum up to spec.width

        Raises:
            SolverInvariantError: If the remaining width cannot be distributed
        """
        key_min, gap_min = self._minimum_widths()

        widths = [gap_min]
        for _ in self.white_keys:
            widths.extend([key_min, gap_min])

        diagnostics = WidthDiagnostics(
            key_width_min=key_min,
            key_gap_min=gap_min,
            initial_delta=self.spec.width - sum(widths)
        )
        logger.debug(
            f"#white={self.nr_of_white_keys} key/gap={key_min}/{gap_min} "
            f"delta={diagnostics.initial_delta}"
        )

        used = self._resolve(widths, diagnostics)

        units = []
        for i, width in enumerate(widths):
            if i % 2 == 0:
                units.append(WidthUnit(UnitKind.GAP, width))
            else:
                units.append(WidthUnit(UnitKind.KEY, width, self.white_keys[i // 2]))

        tiers = diagnostics.tiers
        key_width = key_min + sum(
            1 for t in tiers if t in (Tier.UNIFORM_KEYS, Tier.UNIFORM_KEYS_GROUPED)
        )
        key_gap = gap_min + sum(
            1 for t in tiers if t in (Tier.UNIFORM_GAPS, Tier.UNIFORM_GAPS_GROUPED)
        )

        return WidthSolution(
            units=units,
            perfect=all(tier.is_uniform for tier in used),
            key_width=key_width,
            key_gap=key_gap,
            diagnostics=diagnostics
        )

    def _minimum_widths(self) -> Tuple[int, int]:
        """Largest uniform key and gap widths fitting into the target width."""
        spec = self.spec
        n = self.nr_of_white_keys
        keyboard_width_10um = spec.keyboard_width_10um

        key_gap_min = spec.key_gap_10um * spec.width // keyboard_width_10um
        key_width_min = spec.white_key_wide_width_10um * spec.width // keyboard_width_10um

        # If the remainders sum up to more than one key each, widen the keys
        if n * (key_width_min + 1) + (n + 1) * key_gap_min <= spec.width:
            key_width_min += 1

        min_width = n * key_width_min + (n + 1) * key_gap_min
        max_width = n * (key_width_min + 1) + (n + 1) * key_gap_min
        if not min_width <= spec.width <= max_width:
            raise SolverInvariantError(
                f"uniform widths {key_width_min}/{key_gap_min} do not bracket width {spec.width}"
            )
        return key_width_min, key_gap_min

    def _resolve(self, widths: List[int], diagnostics: WidthDiagnostics) -> Set[Tier]:
        """Fixed-point driver: fire the first applicable tier until delta is zero."""
        used: Set[Tier] = set()
        delta = self.spec.width - sum(widths)

        for _ in range(len(Tier)):
            if delta == 0:
                break
            if delta < 0:
                raise SolverInvariantError(f"width exceeded by {-delta} pixels")

            for tier, rule in self._rules:
                if tier in used and not tier.is_uniform:
                    continue
                subset = rule(delta, used)
                if subset and len(subset) <= delta:
                    break
            else:
                raise SolverInvariantError(
                    f"no width tier applies, remaining delta {delta} "
                    f"(#white={self.nr_of_white_keys}, width={self.spec.width})"
                )

            for i in subset:
                widths[i] += 1
            used.add(tier)
            diagnostics.applications.append(TierApplication(tier, delta, len(subset)))
            logger.debug(f"{tier.value}: {delta} -> {delta - len(subset)}")
            delta -= len(subset)

        if delta != 0:
            raise SolverInvariantError(
                f"width tiers exhausted with remaining delta {delta}"
            )
        return used

    # Unit subsets

    def _all_gaps(self) -> List[int]:
        return list(range(0, 2 * self.nr_of_white_keys + 1, 2))

    def _all_keys(self) -> List[int]:
        return list(range(1, 2 * self.nr_of_white_keys, 2))

    def _keys_of(self, classes) -> List[int]:
        return [2 * j + 1 for j, cls in enumerate(self._classes) if cls in classes]

    def _gaps_before(self, cls: KeyClass) -> List[int]:
        # The outer left gap is never an inter-key gap
        return [2 * j for j, c in enumerate(self._classes) if c == cls and j > 0]

    def _fits_groups(self, remainder: int) -> bool:
        # Empirically tuned: a remainder of up to 4 per group count is acceptable
        return any(
            count > 0 and remainder % count <= 4
            for count in (self.nr_of_cde_groups, self.nr_of_fgab_groups)
        )

    # Rules, in priority order. Each returns the units to widen or None.

    def _uniform_gaps(self, delta, used):
        if delta == self.nr_of_white_keys + 1:
            return self._all_gaps()
        return None

    def _uniform_keys(self, delta, used):
        if delta == self.nr_of_white_keys:
            return self._all_keys()
        return None

    def _uniform_gaps_grouped(self, delta, used):
        n = self.nr_of_white_keys
        if delta >= n + 1 and self._fits_groups(delta - n - 1):
            return self._all_gaps()
        return None

    def _uniform_keys_grouped(self, delta, used):
        n = self.nr_of_white_keys
        if delta >= n and self._fits_groups(delta - n):
            return self._all_keys()
        return None

    def _fgab_keys(self, delta, used):
        return self._keys_of(FGAB_CLASSES)

    def _cde_keys(self, delta, used):
        return self._keys_of(CDE_CLASSES)

    def _bc_gaps(self, delta, used):
        return self._gaps_before(KeyClass.C)

    def _ef_gaps(self, delta, used):
        return self._gaps_before(KeyClass.F)

    def _d_keys(self, delta, used):
        if Tier.ALTERNATING_D_KEYS in used:
            return None
        return self._keys_of((KeyClass.D,))

    def _outer_gaps(self, delta, used):
        if delta > 4:
            return None
        subset = [0]
        if delta % 2 == 0:
            subset.append(2 * self.nr_of_white_keys)
        return subset

    def _outer_keys(self, delta, used):
        if delta == 2:
            return [1, 2 * self.nr_of_white_keys - 1]
        return None

    def _alternating_d_keys(self, delta, used):
        if Tier.D_KEYS in used:
            return None
        d_keys = self._keys_of((KeyClass.D,))
        half = len(d_keys) // 2
        if delta < half:
            return None
        # Start with the second D when every other D consumes delta exactly
        start = 1 if delta == half else 0
        return d_keys[start::2]
