"""Tests for the white key / gap width solver."""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from piano_keyboard.keyboard.errors import SolverInvariantError
from piano_keyboard.keyboard.keys import KeyClass, key_class
from piano_keyboard.keyboard.specification import KeyboardSpecification, MAX_WIDTH
from piano_keyboard.keyboard.width_solver import Tier, UnitKind, WidthSolver


def solve(width, left=21, right=108):
    spec = KeyboardSpecification(left_white_key=left, right_white_key=right, width=width)
    return WidthSolver(spec.validate()).solve()


class TestUnitSequence:
    """Tests for the structure of the solution."""

    @pytest.fixture
    def solution(self):
        return solve(800)

    def test_alternates_gap_key(self, solution):
        """Gap, Key, Gap, ..., Key, Gap."""
        assert len(solution.units) == 2 * 52 + 1
        for i, unit in enumerate(solution.units):
            expected = UnitKind.GAP if i % 2 == 0 else UnitKind.KEY
            assert unit.kind is expected

    def test_keys_in_order(self, solution):
        keys = [unit.key for unit in solution.keys()]
        assert keys == KeyboardSpecification().white_keys

    def test_gaps_have_no_key(self, solution):
        assert all(unit.key is None for unit in solution.gaps())

    def test_sums_to_width(self, solution):
        assert solution.total_width == 800


class TestTiers:
    """Tests for the tier cascade on an 88 key piano."""

    def test_width_800(self):
        solution = solve(800)
        diag = solution.diagnostics
        assert diag.key_width_min == 15
        assert diag.key_gap_min == 0
        assert diag.initial_delta == 20
        assert diag.tiers == [Tier.BC_GAPS, Tier.EF_GAPS,
                              Tier.ALTERNATING_D_KEYS, Tier.OUTER_GAPS]
        assert [app.consumed for app in diag.applications] == [8, 7, 4, 1]
        assert not solution.perfect

    def test_width_800_alternating_d(self):
        """Every other D key starting with the first is widened."""
        solution = solve(800)
        d_widths = [u.width for u in solution.keys() if key_class(u.key) == KeyClass.D]
        assert d_widths == [16, 15, 16, 15, 16, 15, 16]

    def test_width_800_bc_gaps(self):
        """Gaps left of C keys are widened, the outer left gap by the outer tier."""
        solution = solve(800)
        for i, unit in enumerate(solution.units):
            if i == 0:
                assert unit.width == 1
            elif unit.is_gap and i < len(solution.units) - 1:
                right_class = key_class(solution.units[i + 1].key)
                expected = 1 if right_class in (KeyClass.C, KeyClass.F) else 0
                assert unit.width == expected
        assert solution.units[-1].width == 0

    def test_perfect_width(self):
        """At 1821 pixels the uniform widths fit exactly."""
        solution = solve(1821)
        assert solution.diagnostics.initial_delta == 0
        assert solution.diagnostics.tiers == []
        assert solution.perfect
        assert solution.key_width == 34
        assert solution.key_gap == 1
        assert all(u.width == 34 for u in solution.keys())
        assert all(u.width == 1 for u in solution.gaps())

    def test_one_pixel_more(self):
        solution = solve(1822)
        assert solution.diagnostics.tiers == [Tier.OUTER_GAPS]
        assert solution.units[0].width == 2
        assert solution.units[-1].width == 1
        assert not solution.perfect

    def test_initial_delta_bounded(self):
        """Minimum widths leave at most one pixel per white key."""
        for width in range(520, 4000):
            delta = solve(width).diagnostics.initial_delta
            assert 0 <= delta <= 52

    def test_non_uniform_tiers_fire_once(self):
        for width in range(520, 2000, 7):
            tiers = solve(width).diagnostics.tiers
            non_uniform = [t for t in tiers if not t.is_uniform]
            assert len(non_uniform) == len(set(non_uniform))

    def test_d_tiers_exclusive(self):
        for width in range(520, 2000):
            tiers = solve(width).diagnostics.tiers
            assert not (Tier.D_KEYS in tiers and Tier.ALTERNATING_D_KEYS in tiers)

    def test_perfect_means_uniform(self):
        """Perfect solutions have equal keys and equal gaps."""
        for width in range(520, 4000):
            solution = solve(width)
            if solution.perfect:
                assert len({u.width for u in solution.keys()}) == 1
                assert len({u.width for u in solution.gaps()}) == 1


class TestSweep:
    """Every valid width must be solvable."""

    @pytest.mark.parametrize("left,right", [(21, 108), (48, 72), (33, 96), (60, 71)])
    def test_dense_low_widths(self, left, right):
        spec = KeyboardSpecification(left_white_key=left, right_white_key=right)
        for width in range(spec.min_width, 2500):
            assert solve(width, left, right).total_width == width

    def test_full_midi_range_stepped(self):
        for width in list(range(750, MAX_WIDTH, 997)) + [MAX_WIDTH]:
            assert solve(width, 0, 127).total_width == width

    def test_max_width_88(self):
        assert solve(MAX_WIDTH).total_width == MAX_WIDTH

    def test_idempotent(self):
        spec = KeyboardSpecification(width=1234)
        assert WidthSolver(spec).solve().units == WidthSolver(spec).solve().units


class TestGroups:
    """Tests for the group counts."""

    def test_88_key_groups(self):
        solver = WidthSolver(KeyboardSpecification())
        # C1..C7 have a complete C-E; F1..F7 a complete F-B
        assert solver.nr_of_cde_groups == 7
        assert solver.nr_of_fgab_groups == 7

    def test_class_width_missing(self):
        with pytest.raises(SolverInvariantError):
            solve(200, 60, 72).class_width(KeyClass.CS)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
