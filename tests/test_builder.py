"""Tests for the keyboard builder and specification validation."""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from piano_keyboard.keyboard import (
    KeyboardBuilder, KeyboardSpecification, MAX_WIDTH, STANDARD_PIANOS, compute_layout
)
from piano_keyboard.keyboard.errors import ConfigurationError


class TestSpecification:
    """Tests for KeyboardSpecification."""

    def test_defaults(self):
        spec = KeyboardSpecification()
        assert spec.left_white_key == 21
        assert spec.right_white_key == 108
        assert spec.nr_of_white_keys == 52
        assert spec.key_gap_10um == 127
        assert spec.keyboard_width_10um == (2215 + 127) * 52 + 127

    def test_count_class(self):
        from piano_keyboard.keyboard.keys import KeyClass
        spec = KeyboardSpecification()
        assert spec.count_class(KeyClass.C) == 8
        assert spec.count_class(KeyClass.A) == 8
        assert spec.count_class(KeyClass.D) == 7

    def test_validate_returns_self(self):
        spec = KeyboardSpecification(width=800)
        assert spec.validate() is spec

    def test_width_below_minimum(self):
        spec = KeyboardSpecification(width=519)
        with pytest.raises(ConfigurationError):
            spec.validate()

    def test_minimum_width_accepted(self):
        spec = KeyboardSpecification(width=520)
        assert spec.min_width == 520
        spec.validate()

    def test_degenerate_heights(self):
        spec = KeyboardSpecification(white_key_height_10um=12500)
        with pytest.raises(ConfigurationError):
            spec.validate()


class TestKeyboardBuilder:
    """Tests for KeyboardBuilder setters."""

    @pytest.mark.parametrize("width", [0, -5, MAX_WIDTH + 1])
    def test_invalid_width(self, width):
        with pytest.raises(ConfigurationError):
            KeyboardBuilder().set_width(width)

    def test_max_width_accepted(self):
        builder = KeyboardBuilder().set_width(MAX_WIDTH)
        assert builder.specification().width == 65408

    @pytest.mark.parametrize("left,right", [
        (22, 108),   # A#0 is black
        (21, 109),   # C#8 is black
        (60, 69),    # less than an octave
        (72, 60),    # reversed
        (-1, 60),
        (60, 128),
    ])
    def test_invalid_key_range(self, left, right):
        with pytest.raises(ConfigurationError):
            KeyboardBuilder().set_most_left_right_white_keys(left, right)

    def test_octave_span_accepted(self):
        spec = KeyboardBuilder().set_most_left_right_white_keys(60, 71).specification()
        assert spec.nr_of_white_keys == 7

    @pytest.mark.parametrize("size,keys", sorted(STANDARD_PIANOS.items()))
    def test_standard_pianos(self, size, keys):
        """Every standard size spans its number of keys."""
        spec = KeyboardBuilder().standard_piano(size).specification()
        assert (spec.left_white_key, spec.right_white_key) == keys
        assert spec.right_white_key - spec.left_white_key + 1 == size

    def test_unknown_standard_piano(self):
        with pytest.raises(ConfigurationError):
            KeyboardBuilder().standard_piano(42)

    def test_rd64(self):
        spec = KeyboardBuilder().is_rd64().specification()
        assert (spec.left_white_key, spec.right_white_key) == (33, 96)

    def test_gap_flag(self):
        spec = KeyboardBuilder().white_black_gap_present(False).specification()
        assert spec.need_black_gap is False

    def test_set_dimensions(self):
        spec = KeyboardBuilder().set_dimensions(black_key_width_10um=1050).specification()
        assert spec.black_key_width_10um == 1050

    def test_set_unknown_dimension(self):
        with pytest.raises(ConfigurationError):
            KeyboardBuilder().set_dimensions(key_depth_10um=100)

    def test_set_non_positive_dimension(self):
        with pytest.raises(ConfigurationError):
            KeyboardBuilder().set_dimensions(black_key_width_10um=0)

    def test_too_small_for_range_fails_at_build(self):
        """Width is checked against the key range only once both are known."""
        builder = KeyboardBuilder().set_width(300)
        with pytest.raises(ConfigurationError):
            builder.build()
        layout = builder.standard_piano(25).build()
        assert layout.width == 300

    def test_build_is_memoised(self):
        first = KeyboardBuilder().set_width(900).build()
        second = KeyboardBuilder().set_width(900).build()
        assert first is second
        assert compute_layout(KeyboardSpecification(width=900)) is first



class TestProportions:
    """Tests for non-default physical measures."""

    @pytest.mark.parametrize("dimensions", [
        {"black_key_width_10um": 3000},
        {"white_key_height_10um": 20000},
        {"white_key_small_width_fb_10um": 500, "white_key_small_width_ga_10um": 2000},
    ])
    def test_unsolvable_measures_rejected(self, dimensions):
        with pytest.raises(ConfigurationError):
            KeyboardBuilder().set_dimensions(**dimensions).set_width(800).build()

    def test_validate_rejects_wide_black_keys(self):
        spec = KeyboardSpecification(width=800, black_key_width_10um=3000)
        with pytest.raises(ConfigurationError):
            spec.validate()

    def test_min_width_follows_measures(self):
        """A wider key gap raises the minimum width above 10 pixels per white key."""
        spec = KeyboardSpecification(white_key_height_10um=13000)
        assert spec.min_width > 520
        with pytest.raises(ConfigurationError):
            KeyboardBuilder(spec).set_width(spec.min_width - 1).build()

    @pytest.mark.parametrize("dimensions", [
        {"black_key_width_10um": 1300, "white_key_height_10um": 13000,
         "white_key_small_width_fb_10um": 1200, "white_key_small_width_ga_10um": 1400},
        {"black_key_width_10um": 1600},
    ])
    @pytest.mark.parametrize("left,right", [(21, 108), (60, 71), (62, 74)])
    @pytest.mark.parametrize("need_black_gap", [True, False])
    def test_valid_measures_build(self, dimensions, left, right, need_black_gap):
        """Every width accepted by validation can be laid out."""
        builder = (KeyboardBuilder()
                   .set_dimensions(**dimensions)
                   .set_most_left_right_white_keys(left, right)
                   .white_black_gap_present(need_black_gap))
        min_width = builder.set_width(MAX_WIDTH).specification().min_width
        for width in range(min_width, min_width + 1500, 3):
            layout = builder.set_width(width).build()
            assert layout.width == width
            assert sum(r.width for r in layout.black_keys()) > 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
