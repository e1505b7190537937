"""
Keyboard Specification

Validated, immutable description of the keyboard to lay out: key range,
target pixel width and the physical proportions of a real piano.

Physical measures are integers in units of 10 micrometers.
Source of the measures: http://www.rwgiangiulio.com/construction/manual/layout.jpg
"""

from typing import List
from dataclasses import dataclass, fields

from .errors import ConfigurationError
from .keys import KeySpec, KeyClass, key_class, white_keys_between


# Largest width whose geometry still fits into unsigned 16 bit coordinates
MAX_WIDTH = 65535 - 127

# Below this many pixels per white key the sub-widths degenerate
MIN_PIXELS_PER_WHITE_KEY = 10

MIN_SPAN = 11  # one octave between two white keys


@dataclass(frozen=True)
class KeyboardSpecification:
    """Keyboard configuration. Defaults describe an 88 key piano (A0 to C8)."""
    left_white_key: int = 21
    right_white_key: int = 108
    width: int = 640
    need_black_gap: bool = True

    white_key_wide_width_10um: int = 2215
    white_key_small_width_fb_10um: int = 1283
    white_key_small_width_ga_10um: int = 1308
    black_key_width_10um: int = 1100
    black_key_height_10um: int = 8000
    white_key_height_10um: int = 12627
    white_key_wide_height_10um: int = 4500

    @property
    def key_gap_10um(self) -> int:
        """Gap between white keys, derived from the white key height."""
        return (self.white_key_height_10um - self.black_key_height_10um
                - self.white_key_wide_height_10um)

    @property
    def white_keys(self) -> List[int]:
        return white_keys_between(self.left_white_key, self.right_white_key)

    @property
    def nr_of_white_keys(self) -> int:
        return len(self.white_keys)

    @property
    def keyboard_width_10um(self) -> int:
        """Physical width including the gaps left and right of the outer keys."""
        return ((self.white_key_wide_width_10um + self.key_gap_10um)
                * self.nr_of_white_keys + self.key_gap_10um)

    @property
    def min_width(self) -> int:
        """
        Smallest width whose upper row parts all stay positive.

        Each bound is a scale (pixels per 10 um) of ``pixels / measure_10um``
        below which rounding may eat a whole black key, white part or gap.
        Bounds with a non-positive measure are left to check_proportions().
        """
        wide = self.white_key_wide_width_10um
        black = self.black_key_width_10um
        gap = self.key_gap_10um
        pair = self.white_key_small_width_fb_10um + self.white_key_small_width_ga_10um
        narrow = min(self.white_key_small_width_fb_10um, self.white_key_small_width_ga_10um)
        keyboard_width_10um = self.keyboard_width_10um

        bounds = [
            (10, 3 * wide - 2 * black - 2 * gap),              # c/d/e parts
            (11 * narrow + 4 * pair, (4 * wide - 3 * black - 3 * gap) * narrow),  # f/b and g/a pairs
            (10, 2 * wide - black - gap),                      # first and last key of a group
            (38, 7 * wide - gap),                              # first key A
            (wide + black, black * wide),                      # black key at least 1 pixel
        ]
        width = MIN_PIXELS_PER_WHITE_KEY * self.nr_of_white_keys
        for pixels, measure in bounds:
            if measure > 0:
                width = max(width, -(-pixels * keyboard_width_10um // measure))
        return width

    def check_proportions(self) -> None:
        """
        Reject physical measures the upper row cannot be split into.

        Raises:
            ConfigurationError: On the first violated proportion
        """
        wide = self.white_key_wide_width_10um
        black = self.black_key_width_10um
        gap = self.key_gap_10um
        fb = self.white_key_small_width_fb_10um
        ga = self.white_key_small_width_ga_10um

        if gap <= 0:
            raise ConfigurationError(
                "white key height must exceed black key height plus wide part height"
            )
        if black >= wide:
            raise ConfigurationError(
                f"black key width {black} must be smaller than white key width {wide}"
            )
        if gap >= wide:
            raise ConfigurationError(f"key gap {gap} must be smaller than white key width {wide}")
        if 2 * black + 4 * gap >= 3 * wide + 2 * gap:
            raise ConfigurationError("two black keys and their gaps do not fit into C, D and E")
        if 3 * black + 6 * gap >= 4 * wide + 3 * gap:
            raise ConfigurationError("three black keys and their gaps do not fit into F, G, A and B")
        # f/b and g/a parts within 2:3 of each other
        if 5 * fb > 3 * (fb + ga) or 5 * ga > 3 * (fb + ga):
            raise ConfigurationError(
                f"small widths f/b={fb} and g/a={ga} are too far apart"
            )

    def count_class(self, cls: KeyClass) -> int:
        return sum(1 for key in self.white_keys if key_class(key) == cls)

    def validate(self) -> 'KeyboardSpecification':
        """
        Check every constraint the solvers rely on.

        Returns:
            self, to allow chaining

        Raises:
            ConfigurationError: On the first violated constraint
        """
        validate_key_range(self.left_white_key, self.right_white_key)
        validate_width(self.width)

        for f in fields(self):
            if f.name.endswith('_10um') and getattr(self, f.name) <= 0:
                raise ConfigurationError(f"{f.name} must be positive")
        self.check_proportions()

        if self.width < self.min_width:
            raise ConfigurationError(
                f"width {self.width} is too small for {self.nr_of_white_keys} "
                f"white keys (minimum {self.min_width})"
            )
        return self


def validate_width(width: int) -> None:
    if not isinstance(width, int) or isinstance(width, bool):
        raise ConfigurationError(f"width must be an integer, got {width!r}")
    if width < 1:
        raise ConfigurationError(f"width must be positive, got {width}")
    if width > MAX_WIDTH:
        raise ConfigurationError(f"width {width} exceeds maximum {MAX_WIDTH}")


def validate_key_range(left: int, right: int) -> None:
    left_key = KeySpec.from_number(left)
    right_key = KeySpec.from_number(right)
    if left > right:
        raise ConfigurationError(
            f"left key {left} must be left of right key {right}"
        )
    if not left_key.is_white:
        raise ConfigurationError(f"left key {left} ({left_key.name}) is not white")
    if not right_key.is_white:
        raise ConfigurationError(f"right key {right} ({right_key.name}) is not white")
    if right - left < MIN_SPAN:
        raise ConfigurationError(
            f"keyboard must span at least one octave, got {left}..{right}"
        )
