"""
Key Classification

Classifies MIDI key numbers into white/black keys and octave-relative
classes (C, C#, D, ... B).

Usage:
    from piano_keyboard.keyboard.keys import is_white, key_class, KeyClass

    is_white(60)          # True, middle C
    key_class(61)         # KeyClass.CS
"""

from enum import IntEnum
from typing import List
from dataclasses import dataclass

from .errors import ConfigurationError


MIDI_MIN = 0
MIDI_MAX = 127


class KeyClass(IntEnum):
    """Octave-relative key class, value is ``key % 12``."""
    C = 0
    CS = 1
    D = 2
    DS = 3
    E = 4
    F = 5
    FS = 6
    G = 7
    GS = 8
    A = 9
    AS = 10
    B = 11


# Note names for each position in an octave
NOTE_NAMES = ['C', 'C#', 'D', 'D#', 'E', 'F', 'F#', 'G', 'G#', 'A', 'A#', 'B']

# Black key indices within octave
BLACK_KEY_POSITIONS = {1, 3, 6, 8, 10}  # C#, D#, F#, G#, A#

CDE_CLASSES = (KeyClass.C, KeyClass.D, KeyClass.E)
FGAB_CLASSES = (KeyClass.F, KeyClass.G, KeyClass.A, KeyClass.B)
WHITE_CLASSES = CDE_CLASSES + FGAB_CLASSES


def key_class(key: int) -> KeyClass:
    """Octave-relative class of a key number."""
    return KeyClass(key % 12)


def is_black(key: int) -> bool:
    return key % 12 in BLACK_KEY_POSITIONS


def is_white(key: int) -> bool:
    return not is_black(key)


def note_name(key: int) -> str:
    """Note name with octave, e.g. 60 -> "C4", 21 -> "A0"."""
    octave = (key // 12) - 1
    return f"{NOTE_NAMES[key % 12]}{octave}"


def white_keys_between(left: int, right: int) -> List[int]:
    """All white key numbers in the inclusive range [left, right]."""
    return [key for key in range(left, right + 1) if is_white(key)]


@dataclass(frozen=True)
class KeySpec:
    """Classification of a single MIDI key number."""
    number: int

    @classmethod
    def from_number(cls, key: int) -> 'KeySpec':
        """
        Create a KeySpec, validating the MIDI range.

        Raises:
            ConfigurationError: If key is outside 0-127
        """
        if not isinstance(key, int) or not MIDI_MIN <= key <= MIDI_MAX:
            raise ConfigurationError(
                f"key {key!r} is outside the MIDI range {MIDI_MIN}-{MIDI_MAX}"
            )
        return cls(key)

    @property
    def key_class(self) -> KeyClass:
        return key_class(self.number)

    @property
    def is_white(self) -> bool:
        return is_white(self.number)

    @property
    def is_black(self) -> bool:
        return is_black(self.number)

    @property
    def name(self) -> str:
        return note_name(self.number)

    @property
    def in_cde_group(self) -> bool:
        return self.key_class in CDE_CLASSES

    @property
    def in_fgab_group(self) -> bool:
        return self.key_class in FGAB_CLASSES
