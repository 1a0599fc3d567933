# notes/model.py
from dataclasses import dataclass
from typing import Tuple

NOTES = 128

_PITCH_CLASSES = ("C", "C♯", "D", "D♯", "E", "F", "F♯", "G", "G♯", "A", "A♯", "B")
_SUBSCRIPT = str.maketrans("-0123456789", "₋₀₁₂₃₄₅₆₇₈₉")

# pitch -> display name, C₋₂ .. G₈; octave number steps up at A
NOTE_NAMES: Tuple[str, ...] = tuple(
    _PITCH_CLASSES[p % 12] + str((p + 3) // 12 - 2).translate(_SUBSCRIPT)
    for p in range(NOTES)
)


def note_name(pitch: int) -> str:
    if not (0 <= pitch < NOTES):
        raise ValueError(f"pitch must be in [0,{NOTES - 1}], got {pitch!r}")
    return NOTE_NAMES[pitch]


@dataclass(frozen=True)
class Tone:
    pitch: int             # MIDI note number
    start_time: int        # ticks
    end_time: int          # ticks
    attack_velocity: int
    release_velocity: int

    def __post_init__(self):
        if not (0 <= self.pitch < NOTES):
            raise ValueError(f"Tone pitch must be in [0,{NOTES - 1}], got {self.pitch!r}")
        if self.end_time < self.start_time:
            raise ValueError(f"Tone end_time {self.end_time} < start_time {self.start_time}")

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def name(self) -> str:
        return NOTE_NAMES[self.pitch]
