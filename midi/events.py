# midi/events.py
from dataclasses import dataclass, field
from typing import List, Optional, Union

MAX_DELTA = 2 ** 32 - 1


def _check_range(name: str, value: int, lo: int, hi: int):
    if not (lo <= value <= hi):
        raise ValueError(f"{name} must be in [{lo},{hi}], got {value!r}")


@dataclass(frozen=True)
class NoteOn:
    pitch: int
    velocity: int
    channel: int = 0

    def __post_init__(self):
        _check_range("pitch", self.pitch, 0, 127)
        _check_range("velocity", self.velocity, 0, 255)
        _check_range("channel", self.channel, 0, 15)


@dataclass(frozen=True)
class NoteOff:
    pitch: int
    velocity: int
    channel: int = 0

    def __post_init__(self):
        _check_range("pitch", self.pitch, 0, 127)
        _check_range("velocity", self.velocity, 0, 255)
        _check_range("channel", self.channel, 0, 15)


@dataclass(frozen=True)
class OtherEvent:
    """Any message the note reduction does not look at (meta, CC, sysex...)."""
    kind: str


Payload = Union[NoteOn, NoteOff, OtherEvent]


@dataclass(frozen=True)
class Event:
    delta_time: int   # ticks since previous event in the same track
    payload: Payload

    def __post_init__(self):
        _check_range("delta_time", self.delta_time, 0, MAX_DELTA)


Track = List[Event]


@dataclass
class MidiData:
    tracks: List[Track] = field(default_factory=list)
    ticks_per_beat: int = 480
    path: Optional[str] = None
