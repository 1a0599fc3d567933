# ========================= notes/reduction.py =========================
import logging
from itertools import chain
from typing import Iterator, List, Optional, Sequence, Tuple, Union
from config import ReductionConfig
from midi.events import Event, MidiData, NoteOff, NoteOn, Track
from notes.model import NOTES, Tone
from utils.filtered_scan import FilteredScanIter, filtered_scan

Tracks = Union[MidiData, Sequence[Track]]


class NoteTable:
    """Open (start_time, attack_velocity) per pitch; at most one per pitch."""
    __slots__ = ("_slots",)

    def __init__(self):
        self._slots: List[Optional[Tuple[int, int]]] = [None] * NOTES

    def open(self, pitch: int, time: int, velocity: int) -> bool:
        if self._slots[pitch] is not None:
            return False
        self._slots[pitch] = (time, velocity)
        return True

    def close(self, pitch: int) -> Optional[Tuple[int, int]]:
        held = self._slots[pitch]
        self._slots[pitch] = None
        return held

    def is_open(self, pitch: int) -> bool:
        return self._slots[pitch] is not None

    def open_pitches(self) -> List[int]:
        return [p for p, held in enumerate(self._slots) if held is not None]


class ScanState:
    __slots__ = ("time", "notes_on")

    def __init__(self):
        self.time = 0
        self.notes_on = NoteTable()


def _step(state: ScanState, event: Event) -> Optional[Tone]:
    state.time += event.delta_time
    payload = event.payload
    if isinstance(payload, NoteOn):
        # repeated note on keeps the first start and velocity
        state.notes_on.open(payload.pitch, state.time, payload.velocity)
        return None
    if isinstance(payload, NoteOff):
        held = state.notes_on.close(payload.pitch)
        if held is None:
            return None
        start_time, atk_vel = held
        return Tone(pitch=payload.pitch, start_time=start_time, end_time=state.time,
                    attack_velocity=atk_vel, release_velocity=payload.velocity)
    return None


def _tracks(data: Tracks) -> Sequence[Track]:
    return data.tracks if isinstance(data, MidiData) else data


def _events(data: Tracks) -> Iterator[Event]:
    return chain.from_iterable(_tracks(data))


def iter_tones(data: Tracks) -> FilteredScanIter[ScanState, Event, Tone]:
    """Lazily reduce all tracks (flattened, one clock) to tones in note-off order."""
    return filtered_scan(_events(data), ScanState(), _step)


def midi_to_tones(data: Tracks, cfg: Optional[ReductionConfig] = None) -> List[Tone]:
    cfg = cfg or ReductionConfig()
    it = iter_tones(data)
    tones = list(it)
    dangling = it.state.notes_on.open_pitches()
    if dangling:
        logging.debug("Dropping %d unclosed notes at end of stream: %s", len(dangling), dangling)
    if cfg.sort_by_start:
        tones.sort(key=lambda t: (t.start_time, t.pitch))
    logging.debug("Reduced to %d tones (end tick %d)", len(tones), it.state.time)
    return tones


def midi_duration(data: Tracks) -> int:
    return sum(e.delta_time for e in _events(data))
