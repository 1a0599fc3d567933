# timeline/scheduler.py
import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from itertools import chain
from typing import Dict, Iterable, Iterator, List, Optional
from notes.model import Tone
from utils.filtered_scan import FilteredScanIter, filtered_scan
from utils.pair_iter import PairIter

OFF, TAP, ON = 0, 1, 2  # order of edges sharing a tick


@dataclass(frozen=True)
class Edge:
    tick: int
    kind: int
    pitch: int


class EdgeState:
    __slots__ = ("first", "last", "skipped")

    def __init__(self, first: int, last: int):
        self.first = first
        self.last = last
        self.skipped = 0


def _tone_edges(state: EdgeState, tone: Tone) -> Optional[PairIter[Edge]]:
    if not (state.first <= tone.pitch <= state.last):
        state.skipped += 1
        return None
    if tone.start_time == tone.end_time:
        return PairIter(Edge(tone.start_time, TAP, tone.pitch))
    return PairIter(Edge(tone.start_time, ON, tone.pitch), Edge(tone.end_time, OFF, tone.pitch))


def edge_scan(tones: Iterable[Tone], first: int = 0,
              last: int = 127) -> FilteredScanIter[EdgeState, Tone, PairIter[Edge]]:
    """One PairIter per tone inside [first,last]; state.skipped counts the rest."""
    return filtered_scan(tones, EdgeState(first, last), _tone_edges)


def tone_edges(tones: Iterable[Tone], first: int = 0, last: int = 127) -> Iterator[Edge]:
    """on/off edges per tone, a single tap for zero-length tones."""
    return chain.from_iterable(edge_scan(tones, first, last))


@dataclass
class Step:
    started: List[int] = field(default_factory=list)
    stopped: List[int] = field(default_factory=list)
    tapped: List[int] = field(default_factory=list)


class Timeline:
    """Playhead over tone edges, in ticks.
    The renderer asks it which pitches are sounding at the playhead.
    """
    def __init__(self, tones: Iterable[Tone], first: int = 0, last: int = 127):
        scan = edge_scan(tones, first, last)
        self.edges = sorted(chain.from_iterable(scan), key=lambda e: (e.tick, e.kind, e.pitch))
        self.skipped = scan.state.skipped
        if self.skipped:
            logging.debug("Timeline: %d tones outside pitches [%d, %d] left out", self.skipped, first, last)
        self._ticks = [e.tick for e in self.edges]
        self.i = 0
        self.time = 0.0
        self.sounding: set[int] = set()

    @property
    def finished(self) -> bool:
        return self.i >= len(self.edges)

    def advance(self, ticks: float) -> Step:
        """Move forward and report every edge at or before the new position."""
        self.time += ticks
        step = Step()
        while self.i < len(self.edges) and self.edges[self.i].tick <= self.time:
            e = self.edges[self.i]
            if e.kind == ON:
                self.sounding.add(e.pitch); step.started.append(e.pitch)
            elif e.kind == OFF:
                self.sounding.discard(e.pitch); step.stopped.append(e.pitch)
            else:
                step.tapped.append(e.pitch)
            self.i += 1
        return step

    def seek(self, tick: float):
        self.time = max(0.0, float(tick))
        self.i = bisect_right(self._ticks, self.time)
        self.sounding.clear()
        for e in self.edges[: self.i]:
            if e.kind == ON:
                self.sounding.add(e.pitch)
            elif e.kind == OFF:
                self.sounding.discard(e.pitch)


class TapFlash:
    """Keeps zero-length tones lit for a moment after the playhead crosses them."""
    def __init__(self, hold: float = 0.15):
        self.hold = hold
        self._left: Dict[int, float] = {}

    def hit(self, pitches: Iterable[int]):
        for p in pitches:
            self._left[p] = self.hold

    def decay(self, dt: float):
        self._left = {p: t - dt for p, t in self._left.items() if t - dt > 0}

    def clear(self):
        self._left.clear()

    @property
    def pitches(self) -> set[int]:
        return set(self._left)
