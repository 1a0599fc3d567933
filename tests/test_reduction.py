"""Tests for the note-on/off reduction and the duration fold."""

from __future__ import annotations

import pytest

from config import ReductionConfig
from midi.events import Event, MidiData, NoteOff, NoteOn, OtherEvent
from notes.model import Tone
from notes.reduction import NoteTable, iter_tones, midi_duration, midi_to_tones

EMISSION = ReductionConfig(sort_by_start=False)


def on(dt: int, pitch: int, vel: int) -> Event:
    return Event(dt, NoteOn(pitch, vel))


def off(dt: int, pitch: int, vel: int) -> Event:
    return Event(dt, NoteOff(pitch, vel))


def other(dt: int, kind: str = "control_change") -> Event:
    return Event(dt, OtherEvent(kind))


# -----------------------------------------------------------------------
# Scenarios
# -----------------------------------------------------------------------

class TestScenarios:
    def test_single_pair(self) -> None:
        tones = midi_to_tones([[on(0, 60, 100), off(10, 60, 80)]])
        assert tones == [Tone(60, 0, 10, 100, 80)]

    def test_spurious_note_off(self) -> None:
        assert midi_to_tones([[off(5, 61, 50)]]) == []

    def test_first_note_on_wins(self) -> None:
        tones = midi_to_tones([[on(0, 60, 1), on(0, 60, 2), off(5, 60, 9)]])
        assert tones == [Tone(60, 0, 5, 1, 9)]

    def test_unclosed_note_dropped_but_counted_in_duration(self) -> None:
        tracks = [[on(0, 60, 10), other(20, "end_of_track")]]
        assert midi_to_tones(tracks) == []
        assert midi_duration(tracks) == 20

    def test_duplicate_note_on_keeps_original_start(self) -> None:
        tones = midi_to_tones([[on(3, 60, 70), on(4, 60, 90), off(5, 60, 0)]])
        assert tones == [Tone(60, 3, 12, 70, 0)]


# -----------------------------------------------------------------------
# Properties
# -----------------------------------------------------------------------

class TestReductionProperties:
    def test_zero_length_tone(self) -> None:
        tones = midi_to_tones([[other(7), on(0, 64, 90), off(0, 64, 40)]])
        assert tones == [Tone(64, 7, 7, 90, 40)]
        assert tones[0].duration == 0

    def test_other_events_advance_the_clock(self) -> None:
        tones = midi_to_tones([[on(0, 60, 100), other(4), other(6), off(0, 60, 0)]])
        assert tones[0].end_time == 10

    def test_pitches_are_independent(self) -> None:
        interleaved = [on(0, 60, 100), on(2, 62, 90), off(3, 60, 10), off(5, 62, 20)]
        only_60 = [on(0, 60, 100), off(5, 60, 10)]
        only_62 = [on(2, 62, 90), off(8, 62, 20)]

        tones = midi_to_tones([interleaved], EMISSION)
        assert [t for t in tones if t.pitch == 60] == midi_to_tones([only_60])
        assert [t for t in tones if t.pitch == 62] == midi_to_tones([only_62])

    def test_emission_order_is_by_end_time(self) -> None:
        # long C starts first and ends last; short E starts later, ends earlier
        events = [on(0, 60, 100), on(10, 64, 100), off(5, 64, 0), off(20, 60, 0)]
        tones = midi_to_tones([events], EMISSION)
        assert [t.pitch for t in tones] == [64, 60]
        assert [t.end_time for t in tones] == sorted(t.end_time for t in tones)

    def test_default_sorts_by_start(self) -> None:
        events = [on(0, 60, 100), on(10, 64, 100), off(5, 64, 0), off(20, 60, 0)]
        tones = midi_to_tones([events])
        assert [(t.start_time, t.pitch) for t in tones] == [(0, 60), (10, 64)]

    def test_sort_ties_break_by_pitch(self) -> None:
        events = [on(0, 67, 1), on(0, 60, 1), off(3, 67, 0), off(1, 60, 0)]
        tones = midi_to_tones([events])
        assert [t.pitch for t in tones] == [60, 67]

    def test_start_never_after_end(self) -> None:
        events = [
            on(0, 60, 1), off(0, 61, 1), on(3, 61, 2), on(1, 60, 3),
            off(2, 60, 4), off(0, 61, 5), off(9, 60, 6), on(1, 62, 7),
        ]
        tones = midi_to_tones([events])
        assert len(tones) == 2
        assert all(t.start_time <= t.end_time for t in tones)

    def test_reopen_after_close(self) -> None:
        events = [on(0, 60, 1), off(2, 60, 0), on(1, 60, 2), off(4, 60, 0)]
        tones = midi_to_tones([events], EMISSION)
        assert tones == [Tone(60, 0, 2, 1, 0), Tone(60, 3, 7, 2, 0)]

    def test_repeatable(self) -> None:
        tracks = [[on(0, 60, 100), off(10, 60, 80)], [on(1, 48, 50), off(1, 48, 0)]]
        assert midi_to_tones(tracks) == midi_to_tones(tracks)


# -----------------------------------------------------------------------
# Tracks
# -----------------------------------------------------------------------

class TestTracks:
    def test_tracks_share_one_clock(self) -> None:
        # the second track continues from where the first one ended
        tracks = [[other(100)], [on(0, 60, 100), off(10, 60, 0)]]
        assert midi_to_tones(tracks) == [Tone(60, 100, 110, 100, 0)]

    def test_note_closed_by_later_track(self) -> None:
        tracks = [[on(5, 60, 100)], [off(5, 60, 30)]]
        assert midi_to_tones(tracks) == [Tone(60, 5, 10, 100, 30)]

    def test_accepts_midi_data(self) -> None:
        song = MidiData(tracks=[[on(0, 60, 100), off(10, 60, 80)]], ticks_per_beat=96)
        assert midi_to_tones(song) == [Tone(60, 0, 10, 100, 80)]
        assert midi_duration(song) == 10

    def test_empty(self) -> None:
        assert midi_to_tones([]) == []
        assert midi_to_tones([[], []]) == []
        assert midi_duration([]) == 0
        assert midi_duration(MidiData()) == 0


class TestDuration:
    def test_sum_of_all_deltas(self) -> None:
        tracks = [[other(3), on(4, 60, 1)], [off(5, 60, 0), other(6)]]
        assert midi_duration(tracks) == 18

    def test_order_does_not_matter(self) -> None:
        tracks = [[other(3), other(4)], [other(5)], [other(6), other(7)]]
        reordered = [list(reversed(t)) for t in reversed(tracks)]
        assert midi_duration(tracks) == midi_duration(reordered) == 25


# -----------------------------------------------------------------------
# Laziness and state
# -----------------------------------------------------------------------

class TestIterTones:
    def test_is_lazy(self) -> None:
        pulled = []

        def track():
            for e in [on(0, 60, 1), off(1, 60, 0), on(1, 62, 1), off(1, 62, 0)]:
                pulled.append(e)
                yield e

        it = iter_tones([track()])
        assert pulled == []
        assert next(it).pitch == 60
        assert len(pulled) == 2
        assert next(it).pitch == 62
        assert len(pulled) == 4
        with pytest.raises(StopIteration):
            next(it)

    def test_state_after_pass(self) -> None:
        it = iter_tones([[on(0, 60, 1), on(2, 72, 1), off(3, 60, 0)]])
        assert list(it) == [Tone(60, 0, 5, 1, 0)]
        assert it.state.time == 5
        assert it.state.notes_on.open_pitches() == [72]

    def test_each_pass_starts_fresh(self) -> None:
        tracks = [[on(0, 60, 1)]]
        first = iter_tones(tracks)
        list(first)
        second = iter_tones([[off(4, 60, 0)]])
        assert list(second) == []
        assert first.state.notes_on.is_open(60)


class TestNoteTable:
    def test_open_close(self) -> None:
        table = NoteTable()
        assert table.open(60, 0, 100)
        assert not table.open(60, 5, 90)
        assert table.close(60) == (0, 100)
        assert table.close(60) is None
        assert not table.is_open(60)

    def test_covers_full_pitch_range(self) -> None:
        table = NoteTable()
        assert table.open(0, 1, 1)
        assert table.open(127, 2, 2)
        assert table.open_pitches() == [0, 127]
