# midi/parser.py
import logging
import mido
from typing import List
from midi.events import Event, MidiData, NoteOff, NoteOn, OtherEvent, Payload, Track


def _payload_from_message(msg: mido.Message) -> Payload:
    if msg.type == 'note_on' and msg.velocity > 0:
        return NoteOn(pitch=msg.note, velocity=msg.velocity, channel=msg.channel)
    if msg.type == 'note_off' or msg.type == 'note_on':
        # note_on with velocity 0 is a note off
        return NoteOff(pitch=msg.note, velocity=msg.velocity, channel=msg.channel)
    return OtherEvent(kind=msg.type)


def tracks_from_midifile(mid: mido.MidiFile) -> List[Track]:
    """Convert mido tracks to delta-timed events, keeping track order."""
    tracks: List[Track] = []
    for track in mid.tracks:
        # msg.time is the delta in ticks when iterating a single track
        tracks.append([Event(delta_time=msg.time, payload=_payload_from_message(msg)) for msg in track])
    return tracks


def load_midi(path: str) -> MidiData:
    mid = mido.MidiFile(path)
    tracks = tracks_from_midifile(mid)
    logging.info("Loaded %s: type=%d, %d tracks, %d events, tpb=%d",
                 path, mid.type, len(tracks), sum(len(t) for t in tracks), mid.ticks_per_beat)
    return MidiData(tracks=tracks, ticks_per_beat=mid.ticks_per_beat, path=path)
