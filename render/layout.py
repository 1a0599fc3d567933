# render/layout.py
from bisect import bisect_left, bisect_right
from typing import Sequence, Tuple
from config import RenderConfig
from notes.model import NOTES, Tone


def pitch_row_y(pitch: int, cfg: RenderConfig, scroll_y: float) -> float:
    # highest pitch on top
    return (NOTES - 1 - pitch) * cfg.row_height - scroll_y


def tone_rect(tone: Tone, cfg: RenderConfig, scroll_x: float, scroll_y: float) -> Tuple[float, float, float, float]:
    """(x, y, w, h) of a tone bar relative to the canvas; zero-length tones stay 1px wide."""
    x = tone.start_time * cfg.tick_width - scroll_x
    w = max(1.0, tone.duration * cfg.tick_width)
    return x, pitch_row_y(tone.pitch, cfg, scroll_y), w, cfg.row_height


def visible_indices(starts: Sequence[int], max_len: int, x0: float, x1: float) -> range:
    """Candidates for ticks [x0, x1] in a start-sorted tone list.

    Nothing starting before x0 - max_len can still be sounding at x0, so the
    search is exact; callers still skip tones that ended before x0.
    """
    lo = bisect_left(starts, x0 - max_len)
    hi = bisect_right(starts, x1)
    return range(lo, max(lo, hi))


def content_size(duration: int, cfg: RenderConfig) -> Tuple[float, float]:
    return duration * cfg.tick_width, NOTES * cfg.row_height


def clamp_scroll(scroll: float, content: float, view: float) -> float:
    return min(max(0.0, scroll), max(0.0, content - view))


def view_size(cfg: RenderConfig, status_h: int) -> Tuple[float, float]:
    """Canvas area left after the label column, status bar and scrollbars."""
    return (max(1.0, float(cfg.window_w - cfg.label_w - cfg.scrollbar)),
            max(1.0, float(cfg.window_h - status_h - cfg.scrollbar)))
