# ========================= config.py =========================
from dataclasses import dataclass, field

@dataclass
class RenderConfig:
    window_w: int = 800
    window_h: int = 600
    tick_width: float = 1.0      # px per tick
    row_height: float = 16.0     # px per pitch row
    label_w: int = 56            # pitch name column
    scrollbar: int = 20
    fps: int = 60
    ticks_per_second: float = 480.0  # playhead speed, raw ticks

@dataclass
class ReductionConfig:
    sort_by_start: bool = True   # False keeps note-off (emission) order

@dataclass
class AppConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    reduce: ReductionConfig = field(default_factory=ReductionConfig)
