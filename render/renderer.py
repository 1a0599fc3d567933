# render/renderer.py
import pygame
from typing import Optional, Sequence
from config import RenderConfig
from notes.model import NOTES, Tone, note_name
from render.layout import pitch_row_y, tone_rect, view_size, visible_indices

STATUS_H = 28
WHITE_SET = {0, 2, 4, 5, 7, 9, 11}

DARK_CHARCOAL = (47, 52, 54)
BLACK_LANE = (40, 44, 46)
TONE_FILL = (255, 255, 255, 128)
TONE_LIT = (255, 240, 170, 200)

class Renderer:
    def __init__(self, cfg: RenderConfig, font_path: Optional[str] = None):
        pygame.init()
        self.cfg = cfg
        self.screen = pygame.display.set_mode((cfg.window_w, cfg.window_h))
        pygame.display.set_caption("MIDI Notes Display")
        size = max(8, int(cfg.row_height * 0.75))
        if font_path:
            self.font = pygame.font.Font(font_path, size)
        else:
            self.font = pygame.font.SysFont("dejavusans,consolas", size)
        self.font_status = pygame.font.SysFont("consolas", 14)
        self.clock = pygame.time.Clock()
        # translucent tone bars are drawn here, then blitted
        self.layer = pygame.Surface((cfg.window_w, cfg.window_h), pygame.SRCALPHA)
        self._labels = {}

    def tick(self, fps=60) -> float:
        return self.clock.tick(fps) / 1000.0

    def view_size(self):
        return view_size(self.cfg, STATUS_H)

    def canvas_rect(self) -> pygame.Rect:
        vw, vh = self.view_size()
        return pygame.Rect(self.cfg.label_w, STATUS_H, int(vw), int(vh))

    def begin_frame(self):
        self.screen.fill(DARK_CHARCOAL)
        self.layer.fill((0, 0, 0, 0))

    def end_frame(self):
        pygame.display.flip()

    def _label(self, pitch: int, lit: bool) -> pygame.Surface:
        key = (pitch, lit)
        surf = self._labels.get(key)
        if surf is None:
            color = (255, 240, 170) if lit else (200, 200, 210)
            surf = self._labels[key] = self.font.render(note_name(pitch), True, color)
        return surf

    # ------- piano roll -------
    def draw_lanes(self, scroll_y: float, sounding: set[int]):
        canvas = self.canvas_rect()
        rh = self.cfg.row_height
        for p in range(NOTES):
            y = STATUS_H + pitch_row_y(p, self.cfg, scroll_y)
            if y + rh < STATUS_H or y > canvas.bottom:
                continue
            if (p % 12) not in WHITE_SET:
                pygame.draw.rect(self.screen, BLACK_LANE, (canvas.x, y, canvas.w, rh))
            label = self._label(p, p in sounding)
            self.screen.blit(label, (4, y + (rh - label.get_height()) / 2))
        pygame.draw.line(self.screen, (90, 90, 90), (canvas.x - 1, STATUS_H), (canvas.x - 1, canvas.bottom), 1)

    def draw_tones(self, tones: Sequence[Tone], starts: Sequence[int], max_len: int,
                   scroll_x: float, scroll_y: float, sounding: set[int]):
        if not tones:
            return
        canvas = self.canvas_rect()
        tw = max(1e-6, self.cfg.tick_width)
        x0 = scroll_x / tw
        x1 = (scroll_x + canvas.w) / tw
        for i in visible_indices(starts, max_len, x0, x1):
            t = tones[i]
            if t.end_time < x0:
                continue
            x, y, w, h = tone_rect(t, self.cfg, scroll_x, scroll_y)
            if y + h < 0 or y > canvas.h:
                continue
            color = TONE_LIT if t.pitch in sounding else TONE_FILL
            pygame.draw.rect(self.layer, color, (canvas.x + x, canvas.y + y, w, h - 1))
        prev_clip = self.screen.get_clip()
        self.screen.set_clip(canvas)
        self.screen.blit(self.layer, (0, 0))
        self.screen.set_clip(prev_clip)

    def draw_playhead(self, tick: float, scroll_x: float):
        canvas = self.canvas_rect()
        x = canvas.x + tick * self.cfg.tick_width - scroll_x
        if canvas.x <= x <= canvas.right:
            pygame.draw.line(self.screen, (255, 120, 90), (x, canvas.y), (x, canvas.bottom), 2)

    def draw_scrollbars(self, scroll_x: float, scroll_y: float, content_w: float, content_h: float):
        canvas = self.canvas_rect()
        t = self.cfg.scrollbar
        track_x = pygame.Rect(canvas.x, canvas.bottom, canvas.w, t)
        track_y = pygame.Rect(canvas.right, canvas.y, t, canvas.h)
        pygame.draw.rect(self.screen, (28, 28, 32), track_x)
        pygame.draw.rect(self.screen, (28, 28, 32), track_y)

        if content_w > 0:
            frac = min(1.0, canvas.w / content_w)
            w = max(t, canvas.w * frac)
            x = canvas.x + (canvas.w - w) * (scroll_x / max(1.0, content_w - canvas.w) if frac < 1.0 else 0.0)
            pygame.draw.rect(self.screen, (110, 110, 120), (x, track_x.y + 3, w, t - 6), border_radius=4)
        if content_h > 0:
            frac = min(1.0, canvas.h / content_h)
            h = max(t, canvas.h * frac)
            y = canvas.y + (canvas.h - h) * (scroll_y / max(1.0, content_h - canvas.h) if frac < 1.0 else 0.0)
            pygame.draw.rect(self.screen, (110, 110, 120), (track_y.x + 3, y, t - 6, h), border_radius=4)

    def draw_status_bar(self, text: str):
        pygame.draw.rect(self.screen, (24, 24, 28), (0, 0, self.cfg.window_w, STATUS_H))
        pygame.draw.line(self.screen, (60, 60, 66), (0, STATUS_H - 1), (self.cfg.window_w, STATUS_H - 1), 1)
        surf = self.font_status.render(text, True, (200, 200, 210))
        self.screen.blit(surf, (10, (STATUS_H - surf.get_height()) // 2))
