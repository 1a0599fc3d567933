# app.py
import os
import logging
import pygame
from typing import List
from config import AppConfig
from midi.events import MidiData
from notes.model import Tone
from notes.reduction import midi_duration, midi_to_tones
from render.layout import clamp_scroll, content_size, pitch_row_y
from render.renderer import Renderer
from timeline.scheduler import TapFlash, Timeline

ZOOM_STEP = 1.25

class App:
    def __init__(self, cfg: AppConfig, song: MidiData, font_path: str | None = None):
        self.cfg = cfg
        self.renderer = Renderer(cfg.render, font_path=font_path)

        self.song = song
        self.tones: List[Tone] = midi_to_tones(song, cfg.reduce)
        self.duration = midi_duration(song)

        # drawing needs start order whatever order the reduction returned
        self.tones_sorted: List[Tone] = sorted(self.tones, key=lambda t: (t.start_time, t.pitch))
        self.tone_starts: List[int] = [t.start_time for t in self.tones_sorted]
        self.max_len = max((t.duration for t in self.tones_sorted), default=0)

        self.timeline = Timeline(self.tones_sorted)
        self.taps = TapFlash()
        self.is_playing = False
        self.scroll_x = 0.0
        self.scroll_y = self._initial_scroll_y()
        logging.info("%d tones, duration %d ticks", len(self.tones), self.duration)

    def _initial_scroll_y(self) -> float:
        if not self.tones:
            return 0.0
        top = max(t.pitch for t in self.tones)
        y = pitch_row_y(top, self.cfg.render, 0.0) - 2 * self.cfg.render.row_height
        return self._clamp_y(y)

    # ---------- scrolling ----------
    def _content(self):
        return content_size(self.duration, self.cfg.render)

    def _clamp_x(self, x: float) -> float:
        return clamp_scroll(x, self._content()[0], self.renderer.view_size()[0])

    def _clamp_y(self, y: float) -> float:
        return clamp_scroll(y, self._content()[1], self.renderer.view_size()[1])

    def _scroll(self, dx: float, dy: float):
        self.scroll_x = self._clamp_x(self.scroll_x + dx)
        self.scroll_y = self._clamp_y(self.scroll_y + dy)

    def _zoom(self, factor: float):
        rc = self.cfg.render
        left_tick = self.scroll_x / rc.tick_width
        rc.tick_width = max(0.01, min(64.0, rc.tick_width * factor))
        self.scroll_x = self._clamp_x(left_tick * rc.tick_width)

    def _follow_playhead(self):
        vw, _ = self.renderer.view_size()
        x = self.timeline.time * self.cfg.render.tick_width
        if x > self.scroll_x + vw * 0.9 or x < self.scroll_x:
            self.scroll_x = self._clamp_x(x - vw * 0.1)

    def _rewind(self):
        self.timeline.seek(0)
        self.taps.clear()
        self.scroll_x = 0.0

    # ---------- Main loop ----------
    def handle_event(self, e) -> bool:
        """Returns False when the app should quit."""
        rc = self.cfg.render
        vw, _ = self.renderer.view_size()
        if e.type == pygame.QUIT:
            return False
        if e.type == pygame.KEYDOWN:
            if e.key == pygame.K_ESCAPE:
                return False
            if e.key == pygame.K_SPACE:
                if self.timeline.finished:
                    self._rewind()
                self.is_playing = not self.is_playing
            elif e.key == pygame.K_HOME:
                self._rewind()
            elif e.key == pygame.K_LEFT:
                self._scroll(-vw * 0.1, 0)
            elif e.key == pygame.K_RIGHT:
                self._scroll(vw * 0.1, 0)
            elif e.key == pygame.K_UP:
                self._scroll(0, -4 * rc.row_height)
            elif e.key == pygame.K_DOWN:
                self._scroll(0, 4 * rc.row_height)
            elif e.key in (pygame.K_KP_PLUS, pygame.K_PLUS, pygame.K_EQUALS):
                self._zoom(ZOOM_STEP)
            elif e.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                self._zoom(1 / ZOOM_STEP)
        elif e.type == pygame.MOUSEWHEEL:
            step = 3 * rc.row_height
            if pygame.key.get_mods() & pygame.KMOD_SHIFT:
                self._scroll(-e.y * step, 0)
            else:
                self._scroll(-e.x * step, -e.y * step)
        return True

    def status_text(self) -> str:
        name = os.path.basename(self.song.path) if self.song.path else "(untitled)"
        return "  |  ".join([
            name,
            f"TONES: {len(self.tones)}",
            f"DURATION: {self.duration} ticks",
            f"TICK: {int(self.timeline.time)}",
            f"PLAY: {'ON' if self.is_playing else 'OFF'}",
        ])

    def run(self):
        rc = self.cfg.render
        running = True
        while running:
            dt = self.renderer.tick(rc.fps)
            for e in pygame.event.get():
                if not self.handle_event(e):
                    running = False
            if not running:
                break

            self.taps.decay(dt)
            if self.is_playing:
                step = self.timeline.advance(dt * rc.ticks_per_second)
                self.taps.hit(step.tapped)
                self._follow_playhead()
                if self.timeline.finished and self.timeline.time >= self.duration:
                    self.is_playing = False

            content_w, content_h = self._content()
            sounding = self.timeline.sounding | self.taps.pitches
            self.renderer.begin_frame()
            self.renderer.draw_lanes(self.scroll_y, sounding)
            self.renderer.draw_tones(self.tones_sorted, self.tone_starts, self.max_len,
                                     self.scroll_x, self.scroll_y, sounding)
            self.renderer.draw_playhead(self.timeline.time, self.scroll_x)
            self.renderer.draw_scrollbars(self.scroll_x, self.scroll_y, content_w, content_h)
            self.renderer.draw_status_bar(self.status_text())
            self.renderer.end_frame()
        pygame.quit()
