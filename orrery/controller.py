#!/usr/bin/env python3
"""
Scene controller: the explicit context shared by the viewport and the panel.

One SceneController is created in main() and handed to both the renderer thread
and the Dear PyGui panel. It owns the current preset's specs, the renderable
tree built from them, the animation clock and the display toggles. Every access
goes through a re-entrant lock, so animation steps never overlap.
"""
import logging
import threading
import time
from typing import Callable, List, Optional, Sequence

from .data_models import BodySpec, RenderableBody, SceneRoot
from .orbits import build, step

logger = logging.getLogger(__name__)


class SceneController:
    """
    Shared state between the panel thread (Dear PyGui) and the viewport thread.
    Includes thread-safe operations guarded by a lock.
    """
    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self.lock = threading.RLock()
        self.running = True  # app running
        self.playing = True  # animation running
        self.show_orbits = False
        self.show_skybox = True
        self.preset_name: Optional[str] = None
        self.selected_name: Optional[str] = None
        self.scene_version = 0

        self.scene = SceneRoot()
        self.roots: List[RenderableBody] = []
        self.specs: List[BodySpec] = []

        self._clock = clock
        self._started_at = clock()
        self._paused_at: Optional[float] = None
        self._frame_count = 0

    # -----------------------
    # Scene lifecycle
    # -----------------------

    def replace_specs(self, specs: Sequence[BodySpec], name: Optional[str] = None):
        """Build a fresh tree for specs and swap it in; the previous tree is dropped."""
        scene = SceneRoot()
        roots, spec_list = build(specs, scene)
        with self.lock:
            self.scene = scene
            self.roots = roots
            self.specs = spec_list
            self.preset_name = name
            self.selected_name = roots[0].name if roots else None
            self.scene_version += 1
            self._frame_count = 0
        logger.info("Scene '%s' built: %d bodies", name, sum(1 for _ in scene.walk()))

    # -----------------------
    # Clock and animation
    # -----------------------

    def elapsed(self) -> float:
        """Seconds since start, not counting time spent paused."""
        with self.lock:
            now = self._paused_at if self._paused_at is not None else self._clock()
            return now - self._started_at

    def set_playing(self, playing: bool):
        with self.lock:
            if playing == self.playing:
                return
            now = self._clock()
            if playing:
                if self._paused_at is not None:
                    self._started_at += now - self._paused_at
                self._paused_at = None
            else:
                self._paused_at = now
            self.playing = playing

    def toggle_playing(self) -> bool:
        with self.lock:
            self.set_playing(not self.playing)
            return self.playing

    def advance(self):
        """One animation step; called once per displayed frame while playing."""
        with self.lock:
            step(self.elapsed(), self.roots, self.specs)
            self._frame_count += 1

    def frame(self):
        with self.lock:
            if self.playing:
                self.advance()

    @property
    def frame_count(self) -> int:
        with self.lock:
            return self._frame_count

    # -----------------------
    # Selection
    # -----------------------

    def body_names(self) -> List[str]:
        with self.lock:
            return [node.name for node in self.scene.walk()]

    def select(self, name: str):
        with self.lock:
            if name in self.body_names():
                self.selected_name = name

    def get_selected_body(self) -> Optional[RenderableBody]:
        with self.lock:
            for node in self.scene.walk():
                if node.name == self.selected_name:
                    return node
            return None
