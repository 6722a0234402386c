#!/usr/bin/env python3
"""
Damped orbit camera for the 3D viewport.

The camera circles a target point on a sphere described by an azimuth (theta,
measured around +y from the +z axis), a polar angle (phi, from +y) and a
radius. Mouse input only accumulates deltas; update() applies a damped share of
them each frame so motion eases out after the mouse is released.

The viewport thread drives update() while the panel thread may reset the pose
or change limits, so every public method holds the camera's lock.
"""
import math
import threading
from typing import Sequence, Tuple
from .constants import (
    CAMERA_FOV,
    CAMERA_NEAR,
    CAMERA_FAR,
    CAMERA_START_POSITION,
    CAMERA_TARGET,
    MIN_CAMERA_DISTANCE,
    MAX_CAMERA_DISTANCE,
    DAMPING_FACTOR,
    ROTATE_SPEED,
    PAN_SPEED,
    VIEW_WIDTH,
    VIEW_HEIGHT,
)
from .vector_utils import Vec3, clamp, vec_add, vec_cross, vec_len, vec_norm, vec_scale, vec_sub

POLAR_EPSILON = 1e-6
WORLD_UP = (0.0, 1.0, 0.0)


class OrbitCamera:
    """
    Perspective camera orbiting a target, with damping and distance limits.

    Attributes:
        target: world-space point the camera looks at, kept as a mutable list.
        theta, phi, radius: spherical offset of the eye from the target.
        damping: share of the pending motion applied per update (0 disables damping).
        viewport_size: (width, height) in pixels; aspect follows it.
        lock: re-entrant lock guarding all of the above.
    """

    def __init__(self, position: Sequence[float] = CAMERA_START_POSITION,
                 target: Sequence[float] = CAMERA_TARGET,
                 fov: float = CAMERA_FOV,
                 min_distance: float = MIN_CAMERA_DISTANCE,
                 max_distance: float = MAX_CAMERA_DISTANCE,
                 damping: float = DAMPING_FACTOR):
        self.lock = threading.RLock()
        self.fov = fov
        self.near = CAMERA_NEAR
        self.far = CAMERA_FAR
        self.min_distance = min_distance
        self.max_distance = max_distance
        self.damping = damping
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)
        self._start = (tuple(position), tuple(target))
        self.look_from(position, target)

    @property
    def aspect(self) -> float:
        w, h = self.viewport_size
        return w / max(h, 1)

    def set_aspect(self, w: int, h: int) -> None:
        with self.lock:
            self.viewport_size = (w, h)

    def set_damping(self, damping: float) -> None:
        with self.lock:
            self.damping = clamp(float(damping), 0.0, 1.0)

    def set_distance_limits(self, min_distance: float, max_distance: float) -> None:
        """Change the zoom range; the current distance is pulled inside it at once."""
        if min_distance <= 0 or max_distance < min_distance:
            raise ValueError("distance limits need 0 < min <= max")
        with self.lock:
            self.min_distance = min_distance
            self.max_distance = max_distance
            self.radius = clamp(self.radius, min_distance, max_distance)

    def look_from(self, position: Sequence[float], target: Sequence[float]) -> None:
        """Place the eye at position looking at target and drop any pending motion."""
        with self.lock:
            self.target = [float(target[0]), float(target[1]), float(target[2])]
            offset = vec_sub(tuple(position), tuple(self.target))
            self.radius = clamp(vec_len(offset), self.min_distance, self.max_distance)
            self.theta = math.atan2(offset[0], offset[2])
            r = vec_len(offset)
            self.phi = math.acos(clamp(offset[1] / r, -1.0, 1.0)) if r > 0 else math.pi / 2
            self.phi = clamp(self.phi, POLAR_EPSILON, math.pi - POLAR_EPSILON)
            self._d_theta = 0.0
            self._d_phi = 0.0
            self._scale = 1.0
            self._pan = (0.0, 0.0, 0.0)

    def reset(self) -> None:
        position, target = self._start
        self.look_from(position, target)

    # -----------------------
    # Input
    # -----------------------

    def rotate_pixels(self, dx_pixels: float, dy_pixels: float) -> None:
        with self.lock:
            h = max(self.viewport_size[1], 1)
            self._d_theta -= 2 * math.pi * dx_pixels / h * ROTATE_SPEED
            self._d_phi -= 2 * math.pi * dy_pixels / h * ROTATE_SPEED

    def zoom(self, factor: float) -> None:
        """Scale the eye distance; factor < 1 moves closer."""
        with self.lock:
            self._scale *= clamp(factor, 0.05, 20.0)

    def pan_pixels(self, dx_pixels: float, dy_pixels: float) -> None:
        with self.lock:
            # world units per pixel at the target's depth
            h = max(self.viewport_size[1], 1)
            per_px = 2.0 * self.radius * math.tan(math.radians(self.fov) / 2.0) / h * PAN_SPEED
            right, up = self.basis()
            move = vec_add(vec_scale(right, -dx_pixels * per_px), vec_scale(up, dy_pixels * per_px))
            self._pan = vec_add(self._pan, move)

    # -----------------------
    # Per-frame
    # -----------------------

    def update(self) -> None:
        with self.lock:
            share = self.damping if self.damping > 0 else 1.0
            self.theta += self._d_theta * share
            self.phi = clamp(self.phi + self._d_phi * share, POLAR_EPSILON, math.pi - POLAR_EPSILON)
            self.radius = clamp(self.radius * self._scale, self.min_distance, self.max_distance)
            self.target = list(vec_add(tuple(self.target), vec_scale(self._pan, share)))

            keep = 1.0 - share
            self._d_theta *= keep
            self._d_phi *= keep
            self._pan = vec_scale(self._pan, keep)
            self._scale = 1.0

    def position(self) -> Vec3:
        with self.lock:
            sin_phi = math.sin(self.phi)
            offset = (self.radius * sin_phi * math.sin(self.theta),
                      self.radius * math.cos(self.phi),
                      self.radius * sin_phi * math.cos(self.theta))
            return vec_add(tuple(self.target), offset)

    def view(self) -> Tuple[Vec3, Vec3]:
        """Return a consistent (eye, target) pair for gluLookAt."""
        with self.lock:
            return self.position(), tuple(self.target)

    def basis(self) -> Tuple[Vec3, Vec3]:
        """Return the camera's (right, up) unit vectors in world space."""
        with self.lock:
            forward = vec_norm(vec_sub(tuple(self.target), self.position()))
        right = vec_norm(vec_cross(forward, WORLD_UP))
        up = vec_cross(right, forward)
        return right, up
