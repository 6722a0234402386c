#!/usr/bin/env python3
"""
Data models for the Orrery viewer.

This module defines the static body description shared by presets, the scene
builder and the panel, plus the mutable scene-graph nodes drawn every frame.

Units and usage
- distance and radius are in scene units; the sun has distance 0.
- angular_speed is the angle in radians added on every animation step, so
  motion speed follows the frame rate.
- RenderableBody.position is local to the parent node. Moons therefore carry
  offsets relative to their planet; the renderer composes the transforms.
- Access to the live tree is coordinated by SceneController using a lock.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .constants import DEFAULT_BODY_COLOR


@dataclass(frozen=True)
class Material:
    """
    Visual appearance handle. The orbital core never looks inside it.

    Fields:
    - texture: file name relative to the texture directory, or None
    - color: RGB tint in 0..255, also used when the texture cannot be loaded
    - lit: shade with the point light instead of drawing full-bright
    """
    texture: Optional[str] = None
    color: Tuple[int, int, int] = DEFAULT_BODY_COLOR
    lit: bool = False


@dataclass(frozen=True)
class BodySpec:
    """
    Immutable description of a sun, planet or moon.

    Fields:
    - name: Identifier for the body
    - radius: Sphere radius
    - distance: Orbital radius around the parent (0 keeps the body centred)
    - angular_speed: Radians added per animation step; sign gives direction
    - material: Visual appearance handle
    - moons: Child bodies orbiting this one, in draw order
    """
    name: str
    radius: float
    distance: float
    angular_speed: float
    material: Material = field(default_factory=Material)
    moons: Tuple["BodySpec", ...] = ()


@dataclass(eq=False)
class RenderableBody:
    """
    Mutable scene-graph node for one body.

    current_angle accumulates without wrapping. position is (x, y, z) local to
    the parent; only x and z are driven by the orbit.
    """
    spec: BodySpec
    current_angle: float = 0.0
    position: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    children: List["RenderableBody"] = field(default_factory=list)
    parent: Optional[object] = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return self.spec.name

    def add(self, child: "RenderableBody") -> None:
        """Attach a child node; its position becomes relative to this node."""
        child.parent = self
        self.children.append(child)

    def walk(self):
        """Yield this node and all descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(eq=False)
class SceneRoot:
    """Top of the scene graph; planets (and the sun) hang directly off it."""
    children: List[RenderableBody] = field(default_factory=list)

    def add(self, node: RenderableBody) -> None:
        node.parent = self
        self.children.append(node)

    def walk(self):
        for child in self.children:
            yield from child.walk()
