#!/usr/bin/env python3
"""
Orbital kinematics for the Orrery viewer.

Responsibilities
- Build the renderable node tree from a list of BodySpec values, once per preset.
- Advance every node's orbital angle and derived position once per frame.

Conventions
- Orbits are circles in the x-z plane of the parent frame; y is never changed.
- Angle 0 sits on the +z axis: position = (distance * sin(a), distance * cos(a)).
- Each step adds BodySpec.angular_speed to the angle. The elapsed time passed in
  is sampled by the caller but does not scale the increment, so the apparent
  speed follows the frame rate rather than the wall clock.

Pairing
- step() walks nodes and specs side by side by index. build() guarantees the two
  sequences (and every moon list below them) stay in lockstep; step() does not
  re-check it.
"""

import math
from typing import List, Optional, Sequence, Tuple
from .data_models import BodySpec, RenderableBody, SceneRoot


def orbital_position(distance: float, angle: float) -> Tuple[float, float]:
    """
    Position on a circular orbit of the given radius.

    Args:
        distance: Orbital radius around the parent
        angle: Accumulated orbital angle in radians

    Returns:
        (x, z) in the parent frame
    """
    return (distance * math.sin(angle), distance * math.cos(angle))


def _create_body(spec: BodySpec) -> RenderableBody:
    node = RenderableBody(spec=spec, position=[spec.distance, 0.0, 0.0])
    for moon in spec.moons:
        node.add(_create_body(moon))
    return node


def build(specs: Sequence[BodySpec],
          scene: Optional[SceneRoot] = None) -> Tuple[List[RenderableBody], List[BodySpec]]:
    """
    Create one RenderableBody per BodySpec, recursively for moons.

    Top-level bodies start at (distance, 0, 0) with angle 0; moons start at
    (moon distance, 0, 0) relative to their planet. Values are taken as given,
    including negative radius or distance.

    Args:
        specs: Ordered top-level body descriptions.
        scene: Optional scene root that receives every top-level node.

    Returns:
        (root-level nodes, parallel list of their specs)
    """
    spec_list = list(specs)
    roots = [_create_body(spec) for spec in spec_list]
    if scene is not None:
        for node in roots:
            scene.add(node)
    return roots, spec_list


def _advance(node: RenderableBody, spec: BodySpec) -> None:
    node.current_angle += spec.angular_speed
    x, z = orbital_position(spec.distance, node.current_angle)
    node.position[0] = x
    node.position[2] = z
    for i, child in enumerate(node.children):
        _advance(child, spec.moons[i])


def step(elapsed_time: float, roots: Sequence[RenderableBody], specs: Sequence[BodySpec]) -> None:
    """
    Advance all bodies by one animation step, in place.

    Args:
        elapsed_time: Seconds since the animation started (currently unused).
        roots: Root-level nodes returned by build().
        specs: The parallel spec list returned by build().
    """
    for i, node in enumerate(roots):
        _advance(node, specs[i])


def world_position(node: RenderableBody) -> Tuple[float, float, float]:
    """
    Compose a node's position through its ancestors' frames.

    Each ancestor frame is translate(position), rotate about y by its angle,
    then a uniform scale by its radius, the same order the viewport draws in.
    """
    x, y, z = node.position
    parent = node.parent
    while isinstance(parent, RenderableBody):
        s = parent.spec.radius
        c = math.cos(parent.current_angle)
        sn = math.sin(parent.current_angle)
        x, y, z = s * (x * c + z * sn), s * y, s * (z * c - x * sn)
        px, py, pz = parent.position
        x, y, z = x + px, y + py, z + pz
        parent = parent.parent
    return (x, y, z)
