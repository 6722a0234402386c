#!/usr/bin/env python3
"""
Built-in scene presets.

Each preset is a function returning the ordered top-level BodySpec list. The
sun is an ordinary body with distance 0 and speed 0, so it stays centred and
never turns.
"""
from typing import Callable, Dict, List
from .data_models import BodySpec, Material

MOON_MATERIAL = Material(texture="2k_moon.jpg", color=(180, 180, 190))


def template_solar_system() -> List[BodySpec]:
    """
    Sun, Mercury, Venus, Earth with the Moon, Mars with Phobos and Deimos.
    Distances and radii are scene units picked for viewing, not to scale.
    """
    sun = BodySpec("Sun", 5.0, 0.0, 0.0, Material(texture="2k_sun.jpg", color=(255, 204, 0)))

    mercury = BodySpec("Mercury", 0.5, 10.0, 0.01,
                       Material(texture="2k_mercury.jpg", color=(170, 165, 160)))
    venus = BodySpec("Venus", 0.8, 15.0, 0.007,
                     Material(texture="2k_venus_surface.jpg", color=(230, 190, 120)))
    earth = BodySpec("Earth", 1.0, 20.0, 0.005,
                     Material(texture="2k_earth_daymap.jpg", color=(100, 149, 237)),
                     moons=(BodySpec("Moon", 0.3, 3.0, 0.015, MOON_MATERIAL),))
    mars = BodySpec("Mars", 0.7, 25.0, 0.003,
                    Material(texture="2k_mars.jpg", color=(188, 39, 50)),
                    moons=(
                        BodySpec("Phobos", 0.1, 2.0, 0.02, MOON_MATERIAL),
                        BodySpec("Deimos", 0.2, 3.0, 0.015,
                                 Material(texture=MOON_MATERIAL.texture, color=(255, 255, 255))),
                    ))
    return [sun, mercury, venus, earth, mars]


def template_empty() -> List[BodySpec]:
    return []


BUILTIN_PRESETS: Dict[str, Callable[[], List[BodySpec]]] = {
    "Solar System": template_solar_system,
    "Empty": template_empty,
}
DEFAULT_PRESET = "Solar System"
