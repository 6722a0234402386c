#!/usr/bin/env python3
"""
Preset JSON loading utilities.

This module defines a simple JSON schema and loader for scene templates
(orrery/templates/*.json): a named list of bodies with their moons.

Schema
======
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "moon_texture": "2k_moon.jpg",       # optional, used by moons without a texture
  "bodies": [
    {
      "name": "Earth",
      "radius": 1.0,
      "distance": 20.0,                # orbital radius around the parent
      "speed": 0.005,                  # radians added per animation step
      "texture": "2k_earth_daymap.jpg",  # optional, relative to textures/
      "color": [100, 149, 237],        # optional tint / fallback colour
      "lit": false,                    # optional
      "moons": [
        {"name": "Moon", "radius": 0.3, "distance": 3.0, "speed": 0.015}
      ]
    }
  ]
}

Users can add their own JSON files into the templates folder and they'll be
picked up by the loader. Broken files and broken body entries are skipped with a
warning; numeric values are otherwise taken as given.
"""
import json
import logging
import os
from typing import List, Optional, Tuple
from .constants import DEFAULT_BODY_COLOR
from .data_models import BodySpec, Material

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      data = json.load(f)
  except (OSError, ValueError) as e:
    logger.warning("Could not read preset %s: %s", path, e)
    return None
  if not isinstance(data, dict):
    logger.warning("Preset %s is not a JSON object", path)
    return None
  return data


def _coerce_color(c) -> Tuple[int, int, int]:
  try:
    r, g, b = int(c[0]), int(c[1]), int(c[2])
    r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
    return (r, g, b)
  except (TypeError, ValueError, IndexError):
    return DEFAULT_BODY_COLOR


def parse_body(data: dict, moon_texture: Optional[str] = None, is_moon: bool = False) -> BodySpec:
  """
  Build a BodySpec from one body entry.
  Raises KeyError/TypeError/ValueError when a required field is missing or not numeric.
  """
  texture = data.get("texture")
  if texture is None and is_moon:
    texture = moon_texture
  material = Material(
    texture=texture,
    color=_coerce_color(data.get("color", DEFAULT_BODY_COLOR)),
    lit=bool(data.get("lit", False)),
  )
  moons = tuple(parse_body(m, moon_texture, is_moon=True) for m in data.get("moons", []))
  return BodySpec(
    name=str(data.get("name", "Body")),
    radius=float(data["radius"]),
    distance=float(data["distance"]),
    angular_speed=float(data["speed"]),
    material=material,
    moons=moons,
  )


def parse_bodies(data: dict, source: str = "<preset>") -> List[BodySpec]:
  moon_texture = data.get("moon_texture")
  bodies = data.get("bodies", [])
  if not isinstance(bodies, list):
    logger.warning("Preset %s: 'bodies' must be a list, got %s", source, type(bodies).__name__)
    return []
  specs: List[BodySpec] = []
  for b in bodies:
    try:
      specs.append(parse_body(b, moon_texture))
    except (KeyError, TypeError, ValueError, AttributeError) as e:
      logger.warning("Skipping malformed body %r in %s: %s",
                     b.get("name") if isinstance(b, dict) else b, source, e)
      continue
  return specs


def list_templates(templates_dir: str = TEMPLATES_DIR) -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available templates."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(templates_dir):
    return items
  for fn in sorted(os.listdir(templates_dir)):
    if not fn.lower().endswith(".json"):
      continue
    path = os.path.join(templates_dir, fn)
    data = _read_json(path) or {}
    display = data.get("name") or os.path.splitext(fn)[0]
    items.append((fn, display))
  return items


def load_template(file_name: str, templates_dir: str = TEMPLATES_DIR) -> Tuple[List[BodySpec], str, Optional[str]]:
  """
  Load a template JSON by file name.
  Returns (specs, display_name, description)
  """
  path = os.path.join(templates_dir, file_name)
  data = _read_json(path)
  if data is None:
    return [], os.path.splitext(file_name)[0], None
  display_name = data.get("name") or os.path.splitext(file_name)[0]
  specs = parse_bodies(data, source=file_name)
  logger.info("Loaded preset '%s' with %d top-level bodies", display_name, len(specs))
  return specs, display_name, data.get("description")
