#!/usr/bin/env python3
"""
General utilities for the Orrery panel.
"""
import math
from typing import Optional, Sequence


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def format_position(pos: Sequence[float]) -> str:
    return f"({pos[0]:.3f}, {pos[1]:.3f}, {pos[2]:.3f})"


def format_angle(angle: float) -> str:
    """Accumulated angle in radians plus completed turns."""
    turns = int(abs(angle) // (2 * math.pi))
    return f"{angle:.4f} rad ({turns} turns)"
