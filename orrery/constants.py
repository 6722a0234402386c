#!/usr/bin/env python3
"""
Shared constants for the Orrery viewer (scene units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""
import logging
import os

# Rendering (viewport)
VIEW_WIDTH = 1280
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (10, 12, 18)
ORBIT_PATH_COLOR = (90, 110, 170)
TARGET_FPS = 60

# Sphere tessellation shared by every body
SPHERE_SLICES = 32
SPHERE_STACKS = 32
ORBIT_PATH_SEGMENTS = 128

# Camera (perspective)
CAMERA_FOV = 50.0  # degrees, vertical
CAMERA_NEAR = 0.1
CAMERA_FAR = 1000.0
CAMERA_START_POSITION = (0.0, 25.0, 70.0)
CAMERA_TARGET = (0.0, 0.0, 0.0)

# Orbit controls
MIN_CAMERA_DISTANCE = 20.0
MAX_CAMERA_DISTANCE = 200.0
DAMPING_FACTOR = 0.05
ROTATE_SPEED = 1.0  # full turn per viewport height dragged
ZOOM_STEP = 0.95  # distance scale per wheel notch
PAN_SPEED = 1.0

# Lighting: single point light at the sun
POINT_LIGHT_POSITION = (0.0, 0.0, 0.0)
POINT_LIGHT_INTENSITY = 5.0

# Assets
PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEXTURES_DIR = os.path.join(PROJECT_DIR, "textures")
CUBEMAP_DIR = os.path.join(TEXTURES_DIR, "cubeMap")
CUBEMAP_FACES = ("px.png", "nx.png", "py.png", "ny.png", "pz.png", "nz.png")
SKYBOX_SIZE = 500.0  # half edge; must stay inside CAMERA_FAR
DEFAULT_BODY_COLOR = (200, 200, 255)

# Logging
LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
