#!/usr/bin/env python3
"""
Orrery application entry point and viewport/panel coordination.

What this module does
- Starts two event loops: a pygame + OpenGL viewport thread that animates and draws
  the solar system, and a Dear PyGui parameter panel running on the main thread.
- Shares one SceneController between them; it owns the body tree, the animation
  clock and the display toggles, and guards them with a re-entrant lock.
- Loads presets (built-in or orrery/templates/*.json), textures and the sky box.

Threading model
- OrbitRenderer runs in a background thread: input handling for the viewport, one
  animation step per displayed frame, camera damping and drawing. It owns the GL
  context, so every texture upload happens there.
- The Panel class runs in the main thread via Dear PyGui. It refreshes readouts on
  a periodic frame callback and calls SceneController methods, which take the lock.
  Camera changes from the panel go through OrbitCamera methods, which hold the
  camera's own lock against the viewport's per-frame update().

Running
1) Install dependencies: `pip install -e .`
2) Put the planet maps in textures/ and the sky box faces in textures/cubeMap/
   (missing files fall back to flat colours).
3) Run this module: `python orrery_app.py`

Viewport controls: left-drag orbits, right/middle-drag pans, the wheel zooms,
Space pauses, R resets the camera.
"""

import logging
import math
import threading

# GUI and Rendering libs
import pygame
from pygame.locals import DOUBLEBUF, OPENGL, RESIZABLE
import dearpygui.dearpygui as dpg
from OpenGL.GL import (
    GL_COLOR_BUFFER_BIT, GL_COLOR_MATERIAL, GL_CONSTANT_ATTENUATION, GL_DEPTH_BUFFER_BIT,
    GL_DEPTH_TEST, GL_DIFFUSE, GL_LIGHT0, GL_LIGHTING, GL_LINE_LOOP, GL_MODELVIEW, GL_NORMALIZE,
    GL_POSITION, GL_PROJECTION, GL_QUADS, GL_TEXTURE_2D, GL_TEXTURE_CUBE_MAP,
    glBegin, glBindTexture, glClear, glClearColor, glColor3f, glColor3ub, glDepthMask,
    glDisable, glEnable, glEnd, glLightf, glLightfv, glLoadIdentity, glMatrixMode,
    glPopMatrix, glPushMatrix, glRotatef, glScalef, glTexCoord3f, glTranslatef, glVertex3f, glViewport,
)
from OpenGL.GLU import (
    GLU_SMOOTH, gluDeleteQuadric, gluLookAt, gluNewQuadric, gluPerspective,
    gluQuadricNormals, gluQuadricTexture, gluSphere,
)

from orrery.camera import OrbitCamera
from orrery.constants import (
    BACKGROUND_COLOR,
    LOG_FORMAT,
    LOG_LEVEL,
    ORBIT_PATH_COLOR,
    ORBIT_PATH_SEGMENTS,
    POINT_LIGHT_INTENSITY,
    POINT_LIGHT_POSITION,
    SKYBOX_SIZE,
    SPHERE_SLICES,
    SPHERE_STACKS,
    TARGET_FPS,
    VIEW_HEIGHT,
    VIEW_WIDTH,
    ZOOM_STEP,
)
from orrery.controller import SceneController
from orrery.orbits import world_position
from orrery.presets import BUILTIN_PRESETS, DEFAULT_PRESET
from orrery.presets_loader import list_templates as list_json_templates, load_template as load_json_template
from orrery.textures import TextureCache, load_cubemap
from orrery.utils import format_angle, format_position, try_float

logger = logging.getLogger("orrery")

# Sky box faces as unit-cube corners; the corner doubles as the cube-map lookup vector.
SKYBOX_QUADS = (
    ((1, -1, -1), (1, -1, 1), (1, 1, 1), (1, 1, -1)),
    ((-1, -1, 1), (-1, -1, -1), (-1, 1, -1), (-1, 1, 1)),
    ((-1, 1, -1), (1, 1, -1), (1, 1, 1), (-1, 1, 1)),
    ((-1, -1, 1), (1, -1, 1), (1, -1, -1), (-1, -1, -1)),
    ((-1, -1, 1), (-1, 1, 1), (1, 1, 1), (1, -1, 1)),
    ((1, -1, -1), (1, 1, -1), (-1, 1, -1), (-1, -1, -1)),
)

# ============================================================
# Viewport Thread
# ============================================================

class OrbitRenderer(threading.Thread):
    """
    pygame/OpenGL loop: steps the animation, draws sky box, orbit paths and bodies.
    Handles orbit-camera rotation, panning, zoom and window resizes.
    """
    def __init__(self, sim: SceneController):
        super().__init__(daemon=True)
        self.sim = sim
        self.camera = OrbitCamera()
        self.textures = TextureCache()
        self.skybox_tex = 0
        self.quadric = None
        self.clock = None
        self.rotating = False
        self.panning = False
        self.running = True
        self._caption = None

    def run(self):
        pygame.init()
        pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), DOUBLEBUF | OPENGL | RESIZABLE)
        self.camera.set_aspect(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.init_gl()
        self.skybox_tex = load_cubemap()
        logger.info("Viewport started (%dx%d)", VIEW_WIDTH, VIEW_HEIGHT)

        while self.running and self.sim.running:
            self.handle_events()
            self.sim.frame()
            self.camera.update()
            self.draw()
            self.update_caption()
            pygame.display.flip()
            self.clock.tick(TARGET_FPS)

        self.textures.clear()
        gluDeleteQuadric(self.quadric)
        pygame.quit()
        logger.info("Viewport stopped")

    def init_gl(self):
        r, g, b = BACKGROUND_COLOR
        glClearColor(r / 255.0, g / 255.0, b / 255.0, 1.0)
        glEnable(GL_DEPTH_TEST)
        glEnable(GL_COLOR_MATERIAL)
        glEnable(GL_NORMALIZE)
        glEnable(GL_LIGHT0)
        glLightfv(GL_LIGHT0, GL_DIFFUSE, [1.0, 1.0, 1.0, 1.0])
        glLightf(GL_LIGHT0, GL_CONSTANT_ATTENUATION, 1.0 / POINT_LIGHT_INTENSITY)

        self.quadric = gluNewQuadric()
        gluQuadricTexture(self.quadric, True)
        gluQuadricNormals(self.quadric, GLU_SMOOTH)
        self.apply_projection()

    def apply_projection(self):
        w, h = self.camera.viewport_size
        glViewport(0, 0, w, h)
        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        gluPerspective(self.camera.fov, self.camera.aspect, self.camera.near, self.camera.far)
        glMatrixMode(GL_MODELVIEW)

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.camera.set_aspect(event.w, event.h)
                self.apply_projection()

            elif event.type == pygame.MOUSEWHEEL:
                self.camera.zoom(ZOOM_STEP if event.y > 0 else 1.0 / ZOOM_STEP)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self.rotating = True
                elif event.button in (2, 3):
                    self.panning = True

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button == 1:
                    self.rotating = False
                elif event.button in (2, 3):
                    self.panning = False

            elif event.type == pygame.MOUSEMOTION:
                dx, dy = event.rel
                if self.rotating:
                    self.camera.rotate_pixels(dx, dy)
                elif self.panning:
                    self.camera.pan_pixels(dx, dy)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    self.sim.toggle_playing()
                elif event.key == pygame.K_r:
                    self.camera.reset()

    def update_caption(self):
        with self.sim.lock:
            caption = f"Orrery - {self.sim.preset_name or 'No preset'} [{'Playing' if self.sim.playing else 'Paused'}]"
        if caption != self._caption:
            pygame.display.set_caption(caption)
            self._caption = caption

    # -----------------------
    # Drawing
    # -----------------------

    def draw(self):
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        glLoadIdentity()
        eye, (tx, ty, tz) = self.camera.view()
        gluLookAt(eye[0], eye[1], eye[2], tx, ty, tz, 0.0, 1.0, 0.0)

        with self.sim.lock:
            show_skybox = self.sim.show_skybox
            show_orbits = self.sim.show_orbits

            if show_skybox and self.skybox_tex:
                self.draw_skybox(eye)

            glLightfv(GL_LIGHT0, GL_POSITION, [*POINT_LIGHT_POSITION, 1.0])
            for node in self.sim.roots:
                if show_orbits:
                    self.draw_orbit_path(node.spec.distance)
                self.draw_body(node, show_orbits)

    def draw_body(self, node, show_orbits):
        """
        Draw a node in its parent's frame, then its moons inside its own frame.
        The radius scales the whole frame, so moon distances and sizes are in
        units of the planet's radius.
        """
        material = node.spec.material
        glPushMatrix()
        glTranslatef(*node.position)
        glRotatef(math.degrees(node.current_angle), 0.0, 1.0, 0.0)
        radius = node.spec.radius
        glScalef(radius, radius, radius)

        if material.lit:
            glEnable(GL_LIGHTING)
        else:
            glDisable(GL_LIGHTING)
        glEnable(GL_TEXTURE_2D)
        glBindTexture(GL_TEXTURE_2D, self.textures.get(material))
        glColor3f(1.0, 1.0, 1.0)
        # GLU spheres have their poles on z; stand them up on y
        glPushMatrix()
        glRotatef(-90.0, 1.0, 0.0, 0.0)
        gluSphere(self.quadric, 1.0, SPHERE_SLICES, SPHERE_STACKS)
        glPopMatrix()
        glBindTexture(GL_TEXTURE_2D, 0)
        glDisable(GL_TEXTURE_2D)
        glDisable(GL_LIGHTING)

        for child in node.children:
            if show_orbits:
                self.draw_orbit_path(child.spec.distance)
            self.draw_body(child, show_orbits)
        glPopMatrix()

    def draw_orbit_path(self, radius):
        if radius <= 0:
            return
        glColor3ub(*ORBIT_PATH_COLOR)
        glBegin(GL_LINE_LOOP)
        for i in range(ORBIT_PATH_SEGMENTS):
            angle = 2.0 * math.pi * i / ORBIT_PATH_SEGMENTS
            glVertex3f(radius * math.sin(angle), 0.0, radius * math.cos(angle))
        glEnd()

    def draw_skybox(self, eye):
        glPushMatrix()
        glTranslatef(*eye)
        glDepthMask(False)
        glEnable(GL_TEXTURE_CUBE_MAP)
        glBindTexture(GL_TEXTURE_CUBE_MAP, self.skybox_tex)
        glColor3f(1.0, 1.0, 1.0)
        glBegin(GL_QUADS)
        for quad in SKYBOX_QUADS:
            for x, y, z in quad:
                glTexCoord3f(x, y, z)
                glVertex3f(x * SKYBOX_SIZE, y * SKYBOX_SIZE, z * SKYBOX_SIZE)
        glEnd()
        glBindTexture(GL_TEXTURE_CUBE_MAP, 0)
        glDisable(GL_TEXTURE_CUBE_MAP)
        glDepthMask(True)
        glPopMatrix()

# ============================================================
# Dear PyGui Panel
# ============================================================

class Panel:
    """
    Dear PyGui parameter panel: presets, play state, display toggles, camera
    settings and a read-out of the selected body.
    """
    def __init__(self, sim: SceneController, renderer: OrbitRenderer):
        self.sim = sim
        self.renderer = renderer

        self.status_msg_id = None
        self.body_list_id = None
        self.min_dist_id = None
        self.max_dist_id = None
        self.sel_name_id = None
        self.sel_orbit_id = None
        self.sel_angle_id = None
        self.sel_pos_id = None
        self.sel_world_id = None
        self.elapsed_id = None
        self._template_map = {}
        self._last_scene_version = None

        self._build_ui()

        # Periodic sync via frame callbacks (for wider DPG version support)
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        dpg.set_frame_callback(dpg.get_frame_count() + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Construction
    # -----------------------

    def _preset_items(self):
        self._template_map = {display: fn for fn, display in list_json_templates()}
        items = list(BUILTIN_PRESETS.keys())
        items += [d for d in self._template_map if d not in BUILTIN_PRESETS]
        return items

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Orrery - Controls', width=420, height=640)

        with dpg.window(label="Controls", width=400, height=620, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Preset:")
                dpg.add_combo(self._preset_items(),
                              default_value=self.sim.preset_name or DEFAULT_PRESET,
                              width=200,
                              tag="preset_combo")
                dpg.add_button(label="Load", callback=lambda: self.load_preset(dpg.get_value("preset_combo")))

            dpg.add_separator()

            dpg.add_text("Animation")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_button(label="Step ▶", callback=self._step_once)
                dpg.add_checkbox(label="Orbit paths", default_value=self.sim.show_orbits,
                                 callback=lambda s, a, u: self._set_flag("show_orbits", a))
                dpg.add_checkbox(label="Sky box", default_value=self.sim.show_skybox,
                                 callback=lambda s, a, u: self._set_flag("show_skybox", a))
            self.elapsed_id = dpg.add_text("Elapsed: 0.0 s")

            dpg.add_separator()

            dpg.add_text("Camera")
            dpg.add_slider_float(label="Damping", min_value=0.0, max_value=0.5,
                                 default_value=self.renderer.camera.damping, width=200,
                                 callback=lambda s, a, u: self._set_damping(a))
            with dpg.group(horizontal=True):
                self.min_dist_id = dpg.add_input_text(label="Min dist", width=80,
                                                      default_value=str(self.renderer.camera.min_distance))
                self.max_dist_id = dpg.add_input_text(label="Max dist", width=80,
                                                      default_value=str(self.renderer.camera.max_distance))
                dpg.add_button(label="Apply", callback=self._apply_distance_limits)
            dpg.add_button(label="Reset Camera", callback=self.renderer.camera.reset)

            dpg.add_separator()

            dpg.add_text("Bodies")
            self.body_list_id = dpg.add_listbox(items=[], width=380, num_items=8, callback=self._on_select_body)
            self.sel_name_id = dpg.add_text("")
            self.sel_orbit_id = dpg.add_text("")
            self.sel_angle_id = dpg.add_text("")
            self.sel_pos_id = dpg.add_text("")
            self.sel_world_id = dpg.add_text("")

            dpg.add_separator()
            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=(255, 120, 120))

    def _toggle_play(self):
        playing = self.sim.toggle_playing()
        self._set_status(f"Animation {'Playing' if playing else 'Paused'}.")

    def _step_once(self):
        self.sim.advance()
        self._set_status("Stepped one frame.")

    def _set_flag(self, attr, value):
        with self.sim.lock:
            setattr(self.sim, attr, bool(value))

    def _set_damping(self, value):
        self.renderer.camera.set_damping(value)

    def _apply_distance_limits(self):
        lo = try_float(dpg.get_value(self.min_dist_id))
        hi = try_float(dpg.get_value(self.max_dist_id))
        if lo is None or hi is None:
            self._set_error("Invalid camera distance limits.")
            return
        if lo <= 0 or hi < lo:
            self._set_error("Distance limits need 0 < min <= max.")
            return
        self.renderer.camera.set_distance_limits(lo, hi)
        self._set_status(f"Camera distance limited to {lo:g}..{hi:g}.")

    def _on_select_body(self, sender, app_data, user_data):
        self.sim.select(app_data)

    def _refresh_body_list(self):
        items = self.sim.body_names()
        dpg.configure_item(self.body_list_id, items=items)
        with self.sim.lock:
            selected = self.sim.selected_name
        if selected in items:
            dpg.set_value(self.body_list_id, selected)

    def load_preset(self, name: str):
        name = name.strip()
        specs = None
        display = name
        if name in BUILTIN_PRESETS:
            specs = BUILTIN_PRESETS[name]()
        elif name in self._template_map:
            specs, display, _ = load_json_template(self._template_map[name])
            if not specs:
                self._set_error(f"Preset '{name}' has no usable bodies.")
                return
        else:
            self._set_error(f"Unknown preset '{name}'.")
            return

        self.sim.replace_specs(specs, display)
        self._refresh_body_list()
        self._set_status(f"Loaded preset: {display}")

    def _sync_ui_with_sim(self):
        """
        Periodic UI update showing the clock and the selected body's orbital state.
        """
        with self.sim.lock:
            version = self.sim.scene_version
            elapsed = self.sim.elapsed()
            frames = self.sim.frame_count
            b = self.sim.get_selected_body()
            if b is not None:
                name = b.name
                spec = b.spec
                angle = b.current_angle
                pos = list(b.position)
                world = world_position(b)

        if version != self._last_scene_version:
            self._refresh_body_list()
            self._last_scene_version = version

        dpg.set_value(self.elapsed_id, f"Elapsed: {elapsed:.1f} s   Steps: {frames}")
        if b is not None:
            dpg.set_value(self.sel_name_id, f"{name}  radius {spec.radius:g}")
            dpg.set_value(self.sel_orbit_id, f"Orbit: distance {spec.distance:g}, speed {spec.angular_speed:g} rad/step")
            dpg.set_value(self.sel_angle_id, f"Angle: {format_angle(angle)}")
            dpg.set_value(self.sel_pos_id, f"Local position: {format_position(pos)}")
            dpg.set_value(self.sel_world_id, f"World position: {format_position(world)}")
        else:
            for item in (self.sel_name_id, self.sel_orbit_id, self.sel_angle_id,
                         self.sel_pos_id, self.sel_world_id):
                dpg.set_value(item, "")

        # Reschedule next sync
        self._schedule_sync()

# ============================================================
# Default Scene and Application Entry
# ============================================================

def build_default_scene(sim: SceneController):
    sim.replace_specs(BUILTIN_PRESETS[DEFAULT_PRESET](), DEFAULT_PRESET)


def main():
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    sim = SceneController()

    # Ensure a working default scene is present before any UI callbacks
    build_default_scene(sim)

    renderer = OrbitRenderer(sim)

    # Start viewport thread
    renderer.start()

    ui = Panel(sim, renderer)

    with dpg.handler_registry():
        dpg.add_key_press_handler(dpg.mvKey_Spacebar, callback=lambda s, a: ui._toggle_play())

    # Run Dear PyGui event loop
    try:
        while dpg.is_dearpygui_running() and sim.running:
            dpg.render_dearpygui_frame()
    finally:
        # Stop animation and viewport
        sim.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()


if __name__ == "__main__":
    main()
