import pytest

from orrery.controller import SceneController
from orrery.data_models import BodySpec
from orrery.presets import template_solar_system


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sim(clock):
    controller = SceneController(clock=clock)
    controller.replace_specs(template_solar_system(), "Solar System")
    return controller


def test_replace_specs_builds_scene(sim):
    assert sim.preset_name == "Solar System"
    assert [n.name for n in sim.roots] == ["Sun", "Mercury", "Venus", "Earth", "Mars"]
    assert sim.scene.children == sim.roots
    assert sim.body_names() == ["Sun", "Mercury", "Venus", "Earth", "Moon", "Mars", "Phobos", "Deimos"]
    assert sim.selected_name == "Sun"
    assert sim.scene_version == 1


def test_replace_specs_drops_previous_tree(sim):
    old_roots = sim.roots
    sim.replace_specs([BodySpec("Solo", 1.0, 4.0, 0.1)], "Solo")
    assert sim.roots is not old_roots
    assert sim.body_names() == ["Solo"]
    assert sim.scene_version == 2
    assert sim.frame_count == 0


def test_replace_with_empty_preset(sim):
    sim.replace_specs([], "Empty")
    assert sim.roots == []
    assert sim.selected_name is None
    assert sim.get_selected_body() is None
    sim.frame()


def test_frame_steps_only_while_playing(sim):
    mercury = sim.roots[1]
    sim.frame()
    assert mercury.current_angle == pytest.approx(0.01)
    sim.set_playing(False)
    for _ in range(5):
        sim.frame()
    assert mercury.current_angle == pytest.approx(0.01)
    assert sim.frame_count == 1


def test_advance_steps_while_paused(sim):
    sim.set_playing(False)
    sim.advance()
    sim.advance()
    assert sim.roots[1].current_angle == pytest.approx(0.02)
    assert sim.frame_count == 2


def test_toggle_playing(sim):
    assert sim.toggle_playing() is False
    assert sim.playing is False
    assert sim.toggle_playing() is True


def test_elapsed_excludes_paused_time(sim, clock):
    clock.now += 5.0
    assert sim.elapsed() == pytest.approx(5.0)
    sim.set_playing(False)
    clock.now += 30.0
    assert sim.elapsed() == pytest.approx(5.0)
    sim.set_playing(True)
    clock.now += 2.0
    assert sim.elapsed() == pytest.approx(7.0)


def test_set_playing_twice_is_harmless(sim, clock):
    sim.set_playing(False)
    clock.now += 3.0
    sim.set_playing(False)
    clock.now += 3.0
    sim.set_playing(True)
    assert sim.elapsed() == pytest.approx(0.0)


def test_selection(sim):
    sim.select("Phobos")
    body = sim.get_selected_body()
    assert body is not None and body.name == "Phobos"
    assert body.parent.name == "Mars"
    sim.select("Pluto")
    assert sim.selected_name == "Phobos"


def test_sun_stays_centred(sim):
    for _ in range(50):
        sim.frame()
    sun = sim.roots[0]
    assert sun.position == [0.0, 0.0, 0.0]
    assert sun.current_angle == 0.0
