import math

import pytest

from orrery.data_models import BodySpec, SceneRoot
from orrery.orbits import build, orbital_position, step, world_position
from orrery.presets import template_solar_system


def planet(distance=10.0, speed=0.01, moons=(), name="Planet"):
    return BodySpec(name, 1.0, distance, speed, moons=tuple(moons))


def moon(distance=3.0, speed=0.015, name="Moon"):
    return BodySpec(name, 0.3, distance, speed)


def count_specs(specs):
    return sum(1 + count_specs(s.moons) for s in specs)


def test_build_mirrors_spec_tree():
    specs = template_solar_system()
    scene = SceneRoot()
    roots, spec_list = build(specs, scene)

    assert spec_list == specs
    assert len(roots) == len(specs)
    assert scene.children == roots
    assert sum(1 for _ in scene.walk()) == count_specs(specs)
    for node, spec in zip(roots, specs):
        assert node.spec is spec
        assert [c.spec for c in node.children] == list(spec.moons)
        for child in node.children:
            assert child.parent is node


def test_build_initial_pose():
    roots, _ = build([planet(distance=20.0, moons=[moon(distance=3.0)])])
    earth = roots[0]
    assert earth.current_angle == 0.0
    assert earth.position == [20.0, 0.0, 0.0]
    assert earth.children[0].position == [3.0, 0.0, 0.0]
    assert earth.children[0].current_angle == 0.0


def test_build_without_scene_leaves_nodes_detached():
    roots, _ = build([planet()])
    assert roots[0].parent is None


def test_build_accepts_degenerate_values():
    roots, _ = build([BodySpec("Odd", -1.0, -5.0, 0.0)])
    assert roots[0].position == [-5.0, 0.0, 0.0]


def test_build_supports_deeper_nesting():
    sub = moon(distance=0.5, name="Submoon")
    mid = BodySpec("Moon", 0.3, 3.0, 0.015, moons=(sub,))
    roots, specs = build([planet(moons=[mid])])
    assert roots[0].children[0].children[0].spec is sub
    step(0.0, roots, specs)
    x, z = orbital_position(0.5, 0.015)
    assert roots[0].children[0].children[0].position[0] == pytest.approx(x)
    assert roots[0].children[0].children[0].position[2] == pytest.approx(z)


def test_orbital_position_phase():
    assert orbital_position(10.0, 0.0) == (0.0, 10.0)
    x, z = orbital_position(10.0, math.pi / 2)
    assert x == pytest.approx(10.0)
    assert z == pytest.approx(0.0, abs=1e-12)


def test_single_step_example():
    roots, specs = build([planet(distance=10.0, speed=0.01)])
    step(0.016, roots, specs)
    node = roots[0]
    assert node.current_angle == pytest.approx(0.01)
    assert node.position[0] == pytest.approx(0.0999983, rel=1e-5)
    assert node.position[1] == 0.0
    assert node.position[2] == pytest.approx(9.9995, rel=1e-5)


def test_629_steps_come_back_near_start():
    roots, specs = build([planet(distance=10.0, speed=0.01)])
    for i in range(629):
        step(i / 60.0, roots, specs)
    node = roots[0]
    assert node.current_angle == pytest.approx(6.29)
    assert node.position[0] == pytest.approx(0.0, abs=0.1)
    assert node.position[2] == pytest.approx(10.0, abs=1e-2)


@pytest.mark.parametrize("distance,speed", [(10.0, 0.01), (25.0, -0.003), (0.0, 0.5), (3.0, 1.7)])
def test_position_stays_on_circle(distance, speed):
    roots, specs = build([planet(distance=distance, speed=speed)])
    for _ in range(500):
        step(0.0, roots, specs)
        x, y, z = roots[0].position
        assert x * x + z * z == pytest.approx(distance * distance, abs=1e-9)
        assert y == 0.0


def test_zero_speed_is_static():
    roots, specs = build([planet(distance=10.0, speed=0.0)])
    step(0.0, roots, specs)
    first = list(roots[0].position)
    for _ in range(100):
        step(1.0, roots, specs)
    assert roots[0].current_angle == 0.0
    assert roots[0].position == first == [0.0, 0.0, 10.0]


def test_full_period_returns_to_start():
    speed = 2 * math.pi / 100
    roots, specs = build([planet(distance=10.0, speed=speed)])
    for _ in range(100):
        step(0.0, roots, specs)
    node = roots[0]
    assert node.current_angle == pytest.approx(2 * math.pi)
    assert node.position[0] == pytest.approx(0.0, abs=1e-9)
    assert node.position[2] == pytest.approx(10.0)


def test_angle_is_not_wrapped():
    roots, specs = build([planet(speed=1.0)])
    for _ in range(20):
        step(0.0, roots, specs)
    assert roots[0].current_angle == pytest.approx(20.0)


def test_elapsed_time_does_not_change_motion():
    a_roots, a_specs = build([planet()])
    b_roots, b_specs = build([planet()])
    for i in range(10):
        step(0.0, a_roots, a_specs)
        step(i * 123.4, b_roots, b_specs)
    assert a_roots[0].position == b_roots[0].position
    assert a_roots[0].current_angle == b_roots[0].current_angle


def test_moon_position_is_local_to_parent():
    moon_spec = moon(distance=3.0, speed=0.015)
    roots, specs = build([planet(distance=20.0, speed=0.005, moons=[moon_spec])])
    for _ in range(7):
        step(0.0, roots, specs)

    earth = roots[0]
    moon_node = earth.children[0]
    assert moon_node.current_angle == pytest.approx(7 * 0.015)
    x, z = orbital_position(3.0, moon_node.current_angle)
    assert moon_node.position[0] == pytest.approx(x)
    assert moon_node.position[2] == pytest.approx(z)


def test_moon_ignores_parent_orbit():
    moon_spec = moon(distance=3.0, speed=0.015)
    slow_roots, slow_specs = build([planet(distance=20.0, speed=0.005, moons=[moon_spec])])
    fast_roots, fast_specs = build([planet(distance=55.0, speed=-0.4, moons=[moon_spec])])
    for _ in range(50):
        step(0.0, slow_roots, slow_specs)
        step(0.0, fast_roots, fast_specs)

    # planet-only angle changes must not leak into the moon
    fast_roots[0].current_angle += 1.0
    step(0.0, fast_roots, fast_specs)
    step(0.0, slow_roots, slow_specs)

    assert slow_roots[0].children[0].position == fast_roots[0].children[0].position
    assert slow_roots[0].children[0].current_angle == fast_roots[0].children[0].current_angle


def test_moons_follow_their_own_specs_by_index():
    phobos = moon(distance=2.0, speed=0.02, name="Phobos")
    deimos = moon(distance=3.0, speed=0.015, name="Deimos")
    roots, specs = build([planet(distance=25.0, speed=0.003, moons=[phobos, deimos])])
    step(0.0, roots, specs)
    mars = roots[0]
    assert [c.name for c in mars.children] == ["Phobos", "Deimos"]
    assert mars.children[0].current_angle == pytest.approx(0.02)
    assert mars.children[1].current_angle == pytest.approx(0.015)


def test_step_with_no_bodies():
    roots, specs = build([])
    step(1.0, roots, specs)
    assert roots == [] and specs == []


def test_world_position_of_top_level_body_is_its_position():
    roots, specs = build([planet(distance=20.0, speed=0.005)], SceneRoot())
    step(0.0, roots, specs)
    assert world_position(roots[0]) == tuple(roots[0].position)


def test_moon_frame_is_scaled_by_planet_radius():
    phobos = moon(distance=2.0, speed=0.02, name="Phobos")
    mars_spec = BodySpec("Mars", 0.7, 25.0, 0.003, moons=(phobos,))
    roots, specs = build([mars_spec], SceneRoot())
    mars, moon_node = roots[0], roots[0].children[0]

    assert world_position(moon_node) == pytest.approx((25.0 + 1.4, 0.0, 0.0))

    for _ in range(40):
        step(0.0, roots, specs)
    mx, my, mz = world_position(mars)
    x, y, z = world_position(moon_node)
    assert math.dist((x, y, z), (mx, my, mz)) == pytest.approx(0.7 * 2.0)
    # the local position itself is never scaled
    assert math.hypot(moon_node.position[0], moon_node.position[2]) == pytest.approx(2.0)


def test_moon_frame_follows_planet_rotation():
    sat = moon(distance=1.0, speed=0.0)
    roots, _ = build([BodySpec("Spin", 1.0, 0.0, 0.0, moons=(sat,))])
    roots[0].current_angle = math.pi / 2
    # +x in the planet frame turned a quarter about y lands on -z
    assert world_position(roots[0].children[0]) == pytest.approx((0.0, 0.0, -1.0), abs=1e-12)
