"""Tests for the preview renderer, the Planet facade and the bake script."""
import json

import numpy as np
import pytest

import bake_planet
from planet_generator import config as DEFAULTS
from planet_generator.runtime import IlluminationModel, OrbitalSimulator, Planet, PreviewRenderer
from planet_generator.runtime.renderer import rotation_y, sphere_uv

from conftest import make_texture_set

RESOLUTION = 65
CENTER = RESOLUTION // 2


@pytest.fixture
def glowing_planet():
    # Black, fully rough surface: only the emissive channel contributes light.
    return Planet(make_texture_set(emissive=(100, 100, 100)), resolution=RESOLUTION)


def _outside_halo(resolution):
    axis = np.linspace(-1.15, 1.15, resolution)
    x, y = np.meshgrid(axis, -axis)
    return x ** 2 + y ** 2 >= DEFAULTS.ATMOSPHERE_SCALE ** 2


def test_render_produces_an_rgb_frame_with_space_background(glowing_planet):
    orbital_state, illumination_state = glowing_planet.update(0.0, glowing_planet.start())
    frame = glowing_planet.draw(orbital_state, illumination_state)
    assert frame.shape == (RESOLUTION, RESOLUTION, 3)
    assert frame.dtype == np.uint8

    space = frame[_outside_halo(RESOLUTION)]
    assert np.all(space >= DEFAULTS.SPACE_COLOR)
    # Most of deep space is empty; the rest are stars.
    empty = np.all(space == DEFAULTS.SPACE_COLOR, axis=-1)
    assert 0.5 < np.mean(empty) < 1.0


def test_star_field_turns_with_the_background_rotation():
    renderer = PreviewRenderer(make_texture_set(), resolution=128)
    simulator = OrbitalSimulator()
    outside = _outside_halo(128)

    first = renderer.render_background(simulator.state(0.0))
    again = renderer.render_background(simulator.state(0.0))
    later = renderer.render_background(simulator.state(200.0))

    assert np.array_equal(first, again)
    assert not np.array_equal(first[outside], later[outside])


def test_atmosphere_halo_rings_the_limb():
    renderer = PreviewRenderer(make_texture_set(), resolution=RESOLUTION)
    background = renderer.render_background(OrbitalSimulator().state(0.0))
    # Just outside the disc on the horizontal axis, r is about 1.08.
    limb = background[CENTER, CENTER + 30]
    assert limb[2] >= limb[0]
    assert limb.min() > 0.5


def test_night_side_glows_brighter_than_day_side(glowing_planet):
    start = glowing_planet.start()

    day_orbit, day_light = glowing_planet.update(0.0, start)     # primary star in front
    night_orbit, night_light = glowing_planet.update(30.0, start)  # primary star behind

    day = glowing_planet.draw(day_orbit, day_light)[CENTER, CENTER].astype(int)
    night = glowing_planet.draw(night_orbit, night_light)[CENTER, CENTER].astype(int)
    # 100 * 0.5 by day, 100 * 5 (saturated) at night.
    assert day[0] == pytest.approx(50, abs=2)
    assert night[0] == 255


def test_update_threads_a_fresh_illumination_snapshot(glowing_planet):
    start = glowing_planet.start()
    orbital_state, frame_state = glowing_planet.update(15.0, start)
    assert frame_state.star_position == pytest.approx(orbital_state.primary_star_position)
    assert frame_state.elapsed_time == 15.0
    assert start.star_position == DEFAULTS.INITIAL_STAR_POSITION


def test_registered_emissive_post_process_is_used():
    texture_set = make_texture_set(emissive=(100, 100, 100))
    renderer = PreviewRenderer(texture_set, IlluminationModel(), resolution=RESOLUTION)
    calls = []

    def no_glow(base_emissive, night_mask):
        calls.append((base_emissive.shape, night_mask.shape))
        return np.zeros_like(base_emissive)

    renderer.register_emissive_post_process(no_glow)
    planet = Planet(texture_set, resolution=RESOLUTION)
    orbital_state, illumination_state = planet.update(30.0, planet.start())
    frame = renderer.render(orbital_state, illumination_state)

    assert len(calls) == 1
    fragments = calls[0][0][0]
    assert calls[0] == ((fragments, 3), (fragments,))
    assert tuple(frame[CENTER, CENTER]) == (0, 0, 0)


def test_sphere_uv_maps_poles_and_wraps_longitude():
    u, v = sphere_uv(np.array([[0.0, 1.0, 0.0], [0.0, -1.0, 0.0], [-1.0, 0.0, 0.0], [1.0, 0.0, 0.0]]))
    assert v[0] == pytest.approx(0.0)
    assert v[1] == pytest.approx(1.0)
    assert v[2] == pytest.approx(0.5)
    assert u[2] == pytest.approx(0.0)
    assert u[3] == pytest.approx(0.5)
    assert np.all((u >= 0.0) & (u < 1.0))


def test_rotation_matrices_are_orthonormal():
    rotation = rotation_y(0.7)
    assert rotation @ rotation.T == pytest.approx(np.eye(3))
    assert np.linalg.det(rotation) == pytest.approx(1.0)


def test_bake_script_writes_package_and_preview(tmp_path):
    output = tmp_path / "planet"
    exit_code = bake_planet.main([
        "--seed", "7", "--output", str(output), "--preview-time", "30", "--preview-resolution", "48",
    ])
    assert exit_code == 0
    with open(output / "manifest.json") as f:
        manifest = json.load(f)
    assert manifest["seed"] == 7.0
    assert manifest["texture_dimensions"] == [1024, 512]
    assert set(manifest["channels"]) == {"color", "bump", "roughness", "emissive", "cloud"}
    assert (output / "preview.png").exists()

    planet = Planet.from_package(str(output), resolution=16)
    assert planet.texture_set.seed == 7.0


def test_bake_script_rejects_invalid_configuration(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"planet_generation_parameters": {"water_level": 3.0}}))
    assert bake_planet.main(["--config", str(config_path), "--output", str(tmp_path / "out")]) == 1


def test_bake_script_reports_unreadable_config(tmp_path):
    assert bake_planet.main(["--config", str(tmp_path / "missing.json")]) == 1
