"""Tests for the terminator-based emissive boost."""
import numpy as np
import pytest

from planet_generator.runtime import IlluminationModel, IlluminationState
from planet_generator.runtime.illumination import smoothstep
from planet_generator.runtime.renderer import look_along_z


@pytest.fixture
def model():
    return IlluminationModel()


def test_night_mask_endpoints(model):
    assert model.night_mask(0.15) == pytest.approx(0.0)
    assert model.night_mask(-0.25) == pytest.approx(1.0)
    assert model.night_mask(1.0) == 0.0
    assert model.night_mask(-1.0) == 1.0
    # Midway through the terminator the Hermite ease gives exactly one half.
    assert model.night_mask(-0.05) == pytest.approx(0.5)


def test_night_mask_is_monotonically_non_increasing(model):
    dot_nl = np.linspace(-1.0, 1.0, 2001)
    mask = model.night_mask(dot_nl)
    assert np.all(np.diff(mask) <= 1e-12)
    assert mask.min() >= 0.0
    assert mask.max() <= 1.0


def test_night_mask_is_smooth_not_linear(model):
    # A quarter of the way into the night the cubic ease is below the linear ramp.
    assert model.night_mask(0.05) == pytest.approx(smoothstep(0.0, 1.0, 0.25))
    assert model.night_mask(0.05) < 0.25


def test_emissive_multiplier_spans_day_floor_to_night_boost(model):
    assert model.emissive_multiplier(0.0) == pytest.approx(0.5)
    assert model.emissive_multiplier(1.0) == pytest.approx(5.0)
    assert model.emissive_multiplier(np.array([0.0, 0.5])) == pytest.approx([0.5, 2.75])


def test_evaluate_facing_and_away_from_the_star(model):
    view = look_along_z(4.0)
    state = model.initialize((0.0, 0.0, 20.0))
    fragment = np.array([0.0, 0.0, -3.0])

    day = model.evaluate(state, view, fragment, np.array([0.0, 0.0, 1.0]))
    assert day.dot_nl == pytest.approx(1.0)
    assert day.night_mask == pytest.approx(0.0)
    assert day.emissive_multiplier == pytest.approx(0.5)

    night = model.evaluate(state, view, fragment, np.array([0.0, 0.0, -1.0]))
    assert night.night_mask == pytest.approx(1.0)
    assert night.emissive_multiplier == pytest.approx(5.0)


def test_evaluate_is_vectorised(model):
    view = look_along_z(4.0)
    state = model.initialize((10.0, 0.0, 0.0))
    normals = np.array([[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    positions = normals + np.array([0.0, 0.0, -4.0])
    result = model.evaluate(state, view, positions, normals)
    assert result.night_mask.shape == (3,)
    assert result.night_mask[0] == pytest.approx(0.0)
    assert result.night_mask[1] == pytest.approx(1.0)


def test_frame_snapshots_are_immutable(model):
    first = model.initialize()
    assert first.star_position == (10.0, 5.0, 10.0)

    second = first.for_frame(np.array([0.0, 5.0, 12.0]), 0.0)
    assert isinstance(second, IlluminationState)
    assert second.star_position == (0.0, 5.0, 12.0)
    assert first.star_position == (10.0, 5.0, 10.0)
    with pytest.raises(AttributeError):
        second.star_position = (1.0, 1.0, 1.0)


def test_apply_scales_the_base_emissive(model):
    base = np.array([[1.0, 0.5, 0.0], [0.2, 0.2, 0.2]])
    adjusted = model.apply(base, np.array([0.0, 1.0]))
    assert adjusted == pytest.approx(np.array([[0.5, 0.25, 0.0], [1.0, 1.0, 1.0]]))


def test_custom_terminator_configuration():
    model = IlluminationModel({'terminator_day_threshold': 0.0, 'terminator_night_threshold': -0.1,
                               'emissive_day_floor': 0.0, 'emissive_night_boost': 2.0})
    assert model.night_mask(0.0) == pytest.approx(0.0)
    assert model.night_mask(-0.1) == pytest.approx(1.0)
    assert model.emissive_multiplier(1.0) == pytest.approx(2.0)


def test_next_snapshot_carries_over_unchanged_fields(model):
    current = model.initialize()._replace(elapsed_time=7.0)
    following = current.for_frame((1.0, 2.0, 3.0))
    assert following.star_position == (1.0, 2.0, 3.0)
    assert following.elapsed_time == 7.0

    later = following.for_frame((0.0, 5.0, 12.0), 9.5)
    assert later.elapsed_time == 9.5
    assert following.elapsed_time == 7.0
