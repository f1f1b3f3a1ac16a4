"""Tests for the full-resolution texture synthesis and the TextureSet package."""
import logging
import os

import numpy as np
import pytest

from planet_generator import ConfigurationError, TextureSet, TextureSynthesizer
from planet_generator.biomes import BIOME_ID_OCEAN, BIOME_ID_POLAR_ICE, COLOR_MAP_SURFACE

CHANNELS = ("color", "bump", "roughness", "emissive", "cloud")
# Texel rows whose v = y / 512 falls beyond the polar bounds 0.08 / 0.92.
NORTH_CAP = slice(0, 41)
SOUTH_CAP = slice(472, 512)


def test_texture_set_has_five_fixed_size_rgba_channels(texture_set):
    assert list(texture_set) == list(CHANNELS)
    for name in CHANNELS:
        bitmap = texture_set[name]
        assert bitmap.shape == (512, 1024, 4)
        assert bitmap.dtype == np.uint8
    assert texture_set.width == 1024
    assert texture_set.height == 512
    assert texture_set.seed == 0.0


def test_texture_set_is_read_only(texture_set):
    with pytest.raises(ValueError):
        texture_set.color[0, 0, 0] = 1
    with pytest.raises(ValueError):
        texture_set.biome_map[0, 0] = 1


def test_opaque_channels_and_white_clouds(texture_set):
    for name in ("color", "bump", "roughness", "emissive"):
        assert np.all(texture_set[name][..., 3] == 255)
    assert np.all(texture_set.cloud[..., :3] == 255)
    assert np.any(texture_set.cloud[..., 3] > 0)
    assert np.any(texture_set.cloud[..., 3] == 0)


def test_grayscale_channels_repeat_the_value(texture_set):
    for name in ("bump", "roughness"):
        bitmap = texture_set[name]
        assert np.array_equal(bitmap[..., 0], bitmap[..., 1])
        assert np.array_equal(bitmap[..., 0], bitmap[..., 2])


def test_polar_caps_are_snow_without_glow(texture_set):
    for rows in (NORTH_CAP, SOUTH_CAP):
        assert np.all(texture_set.biome_map[rows] == BIOME_ID_POLAR_ICE)
        assert np.all(texture_set.color[rows, :, :3] == COLOR_MAP_SURFACE["snow"])
        assert np.all(texture_set.emissive[rows, :, :3] == 0)
        assert np.all(texture_set.bump[rows, :, 0] == 150)
        assert np.all(np.abs(texture_set.roughness[rows, :, 0].astype(int) - 25.5) <= 0.5)
    assert not np.any(texture_set.biome_map[41:472] == BIOME_ID_POLAR_ICE)


def test_ocean_texels_are_glossy_and_flat(texture_set):
    ocean = texture_set.biome_map == BIOME_ID_OCEAN
    assert np.all(texture_set.roughness[ocean][:, 0] == 51)
    assert np.all(texture_set.bump[ocean][:, 0] <= 1)
    assert np.all(texture_set.emissive[ocean][:, :3] == 0)


def test_ocean_fraction_of_generated_planet(texture_set):
    fractions = texture_set.biome_fractions()
    assert 0.30 <= fractions["ocean"] <= 0.85
    assert sum(fractions.values()) == pytest.approx(1.0)


def test_generation_is_deterministic_for_a_seed(texture_set, logger):
    again = TextureSynthesizer({}, logger).generate(seed=0.0, show_progress=False)
    for name in CHANNELS:
        assert np.array_equal(texture_set[name], again[name])


def test_seed_resolution(logger):
    configured = TextureSynthesizer({'seed': 12.0}, logger)
    assert configured.resolve_seed() == 12.0
    assert configured.resolve_seed(3) == 3.0

    unseeded = TextureSynthesizer({}, logger)
    for _ in range(5):
        seed = unseeded.resolve_seed()
        assert 0.0 <= seed < 100.0


def test_invalid_configuration_is_rejected_at_construction(logger):
    with pytest.raises(ConfigurationError):
        TextureSynthesizer({'water_level': 2.0}, logger)


def test_synthesis_logs_progress(logger, caplog):
    with caplog.at_level(logging.INFO, logger="planet-tests"):
        synthesizer = TextureSynthesizer({}, logger)
        u, v = synthesizer.get_coordinate_grid(0, 4)
    assert "TextureSynthesizer initialized" in caplog.text
    assert u.shape == (4, 1024)
    assert v[3, 0] == pytest.approx(3 / 512)
    assert u[0, 512] == pytest.approx(0.5)


def test_save_and_load_round_trip(texture_set, tmp_path):
    manifest_path = texture_set.save(str(tmp_path))
    assert os.path.basename(manifest_path) == "manifest.json"
    for name in CHANNELS:
        assert (tmp_path / f"{name}.png").exists()

    loaded = TextureSet.load(str(tmp_path))
    assert loaded.seed == texture_set.seed
    for name in CHANNELS:
        assert np.array_equal(loaded[name], texture_set[name])
    assert np.array_equal(loaded.biome_map, texture_set.biome_map)


def test_load_reports_missing_package(tmp_path):
    with pytest.raises(FileNotFoundError, match="manifest.json"):
        TextureSet.load(str(tmp_path))


def test_texture_set_rejects_wrong_dimensions():
    small = np.zeros((4, 4, 4), dtype=np.uint8)
    with pytest.raises(ValueError, match="shape"):
        TextureSet({name: small for name in CHANNELS}, seed=0.0)
    with pytest.raises(ValueError, match="missing channels"):
        TextureSet({"color": small}, seed=0.0)
