"""Shared fixtures for the planet generator tests."""
import logging

import numpy as np
import pytest

from planet_generator import TextureSynthesizer, resolve_settings
from planet_generator import config as DEFAULTS
from planet_generator.synthesizer import TextureSet

SEEDS = [0.0, 3.25, 17.0, 42.0, 63.9, 99.5]


@pytest.fixture
def settings():
    return resolve_settings({})


@pytest.fixture
def logger():
    return logging.getLogger("planet-tests")


@pytest.fixture(scope="session")
def texture_set():
    # One full-resolution synthesis shared by every test that needs it.
    synthesizer = TextureSynthesizer({}, logging.getLogger("planet-tests"))
    return synthesizer.generate(seed=0.0, show_progress=False)


@pytest.fixture
def coarse_grid():
    """A quarter-resolution (u, v) grid over the whole surface."""
    u = np.arange(256) / 256.0
    v = np.arange(128) / 128.0
    return np.meshgrid(u, v)


def make_texture_set(color=(0, 0, 0), emissive=(0, 0, 0), roughness=255, cloud_alpha=0, seed=1.0):
    """Builds a uniform TextureSet without running the synthesizer."""
    shape = (DEFAULTS.TEXTURE_HEIGHT, DEFAULTS.TEXTURE_WIDTH, 4)

    def bitmap(rgb, alpha=255):
        data = np.empty(shape, dtype=np.uint8)
        data[..., :3] = rgb
        data[..., 3] = alpha
        return data

    return TextureSet(
        {
            "color": bitmap(color),
            "bump": bitmap((0, 0, 0)),
            "roughness": bitmap((roughness,) * 3),
            "emissive": bitmap(emissive),
            "cloud": bitmap((255, 255, 255), cloud_alpha),
        },
        seed=seed,
    )
