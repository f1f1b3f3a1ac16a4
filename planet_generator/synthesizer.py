# planet_generator/synthesizer.py

"""
================================================================================
PLANET TEXTURE SYNTHESIZER
================================================================================
This module contains the TextureSynthesizer class, responsible for driving the
biome classification across the fixed texture grid, and the TextureSet it
produces: five RGBA8 bitmaps (color, bump, roughness, emissive, cloud).

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Parameters which override the internal defaults.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from generate):
    - A TextureSet whose arrays are (TEXTURE_HEIGHT, TEXTURE_WIDTH, 4) uint8.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed and configuration, the output is identical.
  No partially filled bitmap is ever returned; the arrays are read-only.
================================================================================
"""

import json
import logging
import os
import time

import numpy as np
from PIL import Image
from tqdm import tqdm

from . import biomes
from . import config as DEFAULTS
from .settings import resolve_settings

MANIFEST_FILENAME = "manifest.json"
BIOME_MAP_FILENAME = "biome.png"


def _to_bytes(values: np.ndarray) -> np.ndarray:
    """Rounds and clamps to 0-255, as a canvas byte store would."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


class TextureSet:
    """
    The immutable output of a synthesis run. Channels are exposed by name and
    may be read by any number of consumers without synchronization.
    """

    def __init__(self, channels: dict, seed: float, biome_map: np.ndarray = None):
        missing = [name for name in DEFAULTS.TEXTURE_CHANNELS if name not in channels]
        if missing:
            raise ValueError(f"TextureSet is missing channels: {missing}")

        expected_shape = (DEFAULTS.TEXTURE_HEIGHT, DEFAULTS.TEXTURE_WIDTH, 4)
        self._channels = {}
        for name in DEFAULTS.TEXTURE_CHANNELS:
            bitmap = np.array(channels[name], dtype=np.uint8)
            if bitmap.shape != expected_shape:
                raise ValueError(f"Channel '{name}' has shape {bitmap.shape}, expected {expected_shape}")
            bitmap.setflags(write=False)
            self._channels[name] = bitmap

        self.seed = seed
        self.biome_map = None
        if biome_map is not None:
            self.biome_map = np.array(biome_map, dtype=np.uint8)
            self.biome_map.setflags(write=False)

    @property
    def width(self) -> int:
        return DEFAULTS.TEXTURE_WIDTH

    @property
    def height(self) -> int:
        return DEFAULTS.TEXTURE_HEIGHT

    def __getitem__(self, name: str) -> np.ndarray:
        return self._channels[name]

    def __iter__(self):
        return iter(self._channels)

    @property
    def color(self) -> np.ndarray:
        return self._channels["color"]

    @property
    def bump(self) -> np.ndarray:
        return self._channels["bump"]

    @property
    def roughness(self) -> np.ndarray:
        return self._channels["roughness"]

    @property
    def emissive(self) -> np.ndarray:
        return self._channels["emissive"]

    @property
    def cloud(self) -> np.ndarray:
        return self._channels["cloud"]

    def biome_fractions(self) -> dict:
        if self.biome_map is None:
            return {}
        return biomes.biome_fractions(self.biome_map)

    def save(self, directory: str) -> str:
        """
        Writes each channel as an RGBA PNG with Pillow, plus a manifest.json
        describing the set. Returns the manifest path.
        """
        os.makedirs(directory, exist_ok=True)
        manifest = {
            "seed": self.seed,
            "texture_dimensions": [self.width, self.height],
            "channels": {},
        }
        for name, bitmap in self._channels.items():
            filename = f"{name}.png"
            Image.fromarray(np.ascontiguousarray(bitmap)).save(os.path.join(directory, filename), 'PNG')
            manifest["channels"][name] = filename

        if self.biome_map is not None:
            Image.fromarray(np.ascontiguousarray(self.biome_map)).save(
                os.path.join(directory, BIOME_MAP_FILENAME), 'PNG'
            )
            manifest["biome_map"] = BIOME_MAP_FILENAME
            manifest["biome_fractions"] = {k: round(float(f), 6) for k, f in self.biome_fractions().items()}

        manifest_path = os.path.join(directory, MANIFEST_FILENAME)
        with open(manifest_path, 'w') as f:
            json.dump(manifest, f, indent=2)
        return manifest_path

    @classmethod
    def load(cls, directory: str) -> "TextureSet":
        """Reads a TextureSet previously written by save()."""
        manifest_path = os.path.join(directory, MANIFEST_FILENAME)
        if not os.path.exists(manifest_path):
            raise FileNotFoundError(f"Could not find '{MANIFEST_FILENAME}' in '{directory}'")

        with open(manifest_path, 'r') as f:
            manifest = json.load(f)

        channels = {}
        for name in DEFAULTS.TEXTURE_CHANNELS:
            filename = manifest.get("channels", {}).get(name)
            if filename is None or not os.path.exists(os.path.join(directory, filename)):
                raise FileNotFoundError(f"Channel '{name}' is missing from texture package '{directory}'")
            with Image.open(os.path.join(directory, filename)) as img:
                channels[name] = np.array(img.convert('RGBA'))

        biome_map = None
        if manifest.get("biome_map"):
            with Image.open(os.path.join(directory, manifest["biome_map"])) as img:
                biome_map = np.array(img)

        return cls(channels, seed=manifest.get("seed"), biome_map=biome_map)


class TextureSynthesizer:
    """
    Generates the static texture set of the planet. This class is backend-only
    and does not handle any visualization.
    """
    def __init__(self, config: dict, logger: logging.Logger):
        """
        Initializes the synthesizer.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
        """
        self.logger = logger
        self.settings = resolve_settings(config)
        self.width = DEFAULTS.TEXTURE_WIDTH
        self.height = DEFAULTS.TEXTURE_HEIGHT
        self.logger.info(
            f"TextureSynthesizer initialized for a {self.width}x{self.height} texture set "
            f"(water level {self.settings['water_level']:.2f}, {self.settings['octaves']} octaves)"
        )

    def resolve_seed(self, seed: float = None) -> float:
        """An explicit seed wins over the configured one; otherwise draw a random one."""
        if seed is not None:
            return float(seed)
        if self.settings['seed'] is not None:
            return self.settings['seed']
        rng = np.random.default_rng()
        random_seed = float(rng.uniform(0.0, DEFAULTS.SEED_RANGE))
        self.logger.debug(f"No seed provided, drew random seed {random_seed}")
        return random_seed

    def get_coordinate_grid(self, row_start: int, row_end: int):
        """Returns the normalized (u, v) grid for the texel rows [row_start, row_end)."""
        u = np.arange(self.width, dtype=np.float64) / self.width
        v = np.arange(row_start, row_end, dtype=np.float64) / self.height
        return np.meshgrid(u, v)

    def generate(self, seed: float = None, show_progress: bool = True) -> TextureSet:
        """
        Classifies every texel and packs the five bitmaps. Blocks until the whole
        set is complete.
        """
        seed = self.resolve_seed(seed)
        self.logger.info(f"Generating planet textures with seed: {seed}")
        start_time = time.perf_counter()

        shape = (self.height, self.width)
        color = np.empty(shape + (4,), dtype=np.uint8)
        bump = np.empty_like(color)
        roughness = np.empty_like(color)
        emissive = np.empty_like(color)
        cloud = np.empty_like(color)
        biome_map = np.empty(shape, dtype=np.uint8)

        band = DEFAULTS.SYNTHESIS_BAND_ROWS
        bands = range(0, self.height, band)
        for row_start in tqdm(bands, desc="Synthesizing Texels", disable=not show_progress):
            row_end = min(row_start + band, self.height)
            rows = slice(row_start, row_end)
            u_grid, v_grid = self.get_coordinate_grid(row_start, row_end)

            layers = biomes.calculate_surface(u_grid, v_grid, seed, self.settings)
            cloud_alpha = biomes.calculate_cloud_alpha(u_grid, v_grid, seed, self.settings)

            biome_map[rows] = layers.biome

            color[rows, :, :3] = _to_bytes(layers.color)
            color[rows, :, 3] = 255

            bump[rows, :, :3] = _to_bytes(layers.bump)[..., np.newaxis]
            bump[rows, :, 3] = 255

            roughness[rows, :, :3] = _to_bytes(layers.roughness * 255.0)[..., np.newaxis]
            roughness[rows, :, 3] = 255

            emissive[rows, :, :3] = _to_bytes(layers.emissive)
            emissive[rows, :, 3] = 255

            cloud[rows, :, :3] = 255
            cloud[rows, :, 3] = _to_bytes(cloud_alpha)

        texture_set = TextureSet(
            {"color": color, "bump": bump, "roughness": roughness, "emissive": emissive, "cloud": cloud},
            seed=seed,
            biome_map=biome_map,
        )

        elapsed = time.perf_counter() - start_time
        fractions = texture_set.biome_fractions()
        self.logger.info(f"Texture synthesis complete in {elapsed:.2f} seconds.")
        self.logger.info(
            "Surface composition: " + ", ".join(f"{name} {share:.1%}" for name, share in fractions.items())
        )
        return texture_set
