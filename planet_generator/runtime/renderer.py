# planet_generator/runtime/renderer.py

"""
================================================================================
CPU PREVIEW RENDERER
================================================================================
A small software renderer that draws the textured planet as seen from a fixed
camera on the +z axis. It is the reference consumer of the core contracts:
the TextureSet, the per-frame OrbitalState and IlluminationState, and the
emissive post-process extension point.

Data Contract:
---------------
- Inputs (on initialization):
    - texture_set (TextureSet): The generated bitmaps.
    - illumination (IlluminationModel): Supplies the default post-process.
    - resolution (int): Side of the square output image in pixels.
- Public Methods:
    - register_emissive_post_process(callback): Replaces the emissive rule.
    - render(orbital_state, illumination_state): Returns an (N, N, 3) uint8 image.
    - render_background(orbital_state): The star field and atmosphere halo alone.
- Side Effects: None.
================================================================================
"""
import logging
import math

import numpy as np
from scipy.ndimage import map_coordinates

from .. import config as DEFAULTS
from .illumination import IlluminationModel, IlluminationState
from .orbits import OrbitalState

# The planet fills this share of the frame.
_FRAME_MARGIN = 1.15
_SPECULAR_STRENGTH = 0.6


def rotation_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def rotation_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def rotation_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def look_along_z(distance: float) -> np.ndarray:
    """View matrix of a camera at (0, 0, distance) looking at the origin."""
    view = np.eye(4)
    view[2, 3] = -distance
    return view


def sphere_uv(local_points: np.ndarray):
    """
    Equirectangular (u, v) of unit-sphere points: v=0 at the north pole (+y),
    u increasing with longitude as on a standard UV sphere.
    """
    x, y, z = local_points[..., 0], local_points[..., 1], local_points[..., 2]
    v = np.arccos(np.clip(y, -1.0, 1.0)) / math.pi
    u = np.mod(np.arctan2(z, -x), 2.0 * math.pi) / (2.0 * math.pi)
    return u, v


def sample_bitmap(bitmap: np.ndarray, u: np.ndarray, v: np.ndarray, channels=(0, 1, 2)) -> np.ndarray:
    """Bilinear, horizontally wrapping texture lookup. Returns floats in 0-255."""
    height, width = bitmap.shape[:2]
    coords = np.stack([v * height - 0.5, u * width - 0.5])
    return np.stack(
        [map_coordinates(bitmap[..., c], coords, output=np.float64, order=1, mode='grid-wrap') for c in channels],
        axis=-1
    )


class PreviewRenderer:
    """Renders the planet disc with two directional stars and the night glow."""

    def __init__(self, texture_set, illumination: IlluminationModel = None,
                 resolution: int = 256, camera_distance: float = DEFAULTS.CAMERA_DISTANCE):
        self.logger = logging.getLogger(__name__)
        self.texture_set = texture_set
        self.illumination = illumination or IlluminationModel()
        self.resolution = int(resolution)
        self.camera_distance = camera_distance
        self.view_matrix = look_along_z(camera_distance)
        self._emissive_post_process = self.illumination.apply

        # --- Pre-calculate the visible hemisphere, it never changes ---
        axis = np.linspace(-_FRAME_MARGIN, _FRAME_MARGIN, self.resolution)
        sx, sy = np.meshgrid(axis, -axis)
        radius_sq = sx ** 2 + sy ** 2
        self._disc_mask = radius_sq <= 1.0
        sz = np.sqrt(np.clip(1.0 - radius_sq[self._disc_mask], 0.0, 1.0))
        # Camera looks down -z without rotation, so view and world directions coincide.
        self._normals = np.stack([sx[self._disc_mask], sy[self._disc_mask], sz], axis=-1)
        self._view_positions = self._normals + np.array([0.0, 0.0, -camera_distance])
        self._halo = self._atmosphere_halo(radius_sq)

        # --- Seeded star directions on the unit sphere, fixed for the renderer's lifetime ---
        rng = np.random.default_rng(DEFAULTS.STAR_FIELD_SEED)
        directions = rng.normal(size=(DEFAULTS.STAR_FIELD_COUNT, 3))
        self._star_directions = directions / np.linalg.norm(directions, axis=-1, keepdims=True)
        self._star_brightness = rng.uniform(*DEFAULTS.STAR_BRIGHTNESS_RANGE, size=DEFAULTS.STAR_FIELD_COUNT)

    def _atmosphere_halo(self, radius_sq: np.ndarray) -> np.ndarray:
        """
        Additive fresnel glow of the back faces of the atmosphere shell. The
        planet hides the part behind the disc, leaving a ring around the limb.
        """
        scale = DEFAULTS.ATMOSPHERE_SCALE
        ring = (radius_sq > 1.0) & (radius_sq < scale * scale)
        halo = np.zeros((self.resolution, self.resolution, 3))
        # Back-face normals point away from the camera.
        view_dot = -np.sqrt(1.0 - radius_sq[ring] / (scale * scale))
        intensity = (DEFAULTS.ATMOSPHERE_FRESNEL_BIAS - view_dot) ** DEFAULTS.ATMOSPHERE_FRESNEL_POWER
        inner = np.array(DEFAULTS.ATMOSPHERE_INNER_COLOR)
        rim = np.array(DEFAULTS.ATMOSPHERE_RIM_COLOR)
        mix = (intensity * 0.8)[:, np.newaxis]
        color = inner + (rim - inner) * mix
        halo[ring] = color * (intensity * DEFAULTS.ATMOSPHERE_INTENSITY)[:, np.newaxis]
        return halo

    def _star_field(self, background_rotation: tuple) -> np.ndarray:
        """Projects the rotated star directions onto the frame as single pixels."""
        rotate_y, rotate_z = background_rotation
        directions = self._star_directions @ (rotation_y(rotate_y) @ rotation_z(rotate_z)).T

        # Stars lie at infinity; only those in front of the camera (towards -z) are seen.
        ahead = directions[:, 2] < 0.0
        depth = -directions[ahead, 2]
        half_extent = _FRAME_MARGIN / self.camera_distance
        screen_x = directions[ahead, 0] / depth / half_extent
        screen_y = directions[ahead, 1] / depth / half_extent

        last = self.resolution - 1
        cols = np.rint((screen_x + 1.0) * 0.5 * last).astype(np.int64)
        rows = np.rint((1.0 - screen_y) * 0.5 * last).astype(np.int64)
        on_screen = (cols >= 0) & (cols <= last) & (rows >= 0) & (rows <= last)

        field = np.zeros((self.resolution, self.resolution))
        np.maximum.at(field, (rows[on_screen], cols[on_screen]), self._star_brightness[ahead][on_screen])
        return field

    def render_background(self, orbital_state: OrbitalState) -> np.ndarray:
        """Deep space with the rotating star field and the atmosphere halo, as floats in 0-1."""
        background = np.empty((self.resolution, self.resolution, 3))
        background[...] = np.array(DEFAULTS.SPACE_COLOR) / 255.0
        stars = self._star_field(orbital_state.background_rotation)[..., np.newaxis]
        background = np.maximum(background, stars)
        return background + self._halo

    def register_emissive_post_process(self, callback):
        """
        Installs `callback(base_emissive, night_mask) -> adjusted_emissive`,
        invoked once per frame for all fragments.
        """
        self._emissive_post_process = callback
        self.logger.info(f"Emissive post-process set to {getattr(callback, '__name__', callback)!r}")

    def _diffuse_light(self, normals: np.ndarray, state: OrbitalState) -> np.ndarray:
        light = np.tile(np.array(DEFAULTS.AMBIENT_COLOR) / 255.0 * DEFAULTS.AMBIENT_INTENSITY, (len(normals), 1))
        stars = (
            (state.primary_star_position, DEFAULTS.PRIMARY_STAR_COLOR, DEFAULTS.PRIMARY_STAR_INTENSITY),
            (state.secondary_star_position, DEFAULTS.SECONDARY_STAR_COLOR, DEFAULTS.SECONDARY_STAR_INTENSITY),
        )
        for position, color, intensity in stars:
            direction = np.asarray(position, dtype=np.float64)
            direction = direction / np.linalg.norm(direction)
            lambert = np.clip(normals @ direction, 0.0, None)[:, np.newaxis]
            light += lambert * (np.array(color) / 255.0) * intensity / math.pi
        return light

    def _specular(self, normals: np.ndarray, roughness: np.ndarray, state: OrbitalState) -> np.ndarray:
        direction = np.asarray(state.primary_star_position, dtype=np.float64)
        direction = direction / np.linalg.norm(direction)
        view_dir = -self._view_positions / np.linalg.norm(self._view_positions, axis=-1, keepdims=True)
        half = direction + view_dir
        half /= np.linalg.norm(half, axis=-1, keepdims=True)
        gloss = 1.0 - roughness
        exponent = 8.0 + 120.0 * gloss
        highlight = np.clip(np.sum(normals * half, axis=-1), 0.0, 1.0) ** exponent
        lit = (normals @ direction) > 0
        return (_SPECULAR_STRENGTH * gloss * gloss * highlight * lit)[:, np.newaxis]

    def render(self, orbital_state: OrbitalState, illumination_state: IlluminationState) -> np.ndarray:
        """Draws one frame. Every fragment reads the same illumination snapshot."""
        normals = self._normals

        # --- 1. Surface texture lookup in the planet's rotating, tilted frame ---
        planet_frame = rotation_z(orbital_state.axial_tilt) @ rotation_y(orbital_state.planet_rotation)
        u, v = sphere_uv(normals @ planet_frame)
        albedo = sample_bitmap(self.texture_set.color, u, v) / 255.0
        base_emissive = sample_bitmap(self.texture_set.emissive, u, v) / 255.0
        roughness = sample_bitmap(self.texture_set.roughness, u, v, channels=(0,))[:, 0] / 255.0

        # --- 2. Lighting ---
        lit = albedo * self._diffuse_light(normals, orbital_state)
        lit += self._specular(normals, roughness, orbital_state)

        result = self.illumination.evaluate(illumination_state, self.view_matrix, self._view_positions, normals)
        lit += self._emissive_post_process(base_emissive, result.night_mask)

        # --- 3. Cloud shell, blended additively ---
        cloud_x, cloud_y = orbital_state.cloud_rotation
        cloud_frame = rotation_z(orbital_state.axial_tilt) @ rotation_x(cloud_x) @ rotation_y(cloud_y)
        cu, cv = sphere_uv(normals @ cloud_frame)
        cloud_alpha = sample_bitmap(self.texture_set.cloud, cu, cv, channels=(3,)) / 255.0
        cloud_light = self._diffuse_light(normals, orbital_state)
        lit += (np.array(DEFAULTS.CLOUD_TINT) / 255.0) * cloud_alpha * DEFAULTS.CLOUD_OPACITY * cloud_light

        # --- 4. Compose onto the star field and atmosphere ---
        frame = self.render_background(orbital_state)
        frame[self._disc_mask] = lit
        return np.clip(np.rint(frame * 255.0), 0, 255).astype(np.uint8)
