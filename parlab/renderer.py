"""Reference circle renderer: clears, animates and draws a circle scene."""

from __future__ import annotations

import math
import os
import struct
from abc import ABC, abstractmethod
from array import array
from typing import MutableSequence

from .image import Image, clamp
from .noise import vec2_cell_noise
from .scenes import NUM_FIREWORKS, NUM_SPARKS, Scene, SceneName
from .scenes import load_scene as _load_scene

_F32 = struct.Struct("f")

_COLOR_TABLE: tuple[tuple[float, float, float], ...] = (
    (1.0, 1.0, 1.0),
    (1.0, 1.0, 1.0),
    (0.8, 0.9, 1.0),
    (0.8, 0.9, 1.0),
    (0.8, 0.8, 1.0),
)

_SNOW_SCENES = (SceneName.SNOWFLAKES, SceneName.SNOWFLAKES_SINGLE_FRAME)


def _f32(value: float) -> float:
    return _F32.unpack(_F32.pack(value))[0]


def _lookup_color(coord: float) -> tuple[float, float, float]:
    """Interpolate the snowflake colour ramp at ``coord`` in [0, 1]."""
    last = len(_COLOR_TABLE) - 1
    scaled = coord * last
    base = min(int(scaled), last)
    upper = min(base + 1, last)
    weight = scaled - base
    lo, hi = _COLOR_TABLE[base], _COLOR_TABLE[upper]
    return tuple((1.0 - weight) * a + weight * b for a, b in zip(lo, hi))


class CircleRenderer(ABC):
    """Interface shared by circle renderers."""

    @property
    @abstractmethod
    def image(self) -> Image | None:
        """The image rendered into, or None before allocation."""

    @abstractmethod
    def setup(self) -> None:
        """Prepare the renderer after the scene and image are in place."""

    @abstractmethod
    def load_scene(self, name: SceneName) -> None:
        """Load the circles of scene ``name``."""

    @abstractmethod
    def alloc_output_image(self, width: int, height: int) -> None:
        """Allocate the image rendered into."""

    @abstractmethod
    def clear_image(self) -> None:
        """Reset the image to the scene's background."""

    @abstractmethod
    def advance_animation(self) -> None:
        """Advance the simulation one time step."""

    @abstractmethod
    def render(self) -> None:
        """Draw every circle into the image."""


class RefRenderer(CircleRenderer):
    """Sequential renderer that blends circles in scene order."""

    def __init__(self, snow_file: str | os.PathLike = "snow.par") -> None:
        self._image: Image | None = None
        self.scene: Scene | None = None
        self.snow_file = snow_file

    @property
    def image(self) -> Image | None:
        return self._image

    def _require_image(self) -> Image:
        if self._image is None:
            raise RuntimeError("output image has not been allocated")
        return self._image

    def _require_scene(self) -> Scene:
        if self.scene is None:
            raise RuntimeError("no scene has been loaded")
        return self.scene

    def setup(self) -> None:
        """Nothing to prepare for the reference renderer."""

    def load_scene(self, name: SceneName) -> None:
        self.scene = _load_scene(name, self.snow_file)

    def alloc_output_image(self, width: int, height: int) -> None:
        self._image = Image(width, height)

    def clear_image(self) -> None:
        """Clear to white, or to a vertical grey ramp for the snow scenes."""
        image = self._require_image()
        if self.scene is not None and self.scene.name in _SNOW_SCENES:
            width, height = image.width, image.height
            row_len = 4 * width
            for j in range(height):
                shade = 0.4 + 0.45 * _f32((height - j) / height)
                image.data[j * row_len : (j + 1) * row_len] = (
                    array("f", (shade, shade, shade, 1.0)) * width
                )
        else:
            image.clear(1.0, 1.0, 1.0, 1.0)

    def advance_animation(self) -> None:
        scene = self._require_scene()
        if scene.name is SceneName.SNOWFLAKES:
            self._advance_snow(scene)
        elif scene.name is SceneName.BOUNCING_BALLS:
            self._advance_bouncing(scene)
        elif scene.name is SceneName.HYPNOSIS:
            self._advance_hypnosis(scene)
        elif scene.name is SceneName.FIREWORKS:
            self._advance_fireworks(scene)

    @staticmethod
    def _advance_snow(scene: Scene) -> None:
        dt = _f32(1.0 / 60.0)
        gravity = -1.8
        drag = 2.0
        pos, vel, radius = scene.position, scene.velocity, scene.radius
        for i in range(scene.num_circles):
            k = 3 * i
            scaling = clamp(1.0 - pos[k + 2], 0.1, 1.0)
            nx, ny = vec2_cell_noise(
                (_f32(10.0 * pos[k]), _f32(10.0 * pos[k + 1]), _f32(255.0 * pos[k + 2])),
                i,
            )
            nx *= 7.5
            ny *= 5.0
            drag_x = -drag * vel[k]
            drag_y = -drag * vel[k + 1]

            pos[k] += vel[k] * dt
            pos[k + 1] += vel[k + 1] * dt
            pos[k + 2] += vel[k + 2] * dt

            vel[k] += scaling * (nx + drag_x) * dt
            vel[k + 1] += scaling * (gravity + ny + drag_y) * dt

            r = radius[i]
            if pos[k + 1] + r < 0.0 or pos[k] + r < 0.0 or pos[k] - r > 1.0:
                nx, ny = vec2_cell_noise(
                    (
                        _f32(255.0 * pos[k]),
                        _f32(255.0 * pos[k + 1]),
                        _f32(255.0 * pos[k + 2]),
                    ),
                    i,
                )
                pos[k] = 0.5 + 0.5 * nx
                pos[k + 1] = 1.35 + r
                vel[k] = 2.0 * ny
                vel[k + 1] = 0.0

    @staticmethod
    def _advance_bouncing(scene: Scene) -> None:
        dt = _f32(1.0 / 60.0)
        gravity = -2.8
        bounce = -0.8
        epsilon = 0.001
        pos, vel = scene.position, scene.velocity
        for i in range(scene.num_circles):
            k = 3 * i + 1
            old_v = vel[k]
            old_p = pos[k]
            if old_v == 0.0 and old_p == 0.0:
                continue
            if pos[k] < 0.0 and old_v < 0.0:
                vel[k] *= bounce
            vel[k] += _f32(gravity * dt)
            pos[k] += vel[k] * dt
            if (
                abs(vel[k] - old_v) < epsilon
                and old_p < 0.0
                and abs(pos[k] - old_p) < epsilon
            ):
                vel[k] = 0.0
                pos[k] = 0.0

    @staticmethod
    def _advance_hypnosis(scene: Scene) -> None:
        cut_off = 0.5
        radius = scene.radius
        for i in range(scene.num_circles):
            if radius[i] > cut_off:
                radius[i] = 0.02
            else:
                radius[i] += 0.01

    @staticmethod
    def _advance_fireworks(scene: Scene) -> None:
        dt = _f32(1.0 / 60.0)
        pi = _f32(3.14159)
        max_dist = 0.25
        pos, vel, radius = scene.position, scene.velocity, scene.radius
        for i in range(NUM_FIREWORKS):
            ki = 3 * i
            cx, cy = pos[ki], pos[ki + 1]
            for j in range(NUM_SPARKS):
                kj = 3 * (NUM_FIREWORKS + i * NUM_SPARKS + j)
                pos[kj] += vel[kj] * dt
                pos[kj + 1] += vel[kj + 1] * dt
                dx = _f32(pos[kj] - cx)
                dy = _f32(pos[kj + 1] - cy)
                if math.sqrt(dx * dx + dy * dy) > max_dist:
                    angle = _f32(_f32(j * 2 * pi) / NUM_SPARKS)
                    sin_a = _f32(math.sin(angle))
                    cos_a = _f32(math.cos(angle))
                    pos[kj] = pos[ki] + _f32(cos_a * radius[i])
                    pos[kj + 1] = pos[ki + 1] + _f32(sin_a * radius[i])
                    pos[kj + 2] = 0.0
                    vel[kj] = cos_a / 5.0
                    vel[kj + 1] = sin_a / 5.0
                    vel[kj + 2] = 0.0

    def shade_pixel(
        self,
        circle_index: int,
        pixel_center_x: float,
        pixel_center_y: float,
        px: float,
        py: float,
        pz: float,
        pixel: MutableSequence[float],
    ) -> None:
        """Blend circle ``circle_index``'s contribution into ``pixel`` (RGBA)."""
        scene = self._require_scene()
        diff_x = _f32(px - pixel_center_x)
        diff_y = _f32(py - pixel_center_y)
        pixel_dist = _f32(diff_x * diff_x + diff_y * diff_y)
        rad = scene.radius[circle_index]
        if pixel_dist > _f32(rad * rad):
            return

        if scene.name in _SNOW_SCENES:
            norm_dist = _f32(math.sqrt(pixel_dist) / rad)
            col_r, col_g, col_b = _lookup_color(norm_dist)
            max_alpha = 0.5 * clamp(0.6 + 0.4 * (1.0 - pz), 0.0, 1.0)
            alpha = _f32(max_alpha * math.exp(-4.0 * norm_dist * norm_dist))
        else:
            k = 3 * circle_index
            col_r, col_g, col_b = scene.color[k : k + 3]
            alpha = 0.5

        keep = 1.0 - alpha
        pixel[0] = alpha * col_r + keep * pixel[0]
        pixel[1] = alpha * col_g + keep * pixel[1]
        pixel[2] = alpha * col_b + keep * pixel[2]
        pixel[3] = pixel[3] + alpha

    def render(self) -> None:
        """Draw all circles in scene order, blending over the current image."""
        scene = self._require_scene()
        image = self._require_image()
        width, height = image.width, image.height
        inv_w = _f32(1.0 / width)
        inv_h = _f32(1.0 / height)
        with memoryview(image.data) as view:
            for index in range(scene.num_circles):
                k = 3 * index
                px, py, pz = scene.position[k : k + 3]
                rad = scene.radius[index]
                x0 = clamp(int(_f32(px - rad) * width), 0, width)
                x1 = clamp(int(_f32(px + rad) * width) + 1, 0, width)
                y0 = clamp(int(_f32(py - rad) * height), 0, height)
                y1 = clamp(int(_f32(py + rad) * height) + 1, 0, height)
                for y in range(y0, y1):
                    center_y = _f32(inv_h * (y + 0.5))
                    row = 4 * y * width
                    for x in range(x0, x1):
                        center_x = _f32(inv_w * (x + 0.5))
                        offset = row + 4 * x
                        self.shade_pixel(
                            index, center_x, center_y, px, py, pz,
                            view[offset : offset + 4],
                        )

    def dump_particles(self, filename: str | os.PathLike) -> None:
        """Write circle positions, velocities and radii in the snow file format."""
        scene = self._require_scene()
        pos, vel, radius = scene.position, scene.velocity, scene.radius
        with open(filename, "w", encoding="ascii") as fh:
            fh.write(f"{scene.num_circles}\n")
            for i in range(scene.num_circles):
                k = 3 * i
                fh.write(
                    f"{pos[k]:f} {pos[k + 1]:f} {pos[k + 2]:f}   "
                    f"{vel[k]:f} {vel[k + 1]:f} {vel[k + 2]:f}   "
                    f"{radius[i]:f}\n"
                )