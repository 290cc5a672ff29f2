"""Circle scenes: names, particle data and the generators that build them."""

from __future__ import annotations

import math
import os
import struct
from array import array
from dataclasses import dataclass
from enum import Enum

from .crand import CRandom
from .image import clamp

NUM_FIREWORKS = 15
NUM_SPARKS = 20

_F32 = struct.Struct("f")


def _f32(value: float) -> float:
    return _F32.unpack(_F32.pack(value))[0]


class SceneLoadError(ValueError):
    """Raised when a scene cannot be named or loaded."""


class SceneName(Enum):
    """The scenes a renderer can draw, valued by their command-line names."""

    CIRCLE_RGB = "rgb"
    CIRCLE_RGBY = "rgby"
    CIRCLE_TEST_10K = "rand10k"
    CIRCLE_TEST_100K = "rand100k"
    PATTERN = "pattern"
    SNOWFLAKES = "snow"
    FIREWORKS = "fireworks"
    HYPNOSIS = "hypnosis"
    BOUNCING_BALLS = "bouncingballs"
    SNOWFLAKES_SINGLE_FRAME = "snowsingle"
    BIG_LITTLE = "biglittle"
    LITTLE_BIG = "littlebig"


@dataclass
class Scene:
    """Per-circle data; position, velocity and color hold three floats each."""

    name: SceneName
    position: array
    velocity: array
    color: array
    radius: array

    @property
    def num_circles(self) -> int:
        return len(self.radius)

    @classmethod
    def empty(cls, name: SceneName, count: int) -> "Scene":
        """A scene of ``count`` circles with every value zero."""
        return cls(
            name=name,
            position=array("f", bytes(12 * count)),
            velocity=array("f", bytes(12 * count)),
            color=array("f", bytes(12 * count)),
            radius=array("f", bytes(4 * count)),
        )


def parse_scene_name(text: str) -> SceneName:
    """Map a command-line scene name such as ``"rgb"`` to a SceneName."""
    try:
        return SceneName(text)
    except ValueError:
        raise SceneLoadError(f"Unknown scene name ({text})") from None


def _sorted_depths(rng: CRandom, count: int) -> list[float]:
    depths = array("f", (rng.random_float() for _ in range(count)))
    return sorted(depths, reverse=True)


def _fill_colors(scene: Scene, rng: CRandom, i: int, count: int) -> None:
    k = 3 * i
    if count <= 10000:
        scene.color[k] = 0.1 + 0.9 * rng.random_float()
        scene.color[k + 1] = 0.2 + 0.5 * rng.random_float()
        scene.color[k + 2] = 0.5 + 0.5 * rng.random_float()
    else:
        scene.color[k] = 0.3 + 0.9 * rng.random_float()
        scene.color[k + 1] = 0.1 + 0.9 * rng.random_float()
        scene.color[k + 2] = 0.1 + 0.4 * rng.random_float()


def _random_circles(scene: Scene, rng: CRandom) -> None:
    count = scene.num_circles
    rng.seed(0)
    for i, depth in enumerate(_sorted_depths(rng, count)):
        scene.radius[i] = 0.02 + 0.06 * rng.random_float()
        k = 3 * i
        scene.position[k] = rng.random_float()
        scene.position[k + 1] = rng.random_float()
        scene.position[k + 2] = depth
        _fill_colors(scene, rng, i, count)


def _sized_circles(scene: Scene, rng: CRandom, target_radius: float) -> None:
    count = scene.num_circles
    rng.seed(0)
    for i, depth in enumerate(_sorted_depths(rng, count)):
        scene.radius[i] = target_radius
        k = 3 * i
        scene.position[k] = rng.random_float()
        scene.position[k + 1] = rng.random_float()
        scene.position[k + 2] = depth
        _fill_colors(scene, rng, i, count)


def _change_circles(
    scene: Scene,
    rng: CRandom,
    start: int,
    count: int,
    target_radius: float,
    center: float,
    spread: float,
) -> None:
    for i in range(start, start + count):
        scene.radius[i] = target_radius
        k = 3 * i
        scene.position[k] = 0.9 - center + spread * rng.random_float()
        scene.position[k + 1] = center + spread * rng.random_float()


def _circle_grid(
    scene: Scene,
    rng: CRandom,
    start: int,
    per_side: int,
    circle_radius: float,
    circle_color: tuple[float, float, float],
    offset_x: float,
    offset_y: float,
) -> None:
    index = start
    for j in range(per_side):
        for i in range(per_side):
            k = 3 * index
            scene.position[k] = offset_x + 2.0 * circle_radius * i
            scene.position[k + 1] = offset_y + 2.0 * circle_radius * j
            scene.position[k + 2] = rng.random_float()
            scene.color[k : k + 3] = array("f", circle_color)
            scene.radius[index] = circle_radius
            index += 1


def _snowflakes(rng: CRandom) -> Scene:
    count = 100 * 1000
    scene = Scene.empty(SceneName.SNOWFLAKES, count)
    rng.seed(0)
    depths = array(
        "f",
        (
            clamp(
                _f32(_f32(i / count) ** _f32(0.1))
                + (-0.05 + 0.1 * rng.random_float()),
                0.0,
                1.0,
            )
            for i in range(count)
        ),
    )
    min_radius = _f32(0.0075)
    for i, depth in enumerate(sorted(depths, reverse=True)):
        actual = 0.08 - 0.0075 + 0.015 * rng.random_float()
        radius = _f32((1.0 - depth) * actual + depth * actual / 15.0)
        if depth < 0.02:
            radius = _f32(radius * 3.0)
        elif radius < min_radius:
            radius = min_radius
        scene.radius[i] = radius
        k = 3 * i
        scene.position[k] = rng.random_float()
        scene.position[k + 1] = 1.0 + radius + 2.0 * rng.random_float()
        scene.position[k + 2] = depth
    return scene


def _bouncing_balls(rng: CRandom) -> Scene:
    rng.seed(0)
    count = 10
    scene = Scene.empty(SceneName.BOUNCING_BALLS, count)
    for i in range(count):
        k = 3 * i
        scene.radius[i] = 0.05
        scene.position[k] = rng.random_float()
        scene.position[k + 1] = rng.random_float()
        scene.position[k + 2] = rng.random_float()
        scene.color[k + i % 3] = 1.0
        scene.velocity[k + 1] = rng.random_float()
    return scene


def _hypnosis(rng: CRandom) -> Scene:
    rng.seed(0)
    count = 25
    scene = Scene.empty(SceneName.HYPNOSIS, count)
    width = 0.02
    for i in range(count):
        k = 3 * i
        scene.position[k] = scene.position[k + 1] = 0.5
        scene.radius[i] = 0.02 + i * width
        scene.color[k] = rng.random_float()
        scene.color[k + 1] = rng.random_float()
        scene.color[k + 2] = rng.random_float()
    return scene


def _fireworks(rng: CRandom) -> Scene:
    rng.seed(0)
    pi = _f32(3.14159)
    count = NUM_FIREWORKS + NUM_FIREWORKS * NUM_SPARKS
    scene = Scene.empty(SceneName.FIREWORKS, count)
    for i in range(NUM_FIREWORKS):
        ki = 3 * i
        scene.radius[i] = 0.005
        scene.color[ki : ki + 3] = array("f", (1.0, 1.0, 1.0))
        scene.position[ki] = rng.random_float()
        scene.position[ki + 1] = rng.random_float()
        for j in range(NUM_SPARKS):
            spark = NUM_FIREWORKS + i * NUM_SPARKS + j
            kj = 3 * spark
            scene.radius[spark] = 0.01
            scene.color[kj + i % 3] = 1.0
            angle = _f32(_f32(j * 2 * pi) / NUM_SPARKS)
            sin_a = _f32(math.sin(angle))
            cos_a = _f32(math.cos(angle))
            x = _f32(cos_a * scene.radius[i])
            y = _f32(sin_a * scene.radius[i])
            scene.position[kj] = scene.position[ki] + x
            scene.position[kj + 1] = scene.position[ki + 1] + y
            scene.position[kj + 2] = 0.0
            scene.velocity[kj] = cos_a / 5.0
            scene.velocity[kj + 1] = sin_a / 5.0
            scene.velocity[kj + 2] = 0.0
    return scene


def _snow_single(snow_file: str | os.PathLike) -> Scene:
    filename = os.fspath(snow_file)
    try:
        with open(filename, "r", encoding="ascii") as fh:
            tokens = fh.read().split()
    except OSError as exc:
        raise SceneLoadError(f"Could not open file: {filename}") from exc
    try:
        count = int(tokens[0])
    except (IndexError, ValueError):
        raise SceneLoadError(
            "Error reading num circles data from scene file."
        ) from None
    if count < 0:
        raise SceneLoadError("Error reading num circles data from scene file.")
    fields = tokens[1 : 1 + 7 * count]
    if len(fields) < 7 * count:
        raise SceneLoadError("Error reading circle data from scene file.")
    try:
        values = [float(tok) for tok in fields]
    except ValueError:
        raise SceneLoadError("Error reading circle data from scene file.") from None
    scene = Scene.empty(SceneName.SNOWFLAKES_SINGLE_FRAME, count)
    for i in range(count):
        row = values[7 * i : 7 * i + 7]
        k = 3 * i
        scene.position[k : k + 3] = array("f", row[0:3])
        scene.velocity[k : k + 3] = array("f", row[3:6])
        scene.radius[i] = row[6]
    print(f"Loaded data for {count} circles from {filename}")
    return scene


def _rgb() -> Scene:
    scene = Scene.empty(SceneName.CIRCLE_RGB, 3)
    scene.radius[:] = array("f", (0.3, 0.3, 0.3))
    scene.position[:] = array(
        "f", (0.4, 0.5, 0.75, 0.5, 0.5, 0.5, 0.6, 0.5, 0.25)
    )
    scene.color[:] = array("f", (1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0))
    return scene


def _rgby() -> Scene:
    tiny, small, big = 0.1, 0.19, 0.25
    scene = Scene.empty(SceneName.CIRCLE_RGBY, 4)
    scene.radius[:] = array("f", (small, small, big, tiny))
    scene.position[:] = array(
        "f", (0.25, 0.25, 0.75, 0.3, 0.3, 0.5, 0.5, 0.5, 0.25, 0.2, 0.2, 0.9)
    )
    scene.color[:] = array(
        "f", (1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 1.0, 1.0, 0.0)
    )
    return scene


def _big_little(rng: CRandom, name: SceneName, center: float) -> Scene:
    scene = Scene.empty(name, 10 * 1000)
    _sized_circles(scene, rng, 0.25)
    _change_circles(scene, rng, 9 * 1000, 1 * 1000, 0.05, center, 0.1)
    return scene


def _random_scene(rng: CRandom, name: SceneName, count: int) -> Scene:
    scene = Scene.empty(name, count)
    _random_circles(scene, rng)
    return scene


def _pattern(rng: CRandom) -> Scene:
    first, second = 16, 31
    scene = Scene.empty(SceneName.PATTERN, first * first + second * second)
    circle_radius = _f32(0.5 * _f32(1.0 / first))
    _circle_grid(
        scene, rng, 0, first, circle_radius, (1.0, 0.0, 0.0),
        circle_radius, circle_radius,
    )
    _circle_grid(
        scene, rng, first * first, second, circle_radius, (1.0, 1.0, 0.0),
        0.0, 0.0,
    )
    return scene


def load_scene(name: SceneName, snow_file: str | os.PathLike = "snow.par") -> Scene:
    """Build the circles of scene ``name``.

    ``snow_file`` is read only for the single-frame snow scene.
    """
    rng = CRandom()
    if name is SceneName.SNOWFLAKES:
        scene = _snowflakes(rng)
    elif name is SceneName.BOUNCING_BALLS:
        scene = _bouncing_balls(rng)
    elif name is SceneName.HYPNOSIS:
        scene = _hypnosis(rng)
    elif name is SceneName.FIREWORKS:
        scene = _fireworks(rng)
    elif name is SceneName.SNOWFLAKES_SINGLE_FRAME:
        scene = _snow_single(snow_file)
    elif name is SceneName.CIRCLE_RGB:
        scene = _rgb()
    elif name is SceneName.CIRCLE_RGBY:
        scene = _rgby()
    elif name is SceneName.BIG_LITTLE:
        scene = _big_little(rng, name, 0.85)
    elif name is SceneName.LITTLE_BIG:
        scene = _big_little(rng, name, 0.05)
    elif name is SceneName.CIRCLE_TEST_10K:
        scene = _random_scene(rng, name, 10 * 1000)
    elif name is SceneName.CIRCLE_TEST_100K:
        scene = _random_scene(rng, name, 100 * 1000)
    elif name is SceneName.PATTERN:
        scene = _pattern(rng)
    else:
        raise SceneLoadError("cannot load scene (unknown scene)")
    print(f"Loaded scene with {scene.num_circles} circles")
    return scene