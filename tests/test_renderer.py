import math
from array import array

import pytest

from parlab.renderer import CircleRenderer, RefRenderer
from parlab.scenes import NUM_FIREWORKS, NUM_SPARKS, Scene, SceneName, load_scene


def _renderer(name, size=64):
    renderer = RefRenderer()
    renderer.alloc_output_image(size, size)
    renderer.load_scene(name)
    renderer.setup()
    return renderer


def test_circle_renderer_is_abstract():
    with pytest.raises(TypeError):
        CircleRenderer()


def test_image_none_before_allocation():
    renderer = RefRenderer()
    assert renderer.image is None
    renderer.alloc_output_image(8, 6)
    assert (renderer.image.width, renderer.image.height) == (8, 6)


def test_clear_without_image_raises():
    with pytest.raises(RuntimeError):
        RefRenderer().clear_image()


def test_render_without_scene_raises():
    renderer = RefRenderer()
    renderer.alloc_output_image(4, 4)
    with pytest.raises(RuntimeError):
        renderer.render()


def test_clear_to_white():
    renderer = _renderer(SceneName.CIRCLE_RGB, 8)
    renderer.clear_image()
    assert all(v == 1.0 for v in renderer.image.data)


def test_snow_clear_ramp():
    renderer = RefRenderer()
    renderer.alloc_output_image(4, 10)
    renderer.scene = Scene.empty(SceneName.SNOWFLAKES_SINGLE_FRAME, 0)
    renderer.clear_image()
    bottom = list(renderer.image.pixel(0, 0))
    top = list(renderer.image.pixel(0, 9))
    assert bottom[0] == pytest.approx(0.85, abs=1e-6)
    assert bottom[3] == 1.0
    assert bottom[0] == bottom[1] == bottom[2]
    assert top[0] < bottom[0]


def test_shade_pixel_solid_color():
    renderer = RefRenderer()
    renderer.load_scene(SceneName.CIRCLE_RGB)
    pixel = [0.0, 0.0, 0.0, 0.0]
    px, py, pz = renderer.scene.position[0:3]
    renderer.shade_pixel(0, px, py, px, py, pz, pixel)
    assert pixel == pytest.approx([0.5, 0.0, 0.0, 0.5])


def test_shade_pixel_outside_radius_untouched():
    renderer = RefRenderer()
    renderer.load_scene(SceneName.CIRCLE_RGB)
    pixel = [0.2, 0.3, 0.4, 1.0]
    px, py, pz = renderer.scene.position[0:3]
    renderer.shade_pixel(0, px + 0.5, py, px, py, pz, pixel)
    assert pixel == [0.2, 0.3, 0.4, 1.0]


def test_shade_pixel_snow_center():
    renderer = RefRenderer()
    scene = Scene.empty(SceneName.SNOWFLAKES_SINGLE_FRAME, 1)
    scene.position[:] = array("f", (0.5, 0.5, 0.0))
    scene.radius[0] = 0.1
    renderer.scene = scene
    pixel = [0.0, 0.0, 0.0, 0.0]
    renderer.shade_pixel(0, 0.5, 0.5, 0.5, 0.5, 0.0, pixel)
    assert pixel == pytest.approx([0.5, 0.5, 0.5, 0.5])


def test_render_rgb_blends_in_order():
    renderer = _renderer(SceneName.CIRCLE_RGB, 64)
    renderer.clear_image()
    renderer.render()
    corner = list(renderer.image.pixel(0, 0))
    center = list(renderer.image.pixel(32, 32))
    assert corner == [1.0, 1.0, 1.0, 1.0]
    assert center[3] == pytest.approx(2.5)
    assert center[2] > center[1] > center[0]


def test_hypnosis_radius_grows_and_wraps():
    renderer = _renderer(SceneName.HYPNOSIS)
    first = renderer.scene.radius[0]
    renderer.advance_animation()
    assert renderer.scene.radius[0] == pytest.approx(first + 0.01, abs=1e-6)
    for _ in range(100):
        renderer.advance_animation()
    assert all(0.019 < r < 0.52 for r in renderer.scene.radius)


def test_bouncing_balls_move_vertically_only():
    renderer = _renderer(SceneName.BOUNCING_BALLS)
    before = list(renderer.scene.position)
    old_vy = renderer.scene.velocity[1]
    renderer.advance_animation()
    after = list(renderer.scene.position)
    for i in range(renderer.scene.num_circles):
        assert after[3 * i] == before[3 * i]
        assert after[3 * i + 2] == before[3 * i + 2]
    assert renderer.scene.velocity[1] == pytest.approx(old_vy - 2.8 / 60.0, abs=1e-5)


def test_fireworks_sparks_stay_near_center():
    renderer = _renderer(SceneName.FIREWORKS)
    for _ in range(120):
        renderer.advance_animation()
    pos = renderer.scene.position
    for i in range(NUM_FIREWORKS):
        cx, cy = pos[3 * i], pos[3 * i + 1]
        for j in range(NUM_SPARKS):
            k = 3 * (NUM_FIREWORKS + i * NUM_SPARKS + j)
            assert math.hypot(pos[k] - cx, pos[k + 1] - cy) <= 0.25 + 1e-5


def test_snowflake_below_screen_is_respawned():
    renderer = RefRenderer()
    scene = Scene.empty(SceneName.SNOWFLAKES, 1)
    scene.position[:] = array("f", (0.5, -1.0, 0.5))
    scene.radius[0] = 0.01
    renderer.scene = scene
    renderer.advance_animation()
    assert scene.position[1] == pytest.approx(1.36, abs=1e-6)
    assert scene.velocity[1] == 0.0
    assert 0.0 <= scene.position[0] <= 1.0


def test_dump_particles_round_trip(tmp_path):
    renderer = RefRenderer()
    renderer.load_scene(SceneName.CIRCLE_RGBY)
    path = tmp_path / "particles.par"
    renderer.dump_particles(path)
    loaded = load_scene(SceneName.SNOWFLAKES_SINGLE_FRAME, path)
    assert loaded.num_circles == renderer.scene.num_circles
    assert list(loaded.position) == pytest.approx(list(renderer.scene.position), abs=1e-6)
    assert list(loaded.radius) == pytest.approx(list(renderer.scene.radius), abs=1e-6)


def test_dump_particles_header(tmp_path):
    renderer = RefRenderer()
    renderer.load_scene(SceneName.CIRCLE_RGB)
    path = tmp_path / "p.par"
    renderer.dump_particles(path)
    lines = path.read_text().splitlines()
    assert lines[0] == "3"
    assert len(lines) == 4
    assert len(lines[1].split()) == 7