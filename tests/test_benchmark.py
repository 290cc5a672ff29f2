import pytest

from parlab.benchmark import (
    BenchmarkTimes,
    ImageMismatchError,
    check_benchmark,
    compare_images,
    start_benchmark,
)
from parlab.image import Image
from parlab.renderer import RefRenderer
from parlab.scenes import SceneName


def _renderer(scene, size=8):
    renderer = RefRenderer()
    renderer.alloc_output_image(size, size)
    renderer.load_scene(scene)
    renderer.setup()
    return renderer


def _images_with_mismatches(count):
    ref = Image(4, 4)
    actual = Image(4, 4)
    colour_slots = [i for i in range(len(ref.data)) if i % 4 != 3]
    for slot in colour_slots[:count]:
        ref.data[slot] = 1.0
    return ref, actual


def test_identical_images_have_no_mismatches(capsys):
    ref, actual = _images_with_mismatches(0)
    assert compare_images(ref, actual) == 0
    assert "Correctness check passed" in capsys.readouterr().out


def test_five_mismatches_are_tolerated():
    ref, actual = _images_with_mismatches(5)
    assert compare_images(ref, actual) == 5


def test_six_mismatches_raise():
    ref, actual = _images_with_mismatches(6)
    with pytest.raises(ImageMismatchError):
        compare_images(ref, actual)


def test_alpha_differences_are_ignored():
    ref = Image(2, 2)
    actual = Image(2, 2)
    for slot in range(3, len(ref.data), 4):
        ref.data[slot] = 1.0
    assert compare_images(ref, actual) == 0


def test_small_differences_are_ignored():
    ref = Image(2, 2)
    actual = Image(2, 2)
    ref.clear(0.5, 0.5, 0.5, 1.0)
    actual.clear(0.55, 0.45, 0.5, 1.0)
    assert compare_images(ref, actual) == 0


def test_dimension_mismatch_raises():
    with pytest.raises(ImageMismatchError):
        compare_images(Image(2, 2), Image(2, 3))


def test_mismatch_report_names_channel(capsys):
    ref = Image(2, 1)
    actual = Image(2, 1)
    ref.data[5] = 1.0
    assert compare_images(ref, actual) == 1
    out = capsys.readouterr().out
    assert "pixel [0][1]" in out
    assert "Green" in out


def test_start_benchmark_dumps_timed_frames(tmp_path, capsys):
    prefix = str(tmp_path / "frame")
    times = start_benchmark(_renderer(SceneName.CIRCLE_RGB), 1, 2, prefix)
    assert times.frames == 2
    assert times.start_frame == 1
    assert times.dump_frames
    assert not (tmp_path / "frame_0000.ppm").exists()
    assert (tmp_path / "frame_0001.ppm").read_bytes().startswith(b"P6\n8 8\n255\n")
    assert (tmp_path / "frame_0002.ppm").exists()
    assert min(times.clear, times.advance, times.render, times.overall) >= 0.0
    out = capsys.readouterr().out
    assert "Running benchmark, 2 frames, beginning at frame 1 ..." in out
    assert "File IO:" in out


def test_start_benchmark_without_filename_writes_nothing(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    times = start_benchmark(_renderer(SceneName.CIRCLE_RGB), 0, 1, "")
    assert not times.dump_frames
    assert list(tmp_path.iterdir()) == []
    out = capsys.readouterr().out
    assert "File IO:" not in out
    assert "Overall:" in out


def test_benchmark_renders_image():
    renderer = _renderer(SceneName.CIRCLE_RGB)
    start_benchmark(renderer, 0, 1, "")
    reference = _renderer(SceneName.CIRCLE_RGB)
    reference.clear_image()
    reference.advance_animation()
    reference.render()
    assert list(renderer.image.data) == list(reference.image.data)


def test_check_benchmark_passes_for_equal_renderers(capsys):
    times = check_benchmark(
        _renderer(SceneName.CIRCLE_RGB), _renderer(SceneName.CIRCLE_RGB), 0, 1, ""
    )
    assert times.frames == 1
    assert "Correctness check passed" in capsys.readouterr().out


def test_check_benchmark_detects_different_scenes():
    with pytest.raises(ImageMismatchError):
        check_benchmark(
            _renderer(SceneName.CIRCLE_RGB, 16),
            _renderer(SceneName.CIRCLE_RGBY, 16),
            0,
            1,
            "",
        )


def test_report_format():
    times = BenchmarkTimes(
        start_frame=0,
        frames=2,
        clear=0.001,
        advance=0.002,
        render=0.003,
        file_io=0.004,
        overall=1.5,
        dump_frames=True,
    )
    report = times.report()
    assert "Clear:    0.5000 ms" in report
    assert "Total:    3.0000 ms" in report
    assert report.endswith("Overall:  1.5000 sec (note units are seconds)\n")


def test_report_with_zero_frames_is_nan():
    times = BenchmarkTimes(start_frame=0, frames=0)
    assert "nan" in times.report()