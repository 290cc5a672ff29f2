"""Frame-timing loops for circle renderers and a checker that compares two outputs."""

from __future__ import annotations

import math
import os
import struct
import time
from dataclasses import dataclass

from .image import Image
from .ppm import write_ppm
from .renderer import CircleRenderer

_F32 = struct.Struct("f")
_MAX_MISMATCHES = 5
_CHANNEL_NAMES = ("Red", "Green", "Blue")
_ALPHA = 3


def _f32(value: float) -> float:
    return _F32.unpack(_F32.pack(value))[0]


_TOLERANCE = _f32(0.1)


class ImageMismatchError(Exception):
    """Raised when a rendered image differs from the reference image."""


@dataclass
class BenchmarkTimes:
    """Accumulated seconds spent in each phase over the timed frames."""

    start_frame: int
    frames: int
    clear: float = 0.0
    advance: float = 0.0
    render: float = 0.0
    file_io: float = 0.0
    overall: float = 0.0
    dump_frames: bool = False

    @property
    def total(self) -> float:
        """Seconds spent clearing, advancing and rendering."""
        return self.clear + self.advance + self.render

    def per_frame_ms(self, seconds: float) -> float:
        """Average milliseconds per timed frame, or NaN with no frames."""
        if self.frames == 0:
            return math.nan
        return 1000.0 * seconds / self.frames

    def report(self) -> str:
        """The timing summary printed after a benchmark run."""
        lines = [
            f"Clear:    {self.per_frame_ms(self.clear):.4f} ms",
            f"Advance:  {self.per_frame_ms(self.advance):.4f} ms",
            f"Render:   {self.per_frame_ms(self.render):.4f} ms",
            f"Total:    {self.per_frame_ms(self.total):.4f} ms",
        ]
        if self.dump_frames:
            lines.append(f"File IO:  {self.per_frame_ms(self.file_io):.4f} ms")
        lines.append("")
        lines.append(f"Overall:  {self.overall:.4f} sec (note units are seconds)")
        return "\n".join(lines) + "\n"


def _frame_path(prefix: str, frame: int) -> str:
    return f"{prefix}_{frame:04d}.ppm"


def _announce(start_frame: int, total_frames: int, prefix: str) -> None:
    print(
        f"\nRunning benchmark, {total_frames} frames, "
        f"beginning at frame {start_frame} ..."
    )
    if prefix:
        print(f"Dumping frames to {prefix}_xxx.ppm")


def _require_image(renderer: CircleRenderer) -> Image:
    image = renderer.image
    if image is None:
        raise RuntimeError("renderer has no output image")
    return image


def compare_images(ref_image: Image, actual_image: Image) -> int:
    """Compare colour channels within 0.1, tolerating up to five mismatches.

    Returns the number of mismatching channels; raises ImageMismatchError
    on differing dimensions or too many mismatches.
    """
    if (ref_image.width, ref_image.height) != (actual_image.width, actual_image.height):
        raise ImageMismatchError(
            "Error : width or height of reference and actual not matching\n"
            f"Actual : width = {actual_image.width}, height = {actual_image.height}\n"
            f"Ref : width = {ref_image.width}, height = {ref_image.height}"
        )
    width = ref_image.width
    mismatches = 0
    for i, (expected, value) in enumerate(zip(ref_image.data, actual_image.data)):
        channel = i % 4
        if channel == _ALPHA or _f32(abs(expected - value)) <= _TOLERANCE:
            continue
        mismatches += 1
        pixel = i // 4
        print(
            f"Mismatch detected at pixel [{pixel // width}][{pixel % width}], "
            f"value = {value:f}, expected {expected:f} "
            f"for color {_CHANNEL_NAMES[channel]}"
        )
        if mismatches > _MAX_MISMATCHES:
            raise ImageMismatchError(
                "ERROR : Mismatch detected between reference and actual"
            )
    print("***************** Correctness check passed **************************")
    return mismatches


def start_benchmark(
    renderer: CircleRenderer,
    start_frame: int,
    total_frames: int,
    frame_filename: str,
) -> BenchmarkTimes:
    """Run frames [0, start_frame + total_frames), timing those from start_frame.

    With a non-empty ``frame_filename`` each timed frame is written as
    ``<frame_filename>_NNNN.ppm``.
    """
    dump = bool(frame_filename)
    times = BenchmarkTimes(start_frame=start_frame, frames=total_frames, dump_frames=dump)
    _announce(start_frame, total_frames, frame_filename)

    start_time: float | None = None
    for frame in range(start_frame + total_frames):
        if frame == start_frame:
            start_time = time.perf_counter()

        t0 = time.perf_counter()
        renderer.clear_image()
        t1 = time.perf_counter()
        renderer.advance_animation()
        t2 = time.perf_counter()
        renderer.render()
        t3 = time.perf_counter()

        if frame >= start_frame:
            if dump:
                write_ppm(_require_image(renderer), _frame_path(frame_filename, frame))
            t4 = time.perf_counter()
            times.clear += t1 - t0
            times.advance += t2 - t1
            times.render += t3 - t2
            times.file_io += t4 - t3

    end_time = time.perf_counter()
    times.overall = end_time - (end_time if start_time is None else start_time)
    print(times.report(), end="")
    return times


def check_benchmark(
    ref_renderer: CircleRenderer,
    renderer: CircleRenderer,
    start_frame: int,
    total_frames: int,
    frame_filename: str,
) -> BenchmarkTimes:
    """Run two renderers in lock step, time the second and compare final images.

    Raises ImageMismatchError when the final images disagree.
    """
    dump = bool(frame_filename)
    times = BenchmarkTimes(start_frame=start_frame, frames=total_frames, dump_frames=dump)
    _announce(start_frame, total_frames, frame_filename)

    start_time: float | None = None
    for frame in range(start_frame + total_frames):
        if frame == start_frame:
            start_time = time.perf_counter()

        ref_renderer.clear_image()
        clear_start = time.perf_counter()
        renderer.clear_image()
        clear_end = time.perf_counter()

        ref_renderer.advance_animation()
        advance_start = time.perf_counter()
        renderer.advance_animation()
        advance_end = time.perf_counter()

        ref_renderer.render()
        render_start = time.perf_counter()
        renderer.render()
        render_end = time.perf_counter()

        if frame >= start_frame:
            save_start = time.perf_counter()
            if dump:
                write_ppm(_require_image(renderer), _frame_path(frame_filename, frame))
            save_end = time.perf_counter()
            times.clear += clear_end - clear_start
            times.advance += advance_end - advance_start
            times.render += render_end - render_start
            times.file_io += save_end - save_start

    compare_images(_require_image(ref_renderer), _require_image(renderer))

    end_time = time.perf_counter()
    times.overall = end_time - (end_time if start_time is None else start_time)
    print(times.report(), end="")
    return times


__all__ = [
    "BenchmarkTimes",
    "ImageMismatchError",
    "check_benchmark",
    "compare_images",
    "start_benchmark",
]

_ = os  # paths may be str or PathLike; formatting goes through f-strings