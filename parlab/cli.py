"""Command line for rendering circle scenes and timing or checking the result."""

from __future__ import annotations

import getopt
import re
import sys

from .benchmark import ImageMismatchError, check_benchmark, start_benchmark
from .renderer import CircleRenderer, RefRenderer
from .scenes import SceneLoadError, parse_scene_name

DEFAULT_IMAGE_SIZE = 1024
_PROG = "render"
_RENDERERS: dict[str, type[CircleRenderer]] = {"cpuref": RefRenderer}
_DEFAULT_RENDERER = "cpuref"

_BENCH_RE = re.compile(r"\s*([+-]?\d+):\s*([+-]?\d+)", re.ASCII)
_INT_RE = re.compile(r"\s*([+-]?\d+)", re.ASCII)

_SHORT_OPTS = "b:f:r:s:c?"
_LONG_OPTS = ["help", "check", "bench=", "file=", "renderer=", "size="]


def _usage() -> str:
    return (
        f"Usage: {_PROG} [options] scenename\n"
        "Valid scenenames are: rgb, rgby, rand10k, rand100k, biglittle, littlebig, pattern,\n"
        "                      bouncingballs, fireworks, hypnosis, snow, snowsingle\n"
        "Program Options:\n"
        f"  -r  --renderer <{'/'.join(_RENDERERS)}>  Select renderer (default={_DEFAULT_RENDERER})\n"
        f"  -s  --size  <INT>             Rendered image size: <INT>x<INT> pixels (default={DEFAULT_IMAGE_SIZE})\n"
        "  -b  --bench <START:END>       Run for frames [START,END) (default=[0,1))\n"
        "  -c  --check                   Check renderer output against the reference renderer\n"
        "  -f  --file  <FILENAME>        Output file name (FILENAME_xxxx.ppm) (default=output)\n"
        "  -?  --help                    This message\n"
    )


def _atoi(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else 0


def parse_bench_range(text: str) -> tuple[int, int]:
    """Parse a ``START:END`` frame range; raise ValueError if malformed."""
    match = _BENCH_RE.match(text)
    if match is None:
        raise ValueError(f"Invalid argument to -b option: {text!r}")
    return int(match.group(1)), int(match.group(2))


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    print(_usage(), end="")
    return 1


def _prepared(renderer_cls: type[CircleRenderer], size: int, scene) -> CircleRenderer:
    renderer = renderer_cls()
    renderer.alloc_output_image(size, size)
    renderer.load_scene(scene)
    renderer.setup()
    return renderer


def main(argv=None) -> int:
    """Render a scene, timing frames or checking against the reference."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        opts, rest = getopt.gnu_getopt(args, _SHORT_OPTS, _LONG_OPTS)
    except getopt.GetoptError as exc:
        return _fail(str(exc))

    bench_start, bench_end = 0, 1
    image_size = DEFAULT_IMAGE_SIZE
    frame_filename = "output"
    renderer_name = _DEFAULT_RENDERER
    check = False

    for opt, value in opts:
        if opt in ("-b", "--bench"):
            try:
                bench_start, bench_end = parse_bench_range(value)
            except ValueError:
                return _fail("Invalid argument to -b option")
        elif opt in ("-c", "--check"):
            check = True
        elif opt in ("-f", "--file"):
            frame_filename = value
        elif opt in ("-r", "--renderer"):
            if value not in _RENDERERS:
                return _fail(f"ERROR: Unknown renderer type: {value}")
            renderer_name = value
        elif opt in ("-s", "--size"):
            image_size = _atoi(value)
        else:
            print(_usage(), end="")
            return 1

    if not rest:
        return _fail("Error: missing scene name")
    try:
        scene = parse_scene_name(rest[0])
    except SceneLoadError as exc:
        return _fail(str(exc))
    if image_size <= 0:
        return _fail(f"Error: invalid image size {image_size}")

    print(f"Rendering to {image_size}x{image_size} image")
    renderer_cls = _RENDERERS[renderer_name]
    try:
        if check:
            reference = _prepared(RefRenderer, image_size, scene)
            renderer = _prepared(renderer_cls, image_size, scene)
            check_benchmark(reference, renderer, 0, 1, frame_filename)
        else:
            renderer = _prepared(renderer_cls, image_size, scene)
            start_benchmark(
                renderer, bench_start, bench_end - bench_start, frame_filename
            )
    except SceneLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except ImageMismatchError as exc:
        print(exc)
        return 1
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())