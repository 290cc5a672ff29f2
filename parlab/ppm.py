"""Binary PPM (P6) output for RGBA float images."""

from __future__ import annotations

import os
import struct

from .image import Image, clamp

_F32 = struct.Struct("f")


def _f32(value: float) -> float:
    return _F32.unpack(_F32.pack(value))[0]


def _channel_byte(value: float) -> int:
    return int(_f32(255.0 * clamp(value, 0.0, 1.0)))


def encode_ppm(image: Image) -> bytes:
    """Encode an image as P6 bytes, bottom row first, alpha dropped."""
    out = bytearray(f"P6\n{image.width} {image.height}\n255\n".encode("ascii"))
    data = image.data
    row_len = 4 * image.width
    for j in reversed(range(image.height)):
        row = data[j * row_len : (j + 1) * row_len]
        for r, g, b, _a in zip(*[iter(row)] * 4):
            out += bytes((_channel_byte(r), _channel_byte(g), _channel_byte(b)))
    return bytes(out)


def write_ppm(image: Image, filename: str | os.PathLike) -> None:
    """Write ``image`` as a binary PPM file."""
    with open(filename, "wb") as fh:
        fh.write(encode_ppm(image))
    print(f"Wrote image file {os.fspath(filename)}")