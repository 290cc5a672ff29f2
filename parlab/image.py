"""RGBA float image buffer and the clamp helper used by the renderers."""

from __future__ import annotations

from array import array
from dataclasses import dataclass, field

_CHANNELS = 4
_FLOAT_SIZE = array("f").itemsize


def clamp(x, minimum, maximum):
    """Limit ``x`` to the closed range [minimum, maximum]."""
    return max(minimum, min(x, maximum))


@dataclass
class Image:
    """A width x height image of single-precision RGBA pixels, row-major."""

    width: int
    height: int
    data: array = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"image dimensions must be non-negative, got {self.width}x{self.height}"
            )
        count = _CHANNELS * self.width * self.height
        self.data = array("f", bytes(count * _FLOAT_SIZE))

    def clear(self, r: float, g: float, b: float, a: float) -> None:
        """Set every pixel to the given colour."""
        self.data[:] = array("f", (r, g, b, a)) * (self.width * self.height)

    def pixel(self, x: int, y: int) -> memoryview:
        """Return a writable view of the four channels of pixel (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"pixel ({x}, {y}) outside {self.width}x{self.height} image"
            )
        offset = _CHANNELS * (y * self.width + x)
        return memoryview(self.data)[offset : offset + _CHANNELS]