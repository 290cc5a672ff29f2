"""A pseudo-random generator reproducing the C library ``rand()`` sequence.

Scenes are generated from ``srand(0)`` and a fixed stream of ``rand()``
values, so the additive-feedback generator is reproduced exactly.
"""

from __future__ import annotations

import struct
from collections import deque

RAND_MAX = 2147483647

_MODULUS = 2147483647
_MASK = 0xFFFFFFFF
_DEGREE = 31
_SEPARATION = 3
_DISCARD = 310
_F32 = struct.Struct("f")


def _f32(value: float) -> float:
    return _F32.unpack(_F32.pack(value))[0]


class CRandom:
    """Additive-feedback generator with the C library's seeding and output."""

    def __init__(self, seed: int = 1) -> None:
        self._window: deque[int] = deque(maxlen=_DEGREE + _SEPARATION)
        self.seed(seed)

    def seed(self, seed: int) -> None:
        """Reset the generator; seed 0 behaves like seed 1."""
        value = seed & _MASK
        if value >= 1 << 31:
            value -= 1 << 32
        if value == 0:
            value = 1
        state = [value]
        for _ in range(1, _DEGREE):
            state.append((16807 * state[-1]) % _MODULUS)
        state = [v & _MASK for v in state]
        self._window.clear()
        self._window.extend(state)
        self._window.extend(state[:_SEPARATION])
        for _ in range(_DISCARD):
            self._step()

    def _step(self) -> int:
        window = self._window
        value = (window[-_DEGREE] + window[-_SEPARATION]) & _MASK
        window.append(value)
        return value

    def rand(self) -> int:
        """Return the next integer in [0, RAND_MAX]."""
        return self._step() >> 1

    def random_float(self) -> float:
        """Return ``rand() / RAND_MAX`` computed in single precision."""
        return _f32(float(self.rand())) / 2147483648.0