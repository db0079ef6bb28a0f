"""Fixed-point helpers: saturation, Q31 sine and a Q15 FIR interpolator."""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Iterable, Sequence

_Q31_ONE = 1 << 31


def ssat(value: int, bits: int) -> int:
    """Saturate ``value`` to a signed integer of ``bits`` bits."""
    if bits < 1:
        raise ValueError("bits must be at least 1")
    high = (1 << (bits - 1)) - 1
    low = -(1 << (bits - 1))
    return max(low, min(high, value))


def _wrap_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def sin_q31(arg: int) -> int:
    """Sine of a Q31 phase where the range [0, 1) maps to [0, 2*pi).

    The argument is wrapped to 32 bits first; negative phases are folded
    into the positive range, as a phase accumulator would do on overflow.
    """
    phase = _wrap_int32(arg)
    if phase < 0:
        phase += _Q31_ONE
    value = round(math.sin(2.0 * math.pi * phase / _Q31_ONE) * _Q31_ONE)
    return ssat(value, 32)


class FirInterpolator:
    """Polyphase FIR interpolator working on Q15 samples.

    Each input sample produces ``factor`` output samples. The filter keeps
    its history between calls to :meth:`process`.
    """

    def __init__(self, coeffs: Sequence[int], factor: int) -> None:
        if factor < 1:
            raise ValueError("factor must be at least 1")
        if not coeffs or len(coeffs) % factor != 0:
            raise ValueError("number of coefficients must be a non-zero multiple of factor")
        self._coeffs = tuple(coeffs)
        self._factor = factor
        self._phase_length = len(coeffs) // factor
        self._state: deque[int] = deque([0] * self._phase_length, maxlen=self._phase_length)

    @property
    def factor(self) -> int:
        return self._factor

    def process(self, samples: Iterable[int]) -> list[int]:
        """Interpolate ``samples`` and return ``factor`` outputs for each one."""
        output: list[int] = []
        for sample in samples:
            self._state.append(sample)
            history = tuple(self._state)
            for j in range(1, self._factor + 1):
                taps = self._coeffs[self._factor - j :: self._factor]
                total = sum(x * c for x, c in zip(history, taps))
                output.append(ssat(total >> 15, 16))
        return output