"""Noise blanking bleep and time-out busy tone for the FM repeater."""

from __future__ import annotations

from .fixedpoint import ssat

# 2000 Hz sine wave at 24000 Hz sample rate
_BLANKING_TONE = (0, 16384, 28378, 32767, 28378, 16384, 0, -16383, -28377, -32767, -28377, -16383)

_BLEEP_LEN = 2400  # 100 ms
_BLANKING_LEN = 12000  # 500 ms

# 400 Hz sine wave at 24000 Hz sample rate
_BUSY_AUDIO = (
    0, 3426, 6813, 10126, 13328, 16384, 19261, 21926, 24351, 26510, 28378, 29935, 31164, 32052,
    32588, 32767, 32588, 32052, 31164, 29935, 28378, 26510, 24351, 21926, 19261, 16384, 13328,
    10126, 6813, 3425, 0, -3425, -6813, -10126, -13328, -16384, -19261, -21926, -24351, -26510,
    -28378, -29935, -31164, -32052, -32588, -32768, -32588, -32052, -31164, -29935, -28378,
    -26510, -24351, -21926, -19261, -16384, -13328, -10126, -6813, -3425,
)

_BUSY_HALF_PERIOD = 12000  # 500 ms silence, then 500 ms tone
_BUSY_PERIOD = 24000


def _to_q15(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


class FMBlanking:
    """Replaces over-deviating audio with a short bleep followed by silence."""

    def __init__(self) -> None:
        self._pos_value = 0
        self._neg_value = 0
        self._level = 128 * 128
        self._running = False
        self._pos = 0
        self._n = 0

    def set_params(self, value: int, level: int) -> None:
        """Set the deviation threshold and bleep level (both 0..255)."""
        self._pos_value = _to_q15(value * 128)
        self._neg_value = -self._pos_value
        self._level = _to_q15(level * 128)

    def process(self, sample: int) -> int:
        """Return the sample, or blanking audio while blanking is active."""
        if self._pos_value == 0:
            return sample

        if not self._running and (sample >= self._pos_value or sample <= self._neg_value):
            self._running = True
            self._pos = 0
            self._n = 0

        if not self._running:
            return sample

        if self._pos <= _BLEEP_LEN:
            value = _BLANKING_TONE[self._n] * self._level
            sample = ssat(value >> 15, 16)
            self._n = (self._n + 1) % len(_BLANKING_TONE)
        else:
            sample = 0

        self._pos += 1
        if self._pos >= _BLANKING_LEN:
            self._running = False

        return sample


class FMTimeoutTone:
    """Interrupted 400 Hz busy tone sent after a transmission times out."""

    def __init__(self) -> None:
        self._level = 128 * 128
        self._running = False
        self._pos = 0
        self._n = 0

    def set_params(self, level: int) -> None:
        self._level = _to_q15(level * 5)

    def start(self) -> None:
        self._running = True
        self._pos = 0
        self._n = 0

    def stop(self) -> None:
        self._running = False

    def get_audio(self) -> int:
        """Return the next sample of the busy tone, or 0 when not running."""
        if not self._running:
            return 0

        sample = 0
        if self._pos >= _BUSY_HALF_PERIOD:
            sample = ssat((_BUSY_AUDIO[self._n] * self._level) >> 15, 16)
            self._n = (self._n + 1) % len(_BUSY_AUDIO)

        self._pos += 1
        if self._pos >= _BUSY_PERIOD:
            self._pos = 0

        return sample