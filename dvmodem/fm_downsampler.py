"""Decimate FM audio by three and pack pairs of samples into bytes."""

from __future__ import annotations

from .ringbuffer import RingBuffer


class FMDownsampler:
    """Keeps one sample in three and packs two kept samples into three bytes."""

    def __init__(self, length: int) -> None:
        self._ring: RingBuffer[int] = RingBuffer(length)
        self._pack = 0
        self._pack_index = 0
        self._downsample_index = 0

    def add_sample(self, sample: int) -> None:
        if self._downsample_index == 0:
            if self._pack_index == 0:
                self._pack = (sample << 12) & 0xFFFFFFFF
            else:
                self._pack = (self._pack | sample) & 0xFFFFFFFF
                # Upper three bytes of the little-endian 32-bit word
                for shift in (8, 16, 24):
                    self._ring.put((self._pack >> shift) & 0xFF)
                self._pack = 0
            self._pack_index = (self._pack_index + 1) % 2
        self._downsample_index = (self._downsample_index + 1) % 3

    def get_packed_data(self) -> int | None:
        """Return the next packed byte, or None when none is waiting."""
        return self._ring.get()

    def has_overflowed(self) -> bool:
        return self._ring.has_overflowed()