"""Sample-clocked timer used by the FM repeater logic (24 kHz sample rate)."""

from __future__ import annotations

SAMPLE_RATE = 24000


class FMTimer:
    """A timer advanced by the number of samples processed."""

    def __init__(self) -> None:
        self._timeout = 0
        self._timer = 0

    def set_timeout(self, secs: int, msecs: int) -> None:
        """Set the timeout from seconds plus milliseconds."""
        self._timeout = (secs * SAMPLE_RATE + msecs * (SAMPLE_RATE // 1000)) & 0xFFFFFFFF

    def get_timeout(self) -> int:
        """Return the timeout in milliseconds."""
        return self._timeout // (SAMPLE_RATE // 1000)

    def start(self) -> None:
        if self._timeout > 0:
            self._timer = 1

    def stop(self) -> None:
        self._timer = 0

    def clock(self, length: int) -> None:
        """Advance a running timer by ``length`` samples."""
        if self._timer > 0 and self._timeout > 0:
            self._timer += length

    def is_running(self) -> bool:
        return self._timer > 0

    def has_expired(self) -> bool:
        if self._timeout == 0 or self._timer == 0:
            return False
        return self._timer > self._timeout