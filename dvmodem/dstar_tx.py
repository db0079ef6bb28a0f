"""D-Star GMSK transmitter: header FEC encoding, framing and modulation."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Callable, Sequence

from .fixedpoint import FirInterpolator

DSTAR_RADIO_BIT_LENGTH = 5  # samples per bit at 24 kHz

DSTAR_HEADER_LENGTH_BYTES = 41
DSTAR_HEADER_LENGTH_BITS = DSTAR_HEADER_LENGTH_BYTES * 8

DSTAR_FEC_SECTION_LENGTH_BYTES = 83
DSTAR_FEC_SECTION_LENGTH_BITS = 660

DSTAR_DATA_LENGTH_BYTES = 12
DSTAR_DATA_LENGTH_BITS = DSTAR_DATA_LENGTH_BYTES * 8

DSTAR_EOT_BYTES = bytes((0x55, 0x55, 0x55, 0x55, 0xC8, 0x7A, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00))
DSTAR_EOT_LENGTH_BYTES = 6
DSTAR_EOT_LENGTH_BITS = DSTAR_EOT_LENGTH_BYTES * 8

DSTAR_DATA_SYNC_LENGTH_BYTES = 3
DSTAR_DATA_SYNC_LENGTH_BITS = DSTAR_DATA_SYNC_LENGTH_BYTES * 8

DSTAR_DATA_SYNC_BYTES = bytes((0x9E, 0x8D, 0x32, 0x88, 0x26, 0x1A, 0x3F, 0x61, 0xE8, 0x55, 0x2D, 0x16))

DSTAR_SLOW_DATA_TYPE_TEXT = 0x40
DSTAR_SLOW_DATA_TYPE_HEADER = 0x50

DSTAR_SCRAMBLER_BYTES = bytes((0x70, 0x4F, 0x93))

BIT_SYNC = 0xAA
FRAME_SYNC = bytes((0xEA, 0xA6, 0x00))

# Generated using gaussfir(0.35, 1, 5): 15 taps, interpolation factor 5
GAUSSIAN_0_35_FILTER = (0, 0, 0, 0, 1001, 3514, 9333, 18751, 28499, 32767, 28499, 18751, 9333, 3514, 1001)

DSTAR_LEVEL0 = -841
DSTAR_LEVEL1 = 841

_BUFFER_SIZE = 1000

_SCRAMBLE_TABLE_TX = bytes((
    0x00, 0xF7, 0x34, 0x09, 0x44, 0x46, 0xD7, 0x06, 0xB3, 0x72,
    0xDE, 0x42, 0xF5, 0xA5, 0xD8, 0xF1, 0x87, 0x7B, 0x9A, 0x04,
    0x22, 0xA3, 0x6B, 0x83, 0x59, 0x39, 0x6F, 0xA1, 0xFA, 0x52,
    0xEC, 0xF8, 0xC3, 0x3D, 0x4D, 0x02, 0x91, 0xD1, 0xB5, 0xC1,
    0xAC, 0x9C, 0xB7, 0x50, 0x7D, 0x29, 0x76, 0xFC, 0xE1, 0x9E,
    0x26, 0x81, 0xC8, 0xE8, 0xDA, 0x60, 0x56, 0xCE, 0x5B, 0xA8,
    0xBE, 0x14, 0x3B, 0xFE, 0x70, 0x4F, 0x93, 0x40, 0x64, 0x74,
    0x6D, 0x30, 0x2B, 0xE7, 0x2D, 0x54, 0x5F, 0x8A, 0x1D, 0x7F,
    0xB8, 0xA7, 0x49, 0x20, 0x32, 0xBA, 0x36, 0x98, 0x95, 0xF3,
    0x06,
))


def _interleave_positions() -> tuple[int, ...]:
    """Output bit position (LSB-first within each byte) of each coded bit.

    The coded bits fill 24 columns, the first 12 holding 28 bits and the
    remaining 12 holding 27, after the four trailing frame sync bits.
    """
    positions = []
    for i in range(DSTAR_FEC_SECTION_LENGTH_BITS):
        column, row = i % 24, i // 24
        start = 28 * column if column < 12 else 336 + 27 * (column - 12)
        positions.append(4 + start + row)
    return tuple(positions)


_INTERLEAVE_POSITIONS = _interleave_positions()


def _convolve(header: bytes) -> list[int]:
    """Rate 1/2 convolutional code, input LSB first, two flush bits appended."""
    bits: list[int] = []
    d1 = d2 = 0
    for byte in header + b"\x00":
        for j in range(8):
            d = (byte >> j) & 1
            g0 = d ^ d2
            g1 = d ^ d1 ^ d2
            d2, d1 = d1, d
            bits.extend((g1, g0))
    return bits[:DSTAR_FEC_SECTION_LENGTH_BITS]


def encode_header(header: bytes) -> bytes:
    """Convolve, interleave and scramble a 41-byte header into 83 bytes."""
    header = bytes(header)
    if len(header) != DSTAR_HEADER_LENGTH_BYTES:
        raise ValueError(f"header must be {DSTAR_HEADER_LENGTH_BYTES} bytes, got {len(header)}")

    out = bytearray(DSTAR_FEC_SECTION_LENGTH_BYTES)
    for bit, pos in zip(_convolve(header), _INTERLEAVE_POSITIONS):
        if bit:
            out[pos >> 3] |= 1 << (pos & 7)

    return bytes(b ^ s for b, s in zip(out, _SCRAMBLE_TABLE_TX))


class _FrameType(enum.IntEnum):
    HEADER = 0
    DATA = 1
    EOT = 2


class DStarTransmitter:
    """Queues D-Star frames from the host and modulates them into samples.

    ``write_samples`` is called with each block of modulated samples
    (eight bits, forty samples at a time).
    """

    def __init__(self, write_samples: Callable[[list[int]], object]) -> None:
        self._write_samples = write_samples
        self._frames: deque[tuple[_FrameType, bytes]] = deque()
        self._used = 0
        self._filter = FirInterpolator(GAUSSIAN_0_35_FILTER, DSTAR_RADIO_BIT_LENGTH)
        self._pending = b""
        self._pos = 0
        self._tx_delay = 60  # bytes of preamble

    @property
    def tx_delay(self) -> int:
        """Preamble length in bytes."""
        return self._tx_delay

    def _enqueue(self, kind: _FrameType, payload: bytes, what: str) -> None:
        size = 1 + len(payload)
        if _BUFFER_SIZE - self._used < size:
            raise BufferError(f"no space for D-Star {what}")
        self._frames.append((kind, payload))
        self._used += size

    def _pop(self) -> tuple[_FrameType, bytes]:
        kind, payload = self._frames.popleft()
        self._used -= 1 + len(payload)
        return kind, payload

    def write_header(self, header: bytes) -> None:
        """Queue a 41-byte header; raise ValueError or BufferError."""
        header = bytes(header)
        if len(header) != DSTAR_HEADER_LENGTH_BYTES:
            raise ValueError(f"header must be {DSTAR_HEADER_LENGTH_BYTES} bytes, got {len(header)}")
        self._enqueue(_FrameType.HEADER, header, "header")

    def write_data(self, data: bytes) -> None:
        """Queue a 12-byte voice/data frame; raise ValueError or BufferError."""
        data = bytes(data)
        if len(data) != DSTAR_DATA_LENGTH_BYTES:
            raise ValueError(f"data must be {DSTAR_DATA_LENGTH_BYTES} bytes, got {len(data)}")
        self._enqueue(_FrameType.DATA, data, "data")

    def write_eot(self) -> None:
        """Queue an end of transmission; raise BufferError if full."""
        self._enqueue(_FrameType.EOT, b"", "EOT")

    def _load_next(self, transmitting: bool) -> None:
        kind, payload = self._frames[0]
        if kind is _FrameType.HEADER:
            if not transmitting:
                # Send the preamble; the header stays queued until TX is on
                self._pending = bytes([BIT_SYNC]) * self._tx_delay
            else:
                self._pop()
                self._pending = FRAME_SYNC[:2] + encode_header(payload)
        elif kind is _FrameType.DATA:
            self._pop()
            self._pending = payload
        else:
            self._pop()
            self._pending = DSTAR_EOT_BYTES[:DSTAR_EOT_LENGTH_BYTES] * 3
        self._pos = 0

    def process(self, space: int, transmitting: bool) -> None:
        """Modulate queued bytes while more than one byte of output space is free."""
        if not self._pending and self._frames:
            self._load_next(transmitting)

        if not self._pending:
            return

        per_byte = 8 * DSTAR_RADIO_BIT_LENGTH
        while space > per_byte:
            byte = self._pending[self._pos]
            self._pos += 1
            self._write_byte(byte)
            space -= per_byte
            if self._pos >= len(self._pending):
                self._pending = b""
                self._pos = 0
                return

    def _write_byte(self, byte: int) -> None:
        symbols = [DSTAR_LEVEL0 if (byte >> i) & 1 else DSTAR_LEVEL1 for i in range(8)]
        self._write_samples(self._filter.process(symbols))

    def set_tx_delay(self, delay: int) -> None:
        """Set the preamble from the host delay value: 250 ms plus delay, capped."""
        self._tx_delay = min(300 + delay * 6, 600)

    def get_space(self) -> int:
        """Number of data frames that still fit in the queue."""
        return (_BUFFER_SIZE - self._used) // (DSTAR_DATA_LENGTH_BYTES + 1)