"""D-Star GMSK receiver: bit clock recovery, sync detection and framing."""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .dstar_fec import decode_header, header_checksum_ok
from .dstar_tx import (
    DSTAR_DATA_LENGTH_BITS,
    DSTAR_DATA_LENGTH_BYTES,
    DSTAR_DATA_SYNC_BYTES,
    DSTAR_FEC_SECTION_LENGTH_BITS,
    DSTAR_FEC_SECTION_LENGTH_BYTES,
    DSTAR_RADIO_BIT_LENGTH,
)

_PLL_MAX = 0x10000
_PLL_INC = _PLL_MAX // DSTAR_RADIO_BIT_LENGTH
_PLL_ADJUST = _PLL_INC // 32

_MAX_SYNC_BITS = 100 * DSTAR_DATA_LENGTH_BITS

_PATTERN_MASK = (1 << 64) - 1

# D-Star bit order version of 0x55 0x55 0x6E 0x0A
_FRAME_SYNC_DATA = 0x557650
_FRAME_SYNC_MASK = 0xFFFFFF
_FRAME_SYNC_ERRS = 2

# D-Star bit order version of 0x55 0x2D 0x16
_DATA_SYNC_DATA = 0xAAB468
_DATA_SYNC_MASK = 0xFFFFFF
_DATA_SYNC_ERRS = 2

# D-Star bit order version of 0x55 0x55 0xC8 0x7A
_END_SYNC_DATA = 0xAAAAAAAA135E
_END_SYNC_MASK = 0xFFFFFFFFFFFF
_END_SYNC_ERRS = 1

_LATE_SYNC_SHIFTS = (1, 2, 3)


class DStarEventKind(enum.Enum):
    HEADER = "header"
    DATA = "data"
    EOT = "eot"
    LOST = "lost"


@dataclass(frozen=True)
class DStarEvent:
    """Something the receiver reports to the host."""

    kind: DStarEventKind
    payload: bytes = b""
    rssi: int | None = None

    def to_bytes(self) -> bytes:
        """Payload followed by the RSSI as two big-endian bytes, when present."""
        if self.rssi is None:
            return self.payload
        return self.payload + self.rssi.to_bytes(2, "big")


class _RxState(enum.Enum):
    NONE = 0
    HEADER = 1
    DATA = 2


class DStarReceiver:
    """Recovers D-Star headers and voice frames from demodulated samples.

    Every header, data frame, end of transmission and loss of lock is
    passed to ``sink`` as a :class:`DStarEvent`.
    """

    def __init__(self, sink: Callable[[DStarEvent], object]) -> None:
        self._sink = sink
        self._decoding = False
        self._buffer = bytearray(DSTAR_FEC_SECTION_LENGTH_BYTES)
        self.reset()

    @property
    def decoding(self) -> bool:
        """True while a transmission is being received."""
        return self._decoding

    def reset(self) -> None:
        self._pll = 0
        self._prev = False
        self._state = _RxState.NONE
        self._pattern = 0
        self._bits = 0
        self._data_bits = 0
        self._rssi_accum = 0
        self._rssi_count = 0

    def samples(self, samples: Sequence[int], rssi: Sequence[int]) -> None:
        """Feed demodulated samples together with their RSSI readings."""
        if len(samples) != len(rssi):
            raise ValueError("samples and rssi must have the same length")

        for sample, level in zip(samples, rssi):
            self._rssi_accum = (self._rssi_accum + level) & 0xFFFFFFFF
            self._rssi_count = (self._rssi_count + 1) & 0xFFFF

            bit = sample < 0

            if bit != self._prev:
                if self._pll < _PLL_MAX // 2:
                    self._pll += _PLL_ADJUST
                else:
                    self._pll -= _PLL_ADJUST

            self._prev = bit
            self._pll += _PLL_INC

            if self._pll >= _PLL_MAX:
                self._pll -= _PLL_MAX
                if self._state is _RxState.NONE:
                    self._process_none(bit)
                elif self._state is _RxState.HEADER:
                    self._process_header(bit)
                else:
                    self._process_data(bit)

    def _shift_in(self, bit: bool) -> None:
        self._pattern = ((self._pattern << 1) | int(bit)) & _PATTERN_MASK

    def _store_bit(self, bit: bool) -> None:
        index, mask = self._bits >> 3, 1 << (self._bits & 7)
        if bit:
            self._buffer[index] |= mask
        else:
            self._buffer[index] &= ~mask & 0xFF
        self._bits += 1

    def _errors(self, mask: int, data: int) -> int:
        return ((self._pattern & mask) ^ data).bit_count()

    def _clear_buffer(self) -> None:
        self._buffer[:] = bytes(len(self._buffer))
        self._bits = 0

    def _clear_rssi(self) -> None:
        self._rssi_accum = 0
        self._rssi_count = 0

    def _take_rssi(self) -> int | None:
        rssi = (self._rssi_accum // self._rssi_count) & 0xFFFF if self._rssi_count > 0 else None
        self._clear_rssi()
        return rssi

    def _set_decoding(self, active: bool) -> None:
        self._decoding = active

    def _process_none(self, bit: bool) -> None:
        self._shift_in(bit)

        # Fuzzy matching of the frame sync sequence
        if self._errors(_FRAME_SYNC_MASK, _FRAME_SYNC_DATA) <= _FRAME_SYNC_ERRS:
            self._clear_buffer()
            self._clear_rssi()
            self._state = _RxState.HEADER
            return

        # Exact matching of the data sync bit sequence
        if self._errors(_DATA_SYNC_MASK, _DATA_SYNC_DATA) == 0:
            self._set_decoding(True)
            # Suppress RSSI on the dummy sync message
            self._clear_rssi()
            self._sink(DStarEvent(DStarEventKind.DATA, DSTAR_DATA_SYNC_BYTES, self._take_rssi()))
            self._clear_buffer()
            self._data_bits = _MAX_SYNC_BITS
            self._state = _RxState.DATA

    def _process_header(self, bit: bool) -> None:
        self._shift_in(bit)
        self._store_bit(bit)

        if self._bits != DSTAR_FEC_SECTION_LENGTH_BITS:
            return

        header = decode_header(bytes(self._buffer[:DSTAR_FEC_SECTION_LENGTH_BYTES]))
        if header_checksum_ok(header):
            self._set_decoding(True)
            self._sink(DStarEvent(DStarEventKind.HEADER, header, self._take_rssi()))
            self._clear_buffer()
            self._state = _RxState.DATA
            self._data_bits = _MAX_SYNC_BITS
        else:
            # The checksum failed, go back to looking for syncs
            self._state = _RxState.NONE

    def _process_data(self, bit: bool) -> None:
        self._shift_in(bit)
        self._store_bit(bit)

        # Fuzzy matching of the end frame sequence
        if self._errors(_END_SYNC_MASK, _END_SYNC_DATA) <= _END_SYNC_ERRS:
            self._set_decoding(False)
            self._sink(DStarEvent(DStarEventKind.EOT))
            self._state = _RxState.NONE
            return

        # Fuzzy matching of the data sync bit sequence
        sync_seen = False
        if self._bits >= DSTAR_DATA_LENGTH_BITS - 3:
            if self._errors(_DATA_SYNC_MASK, _DATA_SYNC_DATA) <= _DATA_SYNC_ERRS:
                self._bits = DSTAR_DATA_LENGTH_BITS
                self._data_bits = _MAX_SYNC_BITS
                sync_seen = True

        # Check to see if the sync is arriving late
        if self._bits == DSTAR_DATA_LENGTH_BITS and not sync_seen:
            for shift in _LATE_SYNC_SHIFTS:
                if self._errors(_DATA_SYNC_MASK >> shift, _DATA_SYNC_DATA >> shift) <= _DATA_SYNC_ERRS:
                    self._bits -= shift
                    break

        self._data_bits -= 1
        if self._data_bits == 0:
            self._set_decoding(False)
            self._sink(DStarEvent(DStarEventKind.LOST))
            self._state = _RxState.NONE
            return

        if self._bits == DSTAR_DATA_LENGTH_BITS:
            if sync_seen:
                self._buffer[9:12] = DSTAR_DATA_SYNC_BYTES[9:12]
                frame = bytes(self._buffer[:DSTAR_DATA_LENGTH_BYTES])
                self._sink(DStarEvent(DStarEventKind.DATA, frame, self._take_rssi()))
            else:
                frame = bytes(self._buffer[:DSTAR_DATA_LENGTH_BYTES])
                self._sink(DStarEvent(DStarEventKind.DATA, frame))
            self._clear_buffer()