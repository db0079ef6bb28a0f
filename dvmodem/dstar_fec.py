"""D-Star header FEC decoding: descrambling, deinterleaving, Viterbi and CRC."""

from __future__ import annotations

from collections.abc import Sequence

HEADER_LENGTH_BYTES = 41
FEC_SECTION_LENGTH_BYTES = 83
FEC_SECTION_LENGTH_BITS = 660

_SCRAMBLE_TABLE_RX = bytes((
    0x70, 0x4F, 0x93, 0x40, 0x64, 0x74, 0x6D, 0x30, 0x2B, 0xE7,
    0x2D, 0x54, 0x5F, 0x8A, 0x1D, 0x7F, 0xB8, 0xA7, 0x49, 0x20,
    0x32, 0xBA, 0x36, 0x98, 0x95, 0xF3, 0x16, 0xAA, 0x2F, 0xC5,
    0x8E, 0x3F, 0xDC, 0xD3, 0x24, 0x10, 0x19, 0x5D, 0x1B, 0xCC,
    0xCA, 0x79, 0x0B, 0xD5, 0x97, 0x62, 0xC7, 0x1F, 0xEE, 0x69,
    0x12, 0x88, 0x8C, 0xAE, 0x0D, 0x66, 0xE5, 0xBC, 0x85, 0xEA,
    0x4B, 0xB1, 0xE3, 0x0F, 0xF7, 0x34, 0x09, 0x44, 0x46, 0xD7,
    0x06, 0xB3, 0x72, 0xDE, 0x42, 0xF5, 0xA5, 0xD8, 0xF1, 0x87,
    0x7B, 0x9A, 0x04, 0x22, 0xA3, 0x6B, 0x83, 0x59, 0x39, 0x6F,
    0x00,
))


def _deinterleave_positions() -> tuple[int, ...]:
    """Coded bit position for each received bit.

    Received bits fill 24 columns, the first 12 of 28 bits and the rest of
    27; coded bit order runs across the columns.
    """
    positions = []
    for i in range(FEC_SECTION_LENGTH_BITS):
        if i < 336:
            column, row = divmod(i, 28)
        else:
            column, row = divmod(i - 336, 27)
            column += 12
        positions.append(row * 24 + column)
    return tuple(positions)


_DEINTERLEAVE = _deinterleave_positions()


def _crc_table() -> tuple[int, ...]:
    table = []
    for i in range(256):
        crc = i
        for _ in range(8):
            crc = (crc >> 1) ^ 0x8408 if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_CCITT_TABLE = _crc_table()


def _crc16(data: bytes) -> int:
    """Reflected CCITT CRC with initial value and final inversion of 0xFFFF."""
    crc = 0xFFFF
    for byte in data:
        crc = (crc >> 8) ^ _CCITT_TABLE[(crc ^ byte) & 0xFF]
    return ~crc & 0xFFFF


# Branch outputs (g1, g0) expected into each state from its two predecessors.
_BRANCHES = (
    ((0, 0, 0), (2, 1, 1)),
    ((0, 1, 1), (2, 0, 0)),
    ((1, 1, 0), (3, 0, 1)),
    ((1, 0, 1), (3, 1, 0)),
)


def _viterbi(coded: Sequence[int]) -> list[int]:
    metrics = [0, 0, 0, 0]
    decisions: list[tuple[int, ...]] = []
    for t in range(0, len(coded), 2):
        d1, d0 = coded[t], coded[t + 1]
        new_metrics = []
        step = []
        for (prev_a, a1, a0), (prev_b, b1, b0) in _BRANCHES:
            m1 = (d1 ^ a1) + (d0 ^ a0) + metrics[prev_a]
            m2 = (d1 ^ b1) + (d0 ^ b0) + metrics[prev_b]
            if m1 < m2:
                new_metrics.append(m1)
                step.append(0)
            else:
                new_metrics.append(m2)
                step.append(1)
        metrics = new_metrics
        decisions.append(tuple(step))

    state = 0
    bits: list[int] = []
    for step in reversed(decisions):
        bits.append(state & 1)
        state = (_BRANCHES[state][1] if step[state] else _BRANCHES[state][0])[0]
    bits.reverse()
    return bits


def decode_header(fec_section: bytes) -> bytes:
    """Decode an 83-byte received FEC section into a 41-byte header."""
    data = bytes(fec_section)
    if len(data) != FEC_SECTION_LENGTH_BYTES:
        raise ValueError(f"FEC section must be {FEC_SECTION_LENGTH_BYTES} bytes, got {len(data)}")

    descrambled = bytes(b ^ s for b, s in zip(data, _SCRAMBLE_TABLE_RX))

    coded = [0] * FEC_SECTION_LENGTH_BITS
    for i, pos in enumerate(_DEINTERLEAVE):
        coded[pos] = (descrambled[i >> 3] >> (i & 7)) & 1

    bits = _viterbi(coded)

    out = bytearray(HEADER_LENGTH_BYTES)
    for j, bit in enumerate(bits[: HEADER_LENGTH_BYTES * 8]):
        if bit:
            out[j >> 3] |= 1 << (j & 7)
    return bytes(out)


def header_checksum_ok(header: bytes) -> bool:
    """Check the little-endian CRC in bytes 39 and 40 of a header."""
    header = bytes(header)
    if len(header) < HEADER_LENGTH_BYTES:
        raise ValueError(f"header must be at least {HEADER_LENGTH_BYTES} bytes, got {len(header)}")
    crc = _crc16(header[: HEADER_LENGTH_BYTES - 2])
    return header[39] == crc & 0xFF and header[40] == crc >> 8