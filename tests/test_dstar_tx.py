import pytest

from dvmodem.dstar_tx import (
    DSTAR_FEC_SECTION_LENGTH_BYTES,
    DSTAR_HEADER_LENGTH_BYTES,
    DStarTransmitter,
    encode_header,
)

ZERO_HEADER = bytes(DSTAR_HEADER_LENGTH_BYTES)


def _xor(a, b):
    return bytes(x ^ y for x, y in zip(a, b))


class Recorder:
    def __init__(self):
        self.blocks = []

    def __call__(self, samples):
        self.blocks.append(list(samples))


def test_encode_header_length():
    assert len(encode_header(ZERO_HEADER)) == DSTAR_FEC_SECTION_LENGTH_BYTES


def test_encode_header_rejects_bad_length():
    with pytest.raises(ValueError):
        encode_header(bytes(40))


def test_zero_header_gives_scrambler_sequence():
    encoded = encode_header(ZERO_HEADER)
    assert encoded[:3] == bytes((0x00, 0xF7, 0x34))


def test_encoding_is_affine():
    a = bytes(range(41))
    b = bytes((i * 37) & 0xFF for i in range(41))
    zero = encode_header(ZERO_HEADER)
    combined = encode_header(_xor(a, b))
    assert _xor(_xor(encode_header(a), encode_header(b)), zero) == combined


def test_single_bit_spreads_to_interleaved_positions():
    header = bytearray(ZERO_HEADER)
    header[0] = 0x01
    diff = _xor(encode_header(bytes(header)), encode_header(ZERO_HEADER))
    set_bytes = {i: b for i, b in enumerate(diff) if b}
    assert set_bytes == {0: 0x10, 4: 0x01, 7: 0x10, 14: 0x10, 18: 0x01}


def test_different_headers_encode_differently():
    header = bytearray(ZERO_HEADER)
    header[40] = 0x80
    assert encode_header(bytes(header)) != encode_header(ZERO_HEADER)


def test_write_rejects_bad_lengths():
    tx = DStarTransmitter(Recorder())
    with pytest.raises(ValueError):
        tx.write_header(bytes(10))
    with pytest.raises(ValueError):
        tx.write_data(bytes(11))


def test_space_decreases_and_fills():
    tx = DStarTransmitter(Recorder())
    initial = tx.get_space()
    tx.write_data(bytes(12))
    assert tx.get_space() == initial - 1
    with pytest.raises(BufferError):
        for _ in range(initial + 1):
            tx.write_data(bytes(12))


def test_process_idle_writes_nothing():
    rec = Recorder()
    tx = DStarTransmitter(rec)
    tx.process(10000, True)
    assert rec.blocks == []


def test_data_frame_modulation():
    rec = Recorder()
    tx = DStarTransmitter(rec)
    tx.write_data(bytes(12))
    tx.process(10000, True)
    assert len(rec.blocks) == 12
    assert all(len(block) == 40 for block in rec.blocks)
    assert all(s >= 0 for block in rec.blocks for s in block)
    assert rec.blocks[-1][-1] > 0


def test_ones_modulate_negative():
    rec = Recorder()
    tx = DStarTransmitter(rec)
    tx.write_data(b"\xff" * 12)
    tx.process(10000, True)
    assert all(s <= 0 for block in rec.blocks for s in block)
    assert rec.blocks[-1][-1] < 0


def test_limited_space_continues_later():
    rec = Recorder()
    tx = DStarTransmitter(rec)
    tx.write_data(bytes(12))
    tx.process(81, True)
    assert len(rec.blocks) == 2
    tx.process(10000, True)
    assert len(rec.blocks) == 12


def test_header_preamble_then_header():
    rec = Recorder()
    tx = DStarTransmitter(rec)
    tx.write_header(ZERO_HEADER)
    space_with_header = tx.get_space()
    tx.process(100000, False)
    assert len(rec.blocks) == tx.tx_delay
    assert tx.get_space() == space_with_header
    rec.blocks.clear()
    tx.process(100000, True)
    assert len(rec.blocks) == 2 + DSTAR_FEC_SECTION_LENGTH_BYTES
    assert tx.get_space() > space_with_header


def test_eot_sends_three_patterns():
    rec = Recorder()
    tx = DStarTransmitter(rec)
    tx.write_eot()
    tx.process(100000, True)
    assert len(rec.blocks) == 18


def test_tx_delay_limits():
    tx = DStarTransmitter(Recorder())
    tx.set_tx_delay(0)
    assert tx.tx_delay == 300
    tx.set_tx_delay(255)
    assert tx.tx_delay == 600
    tx.set_tx_delay(10)
    assert tx.tx_delay == 360