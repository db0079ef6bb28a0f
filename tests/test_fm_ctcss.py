import math

import pytest

from dvmodem.fm_ctcss import (
    CTCSSDecoder,
    CTCSSEncoder,
    CTCSSState,
    is_ready,
    is_valid,
)


def _tone(freq_hz, amplitude, count):
    return [round(amplitude * math.sin(2 * math.pi * freq_hz * i / 24000)) for i in range(count)]


def test_flag_helpers():
    assert is_ready(CTCSSState.READY)
    assert not is_ready(CTCSSState.VALID)
    assert is_valid(CTCSSState.VALID | CTCSSState.READY)
    assert not is_valid(CTCSSState.NONE)


def test_decoder_unknown_frequency():
    decoder = CTCSSDecoder()
    with pytest.raises(ValueError):
        decoder.set_params(66, 50, 30)


def test_decoder_ready_after_window():
    decoder = CTCSSDecoder()
    decoder.set_params(88, 50, 30)
    states = [decoder.process(0) for _ in range(6000)]
    assert not any(is_ready(s) for s in states[:5999])
    assert is_ready(states[5999])
    assert not is_valid(states[5999])
    # Ready flag is cleared on the next sample
    assert not is_ready(decoder.process(0))


def test_decoder_detects_matching_tone():
    decoder = CTCSSDecoder()
    decoder.set_params(88, 50, 30)
    states = [decoder.process(s) for s in _tone(88.5, 3000, 6000)]
    assert is_ready(states[-1])
    assert is_valid(states[-1])


def test_decoder_loses_tone_on_silence():
    decoder = CTCSSDecoder()
    decoder.set_params(88, 50, 30)
    for s in _tone(88.5, 3000, 6000):
        decoder.process(s)
    states = [decoder.process(0) for _ in range(6000)]
    assert is_valid(states[0])
    assert is_ready(states[-1])
    assert not is_valid(states[-1])


def test_decoder_reset():
    decoder = CTCSSDecoder()
    decoder.set_params(88, 50, 30)
    for s in _tone(88.5, 3000, 6000):
        decoder.process(s)
    decoder.reset()
    state = decoder.process(0)
    assert not is_valid(state)
    assert not is_ready(state)


def test_encoder_unknown_frequency():
    encoder = CTCSSEncoder()
    with pytest.raises(ValueError):
        encoder.set_params(66, 100)


def test_encoder_requires_params():
    encoder = CTCSSEncoder()
    with pytest.raises(RuntimeError):
        encoder.get_audio(False)


def test_encoder_period_matches_table():
    encoder = CTCSSEncoder()
    encoder.set_params(67, 100)
    assert encoder.length == 358
    out = [encoder.get_audio(False) for _ in range(716)]
    assert out[:358] == out[358:]
    assert out[0] == 0


def test_encoder_amplitude_bounded_by_level():
    encoder = CTCSSEncoder()
    encoder.set_params(100, 100)
    out = [encoder.get_audio(False) for _ in range(encoder.length)]
    peak = max(abs(x) for x in out)
    assert peak <= 100 * 13
    assert peak > 100 * 13 * 0.9
    assert max(out) > 0 > min(out)


def test_encoder_reverse_negates():
    normal = CTCSSEncoder()
    reversed_ = CTCSSEncoder()
    normal.set_params(123, 80)
    reversed_.set_params(123, 80)
    a = [normal.get_audio(False) for _ in range(400)]
    b = [reversed_.get_audio(True) for _ in range(400)]
    assert b == [-x for x in a]


def test_encoder_zero_level_is_silent():
    encoder = CTCSSEncoder()
    encoder.set_params(254, 0)
    assert encoder.length == 94
    assert [encoder.get_audio(False) for _ in range(200)] == [0] * 200