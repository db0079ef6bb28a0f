import pytest

from dvmodem.fixedpoint import FirInterpolator, sin_q31, ssat

GAUSSIAN = [0, 0, 0, 0, 1001, 3514, 9333, 18751, 28499, 32767, 28499, 18751, 9333, 3514, 1001]


def test_ssat_clips_high_and_low():
    assert ssat(40000, 16) == 32767
    assert ssat(-40000, 16) == -32768


def test_ssat_passes_values_in_range():
    assert ssat(1234, 16) == 1234
    assert ssat(-1234, 16) == -1234


def test_ssat_rejects_zero_bits():
    with pytest.raises(ValueError):
        ssat(1, 0)


def test_sin_zero_phase():
    assert sin_q31(0) == 0


def test_sin_quarter_turn_is_full_scale():
    assert sin_q31(0x20000000) == (1 << 31) - 1


def test_sin_three_quarter_turn_is_negative_full_scale():
    assert sin_q31(0x60000000) == -(1 << 31)


def test_sin_negative_phase_wraps():
    assert sin_q31(-0x20000000) == sin_q31(0x60000000)


def test_sin_is_odd_around_half_turn():
    for phase in (0x01000000, 0x0A000000, 0x13000000):
        assert sin_q31(0x40000000 + phase) == pytest.approx(-sin_q31(0x40000000 - phase), abs=2)


def test_interpolator_output_length():
    fir = FirInterpolator(GAUSSIAN, 5)
    assert len(fir.process([100, -100, 200])) == 15


def test_interpolator_zero_input_gives_zero_output():
    fir = FirInterpolator(GAUSSIAN, 5)
    assert fir.process([0] * 8) == [0] * 40


def test_interpolator_impulse_response_is_symmetric():
    fir = FirInterpolator(GAUSSIAN, 5)
    out = fir.process([16384, 0, 0])
    nonzero = [i for i, v in enumerate(out) if v != 0]
    segment = out[nonzero[0] : nonzero[-1] + 1]
    assert segment == segment[::-1]
    assert max(out) == 32767 >> 1


def test_interpolator_keeps_state_between_calls():
    data = [500, -800, 1200, 0, -300]
    whole = FirInterpolator(GAUSSIAN, 5).process(data)
    split = FirInterpolator(GAUSSIAN, 5)
    parts = split.process(data[:2]) + split.process(data[2:])
    assert parts == whole


def test_interpolator_is_linear_in_sign():
    data = [700, -100, 2500]
    pos = FirInterpolator(GAUSSIAN, 5).process(data)
    neg = FirInterpolator(GAUSSIAN, 5).process([-x for x in data])
    for a, b in zip(pos, neg):
        assert abs(a + b) <= 1


def test_interpolator_rejects_bad_tap_count():
    with pytest.raises(ValueError):
        FirInterpolator([1, 2, 3], 2)