"""CTCSS tone decoding (Goertzel) and encoding for the FM repeater."""

from __future__ import annotations

import enum

from .fixedpoint import sin_q31, ssat


class CTCSSState(enum.IntFlag):
    NONE = 0
    READY = 1
    VALID = 2


def is_ready(state: int) -> bool:
    """True when a decoding window has just completed."""
    return bool(state & CTCSSState.READY)


def is_valid(state: int) -> bool:
    """True when the tone is currently detected."""
    return bool(state & CTCSSState.VALID)


def _wrap_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


# Frequency code -> Goertzel coefficient / 2 in Q31
_RX_COEFFS = {
    67: 2147153298, 69: 2147130228, 71: 2147103212, 74: 2147076297, 77: 2147047330,
    79: 2147016195, 82: 2146982775, 85: 2146946945, 88: 2146907275, 91: 2146867538,
    94: 2146822298, 97: 2146785526, 100: 2146747759, 103: 2146695349, 107: 2146637984,
    110: 2146578604, 114: 2146513835, 118: 2146445080, 123: 2146370355, 127: 2146291161,
    131: 2146205372, 136: 2146112589, 141: 2146014479, 146: 2145910829, 151: 2145796971,
    156: 2145676831, 159: 2145604646, 162: 2145547790, 165: 2145468230, 167: 2145409363,
    171: 2145324517, 173: 2145261046, 177: 2145170643, 179: 2145102321, 183: 2145006080,
    186: 2144932648, 189: 2144830280, 192: 2144748638, 196: 2144639788, 199: 2144555290,
    203: 2144436713, 206: 2144346237, 210: 2144217348, 218: 2143983951, 225: 2143735870,
    229: 2143622139, 233: 2143469001, 241: 2143182299, 250: 2142874683, 254: 2142733729,
}

# Frequency code -> (samples per cycle, Q31 phase increment)
_TX_TABLE = {
    67: (358, 5995059), 69: (346, 6200860), 71: (334, 6433504), 74: (323, 6657200),
    77: (312, 6889844), 79: (301, 7131436), 82: (291, 7381976), 85: (281, 7641463),
    88: (271, 7918846), 91: (262, 8187282), 94: (253, 8482561), 97: (246, 8715205),
    100: (240, 8947849), 103: (232, 9261024), 107: (224, 9592094), 110: (216, 9923165),
    114: (209, 10272131), 118: (202, 10630045), 123: (195, 11005854), 127: (189, 11390612),
    131: (182, 11793265), 136: (176, 12213814), 141: (170, 12643310), 146: (164, 13081755),
    151: (159, 13547043), 156: (153, 14021279), 159: (150, 14298662), 162: (148, 14513411),
    165: (145, 14808690), 167: (143, 15023438), 171: (140, 15327665), 173: (138, 15551361),
    177: (135, 15864536), 179: (133, 16097180), 183: (131, 16419303), 186: (129, 16660894),
    189: (126, 16991965), 192: (124, 17251452), 196: (122, 17591471), 199: (120, 17850958),
    203: (118, 18208872), 206: (116, 18477308), 210: (114, 18853117), 218: (110, 19515258),
    225: (106, 20195295), 229: (105, 20499521), 233: (103, 20902175), 241: (99, 21635898),
    250: (96, 22396465), 254: (94, 22736484),
}

# 4 Hz bandwidth at 24 kHz
_WINDOW = 24000 // 4


class CTCSSDecoder:
    """Goertzel detector for a single CTCSS tone with hysteresis."""

    def __init__(self) -> None:
        self._coeff_div_two = 0
        self._high_threshold = 0
        self._low_threshold = 0
        self._count = 0
        self._q0 = 0
        self._q1 = 0
        self._result = CTCSSState.NONE

    def set_params(self, frequency: int, high_threshold: int, low_threshold: int) -> None:
        """Select the tone by frequency code; raise ValueError if unknown."""
        try:
            self._coeff_div_two = _RX_COEFFS[frequency]
        except KeyError:
            self._coeff_div_two = 0
            raise ValueError(f"unsupported CTCSS frequency: {frequency}") from None
        self._high_threshold = high_threshold
        self._low_threshold = low_threshold

    def process(self, sample: int) -> CTCSSState:
        """Feed one Q15 sample; return the current detector state."""
        sample31 = sample + (sample >> 1)

        self._result &= ~CTCSSState.READY

        q2 = self._q1
        self._q1 = self._q0

        t2 = ssat((self._coeff_div_two * self._q1) >> 31, 31)
        self._q0 = _wrap_int32(t2 * 2 - q2 + sample31)

        self._count += 1
        if self._count == _WINDOW:
            q0, q1 = self._q0, self._q1
            p0 = ssat((q0 * q0) >> 31, 31)
            p1 = ssat((q1 * q1) >> 31, 31)
            cross = ssat((q0 * q1) >> 31, 31)
            cross = ssat((cross * self._coeff_div_two) >> 31, 31) * 2
            value = _wrap_int32(p0 + p1 - cross)

            threshold = self._low_threshold if is_valid(self._result) else self._high_threshold

            self._result |= CTCSSState.READY
            if value >= threshold:
                self._result |= CTCSSState.VALID
            else:
                self._result &= ~CTCSSState.VALID

            self._count = 0
            self._q0 = 0
            self._q1 = 0

        return self._result

    def reset(self) -> None:
        self._q0 = 0
        self._q1 = 0
        self._result = CTCSSState.NONE
        self._count = 0


class CTCSSEncoder:
    """Generates a CTCSS sine tone from a precomputed one-cycle table."""

    def __init__(self) -> None:
        self._values: tuple[int, ...] = ()
        self._n = 0

    @property
    def length(self) -> int:
        """Number of samples in one tone cycle."""
        return len(self._values)

    def set_params(self, frequency: int, level: int) -> None:
        """Select the tone and level; raise ValueError if the frequency is unknown."""
        try:
            length, increment = _TX_TABLE[frequency]
        except KeyError:
            raise ValueError(f"unsupported CTCSS frequency: {frequency}") from None

        amplitude = level * 13
        self._values = tuple(
            ssat((sin_q31(_wrap_int32(i * increment)) * amplitude) >> 31, 16)
            for i in range(length)
        )
        self._n = 0

    def get_audio(self, reverse: bool) -> int:
        """Return the next tone sample, phase-reversed if ``reverse``."""
        if not self._values:
            raise RuntimeError("CTCSS encoder parameters have not been set")
        sample = self._values[self._n]
        self._n = (self._n + 1) % len(self._values)
        return -sample if reverse else sample