# dvmodem

Pure-Python building blocks for a multi-mode amateur radio repeater modem
working at a 24 kHz sample rate. Audio samples are plain integers in the
signed Q15 range, and the arithmetic follows fixed-point rules (saturation,
32-bit wrap-around) so results are reproducible bit for bit.

The package has no dependencies outside the standard library.

## Modules

- `dvmodem.fixedpoint` – `ssat(value, bits)` saturates to a signed width,
  `sin_q31(arg)` gives the Q31 sine of a Q31 phase, and `FirInterpolator`
  is a polyphase FIR interpolator that keeps its history between calls to
  `process(samples)`.
- `dvmodem.fm_timer` – `FMTimer`, a timer advanced by `clock(length)` in
  samples. `set_timeout(secs, msecs)`, `get_timeout()` (in milliseconds),
  `start()`, `stop()`, `is_running()` and `has_expired()`.
- `dvmodem.ringbuffer` – `RingBuffer`, a fixed-capacity FIFO. `put()` returns
  `False` and records an overflow when full; `get()` returns `None` when
  empty; `has_overflowed()` reports and clears the overflow flag. It also
  offers `capacity`, `space`, `len()` and `reset()`.
- `dvmodem.fm_downsampler` – `FMDownsampler` keeps one sample in three and
  packs each pair of kept samples into three bytes, read back with
  `get_packed_data()`.
- `dvmodem.fm_tones` – `FMBlanking` replaces audio that reaches the set
  deviation threshold with a 2 kHz bleep followed by silence;
  `FMTimeoutTone` produces an interrupted 400 Hz busy tone.
- `dvmodem.fm_ctcss` – `CTCSSDecoder`, a Goertzel detector with separate
  high and low thresholds, returning a `CTCSSState` flag that `is_ready()`
  and `is_valid()` test; `CTCSSEncoder` generates the tone, optionally
  phase-reversed. Both accept the usual CTCSS frequency codes (67 to 254)
  and raise `ValueError` for any other.
- `dvmodem.fm_keyer` – `FMKeyer` sends a text as Morse code in square-wave
  audio at a high or a low level.
- `dvmodem.dstar_tx` – `encode_header(header)` convolves, interleaves and
  scrambles a 41-byte D-Star header into 83 bytes. `DStarTransmitter`
  queues headers, 12-byte voice frames and end-of-transmission markers and,
  on each `process(space, transmitting)`, hands GMSK-shaped samples to the
  `write_samples` callback given to it. `set_tx_delay()` sets the preamble
  and `get_space()` tells how many data frames still fit.
- `dvmodem.dstar_fec` – `decode_header(fec_section)` descrambles,
  deinterleaves and Viterbi-decodes 83 bytes back into a 41-byte header;
  `header_checksum_ok(header)` checks its CRC.
- `dvmodem.dstar_rx` – `DStarReceiver` recovers the bit clock from
  demodulated samples, finds frame, data and end syncs, and passes each
  header, data frame, end of transmission and loss of lock to its sink as
  a `DStarEvent` (with an averaged RSSI where one applies).

Wrong lengths, unknown frequencies and full queues are raised as
`ValueError` or `BufferError`.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from dvmodem.dstar_fec import decode_header, header_checksum_ok
from dvmodem.dstar_tx import DStarTransmitter, encode_header
from dvmodem.fm_timer import FMTimer

timer = FMTimer()
timer.set_timeout(1, 0)      # one second at 24 kHz
timer.start()
timer.clock(24000)
assert timer.has_expired()

header = bytes(41)
section = encode_header(header)      # 83 bytes on air
assert decode_header(section) == header

blocks = []
tx = DStarTransmitter(blocks.append)
tx.write_data(bytes(12))
tx.process(space=1000, transmitting=True)
# each block holds 40 samples: one byte, eight bits, five samples per bit
```

## What it does not do

This is a library of parts, not a running modem. It has no command, does
not talk to a host over a serial link, drives no radio or audio hardware,
and contains no FM repeater controller tying the timers, tones, keyer and
CTCSS blocks together. Other digital modes are not covered.