"""Fixed-point building blocks for a D-Star and FM repeater modem."""

__version__ = "0.1.0"
__all__ = [
    "fixedpoint",
    "fm_timer",
    "ringbuffer",
    "fm_downsampler",
    "fm_tones",
    "fm_ctcss",
    "fm_keyer",
    "dstar_tx",
    "dstar_fec",
    "dstar_rx",
]