import math
from typing import Optional, Tuple

from config import A4_HZ, DISPLAY_RANGE_CENTS, NOTE_NAMES
from dsp import has_pitch

NO_NOTE = "---"


def cents_offset(freq: float, target: float) -> float:
    """Signed distance from target in cents; nan when either side is missing."""
    if not has_pitch(freq) or not has_pitch(target):
        return math.nan
    return 1200.0 * math.log2(freq / target)


def clamp_cents(cents: float, limit: float = DISPLAY_RANGE_CENTS) -> float:
    if not math.isfinite(cents):
        return 0.0
    return max(-limit, min(limit, cents))


def midi_from_freq(freq: float) -> int:
    # half-up rounding, Python's round() would send x.5 to the even note
    return math.floor(69 + 12.0 * math.log2(freq / A4_HZ) + 0.5)


def note_frequency(midi: int) -> float:
    return A4_HZ * 2.0 ** ((midi - 69) / 12.0)


def nearest_note(freq: float) -> Optional[Tuple[str, int]]:
    if not has_pitch(freq):
        return None
    midi = midi_from_freq(freq)
    return NOTE_NAMES[midi % 12], midi // 12 - 1


def note_label(note: Optional[Tuple[str, int]]) -> str:
    if note is None:
        return NO_NOTE
    name, octave = note
    return f"{name}{octave}"


def parse_note(name: str, octave: int) -> int:
    """MIDI number of a note given as a name from NOTE_NAMES and an octave."""
    key = name.strip().upper()
    if key not in NOTE_NAMES:
        raise ValueError(f"Unknown note name: {name!r}")
    return (octave + 1) * 12 + NOTE_NAMES.index(key)
