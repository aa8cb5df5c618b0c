"""Diatonic chords - the primary triads of a major or natural minor key."""

from typing import List, Optional, Tuple

from ..core import ChordLabel, ChordQuality, KeyLabel, Mode, N_PITCH_CLASSES
from ..core.constants import MAJOR_SCALE, NATURAL_MINOR_SCALE

SCALE_INTERVALS = {
    Mode.MAJOR: MAJOR_SCALE,
    Mode.MINOR: NATURAL_MINOR_SCALE,
}

# (third, fifth) in semitones above the chord root
TRIAD_QUALITIES = {
    (4, 7): ChordQuality.MAJOR,
    (3, 7): ChordQuality.MINOR,
    (3, 6): ChordQuality.DIMINISHED,
    (4, 8): ChordQuality.AUGMENTED,
}

# I-vi only; vii is rarely played
N_DEGREES = 6

_NUMERALS = ["I", "II", "III", "IV", "V", "VI", "VII"]


def scale_pitch_classes(key: KeyLabel) -> List[int]:
    """Get the seven pitch classes of the key's scale."""
    return [(key.root + i) % N_PITCH_CLASSES for i in SCALE_INTERVALS[key.mode]]


def classify_triad(root: int, third: int, fifth: int) -> ChordQuality:
    """Classify a stacked triad by its intervals above the root."""
    intervals: Tuple[int, int] = (
        (third - root) % N_PITCH_CLASSES,
        (fifth - root) % N_PITCH_CLASSES,
    )
    return TRIAD_QUALITIES[intervals]


def diatonic_chords(key: Optional[KeyLabel]) -> List[ChordLabel]:
    """
    Build the triads on scale degrees I through vi.

    Args:
        key: Key estimate, or None

    Returns:
        Six ChordLabels in degree order (empty for no key)
    """
    if key is None:
        return []

    scale = scale_pitch_classes(key)
    chords = []
    for degree in range(N_DEGREES):
        root = scale[degree]
        third = scale[(degree + 2) % 7]
        fifth = scale[(degree + 4) % 7]
        chords.append(ChordLabel(root, classify_triad(root, third, fifth)))
    return chords


def roman_numerals(key: Optional[KeyLabel]) -> List[str]:
    """
    Roman numerals for the diatonic chords (e.g., I ii iii IV V vi).

    Minor and diminished chords are lowercase; diminished gets a degree sign.
    """
    numerals = []
    for degree, chord in enumerate(diatonic_chords(key)):
        numeral = _NUMERALS[degree]
        if chord.quality in (ChordQuality.MINOR, ChordQuality.DIMINISHED):
            numeral = numeral.lower()
        if chord.quality is ChordQuality.DIMINISHED:
            numeral += "°"
        elif chord.quality is ChordQuality.AUGMENTED:
            numeral += "+"
        numerals.append(numeral)
    return numerals
