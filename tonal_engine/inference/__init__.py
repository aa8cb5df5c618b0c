"""Inference layer - Tonal understanding from chroma.

- Chord matching (per frame)
- Key estimation (from the rolling accumulator)
- Transposition, diatonic chords and capo advice

Pipeline: frame → chord; accumulator → key → diatonic chords
"""

from .chords import ChordMatcher, ChordTemplate, CHORD_TEMPLATES
from .key import KeyEstimator, KeyCandidate, rotate_profile
from .transpose import transpose, transpose_all
from .diatonic import diatonic_chords, roman_numerals, scale_pitch_classes
from .capo import CapoAdvisor, CapoSuggestion, NoKeyYet

__all__ = [
    # Chords
    "ChordMatcher",
    "ChordTemplate",
    "CHORD_TEMPLATES",
    # Key
    "KeyEstimator",
    "KeyCandidate",
    "rotate_profile",
    # Transposition
    "transpose",
    "transpose_all",
    # Diatonic chords
    "diatonic_chords",
    "roman_numerals",
    "scale_pitch_classes",
    # Capo
    "CapoAdvisor",
    "CapoSuggestion",
    "NoKeyYet",
]
