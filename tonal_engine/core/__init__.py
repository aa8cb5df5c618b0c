"""Core types and constants for the tonal analysis engine."""

from .constants import (
    PITCH_NAMES,
    N_PITCH_CLASSES,
    DEFAULT_SR,
    DEFAULT_WINDOW_SIZE,
    DEFAULT_SMOOTHING,
    EPSILON,
)
from .errors import MalformedFrameError, EngineStoppedError
from .labels import (
    ChordQuality,
    Mode,
    ChordLabel,
    KeyLabel,
    pitch_class,
    pitch_name,
    parse_key,
)

__all__ = [
    "PITCH_NAMES",
    "N_PITCH_CLASSES",
    "DEFAULT_SR",
    "DEFAULT_WINDOW_SIZE",
    "DEFAULT_SMOOTHING",
    "EPSILON",
    "MalformedFrameError",
    "EngineStoppedError",
    "ChordQuality",
    "Mode",
    "ChordLabel",
    "KeyLabel",
    "pitch_class",
    "pitch_name",
    "parse_key",
]
