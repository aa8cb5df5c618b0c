"""Tonal Engine - Live chord, key and capo analysis from chroma frames.

Architecture Layers:
    1. core/      - Labels, constants, chroma helpers, errors
    2. analysis/  - Rolling chroma accumulator, chroma frame extraction
    3. inference/ - Chord matching, key estimation, transposition,
                    diatonic chords, capo advice
    4. engine     - Stateful per-frame pipeline with published snapshots
    5. input/     - Audio loading (for the CLI)
"""

__version__ = "0.1.0"

# Core types
from .core import (
    ChordLabel,
    KeyLabel,
    ChordQuality,
    Mode,
    MalformedFrameError,
    EngineStoppedError,
    parse_key,
    pitch_class,
)

# Analysis layer
from .analysis import ChromaAccumulator, ChromaExtractor

# Inference layer
from .inference import (
    ChordMatcher,
    KeyEstimator,
    CapoAdvisor,
    CapoSuggestion,
    NoKeyYet,
    transpose,
    diatonic_chords,
)

# Engine
from .engine import TonalEngine, EngineConfig, AnalysisResult

# Input layer
from .input import AudioLoader

__all__ = [
    # Core
    "ChordLabel",
    "KeyLabel",
    "ChordQuality",
    "Mode",
    "MalformedFrameError",
    "EngineStoppedError",
    "parse_key",
    "pitch_class",
    # Analysis
    "ChromaAccumulator",
    "ChromaExtractor",
    # Inference
    "ChordMatcher",
    "KeyEstimator",
    "CapoAdvisor",
    "CapoSuggestion",
    "NoKeyYet",
    "transpose",
    "diatonic_chords",
    # Engine
    "TonalEngine",
    "EngineConfig",
    "AnalysisResult",
    # Input
    "AudioLoader",
]
