"""Tonal engine - owns the per-frame pipeline and the published state.

Frame delivery and user commands are the only mutation points. Readers
(rendering, CLI) get an immutable snapshot that is swapped in one
assignment, so they never see a chord from one frame and a key from
another.
"""

import numbers
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .core import (
    ChordLabel,
    KeyLabel,
    EngineStoppedError,
    DEFAULT_SMOOTHING,
    EPSILON,
)
from .core.chroma import ChromaLike
from .core.constants import FRIENDLY_ROOTS, CAPO_SHIFT_RANGE, MAX_CAPO_FRET
from .analysis import ChromaAccumulator
from .inference import (
    ChordMatcher,
    KeyEstimator,
    CapoAdvisor,
    CapoSuggestion,
    NoKeyYet,
    transpose,
    transpose_all,
    diatonic_chords,
)


@dataclass
class EngineConfig:
    """Configuration for the tonal engine.

    Attributes:
        smoothing: Accumulator smoothing factor in (0, 1) (default: 0.98)
        epsilon: Guard added to cosine-similarity denominators (default: 1e-9)
        friendly_roots: Pitch classes the capo advisor aims for (default: C G D A E)
        capo_shift_range: Inclusive shift search range (default: -6..6)
        max_capo_fret: Highest fret the advisor suggests (default: 7)
    """

    smoothing: float = DEFAULT_SMOOTHING
    epsilon: float = EPSILON
    friendly_roots: Tuple[int, ...] = FRIENDLY_ROOTS
    capo_shift_range: Tuple[int, int] = CAPO_SHIFT_RANGE
    max_capo_fret: int = MAX_CAPO_FRET


@dataclass(frozen=True)
class AnalysisResult:
    """Latest detection, untransposed."""

    chord: Optional[ChordLabel] = None
    key: Optional[KeyLabel] = None
    frames: int = 0  # frames analyzed since the last reset


@dataclass(frozen=True)
class _Published:
    result: AnalysisResult = field(default_factory=AnalysisResult)
    offset: int = 0


def _as_offset(semitones) -> int:
    """Check a transpose amount is a whole number of semitones."""
    if isinstance(semitones, bool) or not isinstance(semitones, numbers.Integral):
        raise ValueError(f"Transpose offset must be an integer, got {semitones!r}")
    return int(semitones)


class TonalEngine:
    """Live chord, key and capo analysis over a stream of chroma frames.

    Usage:
        engine = TonalEngine()
        for frame in frames:
            engine.on_frame(frame)
        engine.current_chord(), engine.current_key(), engine.diatonic_chords()
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize TonalEngine.

        Args:
            config: Engine configuration (defaults to EngineConfig())
        """
        self.config = config or EngineConfig()

        self.accumulator = ChromaAccumulator(smoothing=self.config.smoothing)
        self.matcher = ChordMatcher(epsilon=self.config.epsilon)
        self.estimator = KeyEstimator(epsilon=self.config.epsilon)
        self.advisor = CapoAdvisor(
            friendly_roots=self.config.friendly_roots,
            shift_range=self.config.capo_shift_range,
            max_fret=self.config.max_capo_fret,
        )

        self._lock = threading.Lock()
        self._published = _Published()
        self._running = True

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    def on_frame(self, frame: ChromaLike) -> AnalysisResult:
        """
        Analyze one chroma frame and publish the result.

        Args:
            frame: 12-element chroma vector

        Returns:
            The new (untransposed) AnalysisResult

        Raises:
            MalformedFrameError: If the frame is not 12 non-negative values
            EngineStoppedError: If the engine is stopped
        """
        with self._lock:
            if not self._running:
                raise EngineStoppedError("Engine is stopped; call start() first")

            # Matcher validates before the accumulator is touched
            chord = self.matcher.match(frame)
            self.accumulator.update(frame)
            key = self.estimator.estimate(self.accumulator.read())

            result = AnalysisResult(chord=chord, key=key, frames=self.accumulator.frames_seen)
            self._published = _Published(result, self._published.offset)
            return result

    def set_transpose_offset(self, semitones: int) -> None:
        """Set the display transposition in semitones."""
        with self._lock:
            self._published = _Published(self._published.result, _as_offset(semitones))

    def transpose_by(self, delta: int) -> int:
        """Nudge the display transposition; returns the new offset."""
        with self._lock:
            offset = self._published.offset + _as_offset(delta)
            self._published = _Published(self._published.result, offset)
            return offset

    def reset(self) -> None:
        """Forget all accumulated chroma and the last result.

        The transpose offset is a user setting and survives a reset.
        """
        with self._lock:
            self._reset_locked()

    def _reset_locked(self) -> None:
        self.accumulator.reset()
        self._published = _Published(AnalysisResult(), self._published.offset)

    def start(self) -> None:
        """Resume frame delivery; a start from idle resets the analysis."""
        with self._lock:
            if self._running:
                return
            self._reset_locked()
            self._running = True

    def stop(self) -> None:
        """Stop accepting frames. The last result stays readable."""
        with self._lock:
            self._running = False

    @property
    def running(self) -> bool:
        return self._running

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    @property
    def transpose_offset(self) -> int:
        return self._published.offset

    def raw_result(self) -> AnalysisResult:
        """Get the latest result without transposition."""
        return self._published.result

    def current_chord(self) -> Optional[ChordLabel]:
        """Get the latest chord, transposed for display."""
        published = self._published
        return transpose(published.result.chord, published.offset)

    def current_key(self) -> Optional[KeyLabel]:
        """Get the latest key, transposed for display."""
        published = self._published
        return transpose(published.result.key, published.offset)

    def diatonic_chords(self) -> List[ChordLabel]:
        """Get the diatonic chords I-vi of the latest key, transposed for display."""
        published = self._published
        return transpose_all(diatonic_chords(published.result.key), published.offset)

    def suggest_capo(self) -> Union[CapoSuggestion, NoKeyYet]:
        """Suggest a capo for the displayed (transposed) key."""
        return self.advisor.suggest(self.current_key())
