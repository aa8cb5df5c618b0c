"""Chroma frame extraction - feeds audio files to the engine one window at a time."""

import warnings
from typing import Iterator, Optional, Tuple

import numpy as np
import librosa

from ..core import DEFAULT_SR, DEFAULT_WINDOW_SIZE


class ChromaExtractor:
    """Extracts per-window chroma vectors from audio.

    Windows do not overlap, so each frame corresponds to one analysis
    buffer the way a live audio callback would deliver it.
    """

    def __init__(
        self,
        sr: int = DEFAULT_SR,
        window_size: int = DEFAULT_WINDOW_SIZE,
        hop_length: Optional[int] = None,
    ):
        """
        Initialize ChromaExtractor.

        Args:
            sr: Sample rate
            window_size: FFT window size in samples
            hop_length: Samples between frames (defaults to window_size)
        """
        self.sr = sr
        self.window_size = window_size
        self.hop_length = hop_length or window_size

    @property
    def frame_duration(self) -> float:
        """Seconds between consecutive frames."""
        return self.hop_length / self.sr

    def chromagram(self, audio: np.ndarray) -> np.ndarray:
        """
        Compute chromagram (12 pitch classes).

        Returns:
            Chromagram [12, time_frames]
        """
        if len(audio) < self.window_size:
            warnings.warn(
                f"Audio shorter than one analysis window ({len(audio)} < {self.window_size} samples)"
            )
            return np.zeros((12, 0))

        return librosa.feature.chroma_stft(
            y=audio,
            sr=self.sr,
            n_fft=self.window_size,
            hop_length=self.hop_length,
            center=False,
        )

    def frames(self, audio: np.ndarray) -> Iterator[Tuple[float, np.ndarray]]:
        """
        Iterate over chroma frames.

        Yields:
            (time in seconds, 12-element chroma vector)
        """
        chroma = self.chromagram(audio)
        times = librosa.frames_to_time(
            np.arange(chroma.shape[1]),
            sr=self.sr,
            hop_length=self.hop_length,
        )
        for t, column in zip(times, chroma.T):
            yield float(t), column
