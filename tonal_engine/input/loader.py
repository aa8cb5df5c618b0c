"""Audio file loading for offline analysis."""

from pathlib import Path
from typing import Tuple, Union

import numpy as np
import librosa

from ..core import DEFAULT_SR


class AudioLoader:
    """Loads audio files as mono float arrays at the analysis sample rate."""

    SUPPORTED_FORMATS = {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".mp4", ".webm", ".opus"}

    def __init__(self, target_sr: int = DEFAULT_SR):
        self.target_sr = target_sr

    def load(self, path: Union[str, Path]) -> Tuple[np.ndarray, int]:
        """
        Load an audio file, resampled to the target rate and mixed to mono.

        Args:
            path: Path to audio file

        Returns:
            Tuple of (audio array, sample rate)

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format not supported
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {sorted(self.SUPPORTED_FORMATS)}"
            )

        audio, sr = librosa.load(str(path), sr=self.target_sr, mono=True)
        return audio, sr

    def get_duration(self, audio: np.ndarray, sr: int) -> float:
        """Get duration in seconds."""
        return len(audio) / sr
