"""Rolling chroma accumulator - the slow-moving pitch-class estimate behind key detection."""

import numpy as np

from ..core import N_PITCH_CLASSES, DEFAULT_SMOOTHING
from ..core.chroma import ChromaLike, as_frame, normalize


class ChromaAccumulator:
    """Exponentially smoothed 12-bin chroma estimate.

    Each frame is normalized to proportions before it is folded in, so loud
    and quiet passages weigh the same. With the default smoothing of 0.98
    the estimate reflects several seconds of audio rather than one window.
    """

    def __init__(self, smoothing: float = DEFAULT_SMOOTHING):
        """
        Initialize ChromaAccumulator.

        Args:
            smoothing: Weight kept from the previous state on each update,
                strictly between 0 and 1

        Raises:
            ValueError: If smoothing is outside (0, 1)
        """
        if not 0.0 < smoothing < 1.0:
            raise ValueError(f"smoothing must be in (0, 1), got {smoothing}")

        self.smoothing = smoothing
        self._state = np.zeros(N_PITCH_CLASSES)
        self.frames_seen = 0

    def update(self, frame: ChromaLike) -> None:
        """
        Fold one chroma frame into the running estimate.

        An all-zero frame counts as silence: the state decays toward zero
        without any new pitch content.

        Raises:
            MalformedFrameError: If the frame is not 12 non-negative values
        """
        proportions = normalize(as_frame(frame))
        self._state *= self.smoothing
        self._state += (1.0 - self.smoothing) * proportions
        self.frames_seen += 1

    def read(self) -> np.ndarray:
        """Get a copy of the current smoothed state."""
        return self._state.copy()

    def reset(self) -> None:
        """Zero the state, e.g. when analysis restarts from idle."""
        self._state = np.zeros(N_PITCH_CLASSES)
        self.frames_seen = 0
