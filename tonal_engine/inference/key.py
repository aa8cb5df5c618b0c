"""Key estimation - Identify the tonal center from smoothed chroma.

Correlates the accumulated chroma against the Krumhansl-Schmuckler
major and minor profiles rotated to each of the 12 roots.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..core import KeyLabel, Mode, EPSILON, N_PITCH_CLASSES
from ..core.constants import KRUMHANSL_MAJOR, KRUMHANSL_MINOR
from ..core.chroma import ChromaLike, as_frame, normalize, cosine_scores


@dataclass(frozen=True)
class KeyCandidate:
    """A candidate key with its score."""
    key: KeyLabel
    score: float

    @property
    def name(self) -> str:
        return self.key.name


def rotate_profile(profile, root: int) -> np.ndarray:
    """Rotate a tonic-first profile so its tonic sits on `root`.

    Entry i of the result is profile[(i - root) % 12].
    """
    return np.roll(np.asarray(profile, dtype=float), root)


def _build_candidates() -> Tuple[Tuple[KeyLabel, ...], np.ndarray]:
    keys = []
    rows = []
    for root in range(N_PITCH_CLASSES):
        keys.append(KeyLabel(root, Mode.MAJOR))
        rows.append(rotate_profile(KRUMHANSL_MAJOR, root))
        keys.append(KeyLabel(root, Mode.MINOR))
        rows.append(rotate_profile(KRUMHANSL_MINOR, root))
    return tuple(keys), np.array(rows)


_KEY_LABELS, _PROFILE_MATRIX = _build_candidates()


class KeyEstimator:
    """Estimate the key of the rolling chroma accumulator.

    Has no memory of its own; stability comes from the accumulator it reads.
    """

    def __init__(self, epsilon: float = EPSILON):
        self.epsilon = epsilon

    def _scores(self, smoothed: ChromaLike) -> Optional[np.ndarray]:
        arr = as_frame(smoothed)
        if arr.max() <= 0:
            return None
        return cosine_scores(normalize(arr), _PROFILE_MATRIX, self.epsilon)

    def estimate(self, smoothed: ChromaLike) -> Optional[KeyLabel]:
        """
        Find the best matching key.

        Args:
            smoothed: 12-element accumulated chroma

        Returns:
            Best KeyLabel, or None when there is no pitch content yet
        """
        scores = self._scores(smoothed)
        if scores is None:
            return None
        return _KEY_LABELS[int(np.argmax(scores))]

    def candidates(self, smoothed: ChromaLike) -> List[KeyCandidate]:
        """
        Get all 24 key candidates, best first.

        Equal scores keep ascending-root, major-before-minor order.
        """
        scores = self._scores(smoothed)
        if scores is None:
            return []
        ranked = [KeyCandidate(key, float(s)) for key, s in zip(_KEY_LABELS, scores)]
        ranked.sort(key=lambda c: c.score, reverse=True)
        return ranked
