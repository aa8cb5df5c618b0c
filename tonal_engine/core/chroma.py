"""Chroma vector helpers shared by the accumulator, matcher and estimator."""

from typing import Sequence, Union

import numpy as np

from .constants import EPSILON, N_PITCH_CLASSES
from .errors import MalformedFrameError

ChromaLike = Union[Sequence[float], np.ndarray]


def as_frame(frame: ChromaLike) -> np.ndarray:
    """
    Validate a chroma frame and return it as a float array.

    Raises:
        MalformedFrameError: Wrong length, non-finite or negative entries
    """
    try:
        arr = np.asarray(frame, dtype=float)
    except (TypeError, ValueError) as e:
        raise MalformedFrameError(f"Chroma frame is not numeric: {e}") from e

    if arr.shape != (N_PITCH_CLASSES,):
        raise MalformedFrameError(
            f"Chroma frame must have {N_PITCH_CLASSES} entries, got shape {arr.shape}"
        )
    if not np.all(np.isfinite(arr)):
        raise MalformedFrameError("Chroma frame contains non-finite values")
    if np.any(arr < 0):
        raise MalformedFrameError("Chroma frame contains negative energy")
    return arr


def normalize(arr: np.ndarray) -> np.ndarray:
    """Scale to proportions summing to 1; an all-zero vector stays all-zero."""
    peak = arr.max()
    if peak <= 0:
        return np.zeros(N_PITCH_CLASSES)
    # Divide by the peak first so the sum cannot overflow
    scaled = arr / peak
    return scaled / scaled.sum()


def cosine_scores(vector: np.ndarray, patterns: np.ndarray, epsilon: float = EPSILON) -> np.ndarray:
    """
    Cosine similarity of one vector against each row of a pattern matrix.

    Args:
        vector: 12-element vector
        patterns: (n, 12) matrix
        epsilon: Added to the norm product to guard near-zero vectors

    Returns:
        n-element array of similarities
    """
    dots = patterns @ vector
    norms = np.linalg.norm(patterns, axis=1) * np.linalg.norm(vector)
    return dots / (norms + epsilon)
