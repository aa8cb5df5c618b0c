"""Chord matching - Label a single chroma frame with the closest triad.

Implements nearest-template chord recognition:
- 24 binary triad masks (12 major + 12 minor)
- Cosine similarity between the frame and each mask
- First-best wins, so catalog order decides exact ties
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..core import ChordLabel, ChordQuality, EPSILON, N_PITCH_CLASSES
from ..core.chroma import ChromaLike, as_frame, normalize, cosine_scores


@dataclass(frozen=True)
class ChordTemplate:
    """A triad template: root, quality and its 3-hot chroma mask."""
    root: int
    quality: ChordQuality
    mask: Tuple[float, ...]

    @property
    def label(self) -> ChordLabel:
        return ChordLabel(self.root, self.quality)


# Intervals from root in semitones
TRIAD_INTERVALS = {
    ChordQuality.MAJOR: (0, 4, 7),
    ChordQuality.MINOR: (0, 3, 7),
}


def _build_templates() -> List[ChordTemplate]:
    templates = []
    # Ascending root, major before minor of the same root
    for root in range(N_PITCH_CLASSES):
        for quality in (ChordQuality.MAJOR, ChordQuality.MINOR):
            mask = [0.0] * N_PITCH_CLASSES
            for interval in TRIAD_INTERVALS[quality]:
                mask[(root + interval) % N_PITCH_CLASSES] = 1.0
            templates.append(ChordTemplate(root, quality, tuple(mask)))
    return templates


CHORD_TEMPLATES: Tuple[ChordTemplate, ...] = tuple(_build_templates())
_TEMPLATE_MATRIX = np.array([t.mask for t in CHORD_TEMPLATES])
_TEMPLATE_LABELS = tuple(t.label for t in CHORD_TEMPLATES)


class ChordMatcher:
    """Match chroma frames against the triad catalog.

    Stateless: every call looks only at the frame it is given.
    """

    def __init__(self, epsilon: float = EPSILON):
        self.epsilon = epsilon

    def scores(self, frame: ChromaLike) -> List[Tuple[ChordLabel, float]]:
        """
        Score a frame against every template.

        Returns:
            (label, cosine similarity) pairs in catalog order
        """
        proportions = normalize(as_frame(frame))
        sims = cosine_scores(proportions, _TEMPLATE_MATRIX, self.epsilon)
        return list(zip(_TEMPLATE_LABELS, sims.tolist()))

    def match(self, frame: ChromaLike) -> Optional[ChordLabel]:
        """
        Find the best matching triad for one frame.

        Args:
            frame: 12-element chroma vector

        Returns:
            Best ChordLabel, or None for a silent (all-zero) frame

        Raises:
            MalformedFrameError: If the frame is not 12 non-negative values
        """
        arr = as_frame(frame)
        if arr.max() <= 0:
            return None

        sims = cosine_scores(normalize(arr), _TEMPLATE_MATRIX, self.epsilon)
        # argmax returns the first maximum
        return _TEMPLATE_LABELS[int(np.argmax(sims))]
