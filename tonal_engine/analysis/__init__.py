"""Analysis layer - Chroma state and frame extraction.

- Rolling chroma accumulator (key detection state)
- Chroma frame extraction from audio (the engine's input side)
"""

from .accumulator import ChromaAccumulator
from .features import ChromaExtractor

__all__ = [
    "ChromaAccumulator",
    "ChromaExtractor",
]
