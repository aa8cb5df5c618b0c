"""Pitch-class transposition of chord and key labels."""

from dataclasses import replace
from typing import Iterable, List, Optional, TypeVar, Union

from ..core import ChordLabel, KeyLabel, N_PITCH_CLASSES

Label = TypeVar("Label", ChordLabel, KeyLabel)


def transpose(label: Optional[Label], semitones: int) -> Optional[Label]:
    """
    Shift a label's root by a number of semitones.

    Quality or mode is unchanged; None (no chord / no key) passes through.

    Args:
        label: ChordLabel, KeyLabel or None
        semitones: Any integer, negative shifts down

    Returns:
        New label with root in 0-11
    """
    if label is None:
        return None
    return replace(label, root=(label.root + semitones) % N_PITCH_CLASSES)


def transpose_all(labels: Iterable[Union[ChordLabel, KeyLabel]], semitones: int) -> List:
    """Transpose every label in a sequence."""
    return [transpose(label, semitones) for label in labels]
