"""Chord and key labels - the values the engine publishes."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import PITCH_NAMES, N_PITCH_CLASSES


# Sharp and flat spellings both resolve to the same pitch class
_NAME_TO_PC = {name: pc for pc, name in enumerate(PITCH_NAMES)}
_NAME_TO_PC.update({
    "D#": 3, "G#": 8, "A#": 10,
    "Db": 1, "Gb": 6,
    "Cb": 11, "Fb": 4, "E#": 5, "B#": 0,
})


def pitch_class(name: str) -> int:
    """
    Parse a note name into a pitch class.

    Args:
        name: Note name, e.g. "C", "F#", "Bb"

    Returns:
        Pitch class 0-11

    Raises:
        ValueError: If the name is not a known note
    """
    key = name.strip()
    if key[:1].islower():
        key = key[0].upper() + key[1:]
    if key not in _NAME_TO_PC:
        raise ValueError(f"Unknown pitch name: {name!r}")
    return _NAME_TO_PC[key]


def pitch_name(pc: int) -> str:
    """Get display name of a pitch class (0=C)."""
    return PITCH_NAMES[pc % N_PITCH_CLASSES]


class ChordQuality(Enum):
    """Triad qualities."""
    MAJOR = "major"
    MINOR = "minor"
    DIMINISHED = "diminished"
    AUGMENTED = "augmented"


class Mode(Enum):
    """Key modes."""
    MAJOR = "major"
    MINOR = "minor"


_QUALITY_SUFFIX = {
    ChordQuality.MAJOR: "",
    ChordQuality.MINOR: "m",
    ChordQuality.DIMINISHED: "dim",
    ChordQuality.AUGMENTED: "aug",
}


@dataclass(frozen=True)
class ChordLabel:
    """A detected or derived triad."""

    root: int  # Pitch class 0-11
    quality: ChordQuality

    @property
    def root_name(self) -> str:
        return pitch_name(self.root)

    @property
    def symbol(self) -> str:
        """Get chord symbol (e.g., 'C', 'Am', 'Bdim')."""
        return f"{self.root_name}{_QUALITY_SUFFIX[self.quality]}"

    def __str__(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class KeyLabel:
    """A key estimate: tonic pitch class and mode."""

    root: int  # Pitch class 0-11
    mode: Mode

    @property
    def root_name(self) -> str:
        return pitch_name(self.root)

    @property
    def name(self) -> str:
        """Get key name (e.g., 'C major', 'F# minor')."""
        return f"{self.root_name} {self.mode.value}"

    @property
    def relative(self) -> "KeyLabel":
        """
        Get the relative major/minor key.

        Relative minor is 3 semitones down from major.
        Relative major is 3 semitones up from minor.
        """
        if self.mode is Mode.MAJOR:
            return KeyLabel((self.root - 3) % N_PITCH_CLASSES, Mode.MINOR)
        return KeyLabel((self.root + 3) % N_PITCH_CLASSES, Mode.MAJOR)

    @property
    def parallel(self) -> "KeyLabel":
        """Get the parallel key (same root, other mode)."""
        other = Mode.MINOR if self.mode is Mode.MAJOR else Mode.MAJOR
        return KeyLabel(self.root, other)

    def __str__(self) -> str:
        return self.name


def parse_key(text: str) -> KeyLabel:
    """
    Parse a key name such as "G major", "F# minor" or "Am".

    Args:
        text: Key name; the mode defaults to major when omitted

    Returns:
        Parsed KeyLabel

    Raises:
        ValueError: If the root or mode is not recognised
    """
    parts = text.split()
    if not parts:
        raise ValueError("Empty key name")

    root_text = parts[0]
    mode_text: Optional[str] = parts[1].lower() if len(parts) > 1 else None

    # Short form: "Am", "C#m"
    if mode_text is None and len(root_text) > 1 and root_text.endswith("m"):
        root_text, mode_text = root_text[:-1], "minor"

    mode_aliases = {"major": Mode.MAJOR, "maj": Mode.MAJOR, "minor": Mode.MINOR, "min": Mode.MINOR}
    if mode_text is not None and mode_text not in mode_aliases:
        raise ValueError(f"Unknown mode: {parts[1]!r}")

    mode = mode_aliases[mode_text] if mode_text else Mode.MAJOR
    return KeyLabel(pitch_class(root_text), mode)
