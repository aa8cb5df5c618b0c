"""Capo advice - find a shift that puts the key on open-chord shapes."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from ..core import KeyLabel, N_PITCH_CLASSES
from ..core.constants import FRIENDLY_ROOTS, CAPO_SHIFT_RANGE, MAX_CAPO_FRET
from .transpose import transpose


@dataclass(frozen=True)
class CapoSuggestion:
    """A capo position and the equivalent transpose shift."""
    shift: int
    capo_fret: int
    target_key: KeyLabel  # key the player fingers after shifting

    @property
    def message(self) -> str:
        sign = "+" if self.shift >= 0 else ""
        return f"Try capo {self.capo_fret} (or use transpose {sign}{self.shift})."


@dataclass(frozen=True)
class NoKeyYet:
    """Returned when advice is requested before any key is known."""
    message: str = "Play the song so I can guess the key first."


class CapoAdvisor:
    """Suggest a capo fret for the current key.

    Shifts are searched from most negative to most positive and the first
    one landing on a friendly root wins; a key already on a friendly root
    needs no capo.
    """

    def __init__(
        self,
        friendly_roots: Sequence[int] = FRIENDLY_ROOTS,
        shift_range: Tuple[int, int] = CAPO_SHIFT_RANGE,
        max_fret: int = MAX_CAPO_FRET,
    ):
        """
        Initialize CapoAdvisor.

        Args:
            friendly_roots: Pitch classes with easy open-chord shapes
            shift_range: Inclusive (lowest, highest) shift to try
            max_fret: Highest fret to suggest
        """
        self.friendly_roots = frozenset(r % N_PITCH_CLASSES for r in friendly_roots)
        self.shift_range = shift_range
        self.max_fret = max_fret

    def find_shift(self, root: int) -> Optional[int]:
        """Get the shift for a root, or None if no friendly root is in range."""
        if root % N_PITCH_CLASSES in self.friendly_roots:
            return 0

        low, high = self.shift_range
        for shift in range(low, high + 1):
            if (root + shift) % N_PITCH_CLASSES in self.friendly_roots:
                return shift
        return None

    def capo_fret(self, shift: int) -> int:
        """Map a transpose shift to a capo fret in 0..max_fret."""
        fret = ((N_PITCH_CLASSES - shift) % N_PITCH_CLASSES) % 8
        return max(0, min(self.max_fret, fret))

    def suggest(self, key: Optional[KeyLabel]) -> Union[CapoSuggestion, NoKeyYet]:
        """
        Suggest a capo position for a key.

        Args:
            key: Current key estimate, or None

        Returns:
            CapoSuggestion, or NoKeyYet when there is no key
        """
        if key is None:
            return NoKeyYet()

        shift = self.find_shift(key.root)
        if shift is None:
            # Only reachable with a narrowed shift range
            shift = 0

        return CapoSuggestion(
            shift=shift,
            capo_fret=self.capo_fret(shift),
            target_key=transpose(key, shift),
        )
