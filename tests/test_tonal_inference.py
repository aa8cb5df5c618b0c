"""Tests for the tonal inference modules.

Tests cover:
- Chord matching against the triad catalog
- Key estimation from accumulated chroma
- Rolling chroma accumulator behavior
- Transposition arithmetic
- Diatonic chord derivation
- Capo advice
- Edge cases and error handling
"""

import pytest
import numpy as np

from tonal_engine.core import (
    ChordLabel,
    ChordQuality,
    KeyLabel,
    Mode,
    MalformedFrameError,
    PITCH_NAMES,
    parse_key,
    pitch_class,
)
from tonal_engine.core.constants import KRUMHANSL_MAJOR, KRUMHANSL_MINOR
from tonal_engine.analysis import ChromaAccumulator
from tonal_engine.inference import (
    ChordMatcher,
    CHORD_TEMPLATES,
    KeyEstimator,
    rotate_profile,
    transpose,
    transpose_all,
    diatonic_chords,
    roman_numerals,
    CapoAdvisor,
    CapoSuggestion,
    NoKeyYet,
)


# ============================================================================
# Test Fixtures - Helper functions to create test data
# ============================================================================

def one_hot(pc: int) -> np.ndarray:
    """Chroma frame with all energy on one pitch class."""
    frame = np.zeros(12)
    frame[pc] = 1.0
    return frame


def triad_frame(root: str, quality: str, noise: float = 0.0, seed: int = 0) -> np.ndarray:
    """Chroma frame for a triad, optionally with low-level noise on every bin."""
    root_pc = PITCH_NAMES.index(root)
    third = 4 if quality == "major" else 3
    frame = np.zeros(12)
    for interval in (0, third, 7):
        frame[(root_pc + interval) % 12] = 1.0
    if noise > 0:
        frame += np.random.default_rng(seed).uniform(0, noise, 12)
    return frame


def scale_frame(root: str, mode: str) -> np.ndarray:
    """Chroma frame with equal energy on every note of a scale, tonic emphasized."""
    root_pc = PITCH_NAMES.index(root)
    intervals = [0, 2, 4, 5, 7, 9, 11] if mode == "major" else [0, 2, 3, 5, 7, 8, 10]
    frame = np.zeros(12)
    for interval in intervals:
        frame[(root_pc + interval) % 12] = 1.0
    frame[root_pc] = 2.0
    frame[(root_pc + 7) % 12] = 1.5
    return frame


# ============================================================================
# Chord Matching Tests
# ============================================================================

class TestChordMatcher:
    """Tests for ChordMatcher."""

    def test_catalog_size_and_order(self):
        """Catalog has 24 templates: ascending root, major before minor."""
        assert len(CHORD_TEMPLATES) == 24
        assert CHORD_TEMPLATES[0].label == ChordLabel(0, ChordQuality.MAJOR)
        assert CHORD_TEMPLATES[1].label == ChordLabel(0, ChordQuality.MINOR)
        assert CHORD_TEMPLATES[2].label == ChordLabel(1, ChordQuality.MAJOR)
        assert CHORD_TEMPLATES[-1].label == ChordLabel(11, ChordQuality.MINOR)

    def test_templates_are_three_hot(self):
        """Every mask has exactly three ones."""
        for template in CHORD_TEMPLATES:
            assert sorted(template.mask) == [0.0] * 9 + [1.0] * 3

    def test_every_template_matches_itself(self):
        """Each template's own mask is its best match."""
        matcher = ChordMatcher()
        for template in CHORD_TEMPLATES:
            assert matcher.match(template.mask) == template.label

    def test_c_major_triad(self):
        """Exact C major mask is C major."""
        matcher = ChordMatcher()
        chord = matcher.match([1, 0, 0, 0, 1, 0, 0, 1, 0, 0, 0, 0])
        assert chord == ChordLabel(0, ChordQuality.MAJOR)
        assert chord.symbol == "C"

    def test_a_minor_triad(self):
        """A minor triad frame is Am."""
        matcher = ChordMatcher()
        chord = matcher.match(triad_frame("A", "minor"))
        assert chord.symbol == "Am"

    def test_noisy_triad(self):
        """Low-level noise on all bins does not change the answer."""
        matcher = ChordMatcher()
        for seed in range(5):
            chord = matcher.match(triad_frame("G", "major", noise=0.2, seed=seed))
            assert chord == ChordLabel(7, ChordQuality.MAJOR)

    def test_scale_does_not_matter(self):
        """Matching is proportion-based."""
        matcher = ChordMatcher()
        frame = triad_frame("Eb", "major")
        assert matcher.match(frame) == matcher.match(frame * 1000.0)

    def test_tie_broken_by_catalog_order(self):
        """A lone pitch class ties several templates; the first in the catalog wins."""
        matcher = ChordMatcher()
        # C is in C, Cm, F, Fm, Ab, Am: C major comes first
        assert matcher.match(one_hot(0)) == ChordLabel(0, ChordQuality.MAJOR)
        # E is in C, C#m, E, Em, A, Am: C major again
        assert matcher.match(one_hot(4)) == ChordLabel(0, ChordQuality.MAJOR)

    def test_silent_frame(self):
        """All-zero frame is no chord."""
        assert ChordMatcher().match(np.zeros(12)) is None

    def test_huge_magnitude_frame(self):
        """Energies near the float limit still match the right triad."""
        frame = np.zeros(12)
        frame[[2, 6, 9]] = 1e308
        chord = ChordMatcher().match(frame)
        assert chord == ChordLabel(2, ChordQuality.MAJOR)
        scores = ChordMatcher().scores(frame)
        assert all(np.isfinite(score) for _, score in scores)

    def test_wrong_length_rejected(self):
        """Frames must have exactly 12 entries."""
        matcher = ChordMatcher()
        with pytest.raises(MalformedFrameError):
            matcher.match([1.0] * 11)
        with pytest.raises(MalformedFrameError):
            matcher.match([1.0] * 13)

    def test_invalid_values_rejected(self):
        """Negative and non-finite energies are rejected."""
        matcher = ChordMatcher()
        bad = np.ones(12)
        bad[3] = -0.5
        with pytest.raises(MalformedFrameError):
            matcher.match(bad)
        bad[3] = np.nan
        with pytest.raises(MalformedFrameError):
            matcher.match(bad)

    def test_malformed_frame_is_value_error(self):
        """Callers can catch MalformedFrameError as ValueError."""
        with pytest.raises(ValueError):
            ChordMatcher().match([])

    def test_scores_in_catalog_order(self):
        """scores() covers all 24 templates with finite values."""
        scores = ChordMatcher().scores(triad_frame("D", "minor"))
        assert len(scores) == 24
        assert [label for label, _ in scores] == [t.label for t in CHORD_TEMPLATES]
        best_label, best_score = max(scores, key=lambda s: s[1])
        assert best_label.symbol == "Dm"
        assert best_score == pytest.approx(1.0, abs=1e-6)

    def test_scores_of_silent_frame_are_zero(self):
        """No NaN leaks out for silent frames."""
        scores = ChordMatcher().scores(np.zeros(12))
        assert all(score == 0.0 for _, score in scores)


# ============================================================================
# Key Estimation Tests
# ============================================================================

class TestKeyEstimator:
    """Tests for KeyEstimator."""

    def test_rotate_profile(self):
        """Rotated entry i equals base entry (i - r) mod 12."""
        rotated = rotate_profile(KRUMHANSL_MAJOR, 7)
        for i in range(12):
            assert rotated[i] == KRUMHANSL_MAJOR[(i - 7) % 12]
        assert rotated[7] == 6.35

    @pytest.mark.parametrize("root", range(12))
    def test_exact_major_profile(self, root):
        """The major profile rotated to R is R major."""
        estimator = KeyEstimator()
        key = estimator.estimate(rotate_profile(KRUMHANSL_MAJOR, root))
        assert key == KeyLabel(root, Mode.MAJOR)

    @pytest.mark.parametrize("root", range(12))
    def test_exact_minor_profile(self, root):
        """The minor profile rotated to R is R minor."""
        estimator = KeyEstimator()
        key = estimator.estimate(rotate_profile(KRUMHANSL_MINOR, root))
        assert key == KeyLabel(root, Mode.MINOR)

    def test_single_pitch_class_prefers_major(self):
        """Pure C resolves to C major: 6.35 tonic weight beats 6.33."""
        key = KeyEstimator().estimate(one_hot(0))
        assert key == KeyLabel(0, Mode.MAJOR)

    def test_g_major_scale(self):
        """G major scale content is G major."""
        key = KeyEstimator().estimate(scale_frame("G", "major"))
        assert key.name == "G major"

    def test_huge_magnitude_profile(self):
        """Scaling a profile up to the float limit does not change the key."""
        profile = rotate_profile(KRUMHANSL_MINOR, 4)
        key = KeyEstimator().estimate(profile / profile.max() * 1e308)
        assert key == KeyLabel(4, Mode.MINOR)

    def test_silent_accumulator(self):
        """No pitch content yet means no key."""
        estimator = KeyEstimator()
        assert estimator.estimate(np.zeros(12)) is None
        assert estimator.candidates(np.zeros(12)) == []

    def test_candidates_sorted(self):
        """All 24 candidates are returned best first."""
        candidates = KeyEstimator().candidates(rotate_profile(KRUMHANSL_MINOR, 9))
        assert len(candidates) == 24
        assert candidates[0].name == "A minor"
        scores = [c.score for c in candidates]
        assert scores == sorted(scores, reverse=True)

    def test_wrong_length_rejected(self):
        """Accumulator-sized input is required."""
        with pytest.raises(MalformedFrameError):
            KeyEstimator().estimate(np.ones(24))


# ============================================================================
# Accumulator Tests
# ============================================================================

class TestChromaAccumulator:
    """Tests for ChromaAccumulator."""

    def test_starts_at_zero(self):
        acc = ChromaAccumulator()
        assert np.all(acc.read() == 0)
        assert acc.frames_seen == 0

    def test_single_update(self):
        """One update moves (1 - smoothing) of the way to the normalized frame."""
        acc = ChromaAccumulator(smoothing=0.9)
        acc.update([2, 0, 0, 0, 2, 0, 0, 0, 0, 0, 0, 0])
        expected = np.zeros(12)
        expected[0] = expected[4] = 0.05
        np.testing.assert_allclose(acc.read(), expected)

    def test_read_returns_copy(self):
        """Mutating the read value does not touch the state."""
        acc = ChromaAccumulator()
        acc.update(one_hot(3))
        snapshot = acc.read()
        snapshot[:] = 100.0
        assert acc.read()[3] < 1.0

    def test_converges_monotonically(self):
        """Repeating one frame strictly shrinks the distance to it."""
        rng = np.random.default_rng(42)
        target = triad_frame("F", "major")
        target = target / target.sum()

        acc = ChromaAccumulator(smoothing=0.97)
        # Arbitrary starting state
        for _ in range(20):
            acc.update(rng.uniform(0, 1, 12))

        distance = np.linalg.norm(acc.read() - target)
        for _ in range(1000):
            acc.update(target)
            new_distance = np.linalg.norm(acc.read() - target)
            if distance < 1e-9:
                break
            assert new_distance < distance
            distance = new_distance

        assert distance < 1e-6

    def test_zero_frame_decays(self):
        """Silence contributes nothing but lets the state decay."""
        acc = ChromaAccumulator(smoothing=0.5)
        acc.update(one_hot(0))
        before = acc.read()
        acc.update(np.zeros(12))
        np.testing.assert_allclose(acc.read(), before * 0.5)
        assert np.all(acc.read() >= 0)

    def test_huge_magnitude_frame(self):
        """A frame near the float limit is folded in as proportions."""
        acc = ChromaAccumulator(smoothing=0.5)
        frame = np.zeros(12)
        frame[[2, 6, 9]] = 1e308
        acc.update(frame)
        expected = np.zeros(12)
        expected[[2, 6, 9]] = 0.5 / 3
        np.testing.assert_allclose(acc.read(), expected)

    def test_reset(self):
        acc = ChromaAccumulator()
        acc.update(one_hot(5))
        acc.reset()
        assert np.all(acc.read() == 0)
        assert acc.frames_seen == 0

    @pytest.mark.parametrize("smoothing", [0.0, 1.0, -0.1, 1.5])
    def test_invalid_smoothing(self, smoothing):
        with pytest.raises(ValueError):
            ChromaAccumulator(smoothing=smoothing)

    def test_malformed_frame_leaves_state(self):
        """A rejected frame does not change the state."""
        acc = ChromaAccumulator()
        acc.update(one_hot(2))
        before = acc.read()
        with pytest.raises(MalformedFrameError):
            acc.update([1.0] * 10)
        np.testing.assert_array_equal(acc.read(), before)
        assert acc.frames_seen == 1

    def test_pure_c_resolves_to_c_major(self):
        """Many frames of pure C give a C-rooted key estimate."""
        acc = ChromaAccumulator()
        for _ in range(300):
            acc.update(one_hot(0))
        state = acc.read()
        assert state[0] > 0.99
        assert KeyEstimator().estimate(state) == KeyLabel(0, Mode.MAJOR)


# ============================================================================
# Transposition Tests
# ============================================================================

LABELS = [
    ChordLabel(0, ChordQuality.MAJOR),
    ChordLabel(9, ChordQuality.MINOR),
    ChordLabel(11, ChordQuality.DIMINISHED),
    KeyLabel(7, Mode.MAJOR),
    KeyLabel(4, Mode.MINOR),
]


class TestTranspose:
    """Tests for transpose."""

    def test_up_and_down(self):
        assert transpose(ChordLabel(0, ChordQuality.MAJOR), 2).symbol == "D"
        assert transpose(ChordLabel(0, ChordQuality.MINOR), -1).symbol == "Bm"
        assert transpose(KeyLabel(9, Mode.MINOR), 3).name == "C minor"

    @pytest.mark.parametrize("label", LABELS)
    def test_identity(self, label):
        assert transpose(label, 0) == label

    @pytest.mark.parametrize("label", LABELS)
    def test_additive(self, label):
        for a in (-25, -13, -1, 0, 5, 11, 30):
            for b in (-7, 0, 3, 12, 19):
                assert transpose(transpose(label, a), b) == transpose(label, a + b)

    @pytest.mark.parametrize("label", LABELS)
    def test_periodic(self, label):
        for n in range(-30, 30):
            assert transpose(label, n) == transpose(label, n + 12)

    @pytest.mark.parametrize("label", LABELS)
    def test_quality_preserved(self, label):
        shifted = transpose(label, -200)
        assert 0 <= shifted.root < 12
        assert type(shifted) is type(label)
        if isinstance(label, ChordLabel):
            assert shifted.quality is label.quality
        else:
            assert shifted.mode is label.mode

    def test_none_passes_through(self):
        assert transpose(None, 5) is None

    def test_transpose_all(self):
        chords = [ChordLabel(0, ChordQuality.MAJOR), ChordLabel(7, ChordQuality.MAJOR)]
        assert [c.symbol for c in transpose_all(chords, 2)] == ["D", "A"]


# ============================================================================
# Diatonic Chord Tests
# ============================================================================

class TestDiatonicChords:
    """Tests for diatonic_chords."""

    def test_c_major(self):
        """C major gives I ii iii IV V vi."""
        chords = diatonic_chords(KeyLabel(0, Mode.MAJOR))
        assert [c.quality for c in chords] == [
            ChordQuality.MAJOR,
            ChordQuality.MINOR,
            ChordQuality.MINOR,
            ChordQuality.MAJOR,
            ChordQuality.MAJOR,
            ChordQuality.MINOR,
        ]
        assert [c.symbol for c in chords] == ["C", "Dm", "Em", "F", "G", "Am"]

    def test_a_minor(self):
        """Natural minor gives i ii° III iv v VI."""
        chords = diatonic_chords(KeyLabel(9, Mode.MINOR))
        assert [c.symbol for c in chords] == ["Am", "Bdim", "C", "Dm", "Em", "F"]

    @pytest.mark.parametrize("root", range(12))
    @pytest.mark.parametrize("mode", [Mode.MAJOR, Mode.MINOR])
    def test_always_six_chords(self, root, mode):
        key = KeyLabel(root, mode)
        chords = diatonic_chords(key)
        assert len(chords) == 6
        assert chords[0].root == root

    def test_transposes_with_key(self):
        """Deriving then transposing equals transposing the key first."""
        key = KeyLabel(0, Mode.MAJOR)
        assert transpose_all(diatonic_chords(key), 7) == diatonic_chords(transpose(key, 7))

    def test_no_key(self):
        assert diatonic_chords(None) == []
        assert roman_numerals(None) == []

    def test_roman_numerals(self):
        assert roman_numerals(KeyLabel(0, Mode.MAJOR)) == ["I", "ii", "iii", "IV", "V", "vi"]
        assert roman_numerals(KeyLabel(9, Mode.MINOR)) == ["i", "ii°", "III", "iv", "v", "VI"]


# ============================================================================
# Capo Advice Tests
# ============================================================================

class TestCapoAdvisor:
    """Tests for CapoAdvisor."""

    def test_g_needs_no_capo(self):
        """G is already a friendly key."""
        suggestion = CapoAdvisor().suggest(KeyLabel(7, Mode.MAJOR))
        assert isinstance(suggestion, CapoSuggestion)
        assert suggestion.shift == 0
        assert suggestion.capo_fret == 0

    @pytest.mark.parametrize("root", [0, 2, 4, 7, 9])
    def test_friendly_roots(self, root):
        suggestion = CapoAdvisor().suggest(KeyLabel(root, Mode.MINOR))
        assert (suggestion.shift, suggestion.capo_fret) == (0, 0)

    @pytest.mark.parametrize("root, shift, fret", [
        (1, -6, 6),   # C# -> G
        (3, -6, 6),   # Eb -> A
        (5, -5, 5),   # F -> C
        (6, -6, 6),   # F# -> C
        (8, -6, 6),   # Ab -> D
        (10, -6, 6),  # Bb -> E
        (11, -4, 4),  # B -> G
    ])
    def test_first_shift_in_search_order(self, root, shift, fret):
        """The most negative qualifying shift wins."""
        suggestion = CapoAdvisor().suggest(KeyLabel(root, Mode.MAJOR))
        assert suggestion.shift == shift
        assert suggestion.capo_fret == fret
        assert suggestion.target_key.root in (0, 2, 4, 7, 9)

    def test_fret_always_in_range(self):
        advisor = CapoAdvisor()
        for shift in range(-6, 7):
            assert 0 <= advisor.capo_fret(shift) <= 7

    def test_message(self):
        suggestion = CapoAdvisor().suggest(KeyLabel(5, Mode.MAJOR))
        assert suggestion.message == "Try capo 5 (or use transpose -5)."
        assert CapoAdvisor().suggest(KeyLabel(7, Mode.MAJOR)).message == (
            "Try capo 0 (or use transpose +0)."
        )

    def test_no_key_yet(self):
        """Advice before a key is known is a typed not-ready result."""
        result = CapoAdvisor().suggest(None)
        assert isinstance(result, NoKeyYet)
        assert "guess the key" in result.message

    def test_custom_friendly_set(self):
        """Only C friendly: F is shifted down 5."""
        advisor = CapoAdvisor(friendly_roots=[0])
        suggestion = advisor.suggest(KeyLabel(5, Mode.MAJOR))
        assert suggestion.shift == -5
        assert suggestion.target_key == KeyLabel(0, Mode.MAJOR)


# ============================================================================
# Label Parsing Tests
# ============================================================================

class TestLabels:
    """Tests for label helpers."""

    def test_pitch_class_spellings(self):
        assert pitch_class("C#") == pitch_class("Db") == 1
        assert pitch_class("Bb") == pitch_class("A#") == 10
        assert pitch_class("f#") == 6

    def test_unknown_pitch(self):
        with pytest.raises(ValueError):
            pitch_class("H")

    def test_parse_key(self):
        assert parse_key("G major") == KeyLabel(7, Mode.MAJOR)
        assert parse_key("F# minor") == KeyLabel(6, Mode.MINOR)
        assert parse_key("Am") == KeyLabel(9, Mode.MINOR)
        assert parse_key("Bbm") == KeyLabel(10, Mode.MINOR)
        assert parse_key("Eb") == KeyLabel(3, Mode.MAJOR)

    def test_parse_key_errors(self):
        with pytest.raises(ValueError):
            parse_key("")
        with pytest.raises(ValueError):
            parse_key("C lydian")

    def test_relative_and_parallel(self):
        c_major = KeyLabel(0, Mode.MAJOR)
        assert c_major.relative == KeyLabel(9, Mode.MINOR)
        assert c_major.relative.relative == c_major
        assert c_major.parallel == KeyLabel(0, Mode.MINOR)

    def test_symbols(self):
        assert ChordLabel(3, ChordQuality.MAJOR).symbol == "Eb"
        assert ChordLabel(8, ChordQuality.AUGMENTED).symbol == "Abaug"
        assert str(KeyLabel(10, Mode.MINOR)) == "Bb minor"
