"""Global constants for the tonal analysis engine."""

# Pitch names (flats for Eb/Ab/Bb, as shown on the overlay)
PITCH_NAMES = ["C", "C#", "D", "Eb", "E", "F", "F#", "G", "Ab", "A", "Bb", "B"]

N_PITCH_CLASSES = 12

# Audio / feature defaults
DEFAULT_SR = 22050
DEFAULT_WINDOW_SIZE = 4096  # samples per analysis window

# Matching
EPSILON = 1e-9
DEFAULT_SMOOTHING = 0.98

# Krumhansl-Schmuckler key profiles (index 0 = tonic)
KRUMHANSL_MAJOR = [6.35, 2.23, 3.48, 2.33, 4.38, 4.09, 2.52, 5.19, 2.39, 3.66, 2.29, 2.88]
KRUMHANSL_MINOR = [6.33, 2.68, 3.52, 5.38, 2.60, 3.53, 2.54, 4.75, 3.98, 2.69, 3.34, 3.17]

# Scale intervals from the root
MAJOR_SCALE = [0, 2, 4, 5, 7, 9, 11]
NATURAL_MINOR_SCALE = [0, 2, 3, 5, 7, 8, 10]

# Capo advice: roots with easy open-chord shapes (C, G, D, A, E)
FRIENDLY_ROOTS = (0, 7, 2, 9, 4)
CAPO_SHIFT_RANGE = (-6, 6)
MAX_CAPO_FRET = 7
