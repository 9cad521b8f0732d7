"""Comparison defaults and fixed symbols."""

CODON_SIZE = 3
START_CODON = "ATG"
MISMATCH = "?"
UNKNOWN_AMINO_ACID = "X"

# Comparison algorithm defaults
SEGMENT_WINDOW_LENGTH = 66
MIN_IDENTITY = 0.67
MIN_SIGNIFICANT_LENGTH_GROUP = 0.15
MIN_SEQUENCE_OVERLAP_PCT = 0.5
AA_SEGMENT_WINDOW_LENGTH = SEGMENT_WINDOW_LENGTH // CODON_SIZE

# Near-tie band for the nucleotide offset search
IDENTITY_TOLERANCE = 0.01

# Text report layout
MAX_LINE_LENGTH = 120
CODONS_PER_LINE = MAX_LINE_LENGTH // 4  # 3 nt + 1 space

# Upper bound on sequences accepted over HTTP; the offset search is quadratic
MAX_SEQUENCE_LENGTH = 20_000
