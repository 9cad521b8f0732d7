"""
Reading frame search for protein comparison.

Transcripts such as NCBI mRNA records start at the 5' end of the message,
not at a codon boundary, and an ungapped nucleotide alignment can land the
two sequences in different frames. Every combination of the three frames of
each sequence is translated and the best matching pair is kept.
"""
import logging
from typing import Callable, Optional

from seqcompare.alignment import compare_sequence_regions
from seqcompare.constants import AA_SEGMENT_WINDOW_LENGTH, CODON_SIZE, START_CODON
from seqcompare.translation import translate_dna

logger = logging.getLogger(__name__)

LogSink = Callable[[str], None]

def silent_log(message: str) -> None:
    pass

def find_start_codon(seq: str) -> Optional[int]:
    """Position of the first ATG, or None. Only uppercase is recognised."""
    index = seq.find(START_CODON)
    return index if index >= 0 else None

def infer_frame(offset: int, start_codon: int) -> int:
    """Frame of a nucleotide offset relative to a start codon, in 0..2."""
    return (offset - start_codon) % CODON_SIZE

def find_best_reading_frame(
    seq1: str,
    seq2: str,
    offset1: int,
    offset2: int,
    length: int,
    window_size: int = AA_SEGMENT_WINDOW_LENGTH,
) -> dict:
    """
    Try all 9 frame combinations and keep the one with the highest identity.

    Frames are tried as (0, 0), (0, 1), ... (2, 2); only a strictly higher
    identity replaces the current best, so the first combination reaching
    the top identity wins. Combinations leaving fewer than ``window_size``
    codons are skipped.
    """
    best = {
        "frame1": 0,
        "frame2": 0,
        "identity": 0.0,
        "aa1": "",
        "aa2": "",
    }

    for frame1 in range(CODON_SIZE):
        for frame2 in range(CODON_SIZE):
            adjusted_length = max(min(length - frame1, length - frame2), 0)
            if adjusted_length < window_size * CODON_SIZE:
                continue

            start1 = offset1 + frame1
            start2 = offset2 + frame2
            if start1 >= len(seq1) or start2 >= len(seq2):
                continue

            aa1 = translate_dna(seq1[start1:start1 + adjusted_length])
            aa2 = translate_dna(seq2[start2:start2 + adjusted_length])
            common_length = min(len(aa1), len(aa2))
            if common_length == 0:
                continue

            _, mismatches = compare_sequence_regions(aa1[:common_length], aa2[:common_length])
            identity = 1.0 - mismatches / common_length

            if identity > best["identity"]:
                best = {
                    "frame1": frame1,
                    "frame2": frame2,
                    "identity": identity,
                    "aa1": aa1,
                    "aa2": aa2,
                }

    best["adjusted_offset1"] = offset1 + best["frame1"]
    best["adjusted_offset2"] = offset2 + best["frame2"]
    return best

def adjust_for_reading_frame(
    seq1: str,
    seq2: str,
    offset1: int,
    offset2: int,
    length: int,
    window_size: int = AA_SEGMENT_WINDOW_LENGTH,
    log: Optional[LogSink] = None,
) -> dict:
    """
    Report start codon frames, then search for the best frame pair.

    The start codon check only produces diagnostics sent to ``log``
    (the module logger when omitted); it does not influence the search.
    """
    info = log or logger.info
    warn = log or logger.warning

    info("Reading frame detection:")
    info("  Note: mRNA sequences include 5' UTR, so they don't start at codon boundaries")

    start1 = find_start_codon(seq1)
    start2 = find_start_codon(seq2)
    if start1 is not None and start2 is not None:
        frame1 = infer_frame(offset1, start1)
        frame2 = infer_frame(offset2, start2)
        info(f"  Found start codons: seq1 at position {start1}, seq2 at position {start2}")
        info(f"  Alignment offset: seq1[{offset1}], seq2[{offset2}]")
        info(f"  Inferred frames relative to CDS: seq1 +{frame1}, seq2 +{frame2}")
        if frame1 != frame2:
            warn("  Nucleotide alignment broke the reading frame!")
            info("  Searching all 9 frame combinations for best protein alignment...")
    else:
        info("  Start codon not found in one or both sequences")
        info("  Trying all 9 reading frame combinations...")

    best = find_best_reading_frame(seq1, seq2, offset1, offset2, length, window_size)
    info(f"  Best protein alignment: seq1 +{best['frame1']}, seq2 +{best['frame2']}")
    return best
