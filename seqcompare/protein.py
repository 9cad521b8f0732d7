"""Protein comparison of two transcripts from a nucleotide alignment."""
from typing import Optional

from pydantic import NonNegativeInt, validate_call

from seqcompare.alignment import compare_sequence_regions, compare_sequences, find_conserved_blocks
from seqcompare.constants import (
    AA_SEGMENT_WINDOW_LENGTH,
    CODON_SIZE,
    MIN_IDENTITY,
    MIN_SIGNIFICANT_LENGTH_GROUP,
)
from seqcompare.reading_frame import LogSink, adjust_for_reading_frame
from seqcompare.schemas import (
    ComparisonSettings, Fraction, ProteinComparisonResult, TranscriptComparison, WindowLength,
)

@validate_call
def compare_proteins(
    seq1: str,
    seq2: str,
    nuc_offset1: NonNegativeInt,
    nuc_offset2: NonNegativeInt,
    nuc_length: NonNegativeInt,
    aa_segment_window_length: WindowLength = AA_SEGMENT_WINDOW_LENGTH,
    min_identity: Fraction = MIN_IDENTITY,
    min_significant_length_group: Fraction = MIN_SIGNIFICANT_LENGTH_GROUP,
    log: Optional[LogSink] = None,
) -> ProteinComparisonResult:
    """
    Compare the translations of the aligned nucleotide regions.

    The best reading frame pair is searched from the nucleotide offsets, then
    conserved blocks are found on the amino acid mask. Reported offsets are
    codon indices. Negative offsets or lengths, windows below 1 and fractions
    out of range raise a pydantic ValidationError.
    """
    best = adjust_for_reading_frame(
        seq1, seq2, nuc_offset1, nuc_offset2, nuc_length, aa_segment_window_length, log=log
    )
    aa1, aa2 = best["aa1"], best["aa2"]

    length = min(len(aa1), len(aa2))
    mask, mismatches = compare_sequence_regions(aa1[:length], aa2[:length])
    blocks = find_conserved_blocks(
        mask, aa_segment_window_length, min_identity, min_significant_length_group
    )

    return ProteinComparisonResult(
        aa1=aa1,
        aa2=aa2,
        mask=mask,
        mismatches=mismatches,
        length=length,
        identity=best["identity"],
        truncated=len(aa1) != len(aa2),
        offset1=best["adjusted_offset1"] // CODON_SIZE,
        offset2=best["adjusted_offset2"] // CODON_SIZE,
        frame1=best["frame1"],
        frame2=best["frame2"],
        conserved_blocks=blocks,
    )

def compare_transcripts(
    seq1: str,
    seq2: str,
    settings: Optional[ComparisonSettings] = None,
    log: Optional[LogSink] = None,
) -> TranscriptComparison:
    """Nucleotide comparison followed by protein comparison at its offsets."""
    settings = settings or ComparisonSettings()
    nucleotide = compare_sequences(
        seq1,
        seq2,
        segment_window_length=settings.segment_window_length,
        min_identity=settings.min_identity,
        min_significant_length_group=settings.min_significant_length_group,
        min_sequence_overlap_pct=settings.min_sequence_overlap_pct,
    )
    protein = compare_proteins(
        seq1,
        seq2,
        nucleotide.offset1,
        nucleotide.offset2,
        nucleotide.length,
        aa_segment_window_length=settings.aa_segment_window_length,
        min_identity=settings.min_identity,
        min_significant_length_group=settings.min_significant_length_group,
        log=log,
    )
    return TranscriptComparison(nucleotide=nucleotide, protein=protein)
