"""Ungapped nucleotide alignment and conserved block detection."""
import logging
import math
import operator

from pydantic import validate_call

from seqcompare.constants import (
    IDENTITY_TOLERANCE,
    MIN_IDENTITY,
    MIN_SEQUENCE_OVERLAP_PCT,
    MIN_SIGNIFICANT_LENGTH_GROUP,
    MISMATCH,
    SEGMENT_WINDOW_LENGTH,
)
from seqcompare.schemas import ComparisonResult, ConservedBlock, Fraction, OverlapFraction, WindowLength

logger = logging.getLogger(__name__)

def compare_sequence_regions(seq1: str, seq2: str) -> tuple[str, int]:
    """
    Compare two regions position by position.

    Returns the mask (shared symbol, or '?' on mismatch) and the mismatch
    count over the common length. Symbols must be identical to match, so
    'a' and 'A' are a mismatch.
    """
    mask = []
    mismatches = 0
    for a, b in zip(seq1, seq2):
        if a == b:
            mask.append(a)
        else:
            mask.append(MISMATCH)
            mismatches += 1
    return "".join(mask), mismatches

def count_mismatches(mask: str) -> int:
    return mask.count(MISMATCH)

def _count_overlap_mismatches(seq1: str, seq2: str, start1: int, start2: int, length: int) -> int:
    return sum(map(operator.ne, seq1[start1:start1 + length], seq2[start2:start2 + length]))

def find_best_offset(seq1: str, seq2: str, min_overlap_pct: float = MIN_SEQUENCE_OVERLAP_PCT) -> tuple:
    """
    Slide seq2 along seq1 and pick the best-overlapping register.

    Offsets are tried in ascending order. A candidate wins if its identity
    beats the best by more than IDENTITY_TOLERANCE, or if it is within the
    tolerance and overlaps further. The search stops at the first offset
    without mismatches.

    Returns (offset1, offset2, overlap_length, mismatches, identity).
    """
    len1, len2 = len(seq1), len(seq2)
    min_overlap = math.ceil(min(len1, len2) * min_overlap_pct)

    best_offset1 = 0
    best_offset2 = 0
    best_identity = 0.0
    best_overlap = 0
    best_mismatches = 0

    for offset in range(-(len2 - min_overlap), len1 - min_overlap + 1):
        start1 = max(offset, 0)
        start2 = max(-offset, 0)
        overlap = min(len1 - start1, len2 - start2)
        if overlap < min_overlap:
            continue

        mismatches = _count_overlap_mismatches(seq1, seq2, start1, start2, overlap)
        identity = 1.0 - mismatches / overlap

        is_better = identity > best_identity + IDENTITY_TOLERANCE or (
            abs(identity - best_identity) < IDENTITY_TOLERANCE and overlap > best_overlap
        )
        if is_better:
            best_offset1 = start1
            best_offset2 = start2
            best_identity = identity
            best_overlap = overlap
            best_mismatches = mismatches

        if mismatches == 0:
            break

    return best_offset1, best_offset2, best_overlap, best_mismatches, best_identity

def find_conserved_blocks(
    mask: str,
    window_size: int = SEGMENT_WINDOW_LENGTH,
    min_identity: float = MIN_IDENTITY,
    min_significant_length_group: float = MIN_SIGNIFICANT_LENGTH_GROUP,
) -> list[ConservedBlock]:
    """
    Split a mask into fixed windows and merge consecutive well-matching ones.

    Windows at or above ``min_identity`` extend the open block; a window below
    it closes the block. When several blocks are found, those shorter than
    ``min_significant_length_group`` of the longest are dropped, unless that
    would drop them all.
    """
    blocks = []
    current = []
    block_start = 0

    def close_block():
        sequence = "".join(current)
        blocks.append(ConservedBlock(
            start=block_start,
            end=block_start + len(sequence),
            length=len(sequence),
            sequence=sequence,
        ))
        current.clear()

    for i in range(0, len(mask), window_size):
        window = mask[i:i + window_size]
        identity = 1.0 - count_mismatches(window) / len(window)
        if identity >= min_identity:
            if not current:
                block_start = i
            current.append(window)
        elif current:
            close_block()

    if current:
        close_block()

    if len(blocks) > 1:
        max_length = max(block.length for block in blocks)
        min_significant = math.floor(max_length * min_significant_length_group)
        significant = [block for block in blocks if block.length >= min_significant]
        if significant:
            return significant

    return blocks

@validate_call
def compare_sequences(
    seq1: str,
    seq2: str,
    segment_window_length: WindowLength = SEGMENT_WINDOW_LENGTH,
    min_identity: Fraction = MIN_IDENTITY,
    min_significant_length_group: Fraction = MIN_SIGNIFICANT_LENGTH_GROUP,
    min_sequence_overlap_pct: OverlapFraction = MIN_SEQUENCE_OVERLAP_PCT,
) -> ComparisonResult:
    """
    Compare two nucleotide sequences at their best ungapped offset.

    Empty input gives a neutral, truncated result with no blocks. Window
    sizes below 1 or fractions out of range raise a pydantic ValidationError.
    """
    if not seq1 or not seq2:
        return ComparisonResult(
            mask="",
            mismatches=0,
            length=0,
            identity=0.0,
            truncated=True,
            offset1=0,
            offset2=0,
        )

    offset1, offset2, length, mismatches, identity = find_best_offset(
        seq1, seq2, min_sequence_overlap_pct
    )
    mask, _ = compare_sequence_regions(
        seq1[offset1:offset1 + length], seq2[offset2:offset2 + length]
    )
    blocks = find_conserved_blocks(
        mask, segment_window_length, min_identity, min_significant_length_group
    )
    logger.debug(
        "Nucleotide alignment at seq1[%d], seq2[%d]: %d bp, %d mismatches, %d blocks",
        offset1, offset2, length, mismatches, len(blocks),
    )

    return ComparisonResult(
        mask=mask,
        mismatches=mismatches,
        length=length,
        identity=identity,
        truncated=len(seq1) != len(seq2) or offset1 != 0 or offset2 != 0,
        offset1=offset1,
        offset2=offset2,
        conserved_blocks=blocks,
    )
