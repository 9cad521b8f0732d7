"""Data models for sequence comparison."""
from typing import Annotated

from pydantic import BaseModel, Field, NonNegativeInt

from seqcompare.constants import (
    AA_SEGMENT_WINDOW_LENGTH,
    MIN_IDENTITY,
    MIN_SEQUENCE_OVERLAP_PCT,
    MIN_SIGNIFICANT_LENGTH_GROUP,
    SEGMENT_WINDOW_LENGTH,
)

# Caller preconditions shared by the settings model and the entry points
WindowLength = Annotated[int, Field(ge=1)]
Fraction = Annotated[float, Field(ge=0.0, le=1.0)]
OverlapFraction = Annotated[float, Field(gt=0.0, le=1.0)]

class ConservedBlock(BaseModel):
    start: int
    end: int
    length: int
    sequence: str  # mask slice, mismatches kept as '?'

class ComparisonResult(BaseModel):
    mask: str  # shared symbol per position, '?' where the sequences differ
    mismatches: int
    length: int  # overlap length
    identity: float
    truncated: bool
    offset1: int
    offset2: int
    conserved_blocks: list[ConservedBlock] = Field(
        default_factory=list, serialization_alias="conservedBlocks"
    )

class ProteinComparisonResult(BaseModel):
    """Amino acid comparison; offset1/offset2 are codon indices."""
    aa1: str
    aa2: str
    mask: str
    mismatches: int
    length: int
    identity: float
    truncated: bool
    offset1: int
    offset2: int
    frame1: int
    frame2: int
    conserved_blocks: list[ConservedBlock] = Field(
        default_factory=list, serialization_alias="conservedBlocks"
    )

class TranscriptComparison(BaseModel):
    nucleotide: ComparisonResult
    protein: ProteinComparisonResult

class ComparisonSettings(BaseModel):
    segment_window_length: WindowLength = SEGMENT_WINDOW_LENGTH
    aa_segment_window_length: WindowLength = AA_SEGMENT_WINDOW_LENGTH
    min_identity: Fraction = MIN_IDENTITY
    min_significant_length_group: Fraction = MIN_SIGNIFICANT_LENGTH_GROUP
    min_sequence_overlap_pct: OverlapFraction = MIN_SEQUENCE_OVERLAP_PCT

class ComparisonRequest(BaseModel):
    seq1: str
    seq2: str
    settings: ComparisonSettings = Field(default_factory=ComparisonSettings)

class ProteinComparisonRequest(ComparisonRequest):
    nuc_offset1: NonNegativeInt
    nuc_offset2: NonNegativeInt
    nuc_length: NonNegativeInt

class TranslationResult(BaseModel):
    sequence: str
    protein: str
