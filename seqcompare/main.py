"""FastAPI application for transcript comparison."""
import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse

from seqcompare.alignment import compare_sequences
from seqcompare.constants import MAX_SEQUENCE_LENGTH
from seqcompare.formatter import format_report
from seqcompare.protein import compare_proteins, compare_transcripts
from seqcompare.schemas import (
    ComparisonRequest, ComparisonResult, ComparisonSettings,
    ProteinComparisonRequest, ProteinComparisonResult,
    TranscriptComparison, TranslationResult,
)
from seqcompare.translation import translate_dna

logger = logging.getLogger(__name__)

app = FastAPI(title="Sequence Comparison", version="1.0")

def _check_length(*sequences: str):
    for seq in sequences:
        if len(seq) > MAX_SEQUENCE_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Sequence too long: {len(seq)} > {MAX_SEQUENCE_LENGTH}"
            )

# --- Comparison endpoints ---
# Plain def so the brute-force searches run in the threadpool

@app.post("/api/compare")
def compare(request: ComparisonRequest) -> ComparisonResult:
    """Compare two nucleotide sequences."""
    _check_length(request.seq1, request.seq2)
    settings = request.settings
    return compare_sequences(
        request.seq1,
        request.seq2,
        segment_window_length=settings.segment_window_length,
        min_identity=settings.min_identity,
        min_significant_length_group=settings.min_significant_length_group,
        min_sequence_overlap_pct=settings.min_sequence_overlap_pct,
    )

@app.post("/api/compare-proteins")
def compare_protein(request: ProteinComparisonRequest) -> ProteinComparisonResult:
    """Compare translations from a previous nucleotide alignment."""
    _check_length(request.seq1, request.seq2)
    settings = request.settings
    return compare_proteins(
        request.seq1,
        request.seq2,
        request.nuc_offset1,
        request.nuc_offset2,
        request.nuc_length,
        aa_segment_window_length=settings.aa_segment_window_length,
        min_identity=settings.min_identity,
        min_significant_length_group=settings.min_significant_length_group,
    )

@app.post("/api/compare-transcripts")
def compare_both(request: ComparisonRequest) -> TranscriptComparison:
    """Nucleotide comparison followed by protein comparison."""
    _check_length(request.seq1, request.seq2)
    return compare_transcripts(request.seq1, request.seq2, request.settings)

@app.post("/api/report", response_class=PlainTextResponse)
def report(request: ComparisonRequest) -> str:
    """Text report of a transcript comparison."""
    _check_length(request.seq1, request.seq2)
    return format_report(compare_transcripts(request.seq1, request.seq2, request.settings))

# --- Utility endpoints ---

@app.get("/api/translate")
async def translate(sequence: str) -> TranslationResult:
    """Translate a nucleotide sequence in frame 0."""
    _check_length(sequence)
    return TranslationResult(sequence=sequence, protein=translate_dna(sequence))

@app.get("/api/settings")
async def default_settings() -> ComparisonSettings:
    """Default comparison thresholds."""
    return ComparisonSettings()

if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8000)
