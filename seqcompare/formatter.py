"""Serialization and text reports for comparison results."""
from typing import Union

from pydantic import BaseModel

from seqcompare.constants import CODON_SIZE, CODONS_PER_LINE, MAX_LINE_LENGTH, MISMATCH
from seqcompare.schemas import ComparisonResult, ConservedBlock, ProteinComparisonResult, TranscriptComparison

REVERSE_VIDEO = "\x1b[7m"
RESET = "\x1b[0m"

AnyComparison = Union[ComparisonResult, ProteinComparisonResult]

def to_wire(result: BaseModel) -> dict:
    """Plain dict in the wire record shape (``conservedBlocks`` etc.)."""
    return result.model_dump(by_alias=True)

def to_json(result: BaseModel) -> str:
    return result.model_dump_json(by_alias=True)

def format_sequence(
    seq: str,
    group_size: int = CODON_SIZE,
    groups_per_line: int = CODONS_PER_LINE,
    highlight: bool = False,
) -> str:
    """Split a sequence into codon groups, wrapping lines of groups."""
    groups = []
    for i in range(0, len(seq), group_size):
        group = seq[i:i + group_size]
        if highlight:
            group = group.replace(MISMATCH, f"{REVERSE_VIDEO}{MISMATCH}{RESET}")
        groups.append(group)

    lines = [
        " ".join(groups[i:i + groups_per_line])
        for i in range(0, len(groups), groups_per_line)
    ]
    return "\n".join(lines)

def block_identity(block: ConservedBlock) -> float:
    if block.length == 0:
        return 0.0
    return 1.0 - block.sequence.count(MISMATCH) / block.length

def conserved_identity(result: AnyComparison) -> float:
    """Identity over all conserved blocks taken together; 0 when there are none."""
    total = sum(block.length for block in result.conserved_blocks)
    if total == 0:
        return 0.0
    mismatches = sum(block.sequence.count(MISMATCH) for block in result.conserved_blocks)
    return 1.0 - mismatches / total

def format_comparison(label: str, result: AnyComparison, highlight: bool = False) -> str:
    lines = [f"=== {label} comparison ==="]

    if isinstance(result, ProteinComparisonResult):
        lines.append(f"Reading frames: seq1 +{result.frame1}, seq2 +{result.frame2}")
        unit = "AA"
    else:
        unit = "bp"

    if result.conserved_blocks:
        for number, block in enumerate(result.conserved_blocks, start=1):
            lines.append("")
            lines.append(
                f"Block {number} [{block.start}:{block.end}] - {block.length} {unit}, "
                f"{100 * block_identity(block):.1f}% identity:"
            )
            lines.append(format_sequence(block.sequence, highlight=highlight))
    else:
        lines.append("")
        lines.append("No well-conserved blocks found (sequences may be too divergent).")
        lines.append("")
        lines.append(f"Full alignment mask (matches shown, {MISMATCH} for mismatches):")
        lines.append(format_sequence(result.mask, highlight=highlight))

    return "\n".join(lines)

def format_report(comparison: TranscriptComparison, label: str = "seq1 vs seq2", highlight: bool = False) -> str:
    """Full text report: nucleotide and amino acid sections plus a summary."""
    rule = "=" * MAX_LINE_LENGTH
    nt_identity = 100 * conserved_identity(comparison.nucleotide)
    aa_identity = 100 * conserved_identity(comparison.protein)
    return "\n".join([
        format_comparison("Nucleotide", comparison.nucleotide, highlight),
        "",
        format_comparison("Amino acid", comparison.protein, highlight),
        "",
        rule,
        f"SUMMARY: {label}: {nt_identity:.1f}% nt, {aa_identity:.1f}% aa (conserved blocks)",
        rule,
    ])
