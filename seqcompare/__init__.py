"""Ungapped transcript comparison at nucleotide and protein level."""
from seqcompare.alignment import compare_sequences
from seqcompare.protein import compare_proteins, compare_transcripts
from seqcompare.translation import translate_dna

__all__ = ["compare_sequences", "compare_proteins", "compare_transcripts", "translate_dna"]
