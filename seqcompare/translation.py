"""Codon translation of nucleotide sequences."""
from itertools import product
from typing import Optional

from Bio.Data.CodonTable import unambiguous_dna_by_id

from seqcompare.constants import CODON_SIZE, UNKNOWN_AMINO_ACID

NUCLEOTIDE_ORDER = "TCAG"

def _build_codon_table(table_id: int = 1) -> str:
    """Flatten an NCBI genetic code into a 64-symbol lookup string.

    Entry ``i1*16 + i2*4 + i3`` holds the amino acid for the codon whose
    bases have indices i1, i2, i3 in T, C, A, G order. Stop codons are '*'.
    """
    table = unambiguous_dna_by_id[table_id]
    return "".join(
        table.forward_table.get("".join(codon), "*")
        for codon in product(NUCLEOTIDE_ORDER, repeat=CODON_SIZE)
    )

# Standard genetic code, built once
AMINO_ACIDS = _build_codon_table()

_NUCLEOTIDE_INDEX = {base: i for i, base in enumerate(NUCLEOTIDE_ORDER)}
_NUCLEOTIDE_INDEX.update({base.lower(): i for i, base in enumerate(NUCLEOTIDE_ORDER)})

def nucleotide_index(base: str) -> Optional[int]:
    """Return the 2-bit index of a base (T=0, C=1, A=2, G=3), or None."""
    return _NUCLEOTIDE_INDEX.get(base)

def translate_codon(codon: str) -> str:
    """Translate a single codon; unknown bases give 'X'."""
    indices = [nucleotide_index(base) for base in codon]
    if len(indices) != CODON_SIZE or None in indices:
        return UNKNOWN_AMINO_ACID
    i1, i2, i3 = indices
    return AMINO_ACIDS[i1 * 16 + i2 * 4 + i3]

def translate_dna(seq: str) -> str:
    """
    Translate a nucleotide sequence codon by codon.

    Trailing bases that do not fill a codon are dropped, so the result has
    ``len(seq) // 3`` residues. Lowercase bases translate like uppercase.
    """
    codon_count = len(seq) // CODON_SIZE
    return "".join(
        translate_codon(seq[i * CODON_SIZE:(i + 1) * CODON_SIZE])
        for i in range(codon_count)
    )
