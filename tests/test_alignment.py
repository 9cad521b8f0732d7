"""
Unit tests for ungapped nucleotide alignment.

Tests cover:
- Region masking
- Best offset search, tie-break and early stop
- Conserved block segmentation and filtering
- Result invariants on random input
"""

import random

import pytest
from pydantic import ValidationError

from seqcompare import alignment
from seqcompare.alignment import (
    compare_sequence_regions,
    compare_sequences,
    count_mismatches,
    find_best_offset,
    find_conserved_blocks,
)
from seqcompare.schemas import ComparisonResult


class TestCompareSequenceRegions:
    """Test position-wise region comparison."""

    def test_perfect_match(self):
        assert compare_sequence_regions("ATGC", "ATGC") == ("ATGC", 0)

    def test_mismatch(self):
        assert compare_sequence_regions("ATGC", "ATTC") == ("AT?C", 1)

    def test_all_mismatches(self):
        assert compare_sequence_regions("AAAA", "TTTT") == ("????", 4)

    def test_empty(self):
        assert compare_sequence_regions("", "") == ("", 0)

    def test_case_sensitive(self):
        """Test lowercase and uppercase of the same base do not match."""
        assert compare_sequence_regions("atgc", "ATGC") == ("????", 4)

    def test_count_mismatches(self):
        assert count_mismatches("AT??C?") == 3


class TestFindBestOffset:
    """Test the brute-force offset search."""

    def test_identical(self):
        assert find_best_offset("ATGCCCGGG", "ATGCCCGGG", 0.5) == (0, 0, 9, 0, 1.0)

    def test_shifted_sequence_stops_at_first_perfect_offset(self, monkeypatch):
        """Test seq2 = seq1 minus its first 2 bases aligns at offset 2 and stops there."""
        seq1 = "GATTACAGCTTGCA"
        seq2 = seq1[2:]
        evaluated = []
        original = alignment._count_overlap_mismatches

        def recording(s1, s2, start1, start2, length):
            evaluated.append(start1 - start2)
            return original(s1, s2, start1, start2, length)

        monkeypatch.setattr(alignment, "_count_overlap_mismatches", recording)
        offset1, offset2, overlap, mismatches, identity = find_best_offset(seq1, seq2, 0.5)

        assert (offset1, offset2) == (2, 0)
        assert overlap == 12
        assert mismatches == 0
        assert identity == 1.0
        assert evaluated[-1] == 2
        assert max(evaluated) == 2

    def test_first_perfect_offset_is_not_longest(self):
        """Test a short perfect overlap found first wins over the full-length one."""
        assert find_best_offset("AAAA", "AAAA", 0.5) == (0, 2, 2, 0, 1.0)

    def test_equal_identity_prefers_longer_overlap(self):
        """Test that among zero-identity offsets the longest overlap is kept."""
        assert find_best_offset("AAAA", "TTTT", 0.5) == (0, 0, 4, 4, 0.0)

    def test_full_overlap_required(self):
        offset1, offset2, overlap, mismatches, identity = find_best_offset("ATGGGTAA", "ATGGGCAA", 1.0)
        assert (offset1, offset2, overlap, mismatches) == (0, 0, 8, 1)
        assert identity == pytest.approx(0.875)

    def test_overlap_mismatch_count(self):
        assert alignment._count_overlap_mismatches("GATTACA", "TTACGGA", 2, 0, 5) == 1
        assert alignment._count_overlap_mismatches("GATTACA", "GATTACA", 0, 0, 7) == 0


class TestIdentityTolerance:
    """Test the 0.01 near-tie band of the offset search.

    Two 200-base sequences at 0.5 overlap give offsets -100..100 with an
    overlap of 200 - |offset|. Mismatch counts are scripted per offset
    (seq1 position minus seq2 position); unscripted offsets mismatch fully.
    """

    SEQ = "A" * 200

    @pytest.fixture
    def scripted(self, monkeypatch):
        def install(mismatches_by_offset):
            def count(seq1, seq2, start1, start2, length):
                return mismatches_by_offset.get(start1 - start2, length)
            monkeypatch.setattr(alignment, "_count_overlap_mismatches", count)
        return install

    def test_slightly_higher_identity_with_shorter_overlap_rejected(self, scripted):
        # 0.9 over 150, then 0.90714 over 140
        scripted({-50: 15, 60: 13})
        assert find_best_offset(self.SEQ, self.SEQ, 0.5) == (0, 50, 150, 15, pytest.approx(0.9))

    def test_near_tie_with_longer_overlap_replaces(self, scripted):
        # 0.9 over 150, then 0.89375 over 160
        scripted({-50: 15, -40: 17})
        assert find_best_offset(self.SEQ, self.SEQ, 0.5) == (0, 40, 160, 17, pytest.approx(0.89375))

    def test_clearly_higher_identity_with_shorter_overlap_replaces(self, scripted):
        # 0.9 over 150, then 0.92308 over 130
        scripted({-50: 15, 70: 10})
        assert find_best_offset(self.SEQ, self.SEQ, 0.5) == (70, 0, 130, 10, pytest.approx(1 - 10 / 130))

    def test_lower_identity_outside_band_rejected(self, scripted):
        # 0.9 over 150, then 0.875 over 200
        scripted({-50: 15, 0: 25})
        assert find_best_offset(self.SEQ, self.SEQ, 0.5) == (0, 50, 150, 15, pytest.approx(0.9))


class TestFindConservedBlocks:
    """Test window-based conserved block detection."""

    def test_single_block(self):
        blocks = find_conserved_blocks("A" * 66)
        assert len(blocks) == 1
        assert blocks[0].start == 0
        assert blocks[0].length == 66

    def test_multiple_blocks(self):
        mask = "A" * 66 + "?" * 66 + "A" * 66
        blocks = find_conserved_blocks(mask)
        assert len(blocks) == 2
        assert blocks[0].length == 66
        assert blocks[1].start == 132
        assert blocks[1].end == 198

    def test_small_blocks_filtered(self):
        """Test blocks under 15% of the largest are dropped."""
        mask = "A" * 200 + "?" * 66 + "A" * 10
        blocks = find_conserved_blocks(mask)
        assert len(blocks) == 1
        assert (blocks[0].start, blocks[0].end, blocks[0].length) == (0, 198, 198)

    def test_block_with_some_mismatches(self):
        blocks = find_conserved_blocks("A" * 50 + "?" * 16)
        assert len(blocks) == 1
        assert blocks[0].sequence == "A" * 50 + "?" * 16

    def test_block_below_threshold(self):
        assert find_conserved_blocks("A" * 33 + "?" * 33) == []

    def test_empty_mask(self):
        assert find_conserved_blocks("") == []

    def test_short_final_window(self):
        blocks = find_conserved_blocks("ATG?AAT", window_size=3, min_identity=0.8)
        assert [(b.start, b.end, b.sequence) for b in blocks] == [(0, 3, "ATG"), (6, 7, "T")]

    def test_relative_threshold_keeps_longest(self):
        mask = "AAAAAA" + "???" + "AAA"
        blocks = find_conserved_blocks(mask, window_size=3, min_identity=1.0, min_significant_length_group=1.0)
        assert [(b.start, b.length) for b in blocks] == [(0, 6)]


class TestCompareSequences:
    """Test the nucleotide comparison entry point."""

    def test_scenario_single_substitution(self):
        result = compare_sequences("ATGGGTAA", "ATGGGCAA", segment_window_length=3,
                                   min_identity=0.8, min_sequence_overlap_pct=1.0)
        assert result.offset1 == 0
        assert result.offset2 == 0
        assert result.length == 8
        assert result.mismatches == 1
        assert result.identity == pytest.approx(0.875)
        assert result.mask == "ATGGG?AA"
        assert result.truncated is False
        assert [(b.start, b.end, b.sequence) for b in result.conserved_blocks] == [(0, 3, "ATG"), (6, 8, "AA")]

    def test_identical_inputs(self):
        seq = "ATGCCCGGG"
        result = compare_sequences(seq, seq)
        assert result.mismatches == 0
        assert result.identity == 1.0
        assert result.mask == seq
        assert result.truncated is False
        assert (result.offset1, result.offset2) == (0, 0)

    def test_offset_marks_truncated(self):
        seq1 = "GATTACAGCTTGCA"
        result = compare_sequences(seq1, seq1[2:])
        assert (result.offset1, result.offset2) == (2, 0)
        assert result.mask == seq1[2:]
        assert result.truncated is True

    def test_longer_second_sequence_with_offset(self):
        result = compare_sequences("ATGCCCGGG", "XXXATGCCCGGG")
        assert (result.offset1, result.offset2) == (0, 3)
        assert result.length == 9
        assert result.mismatches == 0
        assert result.identity == 1.0
        assert result.mask == "ATGCCCGGG"
        assert result.truncated is True

    @pytest.mark.parametrize("settings", [
        {"min_sequence_overlap_pct": 0.0},
        {"min_sequence_overlap_pct": 1.5},
        {"segment_window_length": 0},
        {"min_identity": -0.1},
        {"min_significant_length_group": 2.0},
    ])
    def test_invalid_settings_rejected(self, settings):
        with pytest.raises(ValidationError):
            compare_sequences("ATGC", "ATGC", **settings)

    @pytest.mark.parametrize("seq1,seq2", [("", "ATG"), ("ATG", ""), ("", "")])
    def test_empty_input_gives_neutral_result(self, seq1, seq2):
        result = compare_sequences(seq1, seq2)
        assert result == ComparisonResult(
            mask="", mismatches=0, length=0, identity=0.0,
            truncated=True, offset1=0, offset2=0, conserved_blocks=[],
        )


class TestResultInvariants:
    """Test invariants over random sequence pairs."""

    @pytest.mark.parametrize("seed", range(20))
    def test_random_pairs(self, seed):
        rng = random.Random(seed)
        seq1 = "".join(rng.choice("ACGT") for _ in range(rng.randint(1, 150)))
        seq2 = "".join(rng.choice("ACGT") for _ in range(rng.randint(1, 150)))
        result = compare_sequences(seq1, seq2, segment_window_length=rng.randint(1, 20))

        assert 0.0 <= result.identity <= 1.0
        assert len(result.mask) == result.length
        assert result.mismatches == count_mismatches(result.mask)
        assert result.mismatches <= result.length
        assert result.identity == pytest.approx(1 - result.mismatches / result.length)

        previous_end = 0
        for block in result.conserved_blocks:
            assert block.length == block.end - block.start
            assert block.sequence == result.mask[block.start:block.end]
            assert block.start >= previous_end
            previous_end = block.end
