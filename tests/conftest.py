"""Shared test fixtures for pilon tests."""

import os

import pysam
import pytest

from pilon.genome import Region

# 150 bases of ACGTACGTAC repeats, a 20-base gap, then 30 GC-rich bases
CHR1_SEQUENCE = "ACGTACGTAC" * 15 + "N" * 20 + "GGCCGGCCGG" * 3
CHR2_SEQUENCE = "AT" * 50


class StubRegion:
    """A region whose metrics are fixed lists, for exercising the exporters."""

    def __init__(self, size, value=0, **spans):
        self.size = size
        self.value = value
        self.unconfirmed_regions = spans.get("unconfirmed", [])
        self.possible_collapsed_repeats = spans.get("collapsed", [])
        self.change_regions = spans.get("changed", [])
        self.possible_insertions = spans.get("insertions", [])
        self.possible_deletions = spans.get("deletions", [])
        self.gaps = spans.get("gaps", [])
        self.possible_breaks = spans.get("breaks", [])

    def metric(self, i):
        return self.value


@pytest.fixture
def stub_region():
    """Factory for StubRegion instances."""
    return StubRegion


@pytest.fixture
def span():
    """Factory for annotation sub-ranges."""
    return Region


def _write_fasta(path):
    with open(path, "w") as f:
        for name, seq in (("chr1", CHR1_SEQUENCE), ("chr2", CHR2_SEQUENCE)):
            f.write(f">{name}\n")
            for i in range(0, len(seq), 60):
                f.write(seq[i : i + 60] + "\n")
    pysam.faidx(path)


def _segment(name, flag, start, cigar, mapq, query_length, tlen=0, mate_start=-1):
    a = pysam.AlignedSegment()
    a.query_name = name
    a.query_sequence = "A" * query_length
    a.flag = flag
    a.reference_id = 0
    a.reference_start = start
    a.mapping_quality = mapq
    a.cigartuples = cigar
    a.query_qualities = pysam.qualitystring_to_array("?" * query_length)  # Q30
    if flag & 1:
        a.next_reference_id = 0
        a.next_reference_start = mate_start
        a.template_length = tlen
    return a


def _write_bam(path):
    header = {
        "HD": {"VN": "1.6", "SO": "coordinate"},
        "SQ": [
            {"SN": "chr1", "LN": len(CHR1_SEQUENCE)},
            {"SN": "chr2", "LN": len(CHR2_SEQUENCE)},
        ],
    }
    with pysam.AlignmentFile(path, "wb", header=header) as out:
        # Good unpaired read over 10-59
        out.write(_segment("good1", 0, 10, [(0, 50)], 60, 50))
        # Unpaired read with MAPQ 0 over 30-79 counts as bad
        out.write(_segment("bad1", 0, 30, [(0, 50)], 0, 50))
        # Leading soft clip; aligned over 40-84
        out.write(_segment("clipped", 0, 40, [(4, 5), (0, 45)], 60, 50))
        # Proper pair spanning 60-139
        out.write(_segment("pair", 99, 60, [(0, 30)], 60, 30, tlen=80, mate_start=110))
        out.write(_segment("pair", 147, 110, [(0, 30)], 60, 30, tlen=-80, mate_start=60))
    pysam.index(path)


@pytest.fixture
def genome_fasta(tmp_path):
    """Path to a two-sequence indexed FASTA."""
    path = os.path.join(tmp_path, "genome.fa")
    _write_fasta(path)
    return path


@pytest.fixture
def frags_bam(tmp_path):
    """Path to a small indexed BAM aligned to ``genome_fasta``."""
    path = os.path.join(tmp_path, "frags.bam")
    _write_bam(path)
    return path
