"""Per-base pileup of BAM alignments over one genome region, using pysam."""

from __future__ import annotations

import logging

import pysam

from .config import BamFile, BamRole
from .utils import round_div

logger = logging.getLogger(__name__)

# pysam CIGAR operation code for a soft clip
CIGAR_SOFT_CLIP = 4


class Pileup:
    """Per-offset alignment counters for a region of ``size`` bases."""

    def __init__(self, size: int):
        self.size = size
        self.coverage = [0] * size
        self.bad_coverage = [0] * size
        self.frag_coverage = [0] * size
        self.phys_coverage = [0] * size
        self.clips = [0] * size
        self.insert_sum = [0] * size
        self.insert_count = [0] * size
        self.mq_sum = [0] * size
        self.qual_sum = [0] * size

    def add_read(
        self, read: pysam.AlignedSegment, offset: int, role: BamRole, min_qual: int = 0
    ) -> None:
        """Add one alignment; ``offset`` is the 0-based position of index 0.

        Good reads (mapped with nonzero quality, and unpaired or properly
        paired) count toward coverage; all others toward bad coverage.
        """
        good = read.mapping_quality > 0 and (not read.is_paired or read.is_proper_pair)
        quals = read.query_qualities

        for qpos, rpos in read.get_aligned_pairs(matches_only=True):
            i = rpos - offset
            if not 0 <= i < self.size:
                continue
            qual = quals[qpos] if quals is not None else 0
            if qual < min_qual:
                continue
            if good:
                self.coverage[i] += 1
                self.mq_sum[i] += read.mapping_quality
                self.qual_sum[i] += qual
            else:
                self.bad_coverage[i] += 1

        cigar = read.cigartuples or []
        if cigar and cigar[0][0] == CIGAR_SOFT_CLIP:
            self._add_clip(read.reference_start - offset)
        if len(cigar) > 1 and cigar[-1][0] == CIGAR_SOFT_CLIP and read.reference_end is not None:
            self._add_clip(read.reference_end - 1 - offset)

        # Only the leftmost mate carries a positive template length
        if good and read.is_proper_pair and read.template_length > 0:
            self._add_template(read.reference_start - offset, read.template_length, role)

    def _add_clip(self, i: int) -> None:
        if 0 <= i < self.size:
            self.clips[i] += 1

    def _add_template(self, begin: int, length: int, role: BamRole) -> None:
        for i in range(max(begin, 0), min(begin + length, self.size)):
            self.phys_coverage[i] += 1
            self.insert_sum[i] += length
            self.insert_count[i] += 1
            if role == BamRole.FRAGS:
                self.frag_coverage[i] += 1

    def insert_size(self, i: int) -> int:
        return round_div(self.insert_sum[i], self.insert_count[i])

    def weighted_mq(self, i: int) -> int:
        return round_div(self.mq_sum[i], self.coverage[i])

    def weighted_qual(self, i: int) -> int:
        return round_div(self.qual_sum[i], self.coverage[i])


def pileup_bam(
    bam: BamFile,
    contig: str,
    start: int,
    stop: int,
    pileup: Pileup,
    min_qual: int = 0,
    pf: bool = False,
) -> None:
    """Add the alignments of one BAM overlapping ``contig:start-stop``.

    Args:
        bam: Indexed input BAM file.
        contig: Reference sequence name.
        start: First base of the region (1-based).
        stop: Last base of the region (1-based, inclusive).
        pileup: Counters for the region, updated in place.
        min_qual: Aligned bases below this base quality are ignored.
        pf: Skip reads failing the instrument's quality filter.
    """
    used = 0
    with pysam.AlignmentFile(bam.path, "rb") as samfile:
        for read in samfile.fetch(contig, start - 1, stop):
            if read.is_unmapped or read.is_secondary or read.is_supplementary:
                continue
            if read.is_duplicate:
                continue
            if pf and read.is_qcfail:
                continue
            pileup.add_read(read, start - 1, bam.role, min_qual)
            used += 1

    logger.debug("%s %s:%d-%d: %d alignments", bam.path, contig, start, stop, used)
