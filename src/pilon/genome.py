"""Genome regions and their per-base metrics, loaded with pysam."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import pysam

from .config import BamFile, RunConfiguration
from .constants import COLLAPSED_REPEAT_COPY_NUMBER, GC_WINDOW_RADIUS, MIN_MIN_DEPTH
from .distributions import NormalDistribution
from .pileup import Pileup, pileup_bam
from .utils import pct, round_div

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """A named sub-range of a chromosome, 1-based and inclusive."""

    name: str
    start: int
    stop: int

    @property
    def size(self) -> int:
        return self.stop - self.start + 1


def parse_targets(targets: str) -> list[tuple[str, int | None, int | None]]:
    """
    Parse a ``--targets`` value into (name, start, stop) tuples.

    Targets are comma-separated; each is a sequence name optionally followed
    by a 1-based inclusive range:
        - scaffold00001
        - scaffold00002:10000-20000

    Start and stop are None for a whole sequence.

    Raises:
        ValueError: If a target is malformed.
    """
    parsed: list[tuple[str, int | None, int | None]] = []
    for target in targets.split(","):
        target = target.strip()
        if not target:
            raise ValueError(f"Empty target in '{targets}'")
        if ":" not in target:
            parsed.append((target, None, None))
            continue
        try:
            name, coords = target.rsplit(":", 1)
            start_str, stop_str = coords.split("-")
            start = int(start_str)
            stop = int(stop_str)
        except ValueError as e:
            raise ValueError(
                f"Invalid target format: '{target}'. Expected format: 'scaffold00002:10000-20000'"
            ) from e
        if start < 1:
            raise ValueError(f"Target start must be at least 1, got {start}")
        if stop < start:
            raise ValueError(f"Target stop ({stop}) must not be less than start ({start})")
        parsed.append((name, start, stop))
    return parsed


def _runs(flags: Sequence[bool]) -> list[tuple[int, int]]:
    """Inclusive (first, last) offsets of each run of true flags."""
    runs = []
    first = None
    for i, flag in enumerate(flags):
        if flag and first is None:
            first = i
        elif not flag and first is not None:
            runs.append((first, i - 1))
            first = None
    if first is not None:
        runs.append((first, len(flags) - 1))
    return runs


class GenomeRegion:
    """A contiguous span of one chromosome and the metrics computed over it.

    Offsets passed to the per-base accessors are 0-based within the region.
    Changes, insertions, deletions and breaks come from local reassembly,
    which this engine does not perform; those accessors report nothing.
    """

    def __init__(self, name: str, sequence: str, start: int = 1):
        self.name = name
        self.sequence = sequence.upper()
        self.start = start
        self.size = len(self.sequence)
        self.stop = start + self.size - 1
        self.pileup = Pileup(self.size)

        self._gc_prefix = [0]
        self._acgt_prefix = [0]
        for base in self.sequence:
            self._gc_prefix.append(self._gc_prefix[-1] + (base in "GC"))
            self._acgt_prefix.append(self._acgt_prefix[-1] + (base in "ACGT"))

        self.mean_coverage = 0
        self.min_depth = MIN_MIN_DEPTH
        self.coverage_dist = NormalDistribution(())
        self.bad_coverage_dist = NormalDistribution(())
        self.phys_coverage_dist = NormalDistribution(())
        self.insert_size_dist = NormalDistribution(())

        self.unconfirmed_regions: list[Region] = []
        self.possible_collapsed_repeats: list[Region] = []
        self.change_regions: list[Region] = []
        self.possible_insertions: list[Region] = []
        self.possible_deletions: list[Region] = []
        self.gaps: list[Region] = []
        self.possible_breaks: list[Region] = []

    def __repr__(self) -> str:
        return f"GenomeRegion({self.name}:{self.start}-{self.stop})"

    # Per-base accessors

    def coverage(self, i: int) -> int:
        return self.pileup.coverage[i]

    def bad_coverage(self, i: int) -> int:
        return self.pileup.bad_coverage[i]

    def frag_coverage(self, i: int) -> int:
        return self.pileup.frag_coverage[i]

    def phys_coverage(self, i: int) -> int:
        return self.pileup.phys_coverage[i]

    def insert_size(self, i: int) -> int:
        return self.pileup.insert_size(i)

    def weighted_mq(self, i: int) -> int:
        return self.pileup.weighted_mq(i)

    def weighted_qual(self, i: int) -> int:
        return self.pileup.weighted_qual(i)

    def clips(self, i: int) -> int:
        return self.pileup.clips[i]

    def changed(self, i: int) -> bool:
        return False

    def confirmed(self, i: int) -> bool:
        return self.sequence[i] != "N" and self.coverage(i) >= self.min_depth

    def copy_number(self, i: int) -> int:
        return round_div(self.coverage(i) + self.bad_coverage(i), self.mean_coverage)

    def gc(self, i: int) -> int:
        """G+C percentage of the called bases within the GC window around ``i``."""
        lo = max(i - GC_WINDOW_RADIUS, 0)
        hi = min(i + GC_WINDOW_RADIUS + 1, self.size)
        gc = self._gc_prefix[hi] - self._gc_prefix[lo]
        acgt = self._acgt_prefix[hi] - self._acgt_prefix[lo]
        return pct(gc, acgt)

    def delta_coverage(self, i: int, radius: int) -> int:
        lo = max(i - radius, 0)
        hi = min(i + radius, self.size - 1)
        return self.coverage(hi) - self.coverage(lo)

    def dip_coverage(self, i: int, radius: int) -> int:
        lo = max(i - radius, 0)
        hi = min(i + radius, self.size - 1)
        return max(0, round_div(self.coverage(lo) + self.coverage(hi), 2) - self.coverage(i))

    # Processing

    def process(self, bam_files: Sequence[BamFile], config: RunConfiguration) -> None:
        """Pile up every BAM over this region and compute derived metrics."""
        for bam in bam_files:
            pileup_bam(
                bam,
                self.name,
                self.start,
                self.stop,
                self.pileup,
                min_qual=config.min_qual,
                pf=config.pf,
            )
        self.finalize(config.min_depth, config.min_gap)

    def finalize(self, min_depth: float, min_gap: int) -> None:
        """Compute distributions, thresholds and issue annotations from the pileup.

        Args:
            min_depth: Absolute depth if >= 1, otherwise a fraction of the
                mean coverage (floored at ``MIN_MIN_DEPTH``).
            min_gap: Shortest run of ``N`` reported as a gap.
        """
        p = self.pileup
        self.coverage_dist = NormalDistribution(p.coverage)
        self.bad_coverage_dist = NormalDistribution(p.bad_coverage)
        self.phys_coverage_dist = NormalDistribution(p.phys_coverage)
        self.insert_size_dist = NormalDistribution(
            self.insert_size(i) for i in range(self.size) if p.insert_count[i]
        )
        self.mean_coverage = round(self.coverage_dist.mean)

        if min_depth >= 1:
            self.min_depth = min_depth
        else:
            self.min_depth = max(min_depth * self.mean_coverage, MIN_MIN_DEPTH)

        self.unconfirmed_regions = self._spans(
            [not self.confirmed(i) for i in range(self.size)]
        )
        self.gaps = self._spans([base == "N" for base in self.sequence], min_gap)
        self.possible_collapsed_repeats = self._spans(
            [
                self.copy_number(i) >= COLLAPSED_REPEAT_COPY_NUMBER
                for i in range(self.size)
            ],
            min_gap,
        )

        logger.debug(
            "%s: mean coverage %d, min depth %s, %d unconfirmed spans, %d gaps",
            self,
            self.mean_coverage,
            self.min_depth,
            len(self.unconfirmed_regions),
            len(self.gaps),
        )

    def _spans(self, flags: Sequence[bool], min_size: int = 1) -> list[Region]:
        return [
            Region(self.name, self.start + first, self.start + last)
            for first, last in _runs(flags)
            if last - first + 1 >= min_size
        ]


class GenomeFile:
    """The genome being improved, split into regions to process."""

    def __init__(self, path: str, targets: str = ""):
        self.path = path
        self.regions: dict[str, list[GenomeRegion]] = {}

        with pysam.FastaFile(path) as fasta:
            lengths = dict(zip(fasta.references, fasta.lengths))
            if targets:
                wanted = parse_targets(targets)
            else:
                wanted = [(name, None, None) for name in fasta.references]

            for name, start, stop in wanted:
                if name not in lengths:
                    raise ValueError(f"Target {name} not found in {path}")
                start = start or 1
                stop = min(stop or lengths[name], lengths[name])
                if start > stop:
                    raise ValueError(f"Target {name}:{start}-{stop} is outside the sequence")
                sequence = fasta.fetch(name, start - 1, stop)
                self.regions.setdefault(name, []).append(GenomeRegion(name, sequence, start))

        logger.info(
            "Genome %s: %d sequences, %d regions",
            path,
            len(self.regions),
            sum(len(r) for r in self.regions.values()),
        )

    def all_regions(self) -> list[GenomeRegion]:
        return [region for regions in self.regions.values() for region in regions]

    def process_regions(self, config: RunConfiguration) -> None:
        """Process every region against the configured BAM files."""
        for region in self.all_regions():
            logger.info("Processing %s", region)
            region.process(config.bam_files, config)
