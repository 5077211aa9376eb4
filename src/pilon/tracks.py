"""Fixed-step WIG track export of per-base region metrics."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .bed import BedWriter
from .constants import (
    DEFAULT_COVERAGE_RADIUS,
    GC_DISPLAY_OPTIONS,
    SD_VIEW_LIMITS,
    WIG_HEADER,
)
from .output import open_output, prefixed_file

if TYPE_CHECKING:
    from .genome import GenomeRegion

logger = logging.getLogger(__name__)

Metric = Callable[["GenomeRegion", int], int]


@dataclass(frozen=True)
class TrackSpec:
    """One WIG track: output file, display name, metric and display options."""

    file_name: str
    name: str
    func: Metric
    options: str = ""


def pct_bad(region: GenomeRegion, i: int) -> int:
    """Percentage of bad coverage at a position, 0 where nothing aligns."""
    good = region.coverage(i)
    bad = region.bad_coverage(i)
    if good + bad > 0:
        return bad * 100 // (good + bad)
    return 0


STANDARD_TRACKS: tuple[TrackSpec, ...] = (
    TrackSpec("Changes.wig", "Changes", lambda r, i: 1 if r.changed(i) else 0),
    TrackSpec("Confirmed.wig", "Unconfirmed", lambda r, i: 0 if r.confirmed(i) else 1),
    TrackSpec("CopyNumber.wig", "Copy Number", lambda r, i: r.copy_number(i) - 1),
    TrackSpec("Coverage.wig", "Coverage", lambda r, i: r.coverage(i)),
    TrackSpec(
        "CoverageSD.wig",
        "Coverage SD",
        lambda r, i: r.coverage_dist.to_sigma10x(r.coverage(i)),
        SD_VIEW_LIMITS,
    ),
    TrackSpec("BadCoverage.wig", "Bad Coverage", lambda r, i: r.bad_coverage(i)),
    TrackSpec(
        "BadCoverageSD.wig",
        "Bad Coverage SD",
        lambda r, i: r.bad_coverage_dist.to_sigma10x(r.bad_coverage(i)),
        SD_VIEW_LIMITS,
    ),
    TrackSpec(
        "DeltaCoverage.wig",
        "Delta Coverage",
        lambda r, i: r.delta_coverage(i, DEFAULT_COVERAGE_RADIUS),
    ),
    TrackSpec(
        "DipCoverage.wig",
        "Dip Coverage",
        lambda r, i: r.dip_coverage(i, DEFAULT_COVERAGE_RADIUS),
    ),
    TrackSpec("FragCoverage.wig", "Frag Coverage", lambda r, i: r.frag_coverage(i)),
    TrackSpec("PhysicalCoverage.wig", "Physical Coverage", lambda r, i: r.phys_coverage(i)),
    TrackSpec(
        "PhysicalCoverageSD.wig",
        "Physical Coverage SD",
        lambda r, i: r.phys_coverage_dist.to_sigma10x(r.phys_coverage(i)),
        SD_VIEW_LIMITS,
    ),
    TrackSpec("GC.wig", "GC", lambda r, i: r.gc(i), GC_DISPLAY_OPTIONS),
    TrackSpec("InsertSize.wig", "Insert Size", lambda r, i: r.insert_size(i)),
    TrackSpec(
        "InsertSizeSD.wig",
        "Insert Size SD",
        lambda r, i: r.insert_size_dist.to_sigma10x(r.insert_size(i)),
        SD_VIEW_LIMITS,
    ),
    TrackSpec("PctBad.wig", "Pct Bad", pct_bad),
    TrackSpec("WeightedQual.wig", "Weighted Qual", lambda r, i: r.weighted_qual(i)),
    TrackSpec("WeightedMq.wig", "Weighted MQ", lambda r, i: r.weighted_mq(i)),
    TrackSpec("ClippedAlignments.wig", "Clipped Alignments", lambda r, i: r.clips(i)),
)


class TrackWriter:
    """Writes WIG tracks covering every region of a genome.

    ``regions`` maps chromosome name to that chromosome's regions; both the
    mapping order and each list's order are kept in the output.
    """

    def __init__(self, regions: Mapping[str, Sequence[GenomeRegion]], prefix: str = ""):
        self.regions = regions
        self.prefix = prefix

    def make_track(self, file_name: str, name: str, func: Metric, options: str = "") -> None:
        """Write one fixed-step track of ``func(region, offset)`` values.

        Every region gets its own ``fixedStep`` block declaring ``start=1``,
        whatever the region's offset within its chromosome.

        Raises:
            OutputWriteError: The file could not be written; no partial file
                is left behind.
        """
        path = prefixed_file(self.prefix, file_name)
        logger.info("Creating %s track in file %s", name, path)

        header = f'{WIG_HEADER} name="{name}"'
        if options:
            header += " " + options

        with open_output(path) as out:
            out.write(header + "\n")
            for chrom, regions in self.regions.items():
                for region in regions:
                    out.write(f"fixedStep chrom={chrom} start=1 step=1\n")
                    out.writelines(f"{func(region, i)}\n" for i in range(region.size))

    def write_spec(self, spec: TrackSpec) -> None:
        self.make_track(spec.file_name, spec.name, spec.func, spec.options)

    def standard_tracks(self, tracks: Sequence[TrackSpec] = STANDARD_TRACKS) -> None:
        """Write the issue annotations followed by every standard WIG track.

        The first failing file aborts the remaining exports.
        """
        BedWriter(self.regions, self.prefix).make_bed_track("Pilon.bed", "Pilon")
        for spec in tracks:
            self.write_spec(spec)
