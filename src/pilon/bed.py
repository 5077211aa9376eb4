"""BED export of the issues found in each region."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, TextIO

from .constants import BED_DESCRIPTION
from .output import open_output, prefixed_file

if TYPE_CHECKING:
    from .genome import GenomeRegion, Region

logger = logging.getLogger(__name__)

# (region attribute, label, item RGB), in output order within a chromosome
BED_CATEGORIES: tuple[tuple[str, str, str], ...] = (
    ("unconfirmed_regions", "?", "255,0,0"),
    ("possible_collapsed_repeats", "#", "0,0,255"),
    ("change_regions", "X", "255,0,0"),
    ("possible_insertions", "I", "255,255,0"),
    ("possible_deletions", "D", "255,0,255"),
    ("gaps", "G", "32,32,32"),
    ("possible_breaks", "B", "0,255,255"),
)


def bed_line(chrom: str, span: Region, label: str, rgb: str) -> str:
    """Render one sub-range as a nine-column BED line (no newline).

    ``start`` and ``stop`` are written as stored, while the thick-start
    column is ``start - 1``.
    """
    fields = (chrom, span.start, span.stop, label, 0, "+", span.start - 1, span.stop, rgb)
    return "\t".join(str(f) for f in fields)


def write_bed_lines(
    out: TextIO, chrom: str, spans: Iterable[Region], label: str, rgb: str
) -> None:
    for span in spans:
        out.write(bed_line(chrom, span, label, rgb) + "\n")


class BedWriter:
    """Writes one BED file aggregating every issue category per chromosome."""

    def __init__(self, regions: Mapping[str, Sequence[GenomeRegion]], prefix: str = ""):
        self.regions = regions
        self.prefix = prefix

    def make_bed_track(self, file_name: str, name: str, options: str = "") -> None:
        """Write the issue annotations of every region.

        Raises:
            OutputWriteError: The file could not be written; no partial file
                is left behind.
        """
        path = prefixed_file(self.prefix, file_name)
        logger.info("Creating %s track in file %s", name, path)

        header = f'track description="{BED_DESCRIPTION}" name="{name}"'
        if options:
            header += " " + options

        with open_output(path) as out:
            out.write(header + "\n")
            for chrom, regions in self.regions.items():
                for attr, label, rgb in BED_CATEGORIES:
                    for region in regions:
                        write_bed_lines(out, chrom, getattr(region, attr), label, rgb)
