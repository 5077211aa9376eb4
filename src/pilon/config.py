"""Run configuration for pilon, resolved once from command-line tokens."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from .constants import (
    DEFAULT_FLANK,
    DEFAULT_GAP_MARGIN,
    DEFAULT_MIN_DEPTH,
    DEFAULT_MIN_GAP,
    DEFAULT_MIN_QUAL,
    DEFAULT_PREFIX,
)
from .errors import (
    ConfigurationError,
    MissingGenomeError,
    MissingInputError,
    NumericOptionError,
    UnknownFixCategoryError,
    UnknownOptionError,
    UsageRequested,
)

logger = logging.getLogger(__name__)


class FixCategory(str, Enum):
    """Categories of assembly issues pilon may try to fix."""

    BASES = "bases"
    GAPS = "gaps"
    LOCAL = "local"
    NOVEL = "novel"
    BREAKS = "breaks"


class BamRole(str, Enum):
    """How the reads in a BAM file were sequenced."""

    FRAGS = "frags"
    JUMPS = "jumps"
    UNPAIRED = "unpaired"


FIX_CHOICES: tuple[FixCategory, ...] = (FixCategory.BASES, FixCategory.GAPS, FixCategory.LOCAL)
EXPERIMENTAL_FIX_CHOICES: tuple[FixCategory, ...] = (FixCategory.NOVEL, FixCategory.BREAKS)


@dataclass(frozen=True)
class BamFile:
    """An input alignment file and the library type it holds."""

    path: str
    role: BamRole


@dataclass(frozen=True)
class RunConfiguration:
    """Immutable settings for one pilon run."""

    # Inputs
    bam_files: tuple[BamFile, ...] = ()
    genome_path: str = ""
    targets: str = ""

    # Outputs
    prefix: str = DEFAULT_PREFIX
    tracks: bool = False
    vcf: bool = False
    verbose: bool = False
    debug: bool = False

    # Control
    diploid: bool = False
    fix_list: tuple[FixCategory, ...] = FIX_CHOICES
    pf: bool = False
    strays: bool = True

    # Heuristics
    flank: int = DEFAULT_FLANK
    gap_margin: int = DEFAULT_GAP_MARGIN
    min_depth: float = DEFAULT_MIN_DEPTH
    min_gap: int = DEFAULT_MIN_GAP
    min_qual: int = DEFAULT_MIN_QUAL

    command_args: tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        """Validate heuristic values."""
        for name in ("flank", "gap_margin", "min_gap", "min_qual"):
            value = getattr(self, name)
            if value < 0:
                raise ConfigurationError(f"{name} must be non-negative, got {value}")
        if self.min_depth < 0:
            raise ConfigurationError(f"min_depth must be non-negative, got {self.min_depth}")

    @classmethod
    def from_args(cls, tokens: Sequence[str]) -> RunConfiguration:
        """Create a configuration from command-line tokens.

        Args:
            tokens: Arguments as given on the command line, without the
                program name.

        Returns:
            The resolved configuration, with the stray flag already derived
            from the fix list.

        Raises:
            UsageRequested: ``--help`` was given.
            UnknownOptionError: A flag is not recognized or lacks its value.
            UnknownFixCategoryError: ``--fix`` names an unknown category.
            NumericOptionError: A heuristic value is not a number.
            ConfigurationError: A heuristic value is negative.
            MissingInputError: No BAM files were given.
            MissingGenomeError: BAM files were given without ``--genome``.
        """
        parser = _build_parser()
        try:
            args, extras = parser.parse_known_args(list(tokens))
        except argparse.ArgumentError as e:
            raise UnknownOptionError(e.argument_name or str(e)) from e

        if args.help:
            raise UsageRequested(USAGE + HELP)
        if extras:
            raise UnknownOptionError(extras[0])

        fix_list = FIX_CHOICES
        for fix in args.fix or ():
            fix_list = resolve_fix_list(fix)

        flank = _parse_number("--flank", args.flank, int)
        gap_margin = _parse_number("--gapmargin", args.gapmargin, int)
        min_depth = _parse_number("--mindepth", args.mindepth, float)
        min_gap = _parse_number("--mingap", args.mingap, int)
        min_qual = _parse_number("--minqual", args.minqual, int)

        # argparse appends in command-line order; the stored order is reversed
        bam_files = tuple(BamFile(path, BamRole(role)) for role, path in reversed(args.bams or []))

        if not bam_files:
            raise MissingInputError(USAGE)
        if not args.genome:
            raise MissingGenomeError(
                "Must specify a --genome and one or more bam files "
                "(--frags, --jumps, or --unpaired)\n\n" + USAGE
            )

        return cls(
            bam_files=bam_files,
            genome_path=args.genome,
            targets=args.targets,
            prefix=args.output,
            tracks=args.tracks,
            vcf=args.vcf,
            verbose=args.verbose or args.debug,
            debug=args.debug,
            diploid=args.diploid,
            fix_list=fix_list,
            pf=args.pf,
            strays=derive_strays(not args.nostrays, fix_list),
            flank=flank,
            gap_margin=gap_margin,
            min_depth=min_depth,
            min_gap=min_gap,
            min_qual=min_qual,
            command_args=tuple(tokens),
        )


def resolve_fix_list(fix: str) -> tuple[FixCategory, ...]:
    """Resolve a comma-separated ``--fix`` value into fix categories.

    Each resolved category is placed in front of those already accumulated,
    so ``"bases,gaps"`` resolves to ``(GAPS, BASES)``. ``all`` replaces the
    accumulated categories with the standard ones and ``none`` clears them.
    Experimental categories are accepted with a warning.

    Raises:
        UnknownFixCategoryError: A token is not a known category or directive.
    """
    fix_list: tuple[FixCategory, ...] = ()
    for token in fix.split(","):
        if token == "all":
            fix_list = FIX_CHOICES
            continue
        if token == "none":
            fix_list = ()
            continue
        try:
            category = FixCategory(token)
        except ValueError:
            raise UnknownFixCategoryError(token) from None
        if category in EXPERIMENTAL_FIX_CHOICES:
            logger.warning("experimental fix option %s", token)
        if category not in fix_list:
            fix_list = (category,) + fix_list
    return fix_list


def derive_strays(requested: bool, fix_list: Iterable[FixCategory]) -> bool:
    """Stray detection is expensive; only keep it for gap filling or local fixes."""
    fixes = set(fix_list)
    return requested and (FixCategory.GAPS in fixes or FixCategory.LOCAL in fixes)


class _OptionParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise ConfigurationError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _OptionParser(prog="pilon", add_help=False, allow_abbrev=False, exit_on_error=False)
    parser.add_argument("--help", action="store_true")

    # Inputs; each role shares one destination so relative order survives
    parser.add_argument("--genome", default="")
    for role in BamRole:
        parser.add_argument(
            f"--{role.value}",
            dest="bams",
            action="append",
            type=lambda path, role=role: (role.value, path),
        )
    parser.add_argument("--targets", default="")

    # Outputs
    parser.add_argument("--output", default=DEFAULT_PREFIX)
    parser.add_argument("--vcf", action="store_true")
    parser.add_argument("--tracks", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--debug", action="store_true")

    # Control
    parser.add_argument("--diploid", action="store_true")
    parser.add_argument("--fix", action="append")
    parser.add_argument("--pf", action="store_true")
    parser.add_argument("--nostrays", action="store_true")

    # Heuristics are converted after parsing so failures name the flag
    parser.add_argument("--flank", default=str(DEFAULT_FLANK))
    parser.add_argument("--gapmargin", default=str(DEFAULT_GAP_MARGIN))
    parser.add_argument("--mindepth", default=str(DEFAULT_MIN_DEPTH))
    parser.add_argument("--mingap", default=str(DEFAULT_MIN_GAP))
    parser.add_argument("--minqual", default=str(DEFAULT_MIN_QUAL))
    return parser


def _parse_number(option: str, value: str, kind: type[int] | type[float]) -> int | float:
    try:
        number = kind(value)
    except ValueError:
        raise NumericOptionError(option, value) from None
    if number < 0:
        raise ConfigurationError(f"{option} must be non-negative, got {value}")
    return number


USAGE = """
    Usage: pilon --genome genome.fasta [--frags frags.bam] [--jumps jumps.bam] [--unpaired unpaired.bam]
                 [...other options...]
           pilon --help for option details
"""

HELP = """
         INPUTS:
           --genome genome.fasta
              The input genome we are trying to improve, which must be the reference used
              for the bam alignments.  At least one of --frags or --jumps must also be given.
           --frags frags.bam
              A bam file consisting of fragment paired-end alignments, aligned to the --genome
              argument using bwa or bowtie2.  This argument may be specified more than once.
           --jumps jumps.bam
              A bam file consisting of jump (mate pair) paired-end alignments, aligned to the
              --genome argument using bwa or bowtie2.  This argument may be specified more than once.
           --unpaired unpaired.bam
              A bam file consisting of unpaired alignments, aligned to the --genome argument
              using bwa or bowtie2.  This argument may be specified more than once.
         OUTPUTS:
           --output
              Prefix for output files (default "pilon").
           --vcf
              If specified, a vcf file will be generated.
           --tracks
              Write track files (*.bed, *.wig) suitable for viewing in IGV.
         CONTROL:
           --diploid
              Sample is from a diploid organism.
           --fix fixlist
              A comma-separated list of categories of issues to try to fix:
              "bases": try to fix individual bases and small indels;
              "gaps": try to fill gaps;
              "local": try to detect and fix local misassemblies;
              "all": all of the above (default);
              "none": none of the above.
              The following are experimental fix types:
              "breaks": allow local reassembly to open new gaps (with "local").
              "novel": assemble novel sequence from unaligned non-jump reads.
           --pf
              Only include reads which pass quality filtering by the sequencing instrument.
           --targets targetlist
              Only process the specified target(s).  Targets are comma-separated, and each target
              is a fasta element name optionally followed by a base range.
              Example: "scaffold00001,scaffold00002:10000-20000" would result in processing all of
              scaffold00001 and coordinates 10000-20000 of scaffold00002.
           --verbose
              More verbose output.
           --debug
              Debugging output (implies verbose).
           --nostrays
              Skip the stray alignment scan (it is only done when fixing gaps or local issues).
         HEURISTICS:
           --flank nbases
              This many bases at each end of the good reads will be ignored (default 10).
           --gapmargin
              Closed gaps must be within this number of bases of true size to be closed (1000).
           --mindepth depth
              Minimum coverage of good pairs for a base to be confirmed; if this value is >= 1
              it is an absolute depth, otherwise it is a fraction of the mean coverage of the
              region with a floor of 5 (default 0.1).
           --mingap
              Minimum size for unclosed gaps (default 10).
           --minqual
              Minimum base quality to consider for pileups (default 0).
"""
