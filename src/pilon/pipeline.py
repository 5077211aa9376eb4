"""Top-level pilon run: process the genome, then export tracks if requested."""

from __future__ import annotations

import logging

from . import __version__
from .config import RunConfiguration
from .genome import GenomeFile
from .tracks import TrackWriter

logger = logging.getLogger(__name__)


def run(config: RunConfiguration) -> GenomeFile:
    """Process every region of the configured genome.

    Track and annotation files are written only when ``config.tracks`` is set.

    Returns:
        The processed genome.
    """
    logger.info("Pilon version %s", __version__)
    if config.command_args:
        logger.debug("Arguments: %s", " ".join(config.command_args))
    logger.info("Genome: %s", config.genome_path)
    logger.debug(
        "Fixing %s; strays %s", ",".join(f.value for f in config.fix_list) or "none", config.strays
    )

    genome = GenomeFile(config.genome_path, config.targets)
    genome.process_regions(config)

    if config.tracks:
        TrackWriter(genome.regions, config.prefix).standard_tracks()

    return genome
