"""Entry point for running pilon as a module: python -m pilon."""

import logging
import sys
from collections.abc import Sequence

from .config import RunConfiguration
from .errors import ConfigurationError, PilonError
from .pipeline import run

# Per-region and per-BAM progress, shown with --verbose
VERBOSE_LOGGERS = ("pilon.genome", "pilon.pileup")


def configure_logging(config: RunConfiguration) -> None:
    """Set log levels for a run: INFO, plus progress when verbose, DEBUG for all when debugging."""
    logging.getLogger().setLevel(logging.DEBUG if config.debug else logging.INFO)
    for name in VERBOSE_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if config.verbose else logging.NOTSET)


def main(argv: Sequence[str] | None = None) -> None:
    """Run pilon on the given command-line tokens (default: ``sys.argv[1:]``)."""
    tokens = list(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stderr)

    try:
        config = RunConfiguration.from_args(tokens)
    except ConfigurationError as e:
        # Usage text goes to stdout, errors to stderr
        print(e, file=sys.stdout if e.exit_code == 0 else sys.stderr)
        sys.exit(e.exit_code)

    configure_logging(config)

    try:
        run(config)
    except (PilonError, ValueError, OSError) as e:
        print(f"pilon: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
