"""Scoped output files for track export.

Files are written completely or not at all: a failure part-way through
removes the partial file before the error propagates.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

from .errors import OutputWriteError

logger = logging.getLogger(__name__)


def prefixed_file(prefix: str, file_name: str) -> Path:
    """Output path for ``file_name`` under a run prefix (which may be empty)."""
    return Path(prefix + file_name if prefix else file_name)


@contextlib.contextmanager
def open_output(path: Path) -> Iterator[TextIO]:
    """Open ``path`` for writing, removing it again if writing fails.

    Raises:
        OutputWriteError: The file could not be opened or written.
    """
    try:
        handle = path.open("w")
    except OSError as e:
        raise OutputWriteError(str(path), str(e)) from e

    try:
        with handle:
            yield handle
    except BaseException as e:
        with contextlib.suppress(OSError):
            path.unlink()
        logger.debug("Removed partial output %s", path)
        if isinstance(e, OSError):
            raise OutputWriteError(str(path), str(e)) from e
        raise
