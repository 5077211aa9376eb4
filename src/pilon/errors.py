"""Exception types raised by option parsing and track export.

Nothing below the entry point terminates the process; each exception carries
the exit code that ``pilon.__main__`` maps it to.
"""

from __future__ import annotations


class PilonError(Exception):
    """Base class for all pilon errors."""

    exit_code = 1


class ConfigurationError(PilonError, ValueError):
    """The command line could not be turned into a run configuration."""


class UsageRequested(ConfigurationError):
    """``--help`` was given; usage and option details should be shown."""

    exit_code = 0


class MissingInputError(ConfigurationError):
    """No BAM files were given; the short usage should be shown."""

    exit_code = 0


class MissingGenomeError(ConfigurationError):
    """BAM files were given without a ``--genome``."""


class UnknownOptionError(ConfigurationError):
    """An unrecognized flag, or a flag missing its value."""

    def __init__(self, option: str):
        super().__init__(f"Unknown option {option}")
        self.option = option


class UnknownFixCategoryError(ConfigurationError):
    """A ``--fix`` token that is neither a category nor a directive."""

    def __init__(self, token: str):
        super().__init__(f"Error: unknown fix option {token}")
        self.token = token


class NumericOptionError(ConfigurationError):
    """A heuristic flag whose value is not a valid number."""

    def __init__(self, option: str, value: str):
        super().__init__(f"Invalid numeric value for {option}: {value!r}")
        self.option = option
        self.value = value


class OutputWriteError(PilonError):
    """A track or annotation file could not be written."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed writing {path}: {reason}")
        self.path = path
