"""Pilon post-processing: run configuration and genome-browser track export."""

__version__ = "1.5.0"
