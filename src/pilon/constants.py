"""Shared constants for pilon runtime defaults and track rendering.

This module is the single source of truth for default values that are consumed
across option parsing, the pileup engine, and track export.
"""

from __future__ import annotations

# Output defaults
DEFAULT_PREFIX = "pilon"

# Heuristic defaults
DEFAULT_FLANK = 10
DEFAULT_GAP_MARGIN = 1000
DEFAULT_MIN_DEPTH = 0.1
DEFAULT_MIN_GAP = 10
DEFAULT_MIN_QUAL = 0
# Floor applied when --mindepth is a fraction of mean coverage
MIN_MIN_DEPTH = 5

# Window radii for derived per-base metrics
DEFAULT_COVERAGE_RADIUS = 100
GC_WINDOW_RADIUS = 50
# Collapsed repeats are runs at or above this copy number
COLLAPSED_REPEAT_COPY_NUMBER = 2

# Track rendering
WIG_HEADER = "track type=wiggle_0 graphType=line color=0,0,255 altColor=255,0,0"
BED_DESCRIPTION = "Issues found by Pilon"
SD_VIEW_LIMITS = "viewLimits=-30:30"
GC_DISPLAY_OPTIONS = "graphType=heatmap midRange=35:65 midColor=0,255,0"
