"""
Constants for the Structured Note Text Engine

This module defines the fixed strings that act as the note's "wire format".
Section labels must match byte-for-byte between the parser, the serializer
and the template distributor, so they live in exactly one place.

Constant Categories:
    SECTION_LABELS      → The ten display labels, in ingestion order
    SECTION_TITLES      → Human-readable titles (labels without the glyph)
    BULLET_GLYPHS       → Leading glyphs rewritten to the canonical bullet
    ABBREVIATION_*      → Trigger prefix and the reserved date key
    CONTROL_CHAR_*      → Characters filtered from stored text
"""

import re
from typing import Tuple


# =============================================================================
# STAGE 1: SECTION LABELS
# =============================================================================
# Index-aligned with the Section enumeration (see core/enums.py).
# The trailing ">" is the label delimiter glyph.

SECTION_LABELS: Tuple[str, ...] = (
    "CC>",
    "PI>",
    "ROS>",
    "PMH>",
    "S>",
    "O>",
    "Physical Exam>",
    "A>",
    "P>",
    "Comment>",
)

SECTION_TITLES: Tuple[str, ...] = (
    "Chief Complaint",
    "Present Illness",
    "Review of Systems",
    "Past Medical History",
    "Subjective",
    "Objective",
    "Physical Exam",
    "Assessment",
    "Plan",
    "Comment",
)

LABEL_DELIMITER = ">"

SECTION_COUNT = len(SECTION_LABELS)

# Comment> receives content that precedes any recognized header.
FALLBACK_SECTION_INDEX = SECTION_COUNT - 1

# Longest first, so "ROS>" wins over the "S>" it contains.
LABELS_LONGEST_FIRST: Tuple[str, ...] = tuple(
    sorted(SECTION_LABELS, key=len, reverse=True)
)


# =============================================================================
# STAGE 2: TEXT NORMALIZATION
# =============================================================================

CANONICAL_BULLET = "- "

# -------------------------------------------------------------------------
# 2.1 Bullet glyphs
# -------------------------------------------------------------------------
# Dashes ("-", "--") are handled separately: a line already starting with
# the canonical "- " must not be rewritten again.
BULLET_GLYPHS: Tuple[str, ...] = ("•", "·", "→", "▶", "▷", "‣", "⦿", "∘", "*")

BULLET_GLYPH_PATTERN = re.compile("^[" + re.escape("".join(BULLET_GLYPHS)) + r"]+\s*")

DASH_BULLET_PATTERN = re.compile(r"^-{1,2}\s*")

# -------------------------------------------------------------------------
# 2.2 Export (EMR) normalization
# -------------------------------------------------------------------------
HEADER_SPACING_PATTERN = re.compile(r"^(#+)([^#\s])", re.MULTILINE)

EXCESS_NEWLINES_PATTERN = re.compile(r"\n{3,}")

# -------------------------------------------------------------------------
# 2.3 Control characters
# -------------------------------------------------------------------------
# U+0000..U+001F except TAB (U+0009) and LF (U+000A).
CONTROL_CHAR_PATTERN = re.compile("[\u0000-\u0008\u000b\u000c\u000e-\u001f]")


# =============================================================================
# STAGE 3: ABBREVIATIONS
# =============================================================================

ABBREVIATION_PREFIX = ":"

# Computed at call time instead of looked up.
CURRENT_DATE_KEY = "cd"

DATE_FORMAT = "%Y-%m-%d"

# Seed entries used when no external abbreviation source is configured.
DEFAULT_ABBREVIATIONS = {
    "c": "hypercholesterolemia",
    "to": "hypothyroidism",
}


# =============================================================================
# STAGE 4: ENVIRONMENT
# =============================================================================

ENV_PREFIX = "NOTE_EDITOR_"
