"""
Section Schema for the Structured Note

Defines the ten canonical note sections, their fixed order, and the
fallback section for content that cannot be routed. The set is closed:
no sections are added at runtime.

Enumeration Categories:
    Section          → The ten note regions, valued by slot index
    CANONICAL_ORDER  → Emission order used by the serializer
    DispatcherMode   → How bridge calls reach the owning context

Schema Operations:
    section_count()          → 10
    label_of(index)          → "CC>", ..., "Comment>" (raises on bad index)
    fallback_index()         → index of Comment>
    index_of_label(label)    → index or None
    match_label_prefix(text) → Section the text starts with, or None
"""

from enum import Enum
from typing import Optional, Tuple

from structured_note.core.constants import (
    FALLBACK_SECTION_INDEX,
    LABELS_LONGEST_FIRST,
    SECTION_COUNT,
    SECTION_LABELS,
    SECTION_TITLES,
)
from structured_note.core.exceptions import SectionIndexError


# =============================================================================
# STAGE 1: SECTION ENUMERATION
# =============================================================================
# Member values are the slot indices of NoteDocument. Order is significant.


class Section(int, Enum):
    """
    The ten fixed regions of a clinical note.

    What it does:
        Names each slot of the note document and carries its display label.
        The integer value is the slot index, so ``document.text_of(Section.P)``
        and ``document.text_of(8)`` are equivalent.

    Example:
        >>> Section.PE.label
        'Physical Exam>'
        >>> Section.from_label("A>")
        <Section.A: 7>
    """

    CC = 0
    PI = 1
    ROS = 2
    PMH = 3
    S = 4
    O = 5  # noqa: E741
    PE = 6
    A = 7
    P = 8
    COMMENT = 9

    @property
    def label(self) -> str:
        """Display label including the trailing delimiter glyph."""
        return SECTION_LABELS[self.value]

    @property
    def title(self) -> str:
        """Human-readable section title (e.g. 'Chief Complaint')."""
        return SECTION_TITLES[self.value]

    @property
    def header(self) -> str:
        """Label without the delimiter glyph, used for Markdown export."""
        return self.label[:-1]

    @classmethod
    def from_index(cls, index: int) -> "Section":
        """
        Convert a slot index to a Section.

        Raises:
            SectionIndexError: If index is outside 0..9
        """
        if not is_valid_index(index):
            raise SectionIndexError(index)
        return cls(index)

    @classmethod
    def from_label(cls, label: str) -> "Section":
        """
        Convert an exact label ("CC>", "Physical Exam>") to a Section.

        Raises:
            ValueError: If the label is not one of the ten canonical labels
        """
        index = index_of_label(label)
        if index is None:
            raise ValueError(f"Unknown section label: '{label}'. Valid labels: {list(SECTION_LABELS)}")
        return cls(index)


# Serializer output order. PMH and S move ahead of ROS relative to
# ingestion order; this must not be "fixed".
CANONICAL_ORDER: Tuple[Section, ...] = (
    Section.CC,
    Section.PI,
    Section.PMH,
    Section.S,
    Section.ROS,
    Section.O,
    Section.PE,
    Section.A,
    Section.P,
    Section.COMMENT,
)


# =============================================================================
# STAGE 2: SCHEMA OPERATIONS
# =============================================================================


def section_count() -> int:
    """Number of sections in every note (always 10)."""
    return SECTION_COUNT


def is_valid_index(index: object) -> bool:
    """True if index is an int in 0..9. Booleans are rejected."""
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < SECTION_COUNT


def label_of(index: int) -> str:
    """
    Return the display label for a slot index.

    Raises:
        SectionIndexError: If index is outside 0..9. This is a programming
            error; callers must validate bounds first.
    """
    if not is_valid_index(index):
        raise SectionIndexError(index)
    return SECTION_LABELS[index]


def fallback_index() -> int:
    """Index of the Comment section."""
    return FALLBACK_SECTION_INDEX


def index_of_label(label: str) -> Optional[int]:
    """Exact label lookup. Returns None when the label is unknown."""
    try:
        return SECTION_LABELS.index(label)
    except ValueError:
        return None


def match_label_prefix(text: str) -> Optional[Section]:
    """
    Return the Section whose label ``text`` starts with.

    Labels are tried longest first, so the result is unambiguous even
    though short labels are suffixes of longer ones ("S>" / "ROS>").
    """
    for label in LABELS_LONGEST_FIRST:
        if text.startswith(label):
            return Section(SECTION_LABELS.index(label))
    return None


# =============================================================================
# STAGE 3: DISPATCHER MODE
# =============================================================================


class DispatcherMode(str, Enum):
    """
    How bridge calls are marshalled onto the document's owning context.

    SERIAL:   the editing surface drains a queue from its own event loop
    THREADED: a dedicated worker thread owns the document and drains the queue
    """

    SERIAL = "serial"
    THREADED = "threaded"

    @classmethod
    def from_string(cls, value: str) -> "DispatcherMode":
        """Case-insensitive conversion, raising ValueError on unknown modes."""
        normalized = value.strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ValueError(f"Unknown dispatcher mode: '{value}'. Valid modes: {[m.value for m in cls]}")
