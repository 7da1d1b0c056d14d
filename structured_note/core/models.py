"""
Domain Models for the Structured Note Text Engine

Model Hierarchy:
    ParsedSections     → Section → raw content lines (transient parser output)
    DistributionResult → Outcome of routing a template into a document
    TriggerExpansion   → Result of a live ":key" expansion at the caret
    VitalSigns         → Measurement set written by the vitals satellite tool

All models are plain dataclasses. None of them is persisted by this package.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from structured_note.core.enums import Section


# =============================================================================
# STAGE 1: PARSED SECTION MAP
# =============================================================================
# Always holds all ten keys, in ingestion order. Produced by the parser and
# consumed immediately by the serializer or the document.

ParsedSections = Dict[Section, List[str]]


def empty_sections() -> ParsedSections:
    """Return a section map with an empty line list for every section."""
    return {section: [] for section in Section}


# =============================================================================
# STAGE 2: TEMPLATE DISTRIBUTION RESULT
# =============================================================================


@dataclass
class DistributionResult:
    """
    Outcome of distributing a template blob across the document slots.

    Attributes:
        routed: Sections that received content, one entry per routed segment
        used_fallback: True when no label matched and the whole blob went to
            the focused slot
        fallback_index: Slot that received the blob on the fallback path

    Example:
        >>> result = distribute_template("CC> cough\\nP> rest", document)
        >>> result.sections_loaded
        2
    """

    routed: List[Section] = field(default_factory=list)
    used_fallback: bool = False
    fallback_index: Optional[int] = None

    @property
    def sections_loaded(self) -> int:
        """Number of segments routed to a labelled section."""
        return len(self.routed)

    def to_dict(self) -> dict:
        """Convert to dictionary (for logging/debugging)."""
        return {
            "routed": [section.label for section in self.routed],
            "used_fallback": self.used_fallback,
            "fallback_index": self.fallback_index,
        }


# =============================================================================
# STAGE 3: LIVE TRIGGER EXPANSION
# =============================================================================


@dataclass(frozen=True)
class TriggerExpansion:
    """
    A completed live abbreviation expansion.

    Attributes:
        text: The full buffer text after replacement
        caret: New caret position (just after the inserted space)
        key: The abbreviation key that fired (without the colon)
        start: Offset where the ":key" token began
    """

    text: str
    caret: int
    key: str
    start: int


# =============================================================================
# STAGE 4: VITAL SIGNS
# =============================================================================


@dataclass(frozen=True)
class VitalSigns:
    """
    One set of vital sign measurements.

    Missing values are left out of the formatted output rather than written
    as blanks. ``context`` describes where/how the values were taken
    (e.g. "at home by self").
    """

    systolic: Optional[int] = None
    diastolic: Optional[int] = None
    pulse_rate: Optional[int] = None
    body_temperature: Optional[float] = None
    respiration_rate: Optional[int] = None
    context: str = ""

    @property
    def is_empty(self) -> bool:
        """True when no measurement was recorded."""
        return all(
            value is None
            for value in (
                self.systolic,
                self.diastolic,
                self.pulse_rate,
                self.body_temperature,
                self.respiration_rate,
            )
        )

    def to_lines(self) -> List[str]:
        """
        Format as note lines.

        The first line carries blood pressure and pulse; temperature and
        respiration follow on their own lines.

        Example:
            >>> VitalSigns(systolic=120, diastolic=80, pulse_rate=72).to_lines()
            ['BP [120 / 80] mmHg   PR [72]/minute']
        """
        first: List[str] = []
        if self.systolic is not None and self.diastolic is not None:
            first.append(f"BP [{self.systolic} / {self.diastolic}] mmHg")
        elif self.systolic is not None:
            first.append(f"SBP [{self.systolic}] mmHg")
        if self.pulse_rate is not None:
            first.append(f"PR [{self.pulse_rate}]/minute")

        lines: List[str] = []
        if first:
            lines.append("   ".join(first))
        if self.body_temperature is not None:
            lines.append(f"Body Temperature [{self.body_temperature}]℃")
        if self.respiration_rate is not None:
            lines.append(f"Respiration Rate [{self.respiration_rate}]/minute")
        return lines
