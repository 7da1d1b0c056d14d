"""
Section Parser / Serializer - Free Text ↔ Ten Sections

This module converts between a free-text blob and the per-section view of a
note. Section labels ("CC>", "Physical Exam>", ...) are the only markup.

Operations:
    parse_into_sections(blob)        → ParsedSections (line lists, ingestion order)
    build_ordered_output(sections)   → str in canonical order with tab continuations
    split_template_segments(blob)    → blob split before every label occurrence
    distribute_template(blob, doc)   → route segments into a NoteDocument

Label matching is always longest first. "S>" is a suffix of "ROS>", so a
shorter label found inside a longer one is never treated as a header or a
split point.

Usage:
    sections = parse_into_sections("CC> chest pain\\nPI> started 2 days ago")
    sections[Section.CC]        # ["chest pain"]

    report = build_ordered_output(sections)
    # "CC> chest pain\\nPI> started 2 days ago"
"""

import re
from typing import TYPE_CHECKING, List, Optional

from loguru import logger

from structured_note.core.constants import LABELS_LONGEST_FIRST
from structured_note.core.enums import CANONICAL_ORDER, Section, match_label_prefix
from structured_note.core.models import DistributionResult, ParsedSections, empty_sections

if TYPE_CHECKING:
    from structured_note.abbreviations.resolver import AbbreviationResolver
    from structured_note.document.note_document import NoteDocument


# =============================================================================
# STAGE 1: PATTERNS
# =============================================================================

_LINE_SPLIT = re.compile(r"\r?\n")

# Optional indent, a label, optional spacing, then same-line content.
_HEADER_PATTERN = re.compile(
    r"^\s*(" + "|".join(re.escape(label) for label in LABELS_LONGEST_FIRST) + r")\s*(.*)$"
)


def _split_lines(blob: str) -> List[str]:
    """Split on LF or CRLF, dropping trailing empty lines."""
    lines = _LINE_SPLIT.split(blob)
    while lines and lines[-1] == "":
        lines.pop()
    return lines


# =============================================================================
# STAGE 2: PARSING
# =============================================================================


def parse_into_sections(blob: str) -> ParsedSections:
    """
    Split a blob into per-section line lists.

    STAGE 2.1: Start with an empty list for every section
    STAGE 2.2: A header line switches the current section; its same-line
               content (trimmed) becomes a line when non-empty
    STAGE 2.3: Other lines go verbatim to the current section, or to
               Comment while no header has been seen

    Args:
        blob: Arbitrary text

    Returns:
        Mapping with all ten sections, lines in the order they were read
    """
    sections = empty_sections()
    if not blob:
        return sections

    current: Optional[Section] = None
    for line in _split_lines(blob):
        match = _HEADER_PATTERN.match(line)
        if match:
            current = Section.from_label(match.group(1))
            content = match.group(2).strip()
            if content:
                sections[current].append(content)
        elif current is not None:
            sections[current].append(line)
        else:
            sections[Section.COMMENT].append(line)

    return sections


# =============================================================================
# STAGE 3: SERIALIZATION
# =============================================================================


def build_ordered_output(sections: ParsedSections) -> str:
    """
    Serialize a section map in canonical order.

    Format per emitted section:
        <label>[ <first line, trimmed>]
        \\t<subsequent line>
        ...

    Sections that are missing, empty or contain only blank lines are
    skipped. The result is trimmed.
    """
    out: List[str] = []
    for section in CANONICAL_ORDER:
        lines = sections.get(section) or []
        if all(not line.strip() for line in lines):
            continue

        first = lines[0].strip()
        out.append(f"{section.label} {first}\n" if first else f"{section.label}\n")
        for line in lines[1:]:
            out.append(f"\t{line}\n")

    return "".join(out).strip()


# =============================================================================
# STAGE 4: TEMPLATE DISTRIBUTION
# =============================================================================


def split_template_segments(blob: str) -> List[str]:
    """
    Split a blob immediately before every label occurrence.

    The label stays at the start of the following segment. The scan moves
    left to right and skips over each label it matches, so text inside a
    longer label is never a split point.

    Example:
        >>> split_template_segments("intro ROS> neg S> fine")
        ['intro ', 'ROS> neg ', 'S> fine']
    """
    if not blob:
        return []

    segments: List[str] = []
    start = 0
    i = 0
    while i < len(blob):
        label = next((lbl for lbl in LABELS_LONGEST_FIRST if blob.startswith(lbl, i)), None)
        if label is None:
            i += 1
            continue
        if i > start:
            segments.append(blob[start:i])
        start = i
        i += len(label)

    segments.append(blob[start:])
    return segments


def distribute_template(
    blob: str,
    document: "NoteDocument",
    resolver: Optional["AbbreviationResolver"] = None,
) -> DistributionResult:
    """
    Route a template blob into the document's sections.

    STAGE 4.1: Split before every label
    STAGE 4.2: For each trimmed segment that starts with a label, take the
               trimmed remainder as content (empty content is skipped)
    STAGE 4.3: Append to the slot after a newline if it has non-blank text,
               otherwise replace the slot's (blank) text
    STAGE 4.4: If nothing was routed, insert the whole trimmed blob at the
               focused slot so no input is lost

    Args:
        blob: Template text
        document: Target document
        resolver: When given, ":key" shorthands are expanded (batch rule)
            in routed content and in the fallback blob

    Returns:
        DistributionResult describing where content went. A blank blob
        returns an empty result and changes nothing.
    """
    result = DistributionResult()
    if not blob or not blob.strip():
        return result

    # -----------------------------------------------------------------
    # 4.1-4.3: Route labelled segments
    # -----------------------------------------------------------------
    for segment in split_template_segments(blob):
        part = segment.strip()
        if not part:
            continue

        section = match_label_prefix(part)
        if section is None:
            continue

        content = part[len(section.label):].strip()
        if not content:
            continue
        if resolver is not None:
            content = resolver.expand_text(content)

        existing = document.text_of(section)
        if existing.strip():
            document.set_text(section, existing + "\n" + content)
        else:
            document.set_text(section, content)
        result.routed.append(section)

    # -----------------------------------------------------------------
    # 4.4: Fallback, whole blob into the focused slot
    # -----------------------------------------------------------------
    if not result.routed:
        fallback = blob.strip()
        if resolver is not None:
            fallback = resolver.expand_text(fallback)
        result.used_fallback = True
        result.fallback_index = document.focused_index
        document.insert_block(fallback)
        logger.info(
            f"Template matched no section labels, inserted into "
            f"{Section(document.focused_index).label}"
        )
    else:
        logger.debug(f"Template distributed | {result.to_dict()}")

    return result
