"""
Note Document - Ten-Slot Content Store

The NoteDocument is the in-memory model every other component mutates:
ten text buffers index-aligned with the Section enumeration, a focused-slot
cursor and a caret per slot.

Document Lifecycle:
    1. Created once per editing session (focused index 0, all slots empty)
    2. Mutated by the editing surface and, through the InsertionBridge, by
       satellite tools
    3. Disposed when the session ends or restarts; afterwards it reports
       ``is_ready == False`` and every mutation is a silent no-op

Insertion paths:
    insert_line / insert_block   → at the focused slot's caret
    append_to_section            → end of an explicit slot, focus untouched
    insert_template              → template-driven, ":key" shorthands expanded
    set_text / clear_all         → the only overwriting operations

Out-of-range indices and empty text are silent no-ops, never errors.

Thread Safety:
    None. Only the owning context may call mutating methods; other contexts
    go through the InsertionBridge, which marshals calls onto the owner.

Usage:
    doc = NoteDocument(resolver=AbbreviationResolver({"c": "hypercholesterolemia"}))
    doc.focus(Section.PMH)
    doc.insert_template("- :c")
    doc.text_of(Section.PMH)        # "- hypercholesterolemia"
"""

from datetime import date
from typing import Dict, Iterable, List, Optional

from loguru import logger

from structured_note.abbreviations.resolver import AbbreviationResolver
from structured_note.core.constants import DATE_FORMAT, SECTION_COUNT
from structured_note.core.enums import Section, is_valid_index
from structured_note.core.models import DistributionResult, ParsedSections, TriggerExpansion
from structured_note.formatting.normalizer import (
    auto_format,
    ensure_trailing_newline,
    filter_control_chars,
    finalize_for_emr,
    normalize_newlines,
    unique_lines,
)
from structured_note.parsing.section_parser import (
    build_ordered_output,
    distribute_template,
    parse_into_sections,
)


class NoteDocument:
    """
    Ten mutable text buffers plus the focused-slot cursor.

    What it does:
        Stores the note content and implements every insertion rule:
        line-ending normalization, control-character filtering, trailing
        newline for line inserts, and abbreviation expansion on the
        template-driven path only.

    Why it exists:
        The editing surface, the template distributor and satellite tools
        all write into the same ten slots. Keeping the rules here means each
        caller gets identical behavior regardless of how it reached the
        document.

    Args:
        resolver: Abbreviation resolver for template-driven insertions.
            Without one, template text is inserted unexpanded.
        strip_control_characters: Drop ASCII control characters (except
            TAB and LF) from inserted text.
    """

    def __init__(
        self,
        resolver: Optional[AbbreviationResolver] = None,
        strip_control_characters: bool = True,
    ):
        self._buffers: Optional[List[str]] = [""] * SECTION_COUNT
        # None means "end of text" for that slot.
        self._carets: List[Optional[int]] = [None] * SECTION_COUNT
        self._focused_index = 0
        self._resolver = resolver
        self._strip_control_characters = strip_control_characters

    # =========================================================================
    # STAGE 1: STATE QUERIES
    # =========================================================================

    @property
    def is_ready(self) -> bool:
        """True while the ten slots exist (between construction and dispose)."""
        return self._buffers is not None

    @property
    def focused_index(self) -> int:
        return self._focused_index

    @property
    def focused_section(self) -> Section:
        return Section(self._focused_index)

    @property
    def resolver(self) -> Optional[AbbreviationResolver]:
        return self._resolver

    def set_resolver(self, resolver: Optional[AbbreviationResolver]) -> None:
        """Swap the abbreviation snapshot used by later insertions."""
        self._resolver = resolver

    def text_of(self, index: int) -> str:
        """Text of one slot. Out-of-range index or disposed document → ""."""
        if not self.is_ready or not is_valid_index(index):
            return ""
        return self._buffers[index]

    def sections(self) -> Dict[Section, str]:
        """Snapshot of all ten slots keyed by Section."""
        return {section: self.text_of(section) for section in Section}

    def caret_of(self, index: int) -> int:
        """Caret offset in a slot (end of text unless moved)."""
        if not self.is_ready or not is_valid_index(index):
            return 0
        caret = self._carets[index]
        text = self._buffers[index]
        return len(text) if caret is None else min(caret, len(text))

    def is_empty(self) -> bool:
        return all(not text.strip() for text in self.sections().values())

    # =========================================================================
    # STAGE 2: FOCUS AND CARET
    # =========================================================================

    def focus(self, index: int) -> None:
        """Make ``index`` the focused slot. Out of range → no-op."""
        if not self.is_ready or not is_valid_index(index):
            logger.debug(f"Ignoring focus on invalid index {index!r}")
            return
        self._focused_index = int(index)

    def move_caret(self, position: Optional[int], index: Optional[int] = None) -> None:
        """
        Place the caret of the focused slot (or ``index``).

        Positions are clamped to the slot's text; None returns the caret to
        "end of text".
        """
        target = self._focused_index if index is None else index
        if not self.is_ready or not is_valid_index(target):
            return
        if position is None:
            self._carets[target] = None
            return
        self._carets[target] = max(0, min(int(position), len(self._buffers[target])))

    # =========================================================================
    # STAGE 3: INSERTION
    # =========================================================================

    def _prepare(self, text: str, expand: bool) -> str:
        """Normalize line endings, filter control characters, expand."""
        prepared = normalize_newlines(text)
        if self._strip_control_characters:
            prepared = filter_control_chars(prepared)
        if expand and self._resolver is not None:
            prepared = self._resolver.expand_text(prepared)
        return prepared

    def _insert_at_caret(self, index: int, text: str) -> None:
        buffer = self._buffers[index]
        caret = self._carets[index]
        if caret is None:
            self._buffers[index] = buffer + text
            return
        caret = min(caret, len(buffer))
        self._buffers[index] = buffer[:caret] + text + buffer[caret:]
        self._carets[index] = caret + len(text)

    def insert_block(
        self, text: str, *, expand: bool = False, index: Optional[int] = None
    ) -> None:
        """
        Insert text at the caret of the focused slot (or ``index``).

        Args:
            text: Text to insert; may span several lines
            expand: Expand ":key" shorthands first (template-driven path)
            index: Target slot; focus is not changed
        """
        target = self._focused_index if index is None else index
        if not self.is_ready or not text or not is_valid_index(target):
            return
        prepared = self._prepare(text, expand)
        if prepared:
            self._insert_at_caret(target, prepared)

    def insert_line(
        self, text: str, *, expand: bool = False, index: Optional[int] = None
    ) -> None:
        """Like insert_block, but the inserted text ends with exactly one newline."""
        target = self._focused_index if index is None else index
        if not self.is_ready or not text or not is_valid_index(target):
            return
        self._insert_at_caret(target, ensure_trailing_newline(self._prepare(text, expand)))

    def insert_template(self, body: str) -> None:
        """Insert template text at the focused caret with abbreviation expansion."""
        self.insert_block(body, expand=True)

    def append_to_section(self, index: int, text: str, *, expand: bool = False) -> None:
        """
        Append a line (exactly one trailing newline) to the end of slot
        ``index`` without touching focus.

        Used by satellite tools that must not disturb the user's position.
        """
        if not self.is_ready or not text or not is_valid_index(index):
            return
        self._buffers[index] += ensure_trailing_newline(self._prepare(text, expand))

    def set_text(self, index: int, text: str) -> None:
        """Replace the whole text of one slot and reset its caret to the end."""
        if not self.is_ready or not is_valid_index(index):
            return
        self._buffers[index] = self._prepare(text or "", expand=False)
        self._carets[index] = None

    def clear_all(self) -> None:
        """Empty every slot and reset carets. Focus is kept."""
        if not self.is_ready:
            return
        self._buffers = [""] * SECTION_COUNT
        self._carets = [None] * SECTION_COUNT
        logger.debug("Document cleared")

    def dispose(self) -> None:
        """Release the slots. The document is no longer ready afterwards."""
        self._buffers = None
        self._carets = [None] * SECTION_COUNT
        logger.debug("Document disposed")

    # =========================================================================
    # STAGE 4: EDITING COMMANDS
    # =========================================================================

    def apply_template(self, blob: str) -> DistributionResult:
        """Distribute a labelled template blob across the slots."""
        if not self.is_ready:
            return DistributionResult()
        return distribute_template(blob, self, resolver=self._resolver)

    def format_focused(self) -> None:
        """Run auto_format over the focused slot."""
        if not self.is_ready:
            return
        self.set_text(self._focused_index, auto_format(self._buffers[self._focused_index]))

    def expand_trigger(self) -> Optional[TriggerExpansion]:
        """
        Apply the live abbreviation rule at the focused caret.

        Call when a word break is typed. Returns the expansion that was
        applied, or None when the word break should be inserted literally.
        """
        if not self.is_ready or self._resolver is None:
            return None
        index = self._focused_index
        expansion = self._resolver.expand_trigger(self._buffers[index], self.caret_of(index))
        if expansion is None:
            return None
        self._buffers[index] = expansion.text
        self._carets[index] = expansion.caret
        logger.debug(f"Live expansion ':{expansion.key}' in {Section(index).label}")
        return expansion

    # =========================================================================
    # STAGE 5: EXPORT
    # =========================================================================

    def to_parsed_sections(self) -> ParsedSections:
        """Slot text split into lines, keyed by Section."""
        return {section: self.text_of(section).splitlines() for section in Section}

    def export_report(self) -> str:
        """Canonical-order report, finalized for EMR paste."""
        return finalize_for_emr(build_ordered_output(self.to_parsed_sections()))

    def export_markdown(self, problems: Iterable[str] = (), as_of: Optional[date] = None) -> str:
        """
        Markdown export with one "# Title" block per non-empty slot.

        An optional problem list comes first as
        "# Problem List (as of YYYY-MM-DD)" followed by "- problem" lines.
        Slot text is de-duplicated line by line.
        """
        blocks: List[str] = []

        problem_lines = [p.strip() for p in problems if p and p.strip()]
        if problem_lines:
            stamp = self._today(as_of)
            header = f"# Problem List (as of {stamp})"
            blocks.append("\n".join([header] + [f"- {p}" for p in problem_lines]))

        for section in Section:
            unique = unique_lines(self.text_of(section))
            if unique:
                blocks.append(f"# {section.header}\n{unique}")

        return finalize_for_emr("\n\n".join(blocks))

    def load_text(self, blob: str) -> None:
        """Replace the document content with the sections parsed from ``blob``."""
        if not self.is_ready:
            return
        parsed = parse_into_sections(blob)
        for section, lines in parsed.items():
            self.set_text(section, "\n".join(lines))

    def _today(self, as_of: Optional[date]) -> str:
        if as_of is not None:
            return as_of.strftime(DATE_FORMAT)
        if self._resolver is not None:
            return self._resolver.date_token()
        return date.today().strftime(DATE_FORMAT)

    def __repr__(self) -> str:
        filled = sum(1 for text in self.sections().values() if text.strip())
        return (
            f"NoteDocument(ready={self.is_ready}, focused={Section(self._focused_index).label}, "
            f"filled={filled})"
        )
