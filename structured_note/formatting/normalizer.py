"""
Text Normalizer - Bullet, Blank-Line and Header Canonicalization

This module holds the stateless text pipeline applied to section content:
    1. auto_format       → canonical bullets, single blank lines, no trailing spaces
    2. finalize_for_emr  → auto_format + Markdown header spacing for export
    3. Line-ending and control-character cleanup used before text is stored

Every function is total over ``str``: no input raises, and empty or
whitespace-only input yields "".

Both auto_format and finalize_for_emr are idempotent:
    auto_format(auto_format(x)) == auto_format(x)
    finalize_for_emr(finalize_for_emr(x)) == finalize_for_emr(x)

Usage:
    from structured_note.formatting import auto_format, finalize_for_emr

    auto_format("•  first\\n\\n\\n\\n-- second\\n")   # "- first\\n\\n- second"
    finalize_for_emr("##Header\\ntext")              # "## Header\\ntext"
"""

from typing import List

from structured_note.core.constants import (
    BULLET_GLYPH_PATTERN,
    CANONICAL_BULLET,
    CONTROL_CHAR_PATTERN,
    DASH_BULLET_PATTERN,
    EXCESS_NEWLINES_PATTERN,
    HEADER_SPACING_PATTERN,
)


class TextNormalizer:
    """
    Static text normalization operations.

    What it does:
        Canonicalizes free text typed or pasted into a section so that the
        exported report reads consistently regardless of which bullet glyphs
        or line endings the author used.

    Operations:
        auto_format(text)            → per-line cleanup (see below)
        finalize_for_emr(text)       → export-ready text
        normalize_newlines(text)     → CRLF / CR → LF
        ensure_trailing_newline(text)
        filter_control_chars(text)   → drop U+0000..U+001F except TAB and LF
        normalize_line(text)         → trim + collapse internal whitespace
        unique_lines(text)           → order-preserving de-duplication
    """

    # =========================================================================
    # STAGE 1: LINE ENDINGS AND CONTROL CHARACTERS
    # =========================================================================

    @staticmethod
    def normalize_newlines(text: str) -> str:
        """Convert CRLF and lone CR line endings to LF."""
        return text.replace("\r\n", "\n").replace("\r", "\n")

    @staticmethod
    def ensure_trailing_newline(text: str) -> str:
        """Make the text end with exactly one LF."""
        return text.rstrip("\n") + "\n"

    @staticmethod
    def filter_control_chars(text: str) -> str:
        """Remove ASCII control characters, keeping TAB and LF."""
        return CONTROL_CHAR_PATTERN.sub("", text)

    @staticmethod
    def normalize_line(text: str) -> str:
        """Trim a line and collapse runs of whitespace into one space."""
        return " ".join(text.split())

    @staticmethod
    def unique_lines(text: str) -> str:
        """
        Remove duplicate lines while preserving first-occurrence order.

        Lines are trimmed before comparison and empty lines are dropped.
        """
        if not text or not text.strip():
            return ""
        seen = {}
        for line in text.splitlines():
            stripped = line.strip()
            if stripped:
                seen.setdefault(stripped, None)
        return "\n".join(seen)

    # =========================================================================
    # STAGE 2: AUTO FORMAT
    # =========================================================================

    @staticmethod
    def _normalize_bullet(line: str) -> str:
        """
        Rewrite a leading bullet marker to the canonical "- ".

        At most one rewrite happens: glyph bullets first, then a leading
        "-" or "--" that is not already the canonical form.
        """
        if BULLET_GLYPH_PATTERN.match(line):
            return BULLET_GLYPH_PATTERN.sub(CANONICAL_BULLET, line, count=1)
        if line.startswith(CANONICAL_BULLET):
            return line
        if DASH_BULLET_PATTERN.match(line):
            return DASH_BULLET_PATTERN.sub(CANONICAL_BULLET, line, count=1)
        return line

    @staticmethod
    def auto_format(text: str) -> str:
        """
        Clean and normalize raw section text.

        Per physical line:
            1. Strip leading/trailing whitespace
            2. Collapse runs of blank lines to one blank line
            3. Rewrite a leading bullet (•, ·, →, ▶, ▷, ‣, ⦿, ∘, *, -, --) to "- "
            4. Drop trailing whitespace left by the rewrite

        The result is stripped of leading/trailing blank lines.

        Args:
            text: Raw input, any line endings

        Returns:
            Normalized text ("" for empty or whitespace-only input)
        """
        if not text or not text.strip():
            return ""

        out: List[str] = []
        last_blank = False
        for line in text.replace("\r", "").split("\n"):
            stripped = line.strip()
            if not stripped:
                if not last_blank:
                    out.append("")
                    last_blank = True
                continue

            stripped = TextNormalizer._normalize_bullet(stripped).rstrip()
            out.append(stripped)
            last_blank = False

        return "\n".join(out).strip()

    # =========================================================================
    # STAGE 3: EMR EXPORT FINALIZATION
    # =========================================================================

    @staticmethod
    def finalize_for_emr(text: str) -> str:
        """
        Finalize text for EMR export.

        STAGE 3.1: auto_format
        STAGE 3.2: "#Header" → "# Header" on every line (one space after the # run)
        STAGE 3.3: collapse 3+ consecutive newlines to exactly 2
        STAGE 3.4: trim

        Args:
            text: Processed or raw text

        Returns:
            Export-ready text
        """
        formatted = TextNormalizer.auto_format(text)
        formatted = HEADER_SPACING_PATTERN.sub(r"\1 \2", formatted)
        formatted = EXCESS_NEWLINES_PATTERN.sub("\n\n", formatted)
        return formatted.strip()


# Module-level aliases, the names most callers use.
auto_format = TextNormalizer.auto_format
finalize_for_emr = TextNormalizer.finalize_for_emr
normalize_newlines = TextNormalizer.normalize_newlines
ensure_trailing_newline = TextNormalizer.ensure_trailing_newline
filter_control_chars = TextNormalizer.filter_control_chars
normalize_line = TextNormalizer.normalize_line
unique_lines = TextNormalizer.unique_lines
