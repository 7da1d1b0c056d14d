"""
Abbreviation Resolver - ":key" Shorthand Expansion

This module maps short keys to their expansions and applies the two
expansion rules used by the editor:

    BATCH (template) rule → expand_text(text)
        Every whitespace-delimited token that starts with ":" is a candidate.
        Resolvable tokens are replaced, everything else (including all
        whitespace) is kept byte-for-byte.

    LIVE (typing) rule → expand_trigger(text, caret)
        Fired when a word break is typed at ``caret``. The "word" is the text
        between the last space/newline before the caret and the caret. If it
        is ":key" and resolves, the word becomes ``expansion + " "``.

The two rules differ on purpose: live typing only ever sees the word just
finished, while template expansion processes an already complete blob.

Reserved key:
    "cd" → the current local date as YYYY-MM-DD, computed on every call.
    A "cd" entry in the table is ignored.

Usage:
    resolver = AbbreviationResolver({"c": "hypercholesterolemia"})

    resolver.resolve("c")                      # "hypercholesterolemia"
    resolver.resolve("x")                      # None
    resolver.expand_text("hx :c, :x")          # "hx :c, :x" (":c," is not ":c")
    resolver.expand_text("hx :c and :x")       # "hx hypercholesterolemia and :x"
"""

import re
from datetime import date
from types import MappingProxyType
from typing import Callable, Iterator, Mapping, Optional

from loguru import logger

from structured_note.core.constants import (
    ABBREVIATION_PREFIX,
    CURRENT_DATE_KEY,
    DATE_FORMAT,
)
from structured_note.core.models import TriggerExpansion


# Captures whitespace runs so that re.split keeps them as separate tokens.
_WHITESPACE_SPLIT = re.compile(r"(\s+)")

# Characters that end a word for the live rule.
_LIVE_WORD_BREAKS = (" ", "\n")


class AbbreviationResolver:
    """
    Read-only abbreviation lookup with the reserved date key.

    What it does:
        Holds an immutable snapshot of the abbreviation table and expands
        ":key" shorthands found in text.

    Why it exists:
        The table lives in an external store that may change between
        sessions. The editor only needs a consistent view for the duration
        of one session, so the resolver copies the table once and never
        writes back.

    Args:
        table: Mapping of key → expansion. Copied at construction.
        clock: Callable returning today's date. Defaults to ``date.today``;
            tests inject a fixed date.
    """

    def __init__(
        self,
        table: Optional[Mapping[str, str]] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        self._table: Mapping[str, str] = MappingProxyType(dict(table or {}))
        self._clock = clock or date.today
        logger.debug(f"AbbreviationResolver ready | entries={len(self._table)}")

    # =========================================================================
    # STAGE 1: LOOKUP
    # =========================================================================

    def date_token(self) -> str:
        """Current date for the reserved key, formatted YYYY-MM-DD."""
        return self._clock().strftime(DATE_FORMAT)

    def resolve(self, key: str) -> Optional[str]:
        """
        Resolve a key (without the ":" prefix).

        Returns:
            The expansion, today's date for "cd", or None when the key is
            not in the table. Matching is exact and case-sensitive.
        """
        if key == CURRENT_DATE_KEY:
            return self.date_token()
        return self._table.get(key)

    # =========================================================================
    # STAGE 2: BATCH EXPANSION
    # =========================================================================

    def expand_text(self, text: str) -> str:
        """
        Expand every resolvable ":key" token in a finished blob.

        Tokens are maximal non-whitespace runs, so a token is always bounded
        by start/end of text or whitespace on both sides. Expanded output is
        not rescanned.
        """
        if not text or ABBREVIATION_PREFIX not in text:
            return text

        parts = _WHITESPACE_SPLIT.split(text)
        expanded = 0
        for i, token in enumerate(parts):
            # Odd positions hold the captured whitespace runs.
            if i % 2 == 1 or not token.startswith(ABBREVIATION_PREFIX):
                continue
            replacement = self.resolve(token[len(ABBREVIATION_PREFIX):])
            if replacement is not None:
                parts[i] = replacement
                expanded += 1

        if expanded:
            logger.debug(f"Expanded {expanded} abbreviation token(s)")
        return "".join(parts)

    # =========================================================================
    # STAGE 3: LIVE TRIGGER EXPANSION
    # =========================================================================

    def expand_trigger(self, text: str, caret: int) -> Optional[TriggerExpansion]:
        """
        Apply the live rule for a word break typed at ``caret``.

        Args:
            text: Current buffer content (the word break is not yet inserted)
            caret: Caret offset into ``text``

        Returns:
            TriggerExpansion with the rewritten text and new caret, or None
            when nothing should be expanded and the caller inserts the word
            break literally.
        """
        if not isinstance(caret, int) or caret < 0 or caret > len(text):
            return None

        before = text[:caret]
        start = max(before.rfind(brk) for brk in _LIVE_WORD_BREAKS) + 1
        word = before[start:]
        if not word.startswith(ABBREVIATION_PREFIX):
            return None

        key = word[len(ABBREVIATION_PREFIX):]
        replacement = self.resolve(key)
        if replacement is None:
            return None

        inserted = replacement + " "
        return TriggerExpansion(
            text=text[:start] + inserted + text[caret:],
            caret=start + len(inserted),
            key=key,
            start=start,
        )

    # =========================================================================
    # STAGE 4: READ-ONLY ACCESSORS
    # =========================================================================

    @property
    def keys(self) -> Iterator[str]:
        return iter(self._table)

    def snapshot(self) -> Mapping[str, str]:
        """The read-only table this resolver was built from."""
        return self._table

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: object) -> bool:
        return key == CURRENT_DATE_KEY or key in self._table
