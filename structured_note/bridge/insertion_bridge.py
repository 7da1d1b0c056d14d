"""
Insertion Bridge - The Satellite Tool Entry Point

Satellite tools (vitals entry, lab forms, vaccine logger, ...) never touch
the NoteDocument directly. They hold an InsertionBridge (usually through a
BridgeHandle) and call:

    focus(index)
    insert_line(text) / insert_block(text)          → focused slot
    append_to_section(index, text)                  → explicit slot, focus kept
    insert_line_into(index, text, move_focus)
    insert_block_into(index, text, move_focus)
    is_ready()

Contract:
    - Every mutating call is validated cheaply on the caller's thread, then
      marshalled onto the document's owner through the dispatcher
    - Calls return None immediately and never raise; bad indices, empty
      text, an unready document or a stopped dispatcher drop the write
    - Text is inserted as given: satellite output is final, so no
      abbreviation expansion happens on this path
"""

from typing import Callable

from loguru import logger

from structured_note.bridge.dispatcher import DocumentDispatcher
from structured_note.core.enums import is_valid_index, section_count
from structured_note.core.exceptions import DispatcherClosedError
from structured_note.document.note_document import NoteDocument


class InsertionBridge:
    """
    Thread-safe, fire-and-forget write access to a NoteDocument.

    Args:
        document: The document to write into
        dispatcher: Marshals each write onto the document's owner
    """

    def __init__(self, document: NoteDocument, dispatcher: DocumentDispatcher):
        self._document = document
        self._dispatcher = dispatcher

    @property
    def document(self) -> NoteDocument:
        return self._document

    @property
    def dispatcher(self) -> DocumentDispatcher:
        return self._dispatcher

    def area_count(self) -> int:
        return section_count()

    def is_ready(self) -> bool:
        """Non-blocking readiness query."""
        return self._document.is_ready

    # =========================================================================
    # STAGE 1: DISPATCH
    # =========================================================================

    def _dispatch(self, operation: str, action: Callable[[], None]) -> None:
        if not self._document.is_ready:
            logger.debug(f"Bridge {operation} dropped: document not ready")
            return
        try:
            self._dispatcher.submit(action)
        except DispatcherClosedError:
            logger.warning(f"Bridge {operation} dropped: dispatcher stopped")

    # =========================================================================
    # STAGE 2: FOCUSED-SLOT OPERATIONS
    # =========================================================================

    def focus(self, index: int) -> None:
        if not is_valid_index(index):
            logger.debug(f"Bridge focus ignored: invalid index {index!r}")
            return
        self._dispatch("focus", lambda: self._document.focus(index))

    def insert_line(self, text: str) -> None:
        if not text:
            return
        self._dispatch("insert_line", lambda: self._document.insert_line(text))

    def insert_block(self, text: str) -> None:
        if not text:
            return
        self._dispatch("insert_block", lambda: self._document.insert_block(text))

    # =========================================================================
    # STAGE 3: EXPLICIT-SLOT OPERATIONS
    # =========================================================================

    def append_to_section(self, index: int, text: str) -> None:
        """Append a line to slot ``index`` without changing focus."""
        if not is_valid_index(index) or not text:
            logger.debug(f"Bridge append_to_section ignored: index={index!r}")
            return
        self._dispatch(
            "append_to_section", lambda: self._document.append_to_section(index, text)
        )

    def insert_block_into(self, index: int, text: str, move_focus: bool = False) -> None:
        """
        Insert a block into slot ``index``.

        With ``move_focus`` the slot becomes focused first and the block
        lands at its caret. Without it, the block goes to that slot's caret
        and the user's focus stays where it was.
        """
        if not is_valid_index(index) or not text:
            return
        self._dispatch("insert_block_into", lambda: self._insert_into(index, text, move_focus, line=False))

    def insert_line_into(self, index: int, text: str, move_focus: bool = False) -> None:
        """Line variant of insert_block_into (trailing newline ensured)."""
        if not is_valid_index(index) or not text:
            return
        self._dispatch("insert_line_into", lambda: self._insert_into(index, text, move_focus, line=True))

    def _insert_into(self, index: int, text: str, move_focus: bool, line: bool) -> None:
        # Runs on the owning context: focus and insert happen back to back.
        if move_focus:
            self._document.focus(index)
            target = None
        else:
            target = index
        if line:
            self._document.insert_line(text, index=target)
        else:
            self._document.insert_block(text, index=target)

    def __repr__(self) -> str:
        return f"InsertionBridge(document={self._document!r})"
