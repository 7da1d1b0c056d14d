"""
Satellite Tool Base Class

A satellite tool is any helper (vitals entry, lab form, vaccine logger, ...)
that produces finished text for the note. Tools are constructed with a
BridgeHandle and know nothing about the document or the editor.

Every write checks readiness first and reports whether it was dispatched,
so a tool can tell its user that the note is not open instead of losing
input silently.
"""

from typing import Optional

from loguru import logger

from structured_note.bridge.handle import BridgeHandle
from structured_note.core.enums import Section, is_valid_index


class SatelliteTool:
    """
    Base class for tools writing into the note through a BridgeHandle.

    Subclasses build their text and call one of the ``write_*`` helpers.

    Args:
        handle: The session's bridge handle (may be unbound)
        name: Tool name used in log messages
    """

    def __init__(self, handle: BridgeHandle, name: Optional[str] = None):
        self._handle = handle
        self._name = name or type(self).__name__

    @property
    def handle(self) -> BridgeHandle:
        return self._handle

    def is_ready(self) -> bool:
        return self._handle.is_ready()

    def _can_write(self, text: str) -> bool:
        if not text:
            return False
        if not self._handle.is_ready():
            logger.warning(f"{self._name}: note is not ready, text not inserted")
            return False
        return True

    def write_line(self, text: str) -> bool:
        """Insert one line at the focused caret."""
        if not self._can_write(text):
            return False
        self._handle.insert_line(text)
        return True

    def write_block(self, text: str) -> bool:
        """Insert a block at the focused caret."""
        if not self._can_write(text):
            return False
        self._handle.insert_block(text)
        return True

    def write_to_section(self, section: Section, text: str, move_focus: bool = False) -> bool:
        """
        Write a block into ``section``.

        Without ``move_focus`` the text is appended to the section and the
        user's focus is left alone. With it, the section is focused and the
        text goes in at its caret.
        """
        if not is_valid_index(section) or not self._can_write(text):
            return False
        if move_focus:
            self._handle.insert_block_into(section, text, move_focus=True)
        else:
            self._handle.append_to_section(section, text)
        logger.debug(f"{self._name}: wrote {len(text)} chars to {Section(section).label}")
        return True
