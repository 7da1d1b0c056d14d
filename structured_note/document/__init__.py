"""
Document Layer - The Ten-Slot Note Model

Submodules:
    note_document.py → NoteDocument

Dependency Rule:
    This layer depends on: core, abbreviations, formatting, parsing
    This layer is used by: bridge, activation, editor
"""

from structured_note.document.note_document import NoteDocument

__all__ = ["NoteDocument"]
