"""
Templates Layer - Built-in Template and Snippet Library

Submodules:
    library.py → TemplateLibrary enum

Dependency Rule:
    This layer depends on: core
    This layer is used by: editor, activation (as activator bodies)
"""

from structured_note.templates.library import TemplateLibrary

__all__ = ["TemplateLibrary"]
