"""
Domain Exceptions for the Structured Note Text Engine

Exception Hierarchy:
    StructuredNoteError (base)
    ├── ConfigurationError        → Invalid editor configuration
    ├── SectionIndexError         → Section index outside 0..9 (programming error)
    ├── AbbreviationSourceError   → Abbreviation snapshot could not be loaded
    └── BridgeError               → Dispatcher / bridge lifecycle errors
        ├── DispatcherClosedError
        └── SessionClosedError

Most failure paths in this package do NOT raise: out-of-range indices,
unready documents and unresolvable abbreviations all degrade to a no-op or
to the original text. These exceptions cover the remaining cases, which are
programming or setup mistakes rather than user input.

Usage:
    from structured_note.core.exceptions import SectionIndexError

    try:
        label = label_of(index)
    except SectionIndexError as e:
        logger.error(f"Bad section index: {e.index}")
"""

from typing import Optional


# =============================================================================
# STAGE 1: BASE EXCEPTION
# =============================================================================


class StructuredNoteError(Exception):
    """
    Base exception for all structured note errors.

    Attributes:
        message: Human-readable error description
        context: Dictionary of additional context for debugging
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format message with context for display."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


# =============================================================================
# STAGE 2: CONFIGURATION ERRORS
# =============================================================================


class ConfigurationError(StructuredNoteError):
    """
    Error in editor configuration.

    When raised:
        - Unknown dispatcher mode
        - Abbreviation file path configured but missing
        - Invalid log level
    """

    pass


# =============================================================================
# STAGE 3: SECTION SCHEMA ERRORS
# =============================================================================


class SectionIndexError(StructuredNoteError, IndexError):
    """
    Section index outside the fixed range 0..9.

    Raised only by schema lookups such as ``label_of()``. Callers are
    expected to validate bounds first; the document and the bridge treat
    out-of-range indices as silent no-ops and never let this escape.

    Attributes:
        index: The offending index
    """

    def __init__(self, index: object):
        self.index = index
        super().__init__(
            f"Section index out of range: {index!r}",
            context={"index": index, "valid_range": "0..9"},
        )


# =============================================================================
# STAGE 4: ABBREVIATION SOURCE ERRORS
# =============================================================================


class AbbreviationSourceError(StructuredNoteError):
    """
    The abbreviation snapshot could not be materialized.

    Attributes:
        source: Description of the source (e.g. file path)
        reason: Why loading failed
    """

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(
            f"Failed to load abbreviations from {source}: {reason}",
            context={"source": source, "reason": reason},
        )


# =============================================================================
# STAGE 5: BRIDGE ERRORS
# =============================================================================


class BridgeError(StructuredNoteError):
    """Base exception for dispatcher and bridge lifecycle errors."""

    pass


class DispatcherClosedError(BridgeError):
    """
    An action was submitted to a dispatcher that has been stopped.

    The InsertionBridge catches this and drops the write; it only reaches
    callers that use a dispatcher directly.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__("Dispatcher is stopped", context={"dispatcher": name})


class SessionClosedError(BridgeError):
    """
    A command was issued to a NoteEditorSession after close().

    Raised the same way whatever dispatcher the session runs on.
    """

    def __init__(self, dispatcher: str):
        self.dispatcher = dispatcher
        super().__init__("Session is closed", context={"dispatcher": dispatcher})
