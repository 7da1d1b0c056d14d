"""
Structured Note Text Engine

The text engine behind a ten-section clinical note editor: section schema,
":key" abbreviation expansion, template parsing and distribution, text
normalization for EMR export, and a thread-safe insertion bridge for
satellite tools.

Architecture Overview:
    structured_note/
    ├── core/           → Section schema, models, constants, config (Layer 0 - Pure)
    ├── abbreviations/  → Snapshot sources and resolver (Layer 1)
    ├── formatting/     → Text normalization (Layer 1)
    ├── parsing/        → Section parser, serializer, distributor (Layer 2)
    ├── document/       → NoteDocument (Layer 3)
    ├── bridge/         → Dispatchers, InsertionBridge, BridgeHandle (Layer 4)
    ├── activation/     → Section → capability registry (Layer 4)
    ├── templates/      → Built-in template library (Layer 1)
    ├── satellites/     → Tools writing through the bridge (Layer 5)
    └── editor.py       → NoteEditorSession (Layer 6 - Public API)

Quick Start:
    from structured_note import NoteEditorSession

    with NoteEditorSession() as session:
        session.apply_template("CC> cough\\nP> rest")
        print(session.export_report())
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================

# Main Entry Point
from structured_note.editor import NoteEditorSession

# Schema
from structured_note.core.enums import (
    CANONICAL_ORDER,
    DispatcherMode,
    Section,
    fallback_index,
    index_of_label,
    label_of,
    section_count,
)

# Models
from structured_note.core.models import DistributionResult, TriggerExpansion, VitalSigns

# Configuration and logging
from structured_note.core.config import EditorConfiguration
from structured_note.core.logging_setup import configure_logging

# Exceptions
from structured_note.core.exceptions import (
    AbbreviationSourceError,
    BridgeError,
    ConfigurationError,
    DispatcherClosedError,
    SectionIndexError,
    SessionClosedError,
    StructuredNoteError,
)

# Components
from structured_note.abbreviations import (
    AbbreviationResolver,
    InMemoryAbbreviationSource,
    JsonFileAbbreviationSource,
)
from structured_note.activation import ActivationRegistry, SectionActivator, TemplateActivator
from structured_note.bridge import BridgeHandle, InsertionBridge, SerialDispatcher, ThreadedDispatcher
from structured_note.document import NoteDocument
from structured_note.formatting import auto_format, finalize_for_emr
from structured_note.parsing import build_ordered_output, distribute_template, parse_into_sections
from structured_note.satellites import BmiEntry, SatelliteTool, VitalSignsEntry
from structured_note.templates import TemplateLibrary

__all__ = [
    # Main Entry Point (use this!)
    "NoteEditorSession",
    # Schema
    "Section",
    "CANONICAL_ORDER",
    "DispatcherMode",
    "section_count",
    "label_of",
    "fallback_index",
    "index_of_label",
    # Models
    "DistributionResult",
    "TriggerExpansion",
    "VitalSigns",
    # Configuration
    "EditorConfiguration",
    "configure_logging",
    # Exceptions
    "StructuredNoteError",
    "ConfigurationError",
    "SectionIndexError",
    "AbbreviationSourceError",
    "BridgeError",
    "DispatcherClosedError",
    "SessionClosedError",
    # Components
    "AbbreviationResolver",
    "InMemoryAbbreviationSource",
    "JsonFileAbbreviationSource",
    "NoteDocument",
    "InsertionBridge",
    "BridgeHandle",
    "SerialDispatcher",
    "ThreadedDispatcher",
    "ActivationRegistry",
    "SectionActivator",
    "TemplateActivator",
    "TemplateLibrary",
    "SatelliteTool",
    "VitalSignsEntry",
    "BmiEntry",
    # Text operations
    "auto_format",
    "finalize_for_emr",
    "parse_into_sections",
    "build_ordered_output",
    "distribute_template",
]
