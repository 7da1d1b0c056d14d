"""
Core Layer - Section Schema, Models, Constants, Exceptions, Configuration

This layer contains the side-effect-free foundation of the note engine.

Submodules:
    enums.py         → Section enumeration, canonical order, schema operations
    constants.py     → Labels, bullet glyphs, abbreviation constants
    models.py        → DistributionResult, TriggerExpansion, VitalSigns
    exceptions.py    → Domain-specific exceptions
    config.py        → EditorConfiguration dataclass
    logging_setup.py → loguru sink configuration for host applications

Dependency Rule:
    This layer depends on NOTHING else in the package.
    All other layers may depend on this layer.
"""

from structured_note.core.enums import (
    CANONICAL_ORDER,
    DispatcherMode,
    Section,
    fallback_index,
    index_of_label,
    is_valid_index,
    label_of,
    match_label_prefix,
    section_count,
)
from structured_note.core.models import (
    DistributionResult,
    ParsedSections,
    TriggerExpansion,
    VitalSigns,
    empty_sections,
)
from structured_note.core.config import EditorConfiguration
from structured_note.core.exceptions import (
    AbbreviationSourceError,
    BridgeError,
    ConfigurationError,
    DispatcherClosedError,
    SectionIndexError,
    SessionClosedError,
    StructuredNoteError,
)

__all__ = [
    # Schema
    "Section",
    "CANONICAL_ORDER",
    "DispatcherMode",
    "section_count",
    "label_of",
    "fallback_index",
    "index_of_label",
    "is_valid_index",
    "match_label_prefix",
    # Models
    "ParsedSections",
    "DistributionResult",
    "TriggerExpansion",
    "VitalSigns",
    "empty_sections",
    # Configuration
    "EditorConfiguration",
    # Exceptions
    "StructuredNoteError",
    "ConfigurationError",
    "SectionIndexError",
    "AbbreviationSourceError",
    "BridgeError",
    "DispatcherClosedError",
    "SessionClosedError",
]
