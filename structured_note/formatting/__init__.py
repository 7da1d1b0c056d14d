"""
Formatting Layer - Text Normalization

Submodules:
    normalizer.py → TextNormalizer (auto format, EMR finalization, cleanup helpers)

Dependency Rule:
    This layer depends on: core (constants)
    This layer is used by: document, parsing
"""

from structured_note.formatting.normalizer import (
    TextNormalizer,
    auto_format,
    ensure_trailing_newline,
    filter_control_chars,
    finalize_for_emr,
    normalize_line,
    normalize_newlines,
    unique_lines,
)

__all__ = [
    "TextNormalizer",
    "auto_format",
    "finalize_for_emr",
    "normalize_newlines",
    "ensure_trailing_newline",
    "filter_control_chars",
    "normalize_line",
    "unique_lines",
]
