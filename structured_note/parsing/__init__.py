"""
Parsing Layer - Section Parser, Serializer and Template Distribution

Submodules:
    section_parser.py → parse_into_sections, build_ordered_output,
                        split_template_segments, distribute_template

Dependency Rule:
    This layer depends on: core
    This layer is used by: document, editor
"""

from structured_note.parsing.section_parser import (
    build_ordered_output,
    distribute_template,
    parse_into_sections,
    split_template_segments,
)

__all__ = [
    "parse_into_sections",
    "build_ordered_output",
    "split_template_segments",
    "distribute_template",
]
