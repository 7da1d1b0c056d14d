"""
Abbreviations Layer - Snapshot Sources and Expansion

Submodules:
    resolver.py → AbbreviationResolver (lookup, batch and live expansion)
    sources.py  → AbbreviationSource protocol, in-memory and JSON file sources

Dependency Rule:
    This layer depends on: core
    This layer is used by: parsing, document, editor
"""

from structured_note.abbreviations.resolver import AbbreviationResolver
from structured_note.abbreviations.sources import (
    AbbreviationEntry,
    AbbreviationSource,
    InMemoryAbbreviationSource,
    JsonFileAbbreviationSource,
)

__all__ = [
    "AbbreviationResolver",
    "AbbreviationEntry",
    "AbbreviationSource",
    "InMemoryAbbreviationSource",
    "JsonFileAbbreviationSource",
]
