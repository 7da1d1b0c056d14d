"""
Abbreviation Sources - Snapshot Materialization

The editor never reads the abbreviation store directly. A source produces a
fully materialized key → expansion mapping once; the resolver copies it into
a read-only snapshot. Refreshing the table between sessions means loading a
source again and building a new resolver.

Architecture:
    AbbreviationSource (Protocol)
    ├── InMemoryAbbreviationSource  → Wraps a mapping (defaults, tests, host apps)
    └── JsonFileAbbreviationSource  → Loads and validates a JSON file

File formats accepted by JsonFileAbbreviationSource:
    {"c": "hypercholesterolemia", "to": "hypothyroidism"}
    [{"short": "c", "full": "hypercholesterolemia"}, ...]

Usage:
    source = JsonFileAbbreviationSource("abbreviations.json")
    resolver = AbbreviationResolver(source.load())
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from structured_note.core.constants import ABBREVIATION_PREFIX, DEFAULT_ABBREVIATIONS
from structured_note.core.exceptions import AbbreviationSourceError


# =============================================================================
# STAGE 1: RECORD MODEL
# =============================================================================


class AbbreviationEntry(BaseModel):
    """One abbreviation record as stored externally."""

    short: str = Field(..., description="Key typed after the ':' prefix")
    full: str = Field(..., description="Expansion text")

    @field_validator("short")
    @classmethod
    def validate_short(cls, v: str) -> str:
        """
        Keys are compared exactly, so surrounding whitespace is an input
        mistake rather than part of the key. A stored leading ':' is dropped.
        """
        v = v.strip()
        if v.startswith(ABBREVIATION_PREFIX):
            v = v[len(ABBREVIATION_PREFIX):]
        if not v:
            raise ValueError("abbreviation key cannot be empty")
        if any(ch.isspace() for ch in v):
            raise ValueError(f"abbreviation key cannot contain whitespace: '{v}'")
        return v

    @field_validator("full")
    @classmethod
    def validate_full(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("abbreviation expansion cannot be empty")
        return v


# =============================================================================
# STAGE 2: SOURCE PROTOCOL
# =============================================================================


@runtime_checkable
class AbbreviationSource(Protocol):
    """
    Anything that can materialize an abbreviation table.

    Required Methods:
        load() → Mapping[str, str]
    """

    def load(self) -> Mapping[str, str]:
        ...


# =============================================================================
# STAGE 3: IMPLEMENTATIONS
# =============================================================================


class InMemoryAbbreviationSource:
    """Source backed by a mapping. With no argument, the built-in defaults."""

    def __init__(self, mapping: Optional[Mapping[str, str]] = None):
        self._mapping = dict(DEFAULT_ABBREVIATIONS if mapping is None else mapping)

    def load(self) -> Mapping[str, str]:
        return dict(self._mapping)

    def __repr__(self) -> str:
        return f"InMemoryAbbreviationSource(entries={len(self._mapping)})"


class JsonFileAbbreviationSource:
    """
    Source backed by a JSON file.

    What it does:
        Reads the file on every ``load()`` and validates each record with
        AbbreviationEntry. Later duplicates overwrite earlier ones.

    Raises (from load):
        AbbreviationSourceError: File missing, unreadable, not JSON, or a
            record fails validation
    """

    def __init__(self, path: str):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Mapping[str, str]:
        if not self._path.exists():
            raise AbbreviationSourceError(str(self._path), "File not found")

        logger.info(f"Loading abbreviations from: {self._path}")
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise AbbreviationSourceError(str(self._path), f"Invalid JSON: {e}")
        except OSError as e:
            raise AbbreviationSourceError(str(self._path), str(e))

        try:
            entries = [AbbreviationEntry(**record) for record in self._records(raw)]
        except ValidationError as e:
            raise AbbreviationSourceError(str(self._path), f"Invalid record: {e}")

        table: Dict[str, str] = {}
        for entry in entries:
            if entry.short in table:
                logger.warning(f"Duplicate abbreviation '{entry.short}' in {self._path}, keeping last")
            table[entry.short] = entry.full

        logger.info(f"Loaded {len(table)} abbreviations")
        return table

    def _records(self, raw: Any) -> List[Dict[str, Any]]:
        """Normalize both accepted layouts to a list of record dicts."""
        if isinstance(raw, dict):
            return [{"short": key, "full": value} for key, value in raw.items()]
        if isinstance(raw, list):
            if not all(isinstance(record, dict) for record in raw):
                raise AbbreviationSourceError(str(self._path), "List entries must be objects")
            return raw
        raise AbbreviationSourceError(
            str(self._path), f"Expected a JSON object or list, got {type(raw).__name__}"
        )

    def __repr__(self) -> str:
        return f"JsonFileAbbreviationSource(path='{self._path}')"
