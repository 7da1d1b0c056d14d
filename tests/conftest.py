"""
Shared pytest fixtures for the structured note test suite.

Usage in tests:
    def test_something(document):
        document.insert_line("text")

    def test_dates(resolver):
        # resolver's clock is fixed at FIXED_DATE
        assert resolver.resolve("cd") == "2025-06-01"
"""

from datetime import date

import pytest

from structured_note.abbreviations.resolver import AbbreviationResolver
from structured_note.bridge.dispatcher import SerialDispatcher
from structured_note.bridge.handle import BridgeHandle
from structured_note.bridge.insertion_bridge import InsertionBridge
from structured_note.document.note_document import NoteDocument

FIXED_DATE = date(2025, 6, 1)

ABBREVIATIONS = {
    "c": "hypercholesterolemia",
    "to": "hypothyroidism",
    "dm": "type 2 diabetes mellitus",
}


@pytest.fixture
def fixed_clock():
    """Clock callable that always returns FIXED_DATE."""
    return lambda: FIXED_DATE


@pytest.fixture
def resolver(fixed_clock):
    return AbbreviationResolver(ABBREVIATIONS, clock=fixed_clock)


@pytest.fixture
def document(resolver):
    """Empty document with the fixed-clock resolver."""
    return NoteDocument(resolver=resolver)


@pytest.fixture
def dispatcher():
    """Serial dispatcher owned by the test thread."""
    return SerialDispatcher(name="test")


@pytest.fixture
def bridge(document, dispatcher):
    return InsertionBridge(document, dispatcher)


@pytest.fixture
def handle(bridge):
    """Handle already bound to the test bridge."""
    return BridgeHandle(bridge)
