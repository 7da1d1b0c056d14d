"""Tests for routing template blobs into a NoteDocument."""

import pytest

from structured_note.core.enums import Section
from structured_note.parsing.section_parser import distribute_template


def test_labelled_segments_are_routed(document) -> None:
    result = distribute_template("CC> cough\nP> rest", document)

    assert document.text_of(Section.CC) == "cough"
    assert document.text_of(Section.P) == "rest"
    assert result.sections_loaded == 2
    assert result.routed == [Section.CC, Section.P]
    assert not result.used_fallback


def test_existing_content_gets_newline_then_new_content(document) -> None:
    document.set_text(Section.P, "fluids")
    distribute_template("P> rest", document)
    assert document.text_of(Section.P) == "fluids\nrest"


def test_blank_slot_is_replaced(document) -> None:
    document.set_text(Section.P, "  \n ")
    distribute_template("P> rest", document)
    assert document.text_of(Section.P) == "rest"


def test_ros_and_s_routed_separately(document) -> None:
    distribute_template("ROS> negative S> feels fine", document)
    assert document.text_of(Section.ROS) == "negative"
    assert document.text_of(Section.S) == "feels fine"


def test_multiline_content_stays_with_its_label(document) -> None:
    distribute_template("PMH> HTN\nDM\nA> stable", document)
    assert document.text_of(Section.PMH) == "HTN\nDM"
    assert document.text_of(Section.A) == "stable"


def test_label_without_content_is_skipped(document) -> None:
    result = distribute_template("CC>\nP> rest", document)
    assert document.text_of(Section.CC) == ""
    assert result.routed == [Section.P]


def test_unlabelled_leading_text_is_dropped_when_labels_match(document) -> None:
    distribute_template("intro\nCC> cough", document)
    assert document.text_of(Section.CC) == "cough"
    assert document.text_of(Section.COMMENT) == ""


@pytest.mark.parametrize("blob", ["no labels here", "  indented\nsecond line  "])
def test_fallback_keeps_whole_blob(document, blob) -> None:
    document.focus(Section.A)
    result = distribute_template(blob, document)

    assert document.text_of(Section.A) == blob.strip()
    assert result.used_fallback
    assert result.fallback_index == Section.A
    assert result.sections_loaded == 0


def test_fallback_when_every_label_is_empty(document) -> None:
    result = distribute_template("CC>   P>", document)
    assert result.used_fallback
    assert document.text_of(Section.CC) == "CC>   P>"


@pytest.mark.parametrize("blob", ["", "   ", "\n\n"])
def test_blank_blob_changes_nothing(document, blob) -> None:
    result = distribute_template(blob, document)
    assert document.is_empty()
    assert not result.used_fallback
    assert result.sections_loaded == 0


def test_resolver_expands_routed_content(document, resolver) -> None:
    distribute_template("PMH> :c\nCC> seen :cd", document, resolver=resolver)
    assert document.text_of(Section.PMH) == "hypercholesterolemia"
    assert document.text_of(Section.CC) == "seen 2025-06-01"


def test_resolver_expands_fallback(document, resolver) -> None:
    distribute_template("hx :to", document, resolver=resolver)
    assert document.text_of(Section.CC) == "hx hypothyroidism"


def test_without_resolver_shorthands_are_literal(document) -> None:
    distribute_template("PMH> :c", document)
    assert document.text_of(Section.PMH) == ":c"


def test_apply_template_uses_document_resolver(document) -> None:
    result = document.apply_template("A> :dm\nP> recheck :cd")
    assert document.text_of(Section.A) == "type 2 diabetes mellitus"
    assert document.text_of(Section.P) == "recheck 2025-06-01"
    assert result.to_dict() == {
        "routed": ["A>", "P>"],
        "used_fallback": False,
        "fallback_index": None,
    }
