"""Tests for the section schema (enums and constants)."""

import pytest

from structured_note.core.constants import SECTION_LABELS
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
from structured_note.core.exceptions import SectionIndexError


def test_section_count_is_ten() -> None:
    assert section_count() == 10
    assert len(Section) == 10


def test_labels_are_byte_exact() -> None:
    assert [s.label for s in Section] == [
        "CC>",
        "PI>",
        "ROS>",
        "PMH>",
        "S>",
        "O>",
        "Physical Exam>",
        "A>",
        "P>",
        "Comment>",
    ]


def test_label_of_and_index_of_label_are_inverse() -> None:
    for index, label in enumerate(SECTION_LABELS):
        assert label_of(index) == label
        assert index_of_label(label) == index


@pytest.mark.parametrize("bad", [-1, 10, 99])
def test_label_of_rejects_out_of_range(bad) -> None:
    with pytest.raises(SectionIndexError) as excinfo:
        label_of(bad)
    assert excinfo.value.index == bad
    assert isinstance(excinfo.value, IndexError)


def test_index_of_label_unknown_returns_none() -> None:
    assert index_of_label("XYZ>") is None
    assert index_of_label("cc>") is None


def test_fallback_is_comment() -> None:
    assert fallback_index() == 9
    assert Section(fallback_index()) is Section.COMMENT


def test_canonical_order_moves_pmh_and_s_before_ros() -> None:
    assert [s.label for s in CANONICAL_ORDER] == [
        "CC>",
        "PI>",
        "PMH>",
        "S>",
        "ROS>",
        "O>",
        "Physical Exam>",
        "A>",
        "P>",
        "Comment>",
    ]
    assert set(CANONICAL_ORDER) == set(Section)


def test_match_label_prefix_prefers_longest_label() -> None:
    assert match_label_prefix("ROS> negative") is Section.ROS
    assert match_label_prefix("S> feels fine") is Section.S
    assert match_label_prefix("PMH> HTN") is Section.PMH
    assert match_label_prefix("P> rest") is Section.P
    assert match_label_prefix("Physical Exam> clear") is Section.PE
    assert match_label_prefix("no label") is None


def test_is_valid_index_rejects_bools_and_non_ints() -> None:
    assert is_valid_index(0)
    assert is_valid_index(Section.COMMENT)
    assert not is_valid_index(True)
    assert not is_valid_index("1")
    assert not is_valid_index(1.0)


def test_section_properties() -> None:
    assert Section.PE.header == "Physical Exam"
    assert Section.CC.title == "Chief Complaint"
    assert Section.from_label("A>") is Section.A
    assert Section.from_index(8) is Section.P
    with pytest.raises(SectionIndexError):
        Section.from_index(10)
    with pytest.raises(ValueError):
        Section.from_label("X>")


def test_dispatcher_mode_from_string() -> None:
    assert DispatcherMode.from_string(" Threaded ") is DispatcherMode.THREADED
    with pytest.raises(ValueError):
        DispatcherMode.from_string("async")
