"""Tests for auto_format, finalize_for_emr and the cleanup helpers."""

import pytest

from structured_note.formatting.normalizer import (
    auto_format,
    ensure_trailing_newline,
    filter_control_chars,
    finalize_for_emr,
    normalize_line,
    normalize_newlines,
    unique_lines,
)

SAMPLES = [
    "",
    "   ",
    "\n\n\n",
    "•  first\n\n\n\n-- second\n",
    "* a\n· b\n→ c\n▶ d\n▷ e\n‣ f\n⦿ g\n∘ h",
    "---\n- already\n-x\n--y\n- - nested",
    "•",
    "**bold** text",
    "  indented   \r\n\r\ntrailing  \t",
    "##Header\ntext\n\n\n\n#Second\n### Third",
    "#\n##\n# \n#x",
    "line with nbsp\n odd separator",
    "a\x00b\x1fc\n\td",
    "Plan:\n  -  take meds\n\n\n  *  follow up",
]


def test_auto_format_bullets_and_blank_lines() -> None:
    assert auto_format("•  first\n\n\n\n-- second\n") == "- first\n\n- second"


def test_auto_format_glyph_set() -> None:
    text = "* a\n· b\n→ c\n▶ d\n▷ e\n‣ f\n⦿ g\n∘ h"
    assert auto_format(text) == "- a\n- b\n- c\n- d\n- e\n- f\n- g\n- h"


def test_auto_format_dashes() -> None:
    assert auto_format("-x") == "- x"
    assert auto_format("--y") == "- y"
    assert auto_format("- already") == "- already"
    assert auto_format("- - nested") == "- - nested"


def test_auto_format_rewrites_only_at_line_start() -> None:
    assert auto_format("a * b") == "a * b"
    assert auto_format("text - more") == "text - more"


def test_auto_format_strips_lines_and_result() -> None:
    assert auto_format("\n\n  indented   \r\n\r\ntrailing  \t\n\n") == "indented\n\ntrailing"


@pytest.mark.parametrize("blank", ["", " ", "\n\t\n", "\r\n"])
def test_blank_input_yields_empty(blank) -> None:
    assert auto_format(blank) == ""
    assert finalize_for_emr(blank) == ""


def test_finalize_header_spacing() -> None:
    assert finalize_for_emr("##Header\ntext") == "## Header\ntext"


def test_finalize_header_spacing_every_line() -> None:
    text = "#One\nbody\n##Two\n### Three\n#"
    assert finalize_for_emr(text) == "# One\nbody\n## Two\n### Three\n#"


def test_finalize_collapses_newline_runs() -> None:
    assert "\n\n\n" not in finalize_for_emr("a\n\n\n\n\nb")
    assert finalize_for_emr("a\n\n\n\n\nb") == "a\n\nb"


@pytest.mark.parametrize("text", SAMPLES)
def test_auto_format_is_idempotent(text) -> None:
    once = auto_format(text)
    assert auto_format(once) == once


@pytest.mark.parametrize("text", SAMPLES)
def test_finalize_is_idempotent(text) -> None:
    once = finalize_for_emr(text)
    assert finalize_for_emr(once) == once


def test_normalize_newlines() -> None:
    assert normalize_newlines("a\r\nb\rc\n") == "a\nb\nc\n"


def test_ensure_trailing_newline() -> None:
    assert ensure_trailing_newline("a") == "a\n"
    assert ensure_trailing_newline("a\n") == "a\n"
    assert ensure_trailing_newline("a\n\n\n") == "a\n"
    assert ensure_trailing_newline("a\n\tb\n") == "a\n\tb\n"


def test_filter_control_chars_keeps_tab_and_newline() -> None:
    assert filter_control_chars("a\x00b\x07c\td\ne\x1b") == "abc\td\ne"


def test_normalize_line() -> None:
    assert normalize_line("  a \t b   c ") == "a b c"


def test_unique_lines_preserves_first_occurrence_order() -> None:
    assert unique_lines("b\n a\nb \n\n a\nc") == "b\na\nc"
    assert unique_lines("   ") == ""
