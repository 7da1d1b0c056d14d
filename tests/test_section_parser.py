"""Tests for parse_into_sections, build_ordered_output and split_template_segments."""

from structured_note.core.enums import Section
from structured_note.parsing.section_parser import (
    build_ordered_output,
    parse_into_sections,
    split_template_segments,
)


def _non_empty(sections):
    return {section: lines for section, lines in sections.items() if lines}


class TestParse:
    def test_trailing_unlabelled_line_stays_in_active_section(self) -> None:
        sections = parse_into_sections(
            "CC> chest pain\nPI> started 2 days ago\nrandom trailing note"
        )
        assert sections[Section.CC] == ["chest pain"]
        assert sections[Section.PI] == ["started 2 days ago", "random trailing note"]
        assert _non_empty(sections).keys() == {Section.CC, Section.PI}

    def test_no_headers_goes_to_comment(self) -> None:
        sections = parse_into_sections("just a note")
        assert sections[Section.COMMENT] == ["just a note"]
        assert _non_empty(sections).keys() == {Section.COMMENT}

    def test_all_sections_present_in_result(self) -> None:
        assert set(parse_into_sections("")) == set(Section)
        assert all(lines == [] for lines in parse_into_sections("").values())

    def test_preamble_before_first_header_goes_to_comment(self) -> None:
        sections = parse_into_sections("preamble\nCC> cough")
        assert sections[Section.COMMENT] == ["preamble"]
        assert sections[Section.CC] == ["cough"]

    def test_header_with_indent_and_no_content(self) -> None:
        sections = parse_into_sections("   ROS>\n  negative\nS>   feels fine  ")
        assert sections[Section.ROS] == ["  negative"]
        assert sections[Section.S] == ["feels fine"]

    def test_ros_is_not_mistaken_for_s(self) -> None:
        sections = parse_into_sections("ROS> negative")
        assert sections[Section.ROS] == ["negative"]
        assert sections[Section.S] == []

    def test_crlf_line_endings(self) -> None:
        sections = parse_into_sections("CC> a\r\nb\r\n")
        assert sections[Section.CC] == ["a", "b"]

    def test_repeated_header_appends(self) -> None:
        sections = parse_into_sections("P> one\nA> x\nP> two")
        assert sections[Section.P] == ["one", "two"]

    def test_physical_exam_label(self) -> None:
        sections = parse_into_sections("Physical Exam> clear lungs")
        assert sections[Section.PE] == ["clear lungs"]


class TestBuild:
    def test_canonical_order_and_continuations(self) -> None:
        sections = parse_into_sections(
            "ROS> negative\nPMH> HTN\nDM\nCC> cough\nS> tired\nComment> call back"
        )
        assert build_ordered_output(sections) == (
            "CC> cough\nPMH> HTN\n\tDM\nS> tired\nROS> negative\nComment> call back"
        )

    def test_blank_sections_skipped(self) -> None:
        sections = parse_into_sections("CC>\n   \nP> rest")
        assert build_ordered_output(sections) == "P> rest"

    def test_label_only_when_first_line_blank(self) -> None:
        sections = {section: [] for section in Section}
        sections[Section.A] = ["", "stable"]
        assert build_ordered_output(sections) == "A>\n\tstable"

    def test_missing_keys_tolerated(self) -> None:
        assert build_ordered_output({Section.P: ["rest"]}) == "P> rest"

    def test_empty_map(self) -> None:
        assert build_ordered_output({}) == ""


def test_round_trip_preserves_section_content() -> None:
    blob = (
        "intro line\n"
        "CC> chest pain\n"
        "PI> started 2 days ago\n"
        "  worse on exertion\n"
        "ROS> negative\n"
        "PMH> HTN\n"
        "Physical Exam> clear\n"
        "P> rest\n"
        "\n"
        "recheck in 2 weeks"
    )
    first = parse_into_sections(blob)
    second = parse_into_sections(build_ordered_output(first))

    def content(sections):
        return {
            section: [line.strip() for line in lines if line.strip()]
            for section, lines in sections.items()
            if any(line.strip() for line in lines)
        }

    assert content(second) == content(first)


def test_continuation_starting_with_label_is_read_back_as_header() -> None:
    # A repeated header whose content is itself a label is stored as a plain
    # line, serialized tab-indented, and matched as a header on the way back.
    first = parse_into_sections("Comment> *\nComment>PI> x")
    assert first[Section.COMMENT] == ["*", "PI> x"]
    assert first[Section.PI] == []

    report = build_ordered_output(first)
    assert report == "Comment> *\n\tPI> x"

    second = parse_into_sections(report)
    assert second[Section.COMMENT] == ["*"]
    assert second[Section.PI] == ["x"]


class TestSplitSegments:
    def test_split_keeps_label_with_following_text(self) -> None:
        assert split_template_segments("CC> cough\nP> rest") == ["CC> cough\n", "P> rest"]

    def test_leading_text_is_its_own_segment(self) -> None:
        assert split_template_segments("intro ROS> neg S> fine") == [
            "intro ",
            "ROS> neg ",
            "S> fine",
        ]

    def test_no_labels(self) -> None:
        assert split_template_segments("plain text") == ["plain text"]

    def test_label_inside_longer_label_is_not_split(self) -> None:
        segments = split_template_segments("ROS> negative")
        assert segments == ["ROS> negative"]

    def test_empty(self) -> None:
        assert split_template_segments("") == []
