"""Tests for AbbreviationResolver lookup, batch and live expansion."""

import re
from datetime import date

import pytest

from structured_note.abbreviations.resolver import AbbreviationResolver

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class TestResolve:
    """Key lookup and the reserved date key."""

    def test_exact_lookup(self, resolver):
        assert resolver.resolve("c") == "hypercholesterolemia"

    def test_lookup_is_case_sensitive(self, resolver):
        assert resolver.resolve("C") is None

    def test_no_partial_matching(self, resolver):
        assert resolver.resolve("d") is None
        assert resolver.resolve("dmx") is None

    def test_unknown_key_returns_none(self, resolver):
        assert resolver.resolve("zzz") is None

    def test_cd_returns_clock_date(self, resolver):
        assert resolver.resolve("cd") == "2025-06-01"

    def test_cd_ignores_table_override(self, fixed_clock):
        resolver = AbbreviationResolver({"cd": "override"}, clock=fixed_clock)
        assert resolver.resolve("cd") == "2025-06-01"

    def test_cd_is_computed_per_call(self):
        days = iter([date(2025, 1, 1), date(2025, 1, 2)])
        resolver = AbbreviationResolver({}, clock=lambda: next(days))
        assert resolver.resolve("cd") == "2025-01-01"
        assert resolver.resolve("cd") == "2025-01-02"

    def test_default_clock_formats_iso_date(self):
        assert ISO_DATE.match(AbbreviationResolver({}).resolve("cd"))

    def test_snapshot_is_read_only_copy(self):
        table = {"c": "hypercholesterolemia"}
        resolver = AbbreviationResolver(table)
        table["c"] = "changed"
        assert resolver.resolve("c") == "hypercholesterolemia"
        with pytest.raises(TypeError):
            resolver.snapshot()["x"] = "y"

    def test_accessors(self, resolver):
        assert len(resolver) == 3
        assert "c" in resolver
        assert "cd" in resolver
        assert "nope" not in resolver
        assert sorted(resolver.keys) == ["c", "dm", "to"]


class TestExpandText:
    """Batch rule used for template text."""

    def test_date_inline(self, resolver):
        assert resolver.expand_text("check :cd please") == "check 2025-06-01 please"

    def test_known_keys_expand(self, resolver):
        assert resolver.expand_text(":c and :to") == "hypercholesterolemia and hypothyroidism"

    def test_unknown_key_preserved(self, resolver):
        assert resolver.expand_text("hx of :zzz today") == "hx of :zzz today"

    def test_token_must_start_with_colon(self, resolver):
        assert resolver.expand_text("a:c b") == "a:c b"

    def test_token_must_end_at_whitespace(self, resolver):
        assert resolver.expand_text("hx :c, more") == "hx :c, more"

    def test_whitespace_preserved_exactly(self, resolver):
        text = "\t:c  \n\n:to\r\n end "
        assert resolver.expand_text(text) == "\thypercholesterolemia  \n\nhypothyroidism\r\n end "

    def test_end_of_string_boundary(self, resolver):
        assert resolver.expand_text("Date: :cd") == "Date: 2025-06-01"

    def test_expansion_not_rescanned(self, fixed_clock):
        resolver = AbbreviationResolver({"a": ":b", "b": "bee"}, clock=fixed_clock)
        assert resolver.expand_text(":a") == ":b"

    def test_bare_colon_preserved(self, resolver):
        assert resolver.expand_text("Dx: : x") == "Dx: : x"

    def test_empty_text(self, resolver):
        assert resolver.expand_text("") == ""

    def test_same_instant_dates_agree(self, resolver):
        out = resolver.expand_text(":cd :cd")
        first, second = out.split(" ")
        assert first == second
        assert ISO_DATE.match(first)


class TestExpandTrigger:
    """Live rule applied when a word break is typed."""

    def test_expands_word_before_caret(self, resolver):
        result = resolver.expand_trigger("hx of :c", 8)
        assert result.text == "hx of hypercholesterolemia "
        assert result.caret == len("hx of hypercholesterolemia ")
        assert result.key == "c"
        assert result.start == 6

    def test_word_starts_after_newline(self, resolver):
        result = resolver.expand_trigger("line\n:to", 8)
        assert result.text == "line\nhypothyroidism "

    def test_text_after_caret_kept(self, resolver):
        result = resolver.expand_trigger(":c tail", 2)
        assert result.text == "hypercholesterolemia  tail"
        assert result.caret == len("hypercholesterolemia ")

    def test_date_key(self, resolver):
        assert resolver.expand_trigger("seen :cd", 8).text == "seen 2025-06-01 "

    def test_unresolved_returns_none(self, resolver):
        assert resolver.expand_trigger("hx :zzz", 7) is None

    def test_word_without_colon_returns_none(self, resolver):
        assert resolver.expand_trigger("c", 1) is None

    def test_tab_is_not_a_word_break(self, resolver):
        # The live rule splits words on space and newline only.
        assert resolver.expand_trigger("x\t:c", 4) is None

    @pytest.mark.parametrize("caret", [-1, 100])
    def test_invalid_caret_returns_none(self, resolver, caret):
        assert resolver.expand_trigger(":c", caret) is None
