"""
Tests for the CSV line parser and document normalizer.

Tests cover:
- Quote-mode toggling and escaped quotes
- Permissive handling of unbalanced quotes
- Row filtering and stable row indices
"""

import pytest

from flashstudy.services.csv_parser import split_line, parse_document


def quote_field(value):
    return '"' + value.replace('"', '""') + '"'


class TestSplitLine:

    def test_plain_fields(self):
        assert split_line("a,b,c") == ["a", "b", "c"]

    def test_comma_inside_quotes_is_kept(self):
        assert split_line('"a, b",c') == ["a, b", "c"]

    def test_doubled_quote_inside_quotes_is_literal(self):
        assert split_line('"say ""hi""",x') == ['say "hi"', "x"]

    def test_unbalanced_quote_switches_mode_for_rest_of_line(self):
        assert split_line('a,"b,c') == ["a", "b,c"]

    def test_trailing_field_is_flushed(self):
        assert split_line("a,") == ["a", ""]
        assert split_line("") == [""]

    def test_no_comma_gives_single_field(self):
        assert split_line("foo") == ["foo"]

    @pytest.mark.parametrize("fields", [
        ["plain", "text"],
        ["with, comma", "x"],
        ['quote " inside', '""'],
        ["", "trailing space "],
    ])
    def test_quoting_round_trip(self, fields):
        """Joining with correct quote-escaping re-parses to the same fields."""
        line = ",".join(quote_field(f) for f in fields)
        assert split_line(line) == fields


class TestParseDocument:

    def test_quoted_row_becomes_card(self):
        cards = parse_document('"Capital of France","Paris"', "a.csv")
        assert len(cards) == 1
        card = cards[0]
        assert card.id == "a.csv::0"
        assert card.path == "a.csv"
        assert card.row_index == 0
        assert card.front == "Capital of France"
        assert card.back == "Paris"

    def test_line_without_comma_contributes_nothing(self):
        assert parse_document("foo", "a.csv") == []

    def test_blank_front_or_back_is_dropped(self):
        assert parse_document(" ,back\nfront,  \n", "a.csv") == []

    def test_row_index_counts_skipped_lines(self):
        """Ids follow the unfiltered line position."""
        cards = parse_document("skip me\n\nq,a\n", "f.csv")
        assert [c.id for c in cards] == ["f.csv::2"]

    def test_accepts_crlf_and_lf(self):
        cards = parse_document("q1,a1\r\nq2,a2\nq3,a3", "f.csv")
        assert [c.back for c in cards] == ["a1", "a2", "a3"]

    def test_fields_are_trimmed_and_unwrapped_once(self):
        cards = parse_document('  term  ,  "  definition "  ', "f.csv")
        assert cards[0].front == "term"
        assert cards[0].back == "definition"

    def test_extra_columns_are_ignored(self):
        cards = parse_document("q,a,extra,more", "f.csv")
        assert (cards[0].front, cards[0].back) == ("q", "a")

    def test_reparse_gives_identical_ids(self):
        text = "q,a\nbad\nq2,a2"
        assert parse_document(text, "p.csv") == parse_document(text, "p.csv")
