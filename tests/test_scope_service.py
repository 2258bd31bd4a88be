"""
Tests for scope derivation and subset selection.
"""

from flashstudy.schemas import ALL_SCOPE
from flashstudy.services.deck_service import build_deck
from flashstudy.services.scope_service import (
    derive_files,
    derive_folders,
    scope_options,
    select_scope,
)


class TestDerive:

    def test_folders_include_every_ancestor(self, deck):
        assert derive_folders(deck) == ["b", "b/c"]

    def test_files_are_distinct_sorted_paths(self, deck):
        assert derive_files(deck) == ["a.csv", "b/c/deep.csv", "b/x.csv"]

    def test_flat_deck_has_no_folders(self, small_deck):
        assert derive_folders(small_deck) == []


class TestSelectScope:

    def test_all_returns_full_deck(self, deck):
        assert [c.id for c in select_scope(deck, ALL_SCOPE)] == deck.ids

    def test_folder_selects_descendants(self, deck):
        ids = [c.id for c in select_scope(deck, "b")]
        assert ids == ["b/c/deep.csv::0", "b/x.csv::0", "b/x.csv::1"]

    def test_nested_folder(self, deck):
        assert [c.id for c in select_scope(deck, "b/c")] == ["b/c/deep.csv::0"]

    def test_file_selects_exact_path(self, deck):
        assert [c.id for c in select_scope(deck, "a.csv")] == ["a.csv::0", "a.csv::1"]

    def test_folder_prefix_does_not_match_sibling_names(self):
        deck = build_deck([("ab/x.csv", "q,a"), ("a/y.csv", "q,a")])
        assert [c.path for c in select_scope(deck, "a")] == ["a/y.csv"]

    def test_unknown_key_is_empty(self, deck):
        assert select_scope(deck, "nope") == []


class TestScopeOptions:

    def test_lists_all_then_folders_then_files(self, deck):
        options = scope_options(deck)
        assert list(options) == [ALL_SCOPE, "b", "b/c", "a.csv", "b/c/deep.csv", "b/x.csv"]
        assert "(5)" in options[ALL_SCOPE]
        assert "(3)" in options["b"]
