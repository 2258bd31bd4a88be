"""
Tests for deck building and concurrent document reads.
"""

import asyncio
import itertools
import threading

import pytest

from flashstudy.exceptions import EmptyDeck, NoInputFiles, ReadFailure
from flashstudy.services.deck_service import build_deck, load_deck
from flashstudy.services.source_service import (
    FileSource,
    FolderSource,
    MemorySource,
    read_documents,
)


class FlakySource(MemorySource):
    """Fails the reads of the given paths, after yielding to the loop."""

    def __init__(self, documents, failing):
        super().__init__(documents)
        self.failing = set(failing)

    async def read_text(self, path):
        await asyncio.sleep(0)
        if path in self.failing:
            raise OSError(f"cannot read {path}")
        return await super().read_text(path)


class TestBuildDeck:

    def test_canonical_order(self, deck):
        assert deck.ids == [
            "a.csv::0",
            "a.csv::1",
            "b/c/deep.csv::0",
            "b/x.csv::0",
            "b/x.csv::1",
        ]

    def test_root_file_sorts_before_folder(self):
        deck = build_deck([("b/x.csv", "q,a"), ("a.csv", "q,a")])
        assert [c.path for c in deck] == ["a.csv", "b/x.csv"]

    def test_order_is_case_insensitive(self):
        deck = build_deck([("b.csv", "q,a"), ("A.csv", "q,a"), ("c.csv", "q,a")])
        assert deck.paths == ["A.csv", "b.csv", "c.csv"]

    def test_order_independent_of_input_order(self, documents):
        """Every permutation of the input yields the same deck."""
        expected = build_deck(documents).ids
        for permutation in itertools.permutations(documents):
            assert build_deck(permutation).ids == expected

    def test_documents_without_cards_do_not_count_as_paths(self):
        deck = build_deck([("a.csv", "q,a"), ("empty.csv", "nothing here")])
        assert deck.paths == ["a.csv"]

    def test_all_empty_documents_raise(self):
        with pytest.raises(EmptyDeck) as exc:
            build_deck([("a.csv", "foo\n"), ("b.csv", "")])
        assert exc.value.document_count == 2

    def test_no_documents_raise(self):
        with pytest.raises(EmptyDeck):
            build_deck([])

    def test_lookup_by_id(self, deck):
        card = deck.get("b/x.csv::1")
        assert card.front == "Red planet"
        assert deck.get("missing::0") is None
        assert "a.csv::0" in deck


class TestReadDocuments:

    def test_memory_source_decodes_bytes_and_filters_names(self):
        source = MemorySource({"a.CSV": "q,a".encode("utf-8-sig"), "notes.txt": "x,y"})
        documents = asyncio.run(read_documents(source))
        assert documents == [("a.CSV", "q,a")]

    def test_no_csv_entries_raise(self):
        with pytest.raises(NoInputFiles):
            asyncio.run(read_documents(MemorySource({"readme.md": "x"})))

    def test_one_failure_aborts_whole_batch(self):
        source = FlakySource({"a.csv": "q,a", "b.csv": "q,a", "c.csv": "q,a"}, failing=["b.csv", "c.csv"])
        with pytest.raises(ReadFailure) as exc:
            asyncio.run(load_deck(source))
        assert sorted(exc.value.failures) == ["b.csv", "c.csv"]

    def test_load_deck_joins_all_reads(self, documents):
        deck = asyncio.run(load_deck(FlakySource(dict(documents), failing=[])))
        assert deck.ids == build_deck(documents).ids

    def test_folder_source_uses_relative_posix_paths(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "one.csv").write_text("q,a\n", encoding="utf-8")
        (tmp_path / "Two.CSV").write_text("q2,a2\n", encoding="utf-8")
        (tmp_path / "skip.txt").write_text("q,a\n", encoding="utf-8")

        deck = asyncio.run(load_deck(FolderSource(tmp_path)))
        assert deck.paths == ["sub/one.csv", "Two.CSV"]

    @pytest.mark.parametrize("root", ["", "   "])
    def test_blank_folder_does_not_mean_working_directory(self, root, tmp_path, monkeypatch):
        (tmp_path / "stray.csv").write_text("q,a\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert FolderSource(root).list_paths() == []
        with pytest.raises(NoInputFiles):
            asyncio.run(read_documents(FolderSource(root)))

    def test_listing_runs_off_the_event_loop_thread(self):
        """Folder walks hit the disk, so they must not stall the loop."""
        seen = {}

        class RecordingSource(MemorySource):
            def list_paths(self):
                seen["thread"] = threading.get_ident()
                return super().list_paths()

        async def run():
            seen["loop"] = threading.get_ident()
            return await read_documents(RecordingSource({"a.csv": "q,a"}))

        assert asyncio.run(run()) == [("a.csv", "q,a")]
        assert seen["thread"] != seen["loop"]

    def test_missing_folder_has_no_input(self, tmp_path):
        with pytest.raises(NoInputFiles):
            asyncio.run(load_deck(FolderSource(tmp_path / "nope")))

    def test_file_source_uses_bare_names(self, tmp_path):
        target = tmp_path / "deep" / "cards.csv"
        target.parent.mkdir()
        target.write_text("q,a", encoding="utf-8")

        deck = asyncio.run(load_deck(FileSource([target])))
        assert deck.ids == ["cards.csv::0"]
