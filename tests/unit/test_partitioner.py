"""Unit tests for splitting notes into tagged and untagged record sets."""

from __future__ import annotations

from src.models.vector_store import MetadataRecordSet, PlainRecordSet
from src.services.sync.partitioner import prepare_notes, tag_metadata
from tests.conftest import make_note


class TestTagMetadata:
    def test_prefixes_every_tag(self) -> None:
        assert tag_metadata(["project", "active"]) == {"tag:project": True, "tag:active": True}

    def test_no_tags_gives_empty_mapping(self) -> None:
        assert tag_metadata([]) == {}

    def test_duplicate_tags_collapse(self) -> None:
        assert tag_metadata(["a", "a"]) == {"tag:a": True}


class TestPrepareNotes:
    def test_splits_by_presence_of_tags(self) -> None:
        prepared = prepare_notes(
            [
                make_note("a.md", content="A", tags=["x"]),
                make_note("b.md", content="B"),
                make_note("c.md", content="C", tags=["y", "z"]),
            ]
        )

        assert isinstance(prepared.with_metadata, MetadataRecordSet)
        assert isinstance(prepared.without_metadata, PlainRecordSet)
        assert prepared.with_metadata.ids == ("a.md", "c.md")
        assert prepared.with_metadata.documents == ("A", "C")
        assert prepared.with_metadata.metadatas == (
            {"tag:x": True},
            {"tag:y": True, "tag:z": True},
        )
        assert prepared.without_metadata.ids == ("b.md",)
        assert prepared.without_metadata.documents == ("B",)

    def test_preserves_relative_order(self) -> None:
        notes = [make_note(f"n{i}.md", tags=["t"] if i % 2 else []) for i in range(8)]
        prepared = prepare_notes(notes)

        assert prepared.with_metadata.ids == ("n1.md", "n3.md", "n5.md", "n7.md")
        assert prepared.without_metadata.ids == ("n0.md", "n2.md", "n4.md", "n6.md")

    def test_all_untagged(self) -> None:
        prepared = prepare_notes([make_note("a.md"), make_note("b.md")])
        assert len(prepared.with_metadata) == 0
        assert len(prepared.without_metadata) == 2

    def test_all_tagged(self) -> None:
        prepared = prepare_notes([make_note("a.md", tags=["x"])])
        assert len(prepared.with_metadata) == 1
        assert len(prepared.without_metadata) == 0

    def test_every_note_lands_in_exactly_one_set(self) -> None:
        notes = [make_note(f"n{i}.md", tags=["t"] * (i % 3)) for i in range(10)]
        prepared = prepare_notes(notes)

        ids = set(prepared.with_metadata.ids) | set(prepared.without_metadata.ids)
        assert len(prepared.with_metadata) + len(prepared.without_metadata) == 10
        assert ids == {note.path for note in notes}

    def test_empty_input(self) -> None:
        prepared = prepare_notes([])
        assert len(prepared.with_metadata) == 0
        assert len(prepared.without_metadata) == 0

    def test_is_deterministic(self) -> None:
        notes = [make_note("a.md", tags=["x"]), make_note("b.md")]
        assert prepare_notes(notes) == prepare_notes(notes)
