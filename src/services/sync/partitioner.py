"""Split fetched notes into tagged and untagged record sets.

Chroma rejects empty metadata mappings, so a chunk of notes is upserted as
two record sets: notes with at least one tag carry a metadata mapping of
``{"tag:<tag>": True, ...}``; notes without tags are sent with ids and
documents only.

Pure and deterministic: each output keeps the relative input order.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.models.vault import Note
from src.models.vector_store import Metadata, MetadataRecordSet, PlainRecordSet, PreparedNotes

TAG_KEY_PREFIX = "tag:"


def tag_metadata(tags: Iterable[str]) -> Metadata:
    """Map each tag to ``"tag:<tag>": True``."""
    return {f"{TAG_KEY_PREFIX}{tag}": True for tag in tags}


def prepare_notes(notes: Iterable[Note]) -> PreparedNotes:
    """Partition *notes* by whether they carry at least one tag."""
    tagged_ids, tagged_documents, metadatas = [], [], []
    plain_ids, plain_documents = [], []

    for note in notes:
        if note.tags:
            tagged_ids.append(note.path)
            tagged_documents.append(note.content)
            metadatas.append(tag_metadata(note.tags))
        else:
            plain_ids.append(note.path)
            plain_documents.append(note.content)

    return PreparedNotes(
        with_metadata=MetadataRecordSet(
            ids=tuple(tagged_ids),
            documents=tuple(tagged_documents),
            metadatas=tuple(metadatas),
        ),
        without_metadata=PlainRecordSet(ids=tuple(plain_ids), documents=tuple(plain_documents)),
    )
