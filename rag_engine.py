"""
Document retrieval: hierarchical chunking + keyword-overlap scoring.

Small chunks (300 chars) are what the query is matched against; the larger
parent chunks (1500 chars) they came from are what the model receives as
context. No embeddings and no vector store: a student's notes are short
enough for term overlap to pick the right passages.

This module has ZERO Flask dependencies so it can be reused anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field

LARGE_CHUNK_SIZE = 1500
SMALL_CHUNK_SIZE = 300
CHUNK_OVERLAP = 50

TOP_SMALL_CHUNKS = 5
CONTEXT_SEPARATOR = "\n\n---\n\n"


@dataclass
class SmallChunk:
    text: str
    parent_id: int
    score: int = 0


@dataclass
class ChunkedDocument:
    large_chunks: list[str] = field(default_factory=list)
    small_chunks: list[SmallChunk] = field(default_factory=list)


def chunk_text(text: str) -> ChunkedDocument:
    """Split text into overlapping parent chunks, each split again into search chunks."""
    doc = ChunkedDocument()
    for i in range(0, len(text), LARGE_CHUNK_SIZE - CHUNK_OVERLAP):
        chunk = text[i:i + LARGE_CHUNK_SIZE]
        doc.large_chunks.append(chunk)
        parent_id = len(doc.large_chunks) - 1

        for j in range(0, len(chunk), SMALL_CHUNK_SIZE - CHUNK_OVERLAP):
            doc.small_chunks.append(SmallChunk(text=chunk[j:j + SMALL_CHUNK_SIZE], parent_id=parent_id))
    return doc


def query_terms(query: str) -> list[str]:
    return [t for t in query.lower().split() if len(t) > 2]


def score_chunks(query: str, chunks: list[SmallChunk]) -> list[SmallChunk]:
    """+1 per query term found in the chunk (case-insensitive substring match)."""
    terms = query_terms(query)
    for chunk in chunks:
        lowered = chunk.text.lower()
        chunk.score = sum(1 for term in terms if term in lowered)
    return chunks


def retrieve_context(
    query: str,
    document: str,
    max_parents: int = 3,
    fallback_chars: int = 3000,
) -> str:
    """Return the parent chunks whose search chunks best match the query.

    Falls back to the head of the document when no term matches anything.
    """
    if not document:
        return ""

    doc = chunk_text(document)
    ranked = sorted(score_chunks(query, doc.small_chunks), key=lambda c: c.score, reverse=True)

    parent_ids: list[int] = []
    for chunk in ranked[:TOP_SMALL_CHUNKS]:
        if chunk.score > 0 and chunk.parent_id not in parent_ids:
            parent_ids.append(chunk.parent_id)
    parent_ids = parent_ids[:max_parents]

    if not parent_ids:
        return document[:fallback_chars]

    return CONTEXT_SEPARATOR.join(doc.large_chunks[pid] for pid in parent_ids)
