# Copyright (C) 2025 neuroLM
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np
import orjson
from pydantic import BaseModel, Field

from .config import settings
from .embeddings import EmbeddingClient

logger = logging.getLogger("textvec.similarity")
logger.setLevel(settings.log_level)


class Chunk(BaseModel):
    id: str
    text: str
    # Either a vector or its JSON encoding as stored alongside the chunk
    embedding_vector: Optional[Union[List[float], str]] = None
    memory_id: Optional[str] = None


class MemoryDocument(BaseModel):
    id: str
    scope: str
    chunks: List[Chunk] = Field(default_factory=list)


class ChunkMatch(BaseModel):
    chunk_id: str
    text: str
    similarity: float
    memory_id: Optional[str] = None
    scope: Optional[str] = None


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    a_arr = np.asarray(a, dtype=np.float64)
    b_arr = np.asarray(b, dtype=np.float64)
    if a_arr.shape != b_arr.shape:
        raise ValueError("Vectors must have the same length")

    norm_a = np.linalg.norm(a_arr)
    norm_b = np.linalg.norm(b_arr)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a_arr, b_arr) / (norm_a * norm_b))


def _vector(chunk: Chunk) -> List[float]:
    raw = chunk.embedding_vector
    if isinstance(raw, str):
        raw = orjson.loads(raw)
    if not isinstance(raw, list):
        raise ValueError("embedding is not a list")
    return [float(x) for x in raw]


def _score(query_embedding: Sequence[float], chunk: Chunk) -> Optional[float]:
    try:
        return cosine_similarity(query_embedding, _vector(chunk))
    except (orjson.JSONDecodeError, TypeError, ValueError) as e:
        logger.error("Error parsing embedding for chunk %s: %s", chunk.id, e)
        return None


def search_chunks(
    query: str,
    chunks: Iterable[Chunk],
    *,
    top_k: int = 3,
    min_similarity: float = 0.5,
    scope: Optional[str] = None,
    client: Optional[EmbeddingClient] = None,
) -> List[ChunkMatch]:
    """Rank the chunks of a single memory by cosine similarity to ``query``.

    Returns an empty list when the query cannot be embedded. Chunks with
    no stored vector are ignored; unreadable ones are logged and skipped.
    """
    client = client or EmbeddingClient()
    query_embedding = client.embed(query)
    if query_embedding is None:
        return []

    results: List[ChunkMatch] = []
    for chunk in chunks:
        if not chunk.embedding_vector:
            continue
        similarity = _score(query_embedding, chunk)
        if similarity is not None and similarity >= min_similarity:
            results.append(
                ChunkMatch(
                    chunk_id=chunk.id,
                    text=chunk.text,
                    similarity=similarity,
                    memory_id=chunk.memory_id,
                    scope=scope,
                )
            )

    results.sort(key=lambda m: m.similarity, reverse=True)
    return results[:top_k]


def search_documents(
    query: str,
    documents: Iterable[MemoryDocument],
    *,
    top_k: int = 5,
    min_similarity: float = 0.5,
    client: Optional[EmbeddingClient] = None,
) -> List[ChunkMatch]:
    """Search the chunks of several memory documents at once.

    Scanning of a document stops early once ``2 * top_k`` matches are
    collected and the latest one scores above 0.8; later documents are
    still scanned.
    """
    client = client or EmbeddingClient()
    query_embedding = client.embed(query)
    if query_embedding is None:
        return []

    results: List[ChunkMatch] = []
    for doc in documents:
        for chunk in doc.chunks:
            if not chunk.embedding_vector:
                continue
            similarity = _score(query_embedding, chunk)
            if similarity is None or similarity < min_similarity:
                continue

            results.append(
                ChunkMatch(
                    chunk_id=chunk.id,
                    text=chunk.text,
                    similarity=similarity,
                    memory_id=doc.id,
                    scope=doc.scope,
                )
            )
            if len(results) >= top_k * 2 and similarity > 0.8:
                break

    results.sort(key=lambda m: m.similarity, reverse=True)
    return results[:top_k]
