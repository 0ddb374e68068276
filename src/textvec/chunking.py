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
import math
import re
import uuid
from typing import List, Optional

import orjson
from pydantic import BaseModel

from .config import settings
from .embeddings import EmbeddingClient
from .similarity import Chunk

logger = logging.getLogger("textvec.chunking")
logger.setLevel(settings.log_level)

DEFAULT_MAX_TOKENS = 800

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_SENTENCE_BREAK_RE = re.compile(r"(?<=[.!?])\s+")


class ContentChunk(BaseModel):
    text: str
    heading: Optional[str] = None
    tokens: int


def estimate_tokens(text: str) -> int:
    # Rough approximation: one token per four characters
    return math.ceil(len(text) / 4)


def split_oversized_text(text: str, max_tokens: int) -> List[str]:
    """Cut ``text`` into pieces of at most ``max_tokens``, preferring spaces."""
    max_chars = max(1, max_tokens * 4)
    if len(text) <= max_chars:
        return [text]

    parts: List[str] = []
    remaining = text
    while len(remaining) > max_chars:
        split_at = remaining.rfind(" ", 0, max_chars + 1)
        if split_at <= 0:
            split_at = max_chars
        parts.append(remaining[:split_at].strip())
        remaining = remaining[split_at:].strip()

    if remaining:
        parts.append(remaining)
    return [p for p in parts if p]


def chunk_markdown(content: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> List[ContentChunk]:
    """Split markdown into chunks at headings, capping each at ``max_tokens``.

    Each chunk remembers the nearest heading above it. A single line that
    is too long on its own is cut with :func:`split_oversized_text`.
    """
    chunks: List[ContentChunk] = []
    current: List[str] = []
    heading: Optional[str] = None
    current_tokens = 0

    def flush() -> None:
        nonlocal current, current_tokens
        if current:
            text = "\n".join(current).strip()
            if text:
                chunks.append(ContentChunk(text=text, heading=heading, tokens=estimate_tokens(text)))
            current = []
            current_tokens = 0

    for line in content.split("\n"):
        match = _HEADING_RE.match(line)
        if match:
            flush()
            heading = match.group(2)
            current.append(line)
            current_tokens = estimate_tokens(line)
            continue

        line_tokens = estimate_tokens(line)
        if line_tokens > max_tokens:
            flush()
            for part in split_oversized_text(line, max_tokens):
                chunks.append(ContentChunk(text=part, heading=heading, tokens=estimate_tokens(part)))
            continue

        if current_tokens + line_tokens > max_tokens and current:
            flush()
        current.append(line)
        current_tokens += line_tokens

    flush()
    return chunks


def split_large_chunk(text: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> List[str]:
    """Split on sentence boundaries, falling back to hard cuts."""
    if estimate_tokens(text) <= max_tokens:
        return [text]

    pieces: List[str] = []
    current = ""
    current_tokens = 0
    for sentence in _SENTENCE_BREAK_RE.split(text):
        sentence_tokens = estimate_tokens(sentence)
        if current_tokens + sentence_tokens > max_tokens and current:
            pieces.append(current.strip())
            current = sentence
            current_tokens = sentence_tokens
        else:
            current += (" " if current else "") + sentence
            current_tokens += sentence_tokens

    if current:
        pieces.append(current.strip())

    if not pieces or any(estimate_tokens(p) > max_tokens for p in pieces):
        return split_oversized_text(text, max_tokens)
    return pieces


def process_content(content: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> List[ContentChunk]:
    final: List[ContentChunk] = []
    for chunk in chunk_markdown(content, max_tokens):
        if chunk.tokens <= max_tokens:
            final.append(chunk)
            continue
        for piece in split_large_chunk(chunk.text, max_tokens):
            final.append(ContentChunk(text=piece, heading=chunk.heading, tokens=estimate_tokens(piece)))
    return final


def build_chunks(
    content: str,
    *,
    memory_id: Optional[str] = None,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    client: Optional[EmbeddingClient] = None,
) -> List[Chunk]:
    """Chunk ``content`` and embed every piece in batches.

    Vectors are stored JSON-encoded. Chunks whose embedding could not be
    generated keep ``embedding_vector=None``.
    """
    pieces = process_content(content, max_tokens)
    if not pieces:
        return []

    client = client or EmbeddingClient()
    texts = [p.text for p in pieces]
    if client.available():
        vectors = client.embed_batch(texts)
    else:
        vectors = [None] * len(texts)

    chunks: List[Chunk] = []
    embedded = 0
    for piece, vector in zip(pieces, vectors):
        if vector:
            embedded += 1
        chunks.append(
            Chunk(
                id=f"chunk-{uuid.uuid4().hex}",
                text=piece.text,
                embedding_vector=orjson.dumps(vector).decode() if vector else None,
                memory_id=memory_id,
            )
        )

    logger.info("Built %d chunks (%d embedded) for memory %s", len(chunks), embedded, memory_id)
    return chunks
