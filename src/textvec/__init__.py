"""
textvec - OpenAI text embeddings with fail-soft batching
"""

import logging

from .config import TextvecConfig, settings
from .client import get_openai_client, reset_openai_client
from .embeddings import (
    EmbeddingClient,
    are_embeddings_available,
    generate_embedding,
    generate_embeddings_batch,
)
from .similarity import (
    Chunk,
    ChunkMatch,
    MemoryDocument,
    cosine_similarity,
    search_chunks,
    search_documents,
)
from .chunking import ContentChunk, build_chunks, chunk_markdown, process_content

__version__ = "0.1.0"

__all__ = [
    "TextvecConfig",
    "settings",
    "get_openai_client",
    "reset_openai_client",
    "EmbeddingClient",
    "generate_embedding",
    "generate_embeddings_batch",
    "are_embeddings_available",
    "Chunk",
    "ChunkMatch",
    "cosine_similarity",
    "MemoryDocument",
    "search_chunks",
    "search_documents",
    "ContentChunk",
    "chunk_markdown",
    "process_content",
    "build_chunks",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
