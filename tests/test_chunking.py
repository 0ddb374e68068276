"""
Tests for markdown chunking and chunk embedding
"""

from unittest.mock import MagicMock

import orjson

from helpers import vector_for
from textvec.chunking import (
    build_chunks,
    chunk_markdown,
    estimate_tokens,
    process_content,
    split_large_chunk,
    split_oversized_text,
)
from textvec.embeddings import EmbeddingClient


def _client(vectors, available=True):
    client = MagicMock(spec=EmbeddingClient)
    client.available.return_value = available
    client.embed_batch.return_value = vectors
    return client


class TestTokenEstimate:
    """Test cases for estimate_tokens"""

    def test_four_chars_per_token(self):
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2
        assert estimate_tokens("") == 0


class TestSplitOversizedText:
    """Test cases for split_oversized_text"""

    def test_short_text_untouched(self):
        assert split_oversized_text("short", 10) == ["short"]

    def test_prefers_spaces(self):
        assert split_oversized_text("aaaa bbbb cccc", 1) == ["aaaa", "bbbb", "cccc"]

    def test_hard_cut_without_spaces(self):
        assert split_oversized_text("abcdefghij", 1) == ["abcd", "efgh", "ij"]


class TestChunkMarkdown:
    """Test cases for chunk_markdown"""

    def test_splits_at_headings(self):
        chunks = chunk_markdown("# Title\nintro\n## Part\nbody")

        assert [c.text for c in chunks] == ["# Title\nintro", "## Part\nbody"]
        assert [c.heading for c in chunks] == ["Title", "Part"]

    def test_text_before_first_heading(self):
        chunks = chunk_markdown("preamble\n# Title\nbody")
        assert chunks[0].text == "preamble"
        assert chunks[0].heading is None

    def test_respects_token_budget(self):
        chunks = chunk_markdown("aaaaaaaa\nbbbbbbbb", max_tokens=2)
        assert [c.text for c in chunks] == ["aaaaaaaa", "bbbbbbbb"]

    def test_oversized_line_is_cut(self):
        chunks = chunk_markdown("# H\nword word word", max_tokens=2)

        assert [c.text for c in chunks] == ["# H", "word", "word", "word"]
        assert all(c.heading == "H" for c in chunks)

    def test_blank_content(self):
        assert chunk_markdown("") == []
        assert chunk_markdown("\n\n   \n") == []


class TestProcessContent:
    """Test cases for process_content and split_large_chunk"""

    def test_sentence_split(self):
        pieces = split_large_chunk("One two. Three four. Five six.", max_tokens=3)
        assert pieces == ["One two.", "Three four.", "Five six."]

    def test_long_heading_is_split(self):
        heading = "x" * 40
        chunks = process_content(f"# {heading}", max_tokens=5)

        assert len(chunks) == 3
        assert all(c.tokens <= 5 for c in chunks)
        assert all(c.heading == heading for c in chunks)


class TestBuildChunks:
    """Test cases for build_chunks"""

    def test_encodes_vectors_and_keeps_gaps(self):
        client = _client([[1.0, 2.0], None])
        chunks = build_chunks("# A\nalpha\n# B\nbeta", memory_id="mem-1", client=client)

        client.embed_batch.assert_called_once_with(["# A\nalpha", "# B\nbeta"])
        assert orjson.loads(chunks[0].embedding_vector) == [1.0, 2.0]
        assert chunks[1].embedding_vector is None
        assert all(c.memory_id == "mem-1" for c in chunks)
        assert all(c.id.startswith("chunk-") for c in chunks)
        assert chunks[0].id != chunks[1].id

    def test_unavailable_skips_embedding(self):
        client = _client([], available=False)
        chunks = build_chunks("# A\nalpha", client=client)

        client.embed_batch.assert_not_called()
        assert [c.embedding_vector for c in chunks] == [None]

    def test_empty_content(self):
        client = _client([])
        assert build_chunks("", client=client) == []
        client.embed_batch.assert_not_called()

    def test_with_default_client(self, api_key, create, sleep):
        chunks = build_chunks("# A\nalpha")

        create.assert_called_once()
        assert orjson.loads(chunks[0].embedding_vector) == vector_for("# A\nalpha")
