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
import os
import time
from typing import List, Optional, Sequence

from .client import get_openai_client
from .config import OPENAI_API_KEY_ENV, TextvecConfig, settings

logger = logging.getLogger("textvec.embeddings")
logger.setLevel(settings.log_level)

Embedding = List[float]


class EmbeddingClient:
    """Generates embeddings through the shared OpenAI client.

    Every failure is logged and turned into ``None``; callers treat a
    missing vector as "no embedding available".
    """

    def __init__(self, config: Optional[TextvecConfig] = None):
        config = config or settings
        self.config = config
        self.model = config.embedding_model

    @staticmethod
    def available() -> bool:
        return bool(os.getenv(OPENAI_API_KEY_ENV))

    def embed(self, text: str) -> Optional[Embedding]:
        client = get_openai_client(self.config)
        if client is None:
            return None

        try:
            resp = client.embeddings.create(
                model=self.model,
                input=text,
                encoding_format="float",
            )
            return resp.data[0].embedding
        except Exception as e:
            logger.error("Error generating embedding: %s", e)
            return None

    def embed_batch(self, texts: Sequence[str], batch_size: Optional[int] = None) -> List[Optional[Embedding]]:
        """Embed ``texts`` in sequential chunks of at most ``batch_size``.

        The result always has one entry per input. A failed chunk yields
        ``None`` for each of its positions and does not affect the others.
        A fixed pause separates consecutive requests.
        """
        batch_size = self.config.batch_size if batch_size is None else batch_size
        if batch_size < 1:
            raise ValueError(f"batch_size must be a positive integer, got {batch_size}")

        client = get_openai_client(self.config)
        if client is None:
            return [None] * len(texts)

        embeddings: List[Optional[Embedding]] = []
        for start in range(0, len(texts), batch_size):
            batch = list(texts[start:start + batch_size])
            end = start + len(batch)
            try:
                resp = client.embeddings.create(
                    model=self.model,
                    input=batch,
                    encoding_format="float",
                )
                vectors = [d.embedding for d in resp.data]
                if len(vectors) != len(batch):
                    raise ValueError(f"expected {len(batch)} embeddings, got {len(vectors)}")
                embeddings.extend(vectors)
            except Exception as e:
                logger.error("Error generating embeddings for batch %d-%d: %s", start, end, e)
                embeddings.extend([None] * len(batch))

            if end < len(texts):
                time.sleep(self.config.batch_delay)

        return embeddings


# Module-level facade over a single default instance
_embedding = EmbeddingClient()


def generate_embedding(text: str) -> Optional[Embedding]:
    return _embedding.embed(text)


def generate_embeddings_batch(texts: Sequence[str], batch_size: int = 100) -> List[Optional[Embedding]]:
    return _embedding.embed_batch(texts, batch_size)


def are_embeddings_available() -> bool:
    """True when OPENAI_API_KEY is currently set."""
    return EmbeddingClient.available()
