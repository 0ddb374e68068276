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

import os
from typing import Optional

from pydantic import BaseModel, Field

OPENAI_API_KEY_ENV = "OPENAI_API_KEY"


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


class TextvecConfig(BaseModel):
    """Configuration for the embedding client.

    The API key is not part of the config: it is looked up in the
    environment when the client is first needed.
    """

    # Model configuration
    embedding_model: str = Field(default="text-embedding-3-large", description="Embedding model to use")
    embedding_dimensions: int = Field(default=3072, description="Vector size produced by the model (not enforced)")

    # Batching
    batch_size: int = Field(default=100, ge=1, description="Maximum inputs per embeddings request")
    batch_delay: float = Field(default=0.1, ge=0.0, description="Pause between batch requests in seconds")

    # Timeout settings (None keeps the SDK defaults)
    request_timeout: Optional[float] = Field(default=None, description="Total request timeout in seconds")
    connect_timeout: Optional[float] = Field(default=None, description="Connection timeout in seconds")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @classmethod
    def from_env(cls) -> "TextvecConfig":
        """Create configuration from environment variables."""
        return cls(
            embedding_model=os.getenv("TEXTVEC_EMBEDDING_MODEL", "text-embedding-3-large"),
            embedding_dimensions=int(os.getenv("TEXTVEC_EMBEDDING_DIMENSIONS", "3072")),
            batch_size=int(os.getenv("TEXTVEC_BATCH_SIZE", "100")),
            batch_delay=float(os.getenv("TEXTVEC_BATCH_DELAY", "0.1")),
            request_timeout=_optional_float("TEXTVEC_REQUEST_TIMEOUT"),
            connect_timeout=_optional_float("TEXTVEC_CONNECT_TIMEOUT"),
            log_level=os.getenv("TEXTVEC_LOG_LEVEL", "INFO").upper(),
        )


settings = TextvecConfig.from_env()
