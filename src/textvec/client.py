from __future__ import annotations

import logging
import os
from typing import Optional

import httpx
from openai import OpenAI

from .config import OPENAI_API_KEY_ENV, TextvecConfig, settings

logger = logging.getLogger("textvec.client")
logger.setLevel(settings.log_level)

_openai_client: Optional[OpenAI] = None
_missing_key_warned = False


def _timeout(config: TextvecConfig) -> Optional[httpx.Timeout]:
    # connect_timeout only applies on top of an explicit request timeout
    if config.request_timeout is None:
        return None
    connect = config.connect_timeout if config.connect_timeout is not None else config.request_timeout
    return httpx.Timeout(timeout=config.request_timeout, connect=connect)


def get_openai_client(config: Optional[TextvecConfig] = None) -> Optional[OpenAI]:
    """Return the process-wide OpenAI client, creating it on first use.

    Returns None when OPENAI_API_KEY is not set; embeddings are then
    disabled rather than failing.
    """
    global _openai_client, _missing_key_warned

    if _openai_client is not None:
        return _openai_client

    api_key = os.getenv(OPENAI_API_KEY_ENV)
    if not api_key:
        if not _missing_key_warned:
            logger.warning("%s not set - embeddings will not be generated", OPENAI_API_KEY_ENV)
            _missing_key_warned = True
        return None

    config = config or settings
    timeout = _timeout(config)
    if timeout is not None:
        _openai_client = OpenAI(api_key=api_key, timeout=timeout)
    else:
        _openai_client = OpenAI(api_key=api_key)
    logger.debug("Created OpenAI client for embeddings")
    return _openai_client


def reset_openai_client() -> None:
    """Forget the cached client and the missing-key warning."""
    global _openai_client, _missing_key_warned
    _openai_client = None
    _missing_key_warned = False
