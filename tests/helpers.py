"""
Shared builders for fake OpenAI responses
"""

from types import SimpleNamespace


def make_response(vectors):
    """Mimic the shape of openai's CreateEmbeddingResponse."""
    return SimpleNamespace(data=[SimpleNamespace(embedding=v) for v in vectors])


def vector_for(text):
    return [float(len(text)), 1.0, 0.5]
