import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from textvec.client import reset_openai_client  # noqa: E402

from helpers import make_response, vector_for  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_client():
    reset_openai_client()
    yield
    reset_openai_client()


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    return "sk-test"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def openai_cls(mocker):
    """Patch the OpenAI class; embeddings.create echoes one vector per input."""
    cls = mocker.patch("textvec.client.OpenAI")

    def create(model, input, encoding_format):
        texts = input if isinstance(input, list) else [input]
        return make_response([vector_for(t) for t in texts])

    cls.return_value.embeddings.create.side_effect = create
    return cls


@pytest.fixture
def create(openai_cls):
    return openai_cls.return_value.embeddings.create


@pytest.fixture
def sleep(mocker):
    return mocker.patch("textvec.embeddings.time.sleep")
