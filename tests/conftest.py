"""
Pytest configuration and fixtures for docvec tests.

Provides deterministic embedding doubles, in-memory stores and environment isolation.
"""

import hashlib
from typing import Dict, List, Optional
from unittest.mock import Mock
import pytest
import requests

from docvec.domain.errors import EmbeddingUnavailableError
from docvec.domain.interfaces import EmbeddingService
from docvec.domain.models import Vector
from docvec.infrastructure.memory.store import InMemoryDocumentStore


class StaticEmbeddingService(EmbeddingService):
    """Embedding double: fixed vectors for known texts, hash-derived vectors otherwise."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, dim: int = 8) -> None:
        self.vectors = dict(vectors or {})
        self.dim = dim
        self.calls: List[str] = []

    def embed(self, text: str) -> Vector:
        self.calls.append(text)
        if text in self.vectors:
            values = list(self.vectors[text])
        else:
            digest = hashlib.sha256(text.encode("utf-8")).digest()
            values = [(digest[i % len(digest)] - 127.5) / 127.5 for i in range(self.dim)]
        return Vector(values=values, dim=len(values))


class FailingEmbeddingService(EmbeddingService):
    """Embedding double that always fails like an unreachable provider."""

    def embed(self, text: str) -> Vector:
        raise EmbeddingUnavailableError("provider unreachable")


@pytest.fixture
def make_embeddings():
    """Factory for StaticEmbeddingService with preset text->vector mappings."""
    return StaticEmbeddingService


@pytest.fixture
def failing_embeddings():
    """Embedding service that raises EmbeddingUnavailableError on every call."""
    return FailingEmbeddingService()


@pytest.fixture
def embeddings():
    """Deterministic embedding service with no preset vectors."""
    return StaticEmbeddingService()


@pytest.fixture
def store():
    """Empty in-memory store with overwrite-on-conflict policy."""
    return InMemoryDocumentStore()


@pytest.fixture
def mock_generator():
    """Answer generator mock returning a fixed answer."""
    mock = Mock()
    mock.generate.return_value = "generated answer"
    return mock


def _response(status_code=200, json_data=None):
    r = Mock()
    r.status_code = status_code
    r.json.return_value = json_data
    if status_code >= 400:
        r.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    else:
        r.raise_for_status.return_value = None
    return r


@pytest.fixture
def make_response():
    """Factory for requests.Response-like mocks; 4xx/5xx raise on raise_for_status."""
    return _response


@pytest.fixture
def clean_environment(monkeypatch, tmp_path):
    """Clear docvec-related environment variables and run from an empty directory (no .env)."""
    for var in [
        "DOCVEC_COLLECTION",
        "QDRANT_URL",
        "EMBED_PROVIDER",
        "EMBED_MODEL",
        "HF_API_URL",
        "HF_TOKEN",
        "HUGGINGFACE_API_KEY",
        "OLLAMA_URL",
        "OPENAI_BASE_URL",
        "OPENAI_API_KEY",
        "CHAT_MODEL",
        "DOCVEC_DUPLICATE_POLICY",
        "DOCVEC_HTTP_TIMEOUT",
        "DOCVEC_SCROLL_PAGE",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "cli: mark test as CLI command test")
