from __future__ import annotations

from typing import Optional
import requests

from ...domain.errors import EmbeddingUnavailableError
from ...domain.interfaces import EmbeddingService
from ...domain.models import Vector
from ..timeouts import http_timeout_seconds, provider_call
from ..config import OLLAMA_DEFAULT_MODEL, ollama_url, embed_model
from ..vectors import parse_vector


class OllamaEmbeddingService(EmbeddingService):
    """Embedding adapter for Ollama /api/embeddings."""

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self._http = session or requests.Session()

    def embed(self, text: str) -> Vector:
        url = f"{ollama_url()}/api/embeddings"
        timeout = http_timeout_seconds()
        with provider_call("ollama", EmbeddingUnavailableError, timeout):
            r = self._http.post(url, json={"model": embed_model(OLLAMA_DEFAULT_MODEL), "prompt": text}, timeout=timeout)
            r.raise_for_status()
            data = r.json()
        if not isinstance(data, dict) or "embedding" not in data:
            raise EmbeddingUnavailableError("Ollama response has no 'embedding' field")
        values = parse_vector(data["embedding"])
        return Vector(values=values, dim=len(values))
