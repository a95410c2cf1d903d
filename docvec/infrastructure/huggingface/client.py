from __future__ import annotations

from typing import Dict, Optional
import requests

from ...domain.errors import EmbeddingUnavailableError
from ...domain.interfaces import EmbeddingService
from ...domain.models import Vector
from ..logging import get_logger
from ..timeouts import http_timeout_seconds, provider_call
from ..config import HF_DEFAULT_MODEL, hf_api_url, hf_token, embed_model
from ..vectors import first_vector, parse_vector

logger = get_logger("docvec.infrastructure.huggingface")


class HuggingFaceEmbeddingService(EmbeddingService):
    """Embedding adapter for the Hugging Face inference feature-extraction endpoint.

    One POST per call, no retries. Multi-vector responses are reduced to the first vector.
    """

    def __init__(self, session: Optional[requests.Session] = None, token: Optional[str] = None) -> None:
        self._http = session or requests.Session()
        self._token = token if token is not None else hf_token()

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"} if self._token else {}

    def embed(self, text: str) -> Vector:
        model = embed_model(HF_DEFAULT_MODEL)
        url = f"{hf_api_url()}/{model}"
        timeout = http_timeout_seconds()
        with provider_call("huggingface", EmbeddingUnavailableError, timeout):
            r = self._http.post(url, json={"inputs": text}, headers=self._headers(), timeout=timeout)
            r.raise_for_status()
            data = r.json()
        if isinstance(data, dict):
            raise EmbeddingUnavailableError(f"Hugging Face returned an error: {data.get('error', data)}")
        if isinstance(data, list) and len(data) > 1 and isinstance(data[0], list):
            logger.debug("Embedding response held %d vectors; keeping the first", len(data))
        values = parse_vector(first_vector(data))
        return Vector(values=values, dim=len(values))
