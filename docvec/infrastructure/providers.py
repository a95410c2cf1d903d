from __future__ import annotations

from ..domain.interfaces import EmbeddingService
from .config import embed_provider
from .huggingface.client import HuggingFaceEmbeddingService
from .ollama.client import OllamaEmbeddingService


def build_embedding_service() -> EmbeddingService:
    """Select the embedding adapter named by EMBED_PROVIDER."""
    provider = embed_provider()
    if provider == "ollama":
        return OllamaEmbeddingService()
    if provider in {"huggingface", "hf"}:
        return HuggingFaceEmbeddingService()
    raise ValueError(f"Unknown EMBED_PROVIDER '{provider}' (expected 'huggingface' or 'ollama')")
