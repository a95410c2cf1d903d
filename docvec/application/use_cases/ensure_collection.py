from __future__ import annotations

from ..dto import EnsureCollectionRequest
from ...domain.interfaces import CollectionManager, EmbeddingService


class EnsureCollectionUseCase:
    """Use-case: ensure the store's collection exists with the embedding model's dimension."""

    def __init__(self, embeddings: EmbeddingService, collections: CollectionManager) -> None:
        self._emb = embeddings
        self._collections = collections

    def execute(self, req: EnsureCollectionRequest) -> int:
        """
        Ensures the collection exists with the correct dimension.

        Uses the requested dimension or probes the embedding service, so that the
        first ingested document cannot fix a dimension the model will not produce.

        Args:
            req: Optional dimension and recreate flag.

        Returns:
            int: The dimension the collection was ensured with.
        """
        dim = int(req.dim or self._emb.get_dimension())
        self._collections.ensure_collection(dim, recreate=req.recreate)
        return dim
