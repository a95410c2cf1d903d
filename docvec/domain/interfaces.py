from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional
from .models import Vector, DocumentRecord


class EmbeddingService(ABC):
    """Port for embedding provider (e.g., Hugging Face inference, Ollama)."""

    @abstractmethod
    def embed(self, text: str) -> Vector:
        """Embed one text into exactly one vector.

        Raises:
            EmbeddingUnavailableError: Provider unreachable or response unusable.
            DependencyTimeoutError: Provider did not answer in time.
        """
        raise NotImplementedError

    def get_dimension(self) -> int:
        """Return embedding dimension by probing the provider."""
        return self.embed("probe").dim


class DocumentStore(ABC):
    """Port for document persistence (e.g., Qdrant).

    Stores are explicit handles: open on startup, close on shutdown.
    """

    @abstractmethod
    def insert(self, record: DocumentRecord) -> None:
        """Persist a record.

        Raises:
            InvalidInputError: Embedding length differs from the store's dimension.
            DuplicateIdError: Id exists and the store rejects duplicates.
            StoreFailureError: Write failed.
        """
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[DocumentRecord]:
        """Return a fresh snapshot of every stored record; order is not guaranteed."""
        raise NotImplementedError

    @abstractmethod
    def dimension(self) -> Optional[int]:
        """Established embedding dimension, or None for an empty store."""
        raise NotImplementedError

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    def __enter__(self) -> "DocumentStore":
        self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class CollectionManager(ABC):
    """Port for stores whose backing collection is created up front with a fixed dimension."""

    @abstractmethod
    def ensure_collection(self, dim: int, recreate: bool = False) -> None:
        """Create the collection with ``dim`` or verify the existing one.

        Raises:
            InvalidInputError: Existing dimension differs and ``recreate`` is False.
            StoreFailureError: The backend rejected the request.
        """
        raise NotImplementedError


class AnswerGenerator(ABC):
    """Port for the optional answer-generation step (text in, text out)."""

    @abstractmethod
    def generate(self, content: str, query: str) -> str:
        """Produce an answer to ``query`` grounded in ``content``.

        Raises:
            GenerationError: Provider failed or returned no answer.
            DependencyTimeoutError: Provider did not answer in time.
        """
        raise NotImplementedError
