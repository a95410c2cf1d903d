from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when caller-supplied data violates a precondition (e.g., empty query, dimension mismatch)."""


class EmbeddingUnavailableError(RuntimeError):
    """Raised when the embedding provider is unreachable or returns unusable data."""


class StoreFailureError(RuntimeError):
    """Raised when the document store fails to read or write."""


class DuplicateIdError(StoreFailureError):
    """Raised on insert when the id exists and the store rejects duplicates."""


class DependencyTimeoutError(RuntimeError):
    """Raised when an external call exceeds its allotted time."""

    def __init__(self, dependency: str, timeout: float) -> None:
        super().__init__(f"{dependency} did not respond within {timeout:g}s")
        self.dependency = dependency
        self.timeout = timeout


class GenerationError(RuntimeError):
    """Raised when the answer generator fails; retrieval reports it as a warning."""
