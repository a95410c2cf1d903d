from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class Vector:
    """Embedding vector with explicit dimension.

    Fields:
        values: The numeric embedding.
        dim: Dimension; always len(values) for provider output.
    """
    values: List[float]
    dim: int


@dataclass(frozen=True)
class DocumentRecord:
    """A stored document and its embedding.

    Fields:
        id: Stable identifier derived from the ingested document's name.
        embedding: Fixed-length vector, stored as a tuple; every record in a store shares its length.
        content: Raw extracted text kept for answer generation; never used for similarity.
    """
    id: str
    embedding: Sequence[float]
    content: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "embedding", tuple(self.embedding))

    @property
    def dim(self) -> int:
        return len(self.embedding)


@dataclass(frozen=True)
class ScoredRecord:
    """A record paired with its cosine similarity to a query."""
    record: DocumentRecord
    score: float


@dataclass(frozen=True)
class QueryResult:
    """Best match for a query.

    Fields:
        document_id: Id of the matched record.
        score: Cosine similarity; within [-1, 1] for non-degenerate vectors.
        content: Matched record content, if stored.
        answer: Generated answer text; None when not requested or generation failed.
        warnings: Secondary failures that did not invalidate the match.
    """
    document_id: str
    score: float
    content: Optional[str] = None
    answer: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class NoMatch:
    """Empty retrieval result: no stored record produced a usable similarity."""
    query: str
    candidates: int = 0
