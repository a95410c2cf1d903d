from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EnsureCollectionRequest:
    dim: Optional[int] = None
    recreate: bool = False


@dataclass(frozen=True)
class IngestRequest:
    document_id: str
    text: str


@dataclass(frozen=True)
class IngestResponse:
    document_id: str
    dim: int
    content_len: int


@dataclass(frozen=True)
class QueryRequest:
    query: str
    generate_answer: bool = True


@dataclass(frozen=True)
class SearchRequest:
    query: str
    k: int = 5
