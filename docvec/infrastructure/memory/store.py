from __future__ import annotations

import threading
from typing import Dict, List, Optional

from ...domain.errors import DuplicateIdError, InvalidInputError
from ...domain.interfaces import DocumentStore
from ...domain.models import DocumentRecord


class InMemoryDocumentStore(DocumentStore):
    """Process-local document store for development and tests.

    Same contract as the Qdrant store: the first insert fixes the dimension unless one is
    given up front, and duplicates are overwritten or rejected according to ``policy``.
    """

    def __init__(self, dim: Optional[int] = None, policy: str = "overwrite") -> None:
        if policy not in {"overwrite", "reject"}:
            raise ValueError(f"Unknown duplicate policy: {policy}")
        self._dim = dim
        self._policy = policy
        self._records: Dict[str, DocumentRecord] = {}
        self._lock = threading.Lock()

    def dimension(self) -> Optional[int]:
        return self._dim

    def insert(self, record: DocumentRecord) -> None:
        with self._lock:
            if self._dim is None:
                self._dim = record.dim
            elif record.dim != self._dim:
                raise InvalidInputError(
                    f"Embedding for '{record.id}' has dimension {record.dim}, store expects {self._dim}"
                )
            if self._policy == "reject" and record.id in self._records:
                raise DuplicateIdError(f"Document '{record.id}' already exists")
            self._records[record.id] = record

    def list_all(self) -> List[DocumentRecord]:
        with self._lock:
            return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)
