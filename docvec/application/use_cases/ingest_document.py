from __future__ import annotations

from ..dto import IngestRequest, IngestResponse
from ...domain.errors import InvalidInputError
from ...domain.interfaces import EmbeddingService, DocumentStore
from ...domain.models import DocumentRecord
from ...infrastructure.logging import get_logger

logger = get_logger("docvec.application.ingest")


class IngestDocumentUseCase:
    """Use-case: embed extracted text and persist it as one DocumentRecord.

    Nothing is persisted when embedding fails. Cleanup of source files is the caller's job.
    """

    def __init__(self, embeddings: EmbeddingService, store: DocumentStore) -> None:
        self._emb = embeddings
        self._store = store

    def execute(self, req: IngestRequest) -> IngestResponse:
        doc_id = (req.document_id or "").strip()
        if not doc_id:
            raise InvalidInputError("Document id cannot be empty")
        text = req.text or ""

        vec = self._emb.embed(text)
        record = DocumentRecord(id=doc_id, embedding=list(vec.values), content=text)
        self._store.insert(record)

        logger.info("Ingested | id=%s | dim=%d | chars=%d", doc_id, record.dim, len(text))
        return IngestResponse(document_id=doc_id, dim=record.dim, content_len=len(text))
