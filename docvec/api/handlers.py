from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Any, Dict, Optional

from pypdf.errors import PyPdfError

from ..infrastructure.logging import get_logger
from ..infrastructure.providers import build_embedding_service
from ..infrastructure.qdrant.client import QdrantDocumentStore
from ..infrastructure.openai.client import build_answer_generator
from ..ingestion.pdf_loader import document_id_for, extract_pdf_text
from ..domain.errors import (
    DependencyTimeoutError,
    EmbeddingUnavailableError,
    InvalidInputError,
    StoreFailureError,
)
from ..domain.interfaces import AnswerGenerator, DocumentStore, EmbeddingService
from ..domain.models import NoMatch
from ..application.dto import IngestRequest, QueryRequest
from ..application.use_cases.ingest_document import IngestDocumentUseCase
from ..application.use_cases.retrieve_document import RetrieveDocumentUseCase

logger = get_logger("docvec.api")

REQUEST_ERRORS = (InvalidInputError, EmbeddingUnavailableError, StoreFailureError, DependencyTimeoutError)


def _embedding_service() -> EmbeddingService:
    return build_embedding_service()


def _document_store() -> DocumentStore:
    return QdrantDocumentStore()


def _answer_generator() -> Optional[AnswerGenerator]:
    return build_answer_generator()


def _error(ex: Exception) -> Dict[str, Any]:
    return {"status": "error", "error_type": type(ex).__name__, "error": str(ex)}


def ingest_text(document_id: str, text: str) -> Dict[str, Any]:
    """Embed and store already-extracted text under ``document_id``."""
    try:
        with _document_store() as store:
            resp = IngestDocumentUseCase(_embedding_service(), store).execute(
                IngestRequest(document_id=document_id, text=text)
            )
    except REQUEST_ERRORS as ex:
        logger.error("Ingest failed | id=%s | %s: %s", document_id, type(ex).__name__, ex)
        return _error(ex)
    return {
        "status": "ok",
        "message": "Embedding saved successfully",
        "document_id": resp.document_id,
        "dim": resp.dim,
    }


def upload_pdf(path: str, remove_after: bool = True) -> Dict[str, Any]:
    """Extract text from an uploaded PDF and ingest it under the file name.

    The uploaded file is removed afterwards whatever the outcome, unless ``remove_after`` is False.
    """
    p = Path(path)
    try:
        try:
            text = extract_pdf_text(p)
        except (OSError, PyPdfError) as ex:
            logger.error("PDF extraction failed | path=%s | %s", p, ex)
            return _error(ex)
        return ingest_text(document_id_for(p), text)
    finally:
        if remove_after:
            with contextlib.suppress(FileNotFoundError):
                p.unlink()


def query(query_text: str, generate_answer: bool = True) -> Dict[str, Any]:
    """Return the closest stored document, its similarity and, when configured, a generated answer."""
    try:
        with _document_store() as store:
            generator = _answer_generator() if generate_answer else None
            result = RetrieveDocumentUseCase(_embedding_service(), store, generator).execute(
                QueryRequest(query=query_text, generate_answer=generate_answer)
            )
    except REQUEST_ERRORS as ex:
        logger.error("Query failed | %s: %s", type(ex).__name__, ex)
        return _error(ex)

    if isinstance(result, NoMatch):
        return {"status": "no_match", "message": "No match found", "candidates": result.candidates}
    out: Dict[str, Any] = {
        "status": "ok",
        "message": f"Closest match for your query: {result.document_id}",
        "document_id": result.document_id,
        "similarity": result.score,
        "warnings": list(result.warnings),
    }
    if result.answer is not None:
        out["response"] = result.answer
    return out
