from __future__ import annotations

import contextlib
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..infrastructure.logging import get_logger
from ..infrastructure.providers import build_embedding_service
from ..infrastructure.qdrant.client import QdrantDocumentStore
from ..infrastructure.openai.client import build_answer_generator
from ..ingestion.pdf_loader import document_id_for, extract_pdf_text, pdf_paths
from ..domain.models import NoMatch, QueryResult, ScoredRecord
from ..application.dto import EnsureCollectionRequest, IngestRequest, QueryRequest, SearchRequest
from ..application.use_cases.ensure_collection import EnsureCollectionUseCase
from ..application.use_cases.ingest_document import IngestDocumentUseCase
from ..application.use_cases.retrieve_document import RetrieveDocumentUseCase
from .parsers import build_parser

logger = get_logger("docvec.cli")


def _print(data: Dict[str, Any]) -> None:
    print(json.dumps(data, indent=2))


def run(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    ns = ap.parse_args(list(argv or []))
    if not ns.cmd:
        ap.print_help()
        return 2

    try:
        emb = build_embedding_service()
        with QdrantDocumentStore(collection=_collection_arg(ns)) as store:
            return dispatch_commands(ns, emb, store)
    except Exception as ex:  # keep CLI concise and user-friendly
        _print({"status": "error", "error_type": type(ex).__name__, "error": str(ex)})
        return 3


def _collection_arg(ns) -> Optional[str]:
    return (getattr(ns, "name", None) or "").strip() or None


def dispatch_commands(ns, emb, store):
    """
    Dispatches CLI commands to the matching use case.

    Commands:
    - ensure-collection: create the collection with the model's dimension
    - ingest: embed and store text given inline or from a file
    - ingest-pdf: extract and ingest one PDF or every PDF in a directory
    - query: best match plus optional generated answer
    - search: ranked top-k matches
    """
    if ns.cmd == "ensure-collection":
        return ensure_collection(ns, emb, store)
    if ns.cmd == "ingest":
        return ingest(ns, emb, store)
    if ns.cmd == "ingest-pdf":
        return ingest_pdf(ns, emb, store)
    if ns.cmd == "query":
        return query(ns, emb, store)
    if ns.cmd == "search":
        return search(ns, emb, store)

    _print({"status": "error", "error": f"Unknown command: {ns.cmd}"})
    return 2


def ensure_collection(ns, emb, store):
    dim = EnsureCollectionUseCase(emb, store).execute(EnsureCollectionRequest(dim=ns.dim, recreate=bool(ns.recreate)))
    _print({"status": "ok", "collection": store.collection, "dimension": dim})
    return 0


def ingest(ns, emb, store):
    """Ingest text passed with --text or read from --file."""
    text = ns.text if ns.text is not None else Path(ns.file).read_text(encoding="utf-8", errors="replace")
    resp = IngestDocumentUseCase(emb, store).execute(IngestRequest(document_id=str(ns.id), text=text))
    _print({"status": "ok", "document_id": resp.document_id, "dim": resp.dim, "chars": resp.content_len})
    return 0


def ingest_pdf(ns, emb, store):
    """
    Extract and ingest PDFs, removing each file afterwards unless --keep is given.

    Every file is attempted; the exit code is 3 when any of them failed.
    """
    use_case = IngestDocumentUseCase(emb, store)
    ingested: List[str] = []
    failed: Dict[str, str] = {}
    for p in pdf_paths(Path(ns.path)):
        doc_id = document_id_for(p)
        try:
            use_case.execute(IngestRequest(document_id=doc_id, text=extract_pdf_text(p)))
            ingested.append(doc_id)
        except Exception as ex:
            logger.error("PDF ingest failed | path=%s | %s: %s", p, type(ex).__name__, ex)
            failed[doc_id] = f"{type(ex).__name__}: {ex}"
        finally:
            if not ns.keep:
                with contextlib.suppress(FileNotFoundError):
                    p.unlink()
    logger.info("PDF ingest completed | ingested=%d | failed=%d", len(ingested), len(failed))
    _print({"status": "error" if failed else "ok", "ingested": ingested, "failed": failed})
    return 3 if failed else 0


def _serialize_result(result: QueryResult) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "status": "ok",
        "document_id": result.document_id,
        "similarity": result.score,
    }
    if result.answer is not None:
        data["response"] = result.answer
    if result.warnings:
        data["warnings"] = list(result.warnings)
    return data


def _serialize_scored(item: ScoredRecord) -> Dict[str, Any]:
    return {"document_id": item.record.id, "similarity": item.score}


def query(ns, emb, store):
    generator = None if ns.no_answer else build_answer_generator()
    result = RetrieveDocumentUseCase(emb, store, generator).execute(
        QueryRequest(query=str(ns.q), generate_answer=not ns.no_answer)
    )
    if isinstance(result, NoMatch):
        _print({"status": "no_match", "message": "No match found", "candidates": result.candidates})
        return 0
    _print(_serialize_result(result))
    return 0


def search(ns, emb, store):
    results = RetrieveDocumentUseCase(emb, store).search(SearchRequest(query=str(ns.q), k=int(ns.k)))
    _print({"status": "ok", "result": [_serialize_scored(r) for r in results]})
    return 0


def main() -> int:
    """Console entry point."""
    return run(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
