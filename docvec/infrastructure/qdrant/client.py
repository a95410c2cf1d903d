from __future__ import annotations

import threading
import uuid
from typing import Any, Dict, List, Optional
import requests

from ...domain.errors import DuplicateIdError, InvalidInputError, StoreFailureError
from ...domain.interfaces import CollectionManager, DocumentStore
from ...domain.models import DocumentRecord
from ..logging import get_logger
from ..timeouts import http_timeout_seconds, provider_call
from ..config import collection_name, duplicate_policy, qdrant_url, scroll_page_size

logger = get_logger("docvec.infrastructure.qdrant")


def point_id(document_id: str, namespace: str = "doc") -> str:
    """Deterministic UUIDv5 so re-ingesting a document id targets the same point."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{namespace}|{document_id}"))


class QdrantDocumentStore(DocumentStore, CollectionManager):
    """Document store backed by one Qdrant collection over the REST API.

    The record id and content live in the point payload; the embedding is the point vector.
    The collection's vector size is the store dimension; the first insert creates the
    collection when it does not exist yet.
    """

    def __init__(
        self,
        collection: Optional[str] = None,
        base_url: Optional[str] = None,
        policy: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.collection = collection or collection_name()
        self._base = (base_url or qdrant_url()).rstrip("/")
        self._policy = policy or duplicate_policy()
        self._http = session or requests.Session()
        self._dim: Optional[int] = None
        self._lock = threading.Lock()

    # --- lifecycle ---
    def open(self) -> None:
        self._dim = self.get_collection_dim()
        logger.info("Qdrant store opened | collection=%s | dim=%s", self.collection, self._dim)

    def close(self) -> None:
        self._http.close()

    def _url(self, suffix: str = "") -> str:
        return f"{self._base}/collections/{self.collection}{suffix}"

    def _call(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        timeout = http_timeout_seconds()
        with provider_call("qdrant", StoreFailureError, timeout):
            return self._http.request(method, url, timeout=timeout, **kwargs)

    def _json(self, resp: requests.Response) -> Dict[str, Any]:
        with provider_call("qdrant", StoreFailureError, http_timeout_seconds()):
            resp.raise_for_status()
            return resp.json() or {}

    # --- collection management ---
    def get_collection_dim(self) -> Optional[int]:
        """Return the vector size of the collection, or None when it does not exist."""
        r = self._call("GET", self._url())
        if r.status_code == 404:
            return None
        data = self._json(r)
        try:
            return int(data["result"]["config"]["params"]["vectors"]["size"])
        except (KeyError, TypeError, ValueError) as ex:
            raise StoreFailureError(f"Collection {self.collection} has no single-vector size") from ex

    def ensure_collection(self, dim: int, recreate: bool = False) -> None:
        """Ensure the collection exists with cosine distance and the expected dimension."""
        existing = self.get_collection_dim()
        if existing == dim:
            self._dim = dim
            return
        if existing is not None:
            if not recreate:
                raise InvalidInputError(f"Collection {self.collection} has size={existing}, expected={dim}")
            self._json(self._call("DELETE", self._url()))
        body = {"vectors": {"size": dim, "distance": "Cosine"}}
        self._json(self._call("PUT", self._url(), json=body))
        self._dim = dim
        logger.info("Qdrant collection ready | collection=%s | dim=%d", self.collection, dim)

    def dimension(self) -> Optional[int]:
        if self._dim is None:
            self._dim = self.get_collection_dim()
        return self._dim

    # --- records ---
    def _exists(self, pid: str) -> bool:
        r = self._call("GET", self._url(f"/points/{pid}"))
        if r.status_code == 404:
            return False
        data = self._json(r)
        return data.get("result") is not None

    def insert(self, record: DocumentRecord) -> None:
        with self._lock:
            dim = self.dimension()
            if dim is None:
                self.ensure_collection(record.dim)
            elif record.dim != dim:
                raise InvalidInputError(
                    f"Embedding for '{record.id}' has dimension {record.dim}, store expects {dim}"
                )
        pid = point_id(record.id)
        if self._policy == "reject" and self._exists(pid):
            raise DuplicateIdError(f"Document '{record.id}' already exists in {self.collection}")
        body = {
            "points": [
                {
                    "id": pid,
                    "vector": list(record.embedding),
                    "payload": {
                        "document_id": record.id,
                        "content": record.content,
                        "content_len": len(record.content or ""),
                    },
                }
            ]
        }
        self._json(self._call("PUT", self._url("/points?wait=true"), json=body))

    def list_all(self) -> List[DocumentRecord]:
        """Page through the whole collection with vectors and payloads."""
        out: List[DocumentRecord] = []
        offset: Any = None
        while True:
            body: Dict[str, Any] = {"limit": scroll_page_size(), "with_payload": True, "with_vector": True}
            if offset is not None:
                body["offset"] = offset
            r = self._call("POST", self._url("/points/scroll"), json=body)
            if r.status_code == 404:
                return []
            result = self._json(r).get("result") or {}
            for pt in result.get("points") or []:
                payload = pt.get("payload") or {}
                vector = pt.get("vector")
                if not isinstance(vector, list):
                    raise StoreFailureError(f"Point {pt.get('id')} has no unnamed vector")
                try:
                    embedding = [float(x) for x in vector]
                except (TypeError, ValueError) as ex:
                    raise StoreFailureError(f"Point {pt.get('id')} has a non-numeric vector") from ex
                out.append(
                    DocumentRecord(
                        id=str(payload.get("document_id", pt.get("id"))),
                        embedding=embedding,
                        content=payload.get("content"),
                    )
                )
            offset = result.get("next_page_offset")
            if offset is None:
                return out
