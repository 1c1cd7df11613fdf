"""In-memory document store.

Thread-safe reference backend implementing DocumentStoreClient. View map
functions are not executed; a ViewEvaluator callable decides which keys each
document emits for a view. The default evaluator emits the document id for
every document in the design document's key namespace.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..errors import DuplicateKeyError, NotFoundError, RemoteUnavailableError
from ..naming import KEY_SEPARATOR
from .models import NO_KEY, DesignDocument, ViewDefinition, ViewRow

logger = logging.getLogger(__name__)

# (design_document, view, doc, meta) -> emitted keys
ViewEvaluator = Callable[[str, ViewDefinition, Dict[str, Any], Dict[str, Any]], Iterable[Any]]


def namespace_evaluator(
    design_document: str,
    view: ViewDefinition,
    doc: Dict[str, Any],
    meta: Dict[str, Any],
) -> Iterable[Any]:
    """Emit ``meta.id`` for every document keyed under the design document's entity."""
    if meta["id"].startswith(f"{design_document}{KEY_SEPARATOR}"):
        yield meta["id"]


def collation_key(value: Any) -> Tuple:
    """Sort key following view collation: null, booleans, numbers, strings, arrays, objects."""
    if value is None:
        return (0,)
    if isinstance(value, bool):
        return (1, value)
    if isinstance(value, (int, float)):
        return (2, value)
    if isinstance(value, str):
        return (3, value)
    if isinstance(value, (list, tuple)):
        return (4, tuple(collation_key(item) for item in value))
    if isinstance(value, dict):
        return (5, tuple((k, collation_key(v)) for k, v in sorted(value.items())))
    return (6, repr(value))


class InMemoryDocumentStore:
    """Process-local document store with a design-document catalog."""

    def __init__(self, evaluator: Optional[ViewEvaluator] = None):
        self._evaluator = evaluator or namespace_evaluator
        self._documents: Dict[str, str] = {}
        self._design_documents: Dict[str, DesignDocument] = {}
        self._lock = threading.RLock()
        self._closed = False

    # -------------------------------------------------------------------------
    # Keyed operations
    # -------------------------------------------------------------------------

    def insert(self, key: str, content: str) -> None:
        with self._lock:
            self._ensure_open(f"insert({key})")
            if key in self._documents:
                raise DuplicateKeyError(key)
            self._documents[key] = content

    def get(self, key: str) -> str:
        with self._lock:
            self._ensure_open(f"get({key})")
            try:
                return self._documents[key]
            except KeyError:
                raise NotFoundError(key) from None

    def replace(self, key: str, content: str) -> None:
        with self._lock:
            self._ensure_open(f"replace({key})")
            if key not in self._documents:
                raise NotFoundError(key)
            self._documents[key] = content

    def upsert(self, key: str, content: str) -> None:
        with self._lock:
            self._ensure_open(f"upsert({key})")
            self._documents[key] = content

    def remove(self, key: str) -> None:
        with self._lock:
            self._ensure_open(f"remove({key})")
            try:
                del self._documents[key]
            except KeyError:
                raise NotFoundError(key) from None

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._documents)

    # -------------------------------------------------------------------------
    # Design document catalog
    # -------------------------------------------------------------------------

    def get_design_document(self, name: str) -> Optional[DesignDocument]:
        with self._lock:
            self._ensure_open(f"get_design_document({name})")
            stored = self._design_documents.get(name)
            # Callers mutate what they get back; hand out copies.
            return stored.copy() if stored is not None else None

    def list_design_documents(self) -> List[DesignDocument]:
        with self._lock:
            self._ensure_open("list_design_documents")
            return [self._design_documents[name].copy() for name in sorted(self._design_documents)]

    def upsert_design_document(self, document: DesignDocument) -> None:
        with self._lock:
            self._ensure_open(f"upsert_design_document({document.name})")
            self._design_documents[document.name] = document.copy()
        logger.debug(f"Stored design document {document.name} with {len(document.views)} view(s)")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def query(
        self,
        design_document: str,
        view: str,
        *,
        stale: bool = False,
        key: Any = NO_KEY,
    ) -> List[ViewRow]:
        """Evaluate a view over the current documents.

        The index is always rebuilt on query, so ``stale`` has no effect here.

        Raises:
            NotFoundError: If the design document or view does not exist.
            RemoteUnavailableError: If the store has been closed.
        """
        with self._lock:
            self._ensure_open(f"query({design_document}/{view})")
            ddoc = self._design_documents.get(design_document)
            definition = ddoc.find_view(view) if ddoc is not None else None
            if definition is None:
                raise NotFoundError(f"_design/{design_document}/_view/{view}")
            documents = dict(self._documents)

        rows: List[ViewRow] = []
        for doc_id, content in documents.items():
            try:
                doc = json.loads(content)
            except json.JSONDecodeError:
                # Map functions skip documents that are not JSON objects.
                doc = None
            meta = {"id": doc_id, "type": "json" if doc is not None else "base64"}
            for emitted in self._evaluator(design_document, definition, doc, meta):
                if key is not NO_KEY and emitted != key:
                    continue
                rows.append(ViewRow(id=doc_id, key=emitted, document=content))

        rows.sort(key=lambda row: (collation_key(row.key), row.id))
        return rows

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise RemoteUnavailableError(operation, RuntimeError("store is closed"))

    def close(self) -> None:
        """Close the store; every later operation raises RemoteUnavailableError."""
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed
