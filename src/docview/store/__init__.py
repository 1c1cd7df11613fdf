"""Document store abstraction layer.

Usage:
    from docview.store import DocumentStoreFactory, InMemoryDocumentStore
    from docview.config import StoreConfig

    store = DocumentStoreFactory.create_store(StoreConfig.from_env())

    store.upsert("USER:42", '{"name": "Ada"}')
    raw = store.get("USER:42")

    ddoc = store.get_design_document("USER")
    rows = store.query("USER", "findByStatus", stale=False)

Note: CouchbaseDocumentStore is lazy-loaded to avoid importing the couchbase
SDK unless it is used.
"""

from .factory import DocumentStoreFactory
from .memory import InMemoryDocumentStore, ViewEvaluator, collation_key, namespace_evaluator
from .models import NO_KEY, DesignDocument, ViewDefinition, ViewRow
from .protocol import (
    DesignDocumentCatalog,
    DocumentStoreClient,
    KeyValueStore,
    ViewQueryExecutor,
)


def __getattr__(name: str):
    """Lazy-load the Couchbase backend."""
    if name == "CouchbaseDocumentStore":
        from .couchbase import CouchbaseDocumentStore
        return CouchbaseDocumentStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Protocols
    "DocumentStoreClient",
    "KeyValueStore",
    "DesignDocumentCatalog",
    "ViewQueryExecutor",
    # Models
    "DesignDocument",
    "ViewDefinition",
    "ViewRow",
    "NO_KEY",
    # Backends
    "InMemoryDocumentStore",
    "ViewEvaluator",
    "namespace_evaluator",
    "collation_key",
    "CouchbaseDocumentStore",
    # Factory
    "DocumentStoreFactory",
]
