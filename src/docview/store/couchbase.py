"""Couchbase backend for DocumentStoreClient.

Requires the optional ``couchbase`` SDK (``pip install docview[couchbase]``).
This module is imported lazily by DocumentStoreFactory so the SDK is only
loaded when the Couchbase backend is configured.

Documents are stored with the raw JSON transcoder so the accessor's
serializer owns the JSON text. Design documents live in the production
namespace. Non-stale queries use REQUEST_PLUS scan consistency.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from couchbase.auth import PasswordAuthenticator
from couchbase.cluster import Cluster
from couchbase.exceptions import (
    DesignDocumentNotFoundException,
    DocumentExistsException,
    DocumentNotFoundException,
)
from couchbase.management.views import DesignDocument as SdkDesignDocument
from couchbase.management.views import DesignDocumentNamespace
from couchbase.management.views import View as SdkView
from couchbase.options import (
    ClusterOptions,
    ClusterTimeoutOptions,
    GetOptions,
    InsertOptions,
    ReplaceOptions,
    UpsertOptions,
    ViewOptions,
)
from couchbase.transcoder import RawJSONTranscoder
from couchbase.views import ViewScanConsistency

from ..errors import DuplicateKeyError, NotFoundError, RemoteUnavailableError
from .models import NO_KEY, DesignDocument, ViewDefinition, ViewRow

if TYPE_CHECKING:
    from ..config import StoreConfig

logger = logging.getLogger(__name__)

NAMESPACE = DesignDocumentNamespace.PRODUCTION
READY_TIMEOUT = timedelta(seconds=10)


def _to_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return value


def _from_sdk_design_document(sdk_doc: SdkDesignDocument) -> DesignDocument:
    views = [
        ViewDefinition(name=name, map=view.map, reduce=view.reduce)
        for name, view in (sdk_doc.views or {}).items()
    ]
    return DesignDocument(name=sdk_doc.name, views=views)


def _to_sdk_design_document(document: DesignDocument) -> SdkDesignDocument:
    views: Dict[str, SdkView] = {
        view.name: SdkView(map=view.map, reduce=view.reduce) for view in document.views
    }
    return SdkDesignDocument(document.name, views)


class CouchbaseDocumentStore:
    """DocumentStoreClient over a Couchbase bucket's default collection."""

    def __init__(self, cluster: Any, bucket: Any, collection: Optional[Any] = None):
        self._cluster = cluster
        self._bucket = bucket
        self._collection = collection if collection is not None else bucket.default_collection()
        self._transcoder = RawJSONTranscoder()

    @classmethod
    def connect(cls, config: "StoreConfig") -> "CouchbaseDocumentStore":
        """Open a cluster connection from configuration.

        Raises:
            RemoteUnavailableError: If the cluster cannot be reached.
        """
        config.validate_for_backend()
        option_kwargs: Dict[str, Any] = {}
        if config.timeout_seconds:
            timeout = timedelta(seconds=config.timeout_seconds)
            option_kwargs["timeout_options"] = ClusterTimeoutOptions(
                kv_timeout=timeout,
                views_timeout=timeout,
                management_timeout=timeout,
            )
        options = ClusterOptions(
            PasswordAuthenticator(config.username or "", config.password or ""),
            **option_kwargs,
        )

        logger.info(f"Connecting to Couchbase at {config.connection_string}, bucket {config.bucket}")
        try:
            cluster = Cluster(config.connection_string, options)
            cluster.wait_until_ready(READY_TIMEOUT)
            bucket = cluster.bucket(config.bucket)
        except Exception as e:
            raise RemoteUnavailableError("connect", e) from e
        return cls(cluster, bucket)

    # -------------------------------------------------------------------------
    # Keyed operations
    # -------------------------------------------------------------------------

    def insert(self, key: str, content: str) -> None:
        try:
            self._collection.insert(key, content, InsertOptions(transcoder=self._transcoder))
        except DocumentExistsException:
            raise DuplicateKeyError(key) from None

    def get(self, key: str) -> str:
        try:
            result = self._collection.get(key, GetOptions(transcoder=self._transcoder))
        except DocumentNotFoundException:
            raise NotFoundError(key) from None
        return _to_text(result.value)

    def replace(self, key: str, content: str) -> None:
        try:
            self._collection.replace(key, content, ReplaceOptions(transcoder=self._transcoder))
        except DocumentNotFoundException:
            raise NotFoundError(key) from None

    def upsert(self, key: str, content: str) -> None:
        self._collection.upsert(key, content, UpsertOptions(transcoder=self._transcoder))

    def remove(self, key: str) -> None:
        try:
            self._collection.remove(key)
        except DocumentNotFoundException:
            raise NotFoundError(key) from None

    # -------------------------------------------------------------------------
    # Design document catalog
    # -------------------------------------------------------------------------

    def get_design_document(self, name: str) -> Optional[DesignDocument]:
        try:
            sdk_doc = self._bucket.view_indexes().get_design_document(name, NAMESPACE)
        except DesignDocumentNotFoundException:
            return None
        return _from_sdk_design_document(sdk_doc)

    def list_design_documents(self) -> List[DesignDocument]:
        sdk_docs = self._bucket.view_indexes().get_all_design_documents(NAMESPACE)
        return [_from_sdk_design_document(doc) for doc in sdk_docs]

    def upsert_design_document(self, document: DesignDocument) -> None:
        self._bucket.view_indexes().upsert_design_document(
            _to_sdk_design_document(document), NAMESPACE
        )

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
        option_kwargs: Dict[str, Any] = {
            "namespace": NAMESPACE,
            "scan_consistency": (
                ViewScanConsistency.UPDATE_AFTER if stale else ViewScanConsistency.REQUEST_PLUS
            ),
        }
        if key is None:
            # The SDK drops a key option set to None; ask for the null key explicitly.
            option_kwargs["keys"] = [None]
        elif key is not NO_KEY:
            option_kwargs["key"] = key

        result = self._bucket.view_query(design_document, view, ViewOptions(**option_kwargs))
        rows: List[ViewRow] = []
        for row in result.rows():
            try:
                document = self.get(row.id)
            except NotFoundError:
                # Deleted after indexing; the accessor rejects rows without content.
                document = None
            rows.append(ViewRow(id=row.id, key=row.key, value=row.value, document=document))
        return rows

    def close(self) -> None:
        logger.info("Closing Couchbase cluster connection")
        self._cluster.close()
