"""Generic typed accessor over a JSON document store.

GenericAccessor binds one entity type to one store client. It offers CRUD by
caller-supplied id and executes registered finders through the view catalog
cache.

Usage:
    from docview import FinderSpec, GenericAccessor, InMemoryDocumentStore

    accessor = GenericAccessor(
        User,
        store,
        finders={"findByStatus": FinderSpec('doc.status == "ACTIVE"')},
    )
    accessor.rebuild_views()

    accessor.create("42", user)
    user = accessor.read("42").result()
    active = accessor.invoke_finder("findByStatus")
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from types import MappingProxyType
from typing import Any, Generic, List, Mapping, Optional, Type, TypeVar

from .config import StoreConfig
from .errors import DeserializationError, UnannotatedFinderError, remote_call
from .finders import FinderSpec
from .naming import design_document_name, entity_name_of, make_key
from .serializer import EntitySerializer
from .store.models import NO_KEY
from .store.protocol import DocumentStoreClient
from .views import LockingViewProvisioner, ViewCatalogCache, ViewProvisioner

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GenericAccessor(Generic[T]):
    """Typed CRUD plus finder access for one entity type.

    Args:
        entity_type: Entity class (pydantic model, dataclass, ...).
        store: Store client the accessor operates on.
        finders: Finder name -> FinderSpec, fixed for the accessor's lifetime.
        entity_name: Overrides the entity type's ``__name__``.
        executor: Executor for read(); a thread pool is created if omitted.
        read_workers: Size of the thread pool created when executor is None.
        provisioner: Custom view provisioner.
        harden_provisioning: Use LockingViewProvisioner (ignored when a
            provisioner is given).
    """

    def __init__(
        self,
        entity_type: Type[T],
        store: DocumentStoreClient,
        finders: Optional[Mapping[str, FinderSpec]] = None,
        *,
        entity_name: Optional[str] = None,
        executor: Optional[Executor] = None,
        read_workers: int = 4,
        provisioner: Optional[ViewProvisioner] = None,
        harden_provisioning: bool = False,
    ):
        self.entity_type = entity_type
        self.store = store
        self._entity_name = entity_name_of(entity_type, entity_name)
        self._serializer: EntitySerializer[T] = EntitySerializer(entity_type, self._entity_name)
        self._finders = MappingProxyType(dict(finders or {}))

        if provisioner is None:
            provisioner_cls = LockingViewProvisioner if harden_provisioning else ViewProvisioner
            provisioner = provisioner_cls(store, self.design_document_name)
        self._views = ViewCatalogCache(provisioner)

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=read_workers,
            thread_name_prefix=f"docview-{self._entity_name.lower()}",
        )

    @property
    def entity_name(self) -> str:
        return self._entity_name

    @property
    def design_document_name(self) -> str:
        return design_document_name(self._entity_name)

    @property
    def finders(self) -> Mapping[str, FinderSpec]:
        return self._finders

    @property
    def views(self) -> ViewCatalogCache:
        return self._views

    def make_key(self, doc_id: str) -> str:
        return make_key(self._entity_name, doc_id)

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def create(self, doc_id: str, entity: T) -> None:
        """Insert a new document.

        Raises:
            DuplicateKeyError: If a document already exists at the key.
            SerializationError: If the entity cannot be converted to JSON.
        """
        logger.info(f"Create: {self._entity_name}")
        key = self.make_key(doc_id)
        content = self._serializer.serialize(entity)
        with remote_call(f"insert({key})"):
            self.store.insert(key, content)

    def read(self, doc_id: str) -> "Future[T]":
        """Look up a document without blocking the caller.

        The returned future completes once, with the entity or with
        NotFoundError, DeserializationError or RemoteUnavailableError.
        """
        logger.info(f"Reading: {self._entity_name}")
        return self._executor.submit(self._read_document, doc_id)

    def _read_document(self, doc_id: str) -> T:
        key = self.make_key(doc_id)
        with remote_call(f"get({key})"):
            content = self.store.get(key)
        return self._serializer.deserialize(content)

    def update(self, doc_id: str, entity: T) -> None:
        """Replace an existing document.

        Raises:
            NotFoundError: If no document exists at the key.
            SerializationError: If the entity cannot be converted to JSON.
        """
        logger.info(f"Updating: {self._entity_name}")
        key = self.make_key(doc_id)
        content = self._serializer.serialize(entity)
        with remote_call(f"replace({key})"):
            self.store.replace(key, content)

    def delete(self, doc_id: str) -> None:
        """Remove a document.

        Raises:
            NotFoundError: If no document exists at the key.
        """
        logger.info(f"Delete: {self._entity_name}")
        key = self.make_key(doc_id)
        with remote_call(f"remove({key})"):
            self.store.remove(key)

    def set(self, doc_id: str, entity: T) -> None:
        """Create or replace a document."""
        logger.info(f"Set: {self._entity_name}")
        key = self.make_key(doc_id)
        content = self._serializer.serialize(entity)
        with remote_call(f"upsert({key})"):
            self.store.upsert(key, content)

    # -------------------------------------------------------------------------
    # Finders
    # -------------------------------------------------------------------------

    def rebuild_views(self) -> None:
        """Resolve (creating where absent) the view of every registered finder.

        Must run before any finder is invoked, and before concurrent use.
        """
        self._views.rebuild(self._finders)

    cache_views = rebuild_views

    def invoke_finder(self, name: str, *args: Any) -> List[T]:
        """Execute a registered finder.

        Args:
            name: Finder name.
            *args: Optional key. One argument filters on that key, several
                form a compound key.

        Returns:
            Entities in store order.

        Raises:
            UnannotatedFinderError: If the finder has no cached view.
            DeserializationError: If any row fails to parse; no partial
                results are returned.
            RemoteUnavailableError: If the query fails.
        """
        view = self._views.get(name)
        if view is None:
            raise UnannotatedFinderError(name)

        key: Any = NO_KEY
        if len(args) == 1:
            key = args[0]
        elif args:
            key = list(args)

        with remote_call(f"query({self.design_document_name}/{view.name})"):
            rows = self.store.query(self.design_document_name, view.name, stale=False, key=key)

        results: List[T] = []
        for row in rows:
            if row.document is None:
                raise DeserializationError(self._entity_name, None)
            results.append(self._serializer.deserialize(row.document))
        logger.debug(f"Finder {name} returned {len(results)} {self._entity_name}(s)")
        return results

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Shut down the read executor if this accessor created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "GenericAccessor[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_accessor(
    entity_type: Type[T],
    store: DocumentStoreClient,
    finders: Optional[Mapping[str, FinderSpec]] = None,
    config: Optional[StoreConfig] = None,
    **kwargs: Any,
) -> GenericAccessor[T]:
    """Build an accessor from config settings and scan its finders.

    Raises:
        RemoteUnavailableError: If view provisioning fails.
    """
    config = config or StoreConfig()
    kwargs.setdefault("read_workers", config.read_workers)
    kwargs.setdefault("harden_provisioning", config.harden_provisioning)
    accessor = GenericAccessor(entity_type, store, finders, **kwargs)
    try:
        accessor.rebuild_views()
    except Exception:
        accessor.close()
        raise
    return accessor
