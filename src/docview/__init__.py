"""
docview - typed document accessors with self-provisioning view finders.

This package provides a generic CRUD accessor over a JSON document store and
named view queries ("finders") whose server-side views are created on first
scan if they do not exist yet.
"""

__version__ = "0.1.0"

from docview.accessor import GenericAccessor, open_accessor
from docview.config import StoreBackendType, StoreConfig
from docview.errors import (
    DeserializationError,
    DocviewError,
    DuplicateKeyError,
    NotFoundError,
    RemoteUnavailableError,
    SerializationError,
    UnannotatedFinderError,
)
from docview.finders import FinderExecutor, FinderSpec
from docview.serializer import EntitySerializer
from docview.store import (
    DesignDocument,
    DocumentStoreClient,
    DocumentStoreFactory,
    InMemoryDocumentStore,
    ViewDefinition,
    ViewRow,
)
from docview.views import LockingViewProvisioner, ViewCatalogCache, ViewProvisioner

__all__ = [
    # Accessor
    "GenericAccessor",
    "open_accessor",
    "FinderSpec",
    "FinderExecutor",
    "EntitySerializer",
    # Views
    "ViewProvisioner",
    "LockingViewProvisioner",
    "ViewCatalogCache",
    # Store
    "DocumentStoreClient",
    "DocumentStoreFactory",
    "InMemoryDocumentStore",
    "DesignDocument",
    "ViewDefinition",
    "ViewRow",
    # Config
    "StoreConfig",
    "StoreBackendType",
    # Errors
    "DocviewError",
    "NotFoundError",
    "DuplicateKeyError",
    "SerializationError",
    "DeserializationError",
    "UnannotatedFinderError",
    "RemoteUnavailableError",
]
