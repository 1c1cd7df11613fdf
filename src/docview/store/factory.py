"""Factory for creating document store clients.

Note: the Couchbase backend is imported lazily so the SDK (an optional
dependency) is only loaded when that backend is configured.
"""

from typing import TYPE_CHECKING

from ..config import StoreBackendType, StoreConfig
from .memory import InMemoryDocumentStore
from .protocol import DocumentStoreClient

if TYPE_CHECKING:
    from .couchbase import CouchbaseDocumentStore


class DocumentStoreFactory:
    """Factory for creating store clients based on config.

    Example:
        >>> config = StoreConfig(backend_type=StoreBackendType.MEMORY)
        >>> store = DocumentStoreFactory.create_store(config)
    """

    @staticmethod
    def create_store(config: StoreConfig) -> DocumentStoreClient:
        """Create a DocumentStoreClient implementation based on config.

        Args:
            config: Store configuration

        Returns:
            DocumentStoreClient implementation

        Raises:
            ValueError: If the backend type is not supported or misconfigured
            RemoteUnavailableError: If the remote store cannot be reached
        """
        config.validate_for_backend()

        if config.backend_type == StoreBackendType.MEMORY:
            return InMemoryDocumentStore()

        if config.backend_type == StoreBackendType.COUCHBASE:
            return DocumentStoreFactory.create_couchbase_store(config)

        raise ValueError(f"Unsupported backend type: {config.backend_type}")

    @staticmethod
    def create_couchbase_store(config: StoreConfig) -> "CouchbaseDocumentStore":
        # Lazy import to keep the couchbase SDK optional
        from .couchbase import CouchbaseDocumentStore

        return CouchbaseDocumentStore.connect(config)
