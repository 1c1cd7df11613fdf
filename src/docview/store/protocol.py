"""Document store protocol defining what the accessor layer needs from a driver.

The protocol is split the same way the accessor uses it: keyed document
operations for CRUD, a design-document catalog for view provisioning, and
view query execution for finders. DocumentStoreClient combines all three.
"""

from typing import Any, List, Optional, Protocol, runtime_checkable

from .models import NO_KEY, DesignDocument, ViewRow


@runtime_checkable
class KeyValueStore(Protocol):
    """Keyed JSON document operations.

    ``content`` is always raw JSON text.
    """

    def insert(self, key: str, content: str) -> None:
        """Create a document.

        Raises:
            DuplicateKeyError: If a document already exists at key.
        """
        ...

    def get(self, key: str) -> str:
        """Fetch the raw JSON content of a document.

        Raises:
            NotFoundError: If no document exists at key.
        """
        ...

    def replace(self, key: str, content: str) -> None:
        """Overwrite an existing document.

        Raises:
            NotFoundError: If no document exists at key.
        """
        ...

    def upsert(self, key: str, content: str) -> None:
        """Create or overwrite a document."""
        ...

    def remove(self, key: str) -> None:
        """Delete a document.

        Raises:
            NotFoundError: If no document exists at key.
        """
        ...


@runtime_checkable
class DesignDocumentCatalog(Protocol):
    """Design document catalog (read / list / create-or-update)."""

    def get_design_document(self, name: str) -> Optional[DesignDocument]:
        """Return the named design document, or None if it does not exist."""
        ...

    def list_design_documents(self) -> List[DesignDocument]:
        ...

    def upsert_design_document(self, document: DesignDocument) -> None:
        """Create or fully replace a design document."""
        ...


@runtime_checkable
class ViewQueryExecutor(Protocol):
    """View query execution."""

    def query(
        self,
        design_document: str,
        view: str,
        *,
        stale: bool = False,
        key: Any = NO_KEY,
    ) -> List[ViewRow]:
        """Query a view.

        Args:
            design_document: Design document name.
            view: View name.
            stale: When False the index is brought up to date first.
            key: Emitted key to filter rows on. NO_KEY returns every row;
                None matches rows that emitted null.

        Returns:
            Rows in index order.
        """
        ...


@runtime_checkable
class DocumentStoreClient(KeyValueStore, DesignDocumentCatalog, ViewQueryExecutor, Protocol):
    """Combined store interface used by GenericAccessor."""

    def close(self) -> None:
        """Release connections held by the client."""
        ...
