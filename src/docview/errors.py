"""Error taxonomy for the document accessor layer.

Every failure an accessor operation can produce is a subclass of
DocviewError. Store backends raise NotFoundError / DuplicateKeyError for
existence conflicts so callers can tell them apart from transport failures,
which surface as RemoteUnavailableError.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional


class DocviewError(Exception):
    """Base exception for accessor and store errors."""

    pass


class NotFoundError(DocviewError):
    """No document exists at the requested key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Document not found: {key}")


class DuplicateKeyError(DocviewError):
    """A document already exists at the key targeted by create."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Document already exists: {key}")


class SerializationError(DocviewError):
    """Entity could not be converted to JSON."""

    def __init__(self, type_name: str, cause: Optional[BaseException] = None):
        self.type_name = type_name
        self.cause = cause
        message = f"Cannot convert {type_name} to JSON"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class DeserializationError(SerializationError):
    """Stored JSON payload does not parse into the entity type."""

    def __init__(
        self,
        type_name: str,
        payload: Any,
        cause: Optional[BaseException] = None,
    ):
        self.type_name = type_name
        self.payload = payload
        self.cause = cause
        DocviewError.__init__(
            self, f"Cannot convert JSON: {payload!r} to {type_name}"
        )


class UnannotatedFinderError(DocviewError):
    """A finder was invoked that has no cached view."""

    def __init__(self, finder_name: str):
        self.finder_name = finder_name
        super().__init__(
            f"'{finder_name}' is not declared as a finder "
            "(register it and rebuild the view cache before dispatch)"
        )


class RemoteUnavailableError(DocviewError):
    """Store catalog, keyed operation or query failed for transport/server reasons."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"Store call failed during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


@contextmanager
def remote_call(operation: str) -> Iterator[None]:
    """Wrap a store call so driver failures surface as RemoteUnavailableError.

    Errors that already belong to the taxonomy pass through untouched.
    """
    try:
        yield
    except DocviewError:
        raise
    except Exception as e:
        raise RemoteUnavailableError(operation, e) from e
