"""Configuration for document store backends and accessors.

This module provides the configuration model used to select a store backend
(in-memory or Couchbase) and to tune accessor behavior.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class StoreBackendType(str, Enum):
    """Supported store backend types."""

    MEMORY = "memory"
    COUCHBASE = "couchbase"


_TRUE_VALUES = {"1", "true", "yes", "on"}


class StoreConfig(BaseModel):
    """Configuration for store backends and accessors.

    Attributes:
        backend_type: The store backend to use (memory, couchbase)
        connection_string: Cluster connection string (couchbase backend)
        bucket: Bucket holding documents and design documents
        username: Cluster username
        password: Cluster password
        timeout_seconds: Per-call timeout handed to the driver
        read_workers: Thread pool size for asynchronous reads
        harden_provisioning: Serialize view resolve-or-create per design document

    Example:
        >>> config = StoreConfig(
        ...     backend_type=StoreBackendType.COUCHBASE,
        ...     connection_string="couchbase://localhost",
        ...     bucket="default",
        ... )
    """

    backend_type: StoreBackendType = StoreBackendType.MEMORY

    # Couchbase backend options
    connection_string: Optional[str] = None
    bucket: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    timeout_seconds: Optional[float] = None

    # Accessor options
    read_workers: int = 4
    harden_provisioning: bool = False

    model_config = {"extra": "forbid"}

    @field_validator("read_workers")
    @classmethod
    def check_read_workers(cls, v):
        """Require at least one read worker."""
        if v < 1:
            raise ValueError("read_workers must be >= 1")
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def check_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v

    def validate_for_backend(self) -> None:
        """Validate that required options are set for the selected backend.

        Raises:
            ValueError: If required options for the backend are missing.
        """
        if self.backend_type == StoreBackendType.COUCHBASE:
            if not self.connection_string:
                raise ValueError("connection_string is required for couchbase backend")
            if not self.bucket:
                raise ValueError("bucket is required for couchbase backend")

    @classmethod
    def from_env(cls, prefix: str = "DOCVIEW_") -> "StoreConfig":
        """Create config from environment variables.

        Environment variables:
            {prefix}BACKEND_TYPE: Store backend type
            {prefix}CONNECTION_STRING: Cluster connection string
            {prefix}BUCKET: Bucket name
            {prefix}USERNAME: Cluster username
            {prefix}PASSWORD: Cluster password
            {prefix}TIMEOUT_SECONDS: Driver call timeout
            {prefix}READ_WORKERS: Read thread pool size
            {prefix}HARDEN_PROVISIONING: Lock view provisioning (true/false)

        Args:
            prefix: Environment variable prefix (default: DOCVIEW_)

        Returns:
            StoreConfig with values from environment
        """
        import os

        kwargs = {}

        backend_type = os.getenv(f"{prefix}BACKEND_TYPE")
        if backend_type:
            kwargs["backend_type"] = StoreBackendType(backend_type.lower())

        for name in ("connection_string", "bucket", "username", "password"):
            value = os.getenv(f"{prefix}{name.upper()}")
            if value:
                kwargs[name] = value

        timeout_seconds = os.getenv(f"{prefix}TIMEOUT_SECONDS")
        if timeout_seconds:
            kwargs["timeout_seconds"] = float(timeout_seconds)

        read_workers = os.getenv(f"{prefix}READ_WORKERS")
        if read_workers:
            kwargs["read_workers"] = int(read_workers)

        harden = os.getenv(f"{prefix}HARDEN_PROVISIONING")
        if harden:
            kwargs["harden_provisioning"] = harden.strip().lower() in _TRUE_VALUES

        return cls(**kwargs)
