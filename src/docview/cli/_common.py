"""Shared CLI utilities: logging setup and store lifecycle."""

import logging
from contextlib import contextmanager
from typing import Iterator

from pydantic import ValidationError
from rich.logging import RichHandler

from docview.config import StoreConfig
from docview.errors import DocviewError, remote_call
from docview.startup import ensure_initialized as _ensure_initialized
from docview.store import DocumentStoreClient, DocumentStoreFactory
from docview.cli._console import print_err

logger = logging.getLogger(__name__)


def ensure_initialized() -> None:
    """Load .env from the project root."""
    _ensure_initialized()


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging with Rich handler."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = RichHandler(
        console=None,  # Use default stderr
        show_time=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # Suppress noisy driver loggers
    logging.getLogger("couchbase").setLevel(logging.WARNING)


def load_config() -> StoreConfig:
    """Build StoreConfig from the environment, exiting on invalid values."""
    try:
        config = StoreConfig.from_env()
        config.validate_for_backend()
    except (ValidationError, ValueError) as e:
        print_err(f"Invalid configuration: {e}")
        raise SystemExit(1)
    return config


def create_store(config: StoreConfig) -> DocumentStoreClient:
    return DocumentStoreFactory.create_store(config)


@contextmanager
def open_store(ctx) -> Iterator[DocumentStoreClient]:
    """Open the configured store for one command and always close it.

    Any failure of the store inside the block, whether a DocviewError or a raw
    driver exception (wrapped as RemoteUnavailableError), is reported and turned
    into exit 1.
    """
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])
    config = load_config()

    try:
        with remote_call("connect"):
            store = create_store(config)
    except DocviewError as e:
        print_err(f"Cannot open store: {e}")
        raise SystemExit(1)

    try:
        with remote_call(ctx.command_path):
            yield store
    except DocviewError as e:
        print_err(str(e))
        raise SystemExit(1)
    finally:
        try:
            with remote_call("close"):
                store.close()
        except DocviewError as e:
            logger.warning(f"Closing the store failed: {e}")
