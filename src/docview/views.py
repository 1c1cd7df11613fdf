"""View provisioning and the per-accessor view catalog cache.

ViewProvisioner implements resolve-or-create against the store's design
document catalog:

1. The design document is named after the entity (uppercased).
2. It is fetched from the catalog, or synthesized empty if absent.
3. A view whose name equals the finder name is returned verbatim if present.
   Otherwise a view is rendered from the finder spec, appended, and the whole
   design document is upserted.

The sequence is not transactional. Two processes resolving different new
finders of the same entity at the same time can both read the old design
document, and the later upsert drops the other's view. Resolution is meant to
run once at warm-up. LockingViewProvisioner serializes resolve-or-create per
design document inside one process. Its lock registry keeps one lock per design
document name for the life of the process and is never pruned; entity types
are a bounded set, so it stays small.

An existing remote view is trusted even if its map source differs from the
local FinderSpec; the difference is only logged.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Mapping, Optional

from .errors import remote_call
from .finders import FinderSpec
from .store.models import DesignDocument, ViewDefinition
from .store.protocol import DesignDocumentCatalog

logger = logging.getLogger(__name__)


class ViewProvisioner:
    """Ensures a server-side view exists for a finder, creating it if absent."""

    def __init__(self, catalog: DesignDocumentCatalog, design_document: str):
        self.catalog = catalog
        self.design_document = design_document

    def resolve(self, finder_name: str, spec: FinderSpec) -> ViewDefinition:
        """Return the view backing a finder, creating it remotely if needed.

        Raises:
            RemoteUnavailableError: If the catalog read or upsert fails.
        """
        with remote_call(f"get_design_document({self.design_document})"):
            doc = self.catalog.get_design_document(self.design_document)
        if doc is None:
            logger.info(f"Design document {self.design_document} does not exist, creating it.")
            doc = DesignDocument(name=self.design_document)

        logger.debug(f"Views from server: {[view.name for view in doc.views]}")

        existing = doc.find_view(finder_name)
        if existing is not None:
            expected_map = spec.render_map_function()
            if existing.map != expected_map:
                logger.warning(
                    f"View {self.design_document}/{finder_name} on the server differs from "
                    "the local finder definition; using the server definition"
                )
            logger.info(f"View {finder_name} returned from server")
            return existing

        logger.info(f"View {finder_name} not present in {self.design_document}, creating.")
        view = ViewDefinition(name=finder_name, map=spec.render_map_function())
        doc.add_view(view)
        with remote_call(f"upsert_design_document({self.design_document})"):
            self.catalog.upsert_design_document(doc)
        return view


# Shared across provisioners so that accessors of the same entity in one
# process serialize on the same design document.
_design_document_locks: Dict[str, threading.Lock] = {}
_registry_lock = threading.Lock()


def design_document_lock(name: str) -> threading.Lock:
    """Return the process-wide lock guarding one design document."""
    with _registry_lock:
        lock = _design_document_locks.get(name)
        if lock is None:
            lock = threading.Lock()
            _design_document_locks[name] = lock
        return lock


class LockingViewProvisioner(ViewProvisioner):
    """ViewProvisioner that serializes resolve-or-create per design document.

    Only protects callers within the current process.
    """

    def resolve(self, finder_name: str, spec: FinderSpec) -> ViewDefinition:
        with design_document_lock(self.design_document):
            return super().resolve(finder_name, spec)


class ViewCatalogCache:
    """Finder name -> resolved view, owned by one accessor.

    Not thread-safe: rebuild() must complete before concurrent finder
    dispatch starts. rebuild() is the only way entries change.
    """

    def __init__(self, provisioner: ViewProvisioner):
        self.provisioner = provisioner
        self._views: Dict[str, ViewDefinition] = {}

    def rebuild(self, finders: Mapping[str, FinderSpec]) -> None:
        """Clear the cache and resolve every declared finder.

        If resolving any finder fails, the cache is left empty and the error
        propagates.
        """
        self._views = {}
        logger.info(
            f"Scanning {len(finders)} finder(s) for design document "
            f"{self.provisioner.design_document} ..."
        )
        resolved: Dict[str, ViewDefinition] = {}
        for name, spec in finders.items():
            view = self.provisioner.resolve(name, spec)
            logger.debug(f"Caching view: {view}")
            resolved[name] = view
        self._views = resolved

    def get(self, name: str) -> Optional[ViewDefinition]:
        return self._views.get(name)

    def names(self) -> List[str]:
        return list(self._views)

    def __contains__(self, name: object) -> bool:
        return name in self._views

    def __len__(self) -> int:
        return len(self._views)
