"""Naming rules shared by the accessor and the view provisioner.

Entity names are uppercased for both the document key namespace and the
design document name, so every entity type gets exactly one design document
and its own key prefix.
"""

from typing import Any, Optional

KEY_SEPARATOR = ":"


def entity_name_of(entity_type: Any, override: Optional[str] = None) -> str:
    """Return the stable name of an entity type."""
    if override:
        return override
    name = getattr(entity_type, "__name__", None)
    if not name:
        raise ValueError(f"Cannot derive an entity name from {entity_type!r}")
    return name


def design_document_name(entity_name: str) -> str:
    return entity_name.upper()


def make_key(entity_name: str, doc_id: str) -> str:
    """Build the document key ``<ENTITY_NAME_UPPERCASE>:<id>``.

    Raises:
        ValueError: If doc_id is empty.
    """
    if not doc_id:
        raise ValueError("Document id must be a non-empty string")
    return f"{entity_name.upper()}{KEY_SEPARATOR}{doc_id}"


def key_namespace(entity_name: str) -> str:
    """Prefix shared by every key of one entity type."""
    return f"{entity_name.upper()}{KEY_SEPARATOR}"
