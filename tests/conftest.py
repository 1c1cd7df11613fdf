"""
Pytest fixtures and configuration for docview tests.
Provides sample entities, an in-memory store and accessors bound to it.
"""

from dataclasses import dataclass
from typing import Optional

import pytest
from pydantic import BaseModel

from docview import FinderSpec, GenericAccessor, InMemoryDocumentStore
from docview.naming import KEY_SEPARATOR


class User(BaseModel):
    """Sample entity used across tests."""

    name: str
    status: str = "ACTIVE"
    city: Optional[str] = None
    age: int = 0


@dataclass
class Order:
    """Second entity type, for key namespacing tests."""

    sku: str
    quantity: int = 1


USER_FINDERS = {
    "findByStatus": FinderSpec(
        predicate='doc.status == "ACTIVE"',
        emit="emit(meta.id, null)",
    ),
    "findByCity": FinderSpec(
        predicate="doc.city",
        emit="emit(doc.city, null)",
    ),
}


def user_view_evaluator(design_document, view, doc, meta):
    """Python stand-in for the USER finder map functions."""
    if not isinstance(doc, dict):
        return []
    if not meta["id"].startswith(f"{design_document}{KEY_SEPARATOR}"):
        return []
    if view.name == "findByStatus":
        return [meta["id"]] if doc.get("status") == "ACTIVE" else []
    if view.name == "findByCity":
        return [doc["city"]] if doc.get("city") else []
    return [meta["id"]]


@pytest.fixture
def user_model():
    return User


@pytest.fixture
def order_model():
    return Order


@pytest.fixture
def user_finders():
    return dict(USER_FINDERS)


@pytest.fixture
def store():
    """In-memory store that evaluates the USER finders."""
    return InMemoryDocumentStore(evaluator=user_view_evaluator)


@pytest.fixture
def accessor(store):
    """User accessor with finders registered but views not yet scanned."""
    acc = GenericAccessor(User, store, USER_FINDERS)
    yield acc
    acc.close()


@pytest.fixture
def scanned_accessor(accessor):
    """User accessor whose view cache has been built."""
    accessor.rebuild_views()
    return accessor


@pytest.fixture
def ada():
    return User(name="Ada", status="ACTIVE", city="London", age=36)


@pytest.fixture
def grace():
    return User(name="Grace", status="INACTIVE", city="Arlington", age=85)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove DOCVIEW_* variables so config defaults apply."""
    import os

    for name in list(os.environ):
        if name.startswith("DOCVIEW_"):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch
